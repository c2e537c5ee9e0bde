"""
Console driver for the client views.

Restores (or creates) a session and prints the dashboard, or follows the
news feed with auto-refresh until interrupted.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging

from dailypaper.client.app import App
from dailypaper.client.pages import Page
from dailypaper.client.views import DashboardView, NewsUpdatesView, SignInView

logger = logging.getLogger(__name__)


def _print_dashboard(view: DashboardView) -> None:
    account = view.account
    print(f"Signed in as {account.name or account.email}")
    info = view.customer_info
    if info:
        print(
            f"Delivery: {info.full_name}, {info.telephone}, {info.address}, "
            f"plot {info.plot_number}, street {info.street_number}"
        )
    else:
        print("No delivery details yet.")
    sub = view.subscription
    if sub:
        paper = f" ({sub.newspaper})" if sub.newspaper else ""
        print(f"Plan: {sub.plan_name} {sub.plan_price}{paper}")
    else:
        print("No active subscription.")


def _print_news(view: NewsUpdatesView) -> None:
    print(f"-- {view.selected_source} @ {view.last_update:%H:%M:%S} --")
    for article in view.articles:
        print(f"[{view.time_ago(article)}] {article.source}: {article.title}")


async def run(args: argparse.Namespace) -> int:
    app = App.from_settings()
    try:
        view = await app.start()
        if not app.session.is_authenticated:
            view = await app.navigate(Page.SIGN_IN)
            assert isinstance(view, SignInView)
            email = input("Email: ")
            password = getpass.getpass("Password: ")
            if not await view.submit(email, password):
                print(view.error)
                return 1
            view = app.view

        if not args.news:
            _print_dashboard(app.view)
            return 0

        view = await app.navigate(Page.UPDATES)
        await view.select_source(args.source)
        while True:
            _print_news(view)
            await asyncio.sleep(app.settings.news_refresh_seconds)
    finally:
        await app.close()


def main() -> int:
    parser = argparse.ArgumentParser(description="Daily Paper client")
    parser.add_argument("--news", action="store_true", help="Follow the news feed")
    parser.add_argument(
        "--source",
        type=str,
        default="all",
        help="News source filter (all, new-vision, monitor, nation, social)",
    )
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.WARNING,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
    )
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
