import asyncio
import unittest

from dailypaper.client.api import ApiError
from dailypaper.client.app import App
from dailypaper.client.auth import AuthError, AuthSession
from dailypaper.client.config import ClientSettings
from dailypaper.client.pages import Page
from dailypaper.client.views import (
    CustomerInfoView,
    DashboardView,
    HomeView,
    NewsUpdatesView,
    SignInView,
    SignUpView,
)
from dailypaper.news import generate_fallback_news
from dailypaper.records import Account, CustomerInfo, Subscription

READER = Account(id="u1", email="reader@example.com", name="Reader")


class FakeAuth:
    def __init__(self, stored=None):
        self.stored = stored
        self.passwords = {"reader@example.com": "secret1"}
        self.signed_out = []

    async def get_session(self):
        return self.stored

    async def sign_in_with_password(self, email, password):
        if self.passwords.get(email) != password:
            raise AuthError("Invalid login credentials")
        account = READER if email == READER.email else Account(id="u2", email=email)
        return AuthSession("token-" + account.id, "refresh", 9e12, account)

    def oauth_url(self, provider="google", redirect_to=None):
        return f"https://auth.test/authorize?provider={provider}"

    async def sign_out(self, access_token):
        self.signed_out.append(access_token)

    async def close(self):
        pass


class FakeApi:
    def __init__(self):
        self.customer_info = None
        self.subscription = None
        self.news_calls = []
        self.customer_info_error = None
        self.news_gate = None

    async def signup(self, email, password, name):
        if len(password) < 6:
            raise ApiError(400, "Password should be at least 6 characters.")
        return {"id": "u2", "email": email}

    async def get_customer_info(self, token):
        if self.customer_info_error:
            raise self.customer_info_error
        return self.customer_info

    async def save_customer_info(self, token, **fields):
        if not all(fields.values()):
            raise ApiError(400, "All fields are required")
        self.customer_info = CustomerInfo(user_id="u1", **fields)
        return self.customer_info

    async def get_subscription(self, token):
        return self.subscription

    async def subscribe(self, token, plan, newspaper=None):
        if plan == "daily" and not newspaper:
            raise ApiError(400, "Newspaper selection required for daily plan")
        self.subscription = Subscription(
            user_id="u1",
            plan=plan,
            plan_name=plan.title(),
            plan_price="$",
            newspaper=newspaper,
        )
        return self.subscription

    async def get_news(self, token, source="all"):
        self.news_calls.append(source)
        if self.news_gate is not None:
            await self.news_gate.wait()
        return generate_fallback_news(source)

    async def close(self):
        pass


def _settings(**overrides):
    values = dict(
        session_file=None,
        news_refresh_seconds=0.02,
        redirect_delay_seconds=0.02,
        oauth_redirect="http://localhost:3000",
    )
    values.update(overrides)
    return ClientSettings(**values)


class ClientAppTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.api = FakeApi()
        self.auth = FakeAuth()
        self.app = App(self.api, self.auth, settings=_settings())

    async def asyncTearDown(self):
        await self.app.close()

    async def _signed_in(self):
        await self.app.sign_in(READER, "token-u1")

    async def test_every_page_has_a_view(self):
        for page in Page:
            with self.subTest(page=page):
                self.assertEqual(self.app.build_view(page).page, page)

    async def test_start_without_session_shows_home(self):
        view = await self.app.start()
        self.assertIsInstance(view, HomeView)
        self.assertFalse(self.app.session.is_authenticated)
        self.assertEqual(len(view.plans), 3)

    async def test_start_restores_session_to_dashboard(self):
        self.auth.stored = AuthSession("stored-token", "r", 9e12, READER)
        view = await self.app.start()
        self.assertIsInstance(view, DashboardView)
        self.assertEqual(self.app.session.access_token, "stored-token")
        self.assertEqual(self.app.session.account, READER)

    async def test_protected_pages_redirect_to_sign_in(self):
        view = await self.app.navigate(Page.UPDATES)
        self.assertIsInstance(view, SignInView)
        self.assertEqual(self.api.news_calls, [])

    async def test_sign_in_success_and_failure(self):
        view = await self.app.navigate(Page.SIGN_IN)
        self.assertFalse(await view.submit("reader@example.com", "wrong"))
        self.assertEqual(view.error, "Invalid login credentials")
        self.assertEqual(self.app.page, Page.SIGN_IN)

        self.assertTrue(await view.submit("reader@example.com", "secret1"))
        self.assertEqual(self.app.page, Page.DASHBOARD)
        self.assertEqual(self.app.session.access_token, "token-u1")

    async def test_google_sign_in_returns_provider_url(self):
        view = await self.app.navigate(Page.SIGN_IN)
        self.assertIn("provider=google", view.sign_in_with_google())

    async def test_sign_up_registers_then_signs_in(self):
        view = await self.app.navigate(Page.SIGN_UP)
        self.assertIsInstance(view, SignUpView)
        self.assertFalse(await view.submit("New", "new@example.com", "123"))
        self.assertIn("at least 6", view.error)

        self.auth.passwords["new@example.com"] = "longer-pass"
        self.assertTrue(await view.submit("New", "new@example.com", "longer-pass"))
        self.assertEqual(self.app.page, Page.DASHBOARD)
        self.assertEqual(self.app.session.account.email, "new@example.com")

    async def test_customer_info_saves_then_returns_to_dashboard(self):
        await self._signed_in()
        view = await self.app.navigate(Page.CUSTOMER_INFO)
        self.assertIsInstance(view, CustomerInfoView)
        view.update(full_name="Reader", telephone="0700", address="Kampala")
        self.assertFalse(await view.submit())
        self.assertEqual(view.error, "All fields are required")

        view.update(plot_number="14", street_number="3")
        self.assertTrue(await view.submit())
        self.assertTrue(view.success)
        self.assertEqual(self.app.page, Page.CUSTOMER_INFO)

        await asyncio.sleep(0.1)
        self.assertEqual(self.app.page, Page.DASHBOARD)
        self.assertEqual(self.app.view.customer_info.full_name, "Reader")

    async def test_leaving_customer_info_cancels_redirect(self):
        await self._signed_in()
        view = await self.app.navigate(Page.CUSTOMER_INFO)
        view.update(
            full_name="R", telephone="1", address="A", plot_number="2", street_number="3"
        )
        await view.submit()
        await self.app.navigate(Page.HOME)
        await asyncio.sleep(0.1)
        self.assertEqual(self.app.page, Page.HOME)

    async def test_unknown_form_field(self):
        await self._signed_in()
        view = await self.app.navigate(Page.CUSTOMER_INFO)
        with self.assertRaises(AttributeError):
            view.update(postcode="256")

    async def test_dashboard_fetches_concurrently(self):
        started = asyncio.Event()
        api = self.api

        async def get_customer_info(token):
            await asyncio.wait_for(started.wait(), timeout=1)
            return None

        async def get_subscription(token):
            started.set()
            return Subscription("u1", "monthly", "Monthly", "$34", None)

        api.get_customer_info = get_customer_info
        api.get_subscription = get_subscription

        await self._signed_in()
        view = self.app.view
        self.assertIsNone(view.customer_info)
        self.assertEqual(view.subscription.plan, "monthly")
        self.assertFalse(view.loading)

    async def test_dashboard_tolerates_one_failed_fetch(self):
        self.api.customer_info_error = ApiError(500, "boom")
        self.api.subscription = Subscription("u1", "premium", "Premium", "$142", None)
        await self._signed_in()
        view = self.app.view
        self.assertIsNone(view.customer_info)
        self.assertEqual(view.subscription.plan, "premium")

    async def test_dashboard_subscribe_uses_server_response(self):
        await self._signed_in()
        view = self.app.view
        self.assertFalse(await view.subscribe())

        view.select_plan("daily")
        self.assertFalse(view.can_subscribe)
        self.assertFalse(await view.subscribe())
        self.assertIsNone(view.subscription)

        view.select_newspaper("New Vision")
        self.assertTrue(await view.subscribe())
        self.assertEqual(view.subscription.newspaper, "New Vision")
        self.assertEqual(view.selected_plan, "")

        view.select_plan("monthly")
        self.assertTrue(await view.subscribe())
        self.assertIsNone(view.subscription.newspaper)

        with self.assertRaises(ValueError):
            view.select_plan("weekly")

    async def test_sign_out_clears_session(self):
        await self._signed_in()
        view = await self.app.view.sign_out()
        self.assertIsInstance(view, HomeView)
        self.assertFalse(self.app.session.is_authenticated)
        self.assertEqual(self.auth.signed_out, ["token-u1"])


class NewsUpdatesViewTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.api = FakeApi()
        self.app = App(self.api, FakeAuth(), settings=_settings())
        await self.app.sign_in(READER, "token-u1")

    async def asyncTearDown(self):
        await self.app.close()

    async def test_mount_fetches_and_filters(self):
        view = await self.app.navigate(Page.UPDATES)
        self.assertIsInstance(view, NewsUpdatesView)
        self.assertEqual(len(view.articles), 6)
        self.assertEqual(view.time_ago(view.articles[0]), "15m ago")

        await view.select_source("monitor")
        self.assertEqual({a.source for a in view.articles}, {"Daily Monitor"})
        self.assertEqual(self.api.news_calls[:2], ["all", "monitor"])

    async def test_auto_refresh_runs_until_disabled(self):
        view = await self.app.navigate(Page.UPDATES)
        self.assertTrue(view.refreshing)
        await asyncio.sleep(0.1)
        self.assertGreater(len(self.api.news_calls), 1)

        await view.set_auto_refresh(False)
        self.assertFalse(view.refreshing)
        calls = len(self.api.news_calls)
        await asyncio.sleep(0.1)
        self.assertEqual(len(self.api.news_calls), calls)

        await view.set_auto_refresh(True)
        self.assertTrue(view.refreshing)

    async def test_leaving_page_cancels_refresh(self):
        view = await self.app.navigate(Page.UPDATES)
        await self.app.navigate(Page.DASHBOARD)
        self.assertFalse(view.refreshing)
        calls = len(self.api.news_calls)
        await asyncio.sleep(0.1)
        self.assertEqual(len(self.api.news_calls), calls)

    async def test_slow_fetch_does_not_pile_up(self):
        view = await self.app.navigate(Page.UPDATES)
        self.api.news_gate = asyncio.Event()
        await asyncio.sleep(0.15)
        # One tick is stuck waiting; later ticks are dropped.
        self.assertEqual(len(self.api.news_calls), 2)
        self.assertTrue(view.loading)
        self.api.news_gate.set()
        await self.app.navigate(Page.DASHBOARD)


if __name__ == "__main__":
    unittest.main()
