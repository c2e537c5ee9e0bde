from dailypaper.client.views.base import View
from dailypaper.client.views.customer_info import CustomerInfoView
from dailypaper.client.views.dashboard import DashboardView
from dailypaper.client.views.home import HomeView
from dailypaper.client.views.news_updates import NewsUpdatesView
from dailypaper.client.views.sign_in import SignInView
from dailypaper.client.views.sign_up import SignUpView

__all__ = [
    "View",
    "CustomerInfoView",
    "DashboardView",
    "HomeView",
    "NewsUpdatesView",
    "SignInView",
    "SignUpView",
]
