"""
HTTP routes for the Daily Paper API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from dailypaper.auth import AuthGateway, AuthGatewayError
from dailypaper.catalog import SINGLE_PAPER_PLANS, get_plan
from dailypaper.dependencies import (
    get_auth_gateway,
    get_current_account,
    get_kv_store,
    get_news_aggregator,
)
from dailypaper.kv_store import KvStore
from dailypaper.news import NewsAggregator
from dailypaper.records import (
    CUSTOMER_INFO_KIND,
    SUBSCRIPTION_KIND,
    Account,
    CustomerInfo,
    Subscription,
    record_key,
    utc_now_iso,
)
from dailypaper.schemas import (
    CustomerInfoPayload,
    CustomerInfoResponse,
    HealthResponse,
    NewsResponse,
    SaveCustomerInfoResponse,
    SignupPayload,
    SignupResponse,
    SubscriptionPayload,
    SubscriptionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/signup", response_model=SignupResponse)
def signup(
    payload: SignupPayload,
    auth: AuthGateway = Depends(get_auth_gateway),
):
    if not payload.email or not payload.password or not payload.name:
        raise HTTPException(
            status_code=400, detail="Email, password, and name are required"
        )
    try:
        account = auth.create_account(payload.email, payload.password, payload.name)
    except AuthGatewayError as exc:
        logger.info("Sign up rejected for %s: %s", payload.email, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    return SignupResponse(user=account.as_dict())


@router.get("/customer-info", response_model=CustomerInfoResponse)
def get_customer_info(
    account: Account = Depends(get_current_account),
    store: KvStore = Depends(get_kv_store),
):
    stored = store.get(record_key(CUSTOMER_INFO_KIND, account.id))
    if not stored:
        raise HTTPException(status_code=404, detail="Customer info not found")
    return stored


@router.post("/customer-info", response_model=SaveCustomerInfoResponse)
def save_customer_info(
    payload: CustomerInfoPayload,
    account: Account = Depends(get_current_account),
    store: KvStore = Depends(get_kv_store),
):
    if not all(
        (
            payload.fullName,
            payload.telephone,
            payload.address,
            payload.plotNumber,
            payload.streetNumber,
        )
    ):
        raise HTTPException(status_code=400, detail="All fields are required")

    info = CustomerInfo(
        full_name=payload.fullName,
        telephone=payload.telephone,
        address=payload.address,
        plot_number=payload.plotNumber,
        street_number=payload.streetNumber,
        user_id=account.id,
        updated_at=utc_now_iso(),
    )
    data = info.as_dict()
    store.set(record_key(CUSTOMER_INFO_KIND, account.id), data)
    return {"success": True, "data": data}


@router.get("/subscription", response_model=SubscriptionResponse)
def get_subscription(
    account: Account = Depends(get_current_account),
    store: KvStore = Depends(get_kv_store),
):
    stored = store.get(record_key(SUBSCRIPTION_KIND, account.id))
    if not stored:
        raise HTTPException(status_code=404, detail="No subscription found")
    return stored


@router.post("/subscription", response_model=SubscriptionResponse)
def save_subscription(
    payload: SubscriptionPayload,
    account: Account = Depends(get_current_account),
    store: KvStore = Depends(get_kv_store),
):
    """
    Create or replace the caller's subscription.

    Single-paper plans (daily) must name the newspaper to deliver.
    """
    if not payload.plan:
        raise HTTPException(status_code=400, detail="Plan is required")

    plan = get_plan(payload.plan)
    if plan is None:
        raise HTTPException(status_code=400, detail="Invalid plan")

    if plan.id in SINGLE_PAPER_PLANS and not payload.newspaper:
        raise HTTPException(
            status_code=400, detail="Newspaper selection required for daily plan"
        )

    subscription = Subscription(
        user_id=account.id,
        plan=plan.id,
        plan_name=plan.name,
        plan_price=plan.display_price,
        newspaper=payload.newspaper if plan.id in SINGLE_PAPER_PLANS else None,
        start_date=utc_now_iso(),
        active=True,
    )
    data = subscription.as_dict()
    store.set(record_key(SUBSCRIPTION_KIND, account.id), data)
    logger.info("Account %s subscribed to %s", account.id, plan.id)
    return data


@router.get("/news", response_model=NewsResponse)
def get_news(
    source: str = Query("all"),
    account: Account = Depends(get_current_account),
    aggregator: NewsAggregator = Depends(get_news_aggregator),
):
    articles = aggregator.fetch_news(source or "all")
    return {"articles": [article.as_dict() for article in articles]}


@router.get("/health", response_model=HealthResponse)
def health():
    return HealthResponse(status="ok", timestamp=utc_now_iso())
