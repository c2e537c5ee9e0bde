"""
Pydantic schemas for the Daily Paper API.

Field names follow the JSON wire format (camelCase) shared with the client.
Request fields are optional so the handlers can answer missing values with
the API's own 400 messages.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignupPayload(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class SignupResponse(BaseModel):
    user: dict


class CustomerInfoPayload(BaseModel):
    # Plot and street numbers often arrive as JSON numbers.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    fullName: Optional[str] = None
    telephone: Optional[str] = None
    address: Optional[str] = None
    plotNumber: Optional[str] = None
    streetNumber: Optional[str] = None


class CustomerInfoResponse(BaseModel):
    fullName: str
    telephone: str
    address: str
    plotNumber: str
    streetNumber: str
    userId: str
    updatedAt: str


class SaveCustomerInfoResponse(BaseModel):
    success: Literal[True]
    data: CustomerInfoResponse


class SubscriptionPayload(BaseModel):
    plan: Optional[str] = Field(default=None, max_length=32)
    newspaper: Optional[str] = None


class SubscriptionResponse(BaseModel):
    userId: str
    plan: Literal["daily", "monthly", "premium"]
    planName: str
    planPrice: str
    newspaper: Optional[str] = None
    startDate: str
    active: bool


class NewsArticleResponse(BaseModel):
    id: str
    title: str
    description: str
    source: str
    url: str
    publishedAt: str
    image: str


class NewsResponse(BaseModel):
    articles: list[NewsArticleResponse]


class HealthResponse(BaseModel):
    status: Literal["ok"]
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
