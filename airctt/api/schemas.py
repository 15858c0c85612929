"""
API request/response schemas

Request and response shapes of every endpoint, validated with Pydantic.

Key concepts:
- Request fields that the ledgers check themselves are optional here, so a
  missing field surfaces as the ledger's ``InvalidInput`` rather than a
  generic validation error
- Malformed values (a bad UUID, a non-integer amount) still fail request
  validation and are rendered as 400
- These models are not tables; they only describe wire data
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from airctt.enums import IssuedReason

T = TypeVar("T")

# ============================================================
# Shared
# ============================================================


class ErrorBody(BaseModel):
    error: str
    code: int


class StatusOk(BaseModel):
    status: str = "ok"


class NextEnvelope(BaseModel, Generic[T]):
    """
    Envelope of the next_api family

    Example:
        {"success": true, "data": {"status": "ok"}}
    """
    success: bool = True
    data: T | None = None


# ============================================================
# Coupons
# ============================================================


class CouponIssueRequest(BaseModel):
    consumer_id: uuid.UUID | None = None
    coupon_id: uuid.UUID | None = None
    reason: IssuedReason | None = None


class CouponIssueData(BaseModel):
    coupon_issue_id: uuid.UUID
    status: str
    code: str


class CouponUseRequest(BaseModel):
    coupon_issue_id: uuid.UUID | None = None
    store_id: uuid.UUID | None = None


class CouponUseData(BaseModel):
    id: uuid.UUID
    status: str
    used_at: datetime | None = None
    used_store_id: uuid.UUID | None = None


class CouponCheckRequest(BaseModel):
    """Issue id or redemption code typed in by the merchant"""
    code_or_id: str | None = None


class CouponCheckData(BaseModel):
    """
    Issued coupon as shown to a merchant

    Joins the issue with the display fields of its template.
    """
    id: uuid.UUID
    code: str
    status: str
    title: str
    description: str | None = None
    discount_type: str
    discount_value: int
    valid_until: datetime | None = None


# ============================================================
# Game & rewards
# ============================================================


class GameStartRequest(BaseModel):
    consumer_id: uuid.UUID | None = None
    game_type: str | None = None


class GameStartData(BaseModel):
    session_id: uuid.UUID
    started_at: datetime


class GameFinishRequest(BaseModel):
    session_id: uuid.UUID | None = None
    steps_cleared: int | None = None
    success: bool | None = None
    client_info: dict[str, Any] | None = None


class GameRewardData(BaseModel):
    reward_id: uuid.UUID
    reward_type: str
    reward_value: int | None = None


class GameNoRewardData(BaseModel):
    message: str = "Game finished, no reward generated."
    success: bool = False


class RewardClaimRequest(BaseModel):
    reward_id: uuid.UUID | None = None


class RewardClaimData(StatusOk):
    """
    Claim result

    Exactly one of the two ids is present, depending on how the reward was
    paid out.
    """
    coupon_issue_id: uuid.UUID | None = None
    wallet_tx_id: uuid.UUID | None = None


# ============================================================
# Wallet
# ============================================================


class WalletTransactionRequest(BaseModel):
    consumer_id: uuid.UUID | None = None
    type: str | None = None
    amount_points: int | None = None


class WalletTransactionData(StatusOk):
    wallet_tx_id: uuid.UUID
    new_balance: int


class WalletBalanceData(BaseModel):
    balance: int


class MyCouponItem(BaseModel):
    """
    Coupon card in the consumer wallet

    ``status`` is "available" for ISSUED coupons and the lowercase status
    otherwise; ``discountRate`` is the template's discount value.
    """
    id: uuid.UUID
    title: str
    description: str | None = None
    brand: str
    status: str
    expiresAt: datetime | None = None
    discountRate: int


class MyHistoryItem(BaseModel):
    """
    Wallet ledger entry as shown to the consumer

    ``type`` is "earned" for non-negative amounts and "used" otherwise;
    ``description`` carries the raw ``tx_type`` tag.
    """
    id: uuid.UUID
    userId: uuid.UUID
    amount: int
    type: str
    description: str
    createdAt: datetime


# ============================================================
# Setup & summary
# ============================================================


class DemoSetupData(BaseModel):
    success: bool = True
    message: str
    merchant_id: uuid.UUID
    store_id: uuid.UUID


class ConsumerSummaryData(BaseModel):
    couponCount: int
    pointsSum: int
    benefitsCount: int


class HealthData(BaseModel):
    status: str = "ok"
