"""
Coupon models

A ``Coupon`` row is a template published by a merchant; each grant of that
template to one consumer is a ``CouponIssue`` with its own lifecycle.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, String
from sqlmodel import Field, SQLModel

from airctt.enums import (
    CouponIssueStatus,
    CouponTemplateStatus,
    DiscountType,
    IssuedReason,
)

from .base import timestamp_field


class Coupon(SQLModel, table=True):
    """
    Coupon template

    Fields:
    - id: primary key
    - merchant_id / store_id: publisher (both optional for platform coupons)
    - title / description: display text
    - discount_type / discount_value: what the coupon is worth
    - stock_initial / stock_remaining: issuance stock, None means unlimited
    - status: only "active" templates are picked for game rewards
    - valid_until: after this time issued coupons expire
    - created_at: creation time
    """
    __tablename__ = "coupons"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    merchant_id: uuid.UUID | None = Field(default=None, foreign_key="merchants.id", index=True)
    store_id: uuid.UUID | None = Field(default=None, foreign_key="stores.id")
    title: str = Field(max_length=128)
    description: str | None = Field(default=None, max_length=512)
    discount_type: DiscountType = Field(sa_column=Column(String(16), nullable=False))
    discount_value: int = Field(default=0)
    stock_initial: int | None = Field(default=None)
    stock_remaining: int | None = Field(default=None)
    status: CouponTemplateStatus = Field(
        default=CouponTemplateStatus.active,
        sa_column=Column(String(16), nullable=False, index=True),
    )
    valid_until: datetime | None = timestamp_field(nullable=True)
    created_at: datetime = timestamp_field()


class CouponIssue(SQLModel, table=True):
    """
    One coupon granted to one consumer

    Status moves ISSUED -> USED on redemption or ISSUED -> EXPIRED when the
    template's validity passes; both targets are terminal. Rows are never
    deleted.

    Fields:
    - id: primary key
    - coupon_id: template (foreign key)
    - consumer_id: owner
    - code: short redemption code shown to the merchant (unique)
    - status / issued_reason: see the enums
    - issued_at: grant time
    - used_at / used_store_id: set once, on redemption
    """
    __tablename__ = "coupon_issues"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    coupon_id: uuid.UUID = Field(foreign_key="coupons.id", index=True, nullable=False)
    consumer_id: uuid.UUID = Field(index=True, nullable=False)
    code: str = Field(sa_column=Column(String(32), unique=True, index=True, nullable=False))
    status: CouponIssueStatus = Field(
        default=CouponIssueStatus.ISSUED,
        sa_column=Column(String(16), nullable=False),
    )
    issued_reason: IssuedReason = Field(
        default=IssuedReason.MANUAL,
        sa_column=Column(String(16), nullable=False),
    )
    issued_at: datetime = timestamp_field()
    used_at: datetime | None = timestamp_field(nullable=True)
    used_store_id: uuid.UUID | None = Field(default=None, foreign_key="stores.id")
