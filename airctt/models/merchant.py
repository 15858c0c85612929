"""
Merchant models

Merchants own stores, and stores are where coupons get redeemed.
"""
import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from .base import timestamp_field


class Merchant(SQLModel, table=True):
    """
    Merchant (brand) account

    Fields:
    - id: primary key
    - owner_user_id: identity-provider user that manages the merchant
    - name: brand name shown on coupons
    - category / region: free-form classification (e.g. CAFE, SEOUL)
    - status: "active" or "inactive"
    - created_at: creation time
    """
    __tablename__ = "merchants"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    owner_user_id: uuid.UUID = Field(index=True, nullable=False)
    name: str = Field(max_length=128)
    category: str | None = Field(default=None, max_length=32)
    region: str | None = Field(default=None, max_length=32)
    status: str = Field(default="active", max_length=16)
    created_at: datetime = timestamp_field()


class Store(SQLModel, table=True):
    """
    Physical store (branch) of a merchant

    Fields:
    - id: primary key
    - merchant_id: owning merchant (foreign key)
    - name / address: display fields
    - status: "active" or "inactive"
    - location: text representation of the coordinates, e.g. "POINT(127.02 37.49)"
    - created_at: creation time
    """
    __tablename__ = "stores"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    merchant_id: uuid.UUID = Field(foreign_key="merchants.id", index=True, nullable=False)
    name: str = Field(max_length=128)
    address: str | None = Field(default=None, max_length=256)
    status: str = Field(default="active", max_length=16)
    location: str | None = Field(default=None, max_length=128)
    created_at: datetime = timestamp_field()
