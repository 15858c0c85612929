"""
Wallet models

Each consumer has one wallet holding a cached point total, backed by an
append-only transaction log.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, String
from sqlmodel import Field, SQLModel

from .base import timestamp_field


class Wallet(SQLModel, table=True):
    """
    Consumer point wallet

    ``total_points`` always equals the signed sum of the wallet's transactions:
    both are written in the same database transaction, and the total is moved
    with an in-database increment rather than a read-modify-write.

    Fields:
    - id: primary key
    - consumer_id: owner (unique, one wallet per consumer)
    - total_points: cached balance
    - updated_at: last balance change
    """
    __tablename__ = "wallets"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    consumer_id: uuid.UUID = Field(unique=True, index=True, nullable=False)
    total_points: int = Field(default=0)
    updated_at: datetime = timestamp_field()


class WalletTransaction(SQLModel, table=True):
    """
    Immutable wallet ledger entry

    A positive amount is shown to consumers as "earned", a negative one as
    "used".

    Fields:
    - id: primary key
    - wallet_id: wallet (foreign key)
    - tx_type: free-form tag such as GAME_REWARD or MANUAL
    - amount_points: signed amount
    - related_game_session_id: game session that paid this entry, if any
    - created_at: entry time
    """
    __tablename__ = "wallet_transactions"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    wallet_id: uuid.UUID = Field(foreign_key="wallets.id", index=True, nullable=False)
    tx_type: str = Field(sa_column=Column(String(32), nullable=False))
    amount_points: int = Field(nullable=False)
    related_game_session_id: uuid.UUID | None = Field(
        default=None, foreign_key="game_sessions.id"
    )
    created_at: datetime = timestamp_field()
