"""
Game models

A game session records one play; a successful session yields exactly one
reward, which is paid out at most once.
"""
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from .base import timestamp_field


class GameSession(SQLModel, table=True):
    """
    One play of a reward-eligible game

    Created on start and updated exactly once, on finish.

    Fields:
    - id: primary key
    - consumer_id: player
    - game_type: game identifier sent by the client
    - started_at / finished_at: play window (finished_at None while playing)
    - steps_cleared / success: final result
    - client_info: opaque client metadata
    """
    __tablename__ = "game_sessions"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    consumer_id: uuid.UUID = Field(index=True, nullable=False)
    game_type: str = Field(max_length=64)
    started_at: datetime = timestamp_field()
    finished_at: datetime | None = timestamp_field(nullable=True)
    steps_cleared: int | None = Field(default=None)
    success: bool | None = Field(default=None)
    client_info: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )


class GameReward(SQLModel, table=True):
    """
    Payout owed for a successful game session

    UNCLAIMED while both ``created_*`` ids are None, CLAIMED once exactly one
    is set. The claim marker is written with a conditional update, so a reward
    can never be paid twice.

    Fields:
    - id: primary key
    - game_session_id: session that earned the reward (unique)
    - reward_type: COUPON_* pays a coupon, anything else pays points
    - reward_value: discount rate or point amount
    - created_coupon_issue_id / created_wallet_tx_id: payout produced by the claim
    - created_at / claimed_at: creation and claim times
    """
    __tablename__ = "game_rewards"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    game_session_id: uuid.UUID = Field(
        foreign_key="game_sessions.id", unique=True, index=True, nullable=False
    )
    reward_type: str = Field(max_length=32)
    reward_value: int | None = Field(default=None)
    created_coupon_issue_id: uuid.UUID | None = Field(
        default=None, foreign_key="coupon_issues.id"
    )
    created_wallet_tx_id: uuid.UUID | None = Field(
        default=None, foreign_key="wallet_transactions.id"
    )
    created_at: datetime = timestamp_field()
    claimed_at: datetime | None = timestamp_field(nullable=True)

    @property
    def is_claimed(self) -> bool:
        return self.created_coupon_issue_id is not None or self.created_wallet_tx_id is not None
