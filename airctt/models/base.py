"""
Shared model helpers

Base utilities used by every table module.
"""
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Column, DateTime
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """
    Current UTC time

    Returns:
        A timezone-aware datetime in UTC
    """
    return datetime.now(timezone.utc)


def timestamp_field(*, nullable: bool = False) -> Any:
    """
    Timezone-aware timestamp column

    Non-null columns default to the current UTC time; nullable ones default to
    None and are filled in by a later transition.
    """
    if nullable:
        return Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    return Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )


__all__ = ["SQLModel", "timestamp_field", "utc_now"]
