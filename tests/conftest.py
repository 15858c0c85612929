from __future__ import annotations

import uuid
from collections.abc import Callable, Generator
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, delete

from airctt.api.deps import get_db
from airctt.core.security import create_access_token
from airctt.enums import DiscountType
from airctt.main import app
from airctt.models import (
    Coupon,
    CouponIssue,
    GameReward,
    GameSession,
    Merchant,
    Store,
    Wallet,
    WalletTransaction,
    utc_now,
)


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def db(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
        session.rollback()
        # Clean tables after each test (children first).
        session.exec(delete(GameReward))
        session.exec(delete(WalletTransaction))
        session.exec(delete(CouponIssue))
        session.exec(delete(GameSession))
        session.exec(delete(Wallet))
        session.exec(delete(Coupon))
        session.exec(delete(Store))
        session.exec(delete(Merchant))
        session.commit()


@pytest.fixture(scope="function")
def client(engine) -> Generator[TestClient, None, None]:
    def _override_get_db() -> Generator[Session, None, None]:
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def store(db) -> Store:
    merchant = Merchant(owner_user_id=uuid.uuid4(), name="Test Cafe")
    db.add(merchant)
    db.commit()
    store = Store(merchant_id=merchant.id, name="Test Cafe Gangnam")
    db.add(store)
    db.commit()
    db.refresh(store)
    return store


@pytest.fixture()
def make_template(db, store) -> Callable[..., Coupon]:
    def _make(**overrides) -> Coupon:
        fields = {
            "merchant_id": store.merchant_id,
            "store_id": store.id,
            "title": "90% off",
            "description": "Test coupon",
            "discount_type": DiscountType.PERCENT,
            "discount_value": 90,
            "stock_initial": 100,
            "stock_remaining": 100,
            "valid_until": utc_now() + timedelta(days=30),
        }
        fields.update(overrides)
        coupon = Coupon(**fields)
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon

    return _make


@pytest.fixture()
def lapse_template(db) -> Callable[[Coupon], Coupon]:
    """Move a template's valid_until into the past after coupons were issued"""

    def _lapse(coupon: Coupon) -> Coupon:
        coupon.valid_until = utc_now() - timedelta(hours=1)
        db.add(coupon)
        db.commit()
        db.refresh(coupon)
        return coupon

    return _lapse


@pytest.fixture()
def auth_headers() -> Callable[[uuid.UUID], dict[str, str]]:
    def _headers(consumer_id: uuid.UUID) -> dict[str, str]:
        token = create_access_token(str(consumer_id), timedelta(minutes=5))
        return {"Authorization": f"Bearer {token}"}

    return _headers
