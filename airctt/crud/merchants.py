"""Merchant and store CRUD operations, including the demo data seed"""
import logging
import uuid
from datetime import timedelta

from sqlmodel import Session, func, select

from airctt.enums import DiscountType
from airctt.models import Coupon, Merchant, Store, utc_now

logger = logging.getLogger(__name__)

DEMO_MERCHANT_NAME = "AIRCTT Demo Store"
DEMO_STORE_NAME = "Gangnam No.1 (demo)"

# (title, description, discount type, value, stock, valid days)
DEMO_COUPONS = [
    ("Legendary Diamond Discount", "90% off the whole menu (demo)", DiscountType.PERCENT, 90, 1000, 30),
    ("One Free Americano", "Thank-you coupon for new members", DiscountType.FREE_ITEM, 0, 500, 7),
    ("5,000 Won Voucher", "Valid on any purchase", DiscountType.FIXED_AMOUNT, 5000, 500, 90),
]


def get_or_create_merchant(*, session: Session, owner_user_id: uuid.UUID) -> Merchant:
    merchant = session.exec(
        select(Merchant).where(Merchant.owner_user_id == owner_user_id)
    ).first()
    if merchant:
        return merchant
    merchant = Merchant(
        owner_user_id=owner_user_id,
        name=DEMO_MERCHANT_NAME,
        category="CAFE",
        region="SEOUL",
    )
    session.add(merchant)
    session.commit()
    session.refresh(merchant)
    return merchant


def get_or_create_store(*, session: Session, merchant_id: uuid.UUID) -> Store:
    store = session.exec(select(Store).where(Store.merchant_id == merchant_id)).first()
    if store:
        return store
    store = Store(
        merchant_id=merchant_id,
        name=DEMO_STORE_NAME,
        address="123 Teheran-ro, Gangnam-gu, Seoul",
        location="POINT(127.0276 37.4979)",
    )
    session.add(store)
    session.commit()
    session.refresh(store)
    return store


def setup_demo_data(*, session: Session, owner_user_id: uuid.UUID) -> tuple[Merchant, Store]:
    """
    Seed a demo merchant, store and coupon templates for a user

    Safe to call repeatedly: the merchant and store are reused, and the three
    demo templates are only added while the merchant has fewer than three.
    """
    merchant = get_or_create_merchant(session=session, owner_user_id=owner_user_id)
    store = get_or_create_store(session=session, merchant_id=merchant.id)

    count = session.exec(
        select(func.count()).select_from(Coupon).where(Coupon.merchant_id == merchant.id)
    ).one()
    if count < 3:
        now = utc_now()
        for title, description, discount_type, value, stock, days in DEMO_COUPONS:
            session.add(
                Coupon(
                    merchant_id=merchant.id,
                    store_id=store.id,
                    title=title,
                    description=description,
                    discount_type=discount_type,
                    discount_value=value,
                    stock_initial=stock,
                    stock_remaining=stock,
                    valid_until=now + timedelta(days=days),
                )
            )
        session.commit()
        logger.info("demo coupons created: merchant=%s store=%s", merchant.id, store.id)

    return merchant, store
