"""CRUD operations"""
from .coupons import (
    expire_issued_coupons,
    find_active_template,
    issue_coupon,
    list_consumer_coupons,
    lookup_coupon,
    redeem_coupon,
)
from .games import claim_reward, finish_session, start_session
from .merchants import setup_demo_data
from .wallet import change_points, get_balance, get_history, get_or_create_wallet

__all__ = [
    "issue_coupon",
    "redeem_coupon",
    "lookup_coupon",
    "list_consumer_coupons",
    "expire_issued_coupons",
    "find_active_template",
    "start_session",
    "finish_session",
    "claim_reward",
    "setup_demo_data",
    "get_or_create_wallet",
    "change_points",
    "get_balance",
    "get_history",
]
