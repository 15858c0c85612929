"""
Database models

All tables are declared with SQLModel, one module per area:
- merchant.py: merchants and stores
- coupon.py: coupon templates and issued coupons
- wallet.py: wallets and wallet transactions
- game.py: game sessions and rewards
"""
from sqlmodel import SQLModel

from .base import utc_now
from .coupon import Coupon, CouponIssue
from .game import GameReward, GameSession
from .merchant import Merchant, Store
from .wallet import Wallet, WalletTransaction

__all__ = [
    "SQLModel",
    "utc_now",
    "Merchant",
    "Store",
    "Coupon",
    "CouponIssue",
    "Wallet",
    "WalletTransaction",
    "GameSession",
    "GameReward",
]
