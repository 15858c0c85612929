"""
Enum definitions

All enums used by the ledgers. Each one subclasses both ``str`` and ``Enum`` so
values compare equal to the plain strings stored in the database and sent over
the wire.
"""
from enum import Enum


class CouponIssueStatus(str, Enum):
    """
    Lifecycle of one issued coupon

    - ISSUED: granted to a consumer and still redeemable
    - USED: redeemed at a store (terminal)
    - EXPIRED: template validity passed before redemption (terminal)
    """
    ISSUED = "ISSUED"
    USED = "USED"
    EXPIRED = "EXPIRED"


class IssuedReason(str, Enum):
    """
    Why a coupon was granted

    - MANUAL: issued through the coupon issue endpoint
    - GAME_REWARD: paid out by a game reward claim
    - EVENT: issued by a marketing event
    """
    MANUAL = "MANUAL"
    GAME_REWARD = "GAME_REWARD"
    EVENT = "EVENT"


class CouponTemplateStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class DiscountType(str, Enum):
    """
    How a coupon template discounts a purchase

    - PERCENT: discount_value is a percentage
    - FREE_ITEM: a free menu item, discount_value unused
    - FIXED_AMOUNT: discount_value is an amount in won
    """
    PERCENT = "PERCENT"
    FREE_ITEM = "FREE_ITEM"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class WalletTxType(str, Enum):
    """
    Well-known wallet transaction tags

    ``tx_type`` is stored as free text, so clients may send other tags; these
    are the ones the service itself writes.
    """
    GAME_REWARD = "GAME_REWARD"
    MANUAL = "MANUAL"


class RewardFallback(str, Enum):
    """What a coupon reward claim does when no active template exists"""
    fail = "fail"
    points = "points"
