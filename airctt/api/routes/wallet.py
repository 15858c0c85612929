"""
Wallet routes

Endpoints of the wallet ledger, including:
- Posting a point transaction
- The consumer's balance, coupons and point history

The ``my-*`` reads identify the consumer from the bearer token; without a
token they read the placeholder consumer.
"""
from __future__ import annotations

from fastapi import APIRouter

from airctt import crud
from airctt.api.deps import ConsumerId, SessionDep
from airctt.api.schemas import (
    MyCouponItem,
    MyHistoryItem,
    WalletBalanceData,
    WalletTransactionData,
    WalletTransactionRequest,
)
from airctt.crud.wallet import entry_kind
from airctt.enums import CouponIssueStatus

router = APIRouter(prefix="/wallet", tags=["wallet"])

DEFAULT_BRAND = "Unknown Brand"


@router.post("/transaction", response_model=WalletTransactionData)
def transaction(payload: WalletTransactionRequest, session: SessionDep) -> WalletTransactionData:
    """
    Post a wallet transaction

    Positive amounts credit the wallet, negative ones debit it. The wallet is
    created on first use.

    Request path: POST /api/wallet/transaction

    Args:
        payload: consumer_id, type and signed amount_points
        session: database session

    Returns:
        WalletTransactionData: the ledger entry id and the new balance
    """
    tx, balance = crud.change_points(
        session=session,
        consumer_id=payload.consumer_id,
        delta=payload.amount_points,
        tx_type=payload.type,
    )
    return WalletTransactionData(wallet_tx_id=tx.id, new_balance=balance)


@router.get("/my-balance", response_model=WalletBalanceData)
def my_balance(session: SessionDep, consumer_id: ConsumerId) -> WalletBalanceData:
    """
    Current point balance

    Request path: GET /api/wallet/my-balance

    Returns:
        WalletBalanceData: balance, 0 when the consumer has no wallet
    """
    return WalletBalanceData(balance=crud.get_balance(session=session, consumer_id=consumer_id))


@router.get("/my-coupons", response_model=list[MyCouponItem])
def my_coupons(session: SessionDep, consumer_id: ConsumerId) -> list[MyCouponItem]:
    """
    Coupons held by the consumer, newest first

    Request path: GET /api/wallet/my-coupons

    Args:
        session: database session
        consumer_id: consumer from the bearer token

    Returns:
        list[MyCouponItem]: coupon cards with brand and status
    """
    rows = crud.list_consumer_coupons(session=session, consumer_id=consumer_id)
    items = []
    for issued, coupon, brand in rows:
        issue_status = CouponIssueStatus(issued.status)
        items.append(
            MyCouponItem(
                id=issued.id,
                title=coupon.title,
                description=coupon.description,
                brand=brand or DEFAULT_BRAND,
                status="available" if issue_status == CouponIssueStatus.ISSUED else issue_status.value.lower(),
                expiresAt=coupon.valid_until,
                discountRate=coupon.discount_value,
            )
        )
    return items


@router.get("/my-history", response_model=list[MyHistoryItem])
def my_history(session: SessionDep, consumer_id: ConsumerId) -> list[MyHistoryItem]:
    """
    Point history of the consumer, newest first

    Request path: GET /api/wallet/my-history

    Returns:
        list[MyHistoryItem]: ledger entries marked earned or used
    """
    return [
        MyHistoryItem(
            id=tx.id,
            userId=consumer_id,
            amount=tx.amount_points,
            type=entry_kind(tx),
            description=tx.tx_type,
            createdAt=tx.created_at,
        )
        for tx in crud.get_history(session=session, consumer_id=consumer_id)
    ]
