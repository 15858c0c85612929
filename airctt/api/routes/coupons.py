"""
Coupon routes

Endpoints of the coupon ledger:
- Issue a coupon template to a consumer
- Redeem an issued coupon at a store
"""
from __future__ import annotations

from fastapi import APIRouter

from airctt import crud
from airctt.api.deps import SessionDep
from airctt.api.schemas import (
    CouponIssueData,
    CouponIssueRequest,
    CouponUseData,
    CouponUseRequest,
)

router = APIRouter(prefix="/coupons", tags=["coupons"])


@router.post("/issue", response_model=CouponIssueData)
def issue(payload: CouponIssueRequest, session: SessionDep) -> CouponIssueData:
    """
    Issue a coupon

    Grants one unit of a coupon template to a consumer. Templates that track
    stock lose one unit.

    Request path: POST /api/coupons/issue

    Args:
        payload: consumer_id, coupon_id and an optional reason
        session: database session

    Returns:
        CouponIssueData: the new issue id, its status and redemption code
    """
    issued = crud.issue_coupon(
        session=session,
        consumer_id=payload.consumer_id,
        coupon_id=payload.coupon_id,
        reason=payload.reason,
    )
    return CouponIssueData(coupon_issue_id=issued.id, status=issued.status, code=issued.code)


@router.post("/use", response_model=CouponUseData)
def use(payload: CouponUseRequest, session: SessionDep) -> CouponUseData:
    """
    Redeem a coupon

    Only ISSUED coupons can be used; a second redemption of the same coupon
    fails with the current status in the message.

    Request path: POST /api/coupons/use

    Args:
        payload: coupon_issue_id and store_id
        session: database session

    Returns:
        CouponUseData: the redeemed coupon
    """
    issued = crud.redeem_coupon(
        session=session,
        coupon_issue_id=payload.coupon_issue_id,
        store_id=payload.store_id,
    )
    return CouponUseData(
        id=issued.id,
        status=issued.status,
        used_at=issued.used_at,
        used_store_id=issued.used_store_id,
    )
