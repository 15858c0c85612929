"""
Merchant routes

Endpoints used at the counter by merchant staff.
"""
from __future__ import annotations

from fastapi import APIRouter

from airctt import crud
from airctt.api.deps import SessionDep
from airctt.api.schemas import CouponCheckData, CouponCheckRequest

router = APIRouter(prefix="/merchant", tags=["merchant"])


@router.post("/check-coupon", response_model=CouponCheckData)
def check_coupon(payload: CouponCheckRequest, session: SessionDep) -> CouponCheckData:
    """
    Look up a coupon before redeeming it

    Accepts either the issue id or the short redemption code.

    Request path: POST /api/merchant/check-coupon

    Args:
        payload: code_or_id
        session: database session

    Returns:
        CouponCheckData: issue status with the template's display fields
    """
    issued, coupon = crud.lookup_coupon(session=session, code_or_id=payload.code_or_id)
    return CouponCheckData(
        id=issued.id,
        code=issued.code,
        status=issued.status,
        title=coupon.title,
        description=coupon.description,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        valid_until=coupon.valid_until,
    )
