"""
Setup routes

Seeds demo data for the logged-in user so the game has coupons to hand out.
"""
from __future__ import annotations

from fastapi import APIRouter

from airctt import crud
from airctt.api.deps import RequiredConsumerId, SessionDep
from airctt.api.schemas import DemoSetupData

router = APIRouter(prefix="/setup", tags=["setup"])


@router.post("/demo-data", response_model=DemoSetupData)
def demo_data(session: SessionDep, user_id: RequiredConsumerId) -> DemoSetupData:
    """
    Create a demo merchant, store and coupon templates

    Idempotent: repeated calls reuse the merchant and store and do not add
    templates once three exist.

    Request path: POST /api/setup/demo-data

    Args:
        session: database session
        user_id: logged-in user from the bearer token (required)

    Returns:
        DemoSetupData: ids of the demo merchant and store
    """
    merchant, store = crud.setup_demo_data(session=session, owner_user_id=user_id)
    return DemoSetupData(
        message="Demo store and coupons are ready. The game now hands out these coupons.",
        merchant_id=merchant.id,
        store_id=store.id,
    )
