"""
next_api routes

Endpoints of the ``/next_api`` family. Successes are wrapped as
``{"success": true, "data": ...}``; errors share the ``{"error", "code"}``
body of the rest of the API.
"""
from __future__ import annotations

import uuid

from fastapi import APIRouter

from airctt.api.deps import SessionDep
from airctt.api.errors import InvalidInput
from airctt.api.schemas import ConsumerSummaryData, HealthData, NextEnvelope
from airctt.crud.coupons import count_available_coupons
from airctt.crud.wallet import get_balance

router = APIRouter(tags=["next_api"])

# Shown before the consumer holds any coupon
DEFAULT_BENEFITS = 3
MAX_BENEFITS = 10


@router.get("/health", response_model=NextEnvelope[HealthData])
def health() -> NextEnvelope[HealthData]:
    """
    Health check

    Request path: GET /next_api/health
    """
    return NextEnvelope(data=HealthData())


@router.get("/consumer_summary", response_model=NextEnvelope[ConsumerSummaryData])
def consumer_summary(
    session: SessionDep, id: uuid.UUID | None = None
) -> NextEnvelope[ConsumerSummaryData]:
    """
    Home screen summary of a consumer

    Request path: GET /next_api/consumer_summary?id=<consumer uuid>

    Args:
        session: database session
        id: consumer id

    Returns:
        NextEnvelope[ConsumerSummaryData]: available coupons, point balance
        and the benefits badge count
    """
    if id is None:
        raise InvalidInput("Consumer ID is required")

    coupon_count = count_available_coupons(session=session, consumer_id=id)
    benefits = min(coupon_count, MAX_BENEFITS) if coupon_count > 0 else DEFAULT_BENEFITS
    return NextEnvelope(
        data=ConsumerSummaryData(
            couponCount=coupon_count,
            pointsSum=get_balance(session=session, consumer_id=id),
            benefitsCount=benefits,
        )
    )
