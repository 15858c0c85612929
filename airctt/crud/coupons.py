"""Coupon ledger: issuance, redemption, lookup and expiry"""
import logging
import secrets
import uuid
from datetime import datetime

from sqlalchemy import or_
from sqlmodel import Session, func, select, update

from airctt.api.errors import InvalidInput, InvalidState, NotFound, coupon_not_usable
from airctt.core.config import settings
from airctt.enums import CouponIssueStatus, CouponTemplateStatus, IssuedReason
from airctt.models import Coupon, CouponIssue, Merchant, Store, utc_now

logger = logging.getLogger(__name__)


def _new_code() -> str:
    return secrets.token_hex(settings.COUPON_CODE_BYTES).upper()


def _lapsed_templates(now: datetime):
    return select(Coupon.id).where(Coupon.valid_until.is_not(None), Coupon.valid_until < now)


def _take_stock(*, session: Session, coupon: Coupon) -> None:
    """
    Take one unit of stock from a live template

    The template must be active and not past ``valid_until``. Templates
    without stock tracking are unlimited (NULL stays NULL).
    """
    result = session.exec(
        update(Coupon)
        .where(
            Coupon.id == coupon.id,
            Coupon.status == CouponTemplateStatus.active,
            or_(Coupon.valid_until.is_(None), Coupon.valid_until > utc_now()),
            or_(Coupon.stock_remaining.is_(None), Coupon.stock_remaining > 0),
        )
        .values(stock_remaining=Coupon.stock_remaining - 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 1:
        return

    session.refresh(coupon)
    if coupon.status != CouponTemplateStatus.active:
        raise InvalidState("Coupon is not active")
    if coupon.stock_remaining is not None and coupon.stock_remaining <= 0:
        raise InvalidState("Coupon out of stock")
    raise InvalidState("Coupon has expired")


def _expire_issue(*, session: Session, coupon_issue_id: uuid.UUID) -> None:
    session.exec(
        update(CouponIssue)
        .where(
            CouponIssue.id == coupon_issue_id,
            CouponIssue.status == CouponIssueStatus.ISSUED,
        )
        .values(status=CouponIssueStatus.EXPIRED)
        .execution_options(synchronize_session=False)
    )
    session.commit()
    logger.info("coupon expired on use: issue=%s", coupon_issue_id)


def issue_coupon(
    *,
    session: Session,
    consumer_id: uuid.UUID | None,
    coupon_id: uuid.UUID | None,
    reason: IssuedReason | None = None,
    commit: bool = True,
) -> CouponIssue:
    """Grant a coupon template to a consumer"""
    if not consumer_id or not coupon_id:
        raise InvalidInput("Missing parameters")

    coupon = session.get(Coupon, coupon_id)
    if not coupon:
        raise NotFound("Coupon not found")
    _take_stock(session=session, coupon=coupon)

    issue = CouponIssue(
        coupon_id=coupon.id,
        consumer_id=consumer_id,
        code=_new_code(),
        status=CouponIssueStatus.ISSUED,
        issued_reason=reason or IssuedReason.MANUAL,
    )
    session.add(issue)
    if commit:
        session.commit()
        session.refresh(issue)
    else:
        session.flush()
    logger.info(
        "coupon issued: issue=%s coupon=%s consumer=%s reason=%s",
        issue.id, coupon.id, consumer_id, IssuedReason(issue.issued_reason).value,
    )
    return issue


def redeem_coupon(
    *,
    session: Session,
    coupon_issue_id: uuid.UUID | None,
    store_id: uuid.UUID | None,
) -> CouponIssue:
    """Mark an issued coupon as used at a store"""
    if not coupon_issue_id or not store_id:
        raise InvalidInput("Missing parameters")

    issue = session.get(CouponIssue, coupon_issue_id)
    if not issue:
        raise NotFound("Coupon not found")
    if not session.get(Store, store_id):
        raise NotFound("Store not found")

    # Conditional write: only one redemption can move the row out of ISSUED,
    # and never once its template has lapsed.
    now = utc_now()
    result = session.exec(
        update(CouponIssue)
        .where(
            CouponIssue.id == coupon_issue_id,
            CouponIssue.status == CouponIssueStatus.ISSUED,
            CouponIssue.coupon_id.not_in(_lapsed_templates(now)),
        )
        .values(status=CouponIssueStatus.USED, used_at=now, used_store_id=store_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        session.rollback()
        session.refresh(issue)
        if issue.status == CouponIssueStatus.ISSUED:
            # Template lapsed before the expiry sweep reached this coupon.
            _expire_issue(session=session, coupon_issue_id=issue.id)
            session.refresh(issue)
        raise coupon_not_usable(CouponIssueStatus(issue.status).value)

    session.commit()
    session.refresh(issue)
    logger.info("coupon used: issue=%s store=%s", issue.id, store_id)
    return issue


def lookup_coupon(*, session: Session, code_or_id: str | None) -> tuple[CouponIssue, Coupon]:
    """Find an issued coupon by id, falling back to its redemption code"""
    key = (code_or_id or "").strip()
    if not key:
        raise InvalidInput("Missing code")

    stmt = select(CouponIssue, Coupon).join(Coupon, Coupon.id == CouponIssue.coupon_id)

    row = None
    try:
        issue_id = uuid.UUID(key)
    except ValueError:
        issue_id = None
    if issue_id is not None:
        row = session.exec(stmt.where(CouponIssue.id == issue_id)).first()
    if row is None:
        row = session.exec(stmt.where(func.upper(CouponIssue.code) == key.upper())).first()
    if row is None:
        raise NotFound("Coupon not found")
    issue, coupon = row
    return issue, coupon


def list_consumer_coupons(
    *, session: Session, consumer_id: uuid.UUID
) -> list[tuple[CouponIssue, Coupon, str | None]]:
    """Coupons held by a consumer, newest first, with template and brand name"""
    stmt = (
        select(CouponIssue, Coupon, Merchant.name)
        .join(Coupon, Coupon.id == CouponIssue.coupon_id)
        .outerjoin(Merchant, Merchant.id == Coupon.merchant_id)
        .where(CouponIssue.consumer_id == consumer_id)
        .order_by(CouponIssue.issued_at.desc())
    )
    return [(issue, coupon, brand) for issue, coupon, brand in session.exec(stmt).all()]


def count_available_coupons(*, session: Session, consumer_id: uuid.UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(CouponIssue)
        .where(
            CouponIssue.consumer_id == consumer_id,
            CouponIssue.status == CouponIssueStatus.ISSUED,
        )
    )
    return session.exec(stmt).one()


def find_active_template(*, session: Session, now: datetime | None = None) -> Coupon | None:
    """First active, unexpired template with stock left"""
    now = now or utc_now()
    stmt = (
        select(Coupon)
        .where(
            Coupon.status == CouponTemplateStatus.active,
            or_(Coupon.valid_until.is_(None), Coupon.valid_until > now),
            or_(Coupon.stock_remaining.is_(None), Coupon.stock_remaining > 0),
        )
        .order_by(Coupon.created_at, Coupon.id)
        .limit(1)
    )
    return session.exec(stmt).first()


def expire_issued_coupons(*, session: Session, now: datetime | None = None) -> int:
    """Move ISSUED coupons of templates past ``valid_until`` to EXPIRED"""
    now = now or utc_now()
    result = session.exec(
        update(CouponIssue)
        .where(
            CouponIssue.status == CouponIssueStatus.ISSUED,
            CouponIssue.coupon_id.in_(_lapsed_templates(now)),
        )
        .values(status=CouponIssueStatus.EXPIRED)
        .execution_options(synchronize_session=False)
    )
    session.commit()
    return result.rowcount
