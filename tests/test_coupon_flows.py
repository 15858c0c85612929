from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from sqlmodel import Session, select

from airctt import crud
from airctt.api.errors import InvalidInput, InvalidState, NotFound
from airctt.enums import CouponIssueStatus, IssuedReason
from airctt.models import Coupon, CouponIssue, utc_now


def _issue(client, consumer_id: uuid.UUID, coupon_id: uuid.UUID) -> dict:
    r = client.post(
        "/api/coupons/issue",
        json={"consumer_id": str(consumer_id), "coupon_id": str(coupon_id)},
    )
    assert r.status_code == 200
    return r.json()


def test_issue_then_redeem_twice(client, db, store, make_template):
    template = make_template()
    consumer_id = uuid.uuid4()

    issued = _issue(client, consumer_id, template.id)
    assert issued["status"] == "ISSUED"
    assert len(issued["code"]) == 10

    payload = {"coupon_issue_id": issued["coupon_issue_id"], "store_id": str(store.id)}
    r = client.post("/api/coupons/use", json=payload)
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == issued["coupon_issue_id"]
    assert body["status"] == "USED"
    assert body["used_store_id"] == str(store.id)
    assert body["used_at"] is not None

    r = client.post("/api/coupons/use", json=payload)
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == 400101
    assert "USED" in body["error"]
    assert body["error"] == "Coupon cannot be used. Status: USED"


def test_issue_defaults_to_manual_reason(db, make_template):
    template = make_template()
    issue = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=template.id)
    assert issue.status == CouponIssueStatus.ISSUED
    assert issue.issued_reason == IssuedReason.MANUAL
    assert issue.used_at is None


def test_issue_missing_fields_and_unknown_template(client):
    r = client.post("/api/coupons/issue", json={"consumer_id": str(uuid.uuid4())})
    assert r.status_code == 400
    assert r.json() == {"error": "Missing parameters", "code": 400001}

    r = client.post(
        "/api/coupons/issue",
        json={"consumer_id": str(uuid.uuid4()), "coupon_id": str(uuid.uuid4())},
    )
    assert r.status_code == 404
    assert r.json()["code"] == 404001


def test_issue_malformed_uuid_is_validation_error(client):
    r = client.post("/api/coupons/issue", json={"consumer_id": "u1", "coupon_id": "c1"})
    assert r.status_code == 400
    assert r.json()["code"] == 400000


def test_issue_takes_stock_until_exhausted(db, make_template):
    template = make_template(stock_initial=1, stock_remaining=1)

    crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=template.id)
    db.refresh(template)
    assert template.stock_remaining == 0

    with pytest.raises(InvalidState, match="out of stock"):
        crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=template.id)


def test_issue_unlimited_stock(db, make_template):
    template = make_template(stock_initial=None, stock_remaining=None)
    for _ in range(3):
        crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=template.id)
    db.refresh(template)
    assert template.stock_remaining is None


def test_redeem_errors(client, db, store, make_template):
    r = client.post("/api/coupons/use", json={"store_id": str(store.id)})
    assert r.status_code == 400
    assert r.json()["code"] == 400001

    r = client.post(
        "/api/coupons/use",
        json={"coupon_issue_id": str(uuid.uuid4()), "store_id": str(store.id)},
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Coupon not found"

    issued = _issue(client, uuid.uuid4(), make_template().id)
    r = client.post(
        "/api/coupons/use",
        json={"coupon_issue_id": issued["coupon_issue_id"], "store_id": str(uuid.uuid4())},
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Store not found"


def test_redeem_loses_race_to_concurrent_writer(engine, db, store, make_template):
    template = make_template()
    issue = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=template.id)
    assert issue.status == CouponIssueStatus.ISSUED

    # Another request redeems the coupon after this session loaded it.
    with Session(engine) as other:
        crud.redeem_coupon(session=other, coupon_issue_id=issue.id, store_id=store.id)

    with pytest.raises(InvalidState, match="Status: USED"):
        crud.redeem_coupon(session=db, coupon_issue_id=issue.id, store_id=store.id)


def test_redeem_expired_coupon(db, store, make_template, lapse_template):
    template = make_template()
    issue = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=template.id)
    lapse_template(template)
    assert crud.expire_issued_coupons(session=db) == 1

    with pytest.raises(InvalidState, match="Status: EXPIRED"):
        crud.redeem_coupon(session=db, coupon_issue_id=issue.id, store_id=store.id)


def test_redeem_after_template_lapsed_before_sweep(client, db, store, make_template, lapse_template):
    template = make_template()
    issued = _issue(client, uuid.uuid4(), template.id)
    lapse_template(template)

    r = client.post(
        "/api/coupons/use",
        json={"coupon_issue_id": issued["coupon_issue_id"], "store_id": str(store.id)},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Coupon cannot be used. Status: EXPIRED", "code": 400101}

    db.expire_all()
    issue = db.get(CouponIssue, uuid.UUID(issued["coupon_issue_id"]))
    assert issue.status == CouponIssueStatus.EXPIRED
    assert issue.used_at is None
    assert issue.used_store_id is None
    assert crud.expire_issued_coupons(session=db) == 0


def test_issue_rejects_inactive_and_lapsed_templates(client, db, make_template):
    inactive = make_template(status="inactive", stock_initial=5, stock_remaining=5)
    r = client.post(
        "/api/coupons/issue",
        json={"consumer_id": str(uuid.uuid4()), "coupon_id": str(inactive.id)},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Coupon is not active", "code": 400101}

    lapsed = make_template(valid_until=utc_now() - timedelta(minutes=1), stock_remaining=5)
    with pytest.raises(InvalidState, match="expired"):
        crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=lapsed.id)

    db.rollback()
    db.refresh(inactive)
    db.refresh(lapsed)
    assert inactive.stock_remaining == 5
    assert lapsed.stock_remaining == 5
    assert db.exec(select(CouponIssue)).all() == []


def test_check_coupon_by_id_and_code(client, make_template):
    template = make_template(title="Free Americano")
    issued = _issue(client, uuid.uuid4(), template.id)

    r = client.post("/api/merchant/check-coupon", json={"code_or_id": issued["coupon_issue_id"]})
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == issued["coupon_issue_id"]
    assert body["status"] == "ISSUED"
    assert body["title"] == "Free Americano"
    assert body["discount_type"] == "PERCENT"
    assert body["discount_value"] == 90

    r = client.post(
        "/api/merchant/check-coupon", json={"code_or_id": f" {issued['code'].lower()} "}
    )
    assert r.status_code == 200
    assert r.json()["id"] == issued["coupon_issue_id"]


def test_check_coupon_missing_and_unknown(client):
    r = client.post("/api/merchant/check-coupon", json={"code_or_id": "  "})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing code"

    r = client.post("/api/merchant/check-coupon", json={"code_or_id": "NOPE"})
    assert r.status_code == 404

    r = client.post("/api/merchant/check-coupon", json={"code_or_id": str(uuid.uuid4())})
    assert r.status_code == 404


def test_lookup_requires_input(db):
    with pytest.raises(InvalidInput):
        crud.lookup_coupon(session=db, code_or_id=None)
    with pytest.raises(NotFound):
        crud.lookup_coupon(session=db, code_or_id="ABCDEF0123")


def test_expire_only_touches_issued_coupons_of_expired_templates(
    db, store, make_template, lapse_template
):
    expired = make_template()
    live = make_template(valid_until=utc_now() + timedelta(days=1))
    forever = make_template(valid_until=None)

    stale = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=expired.id)
    used = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=expired.id)
    fresh = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=live.id)
    unlimited = crud.issue_coupon(session=db, consumer_id=uuid.uuid4(), coupon_id=forever.id)

    # Redeemed before the template expired.
    crud.redeem_coupon(session=db, coupon_issue_id=used.id, store_id=store.id)
    lapse_template(expired)

    assert crud.expire_issued_coupons(session=db) == 1
    db.expire_all()

    assert db.get(CouponIssue, stale.id).status == CouponIssueStatus.EXPIRED
    assert db.get(CouponIssue, used.id).status == CouponIssueStatus.USED
    assert db.get(CouponIssue, fresh.id).status == CouponIssueStatus.ISSUED
    assert db.get(CouponIssue, unlimited.id).status == CouponIssueStatus.ISSUED

    assert crud.expire_issued_coupons(session=db) == 0


def test_find_active_template_skips_unusable(db, make_template):
    assert crud.find_active_template(session=db) is None

    make_template(status="inactive")
    make_template(valid_until=utc_now() - timedelta(days=1))
    make_template(stock_initial=10, stock_remaining=0)
    assert crud.find_active_template(session=db) is None

    first = make_template(title="first")
    make_template(title="second")
    found = crud.find_active_template(session=db)
    assert isinstance(found, Coupon)
    assert found.id == first.id
