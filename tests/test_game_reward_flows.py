from __future__ import annotations

import uuid

import pytest
from sqlmodel import Session, select

from airctt import crud
from airctt.api.errors import AlreadyClaimed, InconsistentState, NoTemplateAvailable
from airctt.core.config import settings
from airctt.enums import IssuedReason, RewardFallback
from airctt.models import Coupon, CouponIssue, GameReward, GameSession, Wallet, WalletTransaction


def _start(client, consumer_id: uuid.UUID) -> str:
    r = client.post(
        "/api/game/start",
        json={"consumer_id": str(consumer_id), "game_type": "STAIRS"},
    )
    assert r.status_code == 200
    body = r.json()
    assert body["started_at"]
    return body["session_id"]


def _finish(client, session_id: str, success: bool = True):
    return client.post(
        "/api/game/finish",
        json={
            "session_id": session_id,
            "steps_cleared": 12,
            "success": success,
            "client_info": {"os": "ios"},
        },
    )


def _won_reward(client, consumer_id: uuid.UUID) -> dict:
    r = _finish(client, _start(client, consumer_id))
    assert r.status_code == 200
    return r.json()


def test_finish_success_creates_default_reward(client, db):
    session_id = _start(client, uuid.uuid4())

    r = _finish(client, session_id)
    assert r.status_code == 200
    body = r.json()
    assert body["reward_type"] == "COUPON_90"
    assert body["reward_value"] == 90

    reward = db.get(GameReward, uuid.UUID(body["reward_id"]))
    assert reward is not None
    assert str(reward.game_session_id) == session_id
    assert not reward.is_claimed
    assert reward.claimed_at is None

    game = db.get(GameSession, uuid.UUID(session_id))
    assert game.finished_at is not None
    assert game.steps_cleared == 12
    assert game.success is True
    assert game.client_info == {"os": "ios"}


def test_finish_failure_creates_nothing(client, db):
    session_id = _start(client, uuid.uuid4())

    r = _finish(client, session_id, success=False)
    assert r.status_code == 200
    assert r.json() == {"message": "Game finished, no reward generated.", "success": False}
    assert db.exec(select(GameReward)).all() == []


def test_finish_twice_and_unknown_session(client):
    session_id = _start(client, uuid.uuid4())
    assert _finish(client, session_id).status_code == 200

    r = _finish(client, session_id)
    assert r.status_code == 400
    assert r.json() == {"error": "Game session already finished", "code": 400101}

    r = _finish(client, str(uuid.uuid4()))
    assert r.status_code == 404
    assert r.json()["code"] == 404001

    r = client.post("/api/game/finish", json={"success": True})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing session_id"


def test_start_requires_fields(client):
    r = client.post("/api/game/start", json={"consumer_id": str(uuid.uuid4())})
    assert r.status_code == 400
    assert r.json()["code"] == 400001


def test_claim_coupon_reward_once(client, db, make_template):
    template = make_template(stock_initial=5, stock_remaining=5)
    consumer_id = uuid.uuid4()
    reward = _won_reward(client, consumer_id)

    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert "wallet_tx_id" not in body

    issue = db.get(CouponIssue, uuid.UUID(body["coupon_issue_id"]))
    assert issue.issued_reason == IssuedReason.GAME_REWARD
    assert issue.consumer_id == consumer_id
    assert issue.coupon_id == template.id

    claimed = db.get(GameReward, uuid.UUID(reward["reward_id"]))
    assert claimed.created_coupon_issue_id == issue.id
    assert claimed.created_wallet_tx_id is None
    assert claimed.claimed_at is not None

    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 400
    assert r.json() == {"error": "Reward already claimed", "code": 400201}

    db.expire_all()
    assert len(db.exec(select(CouponIssue)).all()) == 1
    db.refresh(template)
    assert template.stock_remaining == 4


def test_claim_points_reward_creates_wallet(client, db, monkeypatch):
    monkeypatch.setattr(settings, "REWARD_TYPE", "POINT_1000")
    monkeypatch.setattr(settings, "REWARD_VALUE", 1000)
    consumer_id = uuid.uuid4()
    reward = _won_reward(client, consumer_id)
    assert reward["reward_type"] == "POINT_1000"

    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 200
    body = r.json()
    assert "coupon_issue_id" not in body

    wallet = db.exec(select(Wallet).where(Wallet.consumer_id == consumer_id)).one()
    assert wallet.total_points == 1000
    txs = db.exec(select(WalletTransaction).where(WalletTransaction.wallet_id == wallet.id)).all()
    assert len(txs) == 1
    assert txs[0].amount_points == 1000
    assert txs[0].tx_type == "GAME_REWARD"
    assert str(txs[0].id) == body["wallet_tx_id"]
    assert txs[0].related_game_session_id is not None


def test_claim_points_reward_without_value_pays_default(db):
    consumer_id = uuid.uuid4()
    game = crud.start_session(session=db, consumer_id=consumer_id, game_type="STAIRS")
    reward = GameReward(game_session_id=game.id, reward_type="POINT", reward_value=None)
    db.add(reward)
    db.commit()

    crud.claim_reward(session=db, reward_id=reward.id)
    assert crud.get_balance(session=db, consumer_id=consumer_id) == settings.REWARD_POINTS_DEFAULT


def test_claim_without_template_fails_and_stays_claimable(client, db, make_template):
    reward = _won_reward(client, uuid.uuid4())

    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 409
    assert r.json()["code"] == 409001

    pending = db.get(GameReward, uuid.UUID(reward["reward_id"]))
    assert not pending.is_claimed

    make_template()
    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 200
    assert r.json()["coupon_issue_id"]


def test_claim_without_template_falls_back_to_points(client, db, monkeypatch):
    monkeypatch.setattr(settings, "REWARD_NO_TEMPLATE_FALLBACK", RewardFallback.points)
    consumer_id = uuid.uuid4()
    reward = _won_reward(client, consumer_id)

    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 200
    assert r.json()["wallet_tx_id"]
    assert crud.get_balance(session=db, consumer_id=consumer_id) == 90


def test_claim_missing_and_unknown_reward(client):
    r = client.post("/api/rewards/claim", json={})
    assert r.status_code == 400
    assert r.json()["error"] == "Missing reward_id"

    r = client.post("/api/rewards/claim", json={"reward_id": str(uuid.uuid4())})
    assert r.status_code == 404
    assert r.json()["error"] == "Reward not found"


def test_claim_reward_with_missing_session_is_inconsistent(db):
    reward = GameReward(game_session_id=uuid.uuid4(), reward_type="COUPON_90", reward_value=90)
    db.add(reward)
    db.commit()

    with pytest.raises(InconsistentState):
        crud.claim_reward(session=db, reward_id=reward.id)


def test_concurrent_claim_pays_out_once(engine, db, monkeypatch):
    monkeypatch.setattr(settings, "REWARD_TYPE", "POINT_500")
    monkeypatch.setattr(settings, "REWARD_VALUE", 500)
    consumer_id = uuid.uuid4()
    game = crud.start_session(session=db, consumer_id=consumer_id, game_type="STAIRS")
    reward = crud.finish_session(session=db, game_session_id=game.id, success=True)
    assert reward is not None
    assert not reward.is_claimed

    # A second request claims after this session loaded the reward.
    with Session(engine) as other:
        crud.claim_reward(session=other, reward_id=reward.id)

    with pytest.raises(AlreadyClaimed):
        crud.claim_reward(session=db, reward_id=reward.id)

    db.expire_all()
    assert crud.get_balance(session=db, consumer_id=consumer_id) == 500
    assert len(db.exec(select(WalletTransaction)).all()) == 1


def test_no_template_error_issues_nothing(db):
    game = crud.start_session(session=db, consumer_id=uuid.uuid4(), game_type="STAIRS")
    reward = crud.finish_session(session=db, game_session_id=game.id, success=True)

    with pytest.raises(NoTemplateAvailable):
        crud.claim_reward(session=db, reward_id=reward.id)
    assert db.exec(select(CouponIssue)).all() == []


def _sell_out_after_pick(monkeypatch, engine):
    pick = crud.coupons.find_active_template

    def _pick_then_sold_out(*, session, now=None):
        template = pick(session=session, now=now)
        # Another request takes the last unit before this claim does.
        with Session(engine) as other:
            crud.issue_coupon(session=other, consumer_id=uuid.uuid4(), coupon_id=template.id)
        return template

    monkeypatch.setattr(crud.coupons, "find_active_template", _pick_then_sold_out)


def test_claim_when_template_sells_out_first(engine, db, make_template, monkeypatch):
    template = make_template(stock_initial=1, stock_remaining=1)
    consumer_id = uuid.uuid4()
    game = crud.start_session(session=db, consumer_id=consumer_id, game_type="STAIRS")
    reward = crud.finish_session(session=db, game_session_id=game.id, success=True)
    _sell_out_after_pick(monkeypatch, engine)

    with pytest.raises(NoTemplateAvailable):
        crud.claim_reward(session=db, reward_id=reward.id)

    db.expire_all()
    assert not db.get(GameReward, reward.id).is_claimed
    assert db.get(Coupon, template.id).stock_remaining == 0
    mine = db.exec(select(CouponIssue).where(CouponIssue.consumer_id == consumer_id)).all()
    assert mine == []


def test_claim_when_template_sells_out_falls_back_to_points(
    client, engine, db, make_template, monkeypatch
):
    monkeypatch.setattr(settings, "REWARD_NO_TEMPLATE_FALLBACK", RewardFallback.points)
    make_template(stock_initial=1, stock_remaining=1)
    consumer_id = uuid.uuid4()
    reward = _won_reward(client, consumer_id)
    _sell_out_after_pick(monkeypatch, engine)

    r = client.post("/api/rewards/claim", json={"reward_id": reward["reward_id"]})
    assert r.status_code == 200
    assert r.json()["wallet_tx_id"]
    assert "coupon_issue_id" not in r.json()
    assert crud.get_balance(session=db, consumer_id=consumer_id) == 90
