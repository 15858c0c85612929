"""Game sessions and reward payout"""
import logging
import uuid
from typing import Any

from sqlmodel import Session, update

from airctt.api.errors import (
    AlreadyClaimed,
    InconsistentState,
    InvalidInput,
    InvalidState,
    NoTemplateAvailable,
    NotFound,
)
from airctt.core.config import settings
from airctt.enums import IssuedReason, RewardFallback, WalletTxType
from airctt.models import CouponIssue, GameReward, GameSession, utc_now

from . import coupons, wallet

logger = logging.getLogger(__name__)


def start_session(
    *, session: Session, consumer_id: uuid.UUID | None, game_type: str | None
) -> GameSession:
    """Open a game session for a consumer"""
    if not consumer_id or not game_type:
        raise InvalidInput("Missing parameters")

    game = GameSession(consumer_id=consumer_id, game_type=game_type)
    session.add(game)
    session.commit()
    session.refresh(game)
    logger.info("game started: session=%s consumer=%s type=%s", game.id, consumer_id, game_type)
    return game


def finish_session(
    *,
    session: Session,
    game_session_id: uuid.UUID | None,
    steps_cleared: int | None = None,
    success: bool | None = None,
    client_info: dict[str, Any] | None = None,
) -> GameReward | None:
    """
    Record the result of a game session

    A session finishes exactly once. A successful one yields a reward built
    from the configured reward policy; an unsuccessful one yields nothing.

    Returns:
        The new GameReward, or None when the game was not successful
    """
    if not game_session_id:
        raise InvalidInput("Missing session_id")

    result = session.exec(
        update(GameSession)
        .where(GameSession.id == game_session_id, GameSession.finished_at.is_(None))
        .values(
            steps_cleared=steps_cleared,
            success=success,
            client_info=client_info,
            finished_at=utc_now(),
        )
    )
    if result.rowcount != 1:
        session.rollback()
        if not session.get(GameSession, game_session_id):
            raise NotFound("Game session not found")
        raise InvalidState("Game session already finished")

    if not success:
        session.commit()
        logger.info("game finished without reward: session=%s", game_session_id)
        return None

    reward = GameReward(
        game_session_id=game_session_id,
        reward_type=settings.REWARD_TYPE,
        reward_value=settings.REWARD_VALUE,
    )
    session.add(reward)
    session.commit()
    session.refresh(reward)
    logger.info(
        "game finished with reward: session=%s reward=%s type=%s value=%s",
        game_session_id, reward.id, reward.reward_type, reward.reward_value,
    )
    return reward


def _reward_consumer(*, session: Session, reward: GameReward) -> uuid.UUID:
    game = session.get(GameSession, reward.game_session_id)
    if not game or not game.consumer_id:
        raise InconsistentState("Consumer not linked to reward")
    return game.consumer_id


def _issue_reward_coupon(*, session: Session, consumer_id: uuid.UUID) -> CouponIssue | None:
    template = coupons.find_active_template(session=session)
    if not template:
        return None
    try:
        return coupons.issue_coupon(
            session=session,
            consumer_id=consumer_id,
            coupon_id=template.id,
            reason=IssuedReason.GAME_REWARD,
            commit=False,
        )
    except InvalidState as e:
        # The picked template sold out or lapsed before its stock was taken.
        session.rollback()
        logger.warning("reward template %s no longer usable: %s", template.id, e.message)
        return None


def _mark_claimed(
    *,
    session: Session,
    reward_id: uuid.UUID,
    coupon_issue_id: uuid.UUID | None = None,
    wallet_tx_id: uuid.UUID | None = None,
) -> None:
    # Must hit exactly one unclaimed row, otherwise the payout is discarded.
    result = session.exec(
        update(GameReward)
        .where(
            GameReward.id == reward_id,
            GameReward.created_coupon_issue_id.is_(None),
            GameReward.created_wallet_tx_id.is_(None),
        )
        .values(
            created_coupon_issue_id=coupon_issue_id,
            created_wallet_tx_id=wallet_tx_id,
            claimed_at=utc_now(),
        )
    )
    if result.rowcount != 1:
        session.rollback()
        raise AlreadyClaimed()


def claim_reward(*, session: Session, reward_id: uuid.UUID | None) -> GameReward:
    """
    Pay out a game reward once

    COUPON_* rewards issue a coupon from the first active template; every
    other reward type credits ``reward_value`` points to the player's wallet.
    The payout and the claim marker are committed together.

    Returns:
        The claimed reward with exactly one of its ``created_*`` ids set

    Raises:
        AlreadyClaimed: the reward was paid out before (or concurrently)
        NoTemplateAvailable: a coupon reward found no usable template (none
            active, or the picked one sold out first) and the points
            fallback is off
    """
    if not reward_id:
        raise InvalidInput("Missing reward_id")

    reward = session.get(GameReward, reward_id)
    if not reward:
        raise NotFound("Reward not found")
    if reward.is_claimed:
        raise AlreadyClaimed()

    consumer_id = _reward_consumer(session=session, reward=reward)

    if reward.reward_type.startswith("COUPON"):
        issue = _issue_reward_coupon(session=session, consumer_id=consumer_id)
        if issue:
            _mark_claimed(session=session, reward_id=reward.id, coupon_issue_id=issue.id)
            session.commit()
            session.refresh(reward)
            logger.info("reward claimed as coupon: reward=%s issue=%s", reward.id, issue.id)
            return reward
        if settings.REWARD_NO_TEMPLATE_FALLBACK != RewardFallback.points:
            raise NoTemplateAvailable()
        logger.warning("no active coupon template, paying reward %s as points", reward.id)

    points = reward.reward_value or settings.REWARD_POINTS_DEFAULT
    tx, _ = wallet.change_points(
        session=session,
        consumer_id=consumer_id,
        delta=points,
        tx_type=WalletTxType.GAME_REWARD.value,
        related_game_session_id=reward.game_session_id,
        commit=False,
    )
    _mark_claimed(session=session, reward_id=reward.id, wallet_tx_id=tx.id)
    session.commit()
    session.refresh(reward)
    logger.info("reward claimed as points: reward=%s tx=%s points=%s", reward.id, tx.id, points)
    return reward
