"""
Game routes

Start and finish reward-eligible game sessions.
"""
from __future__ import annotations

from fastapi import APIRouter

from airctt import crud
from airctt.api.deps import SessionDep
from airctt.api.schemas import (
    GameFinishRequest,
    GameNoRewardData,
    GameRewardData,
    GameStartData,
    GameStartRequest,
)

router = APIRouter(prefix="/game", tags=["game"])


@router.post("/start", response_model=GameStartData)
def start(payload: GameStartRequest, session: SessionDep) -> GameStartData:
    """
    Start a game session

    Request path: POST /api/game/start

    Args:
        payload: consumer_id and game_type
        session: database session

    Returns:
        GameStartData: session id and start time
    """
    game = crud.start_session(
        session=session, consumer_id=payload.consumer_id, game_type=payload.game_type
    )
    return GameStartData(session_id=game.id, started_at=game.started_at)


@router.post("/finish", response_model=GameRewardData | GameNoRewardData)
def finish(payload: GameFinishRequest, session: SessionDep) -> GameRewardData | GameNoRewardData:
    """
    Finish a game session

    A successful game creates an unclaimed reward; the client claims it
    through POST /api/rewards/claim.

    Request path: POST /api/game/finish

    Args:
        payload: session_id and the final result
        session: database session

    Returns:
        GameRewardData when a reward was created, otherwise GameNoRewardData
    """
    reward = crud.finish_session(
        session=session,
        game_session_id=payload.session_id,
        steps_cleared=payload.steps_cleared,
        success=payload.success,
        client_info=payload.client_info,
    )
    if reward is None:
        return GameNoRewardData()
    return GameRewardData(
        reward_id=reward.id,
        reward_type=reward.reward_type,
        reward_value=reward.reward_value,
    )
