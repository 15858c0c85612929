"""
Reward routes
"""
from __future__ import annotations

from fastapi import APIRouter

from airctt import crud
from airctt.api.deps import SessionDep
from airctt.api.schemas import RewardClaimData, RewardClaimRequest

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.post("/claim", response_model=RewardClaimData, response_model_exclude_none=True)
def claim(payload: RewardClaimRequest, session: SessionDep) -> RewardClaimData:
    """
    Claim a game reward

    Pays the reward out once, either as a coupon or as wallet points.

    Request path: POST /api/rewards/claim

    Args:
        payload: reward_id
        session: database session

    Returns:
        RewardClaimData: coupon_issue_id or wallet_tx_id of the payout
    """
    reward = crud.claim_reward(session=session, reward_id=payload.reward_id)
    return RewardClaimData(
        coupon_issue_id=reward.created_coupon_issue_id,
        wallet_tx_id=reward.created_wallet_tx_id,
    )
