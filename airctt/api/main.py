"""
API router aggregation

Collects the route modules into the routers mounted by ``airctt/main.py``.

Route modules:
- coupons: issue and redeem coupons
- merchant: coupon lookup at the counter
- game: start and finish game sessions
- rewards: claim game rewards
- wallet: point transactions, balance, coupons and history
- setup: demo data seed
- utils: health check
- next_api: consumer summary and health in the success/data envelope
"""
from fastapi import APIRouter

from airctt.api.routes import (
    coupons,
    game,
    merchant,
    next_api,
    rewards,
    setup,
    utils,
    wallet,
)

# Mounted at settings.API_PREFIX
api_router = APIRouter()

api_router.include_router(coupons.router)  # /coupons/*
api_router.include_router(merchant.router)  # /merchant/*
api_router.include_router(game.router)  # /game/*
api_router.include_router(rewards.router)  # /rewards/*
api_router.include_router(wallet.router)  # /wallet/*
api_router.include_router(setup.router)  # /setup/*
api_router.include_router(utils.router)  # /utils/*

# Mounted at settings.NEXT_API_PREFIX
next_api_router = next_api.router
