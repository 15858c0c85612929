"""
Utility routes

System endpoints such as the health check.
"""
from fastapi import APIRouter

router = APIRouter(prefix="/utils", tags=["utils"])


@router.get("/health-check/")
async def health_check() -> bool:
    """
    Health check

    Used by load balancers and container health checks; always True while the
    process is serving.

    Request path: GET /api/utils/health-check/

    Returns:
        bool: True
    """
    return True
