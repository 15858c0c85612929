"""
FastAPI dependencies

Reusable dependencies injected into route handlers.

Key concepts:
- Depends: FastAPI dependency injection
- Generator: resources that need cleanup (the database session)
- HTTPBearer: extracts the token from ``Authorization: Bearer <token>``
"""
import uuid
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from airctt.core.config import settings
from airctt.core.db import engine
from airctt.core.security import TokenError, consumer_id_from_token

# auto_error=False: wallet reads fall back to the placeholder consumer when
# the header is absent instead of failing with 403.
optional_bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Database session per request

    The ``with`` block closes the session (rolling back anything uncommitted)
    once the request is done.

    Yields:
        Session: database session
    """
    with Session(engine) as session:
        yield session


SessionDep = Annotated[Session, Depends(get_db)]
BearerDep = Annotated[HTTPAuthorizationCredentials | None, Depends(optional_bearer)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_consumer_id(token: BearerDep) -> uuid.UUID:
    """
    Consumer id from the bearer token, or the placeholder consumer

    Args:
        token: bearer credentials, None when the header is absent

    Returns:
        uuid.UUID: the token's consumer, or ``ANONYMOUS_CONSUMER_ID``

    Raises:
        HTTPException: 401 when a token is present but cannot be decoded
    """
    if token is None:
        return settings.ANONYMOUS_CONSUMER_ID
    try:
        return consumer_id_from_token(token.credentials)
    except TokenError as e:
        raise _unauthorized(str(e))


def get_required_consumer_id(token: BearerDep) -> uuid.UUID:
    """
    Consumer id from a mandatory bearer token

    Raises:
        HTTPException: 401 when the header is absent or the token is invalid
    """
    if token is None:
        raise _unauthorized("Login required")
    try:
        return consumer_id_from_token(token.credentials)
    except TokenError as e:
        raise _unauthorized(str(e))


ConsumerId = Annotated[uuid.UUID, Depends(get_consumer_id)]
RequiredConsumerId = Annotated[uuid.UUID, Depends(get_required_consumer_id)]
