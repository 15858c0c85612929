"""
Bearer token helpers

Tokens are issued by the identity provider and signed with the shared
``SECRET_KEY``. This service only decodes them; ``create_access_token`` exists
for local development and tests.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from airctt.core.config import settings

ALGORITHM = "HS256"


class TokenError(Exception):
    pass


def create_access_token(subject: str | Any, expires_delta: timedelta) -> str:
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {"exp": expire, "sub": str(subject)}
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def consumer_id_from_token(token: str) -> uuid.UUID:
    """
    Resolve the consumer UUID carried in a token's ``sub`` claim

    Args:
        token: raw JWT string

    Returns:
        The consumer id

    Raises:
        TokenError: when the token is expired, malformed or has no UUID subject
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise TokenError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise TokenError("Invalid token") from e

    sub = payload.get("sub")
    if not sub:
        raise TokenError("Token missing subject")
    try:
        return uuid.UUID(str(sub))
    except ValueError as e:
        raise TokenError("Invalid subject in token") from e
