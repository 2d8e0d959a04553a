"""
Bearer token handling.

Tokens are issued by the user service and signed with the shared secret; this
service only verifies them and reads the caller's id. create_access_token mints
tokens in the same shape for local tooling and tests.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import jwt

from src.auth.config import auth_settings

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """A bearer token that does not identify a caller."""


class TokenExpiredError(TokenError):
    pass


class TokenInvalidError(TokenError):
    pass


def create_access_token(user_id: str, lifetime: Optional[timedelta] = None, **claims: Any) -> str:
    """Sign a user-service style token carrying the id in `userId`."""
    issued_at = datetime.utcnow()
    if lifetime is None:
        lifetime = timedelta(minutes=auth_settings.access_token_expire_minutes)

    payload = {
        **claims,
        "userId": user_id,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(payload, auth_settings.jwt_secret_key, algorithm=auth_settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """
    Claims of a correctly signed, unexpired token.

    Raises:
        TokenExpiredError: signature is valid but `exp` has passed
        TokenInvalidError: malformed token, wrong secret or algorithm
    """
    try:
        return jwt.decode(token, auth_settings.jwt_secret_key, algorithms=[auth_settings.jwt_algorithm])
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise TokenInvalidError(f"Invalid token: {e}") from e


def user_id_from_payload(payload: dict[str, Any]) -> str:
    """The user service has used several claim names over time; take the first one set."""
    for claim in auth_settings.user_id_claims:
        value = payload.get(claim)
        if value:
            return str(value)
    raise TokenInvalidError("Token has no user identifier")


def authenticate(token: str) -> str:
    """User id carried by a bearer token."""
    return user_id_from_payload(verify_token(token))
