"""
Tests for bearer token verification.
"""
import pytest
from datetime import datetime, timedelta

import jwt

from src.auth.config import auth_settings
from src.auth.jwt import (
    TokenExpiredError,
    TokenInvalidError,
    authenticate,
    create_access_token,
    user_id_from_payload,
)


def _sign(claims, secret=None):
    return jwt.encode(
        {**claims, "exp": datetime.utcnow() + timedelta(minutes=5)},
        secret or auth_settings.jwt_secret_key,
        algorithm=auth_settings.jwt_algorithm,
    )


def test_minted_token_authenticates():
    assert authenticate(create_access_token("user-1")) == "user-1"


def test_user_id_claims_are_tried_in_order():
    assert user_id_from_payload({"id": "from-id", "sub": "from-sub"}) == "from-id"
    assert user_id_from_payload({"userId": "", "sub": "from-sub"}) == "from-sub"
    assert authenticate(_sign({"id": 42})) == "42"


def test_token_without_user_id_is_invalid():
    with pytest.raises(TokenInvalidError):
        authenticate(_sign({"email": "a@example.com"}))


def test_expired_token():
    token = create_access_token("user-1", lifetime=timedelta(minutes=-5))

    with pytest.raises(TokenExpiredError):
        authenticate(token)


def test_token_signed_with_another_secret_is_invalid():
    with pytest.raises(TokenInvalidError):
        authenticate(_sign({"userId": "user-1"}, secret="not-the-shared-secret"))


@pytest.mark.asyncio
async def test_expired_token_is_unauthenticated(client):
    token = create_access_token("user-1", lifetime=timedelta(minutes=-5))

    response = await client.get("/api/itineraries", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json() == {"code": "UNAUTHENTICATED", "message": "Token has expired"}


@pytest.mark.asyncio
async def test_sub_claim_identifies_caller(client):
    token = _sign({"sub": "user-9"})

    response = await client.get("/api/itineraries", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["total"] == 0
