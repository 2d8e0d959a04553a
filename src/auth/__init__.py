"""
Authentication module for the Trip Route backend.
Verifies bearer JWTs issued by the user service and exposes the caller's user id.
"""
from src.auth.dependencies import get_bearer_token, get_current_user_id
from src.auth.jwt import authenticate, create_access_token, verify_token

__all__ = [
    # Dependencies
    "get_bearer_token",
    "get_current_user_id",
    # JWT
    "authenticate",
    "create_access_token",
    "verify_token",
]
