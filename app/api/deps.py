from typing import Optional

from fastapi import Request

from app.core.security import TokenVerifier, parse_bearer
from app.models.auth import Claims
from app.services.chat_service import ChatService


def get_chat_service(request: Request) -> ChatService:
    """Chat service attached to the running app"""
    return request.app.state.chat_service


def require_claims(request: Request) -> Optional[Claims]:
    """
    Verify the caller's bearer token.

    Returns None when authentication is disabled for the app; otherwise
    raises AuthenticationError for a missing or invalid token.
    """
    verifier: Optional[TokenVerifier] = request.app.state.token_verifier
    if verifier is None:
        return None
    token = parse_bearer(request.headers.get("Authorization"))
    return verifier.verify(token)
