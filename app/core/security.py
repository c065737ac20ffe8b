"""
Bearer-token verification.

Tokens are decoded once at the HTTP boundary into a typed ``Claims`` value;
handlers receive that value and never look at the raw token payload.
"""

from datetime import datetime, timezone
from typing import Optional

import jwt

from app.core.exceptions import AuthenticationError
from app.core.logging import get_logger
from app.models.auth import Claims

logger = get_logger(__name__)


class TokenVerifier:
    """Verifies HS256-signed JWTs issued by the shop's login endpoint."""

    def __init__(self, secret: Optional[str], algorithm: str = "HS256"):
        self.secret = secret
        self.algorithm = algorithm

    def verify(self, token: str) -> Claims:
        """
        Decode and validate a token.

        Args:
            token: Raw JWT (without the ``Bearer`` prefix)

        Returns:
            Claims carried by the token

        Raises:
            AuthenticationError: If the token is invalid, expired or
                verification is not configured
        """
        if not self.secret:
            raise AuthenticationError("Token verification is not configured")

        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise AuthenticationError("Invalid token")

        is_admin = payload.get("is_admin", False)
        return Claims(
            subject_id=str(payload["sub"]),
            username=str(payload.get("username", "")),
            is_admin=is_admin is True,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


def parse_bearer(header: Optional[str]) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header:
        raise AuthenticationError("Authorization header is missing")
    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationError("Invalid token")
    return token
