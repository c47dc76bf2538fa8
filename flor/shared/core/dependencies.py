"""
Common FastAPI dependencies for the Flor application.
Resolves the authenticated Supabase user from the bearer token.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from ..config.settings import get_settings
from ..utils.logging import user_id_var
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

# Security scheme for OpenAPI documentation
security = HTTPBearer(auto_error=False)


class CurrentUser:
    """User information extracted from a Supabase access token."""

    def __init__(
        self,
        user_id: str,
        email: Optional[str] = None,
        token_payload: Optional[Dict[str, Any]] = None
    ):
        self.user_id = user_id
        self.email = email
        self.token_payload = token_payload or {}


def verify_supabase_token(token: str) -> Dict[str, Any]:
    """
    Verify a Supabase-issued JWT and return its payload.

    Supabase signs access tokens with the project JWT secret (HS256) and
    sets the audience to "authenticated".

    Raises:
        AuthenticationError: If the token is invalid, expired or has no subject
    """
    settings = get_settings()

    try:
        payload = jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        logger.warning("Access token has expired")
        raise AuthenticationError("Token expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationError("Could not validate credentials")

    if not payload.get("sub"):
        logger.warning("Token missing subject (user_id)")
        raise AuthenticationError("Could not validate credentials")

    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> CurrentUser:
    """
    Get current authenticated user from the Authorization header.

    Raises:
        AuthenticationError: If user is not authenticated
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("User not authenticated")

    payload = verify_supabase_token(credentials.credentials)
    user = CurrentUser(
        user_id=payload["sub"],
        email=payload.get("email"),
        token_payload=payload,
    )

    user_id_var.set(user.user_id)
    logger.debug(f"Current user retrieved: {user.user_id}")
    return user
