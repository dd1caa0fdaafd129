"""
Bearer-token verification for tokens issued by the identity provider
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from fastapi import Header
import jwt

from creator_api.core.config import Settings, settings
from creator_api.core.errors import Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity resolved from a verified access token"""

    id: str
    email: str = ""
    display_name: str = "User"


def _display_name(payload: Dict[str, Any], email: str) -> str:
    metadata = payload.get("user_metadata") or {}
    full_name = metadata.get("full_name") if isinstance(metadata, dict) else None
    if full_name:
        return str(full_name)
    if email:
        return email.split("@")[0]
    return "User"


def decode_access_token(token: str, config: Settings = settings) -> AuthenticatedUser:
    """
    Verify a JWT and extract the caller identity

    Args:
        token: Raw JWT (without the "Bearer " prefix)
        config: Settings holding the signing secret and algorithm

    Returns:
        AuthenticatedUser for the token subject

    Raises:
        Unauthorized: missing, expired, badly signed or subject-less token
    """
    if not token or not config.JWT_SECRET_KEY:
        raise Unauthorized()

    options = {"require": ["sub"]}
    if not config.JWT_AUDIENCE:
        options["verify_aud"] = False

    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_AUDIENCE or None,
            options=options,
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e.__class__.__name__}")
        raise Unauthorized()

    subject = str(payload.get("sub") or "").strip()
    if not subject:
        raise Unauthorized()

    email = str(payload.get("email") or "")
    return AuthenticatedUser(id=subject, email=email, display_name=_display_name(payload, email))


def parse_bearer(authorization: Optional[str]) -> str:
    """Return the token from an Authorization header, or an empty string"""
    value = (authorization or "").strip()
    if not value.lower().startswith("bearer "):
        return ""
    return value[7:].strip()


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    Dependency resolving the authenticated caller
    """
    return decode_access_token(parse_bearer(authorization))
