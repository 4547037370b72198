"""JWT token utilities for identity-provider tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from pydantic import BaseModel

from atlas.config import AuthSettings


class TokenPayload(BaseModel):
    """Claims of an identity token issued by the authentication provider."""

    sub: str
    email: str | None = None
    name: str | None = None
    picture: str | None = None
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


class TokenExpiredError(JWTError):
    """The token's ``exp`` is in the past."""

    pass


def create_token(
    sub: str,
    settings: AuthSettings,
    email: Optional[str] = None,
    name: Optional[str] = None,
    picture: Optional[str] = None,
    created_at: Optional[datetime] = None,
    last_sign_in_at: Optional[datetime] = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Create an identity token (development and tests only).

    In production tokens are minted by the authentication provider; this
    mirrors their shape with the configured shared secret.

    Args:
        sub: Provider user ID
        settings: Authentication settings
        email: Email claim
        name: Display name claim
        picture: Photo URL claim
        created_at: Account creation time
        last_sign_in_at: Last sign-in time
        expires_in: Token lifetime

    Returns:
        Encoded JWT token
    """
    payload: Dict[str, Any] = {
        "sub": sub,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if settings.provider_audience:
        payload["aud"] = settings.provider_audience
    optional_claims = {
        "email": email,
        "name": name,
        "picture": picture,
        "created_at": int(created_at.timestamp()) if created_at else None,
        "last_sign_in_at": int(last_sign_in_at.timestamp()) if last_sign_in_at else None,
    }
    payload.update({k: v for k, v in optional_claims.items() if v is not None})

    return jwt.encode(
        payload, settings.provider_secret, algorithm=settings.provider_algorithm
    )


def verify_token(token: str, settings: AuthSettings) -> TokenPayload:
    """Verify and decode a provider identity token.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Token payload if valid

    Raises:
        TokenExpiredError: If the token is expired
        JWTError: If the token is otherwise invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.provider_secret,
            algorithms=[settings.provider_algorithm],
            audience=settings.provider_audience,
            options={"verify_aud": settings.provider_audience is not None},
        )
        return TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")
