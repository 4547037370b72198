"""Identity provider adapters.

The authentication provider runs the sign-in flow and hands the client a
signed identity token; the backend only verifies that token.
"""

from typing import Dict, Optional

import logfire

from atlas.adapter.error import AuthenticationError, SignInCancelledError
from atlas.config import AuthSettings
from atlas.domain.service.auth_service import IdentityProvider
from atlas.domain.value import AuthIdentity
from atlas.util.jwt import JWTError, TokenExpiredError, verify_token


class JWTIdentityProvider(IdentityProvider):
    """Verifies provider-issued JWT identity tokens with PyJWT."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize identity provider.

        Args:
            auth_settings: Authentication settings (secret, algorithm, audience)
        """
        self.auth_settings = auth_settings

    async def verify(self, token: str) -> AuthIdentity:
        """Verify a token and return the identity it carries.

        Raises:
            SignInCancelledError: If no token was produced
            AuthenticationError: If the token is expired or invalid
        """
        if not token or not token.strip():
            raise SignInCancelledError()

        with logfire.span("identity_provider.verify"):
            try:
                payload = verify_token(token.strip(), self.auth_settings)
            except TokenExpiredError as e:
                logfire.warn("Identity token expired")
                raise AuthenticationError("auth/id-token-expired", str(e))
            except JWTError as e:
                logfire.warn("Identity token rejected", error=str(e))
                raise AuthenticationError("auth/invalid-id-token", str(e))

            logfire.info("Identity token verified", user_id=payload.sub)
            return AuthIdentity(
                uid=payload.sub,
                email=payload.email,
                display_name=payload.name,
                photo_url=payload.picture,
                created_at=payload.created_at,
                last_sign_in_at=payload.last_sign_in_at,
            )


class MockIdentityProvider(IdentityProvider):
    """Mock identity provider for testing.

    Tokens are looked up in a registry instead of being verified. The
    token ``"cancelled"`` simulates a user closing the sign-in popup.
    """

    CANCELLED_TOKEN = "cancelled"

    def __init__(self, identities: Optional[Dict[str, AuthIdentity]] = None) -> None:
        """Initialize mock provider.

        Args:
            identities: Token to identity registry
        """
        self.identities: Dict[str, AuthIdentity] = dict(identities or {})

    def register(self, token: str, identity: AuthIdentity) -> str:
        """Make ``token`` resolve to ``identity``."""
        self.identities[token] = identity
        return token

    async def verify(self, token: str) -> AuthIdentity:
        if not token or token == self.CANCELLED_TOKEN:
            raise SignInCancelledError()
        identity: Optional[AuthIdentity] = self.identities.get(token)
        if identity is None:
            raise AuthenticationError("auth/invalid-id-token", "Invalid token")
        return identity
