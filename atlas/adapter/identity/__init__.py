"""Identity provider adapters."""

from .provider import JWTIdentityProvider, MockIdentityProvider

__all__ = ["JWTIdentityProvider", "MockIdentityProvider"]
