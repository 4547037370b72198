"""Identity infrastructure providers."""

from dishka import Scope, provide

from atlas.adapter.identity import JWTIdentityProvider
from atlas.config import AuthSettings
from atlas.domain.service import IdentityProvider
from atlas.util.di.base import ProviderBase


class AuthenticationProvider(ProviderBase):
    """Identity component base."""

    __mock_component__ = "identity"


class ProdAuthenticationProvider(AuthenticationProvider):
    """Production identity provider verifying provider-issued JWTs."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_identity_provider(self, auth_settings: AuthSettings) -> IdentityProvider:
        """Provide identity token verifier."""
        return JWTIdentityProvider(auth_settings=auth_settings)
