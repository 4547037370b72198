"""Authentication domain service."""

from atlas.domain.value import AuthIdentity


class IdentityProvider:
    """Verifies identity tokens issued by the external authentication provider.

    The provider's own sign-in flow is out of scope; only the resulting
    identity is consumed.
    """

    async def verify(self, token: str) -> AuthIdentity:
        """Verify a provider token.

        Args:
            token: Provider-issued identity token

        Returns:
            The signed-in identity

        Raises:
            SignInCancelledError: If the user abandoned the sign-in
            AuthenticationError: If the token is invalid
        """
        raise NotImplementedError
