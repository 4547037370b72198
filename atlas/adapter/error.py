"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class ProviderError(AdapterError):
    """External provider error."""

    pass


class AuthenticationError(ProviderError):
    """The authentication provider rejected a sign-in or token.

    Attributes:
        code: Provider error code (e.g. ``auth/invalid-token``)
        description: Human-readable reason, shown to the user
    """

    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description
        super().__init__(f"{code}: {description}")


class SignInCancelledError(AuthenticationError):
    """The user abandoned the sign-in (e.g. closed the provider popup)."""

    def __init__(self, description: str = "Sign-in cancelled by user"):
        super().__init__("auth/popup-closed-by-user", description)


class GeocodingError(ProviderError):
    """The geocoding provider could not be reached or answered with an error."""

    pass
