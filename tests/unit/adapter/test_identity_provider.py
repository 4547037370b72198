"""Unit tests for identity token verification."""

from datetime import datetime, timedelta, timezone

import pytest

from atlas.adapter.error import AuthenticationError, SignInCancelledError
from atlas.adapter.identity import JWTIdentityProvider, MockIdentityProvider
from atlas.config import AuthSettings
from atlas.domain.value import AuthIdentity
from atlas.util.jwt import create_token

SETTINGS = AuthSettings(provider_secret="test-secret-with-enough-bytes-for-hs256")
SIGNED_UP = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


class TestJWTIdentityProvider:
    """Tests for JWTIdentityProvider."""

    @pytest.mark.asyncio
    async def test_valid_token_yields_identity(self):
        # Arrange
        provider = JWTIdentityProvider(SETTINGS)
        token = create_token(
            "maria",
            SETTINGS,
            email="maria@example.com",
            name="Maria Souza",
            created_at=SIGNED_UP,
            last_sign_in_at=SIGNED_UP,
        )

        # Act
        identity = await provider.verify(token)

        # Assert
        assert identity.uid == "maria"
        assert identity.email == "maria@example.com"
        assert identity.display_name == "Maria Souza"
        assert identity.is_first_sign_in

    @pytest.mark.asyncio
    async def test_returning_user_is_not_first_sign_in(self):
        provider = JWTIdentityProvider(SETTINGS)
        token = create_token(
            "joao",
            SETTINGS,
            created_at=SIGNED_UP,
            last_sign_in_at=SIGNED_UP + timedelta(days=3),
        )

        identity = await provider.verify(token)

        assert not identity.is_first_sign_in

    @pytest.mark.asyncio
    async def test_expired_token(self):
        provider = JWTIdentityProvider(SETTINGS)
        token = create_token("maria", SETTINGS, expires_in=timedelta(seconds=-30))

        with pytest.raises(AuthenticationError) as exc_info:
            await provider.verify(token)

        assert exc_info.value.code == "auth/id-token-expired"

    @pytest.mark.asyncio
    async def test_token_signed_with_another_secret(self):
        provider = JWTIdentityProvider(SETTINGS)
        other = AuthSettings(provider_secret="another-secret-with-enough-bytes-too")
        token = create_token("maria", other)

        with pytest.raises(AuthenticationError) as exc_info:
            await provider.verify(token)

        assert exc_info.value.code == "auth/invalid-id-token"

    @pytest.mark.asyncio
    async def test_audience_is_enforced_when_configured(self):
        expected = SETTINGS.model_copy(update={"provider_audience": "atlas-civico"})
        wrong = SETTINGS.model_copy(update={"provider_audience": "someone-else"})
        provider = JWTIdentityProvider(expected)

        assert (await provider.verify(create_token("maria", expected))).uid == "maria"
        with pytest.raises(AuthenticationError):
            await provider.verify(create_token("maria", wrong))

    @pytest.mark.parametrize("token", ["", "   "])
    @pytest.mark.asyncio
    async def test_blank_token_means_cancelled(self, token):
        provider = JWTIdentityProvider(SETTINGS)

        with pytest.raises(SignInCancelledError):
            await provider.verify(token)

    @pytest.mark.asyncio
    async def test_garbage_token(self):
        provider = JWTIdentityProvider(SETTINGS)

        with pytest.raises(AuthenticationError) as exc_info:
            await provider.verify("not-a-jwt")

        assert not isinstance(exc_info.value, SignInCancelledError)


class TestMockIdentityProvider:
    """Tests for MockIdentityProvider."""

    @pytest.mark.asyncio
    async def test_registered_token(self):
        provider = MockIdentityProvider()
        identity = AuthIdentity(uid="maria")
        token = provider.register("t1", identity)

        assert await provider.verify(token) == identity

    @pytest.mark.asyncio
    async def test_cancelled_and_unknown_tokens(self):
        provider = MockIdentityProvider()

        with pytest.raises(SignInCancelledError):
            await provider.verify(MockIdentityProvider.CANCELLED_TOKEN)
        with pytest.raises(AuthenticationError):
            await provider.verify("unknown")
