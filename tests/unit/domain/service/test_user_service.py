"""Unit tests for UserService."""

import pytest

from atlas.domain.error import NotFoundError
from atlas.domain.service import UserService, display_name_for
from atlas.domain.value import AuthIdentity, UserId, UserRole
from atlas.persistence.repository.inmemory import InMemoryUserRepository
from tests.conftest import make_user
from tests.harness import create_env_fixture

unit_env = create_env_fixture()


class TestDisplayName:
    """Tests for display_name_for."""

    @pytest.mark.parametrize(
        "display_name,email,expected",
        [
            ("Maria Souza", "maria@example.com", "Maria Souza"),
            ("  ", "joao.silva@example.com", "joao.silva"),
            (None, None, "Usuário"),
            (None, "@example.com", "Usuário"),
        ],
    )
    def test_fallbacks(self, display_name, email, expected):
        identity = AuthIdentity(uid="u", display_name=display_name, email=email)

        assert display_name_for(identity) == expected


class TestGetOrCreate:
    """Tests for UserService.get_or_create."""

    @pytest.mark.asyncio
    async def test_creates_profile_on_first_use(self, unit_env):
        """A new identity gets a plain user profile with no reports."""
        # Arrange
        user_service = await unit_env.get(UserService)
        identity = AuthIdentity(
            uid="nova", email="nova@example.com", photo_url="https://example.com/n.png"
        )

        # Act
        user = await user_service.get_or_create(identity)

        # Assert
        assert user.uid == "nova"
        assert user.name == "nova"
        assert user.role == UserRole.USER
        assert user.issues_reported == 0
        assert user.photo_url == "https://example.com/n.png"
        assert await user_service.find_by_id(UserId("nova")) == user

    @pytest.mark.asyncio
    async def test_existing_profile_is_not_overwritten(self, unit_env):
        """Later sign-ins keep the stored role and counters."""
        users = await unit_env.get(InMemoryUserRepository)
        await users.save(make_user("admin", role=UserRole.ADMIN, issues_reported=7))
        user_service = await unit_env.get(UserService)

        user = await user_service.get_or_create(
            AuthIdentity(uid="admin", display_name="Outro Nome")
        )

        assert user.role == UserRole.ADMIN
        assert user.issues_reported == 7
        assert user.name == "Admin"

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, unit_env):
        user_service = await unit_env.get(UserService)

        with pytest.raises(NotFoundError):
            await user_service.get_by_id(UserId("ghost"))
