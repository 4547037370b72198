"""Integration tests for the PostgreSQL repositories.

These tests assume PostgreSQL is running and migrated (``alembic upgrade
head``). Run them with ``pytest -m integration``.
"""

from uuid import uuid4

import pytest

from atlas.domain.model import Comment
from atlas.domain.repository import IssueRepository, UserRepository
from atlas.domain.value import CommentId, IssueStatus, UserId, UserRole
from tests.conftest import make_user, raw_issue
from tests.harness import create_env_fixture

pytestmark = pytest.mark.integration

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})


def _comment(content: str) -> Comment:
    return Comment(
        id=CommentId(str(uuid4())),
        content=content,
        author="Maria Souza",
        author_id=UserId("maria"),
        author_role=UserRole.USER,
    )


class TestPostgresIssueRepository:
    """Integration tests for PostgresIssueRepository."""

    @pytest.mark.asyncio
    async def test_add_and_find(self, integration_env):
        # Arrange
        repo = await integration_env.get(IssueRepository)
        data = raw_issue()
        del data["reported_at"]

        # Act
        issue_id = await repo.add(data)
        issue = await repo.find_by_id(issue_id)

        # Assert
        assert issue is not None
        assert issue.title == "Lixo acumulado"
        assert issue.status == IssueStatus.RECEIVED
        assert issue.location.latitude == -16.01
        assert issue.reported_at is not None
        assert issue_id in [i.id for i in await repo.find_all()]

    @pytest.mark.asyncio
    async def test_updates_report_missing_issue(self, integration_env):
        repo = await integration_env.get(IssueRepository)
        missing = str(uuid4())

        assert await repo.set_upvotes(missing, 1) is False
        assert await repo.set_status(missing, IssueStatus.RESOLVED) is False
        assert await repo.delete(missing) is False
        assert await repo.append_comment(missing, _comment("oi")) is False

    @pytest.mark.asyncio
    async def test_comments_are_removed_by_id(self, integration_env):
        """Two comments with the same text: only the targeted one goes."""
        # Arrange
        repo = await integration_env.get(IssueRepository)
        issue_id = await repo.add(raw_issue())
        first, second = _comment("Mesmo texto"), _comment("Mesmo texto")
        await repo.append_comment(issue_id, first)
        await repo.append_comment(issue_id, second)

        # Act
        removed = await repo.remove_comment(issue_id, first.id)

        # Assert
        issue = await repo.find_by_id(issue_id)
        assert removed is True
        assert [c.id for c in issue.comments] == [second.id]
        assert await repo.remove_comment(issue_id, first.id) is False

    @pytest.mark.asyncio
    async def test_upvotes_status_and_delete(self, integration_env):
        repo = await integration_env.get(IssueRepository)
        issue_id = await repo.add(raw_issue(upvotes=3))

        assert await repo.set_upvotes(issue_id, 4) is True
        assert await repo.set_status(issue_id, IssueStatus.UNDER_REVIEW) is True
        issue = await repo.find_by_id(issue_id)
        assert issue.upvotes == 4
        assert issue.status == IssueStatus.UNDER_REVIEW

        assert await repo.delete(issue_id) is True
        assert await repo.find_by_id(issue_id) is None


class TestPostgresUserRepository:
    """Integration tests for PostgresUserRepository."""

    @pytest.mark.asyncio
    async def test_save_update_and_increment(self, integration_env):
        # Arrange
        repo = await integration_env.get(UserRepository)
        uid = f"user-{uuid4()}"
        await repo.save(make_user(uid))

        # Act
        await repo.save(make_user(uid, role=UserRole.ADMIN))
        await repo.increment_issues_reported(UserId(uid))

        # Assert
        user = await repo.find_by_id(UserId(uid))
        assert user is not None
        assert user.role == UserRole.ADMIN
        assert user.issues_reported == 1

    @pytest.mark.asyncio
    async def test_find_missing_user(self, integration_env):
        repo = await integration_env.get(UserRepository)

        assert await repo.find_by_id(UserId(f"user-{uuid4()}")) is None
