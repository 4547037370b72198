"""Unit tests for SessionStore and notifiers."""

import pytest

from atlas.application.session import (
    CallbackNotifier,
    CollectingNotifier,
    NotificationLevel,
    SessionStore,
)
from atlas.domain.value import UserRole
from tests.conftest import make_user


class TestSessionStore:
    """Tests for the observable session holder."""

    def test_listeners_see_every_change(self):
        store = SessionStore()
        seen = []
        store.subscribe(seen.append)
        maria = make_user()

        store.set_user(maria)
        store.clear()

        assert seen == [maria, None]

    def test_unsubscribe_is_idempotent(self):
        store = SessionStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)

        unsubscribe()
        unsubscribe()
        store.set_user(make_user())

        assert seen == []

    def test_admin_flag(self):
        store = SessionStore()
        assert store.is_admin is False
        assert store.is_authenticated is False

        store.set_user(make_user("admin", role=UserRole.ADMIN))

        assert store.is_admin is True
        assert store.is_authenticated is True


class TestNotifiers:
    """Tests for notifier implementations."""

    @pytest.mark.asyncio
    async def test_collecting_notifier(self):
        notifier = CollectingNotifier()

        await notifier.error("Erro", "detalhe")
        await notifier.success("Pronto")

        assert [n.level for n in notifier.notifications] == [
            NotificationLevel.ERROR,
            NotificationLevel.SUCCESS,
        ]
        assert notifier.notifications[1].message == ""

    @pytest.mark.asyncio
    async def test_callback_notifier_forwards(self):
        sent = []

        async def send(notification):
            sent.append(notification)

        await CallbackNotifier(send).error("Erro")

        assert sent[0].title == "Erro"
