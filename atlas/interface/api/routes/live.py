"""Live map WebSocket.

One connection is one viewer. The server pushes ``issues``, ``markers``,
``camera``, ``upvotes``, ``notification`` and ``redirect`` events; the
viewer sends commands (``viewport``, ``toggle_category``, ``upvote``,
``expand_cluster``, ``select_issue``) as JSON objects.
"""

import asyncio
from typing import Any, Dict, Optional

from dishka import AsyncContainer
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import logfire
from pydantic import ValidationError

from atlas.adapter.error import AuthenticationError
from atlas.application.feed import IssueFeed
from atlas.application.session import (
    CallbackNotifier,
    MapSession,
    SessionStore,
    UpvoteReconciler,
)
from atlas.application.usecase.session import GetCurrentUserUseCase
from atlas.config import AuthSettings, MapSettings
from atlas.domain.model import AppUser
from atlas.domain.repository import KeyValueStore
from atlas.domain.service import IssueService
from atlas.domain.value import IssueId

router = APIRouter(tags=["live"])

# Close code sent when the identity token is rejected
WS_CLOSE_UNAUTHORIZED = 4401


async def _resolve_user(container: AsyncContainer, token: Optional[str]) -> Optional[AppUser]:
    async with container() as request_container:
        get_current_user_use_case = await request_container.get(GetCurrentUserUseCase)
        return await get_current_user_use_case.execute(token)


@router.websocket("/ws/map")
async def live_map(websocket: WebSocket, token: Optional[str] = None) -> None:
    """Stream the live map to one viewer.

    Args:
        websocket: Client connection
        token: Optional identity token; signed-out viewers can browse but
            are redirected to the login path when they upvote
    """
    container: AsyncContainer = websocket.app.state.dishka_container
    await websocket.accept()

    try:
        user = await _resolve_user(container, token)
    except AuthenticationError as e:
        logfire.warn("Live map token rejected", code=e.code)
        await websocket.close(code=WS_CLOSE_UNAUTHORIZED, reason=e.description)
        return

    feed = await container.get(IssueFeed)
    map_settings = await container.get(MapSettings)
    auth_settings = await container.get(AuthSettings)
    key_value_store = await container.get(KeyValueStore)
    session_store = SessionStore(user)

    send_lock = asyncio.Lock()

    async def send(event: Dict[str, Any]) -> None:
        async with send_lock:
            await websocket.send_json(event)

    async def write_upvotes(issue_id: IssueId, count: int) -> None:
        # Each write gets its own request scope (and transaction)
        async with container() as request_container:
            issue_service = await request_container.get(IssueService)
            await issue_service.set_upvotes(issue_id, count)

    def build_reconciler(notifier: CallbackNotifier) -> UpvoteReconciler:
        return UpvoteReconciler(
            session_store=session_store,
            ledger_store=key_value_store,
            writer=write_upvotes,
            notifier=notifier,
            login_path=auth_settings.login_path,
        )

    session = MapSession(
        feed=feed,
        session_store=session_store,
        reconciler_factory=build_reconciler,
        send=send,
        settings=map_settings,
    )

    with logfire.span("live_map", user_id=user.uid if user else None):
        try:
            await session.start()
            while True:
                try:
                    message = await websocket.receive_json()
                    await session.handle(message)
                except (ValidationError, ValueError) as e:
                    logfire.warn("Invalid live map command", error=str(e))
                    await send({"type": "error", "detail": "Invalid command"})
        except WebSocketDisconnect:
            logfire.info("Live map viewer disconnected")
        finally:
            await session.close()
