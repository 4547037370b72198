"""Per-client session state: signed-in user, upvotes and the live map."""

from .map_session import MapSession, map_command_adapter
from .notification import (
    CallbackNotifier,
    CollectingNotifier,
    LoggingNotifier,
    Notification,
    NotificationLevel,
    Notifier,
)
from .session_service import SessionService, SessionState, tutorial_key
from .session_store import SessionStore
from .upvote import (
    UpvoteLedger,
    UpvoteOutcome,
    UpvoteReconciler,
    UpvoteWriter,
    ledger_key,
)

__all__ = [
    "CallbackNotifier",
    "CollectingNotifier",
    "LoggingNotifier",
    "MapSession",
    "Notification",
    "NotificationLevel",
    "Notifier",
    "SessionService",
    "SessionState",
    "SessionStore",
    "UpvoteLedger",
    "UpvoteOutcome",
    "UpvoteReconciler",
    "UpvoteWriter",
    "ledger_key",
    "map_command_adapter",
    "tutorial_key",
]
