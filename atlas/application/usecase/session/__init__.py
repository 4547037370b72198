"""Session use cases."""

from .complete_tutorial import (
    CompleteTutorialRequest,
    CompleteTutorialResponse,
    CompleteTutorialUseCase,
)
from .get_current_user import GetCurrentUserUseCase
from .restore_session import RestoreSessionRequest, RestoreSessionUseCase

__all__ = [
    "CompleteTutorialRequest",
    "CompleteTutorialResponse",
    "CompleteTutorialUseCase",
    "GetCurrentUserUseCase",
    "RestoreSessionRequest",
    "RestoreSessionUseCase",
]
