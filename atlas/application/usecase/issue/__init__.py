"""Issue use cases."""

from .delete_issue import DeleteIssueRequest, DeleteIssueResponse, DeleteIssueUseCase
from .get_issue import GetIssueUseCase
from .list_issues import (
    CategoriesResponse,
    ListIssuesRequest,
    ListIssuesResponse,
    ListIssuesUseCase,
)
from .report_issue import ReportIssueRequest, ReportIssueUseCase
from .update_status import UpdateIssueStatusRequest, UpdateIssueStatusUseCase

__all__ = [
    "CategoriesResponse",
    "DeleteIssueRequest",
    "DeleteIssueResponse",
    "DeleteIssueUseCase",
    "GetIssueUseCase",
    "ListIssuesRequest",
    "ListIssuesResponse",
    "ListIssuesUseCase",
    "ReportIssueRequest",
    "ReportIssueUseCase",
    "UpdateIssueStatusRequest",
    "UpdateIssueStatusUseCase",
]
