"""Upvote use cases."""

from .get_upvotes import GetUpvotedIssuesUseCase, UpvotedIssuesResponse
from .upvote_issue import UpvoteIssueRequest, UpvoteIssueResponse, UpvoteIssueUseCase

__all__ = [
    "GetUpvotedIssuesUseCase",
    "UpvoteIssueRequest",
    "UpvoteIssueResponse",
    "UpvoteIssueUseCase",
    "UpvotedIssuesResponse",
]
