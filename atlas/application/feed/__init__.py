"""Live issue feed."""

from .issue_feed import IssueFeed, Subscription, normalize_snapshot

__all__ = ["IssueFeed", "Subscription", "normalize_snapshot"]
