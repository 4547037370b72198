"""Category filtering for the issue map."""

from collections.abc import Collection, Iterable
from typing import List

from atlas.domain.model import Issue

from .base import Service


def distinct_categories(issues: Iterable[Issue]) -> List[str]:
    """Distinct categories in order of first appearance."""
    return list(dict.fromkeys(issue.category for issue in issues))


def filter_by_categories(issues: Iterable[Issue], categories: Collection[str]) -> List[Issue]:
    """Issues whose category is selected; an empty selection keeps everything."""
    if not categories:
        return list(issues)
    return [issue for issue in issues if issue.category in categories]


class CategoryFilter(Service):
    """Per-viewer category selection.

    Business rules:
    - The first time categories appear, every category is selected
    - Categories that show up later are not selected automatically
    - An empty selection hides nothing
    """

    def __init__(self) -> None:
        self.categories: List[str] = []
        self.selected: set[str] = set()

    def update(self, issues: Iterable[Issue]) -> List[str]:
        """Refresh the known categories from the latest issue set.

        Args:
            issues: Current issue snapshot

        Returns:
            Distinct categories in order of first appearance
        """
        categories = distinct_categories(issues)
        if not self.categories and categories:
            self.selected = set(categories)
        self.categories = categories
        return categories

    def toggle(self, category: str) -> bool:
        """Flip one category; returns whether it is now selected."""
        if category in self.selected:
            self.selected.discard(category)
            return False
        self.selected.add(category)
        return True

    def select(self, categories: Iterable[str]) -> None:
        """Replace the selection."""
        self.selected = set(categories)

    def clear(self) -> None:
        """Deselect everything (which shows every issue)."""
        self.selected = set()

    def is_visible(self, issue: Issue) -> bool:
        """Whether an issue passes the filter."""
        return not self.selected or issue.category in self.selected

    def apply(self, issues: Iterable[Issue]) -> List[Issue]:
        """Visible issues, in input order."""
        return filter_by_categories(issues, self.selected)
