"""
Review sink for corrections that need a human (or agent) decision.

build_safe_fix() adds one item per review-tier decision. NeedsReviewQueue
keeps them in memory, grouped on demand; fixguard.core.reporting renders
the queue as text or JSON.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping


class ReviewSink(ABC):
    """Append-only receiver of review items."""

    @abstractmethod
    def add_item(self, item: Mapping[str, Any]) -> None:
        """Queue one review item."""


class NeedsReviewQueue(ReviewSink):
    """In-memory queue of review items."""

    def __init__(self):
        self._items: List[Dict[str, Any]] = []

    def add_item(self, item: Mapping[str, Any]) -> None:
        self._items.append(dict(item))

    @property
    def items(self) -> List[Dict[str, Any]]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def items_by_category(self) -> Dict[str, List[Dict[str, Any]]]:
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for item in self._items:
            grouped.setdefault(item.get('category', 'unknown'), []).append(item)
        return grouped

    def items_by_file(self) -> Dict[str, List[Dict[str, Any]]]:
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for item in self._items:
            grouped.setdefault(item.get('file_path', 'unknown'), []).append(item)
        return grouped

    def summary(self) -> Dict[str, Any]:
        """Counts of items, distinct files and categories, and mean confidence."""
        total = len(self._items)
        confidence = sum(item.get('confidence', 0.0) for item in self._items)
        return {
            'total_items': total,
            'unique_files': len({item.get('file_path', 'unknown') for item in self._items}),
            'unique_categories': len({item.get('category', 'unknown') for item in self._items}),
            'average_confidence': confidence / total if total else 0.0,
        }

    def clear(self) -> None:
        self._items = []
