"""Service layer entry points for News Watch."""

from __future__ import annotations

from .extractor import ExtractionStrategy, NewsExtractor, SelectorStrategy  # noqa: F401
from .notifier import DeliveryResult, SlackNotifier  # noqa: F401
from .reconciler import reconcile  # noqa: F401
from .store import SnapshotStore  # noqa: F401

__all__ = [
    "DeliveryResult",
    "ExtractionStrategy",
    "NewsExtractor",
    "SelectorStrategy",
    "SlackNotifier",
    "SnapshotStore",
    "reconcile",
]
