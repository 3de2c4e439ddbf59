"""Exceptions raised by the news watcher."""

from __future__ import annotations

__all__ = [
    "DeliveryFailure",
    "ExtractionEmpty",
    "ExtractionTimeout",
    "FetchFailure",
    "NewsWatchError",
    "StoreUnavailable",
]


class NewsWatchError(Exception):
    """Base class for all errors raised by :mod:`newswatch`."""


class StoreUnavailable(NewsWatchError):
    """The snapshot file could not be read or written."""


class ExtractionEmpty(NewsWatchError):
    """The news page yielded no entries; the page structure may have changed."""


class FetchFailure(NewsWatchError):
    """The news page could not be retrieved."""


class ExtractionTimeout(FetchFailure):
    """The news page did not load within the configured time bound."""


class DeliveryFailure(NewsWatchError):
    """A single notification could not be delivered."""

    def __init__(self, entry_id: str, reason: str) -> None:
        super().__init__(f"Failed to deliver notification for {entry_id}: {reason}")
        self.entry_id = entry_id
        self.reason = reason
