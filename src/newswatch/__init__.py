"""News Watch package: poll a news page and announce entries not seen before."""

from __future__ import annotations

from .config import CheckerConfig
from .models import NewsEntry, Snapshot

__all__ = ["CheckerConfig", "NewsEntry", "Snapshot"]
