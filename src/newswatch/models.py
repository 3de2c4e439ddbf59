"""Domain models used across the application."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NewsEntry(BaseModel):
    """A single news item as listed on the watched page."""

    id: str
    title: str
    url: str = ""
    date: str = ""
    category: str = ""


class Snapshot(BaseModel):
    """The complete list of entries seen on the most recent successful check."""

    model_config = ConfigDict(populate_by_name=True)

    entries: List[NewsEntry] = Field(
        default_factory=list,
        validation_alias=AliasChoices("entries", "news"),
    )
    last_checked_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("lastCheckedAt", "last_checked_at", "lastChecked"),
        serialization_alias="lastCheckedAt",
    )

    def ids(self) -> set[str]:
        """Return the set of entry ids contained in the snapshot."""

        return {entry.id for entry in self.entries}

    def to_json(self) -> str:
        """Serialise the snapshot in the on-disk format."""

        return self.model_dump_json(by_alias=True, indent=2)


__all__ = ["NewsEntry", "Snapshot"]
