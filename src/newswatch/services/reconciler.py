"""Detection of entries that were not present in the previous snapshot."""

from __future__ import annotations

from typing import List, Sequence

from newswatch.models import NewsEntry, Snapshot

__all__ = ["reconcile"]


def reconcile(previous: Snapshot, candidates: Sequence[NewsEntry]) -> List[NewsEntry]:
    """Return the candidates whose id does not appear in ``previous``.

    The result keeps the order of ``candidates``.  Entries that were in the
    previous snapshot but are missing from ``candidates`` are not reported, and an
    empty previous snapshot makes every candidate new.
    """

    known_ids = previous.ids()
    return [entry for entry in candidates if entry.id not in known_ids]
