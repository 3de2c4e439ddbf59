"""Flat-file persistence for the snapshot of previously seen entries."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from newswatch.config import DEFAULT_SNAPSHOT_PATH
from newswatch.errors import StoreUnavailable
from newswatch.models import Snapshot

__all__ = ["SnapshotStore"]

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Read and overwrite the JSON snapshot kept between runs."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path else DEFAULT_SNAPSHOT_PATH

    def load(self) -> Snapshot:
        """Return the persisted snapshot.

        A missing file, bytes that are not UTF-8 JSON, or JSON that does not
        describe a snapshot all yield an empty :class:`Snapshot` so that a fresh
        checkout can always run.  Only unexpected I/O problems raise :class:`StoreUnavailable`.
        """

        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.info("No snapshot at %s; starting from an empty snapshot", self.path)
            return Snapshot()
        except OSError as exc:
            raise StoreUnavailable(f"Could not read snapshot {self.path}: {exc}") from exc

        try:
            data = json.loads(raw.decode("utf-8"))
            return Snapshot.model_validate(data)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Ignoring malformed snapshot %s: %s", self.path, exc)
            return Snapshot()

    def save(self, snapshot: Snapshot) -> None:
        """Replace the persisted snapshot with ``snapshot``.

        The payload is written to a temporary file next to the target and moved
        into place, so readers see either the old or the new snapshot.
        """

        payload = snapshot.to_json()
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as file:
                tmp_name = file.name
                file.write(payload)
                file.write("\n")
                file.flush()
                os.fsync(file.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreUnavailable(f"Could not write snapshot {self.path}: {exc}") from exc

        logger.info("Saved %d entries to %s", len(snapshot.entries), self.path)
