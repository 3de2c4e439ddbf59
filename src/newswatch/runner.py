"""One check run: load the snapshot, read the page, announce and persist."""

from __future__ import annotations

import datetime
import logging
from typing import List

from pydantic import BaseModel, Field

from newswatch.config import CheckerConfig
from newswatch.errors import ExtractionEmpty, StoreUnavailable
from newswatch.models import NewsEntry, Snapshot
from newswatch.services.extractor import NewsExtractor
from newswatch.services.notifier import DeliveryResult, SlackNotifier
from newswatch.services.reconciler import reconcile
from newswatch.services.store import SnapshotStore

__all__ = ["RunReport", "run_check"]

logger = logging.getLogger(__name__)


class RunReport(BaseModel):
    """Summary of a completed check run."""

    checked_at: datetime.datetime
    total_entries: int
    new_entries: List[NewsEntry] = Field(default_factory=list)
    deliveries: List[DeliveryResult] = Field(default_factory=list)
    dry_run: bool = False


def run_check(
    config: CheckerConfig,
    *,
    dry_run: bool = False,
    store: SnapshotStore | None = None,
    extractor: NewsExtractor | None = None,
    notifier: SlackNotifier | None = None,
    now: datetime.datetime | None = None,
) -> RunReport:
    """Run a single check against the configured news page.

    Raises :class:`~newswatch.errors.ExtractionEmpty` without touching the
    snapshot when the page yields no entries.  Fetch and save failures propagate
    to the caller; delivery failures are recorded in the returned report.
    """

    store = store or SnapshotStore(config.data_file)
    extractor = extractor or NewsExtractor(config)

    try:
        previous = store.load()
    except StoreUnavailable as exc:
        logger.warning("%s; treating it as an empty snapshot", exc)
        previous = Snapshot()

    current = extractor.extract()
    if not current:
        raise ExtractionEmpty("No news items found. The page structure may have changed.")

    new_items = reconcile(previous, current)
    logger.info("New items found: %d", len(new_items))

    deliveries: List[DeliveryResult] = []
    if new_items:
        logger.info("New news items:")
        for item in new_items:
            logger.info("  - %s: %s", item.date, item.title)

        if dry_run:
            logger.info("Dry run: skipping notifications")
        else:
            notifier = notifier or SlackNotifier(
                config.webhook_url(),
                heading=config.notification_heading,
                timeout=config.webhook_timeout,
            )
            deliveries = notifier.notify(new_items)
    else:
        logger.info("No new news items.")

    checked_at = now or datetime.datetime.now(datetime.UTC)
    store.save(Snapshot(entries=current, last_checked_at=checked_at))

    return RunReport(
        checked_at=checked_at,
        total_entries=len(current),
        new_entries=new_items,
        deliveries=deliveries,
        dry_run=dry_run,
    )
