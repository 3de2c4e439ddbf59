"""Slack notifications for newly detected entries."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

import requests
from pydantic import BaseModel

from newswatch.errors import DeliveryFailure
from newswatch.models import NewsEntry

__all__ = ["DeliveryResult", "SlackNotifier"]

logger = logging.getLogger(__name__)

DEFAULT_HEADING = "HANA 新着ニュース"
NO_DATE_LABEL = "日付なし"
DEFAULT_CATEGORY_LABEL = "NEWS"
DETAIL_BUTTON_LABEL = "詳細を見る"


class DeliveryResult(BaseModel):
    """Outcome of posting the notification for a single entry."""

    entry_id: str
    delivered: bool
    error: str | None = None


class SlackNotifier:
    """Posts one Block Kit message per entry to a Slack incoming webhook."""

    def __init__(
        self,
        webhook_url: str | None,
        *,
        heading: str = DEFAULT_HEADING,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.heading = heading
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def build_message(self, entry: NewsEntry) -> Dict[str, Any]:
        blocks: List[Dict[str, Any]] = [
            {
                "type": "header",
                "text": {"type": "plain_text", "text": self.heading, "emoji": True},
            },
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": f"*{entry.title}*"},
            },
            {
                "type": "context",
                "elements": [
                    {
                        "type": "mrkdwn",
                        "text": f"{entry.date or NO_DATE_LABEL} | {entry.category or DEFAULT_CATEGORY_LABEL}",
                    }
                ],
            },
        ]
        if entry.url:
            blocks.append(
                {
                    "type": "actions",
                    "elements": [
                        {
                            "type": "button",
                            "text": {
                                "type": "plain_text",
                                "text": DETAIL_BUTTON_LABEL,
                                "emoji": True,
                            },
                            "url": entry.url,
                            "action_id": "view_news",
                        }
                    ],
                }
            )
        return {"text": entry.title, "blocks": blocks}

    def send(self, entry: NewsEntry) -> None:
        """Deliver the message for ``entry`` or raise :class:`DeliveryFailure`."""

        try:
            response = self._session.post(
                self.webhook_url, json=self.build_message(entry), timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise DeliveryFailure(entry.id, str(exc)) from exc

        if not 200 <= response.status_code < 300:
            raise DeliveryFailure(entry.id, f"HTTP {response.status_code}")

    def notify(self, entries: Sequence[NewsEntry]) -> List[DeliveryResult]:
        """Send a notification per entry, continuing past individual failures."""

        if not self.enabled:
            logger.info("Webhook URL is not set. Skipping notification.")
            return []

        results: List[DeliveryResult] = []
        for entry in entries:
            try:
                self.send(entry)
            except DeliveryFailure as exc:
                logger.error("%s", exc)
                results.append(DeliveryResult(entry_id=entry.id, delivered=False, error=exc.reason))
                continue
            logger.info("Sent notification for: %s", entry.title)
            results.append(DeliveryResult(entry_id=entry.id, delivered=True))
        return results
