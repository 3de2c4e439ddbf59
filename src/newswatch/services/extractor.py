"""Fetching the news page and reading entries out of its markup."""

from __future__ import annotations

import abc
import logging
from typing import Iterable, Iterator, List, Sequence
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup, Tag
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from newswatch.config import CheckerConfig, SelectorConfig
from newswatch.errors import ExtractionTimeout, FetchFailure
from newswatch.models import NewsEntry

__all__ = [
    "ExtractionStrategy",
    "NewsExtractor",
    "SelectorStrategy",
    "dedupe_entries",
    "fetch_with_playwright",
    "fetch_with_requests",
    "make_entry_id",
]

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "ja,en-US;q=0.9,en;q=0.8",
}


def fetch_with_playwright(url: str, *, config: CheckerConfig) -> str:
    """Render ``url`` in a headless browser and return the resulting HTML."""

    with sync_playwright() as playwright:
        browser_type = getattr(playwright, config.browser, None)
        if browser_type is None:
            raise FetchFailure(f"Unknown Playwright browser: {config.browser}")

        try:
            browser = browser_type.launch(headless=True)
        except PlaywrightError as exc:
            raise FetchFailure(f"Could not launch {config.browser}: {exc}") from exc

        try:
            context = browser.new_context(
                user_agent=config.user_agent, extra_http_headers=DEFAULT_HEADERS
            )
            page = context.new_page()
            page.goto(
                url, wait_until="networkidle", timeout=config.navigation_timeout_ms
            )
            page.wait_for_timeout(config.settle_ms)
            return page.content()
        except PlaywrightTimeoutError as exc:
            raise ExtractionTimeout(
                f"Timed out after {config.navigation_timeout_ms} ms loading {url}"
            ) from exc
        except PlaywrightError as exc:
            raise FetchFailure(f"Failed to load {url}: {exc}") from exc
        finally:
            browser.close()


def fetch_with_requests(
    url: str, *, config: CheckerConfig, session: requests.Session | None = None
) -> str:
    """Fetch ``url`` with a plain HTTP request and return the response body."""

    http = session or requests.Session()
    headers = {"User-Agent": config.user_agent, **DEFAULT_HEADERS}
    timeout = config.navigation_timeout_ms / 1000
    try:
        response = http.get(url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except requests.Timeout as exc:
        raise ExtractionTimeout(f"Timed out after {timeout:g} s loading {url}") from exc
    except requests.RequestException as exc:
        raise FetchFailure(f"Failed to load {url}: {exc}") from exc
    return response.text


def make_entry_id(url: str, date: str, title: str) -> str:
    """Return a stable identifier for an entry.

    The detail URL identifies an entry on its own; entries without a link fall
    back to the date and title shown on the page.
    """

    if url:
        return url
    return f"{date}|{title}"


def dedupe_entries(entries: Iterable[NewsEntry]) -> List[NewsEntry]:
    """Drop entries whose id was already seen, keeping the first occurrence."""

    seen: set[str] = set()
    unique: List[NewsEntry] = []
    for entry in entries:
        if entry.id in seen:
            logger.debug("Dropping duplicate entry %s", entry.id)
            continue
        seen.add(entry.id)
        unique.append(entry)
    return unique


class ExtractionStrategy(abc.ABC):
    """Turns the HTML of the news page into an ordered list of entries."""

    @abc.abstractmethod
    def extract(self, html: str, base_url: str) -> List[NewsEntry]:
        """Return the entries listed in ``html`` in page order."""


class SelectorStrategy(ExtractionStrategy):
    """Reads entries by probing lists of CSS selectors.

    Each field has a list of candidate selectors which are tried in order; the
    first one that yields text wins.  Markup that matches none of the item
    selectors produces an empty list.
    """

    def __init__(self, selectors: SelectorConfig | None = None, max_title_length: int = 200) -> None:
        self.selectors = selectors or SelectorConfig()
        self.max_title_length = max_title_length

    def extract(self, html: str, base_url: str) -> List[NewsEntry]:
        soup = BeautifulSoup(html, "lxml")
        items = self._select_items(soup)
        return list(self._iter_entries(items, base_url))

    def _select_items(self, soup: BeautifulSoup) -> List[Tag]:
        for selector in self.selectors.items:
            found = soup.select(selector)
            if found:
                logger.debug("Matched %d items with selector %r", len(found), selector)
                return found
        logger.warning("None of the item selectors matched: %s", ", ".join(self.selectors.items))
        return []

    def _iter_entries(self, items: Sequence[Tag], base_url: str) -> Iterator[NewsEntry]:
        for item in items:
            title = self._first_text(item, self.selectors.title)
            if not title:
                continue

            url = self._find_url(item, base_url)
            date_el = self._first_match(item, self.selectors.date)
            category_el = self._first_match(item, self.selectors.category)
            date = date_el.get_text(" ", strip=True) if date_el is not None else ""
            category = ""
            # ``span:first-child`` and ``span:last-child`` hit the same element when the
            # date line holds a single span.
            if category_el is not None and category_el is not date_el:
                category = category_el.get_text(" ", strip=True)

            title = title[: self.max_title_length]
            yield NewsEntry(
                id=make_entry_id(url, date, title),
                title=title,
                url=url,
                date=date,
                category=category,
            )

    def _find_url(self, item: Tag, base_url: str) -> str:
        anchors: List[Tag] = []
        if item.name == "a" and item.get("href"):
            anchors.append(item)
        for selector in self.selectors.link:
            anchor = item.select_one(selector)
            if anchor is not None:
                anchors.append(anchor)

        for anchor in anchors:
            href = str(anchor.get("href") or "").strip()
            if not href:
                continue
            absolute = urljoin(base_url, href)
            if urlparse(absolute).scheme in {"http", "https"}:
                return absolute.split("#", 1)[0]
        return ""

    @staticmethod
    def _first_match(item: Tag, selectors: Sequence[str]) -> Tag | None:
        for selector in selectors:
            element = item.select_one(selector)
            if element is not None and element.get_text(strip=True):
                return element
        return None

    def _first_text(self, item: Tag, selectors: Sequence[str]) -> str:
        element = self._first_match(item, selectors)
        if element is None:
            return ""
        return element.get_text(" ", strip=True)


class NewsExtractor:
    """Fetches the configured news page and extracts its entries."""

    def __init__(
        self,
        config: CheckerConfig,
        strategy: ExtractionStrategy | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        self.strategy = strategy or SelectorStrategy(config.selectors, config.max_title_length)
        self._session = session

    # Exposed for tests that replace the network layer.
    fetch_with_playwright = staticmethod(fetch_with_playwright)
    fetch_with_requests = staticmethod(fetch_with_requests)

    def fetch_html(self) -> str:
        url = self.config.news_url
        logger.info("Fetching news from %s...", url)
        if self.config.use_playwright:
            return self.fetch_with_playwright(url, config=self.config)
        return self.fetch_with_requests(url, config=self.config, session=self._session)

    def extract(self) -> List[NewsEntry]:
        """Return the de-duplicated entries currently listed on the page."""

        html = self.fetch_html()
        entries = dedupe_entries(self.strategy.extract(html, self.config.news_url))
        logger.info("Found %d news items", len(entries))
        return entries
