"""Configuration models and helpers for the news watcher."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, ValidationError

__all__ = [
    "CheckerConfig",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_ENV_PATH",
    "DEFAULT_SNAPSHOT_PATH",
    "DEFAULT_NEWS_URL",
    "DEFAULT_USER_AGENT",
    "SelectorConfig",
]

_PROJECT_DIR = Path(__file__).resolve().parents[2]

DEFAULT_SNAPSHOT_PATH = _PROJECT_DIR / "data" / "news.json"
DEFAULT_CONFIG_PATH = _PROJECT_DIR / "data" / "checker.json"
DEFAULT_ENV_PATH = _PROJECT_DIR / ".env"

DEFAULT_NEWS_URL = "https://hana.b-rave.tokyo/news/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class SelectorConfig(BaseModel):
    """CSS selectors probed, in order, when reading entries from the news page."""

    items: List[str] = Field(
        default_factory=lambda: [".items-item", ".news-list li", "article"],
        description="Selectors matching one element per news entry; the first selector with any match wins",
    )
    title: List[str] = Field(
        default_factory=lambda: [".item-title p", ".item-title", "h2", "h3"],
        description="Selectors for the entry title, relative to the entry element",
    )
    date: List[str] = Field(
        default_factory=lambda: [".item-date span:first-child", "time", ".date"],
        description="Selectors for the entry date text",
    )
    category: List[str] = Field(
        default_factory=lambda: [".item-date span:last-child", ".category"],
        description="Selectors for the entry category label",
    )
    link: List[str] = Field(
        default_factory=lambda: ["a[href]"],
        description="Selectors for the anchor pointing at the entry detail page",
    )


class CheckerConfig(BaseModel):
    """Everything a single check run needs to know."""

    news_url: str = Field(default=DEFAULT_NEWS_URL, description="Page listing the news entries")
    data_file: Path = Field(
        default=DEFAULT_SNAPSHOT_PATH,
        description="JSON file holding the snapshot from the previous run",
    )
    use_playwright: bool = Field(
        default=True,
        description=(
            "Whether to render the page with a headless browser. When false the page is "
            "fetched with a plain HTTP request, which only works for server-rendered markup."
        ),
    )
    browser: str = Field(default="chromium", description="Playwright browser type to launch")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    navigation_timeout_ms: int = Field(
        default=60_000, gt=0, description="Upper bound for loading the news page"
    )
    settle_ms: int = Field(
        default=2_000, ge=0, description="Extra wait after load so client-side rendering can finish"
    )
    max_title_length: int = Field(default=200, gt=0)
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)
    webhook_env: str = Field(
        default="SLACK_WEBHOOK_URL",
        description="Environment variable holding the Slack incoming webhook URL",
    )
    webhook_timeout: float = Field(default=10.0, gt=0)
    notification_heading: str = Field(default="HANA 新着ニュース")
    log_level: str = Field(default="INFO")

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "CheckerConfig":
        """Load configuration data from a JSON file."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file: {config_path}") from exc

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ValueError(f"Configuration file is invalid: {config_path}\n{exc}") from exc

    @classmethod
    def load(cls, path: Path | str | None = None) -> "CheckerConfig":
        """Return the configuration from ``path`` when it exists, defaults otherwise."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        if not config_path.exists():
            return cls()
        return cls.from_file(config_path)

    def dump(self, path: Path | str | None = None) -> None:
        """Persist the configuration back to disk as JSON."""

        config_path = Path(path) if path else DEFAULT_CONFIG_PATH
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(self.model_dump_json(indent=2), encoding="utf-8")

    def webhook_url(self, env_file: Path | str | None = None) -> str | None:
        """Return the configured webhook URL, or ``None`` when notifications are disabled.

        The process environment wins; otherwise the variable named by
        :attr:`webhook_env` is looked up in the project ``.env`` file.
        """

        value = os.environ.get(self.webhook_env, "").strip()
        if not value:
            value = _read_env_file_value(Path(env_file) if env_file else DEFAULT_ENV_PATH, self.webhook_env)
        return value or None


def _read_env_file_value(env_path: Path, name: str) -> str:
    """Return the value assigned to ``name`` in ``env_path``, or an empty string."""

    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return ""

    for raw_line in lines:
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, sep, value = line.partition("=")
        if sep and key.strip() == name:
            return value.strip().strip('"').strip("'")
    return ""
