"""Command-line entry point for a single news check."""

from __future__ import annotations

import datetime
import logging

import typer

from .config import CheckerConfig
from .errors import ExtractionEmpty
from .runner import run_check

app = typer.Typer(add_completion=False)


@app.command()
def check(
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Detect and record new entries without sending notifications."
    ),
) -> None:
    """Check the news page once and notify about entries not seen before."""

    try:
        config = CheckerConfig.load()
    except (FileNotFoundError, ValueError) as exc:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
        logging.error("Could not load configuration: %s", exc)
        raise typer.Exit(code=1)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(levelname)s: %(message)s",
    )

    logging.info("=== News Watch ===")
    logging.info("Time: %s", datetime.datetime.now(datetime.UTC).isoformat())
    if dry_run:
        logging.info("Running in dry-run mode (no notifications will be sent)")

    try:
        report = run_check(config, dry_run=dry_run)
    except ExtractionEmpty as exc:
        logging.warning("%s", exc)
        return
    except Exception:  # noqa: BLE001 - every other failure ends the run with an error
        logging.exception("Check failed")
        raise typer.Exit(code=1)

    logging.info(
        "Checked %d entries, %d new; snapshot saved to %s",
        report.total_entries,
        len(report.new_entries),
        config.data_file,
    )


if __name__ == "__main__":
    app()
