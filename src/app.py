"""Application entry point for the pattern-mirror sync job."""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.scheduler import build_scheduler
from adapters.sqlite_storage import SQLiteStorage
from client import build_source
from core.config import ReconcileConfig, SyncConfig
from core.fetcher import PatternFetcher
from core.orchestrator import PatternSyncJob
from core.reconciler import Reconciler

NAME = "PATTERN MIRROR"
FONT = "tarty-1"

LOG_FORMAT = "%(levelname)s %(asctime)s: %(message)s"
LOG_DATEFMT = "%d-%m-%Y %H:%M:%S %p"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    # Longest first so a secret containing another is masked whole.
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: Optional[dict] = None) -> None:
    config = config if config is not None else settings.LOGGING

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    secrets = _collect_redaction_values(config)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(_RedactingFormatter(secrets, fmt=LOG_FORMAT, datefmt=LOG_DATEFMT))

    logging.basicConfig(level=level, handlers=[console_handler])


def _build_job() -> PatternSyncJob:
    """Wire adapters into the core sync job."""

    storage = SQLiteStorage(settings.DB_PATH, timeout=settings.DB_TIMEOUT_SECONDS)
    storage.init_db()
    storage.disconnect()

    source = build_source(settings.GITHUB_API_ROOT, settings.REQUEST_TIMEOUT_SECONDS)
    fetcher = PatternFetcher(
        source,
        SyncConfig(owner=settings.REPO_OWNER, repo=settings.REPO_NAME, path=settings.FILE_PATH),
    )
    reconciler = Reconciler(storage, ReconcileConfig(full_diff=settings.FULL_DIFF))
    return PatternSyncJob(fetcher=fetcher, reconciler=reconciler, storage=storage)


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info(
        "Starting pattern-mirror for %s/%s/%s",
        settings.REPO_OWNER,
        settings.REPO_NAME,
        settings.FILE_PATH,
    )
    job = _build_job()
    scheduler = build_scheduler(job.run_cycle, settings.CRON_SCHEDULE)

    # start() blocks until shutdown; Ctrl-C ends the process cleanly.
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Shutting down scheduler")
        scheduler.shutdown(wait=False)


def _run_once() -> None:
    _configure_logging()
    job = _build_job()
    job.run_cycle()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="pattern-mirror")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start the scheduled sync job")
    subparsers.add_parser(
        "once",
        help="Test only: run a single sync cycle and exit. Not used by the scheduled job.",
    )

    args = parser.parse_args(argv)
    if args.command == "once":
        _run_once()
        return
    _run()


if __name__ == "__main__":
    main()
