"""Cron scheduling adapter built on APScheduler."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from apscheduler.events import EVENT_SCHEDULER_STARTED
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

LOGGER = logging.getLogger(__name__)

JOB_ID = "pattern-sync"


def _on_started(event) -> None:
    LOGGER.info("Cron job started successfully.")


def build_scheduler(
    job: Callable[[], object],
    cron_expression: str,
    scheduler: Optional[BaseScheduler] = None,
) -> BaseScheduler:
    """Register `job` on a cron trigger and return the (unstarted) scheduler.

    max_instances=1 keeps ticks from overlapping and coalesce=True folds a
    backlog of missed ticks into one run. Raises ValueError for a malformed
    cron expression.
    """

    trigger = CronTrigger.from_crontab(cron_expression)
    scheduler = scheduler if scheduler is not None else BlockingScheduler()
    scheduler.add_job(
        job,
        trigger,
        id=JOB_ID,
        name="Sync pattern file",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )
    scheduler.add_listener(_on_started, EVENT_SCHEDULER_STARTED)
    return scheduler
