"""Sync job: one fetch-reconcile cycle per scheduler tick.

Cycles never overlap. A tick that arrives while another cycle holds the lock
is skipped, and the storage connection is released at the end of every cycle
whatever the outcome.
"""

from __future__ import annotations

import logging
import threading

from core.errors import SyncError
from core.fetcher import PatternFetcher
from core.ports import StoragePort
from core.reconciler import Reconciler

LOGGER = logging.getLogger(__name__)

OUTCOME_CHANGED = "changed"
OUTCOME_NO_OP = "no-op"
OUTCOME_ERROR = "error"
OUTCOME_SKIPPED = "skipped"


class PatternSyncJob:
    """Runs fetch then reconcile, logging the outcome of each cycle."""

    def __init__(
        self,
        fetcher: PatternFetcher,
        reconciler: Reconciler,
        storage: StoragePort,
    ) -> None:
        self._fetcher = fetcher
        self._reconciler = reconciler
        self._storage = storage
        self._lock = threading.Lock()

    def run_cycle(self) -> str:
        """Run one cycle and return its outcome; never raises."""

        if not self._lock.acquire(blocking=False):
            LOGGER.warning("Previous sync cycle still running. Skipping this tick.")
            return OUTCOME_SKIPPED

        try:
            return self._run_locked()
        finally:
            self._lock.release()

    def _run_locked(self) -> str:
        try:
            patterns = self._fetcher.fetch()
            result = self._reconciler.reconcile(patterns)
        except SyncError as exc:
            LOGGER.error("Error fetching and storing data: %s", exc)
            return OUTCOME_ERROR
        except Exception:
            LOGGER.exception("Unexpected error during sync cycle")
            return OUTCOME_ERROR
        finally:
            self._release_storage()

        if result.changed:
            LOGGER.info(
                "Data fetched and stored successfully. created=%s updated=%s deleted=%s",
                result.created,
                result.updated,
                result.deleted,
            )
            return OUTCOME_CHANGED

        LOGGER.warning("No changes detected. Database not updated.")
        return OUTCOME_NO_OP

    def _release_storage(self) -> None:
        try:
            self._storage.disconnect()
        except Exception:
            LOGGER.exception("Failed to disconnect from storage")
