from __future__ import annotations

import base64
import json
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from core.config import ReconcileConfig, SyncConfig
from core.errors import DecodeError, RetrievalError
from core.fetcher import PatternFetcher
from core.models import PatternRecord, ReconcileResult
from core.orchestrator import (
    OUTCOME_CHANGED,
    OUTCOME_ERROR,
    OUTCOME_NO_OP,
    OUTCOME_SKIPPED,
    PatternSyncJob,
)
from core.reconciler import Reconciler


class FakeSource:
    def __init__(self, content: str = "", error: Optional[Exception] = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[tuple[str, str, str]] = []

    def get_file_content(self, owner: str, repo: str, path: str) -> str:
        self.requests.append((owner, repo, path))
        if self.error is not None:
            raise self.error
        return self.content


class RecordingStorage:
    """Storage double that only tracks writes and disconnects."""

    def __init__(self) -> None:
        self.writes = 0
        self.disconnects = 0

    def find_many(self):
        return []

    def delete_many(self, ids) -> int:
        self.writes += 1
        return 0

    def update_many(self, name, record) -> int:
        self.writes += 1
        return 1

    def create(self, record):
        self.writes += 1
        return record

    @contextmanager
    def transaction(self) -> Iterator[None]:
        yield

    def disconnect(self) -> None:
        self.disconnects += 1


class StaticReconciler:
    def __init__(self, result: Optional[ReconcileResult] = None, error: Optional[Exception] = None) -> None:
        self.result = result
        self.error = error

    def reconcile(self, fetched) -> ReconcileResult:
        if self.error is not None:
            raise self.error
        return self.result


class StaticFetcher:
    def __init__(self, patterns: Optional[list[PatternRecord]] = None) -> None:
        self.patterns = patterns or []

    def fetch(self) -> list[PatternRecord]:
        return self.patterns


_CONFIG = SyncConfig(owner="octo", repo="patterns", path="pattern.json")


def _encoded(types: list[dict]) -> str:
    return base64.b64encode(json.dumps({"types": types}).encode("utf-8")).decode("ascii")


def _job(source: FakeSource, storage: RecordingStorage) -> PatternSyncJob:
    return PatternSyncJob(
        fetcher=PatternFetcher(source, _CONFIG),
        reconciler=Reconciler(storage, ReconcileConfig()),
        storage=storage,
    )


def test_changed_cycle_logs_info_and_disconnects(caplog) -> None:
    caplog.set_level(logging.INFO)
    source = FakeSource(_encoded([{"name": "X", "regexPattern": "\\d+", "sensitive": True, "onKey": False}]))
    storage = RecordingStorage()

    outcome = _job(source, storage).run_cycle()

    assert outcome == OUTCOME_CHANGED
    assert source.requests == [("octo", "patterns", "pattern.json")]
    assert storage.writes == 1
    assert storage.disconnects == 1
    assert any(
        record.levelno == logging.INFO and "stored successfully" in record.getMessage()
        for record in caplog.records
    )


def test_no_op_cycle_logs_warning(caplog) -> None:
    caplog.set_level(logging.INFO)
    storage = RecordingStorage()
    job = PatternSyncJob(StaticFetcher(), StaticReconciler(ReconcileResult(changed=False)), storage)

    outcome = job.run_cycle()

    assert outcome == OUTCOME_NO_OP
    assert storage.disconnects == 1
    assert any(
        record.levelno == logging.WARNING and "No changes detected" in record.getMessage()
        for record in caplog.records
    )


def test_decode_failure_writes_nothing_and_is_swallowed(caplog) -> None:
    source = FakeSource(base64.b64encode(b'{"types": [{"name": "A"}]}').decode("ascii"))
    storage = RecordingStorage()

    outcome = _job(source, storage).run_cycle()

    assert outcome == OUTCOME_ERROR
    assert storage.writes == 0
    assert storage.disconnects == 1
    errors = [record for record in caplog.records if record.levelno == logging.ERROR]
    assert errors and "regexPattern" in errors[0].getMessage()


def test_retrieval_failure_is_logged_and_disconnects(caplog) -> None:
    storage = RecordingStorage()
    source = FakeSource(error=RetrievalError("octo/patterns/pattern.json was not found (HTTP 404)"))

    outcome = _job(source, storage).run_cycle()

    assert outcome == OUTCOME_ERROR
    assert storage.disconnects == 1
    assert any("HTTP 404" in record.getMessage() for record in caplog.records)


def test_unexpected_error_does_not_escape() -> None:
    storage = RecordingStorage()
    job = PatternSyncJob(StaticFetcher(), StaticReconciler(error=RuntimeError("boom")), storage)

    assert job.run_cycle() == OUTCOME_ERROR
    assert storage.disconnects == 1


def test_failed_cycle_does_not_block_the_next_one() -> None:
    storage = RecordingStorage()
    reconciler = StaticReconciler(error=DecodeError("bad payload"))
    job = PatternSyncJob(StaticFetcher(), reconciler, storage)

    assert job.run_cycle() == OUTCOME_ERROR
    reconciler.error = None
    reconciler.result = ReconcileResult(changed=True, created=1)
    assert job.run_cycle() == OUTCOME_CHANGED
    assert storage.disconnects == 2


def test_overlapping_tick_is_skipped() -> None:
    storage = RecordingStorage()
    nested: list[str] = []

    class ReentrantFetcher:
        def fetch(self) -> list[PatternRecord]:
            nested.append(job.run_cycle())
            return []

    job = PatternSyncJob(ReentrantFetcher(), StaticReconciler(ReconcileResult(changed=False)), storage)

    assert job.run_cycle() == OUTCOME_NO_OP
    assert nested == [OUTCOME_SKIPPED]
    # The skipped tick must not release the in-flight cycle's connection.
    assert storage.disconnects == 1


def test_disconnect_failure_is_logged_not_raised(caplog) -> None:
    class BrokenDisconnect(RecordingStorage):
        def disconnect(self) -> None:
            raise OSError("socket closed")

    job = PatternSyncJob(StaticFetcher(), StaticReconciler(ReconcileResult(changed=False)), BrokenDisconnect())

    assert job.run_cycle() == OUTCOME_NO_OP
    assert any("disconnect" in record.getMessage() for record in caplog.records)
