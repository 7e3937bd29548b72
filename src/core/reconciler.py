"""Reconciler: converges the store to the latest fetched patterns.

The remote file is authoritative. Each pass loads the stored rows, decides
whether anything changed, and if so applies deletes, updates, and creates in
that order inside one storage transaction.

Change detection defaults to a cardinality check: counts differ, or some
stored name is gone from the fetch. A retained name whose payload changed
while the counts stay equal is NOT detected in that mode. ReconcileConfig
with full_diff=True closes that gap by comparing payloads as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from core.config import ReconcileConfig
from core.errors import ReconcileError, StorageError
from core.models import PatternRecord, ReconcileResult, StoredPattern
from core.ports import StoragePort

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangePlan:
    """Mutations needed to converge the store. Empty when nothing changed."""

    to_delete: list[StoredPattern] = field(default_factory=list)
    to_update: list[PatternRecord] = field(default_factory=list)
    to_create: list[PatternRecord] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.to_delete or self.to_update or self.to_create)


def plan_changes(
    current: Sequence[StoredPattern],
    fetched: Sequence[PatternRecord],
    full_diff: bool = False,
) -> ChangePlan:
    """Compute the mutation set that turns `current` into `fetched`."""

    current_by_name = {pattern.name: pattern for pattern in current}
    fetched_names = {record.name for record in fetched}

    deleted = [pattern for pattern in current if pattern.name not in fetched_names]
    has_changes = len(fetched) != len(current) or bool(deleted)

    payload_changed = [
        record
        for record in fetched
        if record.name in current_by_name and current_by_name[record.name].record != record
    ]
    if full_diff and payload_changed:
        has_changes = True

    if not has_changes:
        return ChangePlan()

    to_create = [record for record in fetched if record.name not in current_by_name]
    if full_diff:
        to_update = payload_changed
    else:
        # Without payload comparison every retained name gets a full replace.
        to_update = [record for record in fetched if record.name in current_by_name]

    return ChangePlan(to_delete=deleted, to_update=to_update, to_create=to_create)


class Reconciler:
    """Applies a ChangePlan through the storage port."""

    def __init__(self, storage: StoragePort, config: ReconcileConfig) -> None:
        self._storage = storage
        self._config = config

    def reconcile(self, fetched: Sequence[PatternRecord]) -> ReconcileResult:
        """Converge the store to `fetched` and report whether anything changed."""

        try:
            current = self._storage.find_many()
        except StorageError as exc:
            raise ReconcileError(f"Failed to load stored patterns: {exc}") from exc

        plan = plan_changes(current, fetched, full_diff=self._config.full_diff)
        if not plan.has_changes:
            return ReconcileResult(changed=False)

        try:
            with self._storage.transaction():
                deleted = 0
                if plan.to_delete:
                    deleted = self._storage.delete_many(pattern.id for pattern in plan.to_delete)
                for record in plan.to_update:
                    self._storage.update_many(record.name, record)
                for record in plan.to_create:
                    self._storage.create(record)
        except StorageError as exc:
            raise ReconcileError(f"Failed to apply pattern changes: {exc}") from exc

        LOGGER.debug(
            "Applied plan: deleted=%s updated=%s created=%s",
            deleted,
            len(plan.to_update),
            len(plan.to_create),
        )
        return ReconcileResult(
            changed=True,
            created=len(plan.to_create),
            updated=len(plan.to_update),
            deleted=deleted,
        )
