"""Ports (interfaces) used by the core sync cycle.

Ports define the minimal contracts for the remote source and storage adapters
so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import ContextManager, Iterable, Protocol

from core.models import PatternRecord, StoredPattern


class ContentSourcePort(Protocol):
    """Remote file retrieval required by the fetcher."""

    def get_file_content(self, owner: str, repo: str, path: str) -> str:
        """Return the file body as base64 text."""
        ...


class StoragePort(Protocol):
    """Storage operations required by the reconciler and the sync job."""

    def find_many(self) -> list[StoredPattern]:
        ...

    def delete_many(self, ids: Iterable[int]) -> int:
        ...

    def update_many(self, name: str, record: PatternRecord) -> int:
        ...

    def create(self, record: PatternRecord) -> StoredPattern:
        ...

    def transaction(self) -> ContextManager[None]:
        ...

    def disconnect(self) -> None:
        ...
