"""Error taxonomy for the sync cycle."""

from __future__ import annotations


class SyncError(Exception):
    """Base class for failures that end a sync cycle."""


class RetrievalError(SyncError):
    """The remote file could not be fetched."""


class DecodeError(SyncError):
    """The fetched payload is malformed or does not match the pattern schema."""


class ReconcileError(SyncError):
    """A store operation failed while loading or applying changes."""


class StorageError(Exception):
    """Raised by storage adapters when the backing store rejects an operation."""
