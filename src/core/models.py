"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PatternRecord:
    """A single detection pattern as published in the remote file."""

    name: str
    regex_pattern: str
    sensitive: bool
    on_key: bool

    def to_payload(self) -> dict:
        """Return the record in the remote file's field naming."""

        return {
            "name": self.name,
            "regexPattern": self.regex_pattern,
            "sensitive": self.sensitive,
            "onKey": self.on_key,
        }


@dataclass(frozen=True)
class StoredPattern:
    """Persisted representation of a pattern, including its row id."""

    id: int
    name: str
    regex_pattern: str
    sensitive: bool
    on_key: bool

    @property
    def record(self) -> PatternRecord:
        return PatternRecord(
            name=self.name,
            regex_pattern=self.regex_pattern,
            sensitive=self.sensitive,
            on_key=self.on_key,
        )


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconciliation pass."""

    changed: bool
    created: int = 0
    updated: int = 0
    deleted: int = 0
