"""Core configuration dataclasses.

We keep settings outside the core, but these dataclasses define the shape
the core expects so the app layer can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SyncConfig:
    """Location of the remote pattern file."""

    owner: str
    repo: str
    path: str

    @property
    def label(self) -> str:
        return f"{self.owner}/{self.repo}/{self.path}"


@dataclass(frozen=True)
class ReconcileConfig:
    """Change-detection settings for the reconciler.

    full_diff=False keeps the cardinality check: a change is detected only
    when the counts differ or a stored name disappeared. full_diff=True also
    compares payloads of retained names.
    """

    full_diff: bool = False
