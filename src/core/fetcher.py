"""Fetcher: pulls the remote pattern file and decodes it."""

from __future__ import annotations

import logging

from core.config import SyncConfig
from core.decoding import decode_pattern_file
from core.models import PatternRecord
from core.ports import ContentSourcePort

LOGGER = logging.getLogger(__name__)


class PatternFetcher:
    """Reads the configured file from the content source."""

    def __init__(self, source: ContentSourcePort, config: SyncConfig) -> None:
        self._source = source
        self._config = config

    def fetch(self) -> list[PatternRecord]:
        """Return the decoded pattern records.

        RetrievalError from the source and DecodeError from decoding are
        propagated unchanged.
        """

        encoded = self._source.get_file_content(
            self._config.owner,
            self._config.repo,
            self._config.path,
        )
        patterns = decode_pattern_file(encoded)
        LOGGER.debug("Fetched %s patterns from %s", len(patterns), self._config.label)
        return patterns
