"""Decoding of the remote pattern file.

The file arrives base64-encoded (as the GitHub contents API serves it) and
holds a JSON object of the form {"types": [{name, regexPattern, sensitive,
onKey}, ...]}. Decoding is all-or-nothing: one malformed entry rejects the
whole file.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from core.errors import DecodeError
from core.models import PatternRecord

_STRING_FIELDS = ("name", "regexPattern")
_FLAG_FIELDS = ("sensitive", "onKey")


def decode_content(encoded: str) -> Any:
    """Decode base64 text and parse it as JSON."""

    try:
        raw = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Payload is not valid base64: {exc}") from exc

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Payload is not UTF-8 text: {exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Payload is not valid JSON: {exc}") from exc


def _parse_entry(index: int, entry: Any) -> PatternRecord:
    if not isinstance(entry, dict):
        raise DecodeError(f"types[{index}] must be an object")

    for field in _STRING_FIELDS + _FLAG_FIELDS:
        if field not in entry:
            raise DecodeError(f"types[{index}] is missing required field '{field}'")

    for field in _STRING_FIELDS:
        if not isinstance(entry[field], str):
            raise DecodeError(f"types[{index}].{field} must be a string")
    for field in _FLAG_FIELDS:
        if not isinstance(entry[field], bool):
            raise DecodeError(f"types[{index}].{field} must be a boolean")

    if not entry["name"].strip():
        raise DecodeError(f"types[{index}].name must not be empty")

    return PatternRecord(
        name=entry["name"],
        regex_pattern=entry["regexPattern"],
        sensitive=entry["sensitive"],
        on_key=entry["onKey"],
    )


def parse_patterns(document: Any) -> list[PatternRecord]:
    """Validate a parsed document and return its pattern records in order."""

    if not isinstance(document, dict):
        raise DecodeError("Pattern file must be a JSON object")
    if "types" not in document:
        raise DecodeError("Pattern file is missing the 'types' field")

    entries = document["types"]
    if not isinstance(entries, list):
        raise DecodeError("'types' must be a list")

    records: list[PatternRecord] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        record = _parse_entry(index, entry)
        # Names are the identity key, so a repeated name is ambiguous.
        if record.name in seen:
            raise DecodeError(f"Duplicate pattern name '{record.name}'")
        seen.add(record.name)
        records.append(record)
    return records


def decode_pattern_file(encoded: str) -> list[PatternRecord]:
    """Decode a base64 pattern file into pattern records."""

    return parse_patterns(decode_content(encoded))
