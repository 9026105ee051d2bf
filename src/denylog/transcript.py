"""Transcript file loading.

Reads the execution log written by the assistant SDK. The log is normally a
single JSON array of messages; JSON Lines files (one message per line) are
accepted as well.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class TranscriptError(Exception):
    """Raised when a transcript cannot be read or parsed."""

    pass


def _parse_json_lines(raw: str, path: Path) -> list[Any]:
    entries: list[Any] = []
    for number, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise TranscriptError(f"Invalid JSON on line {number} of {path}: {e}") from e
    return entries


def load_transcript(transcript_path: str | Path) -> list[Any]:
    """Load transcript messages from a file.

    Args:
        transcript_path: Path to the execution file

    Returns:
        list: Transcript messages, in order

    Raises:
        TranscriptError: If the file is missing, unreadable or malformed
    """
    path = Path(transcript_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TranscriptError(f"Cannot read transcript {path}: {e}") from e

    try:
        messages = json.loads(raw)
    except json.JSONDecodeError:
        logger.debug(f"{path} is not a JSON document, trying JSON Lines")
        messages = _parse_json_lines(raw, path)

    if not isinstance(messages, list):
        raise TranscriptError(
            f"Transcript {path} must contain a list of messages, got {type(messages).__name__}"
        )
    return messages


__all__ = ["TranscriptError", "load_transcript"]
