"""Report history codec for comment bodies.

A report comment is rendered markdown followed by a two-line trailer:

    <!-- [{"runId": 1, "deniedTools": [...]}] -->
    <!-- CLAUDE_DENIED_TOOLS -->

The first trailer line carries the serialized report history and the
second identifies the comment as ours. Decoding is tolerant: comments
can be edited by humans or written by other tools, so any malformed body
decodes to an empty history instead of raising.
"""

import json
import logging
import re
from collections.abc import Sequence

from denylog.models import Report

logger = logging.getLogger(__name__)

MARKER = "<!-- CLAUDE_DENIED_TOOLS -->"

_PAYLOAD_LINE = re.compile(r"^<!-- (.+) -->$")


def _serialize(reports: Sequence[Report]) -> str:
    payload = json.dumps(
        [report.to_dict() for report in reports],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    # Angle brackets only occur inside JSON strings; escaping them keeps
    # "-->" in a tool input from closing the HTML comment early.
    payload = payload.replace("<", "\\u003c").replace(">", "\\u003e")
    # Unicode line breaks would split the payload line apart.
    return (
        payload.replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
        .replace("\x85", "\\u0085")
    )


def encode_trailer(reports: Sequence[Report]) -> str:
    """Build the trailer appended to a rendered report body.

    The returned text starts with a newline, so ``body + trailer`` keeps the
    payload and the marker on the last two lines.
    """
    return "\n".join(["", f"<!-- {_serialize(reports)} -->", MARKER])


def encode(body: str, reports: Sequence[Report]) -> str:
    """Return body with the history trailer appended."""
    return body + encode_trailer(reports)


def has_marker(body: str | None) -> bool:
    """Check whether a comment body ends with the report marker line."""
    if body is None:
        return False
    return body.strip().endswith(MARKER)


def decode(body: str | None) -> list[Report]:
    """Extract the report history embedded in a comment body.

    Args:
        body: Comment body, possibly None or foreign content

    Returns:
        list[Report]: Decoded history, newest first; empty when the body
        carries no valid trailer
    """
    if body is None:
        return []

    lines = [line.rstrip("\r") for line in body.strip().split("\n")]
    if len(lines) < 2:
        return []

    match = _PAYLOAD_LINE.match(lines[-2])
    if not match:
        logger.debug("No report payload line found in comment body")
        return []

    try:
        raw_reports = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        logger.debug(f"Report payload is not valid JSON: {e}")
        return []

    if not isinstance(raw_reports, list):
        logger.debug("Report payload is not a list")
        return []

    reports: list[Report] = []
    for raw in raw_reports:
        try:
            reports.append(Report.from_dict(raw))
        except ValueError as e:
            logger.debug(f"Dropping malformed report entry: {e}")
    return reports


__all__ = ["MARKER", "decode", "encode", "encode_trailer", "has_marker"]
