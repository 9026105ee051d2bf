"""GitHub Actions step outputs.

Writes the reporter outputs to the files GitHub Actions exposes through
``$GITHUB_OUTPUT`` and ``$GITHUB_STEP_SUMMARY``.
"""

import logging
import os
import uuid
from collections.abc import Mapping
from pathlib import Path

from denylog.reporter import ReporterOutputs

logger = logging.getLogger(__name__)


def format_output(name: str, value: str) -> str:
    """Format one output using the multiline delimiter syntax."""
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


def _append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8") as handle:
        handle.write(text)


def write_outputs(outputs: ReporterOutputs, env: Mapping[str, str] | None = None) -> bool:
    """Publish outputs to the workflow step.

    Args:
        outputs: Reporter outputs
        env: Environment mapping (defaults to os.environ)

    Returns:
        bool: True if any GitHub Actions output file was written
    """
    if env is None:
        env = os.environ

    written = False
    output_path = env.get("GITHUB_OUTPUT", "").strip()
    if output_path:
        _append(
            Path(output_path),
            format_output("report", outputs.report)
            + format_output("denied-tools", outputs.denied_tools_json()),
        )
        logger.debug(f"Wrote step outputs to {output_path}")
        written = True

    summary_path = env.get("GITHUB_STEP_SUMMARY", "").strip()
    if summary_path:
        _append(Path(summary_path), f"{outputs.report}\n")
        logger.debug(f"Appended report to step summary {summary_path}")
        written = True

    return written


__all__ = ["format_output", "write_outputs"]
