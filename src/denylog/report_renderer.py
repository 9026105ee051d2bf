"""Markdown rendering of denial reports.

Renders a report history as a comment body: a fixed header, then one table
of denied tools per run. A single run renders inline; several runs each
render inside a collapsible ``<details>`` block, newest first. Runs without
denials are kept in the history but never rendered.
"""

import json
from collections.abc import Sequence

from denylog.models import Report, ToolInvocation
from denylog.run_context import RunContext

HEADER = "## \U0001f6ab Permission Denied Tool Executions"
PREAMBLE = (
    "The following tool executions that Claude Code attempted were blocked "
    "due to insufficient permissions.",
    "Consider adding them to `allowed_tools` if needed.",
)


def escape_cell(text: str) -> str:
    """Escape backticks, then pipes, so text fits in a table code span."""
    return text.replace("`", "\\`").replace("|", "\\|")


def summary_line(report: Report, context: RunContext) -> str:
    """Summary of one run: link to the run and number of denied tools."""
    count = len(report.denied_tools)
    tool_text = "1 tool" if count == 1 else f"{count} tools"
    run_url = context.run_url(report.run_id)
    return f'Run <a href="{run_url}">#{report.run_id}</a> - {tool_text} denied'


def _table_row(tool: ToolInvocation) -> str:
    input_str = json.dumps(tool.input, separators=(",", ":"), ensure_ascii=False)
    return f"| `{escape_cell(tool.name)}` | `{escape_cell(input_str)}` |"


def _report_section(report: Report, context: RunContext, collapsible: bool) -> list[str]:
    summary = summary_line(report, context)
    lines = [""]
    if collapsible:
        lines.append("<details>")
        lines.append(f"<summary>{summary}</summary>")
    else:
        lines.append(summary)

    lines.append("")
    lines.append("| Tool | Input |")
    lines.append("| --- | --- |")
    lines.extend(_table_row(tool) for tool in report.denied_tools)

    if collapsible:
        lines.append("")
        lines.append("</details>")
    return lines


def render_reports(reports: Sequence[Report], context: RunContext) -> str:
    """Render a report history as markdown.

    Args:
        reports: Report history, newest first
        context: Repository identity used for run links

    Returns:
        str: Markdown document (without the history trailer)
    """
    lines = [HEADER, "", *PREAMBLE]

    visible = [report for report in reports if report.denied_tools]
    collapsible = len(visible) > 1
    for report in visible:
        lines.extend(_report_section(report, context, collapsible))

    return "\n".join(lines)


__all__ = ["HEADER", "escape_cell", "render_reports", "summary_line"]
