"""Tests for markdown rendering of denial reports."""

from denylog.models import Report, ToolInvocation
from denylog.report_renderer import HEADER, escape_cell, render_reports, summary_line
from denylog.run_context import RunContext

PREAMBLE = (
    "The following tool executions that Claude Code attempted were blocked due to "
    "insufficient permissions.\n"
    "Consider adding them to `allowed_tools` if needed."
)


class TestRenderSingleReport:
    """Test rendering a single report."""

    def test_single_report_renders_inline(self, run_context, bash_report):
        """Test that a single report has no collapsible wrapper."""
        result = render_reports([bash_report], run_context)

        assert result == "\n".join(
            [
                HEADER,
                "",
                PREAMBLE,
                "",
                'Run <a href="https://github.com/octo/widgets/actions/runs/1">#1</a> - 1 tool denied',
                "",
                "| Tool | Input |",
                "| --- | --- |",
                '| `Bash` | `{"command":"ls"}` |',
            ]
        )

    def test_one_row_per_tool(self, run_context, write_report):
        """Test that a report with N tools renders one table with N rows."""
        result = render_reports([write_report], run_context)

        lines = result.split("\n")
        assert lines.count("| Tool | Input |") == 1
        assert len([line for line in lines if line.startswith("| `")]) == 2
        assert "<details>" not in result
        assert "2 tools denied" in result

    def test_empty_report_renders_header_only(self, run_context):
        """Test that a report without denials contributes no section."""
        result = render_reports([Report(run_id=1, denied_tools=[])], run_context)

        assert result == f"{HEADER}\n\n{PREAMBLE}"

    def test_no_reports(self, run_context):
        """Test that an empty history still renders the header."""
        assert render_reports([], run_context) == f"{HEADER}\n\n{PREAMBLE}"


class TestRenderMultipleReports:
    """Test rendering several reports."""

    def test_collapsible_sections_in_input_order(self, run_context, bash_report, write_report):
        """Test that each report renders in its own details block."""
        result = render_reports([write_report, bash_report], run_context)

        assert result == "\n".join(
            [
                HEADER,
                "",
                PREAMBLE,
                "",
                "<details>",
                '<summary>Run <a href="https://github.com/octo/widgets/actions/runs/2">#2</a>'
                " - 2 tools denied</summary>",
                "",
                "| Tool | Input |",
                "| --- | --- |",
                '| `Write` | `{"file_path":"/tmp/a.txt","content":"a"}` |',
                '| `WebFetch` | `{"url":"https://example.com"}` |',
                "",
                "</details>",
                "",
                "<details>",
                '<summary>Run <a href="https://github.com/octo/widgets/actions/runs/1">#1</a>'
                " - 1 tool denied</summary>",
                "",
                "| Tool | Input |",
                "| --- | --- |",
                '| `Bash` | `{"command":"ls"}` |',
                "",
                "</details>",
            ]
        )

    def test_empty_reports_contribute_no_block(self, run_context, bash_report, write_report):
        """Test that empty reports are skipped between non-empty ones."""
        history = [write_report, Report(run_id=5, denied_tools=[]), bash_report]

        result = render_reports(history, run_context)

        assert result.count("<details>") == 2
        assert "#5" not in result

    def test_single_visible_report_among_empty_ones(self, run_context, bash_report):
        """Test that one visible report renders inline even in a longer history."""
        history = [Report(run_id=3, denied_tools=[]), bash_report]

        result = render_reports(history, run_context)

        assert "<details>" not in result
        assert result.count("| Tool | Input |") == 1


class TestEscaping:
    """Test escaping of markdown metacharacters."""

    def test_escape_cell(self):
        """Test that backticks and pipes are escaped."""
        assert escape_cell("a`b|c") == "a\\`b\\|c"

    def test_backticks_escaped_before_pipes(self):
        """Test that escaping pipes does not re-escape backtick escapes."""
        assert escape_cell("`|") == "\\`\\|"

    def test_special_characters_in_inputs(self, run_context):
        """Test that inputs with backticks and pipes keep the row intact."""
        report = Report(
            run_id=1,
            denied_tools=[ToolInvocation("Bash", {"command": "echo `date` | grep 2024"})],
        )

        result = render_reports([report], run_context)

        row = result.split("\n")[-1]
        assert row == '| `Bash` | `{"command":"echo \\`date\\` \\| grep 2024"}` |'
        assert row.count("|") - row.count("\\|") == 3


class TestSummaryLine:
    """Test run summary lines."""

    def test_custom_server_url(self, bash_report):
        """Test run links on a GitHub Enterprise server."""
        context = RunContext(
            owner="octo", repo="widgets", run_id=1, server_url="https://ghe.example.com/"
        )

        assert summary_line(bash_report, context) == (
            'Run <a href="https://ghe.example.com/octo/widgets/actions/runs/1">#1</a>'
            " - 1 tool denied"
        )
