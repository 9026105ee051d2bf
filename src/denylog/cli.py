"""denylog command line interface.

Commands:
    report     Extract denials from a run transcript and publish the report
    extract    Show the denied tool invocations of a transcript
    decode     Show the report history embedded in a comment body

The ``report`` command is meant to run as a GitHub Actions step. Every
option falls back to the matching action input (``INPUT_*``) or a
``DENYLOG_*`` environment variable.
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from denylog import __version__, report_codec
from denylog.action_outputs import write_outputs
from denylog.click_group import DenylogGroup
from denylog.denial_detector import (
    MissingInvocationPolicy,
    UnknownInvocationError,
    extract_denied_tools,
)
from denylog.github_comments import CommentStoreError, GitHubCommentStore
from denylog.log_sanitizer import LogSanitizer, SanitizingFilter
from denylog.reporter import DenialReporter, DenylogError, ReporterInputs
from denylog.run_context import RunContext, RunContextError
from denylog.transcript import TranscriptError, load_transcript

logger = logging.getLogger(__name__)
console = Console()

FATAL_ERRORS = (
    RunContextError,
    TranscriptError,
    CommentStoreError,
    UnknownInvocationError,
    DenylogError,
    ValueError,
)


def _fail(error: Exception) -> None:
    """Print a sanitized error message and exit with failure status."""
    console.print(f"[red]Error: {escape(LogSanitizer.sanitize_exception(error))}[/red]")
    sys.exit(1)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")
    for handler in logging.getLogger().handlers:
        handler.addFilter(SanitizingFilter())


@click.group(cls=DenylogGroup, context_settings={"help_option_names": ["--help", "-h"]})
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(version=__version__)
def main(verbose: bool) -> None:
    """denylog - report tool executions blocked by permission settings.

    Scans the transcript of an assistant run for tool calls that were denied
    and keeps a report comment on the triggering issue or pull request.

    \b
    COMMANDS:
        report     Extract denials and publish the report comment
        extract    Show denied tool invocations of a transcript
        decode     Show the report history stored in a comment body

    \b
    EXAMPLES:
        # Run as a workflow step after the assistant finished
        $ denylog report --execution-file output.json --sticky-comment true

        # Inspect a transcript locally
        $ denylog extract output.json
    """
    _setup_logging(verbose)


@main.command(name="report")
@click.option(
    "--github-token",
    envvar=["INPUT_GITHUB-TOKEN", "GITHUB_TOKEN"],
    default=None,
    help="GitHub token used to read and write comments",
)
@click.option(
    "--execution-file",
    envvar=["INPUT_CLAUDE-CODE-EXECUTION-FILE", "DENYLOG_EXECUTION_FILE"],
    required=True,
    help="Path to the execution file written by the assistant run",
)
@click.option(
    "--sticky-comment",
    envvar=["INPUT_STICKY-COMMENT", "DENYLOG_STICKY_COMMENT"],
    type=click.BOOL,
    default=False,
    show_default=True,
    help="Update the latest report comment instead of creating a new one",
)
@click.option(
    "--skip-comment",
    envvar=["INPUT_SKIP-COMMENT", "DENYLOG_SKIP_COMMENT"],
    type=click.BOOL,
    default=False,
    show_default=True,
    help="Only render the report; do not read or write comments",
)
@click.option(
    "--skip-when-clean",
    envvar=["INPUT_SKIP-WHEN-CLEAN", "DENYLOG_SKIP_WHEN_CLEAN"],
    type=click.BOOL,
    default=False,
    show_default=True,
    help="Leave comments untouched when no tool was denied",
)
@click.option(
    "--missing-invocation",
    envvar="DENYLOG_MISSING_INVOCATION",
    type=click.Choice([policy.value for policy in MissingInvocationPolicy]),
    default=MissingInvocationPolicy.SKIP.value,
    show_default=True,
    help="What to do when a denial references an unknown tool use",
)
def report_command(
    github_token: str | None,
    execution_file: str,
    sticky_comment: bool,
    skip_comment: bool,
    skip_when_clean: bool,
    missing_invocation: str,
) -> None:
    """Extract denied tools from a run and publish the report.

    Reads the repository, run id and triggering event from the GitHub
    Actions environment (GITHUB_REPOSITORY, GITHUB_RUN_ID,
    GITHUB_EVENT_NAME, GITHUB_EVENT_PATH).

    \b
    Examples:
      $ denylog report --execution-file output.json
      $ denylog report --execution-file output.json --sticky-comment true
      $ denylog report --execution-file output.json --skip-comment true
    """
    inputs = ReporterInputs(
        execution_file=execution_file,
        sticky_comment=sticky_comment,
        skip_comment=skip_comment,
        skip_when_clean=skip_when_clean,
        missing_invocation_policy=MissingInvocationPolicy(missing_invocation),
    )

    try:
        context = RunContext.from_environment()
        store = None
        if not skip_comment:
            if not github_token:
                raise DenylogError("A GitHub token is required unless --skip-comment is set")
            store = GitHubCommentStore(
                owner=context.owner,
                repo=context.repo,
                token=github_token,
                api_url=context.api_url,
            )
        outputs = DenialReporter(context, store).run(inputs)
    except FATAL_ERRORS as e:
        _fail(e)
        return

    if not write_outputs(outputs):
        click.echo(outputs.report)


@main.command(name="extract")
@click.argument("transcript", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print denied tools as JSON")
def extract_command(transcript: str, as_json: bool) -> None:
    """Show the denied tool invocations of a transcript.

    \b
    Examples:
      $ denylog extract output.json
      $ denylog extract output.json --json
    """
    try:
        denied_tools = extract_denied_tools(load_transcript(transcript))
    except FATAL_ERRORS as e:
        _fail(e)
        return

    if as_json:
        click.echo(json.dumps([tool.to_dict() for tool in denied_tools], indent=2))
        return

    if not denied_tools:
        console.print("[green]No denied tools found[/green]")
        return

    table = Table(title=f"{len(denied_tools)} denied tool(s)")
    table.add_column("Tool", style="cyan")
    table.add_column("Input")
    for tool in denied_tools:
        table.add_row(escape(tool.name), escape(json.dumps(tool.input, ensure_ascii=False)))
    console.print(table)


@main.command(name="decode")
@click.argument("comment_file", type=click.File("r", encoding="utf-8"), default="-")
def decode_command(comment_file) -> None:
    """Show the report history stored in a comment body.

    Reads the body from COMMENT_FILE, or stdin when omitted. Bodies without
    a report trailer decode to an empty history.

    \b
    Examples:
      $ gh api repos/OWNER/REPO/issues/comments/ID --jq .body | denylog decode
    """
    reports = report_codec.decode(comment_file.read())
    click.echo(json.dumps([report.to_dict() for report in reports], indent=2))


if __name__ == "__main__":
    main()
