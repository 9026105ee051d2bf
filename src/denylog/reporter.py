"""Denial report orchestration.

One reporter run:
1. Load the transcript and extract denied tool invocations
2. Build the report of the current run
3. Unless persistence is skipped, find the sticky report comment (when
   enabled), merge its history and update it, or create a new comment

The comment store is the only shared state between runs. Runs against the
same thread are not coordinated; the last writer wins.
"""

import json
import logging
from dataclasses import dataclass, field

from denylog import report_codec
from denylog.denial_detector import MissingInvocationPolicy, extract_denied_tools
from denylog.github_comments import Comment, CommentStore
from denylog.models import Report, ToolInvocation
from denylog.report_renderer import render_reports
from denylog.run_context import RunContext
from denylog.transcript import load_transcript

logger = logging.getLogger(__name__)

NO_DENIALS_REPORT = "No denied tools found"


class DenylogError(Exception):
    """Raised when a reporter run fails."""

    pass


@dataclass
class ReporterInputs:
    """Already-parsed run configuration.

    Attributes:
        execution_file: Path to the transcript of the run
        sticky_comment: Update the latest report comment instead of adding one
        skip_comment: Render only; never read or write comments
        skip_when_clean: Leave comments untouched when nothing was denied
        missing_invocation_policy: Handling of denials with unknown tool use ids
    """

    execution_file: str
    sticky_comment: bool = False
    skip_comment: bool = False
    skip_when_clean: bool = False
    missing_invocation_policy: MissingInvocationPolicy = MissingInvocationPolicy.SKIP


@dataclass
class ReporterOutputs:
    """Results handed back to the invoking environment."""

    report: str
    denied_tools: list[ToolInvocation] = field(default_factory=list)

    def denied_tools_json(self) -> str:
        """Compact JSON array of the denied tools."""
        return json.dumps(
            [tool.to_dict() for tool in self.denied_tools],
            separators=(",", ":"),
            ensure_ascii=False,
        )


def find_report_comment(comments: list[Comment]) -> Comment | None:
    """Return the newest comment ending with the report marker."""
    for comment in reversed(comments):
        if report_codec.has_marker(comment.body):
            return comment
    return None


class DenialReporter:
    """Build and persist denial reports for one run."""

    def __init__(self, context: RunContext, store: CommentStore | None = None):
        """Initialize the reporter.

        Args:
            context: Repository and run identity
            store: Comment store; only required when comments are written
        """
        self.context = context
        self.store = store

    def run(self, inputs: ReporterInputs) -> ReporterOutputs:
        """Execute one reporter run.

        Args:
            inputs: Run configuration

        Returns:
            ReporterOutputs: Rendered report and denied tools of this run

        Raises:
            RunContextError: If the issue/PR number cannot be resolved
            TranscriptError: If the transcript cannot be loaded
            CommentStoreError: If the comment store cannot be reached
            UnknownInvocationError: If the missing-invocation policy is FAIL
            DenylogError: If comments must be written but no store is configured
        """
        messages = load_transcript(inputs.execution_file)
        logger.info(f"Read {len(messages)} SDK messages from execution file")

        denied_tools = extract_denied_tools(
            messages, missing_policy=inputs.missing_invocation_policy
        )
        logger.info(f"Found {len(denied_tools)} denied tool uses")
        if denied_tools:
            logger.debug(f"Denied tools: {json.dumps([tool.name for tool in denied_tools])}")
        else:
            logger.info("No denied tools found")
            if inputs.skip_when_clean:
                return ReporterOutputs(report=NO_DENIALS_REPORT, denied_tools=[])

        report = Report(run_id=self.context.run_id, denied_tools=denied_tools)

        if inputs.skip_comment:
            logger.info("Skipping comment creation")
            return ReporterOutputs(
                report=render_reports([report], self.context), denied_tools=denied_tools
            )

        store = self._require_store()
        issue_number = self.context.issue_number()
        logger.info(f"Issue/PR number: {issue_number}")

        if inputs.sticky_comment:
            comment = find_report_comment(store.list_comments(issue_number))
            if comment is not None:
                logger.info(f"Found existing comment (ID: {comment.id})")
                history = report_codec.decode(comment.body)
                logger.info(f"Extracted {len(history)} existing reports from comment")
                reports = [report, *history]
                rendered = render_reports(reports, self.context)
                store.update_comment(comment.id, report_codec.encode(rendered, reports))
                logger.info(f"Updated comment {comment.id} with new report")
                return ReporterOutputs(report=rendered, denied_tools=denied_tools)
            logger.info("No existing comment found, creating new one")

        rendered = render_reports([report], self.context)
        store.create_comment(issue_number, report_codec.encode(rendered, [report]))
        logger.info(f"Created new comment on issue/PR #{issue_number}")
        return ReporterOutputs(report=rendered, denied_tools=denied_tools)

    def _require_store(self) -> CommentStore:
        if self.store is None:
            raise DenylogError("A comment store is required unless comments are skipped")
        return self.store


__all__ = [
    "DenialReporter",
    "DenylogError",
    "NO_DENIALS_REPORT",
    "ReporterInputs",
    "ReporterOutputs",
    "find_report_comment",
]
