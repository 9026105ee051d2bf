"""
Shared test fixtures for denylog tests.

This module provides common fixtures used across all test modules:
- Transcripts and execution files
- Sample reports
- Run context
- In-memory comment store
- GitHub Actions environment
"""

import json

import pytest

from denylog.models import Report, ToolInvocation
from denylog.run_context import RunContext
from utils import FakeCommentStore, assistant_tool_use, user_tool_result

# ============================================================================
# TRANSCRIPT FIXTURES
# ============================================================================


@pytest.fixture
def denied_bash_transcript():
    """Transcript with one denied Bash call."""
    return [
        assistant_tool_use("toolu_1", "Bash", {"command": "rm -rf /"}),
        user_tool_result("toolu_1", "You want to use Bash but you haven't granted it yet."),
    ]


@pytest.fixture
def transcript_file(tmp_path, denied_bash_transcript):
    """Execution file containing the denied Bash transcript."""
    path = tmp_path / "execution.json"
    path.write_text(json.dumps(denied_bash_transcript), encoding="utf-8")
    return path


@pytest.fixture
def clean_transcript_file(tmp_path):
    """Execution file without any denial."""
    path = tmp_path / "clean.json"
    path.write_text(
        json.dumps(
            [
                assistant_tool_use("toolu_1", "Grep", {"pattern": "TODO"}),
                user_tool_result("toolu_1", "Found 3 matches", is_error=False),
            ]
        ),
        encoding="utf-8",
    )
    return path


# ============================================================================
# REPORT FIXTURES
# ============================================================================


@pytest.fixture
def run_context():
    """Run context of a pull request event."""
    return RunContext(
        owner="octo",
        repo="widgets",
        run_id=42,
        event_name="pull_request",
        event_payload={"pull_request": {"number": 7}},
    )


@pytest.fixture
def bash_report():
    """Report of run 1 with one denied Bash call."""
    return Report(run_id=1, denied_tools=[ToolInvocation("Bash", {"command": "ls"})])


@pytest.fixture
def write_report():
    """Report of run 2 with two denied calls."""
    return Report(
        run_id=2,
        denied_tools=[
            ToolInvocation("Write", {"file_path": "/tmp/a.txt", "content": "a"}),
            ToolInvocation("WebFetch", {"url": "https://example.com"}),
        ],
    )


# ============================================================================
# COMMENT STORE
# ============================================================================


@pytest.fixture
def fake_store():
    """Empty in-memory comment store."""
    return FakeCommentStore()


@pytest.fixture
def actions_env(tmp_path, monkeypatch):
    """GitHub Actions environment of a pull request run."""
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"pull_request": {"number": 7}}), encoding="utf-8")
    env = {
        "GITHUB_REPOSITORY": "octo/widgets",
        "GITHUB_RUN_ID": "42",
        "GITHUB_EVENT_NAME": "pull_request",
        "GITHUB_EVENT_PATH": str(event_path),
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    for key in (
        "GITHUB_OUTPUT",
        "GITHUB_STEP_SUMMARY",
        "GITHUB_TOKEN",
        "INPUT_GITHUB-TOKEN",
        "INPUT_STICKY-COMMENT",
        "INPUT_SKIP-COMMENT",
        "INPUT_SKIP-WHEN-CLEAN",
        "INPUT_CLAUDE-CODE-EXECUTION-FILE",
        "DENYLOG_EXECUTION_FILE",
        "DENYLOG_STICKY_COMMENT",
        "DENYLOG_SKIP_COMMENT",
        "DENYLOG_SKIP_WHEN_CLEAN",
        "DENYLOG_MISSING_INVOCATION",
        "GITHUB_SERVER_URL",
        "GITHUB_API_URL",
    ):
        monkeypatch.delenv(key, raising=False)
    return env
