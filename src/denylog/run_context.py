"""Run context for denial reports.

Holds the identity of the repository and workflow run a report belongs to.
The context is built once from the GitHub Actions environment and passed
explicitly to the renderer and reporter.
"""

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "https://github.com"
DEFAULT_API_URL = "https://api.github.com"

PULL_REQUEST_EVENTS = frozenset(
    {
        "pull_request",
        "pull_request_target",
        "pull_request_review",
        "pull_request_review_comment",
    }
)
ISSUE_EVENTS = frozenset({"issues", "issue_comment"})


class RunContextError(Exception):
    """Raised when the run context cannot be determined."""

    pass


@dataclass
class RunContext:
    """Repository and workflow run identity.

    Attributes:
        owner: Repository owner
        repo: Repository name
        run_id: Workflow run identifier
        event_name: Name of the triggering event
        event_payload: Parsed webhook payload of the triggering event
        server_url: Base URL of the GitHub web UI
        api_url: Base URL of the GitHub REST API
    """

    owner: str
    repo: str
    run_id: int
    event_name: str = ""
    event_payload: dict[str, Any] = field(default_factory=dict)
    server_url: str = DEFAULT_SERVER_URL
    api_url: str = DEFAULT_API_URL

    def run_url(self, run_id: int) -> str:
        """URL of a workflow run in this repository."""
        return f"{self.server_url.rstrip('/')}/{self.owner}/{self.repo}/actions/runs/{run_id}"

    def issue_number(self) -> int:
        """Resolve the issue or pull request number of the triggering event.

        Pull request events read ``pull_request.number``; issue and issue
        comment events read ``issue.number`` (this covers comments on pull
        requests too).

        Raises:
            RunContextError: If the event does not refer to an issue or PR
        """
        key = None
        if self.event_name in PULL_REQUEST_EVENTS:
            key = "pull_request"
        elif self.event_name in ISSUE_EVENTS:
            key = "issue"

        if key is not None:
            subject = self.event_payload.get(key)
            if isinstance(subject, dict):
                number = subject.get("number")
                if isinstance(number, int) and not isinstance(number, bool) and number > 0:
                    return number

        raise RunContextError(f"Unable to get PR/Issue number from event: {self.event_name}")

    @classmethod
    def from_environment(cls, env: Mapping[str, str] | None = None) -> "RunContext":
        """Build the context from GitHub Actions environment variables.

        Args:
            env: Environment mapping (defaults to os.environ)

        Returns:
            RunContext: Context of the current run

        Raises:
            RunContextError: If required variables are missing or invalid
        """
        if env is None:
            env = os.environ

        repository = env.get("GITHUB_REPOSITORY", "")
        if repository.count("/") != 1 or not all(repository.split("/")):
            raise RunContextError(
                f"GITHUB_REPOSITORY must be in owner/repo format, got: {repository!r}"
            )
        owner, repo = repository.split("/")

        raw_run_id = env.get("GITHUB_RUN_ID", "")
        try:
            run_id = int(raw_run_id)
        except ValueError as e:
            raise RunContextError(f"Invalid GITHUB_RUN_ID: {raw_run_id!r}") from e

        return cls(
            owner=owner,
            repo=repo,
            run_id=run_id,
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            event_payload=cls._load_event_payload(env.get("GITHUB_EVENT_PATH", "")),
            server_url=env.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
            api_url=env.get("GITHUB_API_URL") or DEFAULT_API_URL,
        )

    @staticmethod
    def _load_event_payload(event_path: str) -> dict[str, Any]:
        """Read the webhook payload file; missing path means no payload."""
        if not event_path:
            logger.debug("GITHUB_EVENT_PATH not set, using empty event payload")
            return {}
        try:
            payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
        except OSError as e:
            raise RunContextError(f"Cannot read event payload {event_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise RunContextError(f"Invalid event payload {event_path}: {e}") from e
        if not isinstance(payload, dict):
            raise RunContextError(f"Event payload {event_path} is not a JSON object")
        return payload


__all__ = ["RunContext", "RunContextError"]
