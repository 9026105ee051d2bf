"""GitHub Issue Comment Store

List, create and update issue / pull request comments through the GitHub
REST API.

Security Requirements:
- HTTPS only for API calls
- Input validation
- Timeout on API calls
- Tokens never appear in error messages
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Protocol

import requests

from denylog.log_sanitizer import LogSanitizer
from denylog.run_context import DEFAULT_API_URL

logger = logging.getLogger(__name__)


@dataclass
class Comment:
    """An issue or pull request comment."""

    id: int
    body: str | None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "Comment":
        """Create from a REST API comment object."""
        return cls(id=data["id"], body=data.get("body"))


class CommentStoreError(Exception):
    """Failed to read or write comments."""

    pass


class CommentStore(Protocol):
    """Operations the reporter needs from a comment store."""

    def list_comments(self, issue_number: int) -> list[Comment]: ...

    def create_comment(self, issue_number: int, body: str) -> None: ...

    def update_comment(self, comment_id: int, body: str) -> None: ...


class GitHubCommentStore:
    """Comment store backed by the GitHub REST API."""

    API_TIMEOUT = 30
    PAGE_SIZE = 100

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        api_url: str = DEFAULT_API_URL,
    ):
        """Initialize the store for one repository.

        Args:
            owner: Repository owner
            repo: Repository name
            token: GitHub token with issues/pull-requests write access
            api_url: Base URL of the REST API

        Raises:
            ValueError: If inputs are invalid
        """
        self._validate_repo_owner(owner)
        self._validate_repo_name(repo)
        self._validate_github_token(token)
        self._validate_api_url(api_url)

        self.owner = owner
        self.repo = repo
        self.api_url = api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    @property
    def _issues_url(self) -> str:
        return f"{self.api_url}/repos/{self.owner}/{self.repo}/issues"

    def list_comments(self, issue_number: int) -> list[Comment]:
        """List all comments of an issue or pull request, oldest first.

        Follows pagination until the last page.

        Raises:
            CommentStoreError: If the API call fails
        """
        url: str | None = f"{self._issues_url}/{issue_number}/comments"
        params: dict[str, Any] | None = {"per_page": self.PAGE_SIZE}
        comments: list[Comment] = []

        while url:
            response = self._request("GET", url, params=params, action="list comments")
            comments.extend(Comment.from_api(item) for item in response.json())
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None

        logger.debug(f"Listed {len(comments)} comments on #{issue_number}")
        return comments

    def create_comment(self, issue_number: int, body: str) -> None:
        """Create a comment on an issue or pull request.

        Raises:
            CommentStoreError: If the API call fails
        """
        self._request(
            "POST",
            f"{self._issues_url}/{issue_number}/comments",
            json={"body": body},
            action="create comment",
        )

    def update_comment(self, comment_id: int, body: str) -> None:
        """Replace the body of an existing comment.

        Raises:
            CommentStoreError: If the API call fails
        """
        self._request(
            "PATCH",
            f"{self._issues_url}/comments/{comment_id}",
            json={"body": body},
            action="update comment",
        )

    def _request(self, method: str, url: str, action: str, **kwargs: Any) -> requests.Response:
        """Send one API request; no retries.

        Raises:
            CommentStoreError: On transport errors or non-2xx responses
        """
        try:
            response = requests.request(
                method, url, headers=self._headers, timeout=self.API_TIMEOUT, **kwargs
            )
        except requests.RequestException as e:
            raise CommentStoreError(
                f"Failed to {action}: {LogSanitizer.sanitize(str(e))}"
            ) from e

        if not 200 <= response.status_code < 300:
            try:
                error_msg = response.json().get("message", "Unknown error")
            except (ValueError, AttributeError):
                error_msg = "Unknown error"
            raise CommentStoreError(
                f"Failed to {action}: {response.status_code} - {LogSanitizer.sanitize(error_msg)}"
            )
        return response

    @classmethod
    def _validate_repo_owner(cls, repo_owner: str) -> None:
        """Validate repository owner."""
        if not repo_owner:
            raise ValueError("Repository owner cannot be empty")

        if not re.match(r"^[a-zA-Z0-9_-]+$", repo_owner):
            raise ValueError(f"Invalid repository owner: {repo_owner}")

    @classmethod
    def _validate_repo_name(cls, repo_name: str) -> None:
        """Validate repository name."""
        if not repo_name:
            raise ValueError("Repository name cannot be empty")

        if not re.match(r"^[a-zA-Z0-9._-]+$", repo_name):
            raise ValueError(f"Invalid repository name: {repo_name}")

    @classmethod
    def _validate_github_token(cls, github_token: str) -> None:
        """Validate GitHub token."""
        if not github_token:
            raise ValueError("GitHub token cannot be empty")

    @classmethod
    def _validate_api_url(cls, api_url: str) -> None:
        """Only HTTPS API endpoints are allowed."""
        if not api_url.startswith("https://"):
            raise ValueError(f"GitHub API URL must use HTTPS: {api_url}")


__all__ = ["Comment", "CommentStore", "CommentStoreError", "GitHubCommentStore"]
