"""
Test utilities for denylog tests.

This module provides helper functions and classes for building
transcripts and faking the comment store.
"""

from typing import Any

from denylog.github_comments import Comment


def assistant_tool_use(tool_use_id: str, name: str, tool_input: dict[str, Any]) -> dict:
    """Assistant message with a single tool_use entry."""
    return {
        "type": "assistant",
        "message": {
            "content": [
                {"type": "tool_use", "id": tool_use_id, "name": name, "input": tool_input}
            ]
        },
    }


def user_tool_result(tool_use_id: str, content: Any, is_error: bool = True) -> dict:
    """User message with a single tool_result entry."""
    return {
        "type": "user",
        "message": {
            "content": [
                {
                    "type": "tool_result",
                    "tool_use_id": tool_use_id,
                    "is_error": is_error,
                    "content": content,
                }
            ]
        },
    }


class FakeCommentStore:
    """In-memory comment store recording every call."""

    def __init__(self, comments: list[Comment] | None = None):
        self.comments = list(comments or [])
        self.created: list[tuple[int, str]] = []
        self.updated: list[tuple[int, str]] = []
        self.list_calls: list[int] = []

    def list_comments(self, issue_number: int) -> list[Comment]:
        self.list_calls.append(issue_number)
        return list(self.comments)

    def create_comment(self, issue_number: int, body: str) -> None:
        self.created.append((issue_number, body))
        next_id = max((comment.id for comment in self.comments), default=0) + 1
        self.comments.append(Comment(id=next_id, body=body))

    def update_comment(self, comment_id: int, body: str) -> None:
        self.updated.append((comment_id, body))
        for comment in self.comments:
            if comment.id == comment_id:
                comment.body = body
