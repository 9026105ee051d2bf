"""Denial detection over assistant transcripts.

This module finds the tool invocations that were blocked by the permission
system during a run. It scans the transcript in two kinds of messages:
- assistant messages, which carry ``tool_use`` attempts (id, name, input)
- user messages, which carry ``tool_result`` entries for those attempts

A tool result counts as a denial when it is flagged as an error and its text
matches one of the denial rules. Rules are plain data so new phrasings can
be added without touching the scan.
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from denylog.models import ToolInvocation

logger = logging.getLogger(__name__)


class UnknownInvocationError(Exception):
    """A denial referenced a tool invocation the transcript never recorded."""

    pass


class RuleKind(str, Enum):
    """How a denial rule is matched against result text."""

    SUFFIX = "suffix"
    SUBSTRING = "substring"


class MissingInvocationPolicy(str, Enum):
    """What to do with a denial whose invocation id was never seen."""

    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class DenialRule:
    """A named predicate over tool result text."""

    name: str
    kind: RuleKind
    phrase: str

    def matches(self, text: str) -> bool:
        if self.kind is RuleKind.SUFFIX:
            return text.endswith(self.phrase)
        return self.phrase in text


DENIAL_RULES: tuple[DenialRule, ...] = (
    DenialRule("not_granted", RuleKind.SUFFIX, " but you haven't granted it yet."),
    DenialRule("requires_approval", RuleKind.SUBSTRING, " requires approval"),
    DenialRule("require_approval", RuleKind.SUBSTRING, " require approval"),
    DenialRule("denied", RuleKind.SUFFIX, " has been denied."),
)


def match_denial_rule(
    text: str, rules: Sequence[DenialRule] = DENIAL_RULES
) -> DenialRule | None:
    """Return the first rule matching text, or None."""
    if not text:
        return None
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def result_text(content: Any) -> str:
    """Reduce tool result content to plain text.

    Content is either a string or a list of content blocks; only ``text``
    blocks contribute.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = [
            block.get("text", "")
            for block in content
            if isinstance(block, dict) and block.get("type") == "text"
        ]
        return "\n".join(part for part in parts if isinstance(part, str))
    return ""


def _content_items(message: Any, role: str) -> Iterable[dict[str, Any]]:
    """Yield dict content entries of a message with the given role."""
    if not isinstance(message, dict) or message.get("type") != role:
        return
    body = message.get("message")
    if not isinstance(body, dict):
        return
    content = body.get("content")
    if not isinstance(content, list):
        return
    for item in content:
        if isinstance(item, dict):
            yield item


def extract_denied_tools(
    messages: Sequence[Any],
    rules: Sequence[DenialRule] = DENIAL_RULES,
    missing_policy: MissingInvocationPolicy = MissingInvocationPolicy.SKIP,
) -> list[ToolInvocation]:
    """Extract denied tool invocations from a transcript.

    Args:
        messages: Transcript messages, in order
        rules: Denial rules to match tool result text against
        missing_policy: Handling of denials whose invocation id was never seen

    Returns:
        list[ToolInvocation]: One entry per denial, in the order observed

    Raises:
        UnknownInvocationError: If missing_policy is FAIL and a denial
            references an unknown invocation id
    """
    invocations: dict[str, ToolInvocation] = {}
    denied_ids: list[str] = []

    for message in messages:
        for item in _content_items(message, "assistant"):
            if item.get("type") == "tool_use" and "id" in item:
                tool_input = item.get("input")
                invocations[item["id"]] = ToolInvocation(
                    name=str(item.get("name", "")),
                    input=tool_input if isinstance(tool_input, dict) else {},
                )

        for item in _content_items(message, "user"):
            if item.get("type") != "tool_result" or not item.get("is_error"):
                continue
            rule = match_denial_rule(result_text(item.get("content")), rules)
            if rule is not None:
                logger.debug(f"Tool use {item.get('tool_use_id')} denied ({rule.name})")
                denied_ids.append(item.get("tool_use_id"))

    denied: list[ToolInvocation] = []
    for tool_use_id in denied_ids:
        invocation = invocations.get(tool_use_id)
        if invocation is None:
            if missing_policy is MissingInvocationPolicy.FAIL:
                raise UnknownInvocationError(
                    f"Denied tool result references unknown tool use: {tool_use_id}"
                )
            logger.warning(f"Skipping denial for unknown tool use: {tool_use_id}")
            continue
        denied.append(invocation)
    return denied


__all__ = [
    "DENIAL_RULES",
    "DenialRule",
    "MissingInvocationPolicy",
    "RuleKind",
    "UnknownInvocationError",
    "extract_denied_tools",
    "match_denial_rule",
    "result_text",
]
