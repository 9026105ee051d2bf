"""
Report Data Models

Dataclasses describing denied tool invocations and per-run reports.

The dictionary form of these models is the persisted wire format embedded in
report comments, so the keys (``runId``, ``deniedTools``, ``name``, ``input``)
must not change.
"""

from dataclasses import dataclass, field
from typing import Any, Union

JSONValue = Union[str, int, float, bool, None, dict[str, "JSONValue"], list["JSONValue"]]


@dataclass
class ToolInvocation:
    """A single attempted tool call.

    Attributes:
        name: Tool name as reported by the assistant (e.g. ``Bash``)
        input: Tool input arguments, in the order the assistant sent them
    """

    name: str
    input: dict[str, JSONValue] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary form."""
        return {"name": self.name, "input": self.input}

    @classmethod
    def from_dict(cls, data: Any) -> "ToolInvocation":
        """Create from the persisted dictionary form.

        Raises:
            ValueError: If data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Tool invocation must be an object, got {type(data).__name__}")
        name = data.get("name")
        tool_input = data.get("input", {})
        if not isinstance(name, str):
            raise ValueError("Tool invocation name must be a string")
        if not isinstance(tool_input, dict):
            raise ValueError(f"Input of tool {name} must be an object")
        return cls(name=name, input=tool_input)


@dataclass
class Report:
    """Denied tool invocations of one automation run.

    Attributes:
        run_id: Workflow run identifier
        denied_tools: Denied invocations, in the order they were observed
    """

    run_id: int
    denied_tools: list[ToolInvocation] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted dictionary form."""
        return {
            "runId": self.run_id,
            "deniedTools": [tool.to_dict() for tool in self.denied_tools],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Report":
        """Create from the persisted dictionary form.

        Raises:
            ValueError: If data does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Report must be an object, got {type(data).__name__}")
        run_id = data.get("runId")
        # bool is an int subclass; reject it explicitly
        if not isinstance(run_id, int) or isinstance(run_id, bool):
            raise ValueError(f"Invalid run id: {run_id!r}")
        denied_tools = data.get("deniedTools", [])
        if not isinstance(denied_tools, list):
            raise ValueError(f"deniedTools of run {run_id} must be a list")
        return cls(
            run_id=run_id,
            denied_tools=[ToolInvocation.from_dict(item) for item in denied_tools],
        )


__all__ = ["JSONValue", "Report", "ToolInvocation"]
