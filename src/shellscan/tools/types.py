"""Type definitions for tool handlers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Result of a tool call.

    Attributes:
        output: Text returned to the client.
        is_error: Whether the call failed before reaching the parser.
    """

    output: str
    is_error: bool = False


class ToolHandler(Protocol):
    """Protocol for tool handlers: take a command line, describe it."""

    def __call__(self, command: str) -> ToolResult:
        """Handle a command line and return the result."""
        ...


class ToolError(ValueError):
    """A tool call that failed before reaching the parser.

    The MCP server reports raised exceptions to the client as error results.
    """
