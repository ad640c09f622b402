"""Tool handlers: run the parser over a command line and format the result."""

from __future__ import annotations

import json
import logging

from shellscan.config import get_settings
from shellscan.grammar import (
    SyntaxIssue,
    Tokenizer,
    build_tree,
    diagnose,
)
from shellscan.tools.types import ToolHandler, ToolResult

logger = logging.getLogger(__name__)


def _issue_to_dict(issue: SyntaxIssue) -> dict[str, object]:
    return {
        "code": issue.code.value,
        "message": issue.message,
        "position": issue.position,
    }


def _dumps(payload: object) -> str:
    return json.dumps(payload, indent=get_settings().json_indent)


def handle_parse(command: str) -> ToolResult:
    """Return the conditional/pipeline/command tree and its syntax issues."""
    tree = build_tree(command)
    issues = diagnose(command)
    payload = {
        "tree": tree.model_dump(mode="json"),
        "issues": [_issue_to_dict(issue) for issue in issues],
    }
    return ToolResult(output=_dumps(payload))


def handle_tokenize(command: str) -> ToolResult:
    """Return the token stream of the command line."""
    tokens = [
        {
            "kind": token.type_name,
            "text": token.text,
            "raw": token.raw,
            "start": token.start,
            "stop": token.stop,
            "quoted": token.quoted,
        }
        for token in Tokenizer.from_text(command)
    ]
    return ToolResult(output=_dumps(tokens))


def handle_check(command: str) -> ToolResult:
    """Return ``OK`` or one line per syntax issue."""
    issues = diagnose(command)
    if not issues:
        return ToolResult(output="OK")
    return ToolResult(output="\n".join(str(issue) for issue in issues))


# Tools that take a command line, by tool name
TOOL_HANDLERS: dict[str, ToolHandler] = {
    "parse_command_line": handle_parse,
    "tokenize_command_line": handle_tokenize,
    "check_command_line": handle_check,
}

LIST_TOOLS_NAME: str = "list_shellscan_tools"


def execute_tool(name: str, arguments: dict[str, str]) -> ToolResult:
    """Execute a tool by name.

    Args:
        name: The tool name.
        arguments: The tool arguments; command-line tools read ``command``.

    Returns:
        The tool result.

    Raises:
        ValueError: If the tool name is unknown.
    """
    if name == LIST_TOOLS_NAME:
        return ToolResult(output=f"Tools: {', '.join(TOOL_HANDLERS)}")

    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        raise ValueError(f"Unknown tool: {name}")

    command = arguments.get("command", "")
    if not command.strip():
        return ToolResult(output="Error: No command provided", is_error=True)

    limit = get_settings().max_command_length
    if len(command) > limit:
        logger.warning(f"Rejected {name} call: {len(command)} chars > {limit}")
        return ToolResult(
            output=f"Error: Command is longer than {limit} characters",
            is_error=True,
        )

    logger.debug(f"Running {name} on {len(command)} chars")
    return handler(command)
