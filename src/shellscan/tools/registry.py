"""MCP tool registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import mcp.types as types

from shellscan.tools.handlers import LIST_TOOLS_NAME, execute_tool
from shellscan.tools.types import ToolError

if TYPE_CHECKING:
    from mcp.server import Server


# Tool descriptions
PARSE_COMMAND_LINE_DESCRIPTION: str = (
    "Parse a shell command line into conditionals (separated by ';' or a "
    "background '&'), pipelines (joined by '&&' or '||') and commands "
    "(joined by '|'). Returns JSON with each segment's exact source span, "
    "the arguments and redirections of every command, and any syntax "
    "issues such as a dangling pipe or an unterminated quote. Nothing is "
    "executed or expanded."
)

TOKENIZE_COMMAND_LINE_DESCRIPTION: str = (
    "Split a shell command line into tokens: words (quotes removed), "
    "redirection operators (<, >, >>, 2>, 2>>) and control operators "
    "(;, &, |, &&, ||, parentheses). Returns a JSON list."
)

CHECK_COMMAND_LINE_DESCRIPTION: str = (
    "Check a shell command line for syntax errors without running it. "
    "Returns 'OK' or one '<position>: <message>' line per problem."
)

LIST_SHELLSCAN_TOOLS_DESCRIPTION: str = "List all available shellscan tools"

COMMAND_INPUT_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "command": {
            "type": "string",
            "description": (
                "The full command line (e.g., 'cat < in | sort > out && echo done')"
            ),
        },
    },
    "required": ["command"],
}


def list_tool_definitions() -> list[types.Tool]:
    """Return the tools the server advertises."""
    return [
        types.Tool(
            name="parse_command_line",
            description=PARSE_COMMAND_LINE_DESCRIPTION,
            inputSchema=COMMAND_INPUT_SCHEMA,
        ),
        types.Tool(
            name="tokenize_command_line",
            description=TOKENIZE_COMMAND_LINE_DESCRIPTION,
            inputSchema=COMMAND_INPUT_SCHEMA,
        ),
        types.Tool(
            name="check_command_line",
            description=CHECK_COMMAND_LINE_DESCRIPTION,
            inputSchema=COMMAND_INPUT_SCHEMA,
        ),
        types.Tool(
            name=LIST_TOOLS_NAME,
            description=LIST_SHELLSCAN_TOOLS_DESCRIPTION,
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


def call_tool_content(
    name: str, arguments: dict[str, str] | None
) -> list[types.TextContent | types.ImageContent | types.EmbeddedResource]:
    """Run a tool and wrap its output as MCP content.

    Raises:
        ValueError: If the tool name is unknown.
        ToolError: If the call was rejected; the server turns it into an
            error result for the client.
    """
    result = execute_tool(name, arguments or {})
    if result.is_error:
        raise ToolError(result.output)
    return [types.TextContent(type="text", text=result.output)]


def register_tools(server: Server) -> None:
    """Register all MCP tools with the server.

    Args:
        server: The MCP server instance.
    """

    @server.list_tools()  # type: ignore[misc]
    async def list_tools() -> list[types.Tool]:
        """Return the list of available tools."""
        return list_tool_definitions()

    @server.call_tool()  # type: ignore[misc]
    async def call_tool(
        name: str, arguments: dict[str, str]
    ) -> list[types.TextContent | types.ImageContent | types.EmbeddedResource]:
        """Handle tool execution."""
        return call_tool_content(name, arguments)
