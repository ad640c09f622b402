"""Tools module for MCP tool definitions and handlers."""

from shellscan.tools.handlers import execute_tool
from shellscan.tools.registry import register_tools
from shellscan.tools.types import ToolError

__all__ = [
    "ToolError",
    "execute_tool",
    "register_tools",
]
