"""Tests for tool handlers."""

from __future__ import annotations

import json
from unittest.mock import patch

import pytest

from shellscan.config import Settings
from shellscan.tools.handlers import (
    LIST_TOOLS_NAME,
    TOOL_HANDLERS,
    execute_tool,
    handle_check,
    handle_parse,
    handle_tokenize,
)


class TestHandleParse:
    """Tests for handle_parse handler."""

    def test_returns_tree_and_issues(self, test_settings: Settings) -> None:
        """handle_parse returns the JSON tree and an empty issue list."""
        with patch("shellscan.tools.handlers.get_settings", return_value=test_settings):
            result = handle_parse("a | b && c")

        data = json.loads(result.output)
        assert data["issues"] == []
        conditional = data["tree"]["conditionals"][0]
        assert conditional["joins"] == ["and"]
        assert len(conditional["pipelines"]) == 2
        assert not result.is_error

    def test_reports_issues(self, test_settings: Settings) -> None:
        """Syntax issues are included alongside the tree."""
        with patch("shellscan.tools.handlers.get_settings", return_value=test_settings):
            result = handle_parse("ls |")

        data = json.loads(result.output)
        assert data["issues"][0]["code"] == "empty_command"
        assert data["issues"][0]["position"] == 4

    def test_compact_output(self, test_settings: Settings) -> None:
        """json_indent=None produces single-line JSON."""
        with patch("shellscan.tools.handlers.get_settings", return_value=test_settings):
            result = handle_parse("ls")
        assert "\n" not in result.output


class TestHandleTokenize:
    """Tests for handle_tokenize handler."""

    def test_token_list(self, test_settings: Settings) -> None:
        """handle_tokenize lists kind, text and span for each token."""
        with patch("shellscan.tools.handlers.get_settings", return_value=test_settings):
            result = handle_tokenize("echo 'x y' > out")

        tokens = json.loads(result.output)
        assert [t["kind"] for t in tokens] == ["word", "word", "redirect", "word"]
        assert tokens[1] == {
            "kind": "word",
            "text": "x y",
            "raw": "'x y'",
            "start": 5,
            "stop": 10,
            "quoted": True,
        }


class TestHandleCheck:
    """Tests for handle_check handler."""

    def test_ok(self) -> None:
        """A valid line checks OK."""
        assert handle_check("a && b").output == "OK"

    def test_issue_lines(self) -> None:
        """Each issue is one line."""
        result = handle_check("| a &&")
        lines = result.output.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("0: ")


class TestExecuteTool:
    """Tests for execute_tool function."""

    def test_dispatches_by_name(self) -> None:
        """execute_tool routes to the named handler."""
        result = execute_tool("check_command_line", {"command": "ls"})
        assert result.output == "OK"

    def test_list_tools(self) -> None:
        """The list tool names every command-line tool."""
        result = execute_tool(LIST_TOOLS_NAME, {})
        for name in TOOL_HANDLERS:
            assert name in result.output

    def test_unknown_tool(self) -> None:
        """Unknown tool names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown tool"):
            execute_tool("run_command", {"command": "ls"})

    def test_missing_command(self) -> None:
        """A missing or blank command is an error result."""
        assert execute_tool("parse_command_line", {}).is_error
        result = execute_tool("parse_command_line", {"command": "   "})
        assert result.is_error
        assert result.output == "Error: No command provided"

    def test_command_too_long(self, test_settings: Settings) -> None:
        """Commands longer than max_command_length are rejected."""
        with patch("shellscan.tools.handlers.get_settings", return_value=test_settings):
            result = execute_tool("tokenize_command_line", {"command": "x" * 65})
        assert result.is_error
        assert "64" in result.output
