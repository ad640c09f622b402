"""Tests for syntax diagnostics."""

from __future__ import annotations

import pytest

from shellscan.grammar.diagnostics import (
    IssueCode,
    ShellSyntaxError,
    SyntaxIssue,
    check,
    diagnose,
)
from shellscan.grammar.parser import Parser


def codes(text: str) -> list[IssueCode]:
    return [issue.code for issue in diagnose(text)]


class TestDiagnose:
    """Tests for diagnose function."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "   ",
            "ls -l",
            "a; b",
            "a;",
            "sleep 1 &",
            "a && b || c",
            "cat < in | sort > out 2>> err",
            "echo 'a | b' \"c;d\"",
            "(cd /tmp && ls) | wc -l",
            r"echo a\;b",
        ],
    )
    def test_well_formed(self, text: str) -> None:
        """Well-formed lines have no issues."""
        assert diagnose(text) == []

    def test_trailing_pipe(self) -> None:
        """A dangling | is an empty command."""
        issues = diagnose("ls |")
        assert [i.code for i in issues] == [IssueCode.EMPTY_COMMAND]
        assert "`|'" in issues[0].message

    def test_leading_pipe(self) -> None:
        """A leading | is reported at the operator."""
        issues = diagnose("| ls")
        assert issues == [
            SyntaxIssue(
                IssueCode.EMPTY_COMMAND,
                "syntax error near unexpected token `|'",
                0,
            )
        ]

    def test_double_pipe_gap(self) -> None:
        """a | | b has an empty middle command."""
        assert codes("a | | b") == [IssueCode.EMPTY_COMMAND]

    def test_dangling_and(self) -> None:
        """&& at end of line is an empty pipeline."""
        issues = diagnose("make &&")
        assert [i.code for i in issues] == [IssueCode.EMPTY_PIPELINE]
        assert issues[0].message == "missing command after `&&'"

    def test_leading_or(self) -> None:
        """|| with nothing before it is an empty pipeline."""
        assert codes("|| b") == [IssueCode.EMPTY_PIPELINE]

    def test_double_separator(self) -> None:
        """;; is an empty conditional."""
        issues = diagnose("a ;; b")
        assert [i.code for i in issues] == [IssueCode.EMPTY_CONDITIONAL]
        assert issues[0].position == 3

    def test_leading_background(self) -> None:
        """& with nothing before it is an empty conditional."""
        assert codes("& ls") == [IssueCode.EMPTY_CONDITIONAL]

    def test_background_then_and(self) -> None:
        """a & && b has an empty pipeline before &&."""
        assert codes("a & && b") == [IssueCode.EMPTY_PIPELINE]

    def test_missing_redirect_target(self) -> None:
        """A redirect at the end of a command has no target."""
        issues = diagnose("echo hi > | cat")
        assert [i.code for i in issues] == [IssueCode.MISSING_REDIRECT_TARGET]
        assert issues[0].position == 8

    def test_redirect_followed_by_redirect(self) -> None:
        """A redirect directly followed by another lacks a target."""
        assert codes("cmd > < in") == [IssueCode.MISSING_REDIRECT_TARGET]

    def test_redirect_into_group(self) -> None:
        """A group is not a redirect target."""
        assert IssueCode.MISSING_REDIRECT_TARGET in codes("> (ls)")

    def test_unterminated_single_quote(self) -> None:
        """An open single quote is reported at its word."""
        issues = diagnose("echo 'abc")
        assert [i.code for i in issues] == [IssueCode.UNTERMINATED_QUOTE]
        assert issues[0].position == 5

    def test_unterminated_double_quote(self) -> None:
        """An open double quote swallows later operators."""
        assert codes('echo "a | b') == [IssueCode.UNTERMINATED_QUOTE]

    def test_trailing_escape(self) -> None:
        """A lone trailing backslash is reported."""
        issues = diagnose("echo abc\\")
        assert [i.code for i in issues] == [IssueCode.TRAILING_ESCAPE]
        assert issues[0].position == 8

    def test_unclosed_group(self) -> None:
        """An unmatched ( is reported."""
        assert codes("(a; b") == [IssueCode.UNBALANCED_GROUP]

    def test_stray_close_paren(self) -> None:
        """An unmatched ) is reported."""
        assert codes("a )") == [IssueCode.UNBALANCED_GROUP]

    def test_issue_inside_group(self) -> None:
        """Group bodies are checked as command lines."""
        assert codes("(a |) > out") == [IssueCode.EMPTY_COMMAND]

    def test_word_after_group(self) -> None:
        """A word after a group is reported at the word."""
        issues = diagnose("(a) b")
        assert [i.code for i in issues] == [IssueCode.MIXED_GROUP]
        assert issues[0].position == 4
        assert issues[0].message == "syntax error near unexpected token `b'"

    def test_group_after_word(self) -> None:
        """A group after a word is reported at the (."""
        issues = diagnose("echo (a)")
        assert [i.code for i in issues] == [IssueCode.MIXED_GROUP]
        assert issues[0].position == 5

    def test_redirect_target_after_group(self) -> None:
        """A redirect target after a group is not an argument."""
        assert diagnose("(a) > out 2>> err") == []

    def test_empty_group(self) -> None:
        """() has nothing to run and is reported at the )."""
        issues = diagnose("( )")
        assert issues == [
            SyntaxIssue(
                IssueCode.EMPTY_GROUP,
                "syntax error near unexpected token `)'",
                2,
            )
        ]

    def test_nested_empty_group(self) -> None:
        """Empty groups are found inside other groups."""
        assert codes("(())") == [IssueCode.EMPTY_GROUP]

    def test_unclosed_empty_group(self) -> None:
        """An unclosed ( is reported once, not also as empty."""
        assert codes("(") == [IssueCode.UNBALANCED_GROUP]

    def test_issues_in_source_order(self) -> None:
        """Issues are sorted by position."""
        issues = diagnose("| a ; b && ; c >")
        positions = [i.position for i in issues]
        assert positions == sorted(positions)
        assert len(issues) == 3

    def test_accepts_parser(self) -> None:
        """diagnose accepts a parser segment."""
        conditional = Parser.command_line("a | ; b").conditional_begin()
        assert [i.code for i in diagnose(conditional)] == [IssueCode.EMPTY_COMMAND]


class TestSyntaxIssue:
    """Tests for SyntaxIssue dataclass."""

    def test_str(self) -> None:
        """str() shows position and message."""
        issue = SyntaxIssue(IssueCode.EMPTY_COMMAND, "boom", 4)
        assert str(issue) == "4: boom"


class TestCheck:
    """Tests for check function."""

    def test_passes_well_formed(self) -> None:
        """check returns None for a valid line."""
        assert check("a | b && c") is None

    def test_raises_with_issues(self) -> None:
        """check raises ShellSyntaxError carrying every issue."""
        with pytest.raises(ShellSyntaxError) as exc_info:
            check("a | ; b >")
        assert len(exc_info.value.issues) == 2
        assert "syntax error" in str(exc_info.value)

    def test_is_value_error(self) -> None:
        """ShellSyntaxError is a ValueError."""
        with pytest.raises(ValueError):
            check("&&")
