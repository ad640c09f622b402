"""Syntax diagnostics for command lines.

The navigation primitives accept anything and represent odd input
structurally. This module reports those structures the way a shell would
before running a line: a dangling ``|``, an ``&&`` with nothing after it, a
redirect without a target, an unterminated quote.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from shellscan.grammar.parser import Parser
from shellscan.grammar.region import Region
from shellscan.grammar.tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class IssueCode(Enum):
    UNTERMINATED_QUOTE = "unterminated_quote"
    TRAILING_ESCAPE = "trailing_escape"
    EMPTY_COMMAND = "empty_command"
    EMPTY_PIPELINE = "empty_pipeline"
    EMPTY_CONDITIONAL = "empty_conditional"
    MISSING_REDIRECT_TARGET = "missing_redirect_target"
    UNBALANCED_GROUP = "unbalanced_group"
    EMPTY_GROUP = "empty_group"
    MIXED_GROUP = "mixed_group"


@dataclass(frozen=True, slots=True)
class SyntaxIssue:
    """A syntax problem found at ``position`` in the command line."""

    code: IssueCode
    message: str
    position: int

    def __str__(self) -> str:
        return f"{self.position}: {self.message}"


class ShellSyntaxError(ValueError):
    """Raised by ``check`` when a command line has syntax issues."""

    def __init__(self, issues: Sequence[SyntaxIssue]) -> None:
        self.issues: tuple[SyntaxIssue, ...] = tuple(issues)
        super().__init__(f"syntax error at {self.issues[0]}")


def _unexpected(kind: TokenKind) -> str:
    return f"syntax error near unexpected token `{kind.spelling}'"


def _missing_target(redirect: Token) -> SyntaxIssue:
    return SyntaxIssue(
        IssueCode.MISSING_REDIRECT_TARGET,
        f"missing target for redirection `{redirect.raw}'",
        redirect.start,
    )


def _check_command(command: Parser, issues: list[SyntaxIssue]) -> None:
    open_at: list[int] = []
    previous: Token | None = None
    has_args = False
    after_group = False
    for token in command.token_begin():
        kind = token.kind
        is_target = False
        if previous is not None and previous.kind is TokenKind.REDIRECT:
            if kind is TokenKind.WORD:
                is_target = True
            else:
                issues.append(_missing_target(previous))

        if kind is TokenKind.LPAREN:
            # A group is a whole command: no words or second group beside it
            if not open_at and (has_args or after_group):
                issues.append(
                    SyntaxIssue(IssueCode.MIXED_GROUP, _unexpected(kind), token.start)
                )
            open_at.append(token.start)
        elif kind is TokenKind.RPAREN:
            if open_at:
                open_at.pop()
                if not open_at:
                    after_group = True
            else:
                issues.append(
                    SyntaxIssue(
                        IssueCode.UNBALANCED_GROUP, _unexpected(kind), token.start
                    )
                )
        elif not open_at and kind is TokenKind.WORD:
            unclosed = token.unclosed
            if unclosed == "\\":
                issues.append(
                    SyntaxIssue(
                        IssueCode.TRAILING_ESCAPE,
                        "trailing backslash escapes nothing",
                        token.stop - 1,
                    )
                )
            elif unclosed is not None:
                issues.append(
                    SyntaxIssue(
                        IssueCode.UNTERMINATED_QUOTE,
                        f"unexpected end of line while looking for matching `{unclosed}'",
                        token.start,
                    )
                )
            if not is_target:
                if after_group:
                    issues.append(
                        SyntaxIssue(
                            IssueCode.MIXED_GROUP,
                            f"syntax error near unexpected token `{token.raw}'",
                            token.start,
                        )
                    )
                has_args = True
        # Group contents are checked as a nested command line below
        previous = None if open_at else token

    if previous is not None and previous.kind is TokenKind.REDIRECT:
        issues.append(_missing_target(previous))
    for position in open_at:
        issues.append(
            SyntaxIssue(IssueCode.UNBALANCED_GROUP, "unclosed `('", position)
        )

    body = command.group_body()
    if body is not None:
        if not open_at and body.is_blank():
            issues.append(
                SyntaxIssue(
                    IssueCode.EMPTY_GROUP, _unexpected(TokenKind.RPAREN), body.stop
                )
            )
        _check_line(body, issues)


def _check_segments(
    parent: Parser,
    code: IssueCode,
    issues: list[SyntaxIssue],
    check_child: Callable[[Parser, list[SyntaxIssue]], None],
) -> None:
    """Report blank segments between the delimiters of ``parent``."""
    segments = list(parent.children())
    for index, segment in enumerate(segments):
        if not segment.is_blank():
            check_child(segment, issues)
            continue
        if index < len(segments) - 1:
            issues.append(SyntaxIssue(code, _unexpected(segment.next_op()), segment.stop))
        else:
            operator = segments[index - 1].next_op()
            issues.append(
                SyntaxIssue(
                    code,
                    f"missing command after `{operator.spelling}'",
                    segment.start,
                )
            )


def _check_pipeline(pipeline: Parser, issues: list[SyntaxIssue]) -> None:
    _check_segments(pipeline, IssueCode.EMPTY_COMMAND, issues, _check_command)


def _check_conditional(conditional: Parser, issues: list[SyntaxIssue]) -> None:
    _check_segments(conditional, IssueCode.EMPTY_PIPELINE, issues, _check_pipeline)


def _check_line(line: Parser, issues: list[SyntaxIssue]) -> None:
    for conditional in line.children():
        if not conditional.is_blank():
            _check_conditional(conditional, issues)
            continue
        # A trailing separator leaves a blank last conditional, which is fine
        separator = conditional.next_op()
        if separator in (TokenKind.SEQUENCE, TokenKind.BACKGROUND):
            issues.append(
                SyntaxIssue(
                    IssueCode.EMPTY_CONDITIONAL,
                    _unexpected(separator),
                    conditional.stop,
                )
            )


def diagnose(source: str | Region | Parser) -> list[SyntaxIssue]:
    """Return the syntax issues of a command line in source order.

    Args:
        source: Command-line text, or a region or parser over it.

    Returns:
        A list of issues, empty when the line is well formed. A blank line
        is well formed.

    Examples:
        >>> [i.code.value for i in diagnose("ls |")]
        ['empty_command']
        >>> diagnose("sleep 1 &")
        []
    """
    line = Parser.command_line(source)

    issues: list[SyntaxIssue] = []
    _check_line(line, issues)
    issues.sort(key=lambda issue: issue.position)

    if issues:
        logger.debug(f"Found {len(issues)} syntax issues in {line.text!r}")
    return issues


def check(source: str | Region | Parser) -> None:
    """Raise ``ShellSyntaxError`` if the command line has syntax issues."""
    issues = diagnose(source)
    if issues:
        raise ShellSyntaxError(issues)
