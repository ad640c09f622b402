"""Layered views over a command line.

A command line splits into conditionals on ``;``, ``&`` and end of line;
a conditional into pipelines on ``&&`` and ``||``; a pipeline into commands
on ``|``. Each view is a ``Parser``: a region tagged with its grammar level.

Example:
    >>> line = Parser.command_line("a | b && c | d")
    >>> [str(p).strip() for p in line.conditional_begin().children()]
    ['a | b', 'c | d']
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from shellscan.grammar.region import (
    Region,
    first_delimited,
    next_delimited,
    next_op,
)
from shellscan.grammar.tokens import RedirectOp, Token, TokenKind, Tokenizer


class Level(Enum):
    """Grammar levels, outermost first."""

    COMMAND_LINE = "command_line"
    CONDITIONAL = "conditional"
    PIPELINE = "pipeline"
    COMMAND = "command"

    @property
    def delimiters(self) -> frozenset[TokenKind]:
        """Operators that separate sibling segments at this level."""
        return _DELIMITERS[self]

    @property
    def child(self) -> Level | None:
        return _CHILDREN.get(self)


_DELIMITERS: dict[Level, frozenset[TokenKind]] = {
    Level.COMMAND_LINE: frozenset(),
    Level.CONDITIONAL: frozenset(
        {TokenKind.SEQUENCE, TokenKind.BACKGROUND, TokenKind.EOL}
    ),
    Level.PIPELINE: frozenset({TokenKind.AND, TokenKind.OR}),
    Level.COMMAND: frozenset({TokenKind.PIPE}),
}

_CHILDREN: dict[Level, Level] = {
    Level.COMMAND_LINE: Level.CONDITIONAL,
    Level.CONDITIONAL: Level.PIPELINE,
    Level.PIPELINE: Level.COMMAND,
}


@dataclass(frozen=True, slots=True)
class Redirection:
    """A redirection request: ``op`` applied to ``target``.

    ``target`` is None when the operator is not followed by a word.
    """

    op: RedirectOp
    target: str | None

    @property
    def fd(self) -> int:
        return self.op.fd

    @property
    def append(self) -> bool:
        return self.op.append


@dataclass(frozen=True, slots=True)
class CommandWords:
    """Positional arguments and redirections of one command."""

    args: tuple[str, ...]
    redirections: tuple[Redirection, ...]

    def __bool__(self) -> bool:
        return bool(self.args or self.redirections)


def _as_region(source: str | Region | Parser) -> Region:
    if isinstance(source, Parser):
        return source.region
    if isinstance(source, Region):
        return source
    return Region.from_text(source)


@dataclass(frozen=True, slots=True)
class Parser:
    """A segment of a command line at one grammar level."""

    level: Level
    region: Region

    @classmethod
    def command_line(cls, source: str | Region | Parser) -> Parser:
        return cls(Level.COMMAND_LINE, _as_region(source))

    @classmethod
    def conditional(cls, source: str | Region | Parser) -> Parser:
        return cls(Level.CONDITIONAL, _as_region(source))

    @classmethod
    def pipeline(cls, source: str | Region | Parser) -> Parser:
        return cls(Level.PIPELINE, _as_region(source))

    @classmethod
    def command(cls, source: str | Region | Parser) -> Parser:
        return cls(Level.COMMAND, _as_region(source))

    def __bool__(self) -> bool:
        """Return True if the region is non-empty."""
        return bool(self.region)

    def empty(self) -> bool:
        return self.region.empty()

    def is_blank(self) -> bool:
        """Return True if the region holds no tokens."""
        return self.token_begin().empty()

    def __str__(self) -> str:
        return self.region.text

    @property
    def text(self) -> str:
        return self.region.text

    @property
    def start(self) -> int:
        return self.region.start

    @property
    def stop(self) -> int:
        return self.region.stop

    def next_op(self) -> TokenKind:
        """Return the operator that follows this segment."""
        return next_op(self.region)

    def next_op_name(self) -> str:
        return self.next_op().value

    def end(self) -> Parser:
        return Parser(self.level, self.region.end_region())

    def token_begin(self) -> Tokenizer:
        return self.region.token_begin()

    def token_end(self) -> Tokenizer:
        return self.region.token_end()

    def tokens(self) -> list[Token]:
        return list(self.token_begin())

    def advance(self) -> Parser:
        """Return the next sibling segment at this level."""
        return Parser(self.level, next_delimited(self.region, self.level.delimiters))

    def siblings(self) -> Iterator[Parser]:
        """Yield this segment and every segment after it within the parent.

        A segment that ends at a delimiter is always followed by another,
        possibly empty, segment.
        """
        parser = self
        while True:
            yield parser
            if parser.region.stop >= parser.region.end:
                return
            parser = parser.advance()

    def _child_begin(self) -> Parser:
        child = self.level.child
        if child is None:
            raise ValueError(f"{self.level.value} segments have no sub-segments")
        bounded = Region(
            self.region.buf, self.region.start, self.region.stop, self.region.stop
        )
        return Parser(child, first_delimited(bounded, child.delimiters))

    def _begin(self, level: Level) -> Parser:
        parser = self
        while parser.level is not level:
            if parser.level is Level.COMMAND:
                raise ValueError(
                    f"{self.level.value} segments do not contain {level.value} segments"
                )
            parser = parser._child_begin()
        if parser is self:
            raise ValueError(f"{level.value} segments do not nest")
        return parser

    def conditional_begin(self) -> Parser:
        return self._begin(Level.CONDITIONAL)

    def pipeline_begin(self) -> Parser:
        return self._begin(Level.PIPELINE)

    def command_begin(self) -> Parser:
        return self._begin(Level.COMMAND)

    def children(self) -> Iterator[Parser]:
        """Yield the next level's segments within this one."""
        return self._child_begin().siblings()

    def words(self) -> CommandWords:
        """Split the segment's tokens into arguments and redirections.

        A redirect operator takes the word token immediately after it as
        its target. Tokens inside a parenthesized group are skipped.
        """
        args: list[str] = []
        redirections: list[Redirection] = []
        pending: RedirectOp | None = None
        depth = 0
        for token in self.token_begin():
            kind = token.kind
            if kind is TokenKind.LPAREN:
                depth += 1
            elif kind is TokenKind.RPAREN:
                depth = max(depth - 1, 0)
            if depth or kind is TokenKind.RPAREN:
                continue
            if pending is not None:
                target = token.text if kind is TokenKind.WORD else None
                redirections.append(Redirection(pending, target))
                pending = None
                if target is not None:
                    continue
            if kind is TokenKind.REDIRECT:
                pending = token.redirect_op
            elif kind is TokenKind.WORD:
                args.append(token.text)
        if pending is not None:
            redirections.append(Redirection(pending, None))
        return CommandWords(tuple(args), tuple(redirections))

    def group_body(self) -> Parser | None:
        """Return the command line inside a parenthesized command.

        Returns None unless the segment's first token is ``(``. Without a
        matching ``)`` the body runs to the end of the segment.
        """
        tokenizer = self.token_begin()
        if tokenizer.type is not TokenKind.LPAREN:
            return None
        body_start = tokenizer.token.stop
        depth = 0
        for token in tokenizer:
            if token.kind is TokenKind.LPAREN:
                depth += 1
            elif token.kind is TokenKind.RPAREN:
                depth -= 1
                if depth == 0:
                    return Parser.command_line(
                        Region(self.region.buf, body_start, token.start, token.start)
                    )
        return Parser.command_line(
            Region(self.region.buf, body_start, self.region.stop, self.region.stop)
        )


def _line(source: str | Region | Parser) -> Parser:
    if isinstance(source, Parser):
        return source
    return Parser.command_line(source)


def conditionals(source: str | Region | Parser) -> Iterator[Parser]:
    """Yield the conditionals of a command line."""
    return _line(source).children()


def pipelines(conditional: Parser) -> Iterator[Parser]:
    return conditional.children()


def commands(pipeline: Parser) -> Iterator[Parser]:
    return pipeline.children()
