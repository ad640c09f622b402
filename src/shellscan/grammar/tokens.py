"""Command-line tokenizer.

Tokens are spans of the caller's string. Nothing is copied until a token's
text is requested.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    """Token types produced by the tokenizer.

    Every kind except ``WORD`` and ``REDIRECT`` is a control operator that
    terminates the current command.
    """

    WORD = "word"
    REDIRECT = "redirect"
    SEQUENCE = "sequence"
    EOL = "eol"
    BACKGROUND = "background"
    PIPE = "pipe"
    AND = "and"
    OR = "or"
    LPAREN = "lparen"
    RPAREN = "rparen"

    @property
    def is_control(self) -> bool:
        """Return True for operators that end a command."""
        return self not in (TokenKind.WORD, TokenKind.REDIRECT)

    @property
    def spelling(self) -> str:
        """Return the operator as it appears on a command line."""
        return _SPELLINGS.get(self, self.value)


_SPELLINGS: dict[TokenKind, str] = {
    TokenKind.SEQUENCE: ";",
    TokenKind.EOL: "newline",
    TokenKind.BACKGROUND: "&",
    TokenKind.PIPE: "|",
    TokenKind.AND: "&&",
    TokenKind.OR: "||",
    TokenKind.LPAREN: "(",
    TokenKind.RPAREN: ")",
}


class RedirectOp(Enum):
    """Redirection operators and the stream each one reroutes."""

    READ = "<"
    WRITE = ">"
    APPEND = ">>"
    STDERR = "2>"
    STDERR_APPEND = "2>>"

    @property
    def fd(self) -> int:
        """File descriptor the operator redirects."""
        if self is RedirectOp.READ:
            return 0
        if self in (RedirectOp.STDERR, RedirectOp.STDERR_APPEND):
            return 2
        return 1

    @property
    def append(self) -> bool:
        """Whether the target is opened for appending rather than truncated."""
        return self in (RedirectOp.APPEND, RedirectOp.STDERR_APPEND)


# Longest spellings first so that matching is greedy
OPERATORS: tuple[tuple[str, TokenKind], ...] = (
    ("2>>", TokenKind.REDIRECT),
    ("&&", TokenKind.AND),
    ("||", TokenKind.OR),
    (">>", TokenKind.REDIRECT),
    ("2>", TokenKind.REDIRECT),
    (">", TokenKind.REDIRECT),
    ("<", TokenKind.REDIRECT),
    (";", TokenKind.SEQUENCE),
    ("&", TokenKind.BACKGROUND),
    ("|", TokenKind.PIPE),
    ("(", TokenKind.LPAREN),
    (")", TokenKind.RPAREN),
)

WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

# Characters that end an unquoted word. "2" is absent: the
# "2>" spellings only count at the start of a token.
_OPERATOR_CHARS: frozenset[str] = frozenset(";&|<>()")

# Characters a backslash escapes inside double quotes
_DQUOTE_ESCAPABLE: frozenset[str] = frozenset('"\\$`\n')


def _skip_blanks(buf: str, pos: int, end: int) -> int:
    """Skip whitespace and unquoted line continuations between tokens."""
    while pos < end:
        if buf[pos] in WHITESPACE:
            pos += 1
        elif buf.startswith("\\\n", pos, end):
            pos += 2
        else:
            break
    return pos


def _match_operator(buf: str, pos: int, end: int) -> tuple[str, TokenKind] | None:
    for spelling, kind in OPERATORS:
        if buf.startswith(spelling, pos, end):
            return spelling, kind
    return None


def _close_double(buf: str, pos: int, end: int) -> int | None:
    """Return the index of the closing double quote at or after ``pos``."""
    while pos < end:
        c = buf[pos]
        if c == "\\":
            pos += 2
        elif c == '"':
            return pos
        else:
            pos += 1
    return None


def _scan_word(buf: str, pos: int, end: int) -> tuple[int, bool]:
    """Return the stop position of the word at ``pos`` and its quoted flag."""
    quoted = False
    while pos < end:
        c = buf[pos]
        if c in WHITESPACE or c in _OPERATOR_CHARS:
            break
        if c == "'":
            quoted = True
            close = buf.find("'", pos + 1, end)
            pos = end if close < 0 else close + 1
        elif c == '"':
            quoted = True
            close_dq = _close_double(buf, pos + 1, end)
            pos = end if close_dq is None else close_dq + 1
        elif c == "\\":
            pos = min(pos + 2, end)
        else:
            pos += 1
    return pos, quoted


def _render(buf: str, pos: int, stop: int) -> str:
    """Return the literal text of a word: quotes stripped, escapes resolved."""
    out: list[str] = []
    while pos < stop:
        c = buf[pos]
        if c == "'":
            close = buf.find("'", pos + 1, stop)
            close = stop if close < 0 else close
            out.append(buf[pos + 1 : close])
            pos = close + 1
        elif c == '"':
            pos += 1
            while pos < stop and buf[pos] != '"':
                if buf[pos] == "\\" and pos + 1 < stop:
                    escaped = buf[pos + 1]
                    if escaped not in _DQUOTE_ESCAPABLE:
                        out.append("\\" + escaped)
                    elif escaped != "\n":
                        out.append(escaped)
                    pos += 2
                else:
                    out.append(buf[pos])
                    pos += 1
            pos += 1
        elif c == "\\" and pos + 1 < stop:
            # Backslash-newline is a line continuation
            if buf[pos + 1] != "\n":
                out.append(buf[pos + 1])
            pos += 2
        else:
            out.append(c)
            pos += 1
    return "".join(out)


def _open_construct(buf: str, pos: int, stop: int) -> str | None:
    """Return the quote or escape left open at the end of a word, if any."""
    while pos < stop:
        c = buf[pos]
        if c == "'":
            close = buf.find("'", pos + 1, stop)
            if close < 0:
                return "'"
            pos = close + 1
        elif c == '"':
            close_dq = _close_double(buf, pos + 1, stop)
            if close_dq is None:
                return '"'
            pos = close_dq + 1
        elif c == "\\":
            if pos + 1 >= stop:
                return "\\"
            pos += 2
        else:
            pos += 1
    return None


@dataclass(frozen=True, slots=True)
class Token:
    """A classified span ``[start, stop)`` of a command line.

    Like ``Region``, tokens compare equal only when their buffers are equal.
    """

    kind: TokenKind
    start: int
    stop: int
    quoted: bool = False
    buf: str = field(default="", repr=False)

    def __str__(self) -> str:
        return self.text

    @property
    def raw(self) -> str:
        """The exact characters of the token in the buffer."""
        return self.buf[self.start : self.stop]

    @property
    def text(self) -> str:
        """The token's literal text with quoting removed."""
        if self.kind is TokenKind.WORD:
            return _render(self.buf, self.start, self.stop)
        return self.raw

    @property
    def type_name(self) -> str:
        return self.kind.value

    @property
    def redirect_op(self) -> RedirectOp | None:
        """The redirection operator, for ``REDIRECT`` tokens."""
        if self.kind is not TokenKind.REDIRECT:
            return None
        return RedirectOp(self.raw)

    @property
    def unclosed(self) -> str | None:
        """The quote character or backslash this word leaves open, if any."""
        if self.kind is not TokenKind.WORD:
            return None
        return _open_construct(self.buf, self.start, self.stop)

    @property
    def terminated(self) -> bool:
        return self.unclosed is None


def scan_token(buf: str, pos: int, end: int) -> Token:
    """Classify the token starting at or after ``pos`` in ``buf[:end]``.

    Leading whitespace and backslash-newline pairs are skipped. When nothing
    else remains the result is a zero-width ``EOL`` token at ``end``. An
    unterminated quote extends the word to ``end``.
    """
    pos = _skip_blanks(buf, pos, end)
    if pos >= end:
        return Token(TokenKind.EOL, end, end, buf=buf)

    matched = _match_operator(buf, pos, end)
    if matched is not None:
        spelling, kind = matched
        return Token(kind, pos, pos + len(spelling), buf=buf)

    stop, quoted = _scan_word(buf, pos, end)
    return Token(TokenKind.WORD, pos, stop, quoted, buf=buf)


@dataclass(frozen=True, slots=True)
class Tokenizer:
    """Position of a scan over ``buf[start:end]``.

    ``start`` is normalized to the start of the current token, so a
    tokenizer with no tokens left has ``start == end``. Advancing returns a
    new tokenizer.
    """

    buf: str = field(repr=False)
    start: int
    end: int
    token: Token = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= len(self.buf):
            raise ValueError(
                f"Invalid tokenizer span [{self.start}, {self.end}) "
                f"for buffer of length {len(self.buf)}"
            )
        token = scan_token(self.buf, self.start, self.end)
        object.__setattr__(self, "token", token)
        object.__setattr__(self, "start", token.start)

    @classmethod
    def from_text(cls, text: str) -> Tokenizer:
        return cls(text, 0, len(text))

    def __bool__(self) -> bool:
        """Return True if there are more tokens."""
        return self.start != self.end

    def empty(self) -> bool:
        return self.start == self.end

    def __str__(self) -> str:
        return self.token.text

    def __iter__(self) -> Iterator[Token]:
        tokenizer = self
        while tokenizer:
            yield tokenizer.token
            tokenizer = tokenizer.advance()

    @property
    def type(self) -> TokenKind:
        return self.token.kind

    @property
    def type_name(self) -> str:
        return self.token.kind.value

    @property
    def quoted(self) -> bool:
        return self.token.quoted

    def advance(self) -> Tokenizer:
        """Return the tokenizer positioned at the next token, if any."""
        if self.empty():
            return self
        return Tokenizer(self.buf, self.token.stop, self.end)


def tokenize(text: str) -> list[Token]:
    """Return every token of ``text``, excluding the final ``EOL``.

    Examples:
        >>> [t.text for t in tokenize("cat < in > out")]
        ['cat', '<', 'in', '>', 'out']
        >>> [t.text for t in tokenize('echo "a;b"')]
        ['echo', 'a;b']
    """
    return list(Tokenizer.from_text(text))
