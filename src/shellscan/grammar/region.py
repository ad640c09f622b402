"""Regions of a command line and the navigation primitives over them."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field

from shellscan.grammar.tokens import TokenKind, Tokenizer, scan_token


@dataclass(frozen=True, slots=True, eq=False)
class Region:
    """The span ``buf[start:stop]`` of a command line.

    ``end`` is the outer boundary: navigation never moves past it. For a
    segment produced by a parent segment, ``end`` is the parent's stop.
    """

    buf: str = field(repr=False)
    start: int
    stop: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.stop <= self.end <= len(self.buf):
            raise ValueError(
                f"Invalid region [{self.start}, {self.stop}) with end {self.end} "
                f"for buffer of length {len(self.buf)}"
            )

    @classmethod
    def from_text(cls, text: str, start: int = 0, stop: int | None = None) -> Region:
        """Return the region ``text[start:stop]`` bounded by ``stop``."""
        if stop is None:
            stop = len(text)
        return cls(text, start, stop, stop)

    def __bool__(self) -> bool:
        """Return True if the region is non-empty."""
        return self.start != self.stop

    def empty(self) -> bool:
        return self.start == self.stop

    def __str__(self) -> str:
        return self.text

    @property
    def text(self) -> str:
        return self.buf[self.start : self.stop]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Region):
            return (
                self.buf is other.buf or self.buf == other.buf
            ) and (self.start, self.stop) == (other.start, other.stop)
        if isinstance(other, Tokenizer):
            return (
                self.buf is other.buf or self.buf == other.buf
            ) and (self.start, self.stop) == (other.start, other.end)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.buf, self.start, self.stop))

    def end_region(self) -> Region:
        """Return the empty region at this region's stop."""
        return Region(self.buf, self.stop, self.stop, self.end)

    def token_begin(self) -> Tokenizer:
        return region_to_tokenizer(self)

    def token_end(self) -> Tokenizer:
        return Tokenizer(self.buf, self.stop, self.stop)


def region_to_tokenizer(region: Region) -> Tokenizer:
    """Return a tokenizer over the region's span."""
    return Tokenizer(region.buf, region.start, region.stop)


def tokenizer_to_region(tokenizer: Tokenizer) -> Region:
    """Return the region covering the tokens a tokenizer has left."""
    return Region(tokenizer.buf, tokenizer.start, tokenizer.end, tokenizer.end)


def first_delimited(region: Region, delimiters: Collection[TokenKind]) -> Region:
    """Return the span from ``region.start`` to the first top-level delimiter.

    A delimiter is top-level when it is outside every parenthesized group.
    Quoted and escaped operator characters never delimit. When no delimiter
    occurs the result extends to ``region.end``.
    """
    buf, end = region.buf, region.end
    pos = region.start
    depth = 0
    while True:
        token = scan_token(buf, pos, end)
        kind = token.kind
        if kind is TokenKind.EOL:
            return Region(buf, region.start, end, end)
        if depth == 0 and kind in delimiters:
            return Region(buf, region.start, token.start, end)
        if kind is TokenKind.LPAREN:
            depth += 1
        elif kind is TokenKind.RPAREN and depth > 0:
            depth -= 1
        pos = token.stop


def next_delimited(region: Region, delimiters: Collection[TokenKind]) -> Region:
    """Return the sibling segment that follows ``region``.

    Exactly one token, the delimiter at ``region.stop``, is skipped. At the
    outer end the result is the empty region ``[end, end)``.
    """
    token = scan_token(region.buf, region.stop, region.end)
    return first_delimited(
        Region(region.buf, token.stop, token.stop, region.end), delimiters
    )


def next_op(region: Region) -> TokenKind:
    """Return the kind of the operator that terminates ``region``."""
    return scan_token(region.buf, region.stop, region.end).kind


def next_op_name(region: Region) -> str:
    return next_op(region).value
