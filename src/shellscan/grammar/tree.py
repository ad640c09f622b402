"""Materialized parse trees.

The views in ``shellscan.grammar.parser`` never build a tree. Callers that
want a persistent, serializable structure call ``build_tree``.
"""

from __future__ import annotations

import logging
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from shellscan.grammar.parser import Level, Parser
from shellscan.grammar.region import Region
from shellscan.grammar.tokens import TokenKind

logger = logging.getLogger(__name__)


class Node(BaseModel):
    """Base for tree nodes: the exact source span of the segment."""

    model_config = ConfigDict(frozen=True)

    text: str
    start: int
    stop: int


class RedirectionNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    op: str
    fd: int
    append: bool
    target: str | None


class CommandNode(Node):
    kind: Literal["command"] = "command"
    args: tuple[str, ...] = ()
    redirections: tuple[RedirectionNode, ...] = ()


class GroupNode(Node):
    """A parenthesized command whose body is a nested command line.

    ``args`` holds any words outside the parentheses; diagnostics reports
    them as a syntax issue.
    """

    kind: Literal["group"] = "group"
    body: CommandLineNode
    args: tuple[str, ...] = ()
    redirections: tuple[RedirectionNode, ...] = ()


class PipelineNode(Node):
    commands: tuple[
        Annotated[CommandNode | GroupNode, Field(discriminator="kind")], ...
    ] = ()


class ConditionalNode(Node):
    """Pipelines joined by ``&&``/``||``; ``joins[i]`` follows ``pipelines[i]``."""

    pipelines: tuple[PipelineNode, ...] = ()
    joins: tuple[TokenKind, ...] = ()
    separator: TokenKind = TokenKind.EOL

    @property
    def background(self) -> bool:
        return self.separator is TokenKind.BACKGROUND


class CommandLineNode(Node):
    conditionals: tuple[ConditionalNode, ...] = ()


for _model in (GroupNode, PipelineNode, ConditionalNode, CommandLineNode):
    _model.model_rebuild()


def _span(parser: Parser) -> dict[str, object]:
    return {"text": parser.text, "start": parser.start, "stop": parser.stop}


def _build_command(command: Parser) -> CommandNode | GroupNode:
    words = command.words()
    redirections = tuple(
        RedirectionNode(
            op=r.op.value, fd=r.fd, append=r.append, target=r.target
        )
        for r in words.redirections
    )
    body = command.group_body()
    if body is not None:
        return GroupNode(
            **_span(command),
            body=_build_line(body),
            args=words.args,
            redirections=redirections,
        )
    return CommandNode(**_span(command), args=words.args, redirections=redirections)


def _build_pipeline(pipeline: Parser) -> PipelineNode:
    return PipelineNode(
        **_span(pipeline),
        commands=tuple(_build_command(c) for c in pipeline.children()),
    )


def _build_conditional(conditional: Parser) -> ConditionalNode:
    pipelines = list(conditional.children())
    return ConditionalNode(
        **_span(conditional),
        pipelines=tuple(_build_pipeline(p) for p in pipelines),
        joins=tuple(p.next_op() for p in pipelines[:-1]),
        separator=conditional.next_op(),
    )


def _build_line(line: Parser) -> CommandLineNode:
    return CommandLineNode(
        **_span(line),
        conditionals=tuple(_build_conditional(c) for c in line.children()),
    )


def build_tree(source: str | Region | Parser) -> CommandLineNode:
    """Materialize the full hierarchy of a command line.

    Args:
        source: Command-line text, or a region or parser over it.

    Returns:
        The root node. Empty segments are kept so that the spans of the
        conditionals and their separators cover the input exactly.
    """
    line = source if isinstance(source, Parser) else Parser.command_line(source)
    if line.level is not Level.COMMAND_LINE:
        line = Parser.command_line(line)

    tree = _build_line(line)
    logger.debug(
        f"Built tree with {len(tree.conditionals)} conditionals "
        f"for {line.stop - line.start} chars"
    )
    return tree
