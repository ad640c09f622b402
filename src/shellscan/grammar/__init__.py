"""Shell command-line grammar: tokenizer, regions and layered parsers."""

from shellscan.grammar.diagnostics import (
    IssueCode,
    ShellSyntaxError,
    SyntaxIssue,
    check,
    diagnose,
)
from shellscan.grammar.parser import (
    CommandWords,
    Level,
    Parser,
    Redirection,
    commands,
    conditionals,
    pipelines,
)
from shellscan.grammar.region import (
    Region,
    first_delimited,
    next_delimited,
    next_op,
    next_op_name,
    region_to_tokenizer,
    tokenizer_to_region,
)
from shellscan.grammar.tokens import (
    RedirectOp,
    Token,
    TokenKind,
    Tokenizer,
    scan_token,
    tokenize,
)
from shellscan.grammar.tree import build_tree

__all__ = [
    "CommandWords",
    "IssueCode",
    "Level",
    "Parser",
    "RedirectOp",
    "Redirection",
    "Region",
    "ShellSyntaxError",
    "SyntaxIssue",
    "Token",
    "TokenKind",
    "Tokenizer",
    "build_tree",
    "check",
    "commands",
    "conditionals",
    "diagnose",
    "first_delimited",
    "next_delimited",
    "next_op",
    "next_op_name",
    "pipelines",
    "region_to_tokenizer",
    "scan_token",
    "tokenize",
    "tokenizer_to_region",
]
