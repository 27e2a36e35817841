"""
Change-language module.

Contains the lexer, the change operations of every domain and the
parser that builds them from text.
"""

from __future__ import annotations

from .lexer import Lexer, Token, TokenType, tokenize
from .operations import (
    AddField,
    AddGeneric,
    AddPositional,
    AddVariant,
    ChangeDomain,
    ChangeField,
    ChangeSpec,
    MatchPositional,
    RemoveField,
    RemoveGeneric,
    RemovePositional,
    RemoveVariant,
    RenameVariant,
    ReplaceVariant,
    RetypePositional,
    RetypeVariant,
)
from .parser import ChangeParser, parse_change_spec, parse_changes, parse_type, parse_type_def

__all__ = [
    "AddField",
    "AddGeneric",
    "AddPositional",
    "AddVariant",
    "ChangeDomain",
    "ChangeField",
    "ChangeParser",
    "ChangeSpec",
    "Lexer",
    "MatchPositional",
    "RemoveField",
    "RemoveGeneric",
    "RemovePositional",
    "RemoveVariant",
    "RenameVariant",
    "ReplaceVariant",
    "RetypePositional",
    "RetypeVariant",
    "Token",
    "TokenType",
    "parse_change_spec",
    "parse_changes",
    "parse_type",
    "parse_type_def",
    "tokenize",
]
