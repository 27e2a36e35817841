"""
Lexer for change-language and declaration text.

Splits text into identifiers, lifetimes, literals and punctuation,
tracking line and column for every token.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from ..errors import ChangeSyntaxError, SourcePosition


class TokenType(Enum):
    """Kind of token."""

    IDENT = "<IDENT>"
    LIFETIME = "<LIFETIME>"
    LITERAL = "<LITERAL>"
    PUNCT = "<PUNCT>"
    EOS = "<EOS>"


@dataclass(frozen=True)
class Token:
    """A single token with its source position."""

    tok_type: TokenType
    value: str
    position: SourcePosition

    def __str__(self) -> str:
        return "end of input" if self.tok_type == TokenType.EOS else f"`{self.value}`"


# Longest punctuation first so "->" wins over "-"
_MULTI_PUNCT = ["..=", "...", "::", "->", "=>", ".."]
_SINGLE_PUNCT = set("+-~*&!<>()[]{},;:=#?.|/%^@$")

_TOKEN_PATTERNS = [
    (None, re.compile(r"\s+")),
    (None, re.compile(r"//[^\n]*")),
    (None, re.compile(r"/\*.*?\*/", re.DOTALL)),
    (TokenType.LITERAL, re.compile(r"b?'(?:\\.|[^\\'\n])'")),
    (TokenType.LIFETIME, re.compile(r"'[A-Za-z_][A-Za-z0-9_]*")),
    (TokenType.LITERAL, re.compile(r'b?r(#*)".*?"\1', re.DOTALL)),
    (TokenType.LITERAL, re.compile(r'b?"(?:\\.|[^\\"])*"', re.DOTALL)),
    (TokenType.LITERAL, re.compile(r"\d[0-9A-Za-z_]*(?:\.\d[0-9A-Za-z_]*)?")),
    (TokenType.IDENT, re.compile(r"(?:r#)?[A-Za-z_][A-Za-z0-9_]*")),
]


class Lexer:
    """Tokenizes a whole input string up front."""

    def __init__(self, text: str):
        self.text = text

    def tokenize(self) -> list[Token]:
        """
        Tokenize the input.

        Returns:
            Tokens in source order, terminated by one EOS token

        Raises:
            ChangeSyntaxError: On a character no token can start with
        """
        tokens: list[Token] = []
        pos, line, line_start = 0, 1, 0
        text = self.text

        while pos < len(text):
            position = SourcePosition(line, pos - line_start + 1)
            matched = self._match(text, pos)
            if matched is None:
                raise ChangeSyntaxError(f"unexpected character {text[pos]!r}", position)

            tok_type, value = matched
            if tok_type is not None:
                tokens.append(Token(tok_type, value, position))

            newlines = value.count("\n")
            if newlines:
                line += newlines
                line_start = pos + value.rindex("\n") + 1
            pos += len(value)

        tokens.append(Token(TokenType.EOS, "", SourcePosition(line, pos - line_start + 1)))
        return tokens

    def _match(self, text: str, pos: int) -> tuple[TokenType | None, str] | None:
        for tok_type, pattern in _TOKEN_PATTERNS:
            m = pattern.match(text, pos)
            if m:
                return tok_type, m.group(0)

        for punct in _MULTI_PUNCT:
            if text.startswith(punct, pos):
                return TokenType.PUNCT, punct

        if text[pos] in _SINGLE_PUNCT:
            return TokenType.PUNCT, text[pos]
        return None


def tokenize(text: str) -> list[Token]:
    """Tokenize text into a list ending with an EOS token."""
    return Lexer(text).tokenize()
