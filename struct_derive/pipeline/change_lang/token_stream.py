"""
Token stream with lookahead used by the change-language parser.
"""

from __future__ import annotations

from typing import NoReturn

from ..errors import ChangeSyntaxError
from .lexer import Token, TokenType, tokenize


class TokenStream:
    """
    A token stream is a wrapper over the lexer output that provides lookahead,
    conditional consumption and "expect this token" helpers.
    """

    def __init__(self, text: str):
        self.tokens = tokenize(text)
        self.index = 0

    def peek(self, offset: int = 0) -> Token:
        """Return the token `offset` places ahead without consuming it (EOS past the end)."""
        index = min(self.index + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def next(self) -> Token:
        """Consume and return the next token."""
        tok = self.peek()
        if tok.tok_type != TokenType.EOS:
            self.index += 1
        return tok

    def peek_is(self, value: str, offset: int = 0) -> bool:
        """True if the token `offset` ahead is a punctuation or identifier with this exact value."""
        tok = self.peek(offset)
        return tok.tok_type in (TokenType.PUNCT, TokenType.IDENT) and tok.value == value

    def peek_type(self, tok_type: TokenType, offset: int = 0) -> bool:
        return self.peek(offset).tok_type == tok_type

    def next_if(self, value: str) -> Token | None:
        """Consume the next token if it has the given value, otherwise return None."""
        if self.peek_is(value):
            return self.next()
        return None

    def expect(self, value: str, what: str | None = None) -> Token:
        """
        Consume a token with the given value or fail.

        Raises:
            ChangeSyntaxError: If the next token differs
        """
        if not self.peek_is(value):
            self.fail(f"expected {what or f'`{value}`'}")
        return self.next()

    def expect_type(self, tok_type: TokenType, what: str) -> Token:
        """Consume a token of the given type or fail."""
        if not self.peek_type(tok_type):
            self.fail(f"expected {what}")
        return self.next()

    def at_end(self) -> bool:
        return self.peek_type(TokenType.EOS)

    def expect_end(self) -> None:
        """Fail unless all tokens were consumed."""
        if not self.at_end():
            self.fail("unexpected trailing tokens")

    def values(self, start: int, end: int | None = None) -> tuple[str, ...]:
        """Token values consumed between two indices."""
        return tuple(tok.value for tok in self.tokens[start : self.index if end is None else end])

    def fail(self, message: str) -> NoReturn:
        """Raise a ChangeSyntaxError positioned at the next token."""
        tok = self.peek()
        raise ChangeSyntaxError(f"{message}, found {tok}", tok.position)
