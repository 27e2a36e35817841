#!/usr/bin/env python3

import pytest

from struct_derive.pipeline.change_lang.lexer import TokenType, tokenize
from struct_derive.pipeline.errors import ChangeSyntaxError, SourcePosition


class TestLexer:
    """Tokenization of change-language text"""

    def test_rename_change(self):
        tokens = tokenize("~id -> x_id")
        assert [t.value for t in tokens] == ["~", "id", "->", "x_id", ""]
        assert [t.tok_type for t in tokens] == [
            TokenType.PUNCT,
            TokenType.IDENT,
            TokenType.PUNCT,
            TokenType.IDENT,
            TokenType.EOS,
        ]

    def test_lifetime_and_char_literal(self):
        tokens = tokenize("&'a str 'b'")
        assert [(t.tok_type, t.value) for t in tokens[:-1]] == [
            (TokenType.PUNCT, "&"),
            (TokenType.LIFETIME, "'a"),
            (TokenType.IDENT, "str"),
            (TokenType.LITERAL, "'b'"),
        ]

    def test_path_separator_is_one_token(self):
        values = [t.value for t in tokenize("std::string::String")]
        assert values == ["std", "::", "string", "::", "String", ""]

    def test_comments_are_skipped(self):
        values = [t.value for t in tokenize("-a, // drop a\n/* and b */ -b")]
        assert values == ["-", "a", ",", "-", "b", ""]

    def test_positions_track_lines(self):
        tokens = tokenize("+a: u8,\n  -b")
        minus = tokens[5]
        assert minus.value == "-"
        assert minus.position == SourcePosition(2, 3)

    def test_end_of_input_token(self):
        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].tok_type == TokenType.EOS
        assert str(tokens[0]) == "end of input"

    def test_unexpected_character(self):
        with pytest.raises(ChangeSyntaxError) as exc_info:
            tokenize("-a, `b`")
        assert exc_info.value.position == SourcePosition(1, 5)
        assert "unexpected character" in str(exc_info.value)


if __name__ == "__main__":
    pytest.main([__file__])
