#!/usr/bin/env python3

import pytest

from struct_derive.utils import escape_string, render_tokens, strip_lifetime


class TestRenderTokens:
    """Canonical text for token sequences"""

    @pytest.mark.parametrize(
        "tokens,expected",
        [
            (["&", "'a", "str"], "&'a str"),
            (["&", "mut", "T"], "&mut T"),
            (["&", "mut", "[", "u8", "]"], "&mut [u8]"),
            (["*", "const", "(", ")"], "*const ()"),
            (["Vec", "<", "Option", "<", "T", ">", ">"], "Vec<Option<T>>"),
            (["[", "u8", ";", "4", "]"], "[u8; 4]"),
            (["(", "i32", ",", "String", ")"], "(i32, String)"),
            (["std", "::", "string", "::", "String"], "std::string::String"),
            (["#", "[", "derive", "(", "Debug", ")", "]"], "#[derive(Debug)]"),
            (["pub", "(", "crate", ")"], "pub(crate)"),
            (["T", ":", "Clone", "+", "Send"], "T: Clone + Send"),
        ],
    )
    def test_render(self, tokens, expected):
        assert render_tokens(tokens) == expected

    def test_empty(self):
        assert render_tokens([]) == ""


class TestStringHelpers:
    def test_strip_lifetime(self):
        assert strip_lifetime("'a") == "a"
        assert strip_lifetime("T") == "T"

    def test_escape_string(self):
        assert escape_string('say "hi"\\n') == 'say \\"hi\\"\\\\n'
        assert escape_string("two\nlines") == "two\\nlines"


if __name__ == "__main__":
    pytest.main([__file__])
