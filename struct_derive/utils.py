"""
Utility functions for struct_derive.
"""

import re

# Identifier-like tokens that glue to a following "<", "(" or "["
_WORD_PATTERN = re.compile(r"^(?:r#)?[A-Za-z_][A-Za-z0-9_]*$")

_NO_SPACE_BEFORE = {",", ";", ":", ">", ")", "]", "::"}
_NO_SPACE_AFTER = {"&", "*", "<", "(", "[", "::", "#", "!", "?"}
_GLUE_AFTER_WORD = {"<", "(", "["}

# Keywords that keep their space before a following "(" or "["
_SPACED_KEYWORDS = {"as", "const", "dyn", "impl", "mut", "unsafe", "where"}


def _is_word(token: str) -> bool:
    return bool(_WORD_PATTERN.match(token)) and token not in _SPACED_KEYWORDS


def render_tokens(tokens: list[str] | tuple[str, ...]) -> str:
    """Join tokens into canonical source text.

    Examples:
        ["&", "'a", "str"] -> "&'a str"
        ["Vec", "<", "Option", "<", "T", ">", ">"] -> "Vec<Option<T>>"
        ["[", "u8", ";", "4", "]"] -> "[u8; 4]"
        ["#", "[", "derive", "(", "Debug", ")", "]"] -> "#[derive(Debug)]"

    Args:
        tokens: Token values in source order

    Returns:
        The rendered text
    """
    out: list[str] = []
    prev = None
    for token in tokens:
        if prev is not None:
            glued = (
                token in _NO_SPACE_BEFORE
                or prev in _NO_SPACE_AFTER
                or (token in _GLUE_AFTER_WORD and _is_word(prev))
            )
            if not glued:
                out.append(" ")
        out.append(token)
        prev = token
    return "".join(out)


def strip_lifetime(name: str) -> str:
    """Return the identifier part of a lifetime ("'a" -> "a"); other names pass through."""
    return name[1:] if name.startswith("'") else name


def escape_string(text: str) -> str:
    """Escape text for use inside a double-quoted string literal."""
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
