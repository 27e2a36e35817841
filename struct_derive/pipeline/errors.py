"""
Error taxonomy for the derive pipeline.

Every failure raised while parsing or transforming one change
specification derives from DeriveError, so callers can isolate
failures per specification.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SourcePosition:
    """Line/column location of a token in change-language text (1-based)."""

    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class DeriveError(Exception):
    """Base class for all derive failures.

    Attributes:
        message: Human readable description without position prefix
        position: Where in the source text the problem starts, if known
    """

    def __init__(self, message: str, position: SourcePosition | None = None):
        self.message = message
        self.position = position
        super().__init__(f"{position}: {message}" if position is not None else message)


class ChangeSyntaxError(DeriveError):
    """Raised when change-language or declaration text is malformed."""

    pass


class ShapeError(DeriveError):
    """Raised when a base type or variant has a shape the change cannot apply to.

    This can happen when:
    - The base is a tuple struct, a unit struct or a union
    - The change specification keyword does not match the base kind
    - A tuple retype targets a struct-shaped variant, or vice versa
    - A retype targets a unit variant
    """

    pass


class ConflictError(DeriveError):
    """Raised when two operations affect the same item."""

    pass


class DuplicateNameError(ConflictError):
    """Raised by the optional duplicate-name check on a derived type."""

    pass


class UnmatchedChangeError(DeriveError):
    """Raised when a non-add operation matched no field or variant."""

    pass


class PositionalError(DeriveError):
    """Raised when a positional change list does not line up with the original fields."""

    pass


class InternalError(DeriveError):
    """Raised when an internal invariant is broken (unknown tag or kind)."""

    pass
