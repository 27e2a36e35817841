"""struct_derive

Derive record declarations from a base declaration with a small change
language: add, remove, rename and retype fields, variants and generic
parameters, with strict conflict and completeness checking.
"""

__version__ = "1.0.0"

from .pipeline import (
    ChangeSpec,
    ChangeSyntaxError,
    ConflictError,
    DeriveConfig,
    DeriveError,
    DeriveResult,
    Deriver,
    PositionalError,
    ShapeError,
    TypeDefRenderer,
    UnmatchedChangeError,
    derive,
    derive_all,
    parse_change_spec,
    parse_type_def,
)

__all__ = [
    "ChangeSpec",
    "ChangeSyntaxError",
    "ConflictError",
    "DeriveConfig",
    "DeriveError",
    "DeriveResult",
    "Deriver",
    "PositionalError",
    "ShapeError",
    "TypeDefRenderer",
    "UnmatchedChangeError",
    "derive",
    "derive_all",
    "parse_change_spec",
    "parse_type_def",
]
