"""
Type AST module.

Contains the node definitions for record declarations: fields,
variants, generic parameters and whole type definitions.
"""

from __future__ import annotations

from .nodes import (
    DataKind,
    Fields,
    FieldSpec,
    GenericKind,
    GenericParam,
    Shape,
    TypeDef,
    TypeExpr,
    VariantSpec,
)

__all__ = [
    "DataKind",
    "Fields",
    "FieldSpec",
    "GenericKind",
    "GenericParam",
    "Shape",
    "TypeDef",
    "TypeExpr",
    "VariantSpec",
]
