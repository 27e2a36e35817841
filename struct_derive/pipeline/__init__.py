"""
Pipeline - derive record declarations from a base declaration.

This module provides a multi-phase architecture for deriving types
from change specifications:

1. Phase 1 (Parser): Parse change-language text into operation lists
2. Phase 2 (Transformers): Apply operations to fields, variants and generics
3. Phase 3 (Driver): Assemble one derived declaration per specification
4. Phase 4 (Renderer): Optional printing of the result as source text
5. Phase 5 (Writer): Optional atomic write of the rendered file
"""

from __future__ import annotations

from .atomic_writer import AtomicWriter
from .change_lang import ChangeDomain, ChangeSpec, parse_change_spec, parse_changes, parse_type, parse_type_def
from .config import DeriveConfig, OutputConfig, OutputMode, RenderConfig
from .driver import DeriveResult, Deriver, check_duplicate_names, derive, derive_all
from .errors import (
    ChangeSyntaxError,
    ConflictError,
    DeriveError,
    DuplicateNameError,
    InternalError,
    PositionalError,
    ShapeError,
    SourcePosition,
    UnmatchedChangeError,
)
from .renderer import TypeDefRenderer

__all__ = [
    "AtomicWriter",
    "ChangeDomain",
    "ChangeSpec",
    "ChangeSyntaxError",
    "ConflictError",
    "DeriveConfig",
    "DeriveError",
    "DeriveResult",
    "Deriver",
    "DuplicateNameError",
    "InternalError",
    "OutputConfig",
    "OutputMode",
    "PositionalError",
    "RenderConfig",
    "ShapeError",
    "SourcePosition",
    "TypeDefRenderer",
    "UnmatchedChangeError",
    "check_duplicate_names",
    "derive",
    "derive_all",
    "parse_change_spec",
    "parse_changes",
    "parse_type",
    "parse_type_def",
]
