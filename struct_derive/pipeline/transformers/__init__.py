"""
Transformers that apply change lists to fields, variants and generic parameters.
"""

from __future__ import annotations

from .base import Slot, Tag, apply_tagged_changes
from .generics import patch_generics
from .named_fields import transform_named_fields
from .positional import transform_positional
from .variants import transform_variants

__all__ = [
    "Slot",
    "Tag",
    "apply_tagged_changes",
    "patch_generics",
    "transform_named_fields",
    "transform_positional",
    "transform_variants",
]
