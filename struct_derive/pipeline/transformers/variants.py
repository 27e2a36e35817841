"""
Variant transformer: diff-apply over an enum's variant list, keyed by variant name.

Retype changes recurse into the named-field or positional transformer
for the matched variant's own fields.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..type_ast.nodes import VariantSpec
from .base import Change, apply_tagged_changes


def transform_variants(variants: Sequence[VariantSpec], changes: Sequence[Change]) -> list[VariantSpec]:
    """
    Apply variant changes to an enum body.

    Args:
        variants: Original variants
        changes: Variant operations, in order

    Returns:
        New variant list; `variants` is not modified

    Raises:
        ConflictError: If two changes hit the same variant
        UnmatchedChangeError: If a non-add change names no variant
        ShapeError: If a retype does not fit the variant's shape
    """
    return apply_tagged_changes(variants, changes, "variant", lambda v: v.name)
