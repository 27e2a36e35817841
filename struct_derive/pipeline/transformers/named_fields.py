"""
Named-field transformer: identity-matched diff-apply over a named field collection.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..errors import ShapeError
from ..type_ast.nodes import Fields, Shape
from .base import Change, apply_tagged_changes


def transform_named_fields(fields: Fields, changes: Sequence[Change]) -> Fields:
    """
    Apply named-field changes to a `{ ... }` field collection.

    Args:
        fields: Named fields of a struct or struct-shaped variant
        changes: AddField / RemoveField / ChangeField operations, in order

    Returns:
        New named Fields; `fields` is not modified

    Raises:
        ShapeError: If `fields` is not named
        ConflictError: If two changes hit the same field
        UnmatchedChangeError: If a remove or change names no field
    """
    if fields.shape is not Shape.NAMED:
        raise ShapeError(f"expected named fields, got {fields.shape.value} fields")

    result = apply_tagged_changes(fields.fields, changes, "field", lambda f: f.name)
    return Fields.named(result)
