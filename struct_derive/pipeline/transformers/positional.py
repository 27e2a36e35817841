"""
Positional (tuple) transformer: lock-step diff-apply over an unnamed field sequence.

Positional fields have no identity besides their position, so the
change list is walked once against a cursor over the original fields.
Adds never move the cursor; every other change consumes exactly one
original field, and every original must be consumed.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence

from ..errors import PositionalError, ShapeError, SourcePosition
from ..type_ast.nodes import Fields, FieldSpec, Shape


def transform_positional(
    fields: Fields,
    changes: Sequence,
    owner: str | None = None,
    position: SourcePosition | None = None,
) -> Fields:
    """
    Apply positional changes to a `( ... )` field sequence.

    Args:
        fields: Positional fields of a tuple-shaped variant
        changes: AddPositional / RemovePositional / RetypePositional / MatchPositional, in order
        owner: What the fields belong to, named in the leftover-fields error
        position: Position reported with the leftover-fields error

    Returns:
        New positional Fields; `fields` is not modified

    Raises:
        ShapeError: If `fields` is not positional
        PositionalError: On a guard mismatch, on running out of originals,
            or when originals are left unconsumed
    """
    if fields.shape is not Shape.POSITIONAL:
        raise ShapeError(f"expected positional fields, got {fields.shape.value} fields")

    originals = fields.fields
    cursor = 0
    out: list[FieldSpec] = []

    for change in changes:
        if not change.consumes:
            out.extend(copy.deepcopy(change.create()))
            continue

        if cursor >= len(originals):
            raise PositionalError(
                f"expected field to be {change.verb} but there are no more fields (`{change}`)",
                change.position,
            )

        original = originals[cursor]
        cursor += 1

        if change.guard is not None and change.guard != original.ty:
            raise PositionalError(
                f"expected field {cursor - 1} to be {change.verb} but type did not match: expected `{change.guard}`, found `{original.ty}`",
                change.position,
            )

        kept = change.consume(copy.deepcopy(original))
        if kept is not None:
            out.append(kept)

    if cursor < len(originals):
        leftover = ", ".join(str(f.ty) for f in originals[cursor:])
        where = f" in {owner}" if owner else ""
        raise PositionalError(
            f"unmatched original fields remain{where}: expected no more fields but found ({leftover})",
            position,
        )

    return Fields.positional(out)
