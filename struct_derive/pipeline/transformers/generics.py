"""
Generic-parameter patcher.

Unchecked: removing a name that is not declared, or adding one twice,
is left for whoever compiles the output.
"""

from __future__ import annotations

import copy
from collections.abc import Sequence

from ..errors import InternalError
from ..type_ast.nodes import GenericKind, GenericParam


def patch_generics(params: Sequence[GenericParam], changes: Sequence) -> list[GenericParam]:
    """
    Drop removed parameters, then append added ones.

    Args:
        params: Base generic parameters
        changes: AddGeneric / RemoveGeneric operations

    Returns:
        Patched parameter list of copies
    """
    kept = []
    for param in params:
        if not isinstance(param.kind, GenericKind):
            raise InternalError(f"unknown generic parameter kind {param.kind!r}")
        if not any(change.removes(param) for change in changes):
            kept.append(copy.deepcopy(param))

    for change in changes:
        kept.extend(copy.deepcopy(change.create()))
    return kept
