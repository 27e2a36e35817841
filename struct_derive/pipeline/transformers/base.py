"""
Tagged-arena engine shared by the named-field and variant transformers.

The working collection is an arena of slots, each holding an item and
a tag. Original items start tagged ORIGINAL. Every change first appends
what it creates (tagged ADDED), then one pass over the whole arena,
added slots included, decides which slots it removes or transforms.

A slot keeps the item it started with, so a change naming a field by
its old name still hits the slot after a rename and is reported as a
conflict rather than as unmatched.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, TypeVar

from ..errors import ConflictError, InternalError, UnmatchedChangeError

T = TypeVar("T")


class Tag(Enum):
    """Bookkeeping state of one arena slot."""

    ORIGINAL = "original"
    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"


_KEPT = (Tag.ORIGINAL, Tag.ADDED, Tag.CHANGED)


class Change(Protocol[T]):
    """Capabilities a change needs to run through the arena."""

    position: Any

    def create(self) -> list[T]: ...

    def removes(self, item: T) -> bool: ...

    def transforms(self, item: T) -> bool: ...

    def apply(self, item: T) -> T: ...


@dataclass
class Slot:
    """One arena entry."""

    item: Any
    tag: Tag = Tag.ORIGINAL
    origin: Any = None  # Item as first placed in the arena

    def __post_init__(self):
        if self.origin is None:
            self.origin = self.item

    def matches(self, test: Callable[[Any], bool]) -> bool:
        return test(self.item) or (self.origin is not self.item and test(self.origin))


def apply_tagged_changes(
    items: Sequence[T],
    changes: Sequence[Change[T]],
    kind: str,
    name_of: Callable[[T], str | None],
) -> list[T]:
    """
    Apply changes in order to a collection identified by name.

    Args:
        items: Original items (left untouched; the result holds copies)
        changes: Changes in declaration order
        kind: Item kind used in error messages ("field", "variant")
        name_of: Returns the identity of an item

    Returns:
        Surviving items: originals in their order, then added items in add order

    Raises:
        ConflictError: If a change matches an item already affected, or both removes and transforms it
        UnmatchedChangeError: If a change neither created nor matched anything
    """
    arena = [Slot(copy.deepcopy(item)) for item in items]

    for change in changes:
        applied = False

        for created in change.create():
            arena.append(Slot(copy.deepcopy(created), Tag.ADDED))
            applied = True

        for index, slot in enumerate(arena):
            removes = slot.matches(change.removes)
            transforms = slot.matches(change.transforms)
            if not removes and not transforms:
                continue

            name = name_of(slot.item)
            if removes and transforms:
                raise ConflictError(f"cannot change {kind} twice: `{name}`", change.position)
            if slot.tag is not Tag.ORIGINAL:
                raise ConflictError(
                    f"cannot change {kind} twice: `{name}` was already {slot.tag.value} (`{change}`)",
                    change.position,
                )

            if transforms:
                arena[index] = Slot(change.apply(slot.item), Tag.CHANGED, slot.origin)
            else:
                slot.tag = Tag.REMOVED
            applied = True

        if not applied:
            raise UnmatchedChangeError(f"no target matched {kind} change `{change}`", change.position)

    return _collect(arena)


def _collect(arena: list[Slot]) -> list:
    out = []
    for slot in arena:
        if slot.tag in _KEPT:
            out.append(slot.item)
        elif slot.tag is not Tag.REMOVED:
            raise InternalError(f"unknown arena tag {slot.tag!r}")
    return out
