"""
Change operations for the four operand domains.

Each domain is a closed set of dataclasses. They share a small
capability set used by the transformers instead of a class hierarchy:

- create(): items this operation adds (empty for non-add operations)
- removes(item): whether this operation removes the item
- transforms(item): whether this operation changes the item in place
- apply(item): the changed item (only called when transforms() is true)

Positional operations are consumed in lock-step instead; they expose
create(), a `consumes` flag, an optional `guard` and consume(field).
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from enum import Enum

from ...utils import strip_lifetime
from ..errors import ShapeError, SourcePosition
from ..transformers.named_fields import transform_named_fields
from ..transformers.positional import transform_positional
from ..type_ast.nodes import DataKind, Fields, FieldSpec, GenericParam, Shape, TypeExpr, VariantSpec


class ChangeDomain(Enum):
    """Which kind of item a change list operates on."""

    NAMED_FIELD = "named_field"
    POSITIONAL = "positional"
    VARIANT = "variant"
    GENERIC = "generic"


def _vis(visibility: str | None) -> str:
    return f"{visibility} " if visibility else ""


def _guard(ty: TypeExpr | None) -> str:
    return "_" if ty is None else str(ty)


# ---------------------------------------------------------------------------
# Named fields
# ---------------------------------------------------------------------------


@dataclass
class AddField:
    """`+<vis> <name>: <type>`"""

    name: str
    ty: TypeExpr
    visibility: str = ""
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[FieldSpec]:
        return [FieldSpec(ty=self.ty, name=self.name, visibility=self.visibility)]

    def removes(self, item: FieldSpec) -> bool:
        return False

    def transforms(self, item: FieldSpec) -> bool:
        return False

    def apply(self, item: FieldSpec) -> FieldSpec:
        return item

    def __str__(self) -> str:
        return f"+{_vis(self.visibility)}{self.name}: {self.ty}"


@dataclass
class RemoveField:
    """`-<name>[: <type>]`"""

    name: str
    guard: TypeExpr | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[FieldSpec]:
        return []

    def removes(self, item: FieldSpec) -> bool:
        return item.name == self.name and (self.guard is None or item.ty == self.guard)

    def transforms(self, item: FieldSpec) -> bool:
        return False

    def apply(self, item: FieldSpec) -> FieldSpec:
        return item

    def __str__(self) -> str:
        return f"-{self.name}" + (f": {self.guard}" if self.guard is not None else "")


@dataclass
class ChangeField:
    """`~<vis> <name>[-> <vis> <name>][: <type>]`

    Unset attributes keep the field's current value.
    """

    name: str
    new_name: str | None = None
    visibility: str | None = None
    ty: TypeExpr | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[FieldSpec]:
        return []

    def removes(self, item: FieldSpec) -> bool:
        return False

    def transforms(self, item: FieldSpec) -> bool:
        return item.name == self.name

    def apply(self, item: FieldSpec) -> FieldSpec:
        return replace(
            item,
            name=self.new_name if self.new_name is not None else item.name,
            ty=self.ty if self.ty is not None else item.ty,
            visibility=self.visibility if self.visibility is not None else item.visibility,
        )

    def __str__(self) -> str:
        text = f"~{self.name}"
        if self.new_name is not None:
            text += f" -> {_vis(self.visibility)}{self.new_name}"
        elif self.visibility:
            text = f"~{self.visibility} {self.name}"
        if self.ty is not None:
            text += f": {self.ty}"
        return text


NamedFieldChange = AddField | RemoveField | ChangeField


# ---------------------------------------------------------------------------
# Positional fields
# ---------------------------------------------------------------------------


@dataclass
class AddPositional:
    """`+<vis> <type>`"""

    ty: TypeExpr
    visibility: str = ""
    position: SourcePosition | None = field(default=None, compare=False)

    consumes = False
    verb = "added"
    guard = None

    def create(self) -> list[FieldSpec]:
        return [FieldSpec(ty=self.ty, visibility=self.visibility)]

    def consume(self, item: FieldSpec) -> FieldSpec | None:
        return item

    def __str__(self) -> str:
        return f"+{_vis(self.visibility)}{self.ty}"


@dataclass
class RemovePositional:
    """`-<type>` or `-_`"""

    guard: TypeExpr | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    consumes = True
    verb = "removed"

    def create(self) -> list[FieldSpec]:
        return []

    def consume(self, item: FieldSpec) -> FieldSpec | None:
        return None

    def __str__(self) -> str:
        return f"-{_guard(self.guard)}"


@dataclass
class RetypePositional:
    """`~<type>`, `<type> -> <type>` or `_ -> <type>`"""

    ty: TypeExpr
    guard: TypeExpr | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    consumes = True
    verb = "retyped"

    def create(self) -> list[FieldSpec]:
        return []

    def consume(self, item: FieldSpec) -> FieldSpec | None:
        return replace(item, ty=self.ty)

    def __str__(self) -> str:
        return f"{_guard(self.guard)} -> {self.ty}"


@dataclass
class MatchPositional:
    """`<type>` or `_`"""

    guard: TypeExpr | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    consumes = True
    verb = "matched"

    def create(self) -> list[FieldSpec]:
        return []

    def consume(self, item: FieldSpec) -> FieldSpec | None:
        return item

    def __str__(self) -> str:
        return _guard(self.guard)


PositionalChange = AddPositional | RemovePositional | RetypePositional | MatchPositional


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass
class AddVariant:
    """`+<variant>`"""

    variant: VariantSpec
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[VariantSpec]:
        return [self.variant]

    def removes(self, item: VariantSpec) -> bool:
        return False

    def transforms(self, item: VariantSpec) -> bool:
        return False

    def apply(self, item: VariantSpec) -> VariantSpec:
        return item

    def __str__(self) -> str:
        return f"+{self.variant.name}"


@dataclass
class RemoveVariant:
    """`-<name>`"""

    name: str
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[VariantSpec]:
        return []

    def removes(self, item: VariantSpec) -> bool:
        return item.name == self.name

    def transforms(self, item: VariantSpec) -> bool:
        return False

    def apply(self, item: VariantSpec) -> VariantSpec:
        return item

    def __str__(self) -> str:
        return f"-{self.name}"


@dataclass
class RenameVariant:
    """`~<name> -> <name>`; `~<name>` alone renames to the same name."""

    name: str
    new_name: str
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[VariantSpec]:
        return []

    def removes(self, item: VariantSpec) -> bool:
        return False

    def transforms(self, item: VariantSpec) -> bool:
        return item.name == self.name

    def apply(self, item: VariantSpec) -> VariantSpec:
        return replace(item, name=self.new_name)

    def __str__(self) -> str:
        return f"~{self.name} -> {self.new_name}"


@dataclass
class RetypeVariant:
    """`~<name>[-> <name>](<positional changes>)` or `~<name>[-> <name>]{<named changes>}`"""

    name: str
    shape: Shape
    changes: list = field(default_factory=list)
    new_name: str | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[VariantSpec]:
        return []

    def removes(self, item: VariantSpec) -> bool:
        return False

    def transforms(self, item: VariantSpec) -> bool:
        return item.name == self.name

    def apply(self, item: VariantSpec) -> VariantSpec:
        if item.shape is Shape.UNIT:
            raise ShapeError(
                f"cannot retype unit variant `{item.name}`; replace the whole variant instead (`{item.name} -> {item.name}(...)`)",
                self.position,
            )
        if item.shape is not self.shape:
            wanted = "tuple" if self.shape is Shape.POSITIONAL else "struct"
            actual = "tuple" if item.shape is Shape.POSITIONAL else "struct"
            raise ShapeError(
                f"cannot apply a {wanted} retype to {actual} variant `{item.name}`",
                self.position,
            )

        if self.shape is Shape.POSITIONAL:
            fields = transform_positional(item.fields, self.changes, f"variant `{item.name}`", self.position)
        else:
            fields = transform_named_fields(item.fields, self.changes)

        return replace(
            item,
            name=self.new_name if self.new_name is not None else item.name,
            fields=fields,
        )

    def __str__(self) -> str:
        head = f"~{self.name}" + (f" -> {self.new_name}" if self.new_name is not None else "")
        inner = ", ".join(str(c) for c in self.changes)
        return f"{head}({inner})" if self.shape is Shape.POSITIONAL else f"{head} {{ {inner} }}"


@dataclass
class ReplaceVariant:
    """`<name> -> <variant>` or a bare `<variant>` replacing the variant of the same name."""

    variant: VariantSpec
    name: str | None = None
    position: SourcePosition | None = field(default=None, compare=False)

    @property
    def target(self) -> str:
        return self.name if self.name is not None else self.variant.name

    def create(self) -> list[VariantSpec]:
        return []

    def removes(self, item: VariantSpec) -> bool:
        return False

    def transforms(self, item: VariantSpec) -> bool:
        return item.name == self.target

    def apply(self, item: VariantSpec) -> VariantSpec:
        return copy.deepcopy(self.variant)

    def __str__(self) -> str:
        return (f"{self.name} -> " if self.name is not None else "") + self.variant.name


VariantChange = AddVariant | RemoveVariant | RenameVariant | RetypeVariant | ReplaceVariant


# ---------------------------------------------------------------------------
# Generic parameters
# ---------------------------------------------------------------------------


@dataclass
class AddGeneric:
    """`+<param>`"""

    param: GenericParam
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[GenericParam]:
        return [self.param]

    def removes(self, item: GenericParam) -> bool:
        return False

    def __str__(self) -> str:
        return f"+{self.param}"


@dataclass
class RemoveGeneric:
    """`-<name>`; lifetimes may be written with or without the tick."""

    name: str
    position: SourcePosition | None = field(default=None, compare=False)

    def create(self) -> list[GenericParam]:
        return []

    def removes(self, item: GenericParam) -> bool:
        return item.ident == strip_lifetime(self.name)

    def __str__(self) -> str:
        return f"-{self.name}"


GenericChange = AddGeneric | RemoveGeneric


@dataclass
class ChangeSpec:
    """A full change specification: the skeleton of the derived declaration plus its changes.

    Attributes:
        kind: STRUCT (body holds named-field changes) or ENUM (body holds variant changes)
        name: Name of the derived type
        visibility: Visibility of the derived type ("" for inherited)
        attributes: Outer attributes of the derived type, rendered
        generic_changes: Changes to the base generic parameter list
        changes: Body changes, in declaration order
    """

    kind: DataKind = DataKind.STRUCT
    name: str = ""
    visibility: str = ""
    attributes: list[str] = field(default_factory=list)
    generic_changes: list[GenericChange] = field(default_factory=list)
    changes: list = field(default_factory=list)
    position: SourcePosition | None = field(default=None, compare=False)
