"""
AST node definitions for type declarations.

These nodes describe a record declaration structurally: names,
visibility and type expressions. Nothing here evaluates or resolves
types; a type expression is only its token sequence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ...utils import render_tokens, strip_lifetime


@dataclass(frozen=True)
class TypeExpr:
    """A type expression kept as the tokens it was written with.

    Equality compares token sequences, so `&'a str` and `& 'a  str`
    are equal while `String` and `std::string::String` are not.
    """

    tokens: tuple[str, ...] = ()

    @staticmethod
    def of(text: str) -> TypeExpr:
        """Parse a type expression from source text."""
        from ..change_lang.parser import parse_type

        return parse_type(text)

    def __str__(self) -> str:
        return render_tokens(self.tokens)


class Shape(Enum):
    """Structural kind of a record body or of a variant."""

    NAMED = "named"  # { a: A, b: B }
    POSITIONAL = "positional"  # (A, B)
    UNIT = "unit"  # nothing


class DataKind(Enum):
    """Kind of declaration."""

    STRUCT = "struct"
    ENUM = "enum"
    UNION = "union"


class GenericKind(Enum):
    """Kind of generic parameter."""

    LIFETIME = "lifetime"
    TYPE = "type"
    CONST = "const"


@dataclass
class FieldSpec:
    """A field of a struct, union or variant. Positional fields have no name."""

    ty: TypeExpr = field(default_factory=TypeExpr)
    name: str | None = None
    visibility: str = ""  # "" means inherited (private)
    attributes: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        parts = [*self.attributes]
        if self.visibility:
            parts.append(self.visibility)
        parts.append(f"{self.name}: {self.ty}" if self.name is not None else str(self.ty))
        return " ".join(parts)


@dataclass
class Fields:
    """An ordered field collection with its shape."""

    shape: Shape = Shape.UNIT
    fields: list[FieldSpec] = field(default_factory=list)

    @staticmethod
    def named(fields: list[FieldSpec]) -> Fields:
        return Fields(Shape.NAMED, list(fields))

    @staticmethod
    def positional(fields: list[FieldSpec]) -> Fields:
        return Fields(Shape.POSITIONAL, list(fields))

    @staticmethod
    def unit() -> Fields:
        return Fields(Shape.UNIT, [])

    def names(self) -> list[str | None]:
        return [f.name for f in self.fields]

    def types(self) -> list[str]:
        return [str(f.ty) for f in self.fields]


@dataclass
class VariantSpec:
    """An enum variant."""

    name: str = ""
    fields: Fields = field(default_factory=Fields.unit)
    attributes: list[str] = field(default_factory=list)
    discriminant: str | None = None  # Expression text after "="

    @property
    def shape(self) -> Shape:
        return self.fields.shape


@dataclass
class GenericParam:
    """A generic parameter declaration.

    Attributes:
        kind: Lifetime, type or const parameter
        name: Declared name, with the tick for lifetimes ("'a", "T", "N")
        text: The whole declaration as written ("'a: 'b", "T: Clone = u8")
    """

    kind: GenericKind = GenericKind.TYPE
    name: str = ""
    text: str = ""

    @property
    def ident(self) -> str:
        """Name used by remove operations: lifetimes lose their tick."""
        return strip_lifetime(self.name)

    def __str__(self) -> str:
        return self.text or self.name


@dataclass
class TypeDef:
    """A complete record declaration.

    Structs and unions carry `fields`; enums carry `variants`.
    """

    kind: DataKind = DataKind.STRUCT
    name: str = ""
    visibility: str = ""
    attributes: list[str] = field(default_factory=list)
    generics: list[GenericParam] = field(default_factory=list)
    where_clause: str | None = None  # Text after "where"
    fields: Fields | None = None
    variants: list[VariantSpec] | None = None

    @staticmethod
    def of(text: str) -> TypeDef:
        """Parse a declaration from source text."""
        from ..change_lang.parser import parse_type_def

        return parse_type_def(text)

    @property
    def shape(self) -> Shape | None:
        """Body shape for structs and unions, None for enums."""
        return self.fields.shape if self.fields is not None else None
