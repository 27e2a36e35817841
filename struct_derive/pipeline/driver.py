"""
Driver that turns one base declaration into derived declarations.

For every change specification the driver:

1. Parses the specification (if given as text)
2. Classifies the base (named-field struct or enum) and checks the
   specification keyword against it
3. Patches the generic parameter list
4. Runs the named-field or variant transformer over the body
5. Assembles the derived TypeDef from the specification skeleton

Specifications are independent: a failure in one never affects another.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .change_lang.operations import ChangeSpec
from .change_lang.parser import parse_change_spec, parse_type_def
from .config import DeriveConfig
from .errors import DeriveError, DuplicateNameError, InternalError, ShapeError
from .transformers import patch_generics, transform_named_fields, transform_variants
from .type_ast.nodes import DataKind, Fields, Shape, TypeDef

logger = logging.getLogger(__name__)


@dataclass
class DeriveResult:
    """Outcome of one change specification.

    Exactly one of `type_def` and `error` is set.
    """

    index: int = 0
    name: str = ""  # Derived type name, "" when the specification did not parse
    type_def: TypeDef | None = None
    error: DeriveError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Deriver:
    """Derives types from one base declaration."""

    def __init__(self, base: TypeDef | str, config: DeriveConfig | None = None):
        """
        Initialize the deriver.

        Args:
            base: Base declaration, parsed or as text
            config: Derive configuration

        Raises:
            ChangeSyntaxError: If `base` is text that does not parse
        """
        self.base = parse_type_def(base) if isinstance(base, str) else base
        self.config = config or DeriveConfig()

    def derive(self, spec: ChangeSpec | str) -> TypeDef:
        """
        Derive one type.

        Args:
            spec: Change specification, parsed or as text

        Returns:
            The derived declaration

        Raises:
            DeriveError: Any syntax, shape, conflict, completeness or positional failure
        """
        if isinstance(spec, str):
            spec = parse_change_spec(spec)

        base = self.base
        self._check_kinds(spec)
        logger.debug("Deriving %s from %s with %d change(s)", spec.name, base.name, len(spec.changes))

        derived = TypeDef(
            kind=base.kind,
            name=spec.name,
            visibility=spec.visibility,
            attributes=list(spec.attributes),
            generics=patch_generics(base.generics, spec.generic_changes),
            where_clause=base.where_clause,
        )

        if base.kind is DataKind.STRUCT:
            derived.fields = transform_named_fields(base.fields, spec.changes)
        elif base.kind is DataKind.ENUM:
            derived.variants = transform_variants(base.variants or [], spec.changes)
        else:
            raise InternalError(f"unexpected base kind {base.kind!r}")

        if self.config.check_duplicate_names:
            check_duplicate_names(derived)
        return derived

    def derive_all(self, specs: Iterable[ChangeSpec | str]) -> list[DeriveResult]:
        """
        Derive one type per specification, isolating failures.

        Args:
            specs: Change specifications, parsed or as text

        Returns:
            One result per specification, in input order
        """
        results = []
        for index, spec in enumerate(specs):
            name = spec.name if isinstance(spec, ChangeSpec) else ""
            try:
                type_def = self.derive(spec)
            except DeriveError as e:
                logger.warning("Change specification #%d of %s failed: %s", index, self.base.name, e)
                results.append(DeriveResult(index=index, name=name, error=e))
                continue
            results.append(DeriveResult(index=index, name=type_def.name, type_def=type_def))
        return results

    def _check_kinds(self, spec: ChangeSpec) -> None:
        base = self.base
        if base.kind is DataKind.UNION:
            raise ShapeError(f"unions are not supported (`{base.name}`)")
        if base.kind is DataKind.STRUCT:
            shape = base.shape
            if shape is Shape.POSITIONAL:
                raise ShapeError(f"tuple structs are not supported (`{base.name}`)")
            if shape is Shape.UNIT:
                raise ShapeError(f"unit structs are not supported (`{base.name}`)")
            if shape is not Shape.NAMED:
                raise InternalError(f"unexpected struct shape {shape!r}")
        if spec.kind is not base.kind:
            raise ShapeError(
                f"cannot derive {spec.kind.value} `{spec.name}` from {base.kind.value} `{base.name}`",
                spec.position,
            )


def check_duplicate_names(type_def: TypeDef) -> None:
    """
    Reject a declaration that declares a field or variant name twice.

    Raises:
        DuplicateNameError: On the first repeated name
    """
    if type_def.fields is not None:
        _check_fields(type_def.fields, f"`{type_def.name}`")
    for variant in type_def.variants or []:
        _check_fields(variant.fields, f"variant `{variant.name}`")
    _check_unique([v.name for v in type_def.variants or []], "variant", f"`{type_def.name}`")


def _check_fields(fields: Fields, owner: str) -> None:
    if fields.shape is Shape.NAMED:
        _check_unique(fields.names(), "field", owner)


def _check_unique(names: Sequence[str | None], kind: str, owner: str) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise DuplicateNameError(f"duplicate {kind} `{name}` in {owner}")
        seen.add(name)


def derive(base: TypeDef | str, spec: ChangeSpec | str, config: DeriveConfig | None = None) -> TypeDef:
    """Derive one type from a base declaration. See `Deriver.derive`."""
    return Deriver(base, config).derive(spec)


def derive_all(
    base: TypeDef | str,
    specs: Iterable[ChangeSpec | str],
    config: DeriveConfig | None = None,
) -> list[DeriveResult]:
    """Derive one type per specification. See `Deriver.derive_all`."""
    return Deriver(base, config).derive_all(specs)
