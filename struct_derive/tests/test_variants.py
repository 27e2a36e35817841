#!/usr/bin/env python3

import pytest

from struct_derive.pipeline.change_lang import ChangeDomain, parse_changes, parse_type_def
from struct_derive.pipeline.errors import ConflictError, PositionalError, ShapeError, UnmatchedChangeError
from struct_derive.pipeline.transformers import transform_variants
from struct_derive.pipeline.type_ast import Shape, VariantSpec

BASE = "enum E { A(i64), B { x: u8, y: u16 }, C, D(i16) = 4 }"


def apply(changes: str, base: str = BASE) -> list[VariantSpec]:
    variants = parse_type_def(base).variants
    return transform_variants(variants, parse_changes(changes, ChangeDomain.VARIANT))


def names(variants: list[VariantSpec]) -> list[str]:
    return [v.name for v in variants]


class TestVariantTransformer:
    """Diff-apply over enum variants"""

    def test_remove_and_add(self):
        variants = apply("-A, +D(i8)", base="enum E { A(i64), B(i32), C(i16) }")
        assert names(variants) == ["B", "C", "D"]
        assert [v.fields.types() for v in variants] == [["i32"], ["i16"], ["i8"]]

    def test_rename_keeps_body(self):
        variants = apply("~D -> Z")
        assert names(variants) == ["A", "B", "C", "Z"]
        assert variants[3].fields.types() == ["i16"]
        assert variants[3].discriminant == "4"

    def test_retype_positional_variant(self):
        variants = apply("~A(~u64, +bool)")
        assert variants[0].shape is Shape.POSITIONAL
        assert variants[0].fields.types() == ["u64", "bool"]

    def test_retype_named_variant_with_rename(self):
        variants = apply("~B -> Point { ~x: i8, -y, +z: i8 }")
        assert variants[1].name == "Point"
        assert variants[1].fields.names() == ["x", "z"]
        assert variants[1].fields.types() == ["i8", "i8"]

    def test_replace_whole_variant(self):
        variants = apply("C -> C { id: u32 }, A(String)")
        assert variants[0].fields.types() == ["String"]
        assert variants[2].shape is Shape.NAMED
        assert variants[2].fields.names() == ["id"]

    def test_replace_unknown_variant(self):
        with pytest.raises(UnmatchedChangeError, match="no target matched variant change"):
            apply("Q -> Q(u8)")

    def test_remove_unknown_variant(self):
        with pytest.raises(UnmatchedChangeError):
            apply("-Q")

    @pytest.mark.parametrize("changes", ["-A, ~A -> Z", "~A -> Z, -A", "~C, C(u8)"])
    def test_conflict(self, changes):
        with pytest.raises(ConflictError, match="cannot change variant twice"):
            apply(changes)

    def test_retype_unit_variant(self):
        with pytest.raises(ShapeError, match="replace the whole variant"):
            apply("~C(+u8)")

    def test_tuple_retype_on_struct_variant(self):
        with pytest.raises(ShapeError, match="cannot apply a tuple retype to struct variant `B`"):
            apply("~B(_)")

    def test_struct_retype_on_tuple_variant(self):
        with pytest.raises(ShapeError, match="cannot apply a struct retype to tuple variant `A`"):
            apply("~A { +x: u8 }")

    def test_nested_errors_propagate(self):
        with pytest.raises(PositionalError, match="unmatched original fields remain"):
            apply("~A()")
        with pytest.raises(UnmatchedChangeError, match="no target matched field change"):
            apply("~B { -missing }")

    def test_original_is_not_modified(self):
        variants = parse_type_def(BASE).variants
        transform_variants(variants, parse_changes("~A(-_), -C", ChangeDomain.VARIANT))
        assert names(variants) == ["A", "B", "C", "D"]
        assert variants[0].fields.types() == ["i64"]


if __name__ == "__main__":
    pytest.main([__file__])
