#!/usr/bin/env python3

import pytest

from struct_derive.pipeline.change_lang import ChangeDomain, parse_changes, parse_type_def
from struct_derive.pipeline.errors import InternalError
from struct_derive.pipeline.transformers import patch_generics
from struct_derive.pipeline.type_ast import GenericParam


def patch(changes: str, base: str = "struct X<'a, T: Clone, const N: usize> {}") -> list[str]:
    params = parse_type_def(base).generics
    return [str(p) for p in patch_generics(params, parse_changes(changes, ChangeDomain.GENERIC))]


class TestGenericPatcher:
    """Generic parameter list patching"""

    def test_no_changes(self):
        assert patch("") == ["'a", "T: Clone", "const N: usize"]

    def test_remove_then_append(self):
        assert patch("+U: Default, -T, +'b") == ["'a", "const N: usize", "U: Default", "'b"]

    def test_lifetime_with_or_without_tick(self):
        assert patch("-'a") == ["T: Clone", "const N: usize"]
        assert patch("-a") == ["T: Clone", "const N: usize"]

    def test_unchecked(self):
        assert patch("-Missing, +T") == ["'a", "T: Clone", "const N: usize", "T"]

    def test_empty_base(self):
        assert patch("+'a, +T", base="struct X {}") == ["'a", "T"]

    def test_unknown_kind(self):
        with pytest.raises(InternalError):
            patch_generics([GenericParam(kind="weird", name="T")], [])


if __name__ == "__main__":
    pytest.main([__file__])
