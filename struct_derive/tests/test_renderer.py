#!/usr/bin/env python3

import pytest

from struct_derive import __version__
from struct_derive.pipeline import DeriveError, Deriver, RenderConfig, TypeDefRenderer, derive, parse_type_def

MACRO_BASE = """
struct X {
    id: i64,
    name: String,
    age: i32,
    height: f32,
    some: String,
}
"""

MACRO_SPEC = """
#[derive(Debug)]
struct Y<
    +'a,
    +T,
> {
    ~id -> x_id,
    ~name: &'a str,
    ~some: &'a str,
    +last_name: &'a str,
    -height,
    +t: T,
}
"""


@pytest.fixture
def renderer():
    return TypeDefRenderer()


class TestTypeDefRenderer:
    """Printing declarations as source text"""

    def test_derived_struct(self, renderer):
        expected = (
            "#[derive(Debug)]\n"
            "struct Y<'a, T> {\n"
            "    x_id: i64,\n"
            "    name: &'a str,\n"
            "    age: i32,\n"
            "    some: &'a str,\n"
            "    last_name: &'a str,\n"
            "    t: T,\n"
            "}"
        )
        assert renderer.render(derive(MACRO_BASE, MACRO_SPEC)) == expected

    def test_enum(self, renderer):
        type_def = parse_type_def("pub enum E { A(i64), B { x: u8 }, C, #[default] D = 4 }")
        expected = "pub enum E {\n    A(i64),\n    B { x: u8 },\n    C,\n    #[default] D = 4,\n}"
        assert renderer.render(type_def) == expected

    def test_where_clause_on_named_struct(self, renderer):
        type_def = parse_type_def("struct W<T> where T: Clone { pub t: T }")
        assert renderer.render(type_def) == "struct W<T> where T: Clone {\n    pub t: T,\n}"

    def test_tuple_struct(self, renderer):
        type_def = parse_type_def("pub struct P<T>(pub T, u8) where T: Copy;")
        assert renderer.render(type_def) == "pub struct P<T>(pub T, u8) where T: Copy;"

    def test_unit_struct(self, renderer):
        assert renderer.render(parse_type_def("struct U;")) == "struct U;"

    def test_field_attributes(self, renderer):
        type_def = parse_type_def("struct X { #[serde(skip)] a: u8 }")
        assert renderer.render(type_def) == "struct X {\n    #[serde(skip)] a: u8,\n}"

    def test_custom_indent(self):
        renderer = TypeDefRenderer(RenderConfig(indent="\t"))
        assert renderer.render(parse_type_def("struct X { a: u8 }")) == "struct X {\n\ta: u8,\n}"

    def test_error(self, renderer):
        assert renderer.render_error(DeriveError('bad "x"')) == 'compile_error!("bad \\"x\\"");'


class TestRenderResults:
    """Rendering a batch of results as one file"""

    def test_file_layout(self, renderer):
        results = Deriver("struct X { a: u8 }").derive_all(["struct A {}", "struct B { -zz }"])
        out = renderer.render_results(results, "struct_derive job.json out.rs")
        assert out == (
            f"// Generated by struct_derive {__version__} using: struct_derive job.json out.rs\n"
            "// Do not edit by hand.\n"
            "\n"
            "struct A {\n"
            "    a: u8,\n"
            "}\n"
            "\n"
            'compile_error!("line 1, column 12: no target matched field change `-zz`");\n'
        )

    def test_without_command_line(self, renderer):
        out = renderer.render_results([])
        assert out == f"// Generated by struct_derive {__version__}\n// Do not edit by hand.\n\n"

    def test_options(self):
        config = RenderConfig(add_generation_comment=False, emit_compile_errors=False, blank_lines_between=0)
        results = Deriver("struct X { a: u8 }").derive_all(["struct A {}", "struct B { -zz }", "struct C { -a }"])
        out = TypeDefRenderer(config).render_results(results)
        assert out == "struct A {\n    a: u8,\n}\nstruct C {\n}\n"


if __name__ == "__main__":
    pytest.main([__file__])
