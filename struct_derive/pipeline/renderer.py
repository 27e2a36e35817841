"""
Renderer that prints declarations as Rust-like source text.

Uses Jinja2 templates from `templates/rust`.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import jinja2

from ..utils import escape_string
from .config import RenderConfig
from .driver import DeriveResult
from .errors import DeriveError
from .type_ast.nodes import DataKind, Fields, FieldSpec, Shape, TypeDef, VariantSpec


class TypeDefRenderer:
    """Renders TypeDef values and derive results."""

    # Template directory name
    TEMPLATE_LANG: str = "rust"

    # File extension
    FILE_EXTENSION: str = "rs"

    def __init__(self, config: RenderConfig | None = None):
        """
        Initialize the renderer.

        Args:
            config: Render configuration
        """
        self.config = config or RenderConfig()
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        self.jinja_env.filters["rust_string"] = escape_string

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.type_def_template = self.jinja_env.get_template(f"type_def.{self.FILE_EXTENSION}.jinja2")
        self.error_template = self.jinja_env.get_template(f"error.{self.FILE_EXTENSION}.jinja2")

    def render(self, type_def: TypeDef) -> str:
        """
        Render one declaration.

        Args:
            type_def: The declaration

        Returns:
            Source text without trailing newline
        """
        return self.type_def_template.render(**self._prepare_type_context(type_def))

    def render_error(self, error: DeriveError) -> str:
        """Render a failure as a `compile_error!` invocation."""
        return self.error_template.render(message=str(error))

    def render_results(self, results: Sequence[DeriveResult], command_line: str | None = None) -> str:
        """
        Render a batch of derive results as one file.

        Args:
            results: Results from `Deriver.derive_all`
            command_line: Command line quoted in the generation comment

        Returns:
            File contents ending with a newline
        """
        from .. import __version__

        blocks = []
        for result in results:
            if result.type_def is not None:
                blocks.append(self.render(result.type_def))
            elif self.config.emit_compile_errors and result.error is not None:
                blocks.append(self.render_error(result.error))

        prefix = self.prefix_template.render(
            add_generation_comment=self.config.add_generation_comment,
            version=__version__,
            command_line=command_line,
        )
        separator = "\n" * (self.config.blank_lines_between + 1)
        body = separator.join(blocks)
        return prefix + body + "\n" if body else prefix

    def _prepare_type_context(self, type_def: TypeDef) -> dict[str, Any]:
        """
        Prepare the template context for a declaration.

        Args:
            type_def: The declaration

        Returns:
            Dictionary of template variables
        """
        header = f"{type_def.kind.value} {type_def.name}"
        if type_def.visibility:
            header = f"{type_def.visibility} {header}"
        if type_def.generics:
            header += "<" + ", ".join(str(p) for p in type_def.generics) + ">"

        where = f" where {type_def.where_clause}" if type_def.where_clause else ""
        shape = type_def.shape.value if type_def.shape is not None else None
        if shape != Shape.POSITIONAL.value:
            header += where
            where = ""

        context = {
            "attributes": type_def.attributes,
            "header": header,
            "where": where,
            "kind": type_def.kind.value,
            "shape": shape,
            "indent": self.config.indent,
            "fields": [],
            "variants": [],
        }
        if type_def.kind is DataKind.ENUM:
            context["variants"] = [self._variant_text(v) for v in type_def.variants or []]
        elif type_def.fields is not None:
            context["fields"] = [self._field_text(f) for f in type_def.fields.fields]
        return context

    def _field_text(self, field: FieldSpec) -> str:
        return str(field)

    def _variant_text(self, variant: VariantSpec) -> str:
        text = " ".join([*variant.attributes, variant.name])
        text += self._inline_body(variant.fields)
        if variant.discriminant is not None:
            text += f" = {variant.discriminant}"
        return text

    def _inline_body(self, fields: Fields) -> str:
        items = [self._field_text(f) for f in fields.fields]
        if fields.shape is Shape.NAMED:
            return " { " + ", ".join(items) + " }" if items else " {}"
        if fields.shape is Shape.POSITIONAL:
            return "(" + ", ".join(items) + ")"
        return ""
