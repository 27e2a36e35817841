"""
Change-language parser.

Builds ordered operation lists for the four operand domains, full
change specifications, and base declarations, from Rust-like text.

Phase 1 of the pipeline: nothing is matched against a base type here;
the output is purely syntactic.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

from ...utils import render_tokens
from ..type_ast.nodes import (
    DataKind,
    Fields,
    FieldSpec,
    GenericKind,
    GenericParam,
    Shape,
    TypeDef,
    TypeExpr,
    VariantSpec,
)
from .lexer import TokenType
from .operations import (
    AddField,
    AddGeneric,
    AddPositional,
    AddVariant,
    ChangeDomain,
    ChangeField,
    ChangeSpec,
    MatchPositional,
    RemoveField,
    RemoveGeneric,
    RemovePositional,
    RemoveVariant,
    RenameVariant,
    ReplaceVariant,
    RetypePositional,
    RetypeVariant,
)
from .token_stream import TokenStream

_OPEN_TO_CLOSE = {"(": ")", "[": "]", "{": "}"}

_VIS_RESTRICTIONS = ("crate", "self", "super")


class ChangeParser(TokenStream):
    """Recursive-descent parser over one piece of change-language text."""

    # Deepest nesting of types and bracket groups accepted
    MAX_NESTING: int = 64

    def __init__(self, text: str):
        super().__init__(text)
        self.depth = 0

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_changes(self, domain: ChangeDomain) -> list:
        """
        Parse a bare, comma separated change list for one domain.

            changes := ( change ( "," change ) * "," ? ) ?
        """
        parse_one = self._change_parser(domain)
        changes = self._parse_separated(parse_one, closer=None)
        self.expect_end()
        return changes

    def parse_change_spec(self) -> ChangeSpec:
        """
        Parse a change specification:

            change_spec := attribute * visibility ( "struct" | "enum" ) IDENT
                           ( "<" generic_changes ">" ) ? "{" body_changes "}"
        """
        position = self.peek().position
        attributes = self.parse_attributes()
        visibility = self.parse_visibility() or ""

        if self.next_if("struct"):
            kind, domain = DataKind.STRUCT, ChangeDomain.NAMED_FIELD
        elif self.next_if("enum"):
            kind, domain = DataKind.ENUM, ChangeDomain.VARIANT
        else:
            self.fail("expected `struct` or `enum`")
        name = self.parse_ident("type name")

        generic_changes = []
        if self.next_if("<"):
            generic_changes = self._parse_separated(self.parse_generic_change, closer=">")
            self.expect(">")

        self.expect("{")
        changes = self._parse_separated(self._change_parser(domain), closer="}")
        self.expect("}")
        self.expect_end()

        return ChangeSpec(
            kind=kind,
            name=name,
            visibility=visibility,
            attributes=attributes,
            generic_changes=generic_changes,
            changes=changes,
            position=position,
        )

    def parse_type_def(self) -> TypeDef:
        """
        Parse a base declaration:

            type_def := attribute * visibility ( struct_def | enum_def | union_def )
            struct_def := "struct" IDENT generics ? where ? ( named_body | ";" )
                        | "struct" IDENT generics ? positional_body where ? ";"
            enum_def := "enum" IDENT generics ? where ? "{" variants "}"
            union_def := "union" IDENT generics ? where ? named_body
        """
        attributes = self.parse_attributes()
        visibility = self.parse_visibility() or ""

        if self.next_if("struct"):
            kind = DataKind.STRUCT
        elif self.next_if("enum"):
            kind = DataKind.ENUM
        elif self.next_if("union"):
            kind = DataKind.UNION
        else:
            self.fail("expected `struct`, `enum` or `union`")

        type_def = TypeDef(
            kind=kind,
            name=self.parse_ident("type name"),
            visibility=visibility,
            attributes=attributes,
            generics=self.parse_generic_params(),
        )

        if kind is DataKind.ENUM:
            type_def.where_clause = self.parse_where_clause()
            self.expect("{")
            type_def.variants = self._parse_separated(self.parse_variant, closer="}")
            self.expect("}")
        elif kind is DataKind.STRUCT and self.peek_is("("):
            type_def.fields = self.parse_positional_fields()
            type_def.where_clause = self.parse_where_clause()
            self.expect(";")
        else:
            type_def.where_clause = self.parse_where_clause()
            if kind is DataKind.STRUCT and self.next_if(";"):
                type_def.fields = Fields.unit()
            else:
                type_def.fields = self.parse_named_fields()

        self.expect_end()
        return type_def

    # ------------------------------------------------------------------
    # Change operations
    # ------------------------------------------------------------------

    def _change_parser(self, domain: ChangeDomain) -> Callable:
        if domain is ChangeDomain.NAMED_FIELD:
            return self.parse_named_field_change
        if domain is ChangeDomain.POSITIONAL:
            return self.parse_positional_change
        if domain is ChangeDomain.VARIANT:
            return self.parse_variant_change
        if domain is ChangeDomain.GENERIC:
            return self.parse_generic_change
        raise ValueError(f"unknown change domain {domain!r}")

    def parse_named_field_change(self):
        """
        Parse a named-field change:

            "+" visibility IDENT ":" type
            "-" IDENT ( ":" type ) ?
            "~" visibility IDENT ( "->" visibility IDENT ) ? ( ":" type ) ?
        """
        position = self.peek().position

        if self.next_if("+"):
            visibility = self.parse_visibility() or ""
            name = self.parse_ident("field name")
            self.expect(":")
            return AddField(name=name, ty=self.parse_type(), visibility=visibility, position=position)

        if self.next_if("-"):
            name = self.parse_ident("field name")
            guard = self.parse_type() if self.next_if(":") else None
            return RemoveField(name=name, guard=guard, position=position)

        if self.next_if("~"):
            visibility = self.parse_visibility()
            name = self.parse_ident("field name")
            new_name = None
            if self.next_if("->"):
                if visibility is not None and self._peek_visibility():
                    self.fail("visibility may be given before the field name or after `->`, not both")
                visibility = self.parse_visibility() or visibility
                new_name = self.parse_ident("new field name")
            ty = self.parse_type() if self.next_if(":") else None
            return ChangeField(name=name, new_name=new_name, visibility=visibility, ty=ty, position=position)

        self.fail("expected one of `+`, `-`, `~`")

    def parse_positional_change(self):
        """
        Parse a positional change:

            "+" visibility type
            "-" ( type | "_" )
            "~" type
            ( type | "_" ) "->" type
            type | "_"
        """
        position = self.peek().position

        if self.next_if("+"):
            visibility = self.parse_visibility() or ""
            return AddPositional(ty=self.parse_type(), visibility=visibility, position=position)

        if self.next_if("-"):
            return RemovePositional(guard=self._parse_guard(), position=position)

        if self.next_if("~"):
            return RetypePositional(ty=self.parse_type(), position=position)

        guard = self._parse_guard()
        if self.next_if("->"):
            return RetypePositional(ty=self.parse_type(), guard=guard, position=position)
        return MatchPositional(guard=guard, position=position)

    def _parse_guard(self) -> TypeExpr | None:
        if self.next_if("_"):
            return None
        return self.parse_type()

    def parse_variant_change(self):
        """
        Parse a variant change:

            "+" variant
            "-" IDENT
            "~" IDENT ( "->" IDENT ) ? ( "(" positional_changes ")" | "{" named_changes "}" ) ?
            IDENT "->" variant
            variant
        """
        position = self.peek().position

        if self.next_if("+"):
            return AddVariant(variant=self.parse_variant(), position=position)

        if self.next_if("-"):
            return RemoveVariant(name=self.parse_ident("variant name"), position=position)

        if self.next_if("~"):
            name = self.parse_ident("variant name")
            new_name = self.parse_ident("new variant name") if self.next_if("->") else None

            if self.next_if("("):
                changes = self._parse_separated(self.parse_positional_change, closer=")")
                self.expect(")")
                return RetypeVariant(name=name, shape=Shape.POSITIONAL, changes=changes, new_name=new_name, position=position)

            if self.next_if("{"):
                changes = self._parse_separated(self.parse_named_field_change, closer="}")
                self.expect("}")
                return RetypeVariant(name=name, shape=Shape.NAMED, changes=changes, new_name=new_name, position=position)

            return RenameVariant(name=name, new_name=new_name if new_name is not None else name, position=position)

        if self.peek_type(TokenType.IDENT) and self.peek_is("->", offset=1):
            name = self.parse_ident("variant name")
            self.expect("->")
            return ReplaceVariant(variant=self.parse_variant(), name=name, position=position)

        if self.peek_type(TokenType.IDENT) or self.peek_is("#"):
            return ReplaceVariant(variant=self.parse_variant(), position=position)

        self.fail("expected one of `+`, `-`, `~` or a variant")

    def parse_generic_change(self):
        """
        Parse a generic-parameter change:

            "+" generic_param
            "-" ( IDENT | LIFETIME )
        """
        position = self.peek().position

        if self.next_if("+"):
            return AddGeneric(param=self.parse_generic_param(), position=position)

        if self.next_if("-"):
            if self.peek_type(TokenType.LIFETIME):
                return RemoveGeneric(name=self.next().value, position=position)
            return RemoveGeneric(name=self.parse_ident("generic parameter name"), position=position)

        self.fail("expected one of `+`, `-`")

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def parse_attributes(self) -> list[str]:
        """Parse outer attributes `#[...]`, returning their rendered text."""
        attributes = []
        while self.peek_is("#"):
            start = self.index
            self.next()
            self.next_if("!")
            if not self.peek_is("["):
                self.fail("expected `[` after `#`")
            self._skip_group()
            attributes.append(render_tokens(self.values(start)))
        return attributes

    def _peek_visibility(self) -> bool:
        return self.peek_is("pub")

    def parse_visibility(self) -> str | None:
        """
        Parse an optional visibility. Returns None when none was written.

            visibility := "pub" ( "(" ( "crate" | "self" | "super" | "in" path ) ")" ) ?
        """
        if not self.peek_is("pub"):
            return None
        start = self.index
        self.next()
        if self.peek_is("("):
            restricted = (
                any(self.peek_is(word, offset=1) for word in _VIS_RESTRICTIONS) and self.peek_is(")", offset=2)
            ) or self.peek_is("in", offset=1)
            if restricted:
                self._skip_group()
        return render_tokens(self.values(start))

    def parse_ident(self, what: str = "identifier") -> str:
        tok = self.peek()
        if tok.tok_type != TokenType.IDENT or tok.value == "_":
            self.fail(f"expected {what}")
        return self.next().value

    def parse_named_fields(self) -> Fields:
        """named_body := "{" ( field ( "," field ) * "," ? ) ? "}" """
        self.expect("{")
        fields = self._parse_separated(self._parse_named_field, closer="}")
        self.expect("}")
        return Fields.named(fields)

    def _parse_named_field(self) -> FieldSpec:
        attributes = self.parse_attributes()
        visibility = self.parse_visibility() or ""
        name = self.parse_ident("field name")
        self.expect(":")
        return FieldSpec(ty=self.parse_type(), name=name, visibility=visibility, attributes=attributes)

    def parse_positional_fields(self) -> Fields:
        """positional_body := "(" ( field ( "," field ) * "," ? ) ? ")" """
        self.expect("(")
        fields = self._parse_separated(self._parse_positional_field, closer=")")
        self.expect(")")
        return Fields.positional(fields)

    def _parse_positional_field(self) -> FieldSpec:
        attributes = self.parse_attributes()
        visibility = self.parse_visibility() or ""
        return FieldSpec(ty=self.parse_type(), visibility=visibility, attributes=attributes)

    def parse_variant(self) -> VariantSpec:
        """
        Parse a variant declaration:

            variant := attribute * IDENT ( named_body | positional_body ) ? ( "=" expr ) ?
        """
        attributes = self.parse_attributes()
        name = self.parse_ident("variant name")

        if self.peek_is("{"):
            fields = self.parse_named_fields()
        elif self.peek_is("("):
            fields = self.parse_positional_fields()
        else:
            fields = Fields.unit()

        discriminant = None
        if self.next_if("="):
            start = self.index
            while not (self.at_end() or self.peek_is(",") or self.peek_is("}") or self.peek_is(")")):
                if self.peek().value in _OPEN_TO_CLOSE and self.peek_type(TokenType.PUNCT):
                    self._skip_group()
                else:
                    self.next()
            if start == self.index:
                self.fail("expected discriminant expression")
            discriminant = render_tokens(self.values(start))

        return VariantSpec(name=name, fields=fields, attributes=attributes, discriminant=discriminant)

    def parse_generic_params(self) -> list[GenericParam]:
        """generics := "<" ( generic_param ( "," generic_param ) * "," ? ) ? ">" """
        if not self.next_if("<"):
            return []
        params = self._parse_separated(self.parse_generic_param, closer=">")
        self.expect(">")
        return params

    def parse_generic_param(self) -> GenericParam:
        """
        Parse one generic parameter declaration:

            LIFETIME ( ":" LIFETIME ( "+" LIFETIME ) * ) ?
            "const" IDENT ":" type ( "=" const_arg ) ?
            IDENT ( ":" bounds ) ? ( "=" type ) ?
        """
        self.parse_attributes()
        start = self.index

        if self.peek_type(TokenType.LIFETIME):
            name = self.next().value
            if self.next_if(":"):
                self.expect_type(TokenType.LIFETIME, "lifetime bound")
                while self.next_if("+"):
                    self.expect_type(TokenType.LIFETIME, "lifetime bound")
            return GenericParam(GenericKind.LIFETIME, name, render_tokens(self.values(start)))

        if self.next_if("const"):
            name = self.parse_ident("const parameter name")
            self.expect(":")
            self.parse_type()
            if self.next_if("="):
                self._parse_const_arg()
            return GenericParam(GenericKind.CONST, name, render_tokens(self.values(start)))

        name = self.parse_ident("generic parameter")
        if self.next_if(":"):
            self._parse_bounds(allow_empty=True)
        if self.next_if("="):
            self.parse_type()
        return GenericParam(GenericKind.TYPE, name, render_tokens(self.values(start)))

    def parse_where_clause(self) -> str | None:
        """Capture `where ...` up to the body as text (without the keyword)."""
        if not self.next_if("where"):
            return None
        start = self.index
        depth = 0
        while not self.at_end():
            tok = self.peek()
            if depth == 0 and tok.tok_type == TokenType.PUNCT and tok.value in ("{", ";"):
                break
            if tok.tok_type == TokenType.PUNCT and tok.value in ("<", "(", "["):
                depth += 1
            elif tok.tok_type == TokenType.PUNCT and tok.value in (">", ")", "]"):
                depth -= 1
            self.next()
        text = render_tokens(self.values(start))
        return text.rstrip(",").rstrip() or None

    # ------------------------------------------------------------------
    # Types
    # ------------------------------------------------------------------

    def parse_type(self, allow_plus: bool = True) -> TypeExpr:
        """
        Parse a type expression and return it as its token sequence.

            type := "&" LIFETIME ? "mut" ? type
                  | "*" ( "const" | "mut" ) type
                  | "(" ( type ( "," type ) * "," ? ) ? ")"
                  | "[" type ( ";" expr ) ? "]"
                  | "!" | "_"
                  | ( "dyn" | "impl" ) bounds
                  | "for" "<" lifetimes ">" ? "unsafe" ? ( "extern" STRING ? ) ? "fn" fn_args
                  | qualified_path | path
        """
        start = self.index
        self._parse_type_inner(allow_plus)
        if start == self.index:
            self.fail("expected type")
        return TypeExpr(self.values(start))

    def _parse_type_inner(self, allow_plus: bool) -> None:
        with self._nested():
            self._parse_type_kind(allow_plus)

    def _parse_type_kind(self, allow_plus: bool) -> None:
        tok = self.peek()

        if tok.tok_type == TokenType.PUNCT:
            if tok.value == "&":
                self.next()
                if self.peek_type(TokenType.LIFETIME):
                    self.next()
                self.next_if("mut")
                self._parse_type_inner(allow_plus=False)
                return
            if tok.value == "*":
                self.next()
                if not (self.next_if("const") or self.next_if("mut")):
                    self.fail("expected `const` or `mut` after `*`")
                self._parse_type_inner(allow_plus=False)
                return
            if tok.value == "(":
                self.next()
                self._parse_separated(self.parse_type, closer=")")
                self.expect(")")
                return
            if tok.value == "[":
                self.next()
                self.parse_type()
                if self.next_if(";"):
                    self._skip_until("]")
                self.expect("]")
                return
            if tok.value == "!":
                self.next()
                return
            if tok.value in ("<", "::"):
                self._parse_path()
                return
            self.fail("expected type")

        if tok.tok_type != TokenType.IDENT:
            self.fail("expected type")

        if tok.value == "_":
            self.next()
            return
        if tok.value in ("dyn", "impl"):
            self.next()
            self._parse_bounds(allow_plus=allow_plus)
            return
        if tok.value in ("fn", "unsafe", "extern", "for"):
            self._parse_fn_pointer()
            return
        self._parse_path()

    def _parse_fn_pointer(self) -> None:
        if self.next_if("for"):
            self.expect("<")
            self._parse_separated(lambda: self.expect_type(TokenType.LIFETIME, "lifetime"), closer=">")
            self.expect(">")
            if not self.peek_is("fn") and not self.peek_is("unsafe") and not self.peek_is("extern"):
                # Higher-ranked trait bound: for<'a> Fn(&'a T)
                self._parse_path()
                return
        self.next_if("unsafe")
        if self.next_if("extern") and self.peek_type(TokenType.LITERAL):
            self.next()
        self.expect("fn")
        self._parse_fn_args()

    def _parse_fn_args(self) -> None:
        self.expect("(")
        self._parse_separated(self._parse_fn_arg, closer=")")
        self.expect(")")
        if self.next_if("->"):
            self._parse_type_inner(allow_plus=False)

    def _parse_fn_arg(self) -> None:
        # Named arguments in fn pointers: fn(x: i32)
        if self.peek_type(TokenType.IDENT) and self.peek_is(":", offset=1):
            self.next()
            self.next()
        self.parse_type()

    def _parse_path(self) -> None:
        """
        path := "::" ? segment ( "::" segment ) *
              | "<" type ( "as" path ) ? ">" ( "::" segment ) +
        segment := IDENT ( "::" ? "<" generic_args ">" | "(" types ")" ( "->" type ) ? ) ?
        """
        if self.next_if("<"):
            self.parse_type()
            if self.next_if("as"):
                self._parse_path()
            self.expect(">")
            self.expect("::")
        else:
            self.next_if("::")

        while True:
            self.parse_ident("path segment")
            if self.peek_is("<") or (self.peek_is("::") and self.peek_is("<", offset=1)):
                self.next_if("::")
                self.expect("<")
                self._parse_separated(self._parse_generic_arg, closer=">")
                self.expect(">")
            elif self.peek_is("("):
                self._parse_fn_args()
            if not (self.peek_is("::") and self.peek_type(TokenType.IDENT, offset=1)):
                return
            self.next()

    def _parse_generic_arg(self) -> None:
        """
        generic_arg := LIFETIME | IDENT "=" type | IDENT ":" bounds
                     | "{" expr "}" | "-" ? LITERAL | type
        """
        if self.peek_type(TokenType.LIFETIME):
            self.next()
            return
        if self.peek_type(TokenType.IDENT) and self.peek_is("=", offset=1):
            self.next()
            self.next()
            self.parse_type()
            return
        if self.peek_type(TokenType.IDENT) and self.peek_is(":", offset=1):
            self.next()
            self.next()
            self._parse_bounds()
            return
        self._parse_const_arg_or_type()

    def _parse_const_arg_or_type(self) -> None:
        if self.peek_is("{") or self.peek_type(TokenType.LITERAL) or self.peek_is("-"):
            self._parse_const_arg()
        else:
            self.parse_type()

    def _parse_const_arg(self) -> None:
        if self.peek_is("{"):
            self._skip_group()
            return
        self.next_if("-")
        if self.peek_type(TokenType.LITERAL) or self.peek_type(TokenType.IDENT):
            self.next()
            return
        self.fail("expected const argument")

    def _parse_bounds(self, allow_plus: bool = True, allow_empty: bool = False) -> None:
        """bounds := bound ( "+" bound ) *; bound := LIFETIME | "?" ? path | "(" bound ")" """
        first = True
        while True:
            if self.peek_type(TokenType.LIFETIME):
                self.next()
            elif self.peek_is("("):
                self.next()
                self._parse_bound_path()
                self.expect(")")
            elif self.peek_type(TokenType.IDENT) or self.peek_is("?") or self.peek_is("::") or self.peek_is("<"):
                self._parse_bound_path()
            elif first and allow_empty:
                return
            else:
                self.fail("expected trait bound")
            first = False
            if not (allow_plus and self.next_if("+")):
                return

    def _parse_bound_path(self) -> None:
        self.next_if("?")
        if self.peek_is("for"):
            self.next()
            self.expect("<")
            self._parse_separated(lambda: self.expect_type(TokenType.LIFETIME, "lifetime"), closer=">")
            self.expect(">")
        self._parse_path()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _parse_separated(self, parse_one: Callable, closer: str | None) -> list:
        """Parse `item ( "," item ) * "," ?` until `closer` (or end of input when None)."""
        items = []
        while not self._at_closer(closer):
            items.append(parse_one())
            if not self.next_if(","):
                break
        return items

    def _at_closer(self, closer: str | None) -> bool:
        if closer is None:
            return self.at_end()
        return self.peek_is(closer) or self.at_end()

    def _skip_group(self) -> None:
        """Consume a balanced `(...)`, `[...]` or `{...}` group."""
        with self._nested():
            opener = self.next()
            closer = _OPEN_TO_CLOSE.get(opener.value)
            if opener.tok_type != TokenType.PUNCT or closer is None:
                raise ValueError(f"not a group opener: {opener.value!r}")
            self._skip_until(closer)
            self.expect(closer)

    @contextmanager
    def _nested(self) -> Iterator[None]:
        """Track one level of nesting, failing past MAX_NESTING."""
        if self.depth >= self.MAX_NESTING:
            self.fail(f"nesting deeper than {self.MAX_NESTING} levels")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def _skip_until(self, closer: str) -> None:
        """Consume balanced tokens until `closer` at depth zero (not consumed)."""
        while not self.peek_is(closer):
            if self.at_end():
                self.fail(f"expected `{closer}`")
            tok = self.peek()
            if tok.tok_type == TokenType.PUNCT and tok.value in _OPEN_TO_CLOSE:
                self._skip_group()
            elif tok.tok_type == TokenType.PUNCT and tok.value in (")", "]", "}"):
                self.fail(f"expected `{closer}`")
            else:
                self.next()


def parse_changes(text: str, domain: ChangeDomain) -> list:
    """
    Parse a comma separated change list.

    Args:
        text: Change-language text, e.g. "~id -> x_id, -height"
        domain: Which kind of change the text holds

    Returns:
        Operations in declaration order

    Raises:
        ChangeSyntaxError: On malformed text or trailing tokens
    """
    return ChangeParser(text).parse_changes(domain)


def parse_change_spec(text: str) -> ChangeSpec:
    """Parse a full change specification (`struct Y<+'a> { ... }`)."""
    return ChangeParser(text).parse_change_spec()


def parse_type_def(text: str) -> TypeDef:
    """Parse a base declaration (`struct X { ... }`, `enum E { ... }`)."""
    return ChangeParser(text).parse_type_def()


def parse_type(text: str) -> TypeExpr:
    """Parse a single type expression."""
    parser = ChangeParser(text)
    ty = parser.parse_type()
    parser.expect_end()
    return ty
