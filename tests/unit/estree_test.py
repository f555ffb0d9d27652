"""Tests for converting tree-sitter TypeScript trees into ESTree-shaped nodes."""

from __future__ import annotations

import logging

import pytest
from tree_sitter import Parser

from no_unsafe_any.core.estree import EstreeBuilder, parse_source
from no_unsafe_any.core.policies import pattern_leaves
from no_unsafe_any.core.traversal import walk
from no_unsafe_any.errors import UnsupportedLanguageError
from no_unsafe_any.models import SyntaxNode


def _statement(source: str, index: int = 0) -> SyntaxNode:
    body = parse_source(source.encode("utf-8")).children("body")
    node = body[index]
    assert node is not None
    return node


def _declarator(source: str) -> SyntaxNode:
    declarator = _statement(source).children("declarations")[0]
    assert declarator is not None
    return declarator


class TestDeclarations:
    @pytest.mark.parametrize("kind", ["let", "const", "var"])
    def test_declaration_kind(self, kind: str) -> None:
        statement = _statement(f"{kind} x = 1;")

        assert statement.type == "VariableDeclaration"
        assert statement.attr("kind") == kind

    def test_uninitialised_declarator(self) -> None:
        declarator = _declarator("let x;")

        assert declarator.type == "VariableDeclarator"
        assert (declarator.start_byte, declarator.end_byte) == (4, 5)
        assert declarator.start_point.column == 4
        assert declarator.child("id").attr("name") == "x"
        assert declarator.child("init") is None

    def test_multiple_declarators(self) -> None:
        statement = _statement("let a, b = 2;")

        assert [d.child("id").attr("name") for d in statement.children("declarations")] == ["a", "b"]

    def test_null_and_undefined_initialisers(self) -> None:
        null_init = _declarator("var y = null;").child("init")
        undefined_init = _declarator("let z = undefined;").child("init")

        assert (null_init.type, null_init.attr("raw"), null_init.attr("value")) == ("Literal", "null", None)
        assert (undefined_init.type, undefined_init.attr("name")) == ("Identifier", "undefined")

    def test_empty_array_initialiser(self) -> None:
        init = _declarator("const arr = [];").child("init")

        assert init.type == "ArrayExpression"
        assert init.children("elements") == []

    def test_unknown_annotation(self) -> None:
        binding = _declarator("const a: unknown = foo;").child("id")
        annotation = binding.child("typeAnnotation")

        assert annotation.type == "TSTypeAnnotation"
        assert annotation.child("typeAnnotation").type == "TSUnknownKeyword"

    def test_type_reference_annotation(self) -> None:
        reference = _declarator("let n: Payload;").child("id").child("typeAnnotation").child("typeAnnotation")

        assert reference.type == "TSTypeReference"
        assert reference.text == "Payload"
        assert reference.child("typeName").attr("name") == "Payload"

    def test_generic_type_reference(self) -> None:
        reference = _declarator("let rows: Array<any>;").child("id").child("typeAnnotation").child("typeAnnotation")

        assert reference.type == "TSTypeReference"
        params = reference.child("typeArguments").children("params")
        assert [param.type for param in params] == ["TSAnyKeyword"]

    def test_declared_type_names_are_not_references(self) -> None:
        root = parse_source(b"type Alias = any;")

        references = [path.node for path in walk(root) if path.type == "TSTypeReference"]

        assert references == []


class TestPatterns:
    def test_object_pattern_leaves(self) -> None:
        pattern = _declarator("const { a, b: c, d = 1, ...rest } = obj;").child("id")

        assert pattern.type == "ObjectPattern"
        leaves = list(pattern_leaves(pattern))

        assert [leaf.attr("name") for leaf in leaves[:3]] == ["a", "c", "d"]
        assert (leaves[3].type, leaves[3].text) == ("RestElement", "...rest")

    def test_array_pattern_leaves(self) -> None:
        pattern = _declarator("const [first, [second], third = 1, ...others] = tuple;").child("id")

        assert pattern.type == "ArrayPattern"
        leaves = list(pattern_leaves(pattern))

        assert [leaf.attr("name") for leaf in leaves[:3]] == ["first", "second", "third"]
        assert (leaves[3].type, leaves[3].text) == ("RestElement", "...others")


class TestStatements:
    def test_for_of_head(self) -> None:
        statement = _statement("for (const v of items) {}")

        assert statement.type == "ForOfStatement"
        declaration = statement.child("left")
        assert (declaration.type, declaration.attr("kind")) == ("VariableDeclaration", "const")
        declarator = declaration.children("declarations")[0]
        assert declarator.child("id").attr("name") == "v"
        assert declarator.child("init") is None
        assert statement.child("right").attr("name") == "items"

    def test_for_in_head(self) -> None:
        assert _statement("for (const k in obj) {}").type == "ForInStatement"

    def test_for_of_without_declaration(self) -> None:
        statement = _statement("for (v of items) {}")

        assert statement.child("left").type == "Identifier"

    def test_call_arguments(self) -> None:
        call = _statement("f(a, b);").child("expression")

        assert call.type == "CallExpression"
        assert call.child("callee").attr("name") == "f"
        assert [arg.attr("name") for arg in call.children("arguments")] == ["a", "b"]

    @pytest.mark.parametrize(
        ("source", "node_type"),
        [
            ("if (flag) {}", "IfStatement"),
            ("while (flag) {}", "WhileStatement"),
            ("do {} while (flag);", "DoWhileStatement"),
        ],
    )
    def test_boolean_tests_unwrap_parentheses(self, source: str, node_type: str) -> None:
        statement = _statement(source)

        assert statement.type == node_type
        assert statement.child("test").attr("name") == "flag"

    def test_ternary(self) -> None:
        ternary = _statement("flag ? 1 : 2;").child("expression")

        assert ternary.type == "ConditionalExpression"
        assert ternary.child("test").attr("name") == "flag"

    def test_switch(self) -> None:
        statement = _statement("switch (x) { case 1: break; default: break; }")

        assert statement.type == "SwitchStatement"
        assert statement.child("discriminant").attr("name") == "x"
        cases = statement.children("cases")
        assert [case.type for case in cases] == ["SwitchCase", "SwitchCase"]
        assert cases[0].child("test").attr("raw") == "1"
        assert cases[1].child("test") is None

    def test_return_and_arrow_bodies(self) -> None:
        expression_arrow = _declarator("const pick = (o) => o.value;").child("init")
        block_arrow = _declarator("const run = () => { return 1; };").child("init")

        assert expression_arrow.type == "ArrowFunctionExpression"
        assert expression_arrow.attr("expression") is True
        assert block_arrow.attr("expression") is False
        statement = block_arrow.child("body").children("body")[0]
        assert statement.type == "ReturnStatement"
        assert statement.child("argument").attr("raw") == "1"

    def test_assignment_and_update(self) -> None:
        assignment = _statement("x += y; z++;", 0).child("expression")
        update = _statement("x += y; z++;", 1).child("expression")

        assert (assignment.type, assignment.attr("operator")) == ("AssignmentExpression", "+=")
        assert (update.type, update.attr("operator"), update.attr("prefix")) == ("UpdateExpression", "++", False)

    def test_plain_assignment_operator(self) -> None:
        assert _statement("x = y;").child("expression").attr("operator") == "="

    def test_comments_are_skipped(self) -> None:
        body = parse_source(b"// leading\nlet x; /* trailing */").children("body")

        assert [node.type for node in body] == ["VariableDeclaration"]


class TestParseSource:
    def test_builder_over_existing_parser(self, typescript_parser: Parser) -> None:
        source = b"let x;"

        root = EstreeBuilder(source).convert(typescript_parser.parse(source).root_node)

        assert root.type == "Program"
        assert root.text == "let x;"

    def test_tsx(self) -> None:
        root = parse_source(b"const el = <div />;", "tsx")

        assert root.type == "Program"

    def test_unsupported_language(self) -> None:
        with pytest.raises(UnsupportedLanguageError):
            parse_source(b"x = 1", "python")

    def test_syntax_errors_are_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="no_unsafe_any.core.estree"):
            parse_source(b"let = ;")

        assert "syntax errors" in caplog.text


class TestHeritage:
    @staticmethod
    def _types(source: str) -> dict[str, list[SyntaxNode]]:
        found: dict[str, list[SyntaxNode]] = {}
        for path in walk(parse_source(source.encode("utf-8"))):
            found.setdefault(path.node.type, []).append(path.node)
        return found

    def test_class_implements(self) -> None:
        found = self._types("class C implements Base {}")

        assert "TSTypeReference" not in found
        [heritage] = found["TSClassImplements"]
        assert heritage.child("expression").attr("name") == "Base"

    def test_interface_extends_keeps_type_arguments(self) -> None:
        found = self._types("interface I extends Base<Payload> {}")

        [heritage] = found["TSInterfaceHeritage"]
        assert heritage.child("expression").attr("name") == "Base"
        assert [ref.text for ref in found["TSTypeReference"]] == ["Payload"]
