"""Tests for the syntax node and diagnostic models."""

from __future__ import annotations

import pytest

from no_unsafe_any.messages import MessageId
from no_unsafe_any.models import Diagnostic, Position, SyntaxNode, span_key
from no_unsafe_any.testing import NodeFactory


class TestSyntaxNode:
    def test_child_returns_single_node(self, nodes: NodeFactory) -> None:
        binding = nodes.ident("x")
        declarator = nodes.declarator(binding)

        assert declarator.child("id") == binding
        assert declarator.child("init") is None
        assert declarator.child("missing") is None

    def test_child_rejects_list_slot(self, nodes: NodeFactory) -> None:
        declaration = nodes.declaration("let", nodes.declarator(nodes.ident("x")))

        with pytest.raises(TypeError, match="declarations"):
            declaration.child("declarations")

    def test_children_normalises_slots(self, nodes: NodeFactory) -> None:
        callee = nodes.ident("f")
        call = nodes.call(callee, nodes.ident("a"), nodes.ident("b"))

        assert call.children("callee") == [callee]
        assert [arg.attr("name") for arg in call.children("arguments")] == ["a", "b"]
        assert call.children("typeArguments") == []

    def test_has_treats_none_as_absent(self, nodes: NodeFactory) -> None:
        declarator = nodes.declarator(nodes.ident("x"), None)

        assert declarator.has("id")
        assert not declarator.has("init")
        assert not declarator.has("missing")

    def test_attr_default(self, nodes: NodeFactory) -> None:
        declaration = nodes.declaration("var")

        assert declaration.attr("kind") == "var"
        assert declaration.attr("declare", False) is False

    def test_iter_children_in_source_order(self) -> None:
        late = SyntaxNode(type="Identifier", start_byte=10, end_byte=11)
        early = SyntaxNode(type="Identifier", start_byte=2, end_byte=3)
        parent = SyntaxNode(type="Parent", start_byte=0, end_byte=12, slots={"right": late, "left": [None, early]})

        assert [(name, child.start_byte) for name, child in parent.iter_children()] == [("left", 2), ("right", 10)]

    def test_nodes_are_frozen(self, nodes: NodeFactory) -> None:
        binding = nodes.ident("x")

        with pytest.raises(ValueError):
            binding.type = "Literal"  # type: ignore[misc]

    def test_span_key(self) -> None:
        assert span_key(SyntaxNode(type="Identifier", start_byte=4, end_byte=9)) == "4:9"


class TestDiagnostic:
    def test_line_and_column_are_one_based(self, nodes: NodeFactory) -> None:
        anchor = nodes.ident("x")
        diagnostic = Diagnostic(
            message_id=MessageId.RETURN_ANY,
            message="The type of the return is `any`.",
            node_type="Identifier",
            start_byte=0,
            end_byte=1,
            start_point=Position(row=2, column=4),
            end_point=Position(row=2, column=5),
            anchor=anchor,
        )

        assert diagnostic.line == 3
        assert diagnostic.column == 5

    def test_anchor_not_serialised(self, nodes: NodeFactory) -> None:
        diagnostic = Diagnostic(
            message_id=MessageId.RETURN_ANY,
            message="The type of the return is `any`.",
            node_type="Identifier",
            start_byte=0,
            end_byte=1,
            start_point=Position(row=0, column=0),
            end_point=Position(row=0, column=1),
            anchor=nodes.ident("x"),
        )

        dumped = diagnostic.model_dump(mode="json")

        assert "anchor" not in dumped
        assert dumped["message_id"] == "returnAny"
