"""Helpers for exercising the rule without a parser or a real type checker.

``NodeFactory`` builds ESTree-shaped trees where every node gets a unique span, and
``StaticTypeResolver`` answers type queries from an explicit span-keyed table.
"""

from __future__ import annotations

from no_unsafe_any.core.oracle import TypeDescriptor, parse_type_text
from no_unsafe_any.models import Position, SyntaxNode, span_key


class StaticTypeResolver:
    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self.queries = 0

    def mark(self, node: SyntaxNode, descriptor: TypeDescriptor | str) -> SyntaxNode:
        if isinstance(descriptor, str):
            descriptor = parse_type_text(descriptor)
        self._types[span_key(node)] = descriptor
        return node

    def mark_any(self, *nodes: SyntaxNode) -> None:
        for node in nodes:
            self.mark(node, TypeDescriptor.any())

    def mark_any_array(self, *nodes: SyntaxNode) -> None:
        for node in nodes:
            self.mark(node, TypeDescriptor.array_of(TypeDescriptor.any()))

    def resolve_type(self, node: SyntaxNode) -> TypeDescriptor | None:
        self.queries += 1
        return self._types.get(span_key(node))


class NodeFactory:
    """Builds nodes in creation order; siblings created earlier sort first."""

    def __init__(self) -> None:
        self._next = 0

    def node(self, node_type: str, slots: dict | None = None, text: str = "", **attributes: object) -> SyntaxNode:
        start = self._next
        self._next += 2
        return SyntaxNode(
            type=node_type,
            start_byte=start,
            end_byte=start + 1,
            start_point=Position(row=start, column=0),
            end_point=Position(row=start, column=1),
            text=text,
            slots=slots or {},
            attributes=attributes,
        )

    # -- bindings and types ------------------------------------------------

    def ident(self, name: str, annotation: SyntaxNode | None = None) -> SyntaxNode:
        slots = {"typeAnnotation": self.annotation(annotation)} if annotation is not None else {}
        return self.node("Identifier", slots, text=name, name=name)

    def annotation(self, type_node: SyntaxNode) -> SyntaxNode:
        return self.node("TSTypeAnnotation", {"typeAnnotation": type_node})

    def type_ref(self, name: str) -> SyntaxNode:
        type_name = self.node("Identifier", text=name, name=name)
        return self.node("TSTypeReference", {"typeName": type_name}, text=name)

    def keyword(self, keyword: str) -> SyntaxNode:
        return self.node(f"TS{keyword.capitalize()}Keyword", text=keyword)

    def object_pattern(self, *properties: SyntaxNode, annotation: SyntaxNode | None = None) -> SyntaxNode:
        slots: dict = {"properties": list(properties)}
        if annotation is not None:
            slots["typeAnnotation"] = self.annotation(annotation)
        return self.node("ObjectPattern", slots)

    def prop(self, value: SyntaxNode, key: str | None = None) -> SyntaxNode:
        key_node = self.node("Identifier", text=key, name=key) if key else value
        return self.node("Property", {"key": key_node, "value": value})

    def array_pattern(self, *elements: SyntaxNode | None) -> SyntaxNode:
        return self.node("ArrayPattern", {"elements": list(elements)})

    # -- expressions -------------------------------------------------------

    def null(self) -> SyntaxNode:
        return self.node("Literal", text="null", raw="null", value=None)

    def undefined(self) -> SyntaxNode:
        return self.ident("undefined")

    def literal(self, raw: str, value: object = None) -> SyntaxNode:
        return self.node("Literal", text=raw, raw=raw, value=value)

    def array(self, *elements: SyntaxNode | None) -> SyntaxNode:
        return self.node("ArrayExpression", {"elements": list(elements)})

    def call(self, callee: SyntaxNode, *arguments: SyntaxNode) -> SyntaxNode:
        return self.node("CallExpression", {"callee": callee, "arguments": list(arguments)})

    def assign(self, left: SyntaxNode, right: SyntaxNode, operator: str = "=") -> SyntaxNode:
        return self.node("AssignmentExpression", {"left": left, "right": right}, operator=operator)

    def update(self, argument: SyntaxNode, operator: str = "++") -> SyntaxNode:
        return self.node("UpdateExpression", {"argument": argument}, operator=operator, prefix=False)

    def ternary(self, test: SyntaxNode, consequent: SyntaxNode, alternate: SyntaxNode) -> SyntaxNode:
        return self.node("ConditionalExpression", {"test": test, "consequent": consequent, "alternate": alternate})

    def arrow(self, body: SyntaxNode) -> SyntaxNode:
        is_expression = body.type != "BlockStatement"
        return self.node("ArrowFunctionExpression", {"params": [], "body": body}, expression=is_expression)

    # -- statements --------------------------------------------------------

    def declarator(self, binding: SyntaxNode, init: SyntaxNode | None = None) -> SyntaxNode:
        return self.node("VariableDeclarator", {"id": binding, "init": init})

    def declaration(self, kind: str, *declarators: SyntaxNode) -> SyntaxNode:
        return self.node("VariableDeclaration", {"declarations": list(declarators)}, kind=kind)

    def program(self, *body: SyntaxNode) -> SyntaxNode:
        return self.node("Program", {"body": list(body)})

    def block(self, *body: SyntaxNode) -> SyntaxNode:
        return self.node("BlockStatement", {"body": list(body)})

    def expression(self, expression: SyntaxNode) -> SyntaxNode:
        return self.node("ExpressionStatement", {"expression": expression})

    def ret(self, argument: SyntaxNode | None = None) -> SyntaxNode:
        return self.node("ReturnStatement", {"argument": argument})

    def for_of(self, left: SyntaxNode, right: SyntaxNode, node_type: str = "ForOfStatement") -> SyntaxNode:
        return self.node(node_type, {"left": left, "right": right, "body": self.block()})

    def if_(self, test: SyntaxNode) -> SyntaxNode:
        return self.node("IfStatement", {"test": test, "consequent": self.block(), "alternate": None})

    def while_(self, test: SyntaxNode) -> SyntaxNode:
        return self.node("WhileStatement", {"test": test, "body": self.block()})

    def do_while(self, test: SyntaxNode) -> SyntaxNode:
        body = self.block()
        return self.node("DoWhileStatement", {"body": body, "test": test})

    def switch(self, discriminant: SyntaxNode, *cases: SyntaxNode) -> SyntaxNode:
        return self.node("SwitchStatement", {"discriminant": discriminant, "cases": list(cases)})

    def case(self, test: SyntaxNode | None = None) -> SyntaxNode:
        return self.node("SwitchCase", {"test": test, "consequent": []})
