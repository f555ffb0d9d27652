"""Convert tree-sitter TypeScript parse trees into ESTree-shaped :class:`SyntaxNode` trees.

Only the constructs the policies inspect get a dedicated ESTree shape. Every other
named node keeps its tree-sitter type and exposes its named children under the
``children`` slot, so the traversal still reaches nested constructs.
"""

import logging
from collections.abc import Callable
from typing import cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from no_unsafe_any.core.languages import normalize_language
from no_unsafe_any.models import Position, SyntaxNode

logger = logging.getLogger(__name__)

_IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "property_identifier",
        "private_property_identifier",
        "statement_identifier",
    }
)

_HERITAGE_TYPES = {
    "implements_clause": "TSClassImplements",
    "extends_type_clause": "TSInterfaceHeritage",
}

_KEYWORD_TYPES = {
    "unknown": "TSUnknownKeyword",
    "any": "TSAnyKeyword",
    "never": "TSNeverKeyword",
    "bigint": "TSBigIntKeyword",
}

Slots = dict[str, SyntaxNode | list[SyntaxNode | None] | None]


def _number_value(raw: str) -> int | float | None:
    cleaned = raw.replace("_", "")
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    try:
        return float(cleaned)
    except ValueError:
        return None


class EstreeBuilder:
    def __init__(self, source: bytes) -> None:
        self._source = source
        self._converters: dict[str, Callable[[Node], SyntaxNode]] = {
            "program": self._program,
            "lexical_declaration": self._lexical_declaration,
            "variable_declaration": self._variable_declaration,
            "variable_declarator": self._variable_declarator,
            "identifier": self._identifier,
            "undefined": self._identifier,
            "this": lambda ts: self._node(ts, "ThisExpression"),
            "null": lambda ts: self._node(ts, "Literal", raw="null", value=None),
            "true": lambda ts: self._node(ts, "Literal", raw="true", value=True),
            "false": lambda ts: self._node(ts, "Literal", raw="false", value=False),
            "number": self._number,
            "string": self._string,
            "object_pattern": self._object_pattern,
            "array_pattern": self._array_pattern,
            "assignment_pattern": self._assignment_pattern,
            "rest_pattern": self._rest_element,
            "spread_element": self._spread_element,
            "type_annotation": self._type_annotation,
            "predefined_type": self._predefined_type,
            "type_identifier": self._type_identifier,
            "nested_type_identifier": self._type_identifier,
            "generic_type": self._generic_type,
            "for_in_statement": self._for_in_statement,
            "return_statement": self._return_statement,
            "arrow_function": self._arrow_function,
            "statement_block": self._block,
            "expression_statement": self._expression_statement,
            "parenthesized_expression": self._parenthesized,
            "call_expression": self._call_expression,
            "new_expression": self._new_expression,
            "assignment_expression": self._assignment_expression,
            "augmented_assignment_expression": self._assignment_expression,
            "update_expression": self._update_expression,
            "if_statement": self._if_statement,
            "while_statement": self._while_statement,
            "do_statement": self._do_statement,
            "ternary_expression": self._ternary_expression,
            "switch_statement": self._switch_statement,
            "switch_case": self._switch_case,
            "switch_default": self._switch_case,
            "array": self._array,
            "implements_clause": self._heritage_clause,
            "extends_type_clause": self._heritage_clause,
        }
        for identifier_type in _IDENTIFIER_TYPES:
            self._converters[identifier_type] = self._identifier

    # -- node construction -------------------------------------------------

    def _text(self, ts: Node) -> str:
        return self._source[ts.start_byte : ts.end_byte].decode("utf-8", errors="replace")

    def _spanning(
        self, first: Node, last: Node, node_type: str, slots: Slots | None = None, **attributes: object
    ) -> SyntaxNode:
        return SyntaxNode(
            type=node_type,
            start_byte=first.start_byte,
            end_byte=last.end_byte,
            start_point=Position(row=first.start_point[0], column=first.start_point[1]),
            end_point=Position(row=last.end_point[0], column=last.end_point[1]),
            text=self._source[first.start_byte : last.end_byte].decode("utf-8", errors="replace"),
            slots=slots or {},
            attributes=attributes,
        )

    def _node(self, ts: Node, node_type: str, slots: Slots | None = None, **attributes: object) -> SyntaxNode:
        return self._spanning(ts, ts, node_type, slots, **attributes)

    @staticmethod
    def _named(ts: Node) -> list[Node]:
        return [child for child in ts.named_children if child.type != "comment"]

    def _field(self, ts: Node, name: str) -> SyntaxNode | None:
        child = ts.child_by_field_name(name)
        return self.convert(child) if child is not None else None

    def _optional(self, ts: Node | None) -> SyntaxNode | None:
        return self.convert(ts) if ts is not None else None

    def _convert_all(self, nodes: list[Node]) -> list[SyntaxNode | None]:
        return [self.convert(child) for child in nodes]

    def convert(self, ts: Node) -> SyntaxNode:
        converter = self._converters.get(ts.type)
        if converter is None:
            return self._generic(ts)
        return converter(ts)

    def _generic(self, ts: Node) -> SyntaxNode:
        children: list[SyntaxNode | None] = []
        for index, child in enumerate(ts.children):
            if not child.is_named or child.type == "comment":
                continue
            if child.type == "type_identifier" and ts.field_name_for_child(index) == "name":
                # declared type names (type aliases, interfaces, classes) are not references
                children.append(self._node(child, "Identifier", name=self._text(child)))
            else:
                children.append(self.convert(child))
        return self._node(ts, ts.type, {"children": children})

    # -- declarations ------------------------------------------------------

    def _program(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "Program", {"body": self._convert_all(self._named(ts))})

    def _declarators(self, ts: Node) -> list[SyntaxNode | None]:
        return self._convert_all([child for child in self._named(ts) if child.type == "variable_declarator"])

    def _lexical_declaration(self, ts: Node) -> SyntaxNode:
        kind_node = ts.child_by_field_name("kind")
        if kind_node is None:
            kind_node = ts.children[0]
        declarations = self._declarators(ts)
        return self._node(ts, "VariableDeclaration", {"declarations": declarations}, kind=self._text(kind_node))

    def _variable_declaration(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "VariableDeclaration", {"declarations": self._declarators(ts)}, kind="var")

    def _binding(self, name: Node, annotation: Node | None) -> SyntaxNode:
        binding = self.convert(name)
        if annotation is None:
            return binding
        return binding.model_copy(update={"slots": {**binding.slots, "typeAnnotation": self.convert(annotation)}})

    def _variable_declarator(self, ts: Node) -> SyntaxNode:
        name = ts.child_by_field_name("name")
        if name is None:
            return self._generic(ts)
        binding = self._binding(name, ts.child_by_field_name("type"))
        return self._node(ts, "VariableDeclarator", {"id": binding, "init": self._field(ts, "value")})

    # -- leaves ------------------------------------------------------------

    def _identifier(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "Identifier", name=self._text(ts))

    def _number(self, ts: Node) -> SyntaxNode:
        raw = self._text(ts)
        return self._node(ts, "Literal", raw=raw, value=_number_value(raw))

    def _string(self, ts: Node) -> SyntaxNode:
        raw = self._text(ts)
        return self._node(ts, "Literal", raw=raw, value=raw[1:-1])

    # -- patterns ----------------------------------------------------------

    def _object_pattern(self, ts: Node) -> SyntaxNode:
        properties: list[SyntaxNode | None] = []
        for child in self._named(ts):
            if child.type == "shorthand_property_identifier_pattern":
                identifier = self._identifier(child)
                slots: Slots = {"key": identifier, "value": identifier}
                properties.append(self._node(child, "Property", slots, shorthand=True))
            elif child.type == "pair_pattern":
                pair: Slots = {"key": self._field(child, "key"), "value": self._field(child, "value")}
                properties.append(self._node(child, "Property", pair))
            elif child.type == "object_assignment_pattern":
                left = child.child_by_field_name("left")
                key = self.convert(left) if left is not None else None
                default = self._node(child, "AssignmentPattern", {"left": key, "right": self._field(child, "right")})
                properties.append(self._node(child, "Property", {"key": key, "value": default}, shorthand=True))
            else:
                properties.append(self.convert(child))
        return self._node(ts, "ObjectPattern", {"properties": properties})

    def _array_pattern(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "ArrayPattern", {"elements": self._convert_all(self._named(ts))})

    def _assignment_pattern(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "AssignmentPattern", {"left": self._field(ts, "left"), "right": self._field(ts, "right")})

    def _first_named(self, ts: Node) -> SyntaxNode | None:
        named = self._named(ts)
        return self.convert(named[0]) if named else None

    def _rest_element(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "RestElement", {"argument": self._first_named(ts)})

    def _spread_element(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "SpreadElement", {"argument": self._first_named(ts)})

    # -- types -------------------------------------------------------------

    def _type_annotation(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "TSTypeAnnotation", {"typeAnnotation": self._first_named(ts)})

    def _predefined_type(self, ts: Node) -> SyntaxNode:
        keyword = self._text(ts).strip()
        return self._node(ts, _KEYWORD_TYPES.get(keyword, f"TS{keyword.capitalize()}Keyword"))

    def _type_identifier(self, ts: Node) -> SyntaxNode:
        name = self._node(ts, "Identifier", name=self._text(ts))
        return self._node(ts, "TSTypeReference", {"typeName": name})

    def _generic_type(self, ts: Node) -> SyntaxNode:
        name_ts = ts.child_by_field_name("name")
        if name_ts is None:
            name_ts = ts.named_children[0]
        name = self._node(name_ts, "Identifier", name=self._text(name_ts))
        arguments_ts = ts.child_by_field_name("type_arguments")
        arguments = None
        if arguments_ts is not None:
            arguments = self._node(
                arguments_ts, "TSTypeParameterInstantiation", {"params": self._convert_all(self._named(arguments_ts))}
            )
        return self._node(ts, "TSTypeReference", {"typeName": name, "typeArguments": arguments})

    def _heritage_clause(self, ts: Node) -> SyntaxNode:
        # `implements Base` and interface `extends Base` name heritage, not type references
        heritage_type = _HERITAGE_TYPES[ts.type]
        heritage = [self._heritage(child, heritage_type) for child in self._named(ts)]
        return self._node(ts, ts.type, {"children": heritage})

    def _heritage(self, ts: Node, heritage_type: str) -> SyntaxNode:
        if ts.type == "generic_type":
            reference = self._generic_type(ts)
            return self._node(
                ts,
                heritage_type,
                {"expression": reference.child("typeName"), "typeArguments": reference.child("typeArguments")},
            )
        if ts.type in ("type_identifier", "nested_type_identifier", "identifier"):
            expression = self._node(ts, "Identifier", name=self._text(ts))
            return self._node(ts, heritage_type, {"expression": expression})
        return self.convert(ts)

    # -- statements --------------------------------------------------------

    def _for_in_statement(self, ts: Node) -> SyntaxNode:
        node_type = "ForOfStatement" if any(child.type == "of" for child in ts.children) else "ForInStatement"
        left_ts = ts.child_by_field_name("left")
        kind_ts = ts.child_by_field_name("kind")
        left: SyntaxNode | None = None
        if left_ts is not None and kind_ts is not None:
            declarator = self._node(left_ts, "VariableDeclarator", {"id": self.convert(left_ts), "init": None})
            left = self._spanning(
                kind_ts, left_ts, "VariableDeclaration", {"declarations": [declarator]}, kind=self._text(kind_ts)
            )
        elif left_ts is not None:
            left = self.convert(left_ts)
        return self._node(
            ts, node_type, {"left": left, "right": self._field(ts, "right"), "body": self._field(ts, "body")}
        )

    def _return_statement(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "ReturnStatement", {"argument": self._first_named(ts)})

    def _arrow_function(self, ts: Node) -> SyntaxNode:
        params_ts = ts.child_by_field_name("parameters")
        if params_ts is not None:
            params = self._convert_all(self._named(params_ts))
        else:
            single = ts.child_by_field_name("parameter")
            params = [self.convert(single)] if single is not None else []
        body_ts = ts.child_by_field_name("body")
        return self._node(
            ts,
            "ArrowFunctionExpression",
            {"params": params, "returnType": self._field(ts, "return_type"), "body": self._field(ts, "body")},
            expression=body_ts is not None and body_ts.type != "statement_block",
        )

    def _block(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "BlockStatement", {"body": self._convert_all(self._named(ts))})

    def _expression_statement(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "ExpressionStatement", {"expression": self._first_named(ts)})

    def _parenthesized(self, ts: Node) -> SyntaxNode:
        named = self._named(ts)
        if len(named) != 1:
            return self._generic(ts)
        return self.convert(named[0])

    def _if_statement(self, ts: Node) -> SyntaxNode:
        alternate = None
        else_ts = ts.child_by_field_name("alternative")
        if else_ts is not None:
            alternate = self._first_named(else_ts) if else_ts.type == "else_clause" else self.convert(else_ts)
        slots: Slots = {
            "test": self._optional(ts.child_by_field_name("condition")),
            "consequent": self._field(ts, "consequence"),
            "alternate": alternate,
        }
        return self._node(ts, "IfStatement", slots)

    def _while_statement(self, ts: Node) -> SyntaxNode:
        slots: Slots = {"test": self._optional(ts.child_by_field_name("condition")), "body": self._field(ts, "body")}
        return self._node(ts, "WhileStatement", slots)

    def _do_statement(self, ts: Node) -> SyntaxNode:
        slots: Slots = {"body": self._field(ts, "body"), "test": self._optional(ts.child_by_field_name("condition"))}
        return self._node(ts, "DoWhileStatement", slots)

    def _switch_statement(self, ts: Node) -> SyntaxNode:
        body_ts = ts.child_by_field_name("body")
        cases: list[SyntaxNode | None] = []
        if body_ts is not None:
            cases = self._convert_all([c for c in self._named(body_ts) if c.type in ("switch_case", "switch_default")])
        slots: Slots = {"discriminant": self._optional(ts.child_by_field_name("value")), "cases": cases}
        return self._node(ts, "SwitchStatement", slots)

    def _switch_case(self, ts: Node) -> SyntaxNode:
        named = self._named(ts)
        if ts.type == "switch_default":
            return self._node(ts, "SwitchCase", {"test": None, "consequent": self._convert_all(named)})
        test = self.convert(named[0]) if named else None
        return self._node(ts, "SwitchCase", {"test": test, "consequent": self._convert_all(named[1:])})

    # -- expressions -------------------------------------------------------

    def _call_expression(self, ts: Node) -> SyntaxNode:
        callee = self._field(ts, "function")
        arguments_ts = ts.child_by_field_name("arguments")
        if arguments_ts is not None and arguments_ts.type != "arguments":
            return self._node(ts, "TaggedTemplateExpression", {"tag": callee, "quasi": self.convert(arguments_ts)})
        arguments = self._convert_all(self._named(arguments_ts)) if arguments_ts is not None else []
        slots: Slots = {"callee": callee, "typeArguments": self._field(ts, "type_arguments"), "arguments": arguments}
        return self._node(ts, "CallExpression", slots)

    def _new_expression(self, ts: Node) -> SyntaxNode:
        arguments_ts = ts.child_by_field_name("arguments")
        arguments = self._convert_all(self._named(arguments_ts)) if arguments_ts is not None else []
        slots: Slots = {"callee": self._field(ts, "constructor"), "arguments": arguments}
        return self._node(ts, "NewExpression", slots)

    def _assignment_expression(self, ts: Node) -> SyntaxNode:
        operator_ts = ts.child_by_field_name("operator")
        operator = self._text(operator_ts) if operator_ts is not None else "="
        slots: Slots = {"left": self._field(ts, "left"), "right": self._field(ts, "right")}
        return self._node(ts, "AssignmentExpression", slots, operator=operator)

    def _update_expression(self, ts: Node) -> SyntaxNode:
        operator_ts = ts.child_by_field_name("operator")
        operator = self._text(operator_ts) if operator_ts is not None else ""
        prefix = bool(ts.children) and ts.children[0].type in ("++", "--")
        slots: Slots = {"argument": self._field(ts, "argument")}
        return self._node(ts, "UpdateExpression", slots, operator=operator, prefix=prefix)

    def _ternary_expression(self, ts: Node) -> SyntaxNode:
        slots: Slots = {
            "test": self._field(ts, "condition"),
            "consequent": self._field(ts, "consequence"),
            "alternate": self._field(ts, "alternative"),
        }
        return self._node(ts, "ConditionalExpression", slots)

    def _array(self, ts: Node) -> SyntaxNode:
        return self._node(ts, "ArrayExpression", {"elements": self._convert_all(self._named(ts))})


def parse_source(source: bytes, language: str = "typescript") -> SyntaxNode:
    """Parse TypeScript or TSX source into an ESTree-shaped tree."""
    resolved = normalize_language(language)
    parser = get_parser(cast(SupportedLanguage, resolved))
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning("Source contains syntax errors; results may be incomplete")
    return EstreeBuilder(source).convert(tree.root_node)
