"""Detection policies for values typed as ``any`` flowing into typed code.

Every policy is a plain function of ``(path, context)``. The oracle, options and
reporter travel in :class:`RuleContext`; nothing is looked up globally.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from no_unsafe_any.config import RuleOptions
from no_unsafe_any.core.dispatch import DispatchTable, Handler
from no_unsafe_any.core.oracle import TypeOracle
from no_unsafe_any.core.reporter import DiagnosticReporter
from no_unsafe_any.core.traversal import NodePath
from no_unsafe_any.errors import MalformedTreeError
from no_unsafe_any.messages import MessageId
from no_unsafe_any.models import SyntaxNode

MUTABLE_DECLARATION_KINDS = frozenset({"let", "var"})
LOOP_HEAD_TYPES = frozenset({"ForOfStatement", "ForInStatement"})

BOOLEAN_TEST_LABELS = {
    "IfStatement": "if",
    "WhileStatement": "while",
    "DoWhileStatement": "do while",
    "ConditionalExpression": "ternary",
}


@dataclass(frozen=True)
class RuleContext:
    oracle: TypeOracle
    options: RuleOptions
    reporter: DiagnosticReporter

    def report(self, node: SyntaxNode, message_id: MessageId, data: dict[str, str] | None = None) -> None:
        self.reporter.report(node, message_id, data)


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------


def require_child(node: SyntaxNode, name: str) -> SyntaxNode:
    value = node.slots.get(name)
    if not isinstance(value, SyntaxNode):
        raise MalformedTreeError(node.type, f"expected a node in '{name}', found {type(value).__name__}")
    return value


def declaration_kind(declaration: SyntaxNode) -> str:
    kind = declaration.attr("kind")
    if not kind:
        raise MalformedTreeError(declaration.type, "missing declaration kind")
    return str(kind)


def has_annotation(binding: SyntaxNode) -> bool:
    return binding.has("typeAnnotation")


def is_null_literal(node: SyntaxNode) -> bool:
    return node.type == "Literal" and node.attr("value") is None and node.attr("raw") == "null"


def is_undefined_identifier(node: SyntaxNode) -> bool:
    return node.type == "Identifier" and node.attr("name") == "undefined"


def _type_reference_name(node: SyntaxNode) -> str:
    if node.text.strip():
        return node.text.strip()
    type_name = node.child("typeName")
    if type_name is not None:
        name = type_name.attr("name") or type_name.text.strip()
        if name:
            return str(name)
    raise MalformedTreeError(node.type, "type reference has no renderable name")


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------


def _is_declarator(path: NodePath) -> bool:
    return path.is_child_of("VariableDeclaration", "declarations")


def _is_loop_head_declarator(path: NodePath) -> bool:
    declaration = path.parent
    return (
        _is_declarator(path)
        and declaration is not None
        and declaration.field == "left"
        and declaration.parent is not None
        and declaration.parent.node.type in LOOP_HEAD_TYPES
    )


def _is_mutable_declarator(path: NodePath) -> bool:
    if not _is_declarator(path):
        return False
    assert path.parent is not None
    return path.parent.node.attr("kind") in MUTABLE_DECLARATION_KINDS


def _is_uninitialised_mutable_declarator(path: NodePath) -> bool:
    return _is_mutable_declarator(path) and not path.node.has("init")


def _is_initialised_mutable_declarator(path: NodePath) -> bool:
    return _is_mutable_declarator(path) and path.node.has("init")


def _is_initialised_declarator_id(path: NodePath) -> bool:
    declarator = path.parent
    return (
        path.field == "id"
        and declarator is not None
        and declarator.node.type == "VariableDeclarator"
        and declarator.node.has("init")
        and _is_declarator(declarator)
    )


def _is_empty_array_initialiser(path: NodePath) -> bool:
    declarator = path.parent
    return (
        path.field == "init"
        and declarator is not None
        and declarator.node.type == "VariableDeclarator"
        and _is_declarator(declarator)
        and len(path.node.children("elements")) == 0
    )


def _is_for_of_declarator(path: NodePath) -> bool:
    return _is_loop_head_declarator(path) and path.parent is not None and path.parent.is_child_of("ForOfStatement")


def _has_argument(path: NodePath) -> bool:
    return path.node.has("argument")


def _is_expression_body(path: NodePath) -> bool:
    return path.is_child_of("ArrowFunctionExpression", "body") and path.node.type != "BlockStatement"


def _has_arguments(path: NodePath) -> bool:
    return len(path.node.children("arguments")) > 0


def _has_test(path: NodePath) -> bool:
    return path.node.has("test")


# ---------------------------------------------------------------------------
# Policies
# ---------------------------------------------------------------------------


def check_type_reference(path: NodePath, ctx: RuleContext) -> None:
    node = path.node
    if not ctx.oracle.is_dynamic(node):
        return
    ctx.report(node, MessageId.TYPE_REFERENCE_RESOLVES_TO_ANY, {"typeName": _type_reference_name(node)})


def check_uninitialised_binding(path: NodePath, ctx: RuleContext) -> None:
    declarator = path.node
    if has_annotation(require_child(declarator, "id")):
        return
    assert path.parent is not None
    kind = declaration_kind(path.parent.node)
    ctx.report(declarator, MessageId.LET_VARIABLE_WITH_NO_INITIAL_AND_NO_ANNOTATION, {"kind": kind})


def check_nullish_initialised_binding(path: NodePath, ctx: RuleContext) -> None:
    declarator = path.node
    if has_annotation(require_child(declarator, "id")):
        return
    init = require_child(declarator, "init")
    if not (is_null_literal(init) or is_undefined_identifier(init)):
        return
    assert path.parent is not None
    kind = declaration_kind(path.parent.node)
    ctx.report(declarator, MessageId.LET_VARIABLE_INITIALISED_TO_NULLISH_AND_NO_ANNOTATION, {"kind": kind})


def report_dynamic_declaration(declarator: SyntaxNode, ctx: RuleContext) -> None:
    """Report a declarator whose whole initialiser is ``any`` or ``any[]``."""
    annotation = require_child(declarator, "id").child("typeAnnotation")
    if annotation is None:
        ctx.report(declarator, MessageId.VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITHOUT_ANNOTATION)
        return

    if ctx.options.allow_annotation_on_dynamic_init:
        return

    annotated_type = annotation.child("typeAnnotation")
    if annotated_type is not None and annotated_type.type == "TSUnknownKeyword":
        # unknown forces narrowing before use
        return

    ctx.report(declarator, MessageId.VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITH_ANNOTATION)


def check_declaration_initialiser(path: NodePath, ctx: RuleContext) -> None:
    assert path.parent is not None
    declarator = path.parent.node
    if ctx.oracle.is_dynamic_or_dynamic_array(require_child(declarator, "init")):
        report_dynamic_declaration(declarator, ctx)


def check_empty_array_initialiser(path: NodePath, ctx: RuleContext) -> None:
    # `[]` is inferred as never[] yet the binding widens to any[] once written to.
    # An annotation is the only fix, so an annotated binding is never reported here.
    assert path.parent is not None
    declarator = path.parent.node
    if has_annotation(require_child(declarator, "id")):
        return
    ctx.report(declarator, MessageId.VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITHOUT_ANNOTATION)


def pattern_leaves(pattern: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield the leaf bindings of a destructuring pattern in source order.

    A rest element is a leaf of its own: its type is that of the collected remainder.
    """
    if pattern.type == "ObjectPattern":
        for prop in pattern.children("properties"):
            if prop is not None:
                yield from pattern_leaves(prop.child("value") or prop)
    elif pattern.type == "ArrayPattern":
        for element in pattern.children("elements"):
            if element is not None:
                yield from pattern_leaves(element)
    elif pattern.type == "AssignmentPattern":
        yield from pattern_leaves(require_child(pattern, "left"))
    else:
        yield pattern


def check_destructuring_pattern(path: NodePath, ctx: RuleContext) -> None:
    assert path.parent is not None
    declarator = path.parent.node
    if ctx.oracle.is_dynamic_or_dynamic_array(require_child(declarator, "init")):
        # one report for the whole declaration, never per leaf as well
        report_dynamic_declaration(declarator, ctx)
        return

    for leaf in pattern_leaves(path.node):
        if ctx.oracle.is_dynamic_or_dynamic_array(leaf):
            ctx.report(leaf, MessageId.PATTERN_VARIABLE_DECLARATION_INITIALISED_TO_ANY)


def check_loop_variable(path: NodePath, ctx: RuleContext) -> None:
    if ctx.oracle.is_dynamic_or_dynamic_array(path.node):
        ctx.report(path.node, MessageId.LOOP_VARIABLE_INITIALISED_TO_ANY)


def check_return_statement(path: NodePath, ctx: RuleContext) -> None:
    argument = require_child(path.node, "argument")
    if ctx.oracle.is_dynamic_or_dynamic_array(argument):
        ctx.report(path.node, MessageId.RETURN_ANY)


def check_expression_body(path: NodePath, ctx: RuleContext) -> None:
    if ctx.oracle.is_dynamic_or_dynamic_array(path.node):
        ctx.report(path.node, MessageId.RETURN_ANY)


def check_call_arguments(path: NodePath, ctx: RuleContext) -> None:
    for argument in path.node.children("arguments"):
        if argument is None:
            raise MalformedTreeError(path.node.type, "argument list contains a hole")
        if ctx.oracle.is_dynamic_or_dynamic_array(argument):
            ctx.report(argument, MessageId.PASSED_ARGUMENT_IS_ANY)


def check_assignment_value(path: NodePath, ctx: RuleContext) -> None:
    if ctx.oracle.is_dynamic_or_dynamic_array(require_child(path.node, "right")):
        ctx.report(path.node, MessageId.ASSIGNMENT_VALUE_IS_ANY)


def check_update_expression(path: NodePath, ctx: RuleContext) -> None:
    # scalar check only: ++/-- never apply to arrays
    if ctx.oracle.is_dynamic(require_child(path.node, "argument")):
        ctx.report(path.node, MessageId.UPDATE_EXPRESSION_IS_ANY)


def check_boolean_test(path: NodePath, ctx: RuleContext) -> None:
    test = require_child(path.node, "test")
    if ctx.oracle.is_dynamic_or_dynamic_array(test):
        ctx.report(test, MessageId.BOOLEAN_TEST_IS_ANY, {"kind": BOOLEAN_TEST_LABELS[path.node.type]})


def check_switch_discriminant(path: NodePath, ctx: RuleContext) -> None:
    discriminant = require_child(path.node, "discriminant")
    if ctx.oracle.is_dynamic_or_dynamic_array(discriminant):
        ctx.report(discriminant, MessageId.SWITCH_DISCRIMINANT_IS_ANY)


def check_switch_case_test(path: NodePath, ctx: RuleContext) -> None:
    if ctx.oracle.is_dynamic_or_dynamic_array(require_child(path.node, "test")):
        ctx.report(path.node, MessageId.SWITCH_CASE_TEST_IS_ANY)


DEFAULT_HANDLERS: tuple[Handler, ...] = (
    Handler("type-reference", frozenset({"TSTypeReference"}), check_type_reference),
    Handler(
        "uninitialised-binding",
        frozenset({"VariableDeclarator"}),
        check_uninitialised_binding,
        _is_uninitialised_mutable_declarator,
    ),
    Handler(
        "nullish-initialised-binding",
        frozenset({"VariableDeclarator"}),
        check_nullish_initialised_binding,
        _is_initialised_mutable_declarator,
    ),
    Handler(
        "declaration-initialiser",
        frozenset({"Identifier"}),
        check_declaration_initialiser,
        _is_initialised_declarator_id,
    ),
    Handler(
        "empty-array-initialiser",
        frozenset({"ArrayExpression"}),
        check_empty_array_initialiser,
        _is_empty_array_initialiser,
    ),
    Handler(
        "destructuring-pattern",
        frozenset({"ObjectPattern", "ArrayPattern"}),
        check_destructuring_pattern,
        _is_initialised_declarator_id,
    ),
    Handler("loop-variable", frozenset({"VariableDeclarator"}), check_loop_variable, _is_for_of_declarator),
    Handler("return-statement", frozenset({"ReturnStatement"}), check_return_statement, _has_argument),
    Handler("expression-body", None, check_expression_body, _is_expression_body),
    Handler("call-arguments", frozenset({"CallExpression"}), check_call_arguments, _has_arguments),
    Handler("assignment-value", frozenset({"AssignmentExpression"}), check_assignment_value),
    Handler("update-expression", frozenset({"UpdateExpression"}), check_update_expression),
    Handler("boolean-test", frozenset(BOOLEAN_TEST_LABELS), check_boolean_test),
    Handler("switch-discriminant", frozenset({"SwitchStatement"}), check_switch_discriminant),
    Handler("switch-case-test", frozenset({"SwitchCase"}), check_switch_case_test, _has_test),
)


def build_dispatch_table() -> DispatchTable:
    return DispatchTable(DEFAULT_HANDLERS)
