"""Message identifiers, templates and required interpolation keys."""

from enum import Enum

RULE_NAME = "no-unsafe-any"
RULE_DESCRIPTION = "Detects usages of any which can cause type safety holes within your codebase"
RULE_CATEGORY = "Possible Errors"
RULE_TYPE = "problem"


class MessageId(str, Enum):
    TYPE_REFERENCE_RESOLVES_TO_ANY = "typeReferenceResolvesToAny"
    VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITH_ANNOTATION = "variableDeclarationInitialisedToAnyWithAnnotation"
    VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITHOUT_ANNOTATION = "variableDeclarationInitialisedToAnyWithoutAnnotation"
    PATTERN_VARIABLE_DECLARATION_INITIALISED_TO_ANY = "patternVariableDeclarationInitialisedToAny"
    LET_VARIABLE_INITIALISED_TO_NULLISH_AND_NO_ANNOTATION = "letVariableInitialisedToNullishAndNoAnnotation"
    LET_VARIABLE_WITH_NO_INITIAL_AND_NO_ANNOTATION = "letVariableWithNoInitialAndNoAnnotation"
    LOOP_VARIABLE_INITIALISED_TO_ANY = "loopVariableInitialisedToAny"
    RETURN_ANY = "returnAny"
    PASSED_ARGUMENT_IS_ANY = "passedArgumentIsAny"
    ASSIGNMENT_VALUE_IS_ANY = "assignmentValueIsAny"
    UPDATE_EXPRESSION_IS_ANY = "updateExpressionIsAny"
    BOOLEAN_TEST_IS_ANY = "booleanTestIsAny"
    SWITCH_DISCRIMINANT_IS_ANY = "switchDiscriminantIsAny"
    SWITCH_CASE_TEST_IS_ANY = "switchCaseTestIsAny"

    def __str__(self) -> str:
        return self.value


MESSAGES: dict[MessageId, str] = {
    MessageId.TYPE_REFERENCE_RESOLVES_TO_ANY: "Referenced type {typeName} resolves to `any`.",
    MessageId.VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITH_ANNOTATION: (
        "Variable declaration is initialised to `any` with an explicit type annotation, which is potentially "
        "unsafe. Prefer explicit type narrowing via type guards."
    ),
    MessageId.VARIABLE_DECLARATION_INITIALISED_TO_ANY_WITHOUT_ANNOTATION: (
        "Variable declaration is initialised to `any` without a type annotation."
    ),
    MessageId.PATTERN_VARIABLE_DECLARATION_INITIALISED_TO_ANY: "Variable declaration is initialised to `any`.",
    MessageId.LET_VARIABLE_INITIALISED_TO_NULLISH_AND_NO_ANNOTATION: (
        "Variable declared with {kind} and initialised to `null` or `undefined` is implicitly typed as `any`. "
        "Add an explicit type annotation."
    ),
    MessageId.LET_VARIABLE_WITH_NO_INITIAL_AND_NO_ANNOTATION: (
        "Variable declared with {kind} with no initial value is implicitly typed as `any`."
    ),
    MessageId.LOOP_VARIABLE_INITIALISED_TO_ANY: "Loop variable is typed as `any`.",
    MessageId.RETURN_ANY: "The type of the return is `any`.",
    MessageId.PASSED_ARGUMENT_IS_ANY: "The passed argument is `any`.",
    MessageId.ASSIGNMENT_VALUE_IS_ANY: "The value being assigned is `any`.",
    MessageId.UPDATE_EXPRESSION_IS_ANY: "The update expression variable is `any`.",
    MessageId.BOOLEAN_TEST_IS_ANY: "The {kind} test is `any`.",
    MessageId.SWITCH_DISCRIMINANT_IS_ANY: "The switch discriminant is `any`.",
    MessageId.SWITCH_CASE_TEST_IS_ANY: "The switch case test is `any`.",
}

REQUIRED_DATA: dict[MessageId, frozenset[str]] = {message_id: frozenset() for message_id in MessageId}
REQUIRED_DATA[MessageId.TYPE_REFERENCE_RESOLVES_TO_ANY] = frozenset({"typeName"})
REQUIRED_DATA[MessageId.LET_VARIABLE_INITIALISED_TO_NULLISH_AND_NO_ANNOTATION] = frozenset({"kind"})
REQUIRED_DATA[MessageId.LET_VARIABLE_WITH_NO_INITIAL_AND_NO_ANNOTATION] = frozenset({"kind"})
REQUIRED_DATA[MessageId.BOOLEAN_TEST_IS_ANY] = frozenset({"kind"})


def render_message(message_id: MessageId, data: dict[str, str]) -> str:
    return MESSAGES[message_id].format(**data)
