from no_unsafe_any.config import RuleOptions, load_options
from no_unsafe_any.core.engine import check_tree
from no_unsafe_any.core.oracle import TypeCategory, TypeDescriptor, TypeFlag, TypeOracle, parse_type_text
from no_unsafe_any.errors import (
    InvalidOptionsError,
    MalformedTreeError,
    NoUnsafeAnyError,
    ReportContractError,
    TypeTableError,
    UnsupportedLanguageError,
)
from no_unsafe_any.messages import RULE_NAME, MessageId
from no_unsafe_any.models import Diagnostic, Position, SyntaxNode

__all__ = [
    "RULE_NAME",
    "Diagnostic",
    "InvalidOptionsError",
    "MalformedTreeError",
    "MessageId",
    "NoUnsafeAnyError",
    "Position",
    "ReportContractError",
    "RuleOptions",
    "SyntaxNode",
    "TypeCategory",
    "TypeDescriptor",
    "TypeFlag",
    "TypeOracle",
    "TypeTableError",
    "UnsupportedLanguageError",
    "check_tree",
    "load_options",
    "parse_type_text",
]
