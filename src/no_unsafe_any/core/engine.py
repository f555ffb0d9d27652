import logging
from collections.abc import Mapping
from typing import Any

from no_unsafe_any.config import RuleOptions, load_options
from no_unsafe_any.core.oracle import TypeOracle
from no_unsafe_any.core.policies import RuleContext, build_dispatch_table
from no_unsafe_any.core.ports.types import TypeResolver
from no_unsafe_any.core.reporter import DiagnosticReporter
from no_unsafe_any.models import Diagnostic, SyntaxNode

logger = logging.getLogger(__name__)


def check_tree(
    root: SyntaxNode,
    resolver: TypeResolver,
    options: RuleOptions | Mapping[str, Any] | None = None,
) -> list[Diagnostic]:
    """Run every detection policy over ``root`` and return diagnostics in emission order.

    Options are validated before the traversal starts. Errors raised by a policy abort
    the whole call, so a result is never partial.
    """
    rule_options = load_options(options)
    reporter = DiagnosticReporter()
    context = RuleContext(oracle=TypeOracle(resolver), options=rule_options, reporter=reporter)

    visited = build_dispatch_table().run(root, context)
    logger.debug("Visited %d nodes, emitted %d diagnostic(s)", visited, len(reporter))
    return reporter.diagnostics
