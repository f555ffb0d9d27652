from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from no_unsafe_any.config import RuleOptions, load_options
from no_unsafe_any.core.engine import check_tree
from no_unsafe_any.core.estree import parse_source
from no_unsafe_any.core.languages import resolve_language
from no_unsafe_any.core.ports.types import TypeResolver
from no_unsafe_any.core.type_table import TypeTable, load_type_table
from no_unsafe_any.models import Diagnostic


class LintResult(BaseModel):
    path: str | None = None
    language: str
    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def lint_source(
    source: str | bytes,
    resolver: TypeResolver | None = None,
    language: str = "typescript",
    options: RuleOptions | Mapping[str, Any] | None = None,
) -> LintResult:
    """Parse a TypeScript snippet and run the rule over it.

    Without a resolver every position is treated as concrete, so only the purely
    syntactic policies (uninitialised bindings, empty arrays) can fire.
    """
    rule_options = load_options(options)
    source_bytes = source.encode("utf-8") if isinstance(source, str) else source
    root = parse_source(source_bytes, language)
    diagnostics = check_tree(root, resolver if resolver is not None else TypeTable(), rule_options)
    return LintResult(language=language, diagnostics=diagnostics)


def lint_file(
    path: str | Path,
    types_path: str | Path | None = None,
    language: str | None = None,
    options: RuleOptions | Mapping[str, Any] | None = None,
) -> LintResult:
    file_path = Path(path)
    resolved_language = resolve_language(language, file_path)
    rule_options = load_options(options)
    resolver = load_type_table(types_path) if types_path is not None else TypeTable()

    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    result = lint_source(source_bytes, resolver, resolved_language, rule_options)
    return result.model_copy(update={"path": str(file_path)})
