import json
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from no_unsafe_any.config import load_options, merge_options, options_from_env
from no_unsafe_any.core.lint import LintResult, lint_file
from no_unsafe_any.errors import InvalidOptionsError, NoUnsafeAnyError

console = Console()
err_console = Console(stderr=True)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def _read_config(path: Path) -> dict[str, Any]:
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise InvalidOptionsError(f"Config file not found: {path}") from None
    except json.JSONDecodeError as exc:
        raise InvalidOptionsError(f"Config file {path} is not valid JSON: {exc.msg}") from exc
    if not isinstance(raw, dict):
        raise InvalidOptionsError(f"Config file {path} must contain a JSON object")
    return raw


def _render_text(result: LintResult) -> None:
    location = result.path or "<source>"
    for diagnostic in result.diagnostics:
        console.print(
            f"{escape(location)}:{diagnostic.line}:{diagnostic.column}  "
            f"[yellow]{diagnostic.message_id.value}[/yellow]  {escape(diagnostic.message)}",
            soft_wrap=True,
            highlight=False,
        )
    if result.ok:
        console.print("[green]No unsafe any usage found[/green]")
    else:
        console.print(f"[red]{len(result.diagnostics)} problem(s)[/red]")


def check(
    path: Annotated[Path, typer.Argument(help="TypeScript file to check.")],
    types: Annotated[
        Path | None, typer.Option("--types", help="JSON type table with the resolved type of each span.")
    ] = None,
    config: Annotated[Path | None, typer.Option("--config", help="JSON file with rule options.")] = None,
    allow_annotation_on_dynamic_init: Annotated[
        bool,
        typer.Option(
            "--allow-annotation-on-dynamic-init",
            help="Accept annotated declarations initialised to `any`.",
        ),
    ] = False,
    language: Annotated[str | None, typer.Option(help="Language override (ts, tsx).")] = None,
    output_format: Annotated[OutputFormat, typer.Option("--format", help="Output format.")] = OutputFormat.TEXT,
) -> None:
    """Check a TypeScript file for unsafe `any` flow."""
    try:
        layers = [options_from_env()]
        if config is not None:
            layers.append(_read_config(config))
        if allow_annotation_on_dynamic_init:
            layers.append({"allowAnnotationOnDynamicInit": True})
        options = load_options(merge_options(*layers))
        result = lint_file(path, types_path=types, language=language, options=options)
    except (NoUnsafeAnyError, FileNotFoundError) as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if output_format is OutputFormat.JSON:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _render_text(result)

    if not result.ok:
        raise typer.Exit(code=1)
