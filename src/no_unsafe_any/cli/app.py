import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from no_unsafe_any.cli.check import check
from no_unsafe_any.cli.messages import messages

app = typer.Typer(
    name="no-unsafe-any",
    help="no-unsafe-any: report values typed as `any` flowing into typed TypeScript code.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("check")(check)
app.command("messages")(messages)


def main() -> None:
    app()
