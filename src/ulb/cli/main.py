"""ulb CLI — Typer application with subcommands."""

from pathlib import Path

import typer
from rich.console import Console

from ..core.config import load_settings
from ..core.errors import ConfigurationError
from ..core.log import setup_logging
from .init_cmd import init
from .build_cmd import build
from .clean_cmd import clean
from .status_cmd import status
from .docs_cmd import docs
from .update_cmd import update

console = Console()

app = typer.Typer(
    name="ulb",
    help="Universal Live Builder: build live ISO images.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logging on stderr",
    ),
    config: Path = typer.Option(
        None,
        "--config", "-c",
        help="Project config file (default: ./Config.toml)",
    ),
) -> None:
    """Universal Live Builder."""
    setup_logging(verbose)
    try:
        ctx.obj = load_settings(config_path=config)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]", soft_wrap=True)
        raise typer.Exit(1)


app.command()(init)
app.command()(build)
app.command()(clean)
app.command()(status)
app.command()(docs)
app.command()(update)


if __name__ == "__main__":
    app()
