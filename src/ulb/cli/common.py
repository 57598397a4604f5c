"""Helpers shared by the commands that call the backend."""

import typer
from rich.console import Console

from ..backend.supervisor import UI_ERROR, Outcome
from ..core.config import BuildConfig, Settings, load_build_config
from ..core.errors import BackendExitError, ConfigurationError, LaunchError


def require_config(settings: Settings, console: Console) -> BuildConfig:
    """Load the project config or exit 1 naming the missing piece."""
    try:
        return load_build_config(settings.config_path)
    except ConfigurationError as e:
        console.print(f"[red]Invalid project config:[/red] {e}", soft_wrap=True)
        console.print("[dim]Run 'ulb init' to create a project.[/dim]")
        raise typer.Exit(1)


def finish(outcome: Outcome, label: str, console: Console) -> None:
    """Print the outcome of a backend run; exit non-zero on failure."""
    if outcome.ui_status == UI_ERROR:
        console.print(f"[yellow]{outcome.ui_error}[/yellow]")

    try:
        outcome.raise_for_status()
    except LaunchError as e:
        console.print(f"[red]{e}[/red]", soft_wrap=True)
        raise typer.Exit(1)
    except BackendExitError as e:
        console.print(f"[red]{label} failed:[/red] {e}", soft_wrap=True)
        state = outcome.ui_state
        if state is not None and state.stage:
            console.print(f"  Last stage: {state.stage} ({state.progress:.0%})")
        raise typer.Exit(outcome.exit_code)

    console.print(f"[green]{label} done[/green]")
