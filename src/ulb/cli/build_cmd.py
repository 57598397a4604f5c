"""ulb build — Build the ISO with a live progress display."""

import typer
from rich.console import Console

from ..backend.invocation import build_invocation
from ..backend.supervisor import Supervisor, run_passthrough
from ..core.config import Settings
from ..core.constants import FLAG_RELEASE, QUIT_KEY, VERB_BUILD
from ..tui.loop import UILoop
from .common import finish, require_config

console = Console()


def build(
    ctx: typer.Context,
    release: bool = typer.Option(
        False,
        "--release", "-r",
        help="Build release ISO",
    ),
    no_progress: bool = typer.Option(
        False,
        "--no-progress",
        help="Show the backend's own output instead of a progress bar",
    ),
) -> None:
    """Build the live ISO for the current project."""
    settings: Settings = ctx.obj
    config = require_config(settings, console)
    flags = [FLAG_RELEASE] if release else []

    kind = "release" if release else "debug"
    console.print(f"[bold]Building {config.image_name}[/bold] ({config.distro}, {kind})")

    if no_progress:
        outcome = run_passthrough(build_invocation(settings, VERB_BUILD, flags=flags))
    else:
        console.print(f"[dim]Press {QUIT_KEY} to hide progress; the build keeps running.[/dim]")
        supervisor = Supervisor(lambda: UILoop(
            console,
            tick_interval=settings.tick_interval,
            refresh_per_second=settings.refresh_per_second,
        ))
        outcome = supervisor.run(
            build_invocation(settings, VERB_BUILD, flags=flags, json_output=True)
        )

    finish(outcome, "Build", console)
