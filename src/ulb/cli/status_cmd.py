"""ulb status — Show backend version and project settings."""

import typer
from rich.console import Console

from ..backend.invocation import build_invocation
from ..backend.supervisor import run_passthrough
from ..core.constants import VERB_STATUS
from .common import finish, require_config

console = Console()


def status(ctx: typer.Context) -> None:
    """Show backend and project status."""
    settings = ctx.obj
    require_config(settings, console)
    console.print(f"Backend:  {settings.backend_path}")
    console.print(f"Config:   {settings.config_path}")
    console.print()
    outcome = run_passthrough(build_invocation(settings, VERB_STATUS))
    finish(outcome, "Status", console)
