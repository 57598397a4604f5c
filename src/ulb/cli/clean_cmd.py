"""ulb clean — Remove the backend's package cache."""

import typer
from rich.console import Console

from ..backend.invocation import build_invocation
from ..backend.supervisor import run_passthrough
from ..core.constants import VERB_CLEAN
from .common import finish, require_config

console = Console()


def clean(ctx: typer.Context) -> None:
    """Clean the build cache."""
    settings = ctx.obj
    require_config(settings, console)
    outcome = run_passthrough(build_invocation(settings, VERB_CLEAN))
    finish(outcome, "Clean", console)
