"""ulb docs — Show the bundled documentation."""

import typer
from rich.console import Console

from ..tui.docs import show_docs

console = Console()


def docs(
    no_pager: bool = typer.Option(
        False,
        "--no-pager",
        help="Print straight to the terminal",
    ),
) -> None:
    """Open the documentation."""
    show_docs(console, pager=not no_pager)
