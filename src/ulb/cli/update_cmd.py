"""ulb update — Download the latest backend."""

from urllib.error import URLError

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn

from ..backend.update import download_backend
from ..core.config import Settings

console = Console()


def update(
    ctx: typer.Context,
    url: str = typer.Option(
        None,
        "--url",
        help="Download from this URL instead of the configured one",
    ),
) -> None:
    """Download the latest backend binary."""
    settings: Settings = ctx.obj
    url = url or settings.update_url
    dest = settings.backend_path

    console.print(f"Downloading backend from {url}")

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        console=console,
    ) as progress:
        task = progress.add_task("Backend", total=1.0)
        gen = download_backend(url, dest)
        try:
            while True:
                event = next(gen)
                progress.update(task, completed=event.progress)
        except StopIteration as e:
            dest = e.value
        except (URLError, OSError) as e:
            progress.stop()
            console.print(f"[red]Update failed:[/red] {e}", soft_wrap=True)
            raise typer.Exit(1)

    console.print(f"[green]Backend updated:[/green] {dest}")
