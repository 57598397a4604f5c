"""ulb init — Create a new project skeleton."""

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from ..core.config import BuildConfig
from ..core.constants import SUPPORTED_DISTROS
from ..core.project import create_project

console = Console()


def init(
    directory: Path = typer.Argument(
        Path("."),
        help="Project directory (created if missing)",
        file_okay=False,
        resolve_path=True,
    ),
    distro: str = typer.Option(
        "fedora",
        "--distro", "-d",
        help=f"Base distribution ({', '.join(SUPPORTED_DISTROS)})",
    ),
    image_name: str = typer.Option(
        "my-live-iso",
        "--image-name", "-n",
        help="Name of the ISO image",
    ),
    installer: str = typer.Option(
        "anaconda",
        "--installer",
        help="Installer to include (empty for none)",
    ),
    architecture: str = typer.Option(
        "x86_64",
        "--architecture", "-a",
        help="Target architecture",
    ),
    force: bool = typer.Option(
        False,
        "--force", "-f",
        help="Overwrite an existing Config.toml",
    ),
) -> None:
    """Initialize a project skeleton."""
    if not distro or not image_name:
        console.print("[red]--distro and --image-name must not be empty[/red]")
        raise typer.Exit(1)
    if distro not in SUPPORTED_DISTROS:
        console.print(
            f"[yellow]Warning: distro {distro!r} is not supported by the backend "
            f"({', '.join(SUPPORTED_DISTROS)}).[/yellow]"
        )

    config = BuildConfig(
        distro=distro,
        image_name=image_name,
        installer=installer or None,
        architecture=architecture or None,
    )
    try:
        created = create_project(directory, config, force=force)
    except FileExistsError as e:
        console.print(f"[red]{e}[/red]", soft_wrap=True)
        raise typer.Exit(1)

    console.print(Panel(
        f"[bold]{image_name}[/bold]\n\n"
        f"Location:      {directory}\n"
        f"Distro:        {distro}\n"
        f"Installer:     {installer or '-'}\n"
        f"Architecture:  {architecture or '-'}\n"
        f"Created:       {len(created)} entries",
        title="Project initialized",
        border_style="green",
    ))

    console.print("\nNext steps:")
    console.print("  1. Edit [cyan]package-lists[/cyan] and drop files into files/")
    console.print("  2. [cyan]ulb build[/cyan]   — Build the ISO")
