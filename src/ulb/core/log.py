"""Logging setup: RichHandler on stderr so frames on stdout stay clean."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_NOISY_LIBS = ["urllib3", "asyncio"]


def setup_logging(verbose: bool = False) -> None:
    """Install a single RichHandler on the root logger."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=verbose,
    )
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    for lib_name in _NOISY_LIBS:
        logging.getLogger(lib_name).setLevel(logging.WARNING)
