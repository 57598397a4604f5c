"""Bundled documentation viewer."""

from importlib import resources

from rich.console import Console
from rich.markdown import Markdown


def load_docs() -> str:
    return resources.files("ulb.tui").joinpath("docs.md").read_text(encoding="utf-8")


def show_docs(console: Console, *, pager: bool = True) -> None:
    """Render the docs, through the console pager when asked."""
    doc = Markdown(load_docs())
    if pager:
        with console.pager(styles=True):
            console.print(doc)
    else:
        console.print(doc)
