"""Console-side rendering helpers shared by the ui modules."""

from rich.console import Console
from rich.text import Text

from ..theme import PALETTE

console = Console()


def render_error(text: str, con: Console | None = None) -> None:
    """Render an error message."""
    err = Text()
    err.append("err ", style=f"bold {PALETTE.error}")
    err.append("| ", style=f"dim {PALETTE.text_muted}")
    err.append(text, style=PALETTE.error)
    (con or console).print(err)


def render_notice(text: str, con: Console | None = None) -> None:
    """Render a dim one-line notice (cancellation, session info)."""
    t = Text()
    t.append("... ", style=f"dim {PALETTE.spinner}")
    t.append("| ", style=f"dim {PALETTE.text_muted}")
    t.append(text, style=f"dim {PALETTE.text_primary}")
    (con or console).print(t)
