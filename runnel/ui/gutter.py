"""Gutter-based response rendering.

Every output line is prefixed with a 6-char gutter showing the speaker
abbreviation on the first line and a continuation pipe on subsequent lines.
"""

from rich.console import Console
from rich.text import Text

from ..theme import PALETTE, get_speaker_theme

GUTTER_WIDTH = 6


def _make_gutter(label: str, accent: str, pad: bool = False) -> Text:
    """Build a gutter cell: 'oll | ' or '    | '."""
    t = Text()
    if pad:
        t.append(" " * 4, style="")
    else:
        t.append(f"{label:<4}", style=f"bold {accent}")
    t.append("| ", style=f"dim {PALETTE.text_muted}")
    return t


def render_gutter_line(
    content: Text,
    abbreviation: str,
    accent: str,
    first: bool = True,
) -> Text:
    """Render a single line through the gutter.

    Args:
        content: Rich Text for the line body.
        abbreviation: 3-char speaker abbreviation (shown on first line only).
        accent: Hex color for the abbreviation.
        first: Whether this is the first line of the block.
    """
    gutter = _make_gutter(abbreviation if first else "", accent, pad=not first)
    gutter.append_text(content)
    return gutter


def render_user_gutter(text: str, console: Console) -> None:
    """Print a user message with 'you | ' gutter prefix."""
    theme = get_speaker_theme("you")
    lines = text.split("\n")
    for i, line in enumerate(lines):
        gutter = _make_gutter(theme.abbreviation if i == 0 else "", PALETTE.text_bright, pad=i > 0)
        gutter.append(line, style=PALETTE.text_bright)
        console.print(gutter)
