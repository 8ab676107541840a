"""Bordered code block container with syntax highlighting.

Renders fenced code blocks in box-drawing borders, indented by GUTTER_WIDTH
to align within the response gutter.
"""

from functools import lru_cache

from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound
from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from ..theme import PALETTE
from .gutter import GUTTER_WIDTH

_TOP_LEFT = "╭"
_TOP_RIGHT = "╮"
_BOT_LEFT = "╰"
_BOT_RIGHT = "╯"
_VERT = "│"
_HORIZ = "─"

FALLBACK_LEXER = "text"


@lru_cache(maxsize=64)
def resolve_lexer(language: str) -> str:
    """Map a language label to a pygments lexer alias, or plain text."""
    if not language:
        return FALLBACK_LEXER
    try:
        get_lexer_by_name(language)
    except ClassNotFound:
        return FALLBACK_LEXER
    return language


def render_code_container(
    code: str,
    language: str = "",
    console: Console | None = None,
    open_block: bool = False,
) -> None:
    """Render a bordered code block with syntax highlighting.

    Args:
        code: The code string (without fences).
        language: Language hint for syntax highlighting.
        console: Rich Console to print to.
        open_block: The closing fence never arrived; marked in the footer.
    """
    from .theme import console as default_console

    con = console or default_console
    indent = " " * GUTTER_WIDTH
    lexer = resolve_lexer(language)

    term_width = con.width or 80
    inner_width = term_width - GUTTER_WIDTH - 4  # 4 = border + padding

    lang_label = language or "text"

    top_content_width = inner_width - len(lang_label) - 1
    top = Text()
    top.append(indent)
    top.append(_TOP_LEFT, style=f"dim {PALETTE.border}")
    top.append(f" {lang_label} ", style=f"dim {PALETTE.text_dim}")
    top.append(_HORIZ * max(top_content_width - 2, 1), style=f"dim {PALETTE.border}")
    top.append(_TOP_RIGHT, style=f"dim {PALETTE.border}")
    con.print(top)

    syntax = Syntax("", lexer, theme="monokai", line_numbers=False, word_wrap=False)
    lines = code.rstrip("\n").split("\n")
    for i, line in enumerate(lines):
        row = Text()
        row.append(indent)
        row.append(f"{_VERT} ", style=f"dim {PALETTE.border}")
        row.append(f"{i + 1:>3} ", style=PALETTE.text_muted)
        highlighted = syntax.highlight(line)
        highlighted.rstrip()
        row.append_text(highlighted)
        con.print(row, overflow="ellipsis", no_wrap=True)

    bot = Text()
    bot.append(indent)
    bot.append(_BOT_LEFT, style=f"dim {PALETTE.border}")
    if open_block:
        label = " unterminated "
        bot.append(_HORIZ * 2, style=f"dim {PALETTE.border}")
        bot.append(label, style=f"dim {PALETTE.streaming}")
        bot.append(_HORIZ * max(inner_width - 1 - len(label), 1), style=f"dim {PALETTE.border}")
    else:
        bot.append(_HORIZ * (inner_width + 1), style=f"dim {PALETTE.border}")
    bot.append(_BOT_RIGHT, style=f"dim {PALETTE.border}")
    con.print(bot)
