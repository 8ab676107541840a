"""Console (non-TUI) rendering: gutter, inline markdown, code containers."""

from .theme import console, render_error, render_notice
from .gutter import render_gutter_line, render_user_gutter, GUTTER_WIDTH
from .markdown import render_markdown_line, render_prose, inline_literal
from .code_block import render_code_container, resolve_lexer
from .stream import StreamRenderer

__all__ = [
    "console",
    "render_error",
    "render_notice",
    "render_gutter_line",
    "render_user_gutter",
    "GUTTER_WIDTH",
    "render_markdown_line",
    "render_prose",
    "inline_literal",
    "render_code_container",
    "resolve_lexer",
    "StreamRenderer",
]
