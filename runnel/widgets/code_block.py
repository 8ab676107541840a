"""Syntax-highlighted code container with box-drawing border.

Language label (accent color) top-left, state top-right.
Code bg #161b22, border #30363d.

Blocks are updated in place while their reply streams, so a growing block
keeps its widget (and scroll position) instead of being remounted.
"""

from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text
from textual.widgets import Static

from ..segments import OpenCode, Segment
from ..theme import PALETTE, get_accent
from ..ui.code_block import resolve_lexer
from ..ui.markdown import inline_literal


class CodeBlock(Static):
    """Bordered code block with syntax highlighting and line numbers."""

    DEFAULT_CSS = """
    CodeBlock {
        height: auto;
        width: 100%;
        margin: 1 0;
    }
    """

    def __init__(
        self,
        code: str,
        language: str = "text",
        speaker: str = "ollama",
        streaming: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._code = code
        self._language = language
        self._speaker = speaker
        self._streaming = streaming
        self.update_count = 0

    @property
    def code(self) -> str:
        return self._code

    @property
    def language(self) -> str:
        return self._language

    @property
    def streaming(self) -> bool:
        return self._streaming

    def show(self, segment: Segment) -> None:
        self.update_code(segment.text, segment.language, isinstance(segment, OpenCode))

    def update_code(self, code: str, language: str | None = None,
                    streaming: bool | None = None) -> None:
        """Replace the displayed code without remounting."""
        if language is not None:
            self._language = language
        if streaming is not None:
            self._streaming = streaming
        self._code = code
        self.update_count += 1
        self.refresh(layout=True)

    def set_streaming(self, streaming: bool) -> None:
        self._streaming = streaming
        self.refresh()

    def render(self) -> Panel:
        accent = get_accent(self._speaker)

        syntax = Syntax(
            self._code.rstrip("\n"),
            resolve_lexer(self._language),
            theme="monokai",
            line_numbers=True,
            word_wrap=False,
            background_color=PALETTE.code_bg,
        )

        title = Text()
        title.append(f" {self._language.upper()} ", style=f"bold {accent}")

        if self._streaming:
            subtitle = Text(" streaming ", style=f"dim {PALETTE.streaming}")
        else:
            subtitle = Text(" copy ", style=f"dim {PALETTE.text_dim}")

        return Panel(
            syntax,
            title=title,
            title_align="left",
            subtitle=subtitle,
            subtitle_align="right",
            border_style=PALETTE.border,
            background=PALETTE.code_bg,
            padding=(0, 1),
            expand=True,
        )


class InlineLiteral(Static):
    """A one-line code snippet shown inline instead of in a full block."""

    DEFAULT_CSS = """
    InlineLiteral {
        height: auto;
        width: 1fr;
    }
    """

    def __init__(self, code: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._code = code

    @property
    def code(self) -> str:
        return self._code

    def show(self, segment: Segment) -> None:
        self._code = segment.text
        self.refresh(layout=True)

    def render(self) -> Text:
        return inline_literal(self._code)
