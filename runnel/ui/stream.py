"""Streaming response renderer for the plain console.

A console can only append, so this renderer prints a segment once the
render plan says it can no longer change. Complete lines of trailing prose
are printed as they arrive; code blocks are printed whole once closed (or
at ``finish()`` if the fence never closes).
"""

from rich.console import Console

from ..segments import OpenCode, Prose, Segment, StreamAssembler
from ..theme import SpeakerTheme
from .code_block import render_code_container
from .gutter import render_gutter_line
from .markdown import inline_literal, render_markdown_line


class StreamRenderer:
    """Stateful streaming renderer that handles arbitrary chunk boundaries.

    Usage:
        renderer = StreamRenderer(theme, console)
        for chunk in provider.stream(prompt):
            renderer.feed(chunk)
        renderer.finish()
    """

    def __init__(
        self,
        theme: SpeakerTheme,
        console: Console,
        assembler: StreamAssembler | None = None,
    ):
        self._theme = theme
        self._console = console
        self._assembler = assembler or StreamAssembler()
        self._buffer = ""
        self._emitted = 0          # segments fully printed
        self._lines_emitted = 0    # lines printed from the segment at _emitted
        self._first_line = True

    @property
    def is_first_line(self) -> bool:
        return self._first_line

    @property
    def text(self) -> str:
        return self._buffer

    @property
    def assembler(self) -> StreamAssembler:
        return self._assembler

    def feed(self, chunk: str) -> None:
        """Feed a chunk of text from the streaming provider."""
        if not chunk:
            return
        self._buffer += chunk
        self._assembler.update(self._buffer)
        self._flush(final=False)

    def finish(self) -> None:
        """Print everything that is left, including an unterminated block."""
        self._assembler.finish(self._buffer)
        self._flush(final=True)

    def _flush(self, final: bool) -> None:
        plan = self._assembler.plan
        stable = len(plan) if final else plan.stable_count
        while self._emitted < stable:
            self._emit(plan[self._emitted])
            self._emitted += 1
            self._lines_emitted = 0

        if final or plan.is_open or self._emitted >= len(plan):
            return
        tail = plan[self._emitted]
        if isinstance(tail, Prose):
            complete = tail.text.split("\n")[:-1]
            for line in complete[self._lines_emitted:]:
                self._emit_prose_line(line)
            self._lines_emitted = max(self._lines_emitted, len(complete))

    def _emit(self, segment: Segment) -> None:
        if isinstance(segment, Prose):
            lines = segment.text.split("\n")
            if lines and lines[-1] == "":
                lines.pop()
            if not segment.text.strip() and self._lines_emitted == 0:
                return
            for line in lines[self._lines_emitted:]:
                self._emit_prose_line(line)
        elif segment.inline:
            self._emit_line(inline_literal(segment.text))
        else:
            render_code_container(
                segment.text,
                segment.language,
                self._console,
                open_block=isinstance(segment, OpenCode),
            )
            self._first_line = False

    def _emit_prose_line(self, line: str) -> None:
        self._emit_line(render_markdown_line(line))

    def _emit_line(self, styled) -> None:
        """Render a single line through the gutter."""
        guttered = render_gutter_line(
            styled,
            abbreviation=self._theme.abbreviation,
            accent=self._theme.accent,
            first=self._first_line,
        )
        self._console.print(guttered)
        self._first_line = False
