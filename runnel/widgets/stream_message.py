"""Streaming message widget -- renders a reply from render-plan changes.

The widget keeps one child per plan segment. Plan changes from the
session arrive as append/update/replace/remove records, so a code block
that is still growing is updated in place and never remounted.
"""

import logging
from typing import List, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widget import Widget
from textual.widgets import Static

from ..segments import OpenCode, PlanAction, PlanChange, Prose, Segment
from ..theme import PALETTE
from .code_block import CodeBlock, InlineLiteral
from .message import GutterLabel, render_content

_log = logging.getLogger(__name__)


class ProseBlock(Static):
    """A prose segment, re-rendered whenever its text changes."""

    DEFAULT_CSS = """
    ProseBlock {
        width: 1fr;
        height: auto;
    }
    """

    def __init__(self, content: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._content = content

    @property
    def text(self) -> str:
        return self._content

    def show(self, segment: Segment) -> None:
        self._content = segment.text
        self.display = bool(self._content.strip())
        self.refresh(layout=True)

    def render(self):
        return render_content(self._content)


class StreamBody(Vertical):
    DEFAULT_CSS = """
    StreamBody {
        width: 1fr;
        height: auto;
        padding-left: 1;
    }
    """


class StreamMessage(Widget):
    """A live-updating assistant reply.

    Usage:
        msg = StreamMessage(provider, session_id)
        chat.mount(msg)
        msg.apply(changes)     # for every PlanUpdated
        msg.finish()
    """

    DEFAULT_CSS = """
    StreamMessage {
        height: auto;
        width: 100%;
        padding: 0 0 1 0;
        layout: horizontal;
    }
    """

    def __init__(self, provider: str, session_id: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._provider = provider
        self.session_id = session_id
        self._blocks: List[Widget] = []
        self._body: Optional[StreamBody] = None
        self._pending: List[PlanChange] = []
        self.finished = False

    def compose(self) -> ComposeResult:
        yield GutterLabel(self._provider)
        self._body = StreamBody()
        yield self._body

    def on_mount(self) -> None:
        self.call_after_refresh(self._flush_pending)

    def _flush_pending(self) -> None:
        if not self._pending:
            return
        if self._body is None or not self._body.is_mounted:
            self.call_after_refresh(self._flush_pending)
            return
        pending, self._pending = self._pending, []
        self.apply(pending)

    @property
    def blocks(self) -> List[Widget]:
        return list(self._blocks)

    def apply(self, changes: List[PlanChange]) -> None:
        """Apply plan changes in order."""
        if self._body is None or not self._body.is_mounted:
            self._pending.extend(changes)
            return
        for change in changes:
            if change.action is PlanAction.APPEND:
                block = self._make_block(change.segment)
                self._blocks.append(block)
                self._body.mount(block)
            elif change.action is PlanAction.UPDATE:
                self._blocks[change.index].show(change.segment)
            elif change.action is PlanAction.REPLACE:
                old = self._blocks[change.index]
                block = self._make_block(change.segment)
                _log.debug("replacing %s at %d with %s",
                           type(old).__name__, change.index, type(block).__name__)
                self._blocks[change.index] = block
                self._body.mount(block, after=old)
                old.remove()
            elif change.action is PlanAction.REMOVE:
                self._blocks.pop(change.index).remove()

    def finish(self, cancelled: bool = False) -> None:
        """The reply stopped growing: drop streaming marks."""
        self.finished = True
        for block in self._blocks:
            if isinstance(block, CodeBlock):
                block.set_streaming(False)
        if cancelled and self._body is not None:
            self._body.mount(Static(
                Text("cancelled", style=f"dim {PALETTE.text_dim}"), classes="cancelled",
            ))

    def _make_block(self, segment: Segment) -> Widget:
        if isinstance(segment, Prose):
            block = ProseBlock(segment.text)
            block.display = bool(segment.text.strip())
            return block
        if segment.inline:
            return InlineLiteral(segment.text)
        return CodeBlock(
            segment.text,
            language=segment.language,
            speaker=self._provider,
            streaming=isinstance(segment, OpenCode),
        )
