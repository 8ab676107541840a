"""Chat message widgets with gutter attribution.

ChatHistory -- scrollable transcript that follows new content
MessageWidget -- horizontal row: GutterLabel + MessageBody
JumpToLatest -- affordance shown while the transcript is not following
ThinkingIndicator -- braille spinner while waiting for the first token
"""

import logging

from rich.text import Text
from textual.containers import VerticalScroll
from textual.events import Click, MouseScrollDown, MouseScrollUp, Resize
from textual.message import Message
from textual.widget import Widget
from textual.app import ComposeResult
from textual.widgets import Static

from ..follow import DEFAULT_TOLERANCE, FollowController, ScrollDirective
from ..theme import PALETTE, get_accent, get_abbreviation
from ..ui.markdown import render_prose

_log = logging.getLogger(__name__)


def render_content(content: str) -> Text:
    """Render prose (never fenced code) for display in a message body."""
    return render_prose(content.strip("\n"))


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------

class ChatHistory(VerticalScroll):
    """Scrollable container for all conversation messages.

    Follows the bottom while pinned. Any user scroll that leaves the bottom
    detaches it until jump_to_latest() or the next reply.
    """

    DEFAULT_CSS = """
    ChatHistory {
        height: 1fr;
        width: 100%;
        padding: 1 2;
        background: #0d1117;
    }
    """

    class FollowChanged(Message):
        """Posted when the transcript starts or stops following."""

        def __init__(self, pinned: bool) -> None:
            super().__init__()
            self.pinned = pinned

    def __init__(self, tolerance: int = DEFAULT_TOLERANCE, **kwargs) -> None:
        super().__init__(**kwargs)
        self.follow = FollowController(tolerance)
        self._was_pinned = True

    # -- Follow control ----------------------------------------------------

    def begin_session(self) -> None:
        self._apply(self.follow.begin_session())

    def jump_to_latest(self) -> None:
        self._apply(self.follow.jump_to_latest())

    def content_changed(self) -> None:
        """Something inside grew; check the new height once laid out."""
        self.call_after_refresh(self._measure)

    def _measure(self) -> None:
        self._apply(self.follow.on_content_changed(self.virtual_size.height))

    def on_resize(self, event: Resize) -> None:
        self._apply(self.follow.on_content_changed(event.virtual_size.height))

    def _apply(self, directive: ScrollDirective) -> None:
        if directive is ScrollDirective.SCROLL_TO_BOTTOM:
            self.scroll_end(animate=False)
        self._report()

    def _report(self) -> None:
        pinned = self.follow.pinned
        if pinned != self._was_pinned:
            self._was_pinned = pinned
            self.post_message(self.FollowChanged(pinned))

    def _user_scrolled(self) -> None:
        self.follow.on_user_scroll(self.scroll_target_y, self.max_scroll_y)
        self._report()

    # -- User scroll input -------------------------------------------------

    def on_mouse_scroll_up(self, event: MouseScrollUp) -> None:
        self.call_after_refresh(self._user_scrolled)

    def on_mouse_scroll_down(self, event: MouseScrollDown) -> None:
        self.call_after_refresh(self._user_scrolled)

    def action_scroll_up(self) -> None:
        super().action_scroll_up()
        self._user_scrolled()

    def action_page_up(self) -> None:
        super().action_page_up()
        self._user_scrolled()

    def action_scroll_home(self) -> None:
        super().action_scroll_home()
        self._user_scrolled()

    def action_scroll_end(self) -> None:
        self.jump_to_latest()


class JumpToLatest(Static):
    """Clickable "jump to latest" bar, shown while detached."""

    DEFAULT_CSS = """
    JumpToLatest {
        height: 1;
        width: 100%;
        text-align: center;
        background: #121218;
        display: none;
    }
    """

    class Pressed(Message):
        """The user asked to return to the newest content."""

    def render(self) -> Text:
        t = Text()
        t.append("↓ ", style=f"bold {PALETTE.jump}")
        t.append("jump to latest", style=PALETTE.jump)
        t.append("  (end)", style=f"dim {PALETTE.text_dim}")
        return t

    def on_click(self, event: Click) -> None:
        self.post_message(self.Pressed())


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class MessageWidget(Widget):
    """A single message row: gutter label + body content."""

    DEFAULT_CSS = """
    MessageWidget {
        height: auto;
        width: 100%;
        padding: 0 0 1 0;
        layout: horizontal;
    }
    """

    def __init__(self, role: str, content: str, tokens: int = 0, **kwargs) -> None:
        super().__init__(**kwargs)
        self._role = role
        self._content = content
        self._tokens = tokens

    def compose(self) -> ComposeResult:
        yield GutterLabel(self._role)
        yield MessageBody(self._content)


class GutterLabel(Static):
    """Fixed-width right-aligned label: speaker abbreviation in its accent."""

    DEFAULT_CSS = """
    GutterLabel {
        width: 10;
        min-width: 10;
        max-width: 10;
        height: auto;
        text-align: right;
        padding-right: 1;
    }
    """

    def __init__(self, role: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._role = role

    def render(self) -> Text:
        abbr = get_abbreviation(self._role)
        if self._role in ("you", "system"):
            return Text(f"{abbr:>8}", style=f"dim {PALETTE.text_dim}")
        return Text(f"{abbr:>8}", style=f"bold {get_accent(self._role)}")


class MessageBody(Static):
    """The message content with inline markdown rendering."""

    DEFAULT_CSS = """
    MessageBody {
        width: 1fr;
        height: auto;
        padding-left: 1;
    }
    """

    def __init__(self, content: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._content = content

    @property
    def text(self) -> str:
        return self._content

    def set_content(self, content: str) -> None:
        self._content = content
        self.refresh(layout=True)

    def render(self) -> Text:
        if not self._content:
            return Text("")
        return render_content(self._content)


class ThinkingIndicator(Static):
    """Braille spinner shown while the provider has not produced a token."""

    SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"

    DEFAULT_CSS = """
    ThinkingIndicator {
        height: 1;
        width: 100%;
        padding: 0 0 0 11;
    }
    """

    def __init__(self, provider: str = "ollama", **kwargs) -> None:
        super().__init__(**kwargs)
        self._provider = provider
        self._idx = 0
        self._timer = None

    def on_mount(self) -> None:
        self._timer = self.set_interval(0.1, self._tick)

    def _tick(self) -> None:
        self._idx = (self._idx + 1) % len(self.SPINNER_FRAMES)
        self.refresh()

    def on_unmount(self) -> None:
        if self._timer:
            self._timer.stop()

    def render(self) -> Text:
        accent = get_accent(self._provider)
        ch = self.SPINNER_FRAMES[self._idx]
        t = Text()
        t.append(ch, style=f"bold {accent}")
        t.append(" thinking...", style=f"dim {PALETTE.text_dim}")
        return t
