"""Main chat screen for the Runnel TUI.

Composes ChatHistory + JumpToLatest + Input.
Bridges to synchronous provider.stream() via run_worker(thread=True); every
chunk is handed back to the UI thread and fed to the active session, whose
plan changes come back here as PlanUpdated messages.
"""

import logging
from typing import Dict, List, Optional

from textual.app import ComposeResult
from textual.screen import Screen
from textual.widgets import Input

from ..follow import DEFAULT_TOLERANCE
from ..providers.base import BaseProvider
from ..session import StreamSession
from ..state import PlanUpdated, ReplyEnded, ReplyStarted
from ..widgets.message import ChatHistory, JumpToLatest, MessageWidget, ThinkingIndicator
from ..widgets.stream_message import StreamMessage

_log = logging.getLogger(__name__)


def summarize_user_prompt(prompt: str) -> str:
    """Return a compact display string for pasted multi-line content."""
    line_count = prompt.count("\n") + 1
    if line_count >= 2:
        return f"[pasted content 1 + {line_count - 1} lines]"
    return prompt


class MainScreen(Screen):
    """The core chat interface."""

    BINDINGS = [
        ("escape", "cancel_reply", "Stop reply"),
        ("ctrl+g", "jump_latest", "Jump to latest"),
        ("ctrl+c", "exit_app", "Exit"),
        ("ctrl+d", "exit_app", "Exit"),
    ]

    DEFAULT_CSS = """
    MainScreen Input {
        dock: bottom;
        margin: 0 1;
    }
    """

    def __init__(
        self,
        provider: BaseProvider,
        provider_name: str = "ollama",
        system_prompt: str = "",
        tolerance: int = DEFAULT_TOLERANCE,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._provider = provider
        self._provider_name = provider_name
        self._system_prompt = system_prompt or None
        self._tolerance = tolerance
        self._streams: Dict[str, StreamMessage] = {}
        self._thinking: Dict[str, ThinkingIndicator] = {}

    def compose(self) -> ComposeResult:
        yield ChatHistory(self._tolerance)
        yield JumpToLatest()
        yield Input(placeholder="Message (esc stops the reply)", id="main_input")

    def on_mount(self) -> None:
        self.app.state.bind(self)
        self.query_one("#main_input", Input).focus()

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def on_input_submitted(self, event: Input.Submitted) -> None:
        prompt = event.value.strip()
        if not prompt:
            return
        event.input.value = ""

        history = self.app.state.history()
        self.app.state.add_message("you", prompt)

        chat = self.query_one(ChatHistory)
        chat.mount(MessageWidget("you", summarize_user_prompt(prompt)))
        self._send_to_provider(prompt, history)

    # ------------------------------------------------------------------
    # Provider streaming bridge
    # ------------------------------------------------------------------

    def _send_to_provider(self, prompt: str, history: List[Dict[str, str]]) -> None:
        """Start a session and a background worker that calls the provider."""
        state = self.app.state
        session = state.begin_reply(self._provider_name)
        chat = self.query_one(ChatHistory)

        thinking = ThinkingIndicator(self._provider_name)
        self._thinking[session.id] = thinking
        chat.mount(thinking)
        state.set_thinking(self._provider_name, True)

        msg = StreamMessage(self._provider_name, session.id)
        self._streams[session.id] = msg
        chat.mount(msg)
        chat.content_changed()

        def _worker() -> None:
            self._provider_worker(session, prompt, history)

        self.run_worker(_worker, thread=True, group="reply")

    def _provider_worker(self, session: StreamSession, prompt: str,
                         history: List[Dict[str, str]]) -> None:
        """Run in a worker thread -- calls synchronous provider.stream()."""
        state = self.app.state
        try:
            for chunk in self._provider.stream(
                prompt, self._system_prompt, history, stop_event=session.stop_event,
            ):
                if session.stop_requested:
                    break
                self.app.call_from_thread(state.feed_reply, session, chunk)
        except Exception as e:
            _log.warning("reply %s failed: %s", session.id, e)
            self.app.call_from_thread(self._on_stream_error, session, str(e))
            return
        self.app.call_from_thread(state.finish_reply, session)

    def _on_stream_error(self, session: StreamSession, error_msg: str) -> None:
        """Called when streaming fails."""
        self.app.state.finish_reply(session)
        chat = self.query_one(ChatHistory)
        chat.mount(MessageWidget("system", f"Error: {error_msg}"))
        chat.content_changed()

    def _drop_thinking(self, session_id: str) -> None:
        thinking = self._thinking.pop(session_id, None)
        if thinking is not None:
            thinking.remove()

    # ------------------------------------------------------------------
    # Session messages
    # ------------------------------------------------------------------

    def on_reply_started(self, event: ReplyStarted) -> None:
        self.query_one(ChatHistory).begin_session()

    def on_plan_updated(self, event: PlanUpdated) -> None:
        msg = self._streams.get(event.session.id)
        if msg is None:
            return
        self._drop_thinking(event.session.id)
        msg.apply(event.changes)
        self.query_one(ChatHistory).content_changed()

    def on_reply_ended(self, event: ReplyEnded) -> None:
        session = event.session
        self._drop_thinking(session.id)
        if self.app.state.coordinator.active is None:
            self.app.state.set_thinking(self._provider_name, False)

        msg = self._streams.pop(session.id, None)
        if msg is not None:
            msg.finish(cancelled=event.cancelled)

        text = session.text
        if text:
            usage = None if event.cancelled else self._provider.last_usage
            tokens = sum(usage) if usage else 0
            self.app.state.add_message(
                self._provider_name, text, tokens=tokens,
                metadata={"session": session.id, "cancelled": event.cancelled},
            )
        self.query_one(ChatHistory).content_changed()

    # ------------------------------------------------------------------
    # Follow affordance
    # ------------------------------------------------------------------

    def on_chat_history_follow_changed(self, event: ChatHistory.FollowChanged) -> None:
        self.query_one(JumpToLatest).display = not event.pinned

    def on_jump_to_latest_pressed(self, event: JumpToLatest.Pressed) -> None:
        self.action_jump_latest()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_jump_latest(self) -> None:
        self.query_one(ChatHistory).jump_to_latest()

    def action_cancel_reply(self) -> None:
        session: Optional[StreamSession] = self.app.state.cancel_reply()
        if session is not None:
            _log.info("reply %s stopped by user", session.id)

    def action_exit_app(self) -> None:
        self.app.state.cancel_reply()
        self.app.exit()
