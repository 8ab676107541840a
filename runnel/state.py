"""Reactive state for the Runnel TUI.

State mutations post Textual Messages so widgets can watch for changes.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, List, TYPE_CHECKING
import time
import uuid

from textual.message import Message

from .segments import PlanChange
from .session import SessionCoordinator, SessionStatus, StreamSession

if TYPE_CHECKING:
    from textual.message_pump import MessagePump


# ---------------------------------------------------------------------------
# Chat message (renamed to avoid collision with textual.message.Message)
# ---------------------------------------------------------------------------

@dataclass
class ChatMessage:
    """A single chat message."""

    role: str           # "you", "system" or provider name
    content: str
    tokens: int = 0
    metadata: Dict = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Textual messages (events posted to the app message bus)
# ---------------------------------------------------------------------------

class NewMessage(Message):
    """A new chat message was added."""

    def __init__(self, message: ChatMessage) -> None:
        super().__init__()
        self.message = message


class ThinkingChanged(Message):
    """Provider started or stopped thinking."""

    def __init__(self, provider: str, thinking: bool) -> None:
        super().__init__()
        self.provider = provider
        self.thinking = thinking


class PlanUpdated(Message):
    """The render plan of a streaming reply changed."""

    def __init__(self, session: StreamSession, changes: List[PlanChange]) -> None:
        super().__init__()
        self.session = session
        self.changes = changes


class ReplyStarted(Message):
    """A new reply session began."""

    def __init__(self, session: StreamSession, provider: str) -> None:
        super().__init__()
        self.session = session
        self.provider = provider


class ReplyEnded(Message):
    """A reply session completed or was cancelled."""

    def __init__(self, session: StreamSession) -> None:
        super().__init__()
        self.session = session

    @property
    def cancelled(self) -> bool:
        return self.session.status is SessionStatus.CANCELLED


# ---------------------------------------------------------------------------
# Application state
# ---------------------------------------------------------------------------

class ChatState:
    """Mutable state for one chat.

    Call mutator methods (not bare attribute sets) so that Textual messages
    are posted to the app's message bus.
    """

    def __init__(self, coordinator: Optional[SessionCoordinator] = None) -> None:
        self.chat_id: str = uuid.uuid4().hex[:12]
        self.start_time: float = time.monotonic()
        self.messages: List[ChatMessage] = []
        self.total_tokens: int = 0
        self.is_thinking: bool = False
        self.coordinator = coordinator or SessionCoordinator()
        self.coordinator.listener = self._on_plan_changes
        self._target: Optional["MessagePump"] = None

    def bind(self, target: "MessagePump") -> None:
        """Post state messages to ``target`` (the app, or the screen showing the chat)."""
        self._target = target

    def _post(self, msg: Message) -> None:
        if self._target is not None:
            self._target.post_message(msg)

    def _on_plan_changes(self, session: StreamSession, changes: List[PlanChange]) -> None:
        self._post(PlanUpdated(session, changes))

    # -- Mutators ----------------------------------------------------------

    def add_message(self, role: str, content: str, tokens: int = 0,
                    metadata: Optional[Dict] = None) -> ChatMessage:
        msg = ChatMessage(role=role, content=content, tokens=tokens, metadata=metadata or {})
        self.messages.append(msg)
        self.total_tokens += tokens
        self._post(NewMessage(msg))
        return msg

    def set_thinking(self, provider: str, thinking: bool) -> None:
        self.is_thinking = thinking
        self._post(ThinkingChanged(provider, thinking))

    def begin_reply(self, provider: str) -> StreamSession:
        """Cancel any reply still streaming and start a new session."""
        previous = self.coordinator.active
        if previous is not None:
            self.cancel_reply()
        session = self.coordinator.start()
        self._post(ReplyStarted(session, provider))
        return session

    def feed_reply(self, session: StreamSession, chunk: str) -> None:
        self.coordinator.feed(session, chunk)

    def finish_reply(self, session: StreamSession) -> bool:
        """Complete ``session``. False if it had already ended."""
        if session is not self.coordinator.active:
            return False
        self.coordinator.complete(session)
        self._post(ReplyEnded(session))
        return True

    def cancel_reply(self) -> Optional[StreamSession]:
        session = self.coordinator.active
        if session is None:
            return None
        self.coordinator.cancel(session)
        self._post(ReplyEnded(session))
        return session

    # -- Queries -----------------------------------------------------------

    def history(self) -> List[Dict[str, str]]:
        """Prior turns in provider message format."""
        turns = []
        for m in self.messages:
            if m.role == "system":
                continue
            turns.append({
                "role": "user" if m.role == "you" else "assistant",
                "content": m.content,
            })
        return turns

    @property
    def streaming(self) -> bool:
        return self.coordinator.active is not None

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.start_time

    @property
    def message_count(self) -> int:
        return sum(1 for m in self.messages if m.role == "you")

    @property
    def response_count(self) -> int:
        return sum(1 for m in self.messages if m.role not in ("you", "system"))
