"""Stream sessions: one growing assistant reply at a time.

``SessionCoordinator.start`` hands out an explicit ``StreamSession`` handle
that every later feed/complete/cancel call must present. Only one session
is active at a time. Events for a session that has already ended are the
normal fallout of a handoff and are dropped quietly; a handle from some
other coordinator is a programming error and raises.
"""

import logging
import threading
import time
import uuid
from enum import Enum, auto
from typing import Callable, Dict, FrozenSet, List, Optional

from .errors import ForeignSessionError, SessionActiveError
from .segments import (
    DEFAULT_LANGUAGES,
    DEFAULT_THRESHOLDS,
    PlanChange,
    ReclassifyThresholds,
    RenderPlan,
    StreamAssembler,
)

_log = logging.getLogger(__name__)

Listener = Callable[["StreamSession", List[PlanChange]], None]


class SessionStatus(Enum):
    ACTIVE = auto()
    COMPLETED = auto()
    CANCELLED = auto()


class StreamSession:
    """Handle for one streaming reply."""

    def __init__(self, session_id: str, owner: "SessionCoordinator",
                 assembler: StreamAssembler) -> None:
        self.id = session_id
        self.status = SessionStatus.ACTIVE
        self.started_at = time.monotonic()
        # polled by the producer thread; set on cancel
        self.stop_event = threading.Event()
        self._owner = owner
        self._assembler = assembler
        self._chunks: List[str] = []

    def __repr__(self) -> str:
        return f"StreamSession({self.id!r}, {self.status.name.lower()})"

    @property
    def text(self) -> str:
        return "".join(self._chunks)

    @property
    def plan(self) -> RenderPlan:
        return self._assembler.plan

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    @property
    def stop_requested(self) -> bool:
        return self.stop_event.is_set()

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


class SessionCoordinator:
    """Owns the single active session and routes producer events to it."""

    def __init__(
        self,
        thresholds: ReclassifyThresholds = DEFAULT_THRESHOLDS,
        languages: FrozenSet[str] = DEFAULT_LANGUAGES,
        listener: Optional[Listener] = None,
    ) -> None:
        self.thresholds = thresholds
        self.languages = languages
        self.listener = listener
        self._active: Optional[StreamSession] = None
        # active session only; ended ids fall through to the stale path
        self._issued: Dict[str, StreamSession] = {}

    @property
    def active(self) -> Optional[StreamSession]:
        return self._active

    # -- Lifecycle ---------------------------------------------------------

    def start(self, session_id: Optional[str] = None) -> StreamSession:
        """Begin a new session. Raises if one is still active."""
        if self._active is not None:
            raise SessionActiveError(self._active.id)
        session_id = session_id or uuid.uuid4().hex[:12]
        assembler = StreamAssembler(thresholds=self.thresholds, languages=self.languages)
        session = StreamSession(session_id, self, assembler)
        self._issued[session_id] = session
        self._active = session
        _log.debug("session %s started", session_id)
        return session

    def replace(self) -> StreamSession:
        """Cancel whatever is streaming, then start a fresh session."""
        if self._active is not None:
            self.cancel(self._active)
        return self.start()

    def feed(self, session: StreamSession, chunk: str) -> List[PlanChange]:
        """Append ``chunk`` to the session's reply and return plan changes."""
        if not self._accepts(session) or not chunk:
            return []
        session._chunks.append(chunk)
        changes = session._assembler.update(session.text)
        self._notify(session, changes)
        return changes

    def complete(self, session: StreamSession) -> List[PlanChange]:
        """The producer signalled the end of the reply."""
        if not self._accepts(session):
            return []
        return self._end(session, SessionStatus.COMPLETED)

    def cancel(self, session: StreamSession) -> List[PlanChange]:
        """Stop treating the reply as growing and tell the producer to stop."""
        if not self._accepts(session):
            return []
        session.stop_event.set()
        return self._end(session, SessionStatus.CANCELLED)

    # -- Id-keyed entry points for the producer channel --------------------

    def deliver(self, session_id: str, chunk: str) -> List[PlanChange]:
        session = self._issued.get(session_id)
        if session is None:
            _log.debug("dropping %d chars for unknown session %s", len(chunk), session_id)
            return []
        return self.feed(session, chunk)

    def deliver_done(self, session_id: str) -> List[PlanChange]:
        session = self._issued.get(session_id)
        if session is None:
            _log.debug("dropping completion for unknown session %s", session_id)
            return []
        return self.complete(session)

    # -- Internals ---------------------------------------------------------

    def _accepts(self, session: StreamSession) -> bool:
        if session._owner is not self:
            raise ForeignSessionError(session.id)
        if session is not self._active:
            _log.debug("dropping event for stale session %s", session.id)
            return False
        return True

    def _end(self, session: StreamSession, status: SessionStatus) -> List[PlanChange]:
        changes = session._assembler.finish(session.text)
        session.status = status
        self._active = None
        self._issued.pop(session.id, None)
        self._notify(session, changes)
        _log.debug("session %s %s after %.2fs, %d chars",
                   session.id, status.name.lower(), session.elapsed, len(session.text))
        return changes

    def _notify(self, session: StreamSession, changes: List[PlanChange]) -> None:
        if self.listener is not None and changes:
            self.listener(session, changes)
