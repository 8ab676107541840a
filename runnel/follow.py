"""Viewport auto-follow controller.

Decides whether the chat view should jump to the newest content. It starts
pinned to the bottom for every new reply, lets go as soon as the user
scrolls away, and only re-pins on an explicit "jump to latest" or when the
next reply starts. Widgets feed it scroll positions and content heights;
it never touches a widget itself.
"""

import logging
from enum import Enum, auto
from typing import Optional

_log = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 2


class FollowState(Enum):
    FOLLOWING = auto()
    DETACHED = auto()


class ScrollDirective(Enum):
    NONE = auto()
    SCROLL_TO_BOTTOM = auto()


class FollowController:
    """Pinned/detached state machine for a scrollable transcript."""

    def __init__(self, tolerance: int = DEFAULT_TOLERANCE) -> None:
        self.tolerance = max(0, tolerance)
        self.state = FollowState.FOLLOWING
        self._last_height: Optional[int] = None

    @property
    def pinned(self) -> bool:
        return self.state is FollowState.FOLLOWING

    @property
    def show_jump_affordance(self) -> bool:
        return self.state is FollowState.DETACHED

    def begin_session(self) -> ScrollDirective:
        """A new reply started streaming: follow it."""
        self._set(FollowState.FOLLOWING, "new session")
        return ScrollDirective.SCROLL_TO_BOTTOM

    def jump_to_latest(self) -> ScrollDirective:
        self._set(FollowState.FOLLOWING, "jump to latest")
        return ScrollDirective.SCROLL_TO_BOTTOM

    def on_user_scroll(self, offset: float, max_offset: float) -> None:
        """Record where a user-initiated scroll left the viewport."""
        if max_offset - offset > self.tolerance:
            self._set(FollowState.DETACHED, "user scrolled away")

    def on_content_changed(self, height: int) -> ScrollDirective:
        """Total scrollable height observed; returns what the view should do.

        Any growth counts, including a block re-laying itself out, not just
        new segments.
        """
        previous = self._last_height
        self._last_height = height
        if previous is not None and height <= previous:
            return ScrollDirective.NONE
        if not self.pinned:
            return ScrollDirective.NONE
        return ScrollDirective.SCROLL_TO_BOTTOM

    def _set(self, state: FollowState, reason: str) -> None:
        if state is not self.state:
            _log.debug("follow %s -> %s (%s)", self.state.name, state.name, reason)
        self.state = state
