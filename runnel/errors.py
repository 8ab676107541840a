"""Exception types raised by runnel.

Malformed model output is never an error; these cover caller mistakes and
transport failures only.
"""


class RunnelError(Exception):
    """Base class for runnel errors."""


class SessionError(RunnelError):
    """A stream session was used in a way the coordinator does not allow."""


class SessionActiveError(SessionError):
    """A new session was started while another one is still streaming."""

    def __init__(self, active_id: str) -> None:
        super().__init__(
            f"session {active_id} is still active; cancel or complete it first"
        )
        self.active_id = active_id


class ForeignSessionError(SessionError):
    """A handle that this coordinator never issued."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"session {session_id} was not started by this coordinator")
        self.session_id = session_id


class ProviderError(RunnelError):
    """The producer could not deliver a reply."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
