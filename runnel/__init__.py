"""Runnel - streaming chat that renders code blocks while they are written."""

__version__ = "0.1.0"

from .errors import ForeignSessionError, ProviderError, RunnelError, SessionActiveError, SessionError
from .follow import FollowController, FollowState, ScrollDirective
from .segments import RenderPlan, StreamAssembler, compute_plan, diff_plans
from .session import SessionCoordinator, StreamSession

__all__ = [
    "__version__",
    "RunnelError",
    "SessionError",
    "SessionActiveError",
    "ForeignSessionError",
    "ProviderError",
    "FollowController",
    "FollowState",
    "ScrollDirective",
    "RenderPlan",
    "StreamAssembler",
    "compute_plan",
    "diff_plans",
    "SessionCoordinator",
    "StreamSession",
]
