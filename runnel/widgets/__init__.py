"""Runnel TUI widgets."""

from .code_block import CodeBlock, InlineLiteral
from .message import ChatHistory, JumpToLatest, MessageWidget, ThinkingIndicator
from .stream_message import ProseBlock, StreamMessage

__all__ = [
    "CodeBlock",
    "InlineLiteral",
    "ChatHistory",
    "JumpToLatest",
    "MessageWidget",
    "ThinkingIndicator",
    "ProseBlock",
    "StreamMessage",
]
