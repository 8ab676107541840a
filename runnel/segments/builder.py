"""Segment builder: turn fence markers into prose and code segments.

The builder walks the markers once, starting outside code. Fences never
nest, so an opener seen inside a block is just part of the code. Whatever
is left when the buffer runs out inside a block becomes a single trailing
``OpenCode`` segment.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import ClassVar, List, Optional, Sequence, Tuple, Union

from .fences import FenceKind, FenceMarker, scan_fences

PLAINTEXT = "plaintext"

Span = Tuple[int, int]


class SegmentKind(Enum):
    PROSE = auto()
    COMPLETE_CODE = auto()
    OPEN_CODE = auto()


@dataclass(frozen=True)
class Prose:
    text: str
    span: Span = field(default=(0, 0), compare=False)

    kind: ClassVar[SegmentKind] = SegmentKind.PROSE
    is_code: ClassVar[bool] = False


@dataclass(frozen=True)
class _Code:
    language: str
    text: str
    inline: bool = False
    declared_language: str = field(default="", compare=False)
    span: Span = field(default=(0, 0), compare=False)

    is_code: ClassVar[bool] = True


@dataclass(frozen=True)
class CompleteCode(_Code):
    """A fenced block whose closing fence has arrived."""

    kind: ClassVar[SegmentKind] = SegmentKind.COMPLETE_CODE


@dataclass(frozen=True)
class OpenCode(_Code):
    """The block still being written. At most one, always last."""

    kind: ClassVar[SegmentKind] = SegmentKind.OPEN_CODE


Segment = Union[Prose, CompleteCode, OpenCode]


def with_text(segment: Segment, text: str, span: Span) -> Segment:
    """Copy of ``segment`` covering a different slice of the buffer."""
    return replace(segment, text=text, span=span)


def build_segments(
    text: str,
    markers: Optional[Sequence[FenceMarker]] = None,
) -> List[Segment]:
    """Split ``text`` into ordered segments.

    ``markers`` defaults to a fresh scan of ``text``.
    """
    if markers is None:
        markers = scan_fences(text)

    segments: List[Segment] = []
    pos = 0
    opener: Optional[FenceMarker] = None

    for marker in markers:
        if opener is None:
            if not marker.can_open:
                continue
            if marker.offset > pos:
                segments.append(Prose(text[pos:marker.offset], span=(pos, marker.offset)))
            opener = marker
            continue

        if marker.kind is not FenceKind.CLOSE:
            continue
        language = opener.language or PLAINTEXT
        segments.append(CompleteCode(
            language=language,
            text=text[opener.end:marker.offset],
            declared_language=language,
            span=(opener.offset, marker.end),
        ))
        pos = marker.end
        opener = None

    if opener is not None:
        language = opener.language or PLAINTEXT
        segments.append(OpenCode(
            language=language,
            text=text[opener.end:],
            declared_language=language,
            span=(opener.offset, len(text)),
        ))
    elif pos < len(text):
        segments.append(Prose(text[pos:], span=(pos, len(text))))

    return segments
