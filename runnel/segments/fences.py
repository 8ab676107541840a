"""Fence scanner: find triple-backtick markers in a text buffer.

A fence only counts at the start of a line. Openers carry a language label
and must be followed by a line break; a bare fence line can either open a
plaintext block or close the current one, which the segment builder decides.
Partial tokens at the end of the buffer (two backticks, or a label with no
line break yet) are never reported.
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

FENCE = "```"

_FENCE_LINE = re.compile(
    r"^```(?P<lang>[A-Za-z0-9_-]+)?[ \t]*(?P<eol>\r?\n|\Z)",
    re.MULTILINE,
)


class FenceKind(Enum):
    OPEN = auto()
    CLOSE = auto()


@dataclass(frozen=True)
class FenceMarker:
    """One fence occurrence.

    ``offset`` is where the backticks start and ``end`` is just past the
    marker, including its line break when there is one. ``terminated`` is
    False only for a bare fence sitting at the very end of the buffer.
    """

    offset: int
    kind: FenceKind
    end: int
    language: Optional[str] = None
    terminated: bool = True

    @property
    def can_open(self) -> bool:
        return self.kind is FenceKind.OPEN or self.terminated


def scan_fences(text: str) -> List[FenceMarker]:
    """Return every fence marker in ``text`` in document order."""
    markers: List[FenceMarker] = []
    for m in _FENCE_LINE.finditer(text):
        lang = m.group("lang")
        has_eol = bool(m.group("eol"))
        if lang:
            if not has_eol:
                # "```pyth" at the end of the buffer: label still arriving
                continue
            markers.append(FenceMarker(
                offset=m.start(),
                kind=FenceKind.OPEN,
                end=m.end(),
                language=lang,
            ))
        else:
            markers.append(FenceMarker(
                offset=m.start(),
                kind=FenceKind.CLOSE,
                end=m.end(),
                terminated=has_eol,
            ))
    return markers
