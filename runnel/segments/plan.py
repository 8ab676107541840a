"""Stream assembler: buffer in, render plan out.

``compute_plan`` is the whole pipeline (scan, build, reclassify, gate) as a
pure function of the buffer. ``StreamAssembler`` wraps it for a growing
reply: it remembers the previous plan and hands the renderer only the
segment-level changes, so a code block that is merely getting longer is
updated in place instead of being torn down and rebuilt.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, Iterator, List, Optional, Tuple

from .builder import OpenCode, Segment, build_segments
from .fences import scan_fences
from .language import DEFAULT_LANGUAGES, gate_languages
from .reclassify import DEFAULT_THRESHOLDS, ReclassifyThresholds, reclassify_trailing_prose

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderPlan:
    """Ordered decomposition of the buffer into segments."""

    segments: Tuple[Segment, ...] = ()

    def __iter__(self) -> Iterator[Segment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __getitem__(self, index: int) -> Segment:
        return self.segments[index]

    @property
    def open_index(self) -> Optional[int]:
        """Index of the open code block, if there is one."""
        for i in range(len(self.segments) - 1, -1, -1):
            if isinstance(self.segments[i], OpenCode):
                return i
        return None

    @property
    def is_open(self) -> bool:
        return self.open_index is not None

    @property
    def stable_count(self) -> int:
        """Number of leading segments no further append can change."""
        open_index = self.open_index
        if open_index is not None:
            return open_index
        return max(len(self.segments) - 1, 0)

    def to_dicts(self) -> List[dict]:
        rows = []
        for seg in self.segments:
            row = {"kind": seg.kind.name.lower(), "text": seg.text, "span": list(seg.span)}
            if seg.is_code:
                row["language"] = seg.language
                row["declared_language"] = seg.declared_language
                row["inline"] = seg.inline
            rows.append(row)
        return rows


def compute_plan(
    buffer: str,
    thresholds: ReclassifyThresholds = DEFAULT_THRESHOLDS,
    languages: FrozenSet[str] = DEFAULT_LANGUAGES,
) -> RenderPlan:
    """Decompose ``buffer`` into a render plan. Never raises."""
    segments = build_segments(buffer, scan_fences(buffer))
    segments = reclassify_trailing_prose(segments, thresholds)
    segments = gate_languages(segments, languages)
    return RenderPlan(tuple(segments))


# ---------------------------------------------------------------------------
# Diffing
# ---------------------------------------------------------------------------

class PlanAction(Enum):
    APPEND = auto()
    UPDATE = auto()
    REPLACE = auto()
    REMOVE = auto()


@dataclass(frozen=True)
class PlanChange:
    action: PlanAction
    index: int
    segment: Optional[Segment] = None


def _family(segment: Segment) -> tuple:
    # Open and complete code share a family so closing a block is an update.
    if segment.is_code:
        return ("code", segment.inline, segment.language)
    return ("prose",)


def diff_plans(old: RenderPlan, new: RenderPlan) -> List[PlanChange]:
    """Segment-by-segment changes that turn ``old`` into ``new``.

    Removals come last and run from the highest index down, so applying the
    list in order never shifts an index that a later change refers to.
    """
    changes: List[PlanChange] = []
    shared = min(len(old), len(new))
    for i in range(shared):
        before, after = old[i], new[i]
        if before == after:
            continue
        if _family(before) == _family(after):
            changes.append(PlanChange(PlanAction.UPDATE, i, after))
        else:
            changes.append(PlanChange(PlanAction.REPLACE, i, after))
    for i in range(shared, len(new)):
        changes.append(PlanChange(PlanAction.APPEND, i, new[i]))
    for i in range(len(old) - 1, shared - 1, -1):
        changes.append(PlanChange(PlanAction.REMOVE, i))
    return changes


# ---------------------------------------------------------------------------
# Assembler
# ---------------------------------------------------------------------------

@dataclass
class StreamAssembler:
    """Recomputes the plan on every growth event and reports what changed."""

    thresholds: ReclassifyThresholds = DEFAULT_THRESHOLDS
    languages: FrozenSet[str] = DEFAULT_LANGUAGES
    plan: RenderPlan = field(default_factory=RenderPlan)
    frozen: bool = False
    _buffer: str = field(default="", init=False, repr=False)

    @property
    def buffer(self) -> str:
        return self._buffer

    def update(self, buffer: str) -> List[PlanChange]:
        """Re-derive the plan for the latest buffer snapshot."""
        if self.frozen:
            _log.debug("ignoring update of %d chars on a frozen assembler", len(buffer))
            return []
        if not buffer.startswith(self._buffer):
            _log.warning(
                "buffer snapshot does not extend the previous one (%d -> %d chars)",
                len(self._buffer), len(buffer),
            )
        self._buffer = buffer
        new_plan = compute_plan(buffer, self.thresholds, self.languages)
        changes = diff_plans(self.plan, new_plan)
        self.plan = new_plan
        return changes

    def finish(self, buffer: Optional[str] = None) -> List[PlanChange]:
        """Run the final pass and stop accepting updates."""
        if self.frozen:
            return []
        changes = self.update(self._buffer if buffer is None else buffer)
        self.frozen = True
        return changes
