"""Incremental segmentation of a streaming reply into prose and code."""

from .fences import FENCE, FenceKind, FenceMarker, scan_fences
from .builder import (
    PLAINTEXT,
    CompleteCode,
    OpenCode,
    Prose,
    Segment,
    SegmentKind,
    build_segments,
)
from .reclassify import (
    DEFAULT_THRESHOLDS,
    ReclassifyThresholds,
    looks_like_prose,
    reclassify_trailing_prose,
    symbol_density,
)
from .language import DEFAULT_LANGUAGES, gate_languages, gate_segment, language_set
from .plan import (
    PlanAction,
    PlanChange,
    RenderPlan,
    StreamAssembler,
    compute_plan,
    diff_plans,
)

__all__ = [
    "FENCE",
    "FenceKind",
    "FenceMarker",
    "scan_fences",
    "PLAINTEXT",
    "CompleteCode",
    "OpenCode",
    "Prose",
    "Segment",
    "SegmentKind",
    "build_segments",
    "DEFAULT_THRESHOLDS",
    "ReclassifyThresholds",
    "looks_like_prose",
    "reclassify_trailing_prose",
    "symbol_density",
    "DEFAULT_LANGUAGES",
    "gate_languages",
    "gate_segment",
    "language_set",
    "PlanAction",
    "PlanChange",
    "RenderPlan",
    "StreamAssembler",
    "compute_plan",
    "diff_plans",
]
