"""Trailing-prose reclassifier.

Models sometimes run straight from a code sample into explanation without
closing the fence. When the last paragraph of the open block reads like a
sentence and has almost no code punctuation, it is split off as prose.
The result depends only on the current buffer, so it can flip back to code
on a later pass if the paragraph turns out to be code after all.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple

from .builder import OpenCode, Prose, Segment, with_text
from .fences import FENCE

_log = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"
SYMBOLS = frozenset("{}();=<>")

DEFAULT_LEAD_INS: Tuple[str, ...] = (
    "Note",
    "Explanation",
    "In this",
    "Summary",
    "Output",
    "Result",
    "This example",
)

_LIST_ITEM = re.compile(r"^(?:[-*]\s+|\d+\.\s+)")
_SENTENCE = re.compile(r"^[A-Z][a-z]")


@dataclass(frozen=True)
class ReclassifyThresholds:
    """Tunable knobs for the prose heuristic."""

    symbol_density: float = 0.03
    min_sentence_words: int = 3
    lead_ins: Tuple[str, ...] = DEFAULT_LEAD_INS

    def lead_in_pattern(self) -> "re.Pattern[str]":
        return _lead_in_regex(self.lead_ins)


DEFAULT_THRESHOLDS = ReclassifyThresholds()


@lru_cache(maxsize=32)
def _lead_in_regex(words: Tuple[str, ...]) -> "re.Pattern[str]":
    alternatives = "|".join(re.escape(w) for w in words) or r"(?!)"
    return re.compile(rf"^(?:{alternatives})", re.IGNORECASE)


def symbol_density(text: str) -> float:
    """Fraction of characters in ``text`` that are code punctuation."""
    count = sum(1 for ch in text if ch in SYMBOLS)
    return count / (len(text) or 1)


def looks_like_prose(
    paragraph: str,
    thresholds: ReclassifyThresholds = DEFAULT_THRESHOLDS,
) -> bool:
    """True when ``paragraph`` starts like a sentence and is symbol-sparse."""
    first_line = paragraph.split("\n", 1)[0].strip()
    if not first_line:
        return False
    prose_start = (
        bool(thresholds.lead_in_pattern().match(first_line))
        or bool(_LIST_ITEM.match(first_line))
        or (
            bool(_SENTENCE.match(first_line))
            and len(first_line.split()) >= thresholds.min_sentence_words
        )
    )
    if not prose_start:
        return False
    return symbol_density(paragraph) < thresholds.symbol_density


def split_trailing_prose(
    code: str,
    thresholds: ReclassifyThresholds = DEFAULT_THRESHOLDS,
) -> Optional[int]:
    """Return the offset in ``code`` where trailing prose starts, or None.

    Only the paragraph after the last blank line is a candidate, and blank
    lines at the very end do not count as a boundary. The code part keeps
    the first line break of that boundary.
    """
    content_end = len(code.rstrip())
    boundary = code.rfind(PARAGRAPH_BREAK, 0, content_end)
    if boundary == -1:
        return None

    tail = code[boundary + len(PARAGRAPH_BREAK):]
    if FENCE in tail:
        # a real fence transition is in progress; the next scan handles it
        return None
    if not looks_like_prose(tail, thresholds):
        return None

    return boundary + len(PARAGRAPH_BREAK)


def reclassify_trailing_prose(
    segments: List[Segment],
    thresholds: ReclassifyThresholds = DEFAULT_THRESHOLDS,
) -> List[Segment]:
    """Split trailing commentary off the final open block, if any."""
    if not segments or not isinstance(segments[-1], OpenCode):
        return segments

    block = segments[-1]
    cut = split_trailing_prose(block.text, thresholds)
    if cut is None:
        return segments

    span_start, span_end = block.span
    body_start = span_end - len(block.text)
    code_end = cut - 1
    _log.debug("reclassifying %d trailing chars of open %s block as prose",
               len(block.text) - cut, block.language)

    code_part = with_text(block, block.text[:code_end], (span_start, body_start + code_end))
    prose_part = Prose(block.text[cut:], span=(body_start + cut, span_end))
    return segments[:-1] + [code_part, prose_part]
