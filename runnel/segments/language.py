"""Language gate: pick how each code segment is presented.

One-line snippets are never worth a full code view and render as inline
literals. Multi-line blocks keep their label only when it is on the
allow-list; anything else is shown as plaintext.
"""

from dataclasses import replace
from typing import FrozenSet, Iterable, List

from .builder import PLAINTEXT, Segment

DEFAULT_LANGUAGES: FrozenSet[str] = frozenset({
    "javascript", "typescript", "js", "ts", "jsx", "tsx",
    "python", "py", "go", "rust", "rs", "c", "cpp",
    "java", "kotlin", "swift", "php", "ruby", "rb", "r",
    "bash", "sh", "zsh", "powershell", "ps1", "shell",
    "sql", "yaml", "yml", "json", "toml", "ini",
    "dockerfile", "gradle", "xml", "html", "css", "scss", "less",
})


def language_set(extra: Iterable[str] = ()) -> FrozenSet[str]:
    """The default allow-list plus ``extra`` labels, lower-cased."""
    return DEFAULT_LANGUAGES | {lang.strip().lower() for lang in extra if lang.strip()}


def effective_language(declared: str, allowed: FrozenSet[str] = DEFAULT_LANGUAGES) -> str:
    lang = (declared or "").lower()
    return lang if lang in allowed else PLAINTEXT


def gate_segment(segment: Segment, allowed: FrozenSet[str] = DEFAULT_LANGUAGES) -> Segment:
    if not segment.is_code:
        return segment
    return replace(
        segment,
        language=effective_language(segment.declared_language or segment.language, allowed),
        inline="\n" not in segment.text,
    )


def gate_languages(
    segments: List[Segment],
    allowed: FrozenSet[str] = DEFAULT_LANGUAGES,
) -> List[Segment]:
    return [gate_segment(seg, allowed) for seg in segments]
