"""Runnel theme: canonical color system and speaker identities.

All hex values live here. Widgets never hardcode colors.
"""

from dataclasses import dataclass
from typing import Dict


# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Palette:
    """Full surface / text / functional color palette."""

    # Surfaces
    bg: str = "#0d1117"
    surface: str = "#121218"
    code_bg: str = "#161b22"
    border: str = "#30363d"
    border_subtle: str = "#1a1a28"

    # Text hierarchy
    text_bright: str = "#e8e8f0"
    text_primary: str = "#c9d1d9"
    text_dim: str = "#6e7681"
    text_muted: str = "#363648"

    # Functional
    cyan: str = "#00d4e5"
    green: str = "#34d399"
    yellow: str = "#e5c747"
    red: str = "#e55a6e"
    blue: str = "#5a9cf0"

    # Semantic aliases
    inline_code: str = "#00d4e5"
    streaming: str = "#e5c747"
    jump: str = "#5a9cf0"
    error: str = "#e55a6e"
    spinner: str = "#e5c747"


PALETTE = Palette()


# ---------------------------------------------------------------------------
# Speaker themes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SpeakerTheme:
    """Visual identity for one side of the conversation."""

    name: str
    accent: str
    abbreviation: str   # 3-char label for gutter


SPEAKERS: Dict[str, SpeakerTheme] = {
    "you": SpeakerTheme(name="you", accent=PALETTE.text_dim, abbreviation="you"),
    "system": SpeakerTheme(name="system", accent=PALETTE.text_dim, abbreviation="sys"),
    "ollama": SpeakerTheme(name="ollama", accent="#f0956c", abbreviation="oll"),
    "replay": SpeakerTheme(name="replay", accent="#b44dff", abbreviation="rpl"),
}


def get_speaker_theme(name: str) -> SpeakerTheme:
    """Look up a speaker theme by name, with a neutral fallback."""
    theme = SPEAKERS.get(name)
    if theme is not None:
        return theme
    return SpeakerTheme(name=name, accent=PALETTE.cyan, abbreviation=name[:3] or "???")


def get_accent(speaker: str) -> str:
    """Get the accent hex for a speaker."""
    return get_speaker_theme(speaker).accent


def get_abbreviation(speaker: str) -> str:
    """Get the 3-char gutter abbreviation for a speaker."""
    return get_speaker_theme(speaker).abbreviation
