"""Line-oriented markdown styling for prose segments.

Fenced code never reaches this module: the segmenter splits it out first,
so every line here is prose. Each line becomes one Rich Text.
"""

import re
from rich.text import Text

from ..theme import PALETTE

# One pass, leftmost match wins; alternatives are tried in order so `code`
# beats emphasis that happens to start at the same column.
_INLINE = re.compile(
    r"`(?P<code>[^`]+)`"
    r"|\*\*(?P<bold>.+?)\*\*"
    r"|(?<!\*)\*(?P<italic>[^*\s][^*]*)\*(?!\*)"
    r"|\[(?P<link>[^\]]+)\]\([^)]+\)"
)
_HEADER = re.compile(r"^(#{1,6})\s+(.*)")
_LIST_ITEM = re.compile(r"^(?P<indent>\s*)(?P<marker>[-*+]|\d+\.)\s+(?P<body>.*)")
_QUOTE = re.compile(r"^\s*>\s?(.*)")
_RULE = re.compile(r"^\s*([-*_])(\s*\1){2,}\s*$")


def _inline_style(kind: str) -> str:
    return {
        "bold": f"bold {PALETTE.text_bright}",
        "italic": f"italic {PALETTE.text_primary}",
        "link": f"underline {PALETTE.inline_code}",
    }[kind]


def inline_format(text: str, base_style: str = PALETTE.text_primary) -> Text:
    """Style inline code, bold, italic and link text within one line."""
    result = Text()
    pos = 0
    for m in _INLINE.finditer(text):
        if m.start() > pos:
            result.append(text[pos:m.start()], style=base_style)
        kind = m.lastgroup
        if kind == "code":
            result.append_text(inline_literal(m.group("code")))
        else:
            result.append(m.group(kind), style=_inline_style(kind))
        pos = m.end()
    if pos < len(text):
        result.append(text[pos:], style=base_style)
    return result


def inline_literal(code: str) -> Text:
    """Style a code snippet the way inline `code` is shown."""
    return Text(f" {code} ", style=f"on {PALETTE.surface} {PALETTE.inline_code}")


def render_markdown_line(line: str) -> Text:
    """Convert one markdown line to styled Rich Text.

    Headers drop their hashes. List markers and indentation are kept but
    dimmed. Blockquotes get a bar, rules become a short line of box chars.
    """
    m = _HEADER.match(line)
    if m:
        level = len(m.group(1))
        style = f"bold {PALETTE.text_bright}" if level <= 2 else f"bold {PALETTE.text_primary}"
        return Text(m.group(2), style=style)

    if _RULE.match(line):
        return Text("─" * 24, style=f"dim {PALETTE.border}")

    m = _LIST_ITEM.match(line)
    if m:
        t = Text(m.group("indent"))
        t.append(m.group("marker"), style=PALETTE.text_dim)
        t.append_text(inline_format(f" {m.group('body')}"))
        return t

    m = _QUOTE.match(line)
    if m:
        t = Text("│ ", style=f"dim {PALETTE.text_dim}")
        t.append_text(inline_format(m.group(1), base_style=f"italic {PALETTE.text_dim}"))
        return t

    return inline_format(line)


def render_prose(content: str) -> Text:
    """Render multi-line prose, one markdown line at a time."""
    return Text("\n").join(render_markdown_line(line) for line in content.split("\n"))
