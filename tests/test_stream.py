"""Tests for runnel.ui.stream."""

import re
from io import StringIO

from rich.console import Console

from runnel.segments import ReclassifyThresholds, StreamAssembler
from runnel.theme import get_speaker_theme
from runnel.ui.stream import StreamRenderer


def _strip_ansi(text: str) -> str:
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


def _capture_console() -> Console:
    return Console(file=StringIO(), width=80, force_terminal=True)


def _make_renderer(con: Console | None = None, **kwargs) -> tuple[StreamRenderer, Console]:
    con = con or _capture_console()
    return StreamRenderer(get_speaker_theme("ollama"), con, **kwargs), con


def _output(con: Console) -> str:
    return _strip_ansi(con.file.getvalue())


def test_simple_prose():
    renderer, con = _make_renderer()
    renderer.feed("hello world\n")
    renderer.finish()
    output = _output(con)
    assert "hello world" in output
    assert "oll" in output


def test_multiline_prose():
    renderer, con = _make_renderer()
    renderer.feed("line one\nline two\nline three\n")
    renderer.finish()
    output = _output(con)
    assert "line one" in output
    assert "line two" in output
    assert "line three" in output


def test_complete_lines_print_before_finish():
    renderer, con = _make_renderer()
    renderer.feed("first line\nsecond")
    output = _output(con)
    assert "first line" in output
    assert "second" not in output
    renderer.finish()
    assert "second" in _output(con)


def test_lines_printed_once():
    renderer, con = _make_renderer()
    renderer.feed("alpha\n")
    renderer.feed("beta\n")
    renderer.feed("```py\n")
    renderer.finish()
    output = _output(con)
    assert output.count("alpha") == 1
    assert output.count("beta") == 1


def test_code_block():
    renderer, con = _make_renderer()
    renderer.feed("```python\nprint('hi')\nprint('bye')\n```\n")
    renderer.finish()
    output = _output(con)
    assert "python" in output
    assert "print" in output
    assert "unterminated" not in output


def test_code_waits_for_close_fence():
    renderer, con = _make_renderer()
    renderer.feed("```python\nx = 1\ny = 2\n")
    assert "x = 1" not in _output(con)
    renderer.feed("```\nafter\n")
    output = _output(con)
    assert "x = 1" in output
    assert "after" in output


def test_mixed_prose_and_code():
    renderer, con = _make_renderer()
    renderer.feed("Before code:\n```js\nconsole.log(1)\nconsole.log(2)\n```\nAfter code.\n")
    renderer.finish()
    output = _output(con)
    assert "Before code" in output
    assert "console" in output
    assert "After code" in output
    assert output.index("Before code") < output.index("console") < output.index("After code")


def test_chunked_input():
    """Arbitrary chunk boundaries are handled correctly."""
    renderer, con = _make_renderer()
    renderer.feed("hel")
    renderer.feed("lo\n")
    renderer.finish()
    assert "hello" in _output(con)


def test_chunked_code_fence():
    """Code fence split across chunks."""
    renderer, con = _make_renderer()
    for chunk in ("``", "`py", "thon\nx=1\n", "y=2\n", "``", "`\n"):
        renderer.feed(chunk)
    renderer.finish()
    output = _output(con)
    assert "python" in output
    assert "``" not in output


def test_unterminated_code_block():
    """Unterminated code blocks still render on finish()."""
    renderer, con = _make_renderer()
    renderer.feed("```python\nx=1\ny=2\n")
    renderer.finish()
    output = _output(con)
    assert "x=1" in output
    assert "unterminated" in output


def test_trailing_prose_split_from_open_block():
    renderer, con = _make_renderer()
    renderer.feed("```js\nconst x = 1;\nconst y = 2;\n\nThis sets two constants.")
    renderer.finish()
    output = _output(con)
    assert "This sets two constants." in output
    code_line = next(line for line in output.splitlines() if "const y" in line)
    assert "│" in code_line
    prose_line = next(line for line in output.splitlines() if "This sets" in line)
    assert "│" not in prose_line


def test_single_line_literal():
    renderer, con = _make_renderer()
    renderer.feed("Run:\n```sh\n```\ndone\n")
    renderer.finish()
    assert "done" in _output(con)


def test_custom_assembler():
    assembler = StreamAssembler(thresholds=ReclassifyThresholds(symbol_density=0.0))
    renderer, con = _make_renderer(assembler=assembler)
    assert renderer.assembler is assembler
    renderer.feed("```js\nconst x = 1;\nconst y = 2;\n\nThis sets two constants.")
    renderer.finish()
    line = next(line for line in _output(con).splitlines() if "This sets" in line)
    assert "│" in line


def test_empty_input():
    renderer, con = _make_renderer()
    renderer.feed("")
    renderer.finish()
    assert _output(con) == ""


def test_first_line_flag():
    renderer, con = _make_renderer()
    assert renderer.is_first_line is True
    renderer.feed("first\n")
    assert renderer.is_first_line is False


def test_text_accumulates():
    renderer, _ = _make_renderer()
    renderer.feed("a")
    renderer.feed("b")
    assert renderer.text == "ab"
