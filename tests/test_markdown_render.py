"""Tests for runnel.ui.markdown."""

from runnel.ui.markdown import inline_literal, render_markdown_line, render_prose


def test_plain_text():
    result = render_markdown_line("hello world")
    assert result.plain == "hello world"


def test_inline_code():
    result = render_markdown_line("use `foo` here")
    assert "foo" in result.plain
    assert "`" not in result.plain


def test_bold():
    result = render_markdown_line("this is **bold** text")
    assert result.plain == "this is bold text"


def test_italic():
    result = render_markdown_line("this is *italic* text")
    assert result.plain == "this is italic text"


def test_header_h1():
    result = render_markdown_line("# Big Title")
    assert result.plain == "Big Title"


def test_header_h3():
    result = render_markdown_line("### Minor")
    assert result.plain == "Minor"


def test_bullet_list():
    result = render_markdown_line("  - item one")
    assert result.plain == "  - item one"


def test_numbered_list():
    result = render_markdown_line("1. first item")
    assert result.plain == "1. first item"


def test_link():
    result = render_markdown_line("see [docs](https://example.com)")
    assert result.plain == "see docs"


def test_multiple_inline_codes():
    result = render_markdown_line("`a` and `b`")
    assert result.plain == " a  and  b "


def test_inline_literal_padding():
    assert inline_literal("ls -la").plain == " ls -la "


def test_render_prose_keeps_lines():
    result = render_prose("# Title\nbody **text**\n- item")
    assert result.plain == "Title\nbody text\n- item"


def test_blockquote():
    result = render_markdown_line("> quoted *words*")
    assert result.plain == "│ quoted words"


def test_horizontal_rule():
    result = render_markdown_line("---")
    assert set(result.plain) == {"─"}


def test_code_wins_over_emphasis():
    result = render_markdown_line("`**not bold**`")
    assert result.plain == " **not bold** "
