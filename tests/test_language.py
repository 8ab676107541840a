"""Tests for the language gate."""

from runnel.segments import PLAINTEXT, CompleteCode, OpenCode, Prose, compute_plan, language_set
from runnel.segments.fences import scan_fences
from runnel.segments.language import DEFAULT_LANGUAGES, effective_language, gate_segment


def test_known_language_kept_and_lowercased():
    plan = compute_plan("```Python\nx = 1\ny = 2\n```")
    assert plan[0].language == "python"
    assert plan[0].declared_language == "Python"
    assert plan[0].inline is False


def test_unknown_language_becomes_plaintext():
    plan = compute_plan("```brainfuck\n+++\n++\n```")
    assert plan[0].language == PLAINTEXT
    assert plan[0].declared_language == "brainfuck"


def test_empty_block_is_inline():
    plan = compute_plan("```sh\n```")
    assert plan[0] == CompleteCode(language="sh", text="", inline=True)


def test_first_line_still_arriving_is_inline():
    plan = compute_plan("```python\nprint(")
    assert plan[0] == OpenCode(language="python", text="print(", inline=True)


def test_single_fenced_line_is_a_block():
    plan = compute_plan("```sh\nls -la\n```\n")
    assert plan[0].inline is False


def test_prose_untouched():
    seg = Prose("hello")
    assert gate_segment(seg) is seg


def test_effective_language():
    assert effective_language("JS") == "js"
    assert effective_language("") == PLAINTEXT
    assert effective_language("cobol") == PLAINTEXT


def test_language_set_extras():
    allowed = language_set(["Cobol ", "", "zig"])
    assert "cobol" in allowed
    assert "zig" in allowed
    assert "python" in allowed
    assert effective_language("COBOL", allowed) == "cobol"


def test_extra_languages_flow_through_plan():
    plan = compute_plan("```zig\nconst x = 1;\nconst y = 2;\n```", languages=language_set(["zig"]))
    assert plan[0].language == "zig"


def test_every_default_language_can_be_declared():
    for lang in DEFAULT_LANGUAGES:
        markers = scan_fences(f"```{lang}\n")
        assert [m.language for m in markers] == [lang], lang
