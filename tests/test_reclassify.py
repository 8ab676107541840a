"""Tests for the trailing-prose reclassifier."""

from runnel.segments import (
    CompleteCode,
    OpenCode,
    Prose,
    ReclassifyThresholds,
    compute_plan,
    looks_like_prose,
    symbol_density,
)
from runnel.segments.reclassify import reclassify_trailing_prose, split_trailing_prose


def test_sentence_after_code_becomes_prose():
    plan = compute_plan("```js\nconst x=1\n\nThis function sets x to one.")
    assert plan.segments == (
        OpenCode(language="js", text="const x=1\n"),
        Prose("This function sets x to one."),
    )


def test_code_paragraph_stays_code():
    text = "```python\ndef f():\n\n    return 1\n"
    plan = compute_plan(text)
    assert len(plan) == 1
    assert plan[0] == OpenCode(language="python", text="def f():\n\n    return 1\n")


def test_lead_in_word():
    plan = compute_plan("```py\nx = 1\n\nNote: x is one\n")
    assert plan.segments == (
        OpenCode(language="py", text="x = 1\n"),
        Prose("Note: x is one\n"),
    )


def test_list_marker():
    plan = compute_plan("```py\nx = 1\n\n- first we set x\n")
    assert isinstance(plan[-1], Prose)
    assert plan[-1].text == "- first we set x\n"


def test_dense_sentence_stays_code():
    plan = compute_plan("```js\nx=1\n\nCall foo(a, b) = (c);\n")
    assert len(plan) == 1
    assert isinstance(plan[0], OpenCode)


def test_no_paragraph_break():
    assert split_trailing_prose("This is a sentence with words") is None


def test_fence_in_tail_aborts():
    assert split_trailing_prose("x = 1\n\nThis has ``` inside it") is None


def test_trailing_blank_lines_ignored():
    code = "x = 1\n\nThis is plain prose.\n\n"
    assert split_trailing_prose(code) == len("x = 1\n\n")


def test_only_last_paragraph_splits():
    plan = compute_plan("```js\nconst x=1\n\nFirst we set x to one.\n\nThen we print it out.")
    assert plan.segments == (
        OpenCode(language="js", text="const x=1\n\nFirst we set x to one.\n"),
        Prose("Then we print it out."),
    )


def test_split_offset_is_after_last_boundary():
    code = "x = 1\n\nFirst we set x.\n\nThen we print it out.\n"
    assert split_trailing_prose(code) == len("x = 1\n\nFirst we set x.\n\n")


def test_complete_blocks_are_untouched():
    plan = compute_plan("```js\nconst x=1\n\nThis function sets x to one.\n```\n")
    assert plan.segments == (
        CompleteCode(language="js", text="const x=1\n\nThis function sets x to one.\n"),
    )


def test_only_last_segment_considered():
    segments = [Prose("a"), CompleteCode(language="py", text="x\n\nThis is a sentence.")]
    assert reclassify_trailing_prose(segments) is segments


def test_split_spans():
    text = "```js\nconst x=1\n\nThis function sets x to one."
    plan = compute_plan(text)
    code, prose = plan.segments
    assert code.span[0] == 0
    assert prose.span[1] == len(text)
    assert text[prose.span[0]:prose.span[1]] == prose.text


def test_flips_back_when_paragraph_grows_into_code():
    first = compute_plan("```py\nx = 1\n\nThis is")
    assert isinstance(first[-1], OpenCode)
    second = compute_plan("```py\nx = 1\n\nThis is a value\n")
    assert isinstance(second[-1], Prose)
    third = compute_plan("```py\nx = 1\n\nThis is a value\nfoo(bar(baz(1)));\n")
    assert isinstance(third[-1], OpenCode)


class TestLooksLikeProse:

    def test_capitalized_sentence(self):
        assert looks_like_prose("The result is stored in x.")

    def test_too_few_words(self):
        assert not looks_like_prose("The end")

    def test_lowercase_start(self):
        assert not looks_like_prose("return the value now")

    def test_numbered_item(self):
        assert looks_like_prose("1. install the package")

    def test_lead_in_is_case_insensitive(self):
        assert looks_like_prose("summary: done")

    def test_blank(self):
        assert not looks_like_prose("   \n")

    def test_custom_thresholds(self):
        strict = ReclassifyThresholds(min_sentence_words=10, lead_ins=())
        assert not looks_like_prose("Note: x is one", strict)
        assert looks_like_prose("Note: x is one")


def test_symbol_density():
    assert symbol_density("{}") == 1.0
    assert symbol_density("") == 0
    assert symbol_density("ab()") == 0.5
