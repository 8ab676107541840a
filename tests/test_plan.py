"""Tests for render plans, plan diffing and the stream assembler."""

import logging

import pytest

from runnel.segments import (
    CompleteCode,
    OpenCode,
    PlanAction,
    PlanChange,
    Prose,
    RenderPlan,
    StreamAssembler,
    compute_plan,
    diff_plans,
)

SAMPLE = (
    "Here is the fix:\n"
    "```python\n"
    "def add(a, b):\n"
    "    return a + b\n"
    "```\n"
    "And a shell check:\n"
    "```sh\n"
    "pytest -q\n"
    "echo done\n"
    "```\n"
    "That's all."
)


def test_idempotent():
    assert compute_plan(SAMPLE) == compute_plan(SAMPLE)


def test_balanced_fences_have_no_open_block():
    plan = compute_plan(SAMPLE)
    assert not plan.is_open
    assert not any(isinstance(seg, OpenCode) for seg in plan)


def test_unterminated_block_is_buffer_suffix():
    buffer = "Look:\n```go\nfunc main() {\n\tfmt.Println(1)\n"
    plan = compute_plan(buffer)
    assert isinstance(plan[-1], OpenCode)
    assert plan[-1].text == buffer[len("Look:\n```go\n"):]


@pytest.mark.parametrize("cut", range(0, len(SAMPLE) + 1, 7))
def test_prefixes_never_fail(cut):
    plan = compute_plan(SAMPLE[:cut])
    if plan.is_open:
        assert plan.open_index == len(plan) - 1


def test_malformed_input_degrades_to_prose():
    plan = compute_plan("`` not a fence ``\n``\n")
    assert plan.segments == (Prose("`` not a fence ``\n``\n"),)


def test_stable_count():
    assert compute_plan("").stable_count == 0
    assert compute_plan("Hello").stable_count == 0
    assert compute_plan("Hi\n```py\nx = 1\n").stable_count == 1
    assert compute_plan("Hi\n```py\nx = 1\n```\nbye").stable_count == 2


def test_to_dicts():
    rows = compute_plan("Hi\n```Python\nx = 1\n```\n").to_dicts()
    assert rows[0] == {"kind": "prose", "text": "Hi\n", "span": [0, 3]}
    assert rows[1]["kind"] == "complete_code"
    assert rows[1]["language"] == "python"
    assert rows[1]["declared_language"] == "Python"
    assert rows[1]["inline"] is False


class TestDiffPlans:

    def test_no_change(self):
        plan = compute_plan(SAMPLE)
        assert diff_plans(plan, plan) == []

    def test_growing_block_is_update(self):
        old = compute_plan("```py\nx = 1\n")
        new = compute_plan("```py\nx = 1\ny = 2\n")
        assert diff_plans(old, new) == [PlanChange(PlanAction.UPDATE, 0, new[0])]

    def test_closing_block_is_update(self):
        old = compute_plan("```py\nx = 1\n")
        new = compute_plan("```py\nx = 1\n```\n")
        changes = diff_plans(old, new)
        assert changes == [PlanChange(PlanAction.UPDATE, 0, CompleteCode(language="py", text="x = 1\n"))]

    def test_new_segment_is_append(self):
        old = compute_plan("Hi\n")
        new = compute_plan("Hi\n```py\nx = 1\n")
        assert diff_plans(old, new) == [PlanChange(PlanAction.APPEND, 1, new[1])]

    def test_family_change_is_replace(self):
        old = compute_plan("```py\nprint(")
        new = compute_plan("```py\nprint(1)\n")
        assert old[0].inline and not new[0].inline
        assert diff_plans(old, new) == [PlanChange(PlanAction.REPLACE, 0, new[0])]

    def test_removals_last_and_descending(self):
        old = RenderPlan((Prose("a"), Prose("b"), Prose("c")))
        new = RenderPlan((Prose("x"),))
        changes = diff_plans(old, new)
        assert [(c.action, c.index) for c in changes] == [
            (PlanAction.UPDATE, 0),
            (PlanAction.REMOVE, 2),
            (PlanAction.REMOVE, 1),
        ]

    def test_reclassified_prose_appends(self):
        old = compute_plan("```js\nconst x=1\n\nThis function")
        new = compute_plan("```js\nconst x=1\n\nThis function sets x.")
        actions = [(c.action, c.index) for c in diff_plans(old, new)]
        assert actions == [(PlanAction.UPDATE, 0), (PlanAction.APPEND, 1)]


class TestStreamAssembler:

    def test_growth_keeps_prefix_stable(self):
        assembler = StreamAssembler()
        previous = RenderPlan()
        for end in range(1, len(SAMPLE) + 1):
            changes = assembler.update(SAMPLE[:end])
            stable = previous.stable_count
            for change in changes:
                assert change.index >= stable
            previous = assembler.plan
        assert assembler.plan == compute_plan(SAMPLE)

    def test_replaying_changes_rebuilds_plan(self):
        assembler = StreamAssembler()
        mirror = []
        for end in range(0, len(SAMPLE) + 1, 5):
            for change in assembler.update(SAMPLE[:end]):
                if change.action is PlanAction.APPEND:
                    mirror.append(change.segment)
                elif change.action is PlanAction.REMOVE:
                    del mirror[change.index]
                else:
                    mirror[change.index] = change.segment
        for change in assembler.finish(SAMPLE):
            if change.action is PlanAction.APPEND:
                mirror.append(change.segment)
            elif change.action is PlanAction.REMOVE:
                del mirror[change.index]
            else:
                mirror[change.index] = change.segment
        assert tuple(mirror) == compute_plan(SAMPLE).segments

    def test_finish_freezes(self):
        assembler = StreamAssembler()
        assembler.update("```py\nx = 1\n")
        assembler.finish()
        assert assembler.frozen
        assert assembler.update("```py\nx = 1\n```\n") == []
        assert isinstance(assembler.plan[0], OpenCode)
        assert assembler.finish() == []

    def test_finish_with_final_buffer(self):
        assembler = StreamAssembler()
        assembler.update("Hi")
        changes = assembler.finish("Hi there")
        assert changes == [PlanChange(PlanAction.UPDATE, 0, Prose("Hi there"))]
        assert assembler.buffer == "Hi there"

    def test_non_extending_snapshot_warns(self, caplog):
        assembler = StreamAssembler()
        assembler.update("Hello world")
        with caplog.at_level(logging.WARNING, logger="runnel.segments.plan"):
            assembler.update("Goodbye")
        assert "does not extend" in caplog.text
        assert assembler.plan == compute_plan("Goodbye")
