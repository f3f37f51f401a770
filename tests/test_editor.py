"""
Tests for the exercise edit/undo engine.

Covers the undo round trip, the five-version history bound with oldest-first
eviction, the absence of redo, and history keyed by exercise uid.
"""

from dataclasses import replace

import pytest

from conftest import make_exercise, make_plan
from gym_scanner.core.editor import EditDraft, ExerciseEditor
from gym_scanner.core.errors import IndexOutOfRange, NoHistory
from gym_scanner.io.edit_history import EditHistoryStore


@pytest.fixture
def editor(memory_store):
    return ExerciseEditor(EditHistoryStore(memory_store))


def _edit_sets(editor: ExerciseEditor, plan, index: int, sets: int):
    draft = editor.begin_edit(plan, index)
    draft.set("sets", sets)
    return editor.commit_edit(plan, index, draft)


class TestBeginEdit:
    def test_draft_copies_exercise(self, editor):
        plan = make_plan()
        draft = editor.begin_edit(plan, 1)
        assert draft.build() == plan.exercises[1]

    def test_invalid_index_raises(self, editor):
        plan = make_plan(n_exercises=2)
        with pytest.raises(IndexOutOfRange):
            editor.begin_edit(plan, 2)
        with pytest.raises(IndexOutOfRange):
            editor.begin_edit(plan, -1)

    def test_index_out_of_range_is_an_index_error(self, editor):
        with pytest.raises(IndexError):
            editor.begin_edit(make_plan(n_exercises=1), 5)

    def test_draft_edits_do_not_touch_plan(self, editor):
        plan = make_plan()
        draft = editor.begin_edit(plan, 0)
        draft.set("name", "Front Squat")
        assert plan.exercises[0].name == "Exercise 1"


class TestEditDraft:
    def test_int_fields_coerced(self):
        draft = EditDraft.from_exercise(make_exercise())
        draft.set("sets", "5")
        draft.set("rest_time", "90")
        ex = draft.build()
        assert ex.sets == 5
        assert ex.rest_time == 90

    def test_empty_optional_clears(self):
        draft = EditDraft.from_exercise(make_exercise(notes="slow", rest_time=60))
        draft.set("notes", "")
        draft.set("rest_time", "")
        ex = draft.build()
        assert ex.notes is None
        assert ex.rest_time is None

    def test_bad_number_rejected(self):
        draft = EditDraft.from_exercise(make_exercise())
        with pytest.raises(ValueError):
            draft.set("sets", "three")

    def test_uid_not_editable(self):
        draft = EditDraft.from_exercise(make_exercise())
        with pytest.raises(ValueError):
            draft.set("uid", "other")

    def test_negative_sets_rejected_on_build(self):
        draft = EditDraft.from_exercise(make_exercise())
        draft.set("sets", -1)
        with pytest.raises(ValueError):
            draft.build()


class TestCommitEdit:
    def test_replaces_in_place(self, editor):
        plan = make_plan()
        updated = _edit_sets(editor, plan, 1, 7)
        assert updated.exercises[1].sets == 7
        assert [e.name for e in updated.exercises] == [e.name for e in plan.exercises]
        assert updated.exercises[0] is plan.exercises[0]

    def test_input_plan_not_modified(self, editor):
        plan = make_plan()
        _edit_sets(editor, plan, 0, 9)
        assert plan.exercises[0].sets == 3

    def test_pushes_pre_edit_value(self, editor):
        plan = make_plan()
        updated = _edit_sets(editor, plan, 0, 9)
        assert editor.history_depth(updated, 0) == 1
        assert editor.has_history(updated, 0)
        assert not editor.has_history(updated, 1)

    def test_keeps_uid_of_slot(self, editor):
        plan = make_plan()
        other = make_exercise("Deadlift", uid="some-other-uid")
        updated = editor.commit_edit(plan, 0, other)
        assert updated.exercises[0].name == "Deadlift"
        assert updated.exercises[0].uid == plan.exercises[0].uid


class TestUndo:
    def test_round_trip_restores_value_and_depth(self, editor):
        """commit followed by undo restores the exercise and the stack depth."""
        plan = _edit_sets(editor, make_plan(), 0, 4)
        depth_before = editor.history_depth(plan, 0)
        original = plan.exercises[0]

        edited = _edit_sets(editor, plan, 0, 10)
        restored = editor.undo(edited, 0)

        assert restored.exercises[0] == original
        assert editor.history_depth(restored, 0) == depth_before

    def test_multi_step(self, editor):
        plan = make_plan()
        for sets in (4, 5, 6):
            plan = _edit_sets(editor, plan, 2, sets)
        plan = editor.undo(plan, 2)
        assert plan.exercises[2].sets == 5
        plan = editor.undo(plan, 2)
        assert plan.exercises[2].sets == 4
        plan = editor.undo(plan, 2)
        assert plan.exercises[2].sets == 3
        assert not editor.has_history(plan, 2)

    def test_empty_history_raises(self, editor):
        with pytest.raises(NoHistory):
            editor.undo(make_plan(), 0)

    def test_no_redo(self, editor):
        """The value overwritten by undo is gone."""
        plan = _edit_sets(editor, make_plan(), 0, 8)
        plan = editor.undo(plan, 0)
        assert not editor.has_history(plan, 0)
        with pytest.raises(NoHistory):
            editor.undo(plan, 0)

    def test_history_is_per_exercise(self, editor):
        plan = _edit_sets(editor, make_plan(), 0, 8)
        with pytest.raises(NoHistory):
            editor.undo(plan, 1)

    def test_history_is_per_plan(self, editor):
        a = _edit_sets(editor, make_plan(plan_id="a"), 0, 8)
        b = make_plan(plan_id="b")
        assert editor.has_history(a, 0)
        assert not editor.has_history(b, 0)


class TestHistoryBound:
    @pytest.mark.parametrize("n_commits", [5, 6, 9])
    def test_keeps_five_most_recent(self, editor, n_commits):
        plan = make_plan()
        for sets in range(4, 4 + n_commits):
            plan = _edit_sets(editor, plan, 0, sets)

        assert editor.history_depth(plan, 0) == 5

        # Pre-edit values were 3, 4, ..., 3 + n_commits - 1; the last five survive.
        expected = list(range(3 + n_commits - 5, 3 + n_commits))
        popped = []
        for _ in range(5):
            plan = editor.undo(plan, 0)
            popped.append(plan.exercises[0].sets)
        assert popped == list(reversed(expected))

    def test_custom_limit(self, memory_store):
        editor = ExerciseEditor(EditHistoryStore(memory_store), limit=2)
        plan = make_plan()
        for sets in (4, 5, 6):
            plan = _edit_sets(editor, plan, 0, sets)
        assert editor.history_depth(plan, 0) == 2

    def test_limit_must_be_positive(self, memory_store):
        with pytest.raises(ValueError):
            ExerciseEditor(EditHistoryStore(memory_store), limit=0)


class TestStableKeys:
    def test_history_follows_exercise_when_order_changes(self, editor):
        plan = _edit_sets(editor, make_plan(), 0, 8)
        reordered = replace(plan, exercises=list(reversed(plan.exercises)))
        last = len(reordered.exercises) - 1
        assert editor.has_history(reordered, last)
        assert not editor.has_history(reordered, 0)
        assert editor.undo(reordered, last).exercises[last].sets == 3

    def test_forget_plan_drops_history(self, editor, memory_store):
        plan = _edit_sets(editor, make_plan(), 0, 8)
        plan = _edit_sets(editor, plan, 1, 8)
        editor.forget_plan(plan.id)
        assert not editor.has_history(plan, 0)
        assert not editor.has_history(plan, 1)
        assert memory_store.keys("history") == []

    def test_history_survives_new_editor(self, memory_store):
        plan = _edit_sets(ExerciseEditor(EditHistoryStore(memory_store)), make_plan(), 0, 8)
        fresh = ExerciseEditor(EditHistoryStore(memory_store))
        assert fresh.undo(plan, 0).exercises[0].sets == 3

    def test_malformed_history_reads_as_empty(self, editor, memory_store):
        plan = make_plan()
        memory_store.put_raw(f"history/{plan.id}/{plan.exercises[0].uid}", "{not json")
        assert not editor.has_history(plan, 0)
        updated = _edit_sets(editor, plan, 0, 8)
        assert editor.history_depth(updated, 0) == 1

    def test_invalid_index_has_no_history(self, editor):
        assert not editor.has_history(make_plan(n_exercises=1), 3)
