"""
Tests for serialization and for parsing the extractor's answer.
"""

import pytest

from conftest import make_plan
from gym_scanner.io.serializers import (
    ValidationError,
    coerce_int,
    dict_to_exercise,
    dict_to_plan,
    parse_extracted_routines,
    plan_to_dict,
    strip_code_fences,
)


class TestExercises:
    def test_camel_case_accepted(self):
        ex = dict_to_exercise(
            {"name": "Row", "sets": 4, "reps": "10", "muscleGroup": "Back", "restTime": "90s"}
        )
        assert ex.muscle_group == "Back"
        assert ex.rest_time == 90
        assert ex.uid == ""

    def test_optional_fields_omitted(self):
        data = plan_to_dict(make_plan(n_exercises=1))["exercises"][0]
        assert "notes" not in data
        assert "rest_time" not in data

    def test_missing_name(self):
        with pytest.raises(ValidationError):
            dict_to_exercise({"sets": 3})

    @pytest.mark.parametrize("value,expected", [(3, 3), (2.0, 2), ("45", 45), ("60 sec", 60)])
    def test_coerce_int(self, value, expected):
        assert coerce_int(value, "x") == expected

    @pytest.mark.parametrize("value", ["lots", True, -1, None])
    def test_coerce_int_rejects(self, value):
        with pytest.raises(ValidationError):
            coerce_int(value, "x")


class TestPlans:
    def test_uids_assigned_on_read(self):
        plan = dict_to_plan(
            {
                "id": "p",
                "title": "T",
                "date_created": "2024-06-01T12:00:00",
                "exercises": [{"name": "A", "sets": 1, "reps": "1", "muscle_group": "X"}],
            }
        )
        assert plan.exercises[0].uid

    @pytest.mark.parametrize(
        "data",
        [
            {"title": "T", "date_created": "2024-06-01T12:00:00"},
            {"id": "p", "title": "T"},
            {"id": "p", "title": "T", "date_created": "yesterday"},
            {"id": "p", "title": "T", "date_created": "2024-06-01T12:00:00", "exercises": {}},
        ],
    )
    def test_invalid_plans(self, data):
        with pytest.raises(ValidationError):
            dict_to_plan(data)


class TestExtractedAnswer:
    ANSWER = """```json
[
  {"routineName": "Push Day", "exercises": [
    {"name": "Bench Press", "sets": 4, "reps": "8-10", "muscleGroup": "Chest", "restTime": 90},
    {"name": "Dips", "sets": "3", "reps": "AMRAP", "muscleGroup": "Triceps", "notes": "bodyweight"}
  ]},
  {"routineName": "", "exercises": [
    {"name": "Squat", "sets": 5, "reps": "5", "muscleGroup": "Legs"}
  ]}
]
```"""

    def test_fenced_array(self):
        routines = parse_extracted_routines(self.ANSWER)
        assert [r.routine_name for r in routines] == ["Push Day", "Workout 2"]
        bench, dips = routines[0].exercises
        assert bench.rest_time == 90
        assert bench.muscle_group == "Chest"
        assert dips.sets == 3
        assert dips.notes == "bodyweight"

    def test_single_object(self):
        routines = parse_extracted_routines(
            '{"routineName": "Solo", "exercises": [{"name": "Plank", "sets": 3, "reps": "30s"}]}'
        )
        assert [r.routine_name for r in routines] == ["Solo"]

    def test_wrapped_list(self):
        routines = parse_extracted_routines(
            '{"routines": [{"routineName": "A", "exercises": []}]}'
        )
        assert routines[0].exercises == []

    @pytest.mark.parametrize(
        "text",
        [
            "Sorry, I cannot read this image.",
            "[]",
            '[{"routineName": "A"}]',
            '[{"routineName": "A", "exercises": [{"sets": 3}]}]',
            "[1, 2]",
        ],
    )
    def test_unusable_answers(self, text):
        with pytest.raises(ValidationError):
            parse_extracted_routines(text)

    def test_strip_code_fences(self):
        assert strip_code_fences("```JSON\n[]\n```") == "[]"
        assert strip_code_fences("[]") == "[]"
