"""
Tests for key-value storage, the plan store, theme preferences and the
session marker.
"""

import json
from datetime import datetime, timedelta

import pytest

from conftest import make_plan
from gym_scanner.core.errors import CorruptStoreError
from gym_scanner.core.models import ThemeConfig
from gym_scanner.io.kv_store import JsonFileStore, MemoryStore, ReadStatus
from gym_scanner.io.plan_store import PlanStore
from gym_scanner.io.preferences import default_theme, load_theme, reset_theme, save_theme
from gym_scanner.io.session_marker import mark_session_active, session_in_progress


@pytest.fixture(params=["memory", "file"])
def kv(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(tmp_path / "data")


class TestKeyValueStore:
    def test_missing_key(self, kv):
        assert kv.read("workouts") == (ReadStatus.MISSING, None)
        assert kv.get("workouts", []) == []

    def test_set_and_get(self, kv):
        kv.set("workouts", [{"a": 1}])
        assert kv.read("workouts") == (ReadStatus.OK, [{"a": 1}])

    def test_values_are_copies(self, kv):
        value = {"a": [1]}
        kv.set("k", value)
        value["a"].append(2)
        assert kv.get("k") == {"a": [1]}

    def test_delete_prefix(self, kv):
        kv.set("history/p1/e1", [])
        kv.set("history/p1/e2", [])
        kv.set("history/p2/e1", [])
        kv.delete_prefix("history/p1")
        assert kv.keys("history") == ["history/p2/e1"]

    def test_delete_missing_is_noop(self, kv):
        kv.delete("nothing")
        kv.delete_prefix("nothing/here")

    @pytest.mark.parametrize("key", ["", "../etc", "a//b", "a b"])
    def test_invalid_keys(self, kv, key):
        with pytest.raises(ValueError):
            kv.set(key, 1)


class TestJsonFileStore:
    def test_corrupt_file(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.path_for("workouts").write_text("{broken", encoding="utf-8")
        assert store.read("workouts") == (ReadStatus.CORRUPT, None)
        assert store.get("workouts", "fallback") == "fallback"

    def test_no_temp_files_left(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("workouts", [1, 2, 3])
        store.set("workouts", [4])
        assert [p.name for p in tmp_path.iterdir()] == ["workouts.json"]
        assert json.loads((tmp_path / "workouts.json").read_text()) == [4]


class TestPlanStore:
    def test_empty(self, memory_store):
        plans = PlanStore(memory_store)
        assert plans.load_with_status() == ([], ReadStatus.MISSING)
        assert plans.load() == []

    def test_replace_and_load(self, memory_store):
        plans = PlanStore(memory_store)
        stored = [make_plan(plan_id="a"), make_plan(plan_id="b", title="Day B")]
        plans.replace_all(stored)
        assert plans.load() == stored

    def test_duplicate_ids_rejected(self, memory_store):
        plans = PlanStore(memory_store)
        with pytest.raises(ValueError):
            plans.replace_all([make_plan(plan_id="a"), make_plan(plan_id="a")])
        assert plans.load_with_status()[1] is ReadStatus.MISSING

    def test_corrupt_reads_empty_but_is_reported(self, memory_store):
        memory_store.put_raw("workouts", "[{not json")
        plans = PlanStore(memory_store)
        assert plans.load() == []
        assert plans.load_with_status()[1] is ReadStatus.CORRUPT
        with pytest.raises(CorruptStoreError):
            plans.load_strict()

    def test_invalid_shape_is_corrupt(self, memory_store):
        memory_store.set("workouts", {"not": "a list"})
        assert PlanStore(memory_store).load_with_status() == ([], ReadStatus.CORRUPT)

    @pytest.mark.parametrize("uid", ["", "ex-1"])
    def test_repeated_ids_are_corrupt(self, memory_store, uid):
        """Two stored plans sharing an id read as damaged, with or without uids."""
        record = {
            "id": "p1",
            "title": "Day A",
            "date_created": "2024-06-01T12:00:00",
            "exercises": [{"uid": uid, "name": "Squat", "sets": 3, "reps": "5", "muscle_group": "Legs"}],
        }
        memory_store.set("workouts", [record, dict(record, title="Copy")])
        plans = PlanStore(memory_store)

        assert plans.load() == []
        assert plans.load_with_status() == ([], ReadStatus.CORRUPT)
        with pytest.raises(CorruptStoreError):
            plans.upsert(make_plan(plan_id="p1"))
        # the damaged document is left as it was
        assert memory_store.get("workouts")[1]["title"] == "Copy"

    def test_upsert_keeps_position(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all([make_plan(plan_id="a"), make_plan(plan_id="b")])
        updated = make_plan(plan_id="a", title="Renamed")
        assert plans.upsert(updated)
        assert [p.title for p in plans.load()] == ["Renamed", "Day A"]

    def test_upsert_absent_writes_nothing(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all([make_plan(plan_id="a")])
        assert not plans.upsert(make_plan(plan_id="zzz"))
        assert [p.id for p in plans.load()] == ["a"]

    def test_remove(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all([make_plan(plan_id="a"), make_plan(plan_id="b")])
        assert plans.remove("a")
        assert not plans.remove("a")
        assert [p.id for p in plans.load()] == ["b"]

    def test_insert_prepends(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all([make_plan(plan_id="old")])
        plans.insert([make_plan(plan_id="n1"), make_plan(plan_id="n2")])
        assert [p.id for p in plans.load()] == ["n1", "n2", "old"]

    def test_insert_clashing_id_writes_nothing(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all([make_plan(plan_id="old")])
        with pytest.raises(ValueError):
            plans.insert([make_plan(plan_id="new"), make_plan(plan_id="old")])
        assert [p.id for p in plans.load()] == ["old"]

    def test_get(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all([make_plan(plan_id="a")])
        assert plans.get("a").id == "a"
        assert plans.get("b") is None

    def test_last_played(self, memory_store):
        plans = PlanStore(memory_store)
        plans.replace_all(
            [
                make_plan(plan_id="a", last_played="2024-06-02T10:00:00"),
                make_plan(plan_id="b", last_played="2024-06-03T09:00:00"),
                make_plan(plan_id="c"),
            ]
        )
        assert plans.last_played().id == "b"

    def test_legacy_data_gets_uids_persisted(self, memory_store):
        memory_store.set(
            "workouts",
            [
                {
                    "id": "legacy",
                    "title": "Old",
                    "dateCreated": "2024-01-01T12:00:00.000Z",
                    "exercises": [
                        {"name": "Squat", "sets": 3, "reps": "5", "muscleGroup": "Legs"}
                    ],
                }
            ],
        )
        plans = PlanStore(memory_store)
        first = plans.load()
        uid = first[0].exercises[0].uid
        assert uid
        assert plans.load()[0].exercises[0].uid == uid
        assert memory_store.get("workouts")[0]["exercises"][0]["uid"] == uid

    def test_file_backed_round_trip(self, tmp_path):
        plans = PlanStore(JsonFileStore(tmp_path))
        plan = make_plan(rest_times=[30, None, 90], last_played="2024-06-01T18:30:00")
        plans.replace_all([plan])
        assert PlanStore(JsonFileStore(tmp_path)).load() == [plan]


class TestPreferences:
    def test_default_when_missing(self, memory_store):
        assert load_theme(memory_store) == default_theme()

    def test_save_and_load(self, memory_store):
        save_theme(memory_store, ThemeConfig("#FF0000", "00ff00"))
        theme = load_theme(memory_store)
        assert theme.primary == "#ff0000"
        assert theme.secondary == "#00ff00"
        assert theme.as_rgb()["primary"] == (255, 0, 0)

    def test_invalid_stored_theme_falls_back(self, memory_store):
        memory_store.set("theme", {"primary": "red", "secondary": "#00ff00"})
        assert load_theme(memory_store) == default_theme()

    def test_reset(self, memory_store):
        save_theme(memory_store, ThemeConfig("#123456", "#654321"))
        assert reset_theme(memory_store) == default_theme()
        assert load_theme(memory_store) == default_theme()

    def test_invalid_colour_rejected(self):
        with pytest.raises(ValueError):
            ThemeConfig("#12345", "#654321")


class TestSessionMarker:
    def test_present_only_inside_block(self, memory_store):
        plan = make_plan(plan_id="a")
        assert not session_in_progress(memory_store)
        with mark_session_active(memory_store, plan, datetime.now().isoformat(timespec="seconds")):
            assert session_in_progress(memory_store)
            assert memory_store.get("active_session")["plan_id"] == "a"
        assert not session_in_progress(memory_store)
        assert memory_store.read("active_session")[0] is ReadStatus.MISSING

    def test_removed_when_block_raises(self, memory_store):
        with pytest.raises(KeyboardInterrupt):
            with mark_session_active(memory_store, make_plan(), "2024-06-01T18:00:00"):
                raise KeyboardInterrupt
        assert memory_store.get("active_session") is None

    def test_stale_marker_ignored(self, memory_store):
        memory_store.set("active_session", {"plan_id": "a", "started_at": "2024-06-01T18:00:00"})
        assert session_in_progress(memory_store, now=datetime(2024, 6, 1, 19, 0))
        assert not session_in_progress(memory_store, now=datetime(2024, 6, 1, 18) + timedelta(hours=5))

    @pytest.mark.parametrize("marker", [{"plan_id": "a", "started_at": "yesterday"}, "junk", [1]])
    def test_unreadable_marker_ignored(self, memory_store, marker):
        memory_store.set("active_session", marker)
        assert not session_in_progress(memory_store)
