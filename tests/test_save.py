"""Tests for save/load, import/export and the byte stores."""

import json
from dataclasses import replace

import pytest

from clickfluencer.data.events import ALL_EVENTS
from clickfluencer.engine.actions import activate_theme, apply_event, buy_upgrade, purchase_theme
from clickfluencer.engine.errors import SaveFormatError, StorageError
from clickfluencer.engine.game_state import GAME_VERSION, create_initial_state, frozen_map, with_generator
from clickfluencer.engine.save import (
    SAVE_KEY,
    delete_save,
    dict_to_state,
    export_save,
    import_save,
    load_state,
    save_state,
    serialize_state,
    state_to_dict,
)
from clickfluencer.engine.storage import FileStore, MemoryStore


def _played_state():
    state = replace(create_initial_state(now=1_000), creds=1e6, awards=20, notoriety=12.5)
    state = with_generator(state, "photo", lambda g: replace(g, count=14))
    state = buy_upgrade(state, "better_camera").state
    state = buy_upgrade(state, "editing_software").state
    state = buy_upgrade(state, "better_filters").state
    state = purchase_theme(state, "light").state
    state = activate_theme(state, "light").state
    state = apply_event(state, ALL_EVENTS["viral_post"], now=2_000)
    return replace(
        state,
        prestige=1.1,
        notoriety_generators=frozen_map({"smm": 2, "pr_team": 0, "key_client": 0}),
        notoriety_upgrades=frozen_map({**state.notoriety_upgrades, "cred_boost": 3}),
        achievements=frozen_map({"first_upgrade": 1_500.0}),
    )


class BrokenStore:
    def get(self, key):
        raise StorageError("disk on fire")

    def set(self, key, data):
        raise StorageError("disk on fire")

    def delete(self, key):
        raise StorageError("disk on fire")


# ── Round trip ───────────────────────────────────────────────────


def test_round_trip_through_store():
    store = MemoryStore()
    state = _played_state()
    assert save_state(store, state).success

    result = load_state(store)
    assert result.success
    loaded = result.state
    assert loaded.creds == state.creds
    assert loaded.prestige == state.prestige
    assert loaded.generators == state.generators
    assert loaded.upgrades == state.upgrades
    assert loaded.themes == state.themes
    assert loaded.active_events == state.active_events
    assert dict(loaded.notoriety_generators) == dict(state.notoriety_generators)
    assert dict(loaded.notoriety_upgrades) == dict(state.notoriety_upgrades)
    assert dict(loaded.achievements) == {"first_upgrade": 1_500.0}
    assert loaded.stats == state.stats
    assert loaded.settings == state.settings
    assert not result.migration.migrated


def test_document_shape():
    doc = state_to_dict(_played_state())
    assert doc["version"] == GAME_VERSION
    upgrades = {u["id"]: u for u in doc["upgrades"]}
    assert upgrades["better_camera"] == {"id": "better_camera", "kind": "tiered", "tier": 1}
    assert upgrades["better_filters"] == {"id": "better_filters", "kind": "infinite", "level": 1}
    assert upgrades["editing_software"] == {
        "id": "editing_software",
        "kind": "one_shot",
        "purchased": True,
    }
    assert doc["notoriety_generators"]["smm"] == 2
    assert doc["active_events"][0]["effect"] == "production"
    # Prices and names come from the data tables, not the save
    assert set(doc["generators"][0]) == {"id", "count", "unlocked"}


def test_serialized_save_is_json():
    state = _played_state()
    raw = serialize_state(state)
    assert json.loads(raw)["creds"] == state.creds


# ── Bad input ────────────────────────────────────────────────────


def test_missing_save():
    result = load_state(MemoryStore())
    assert not result.success
    assert result.message == "No save found."


def test_corrupt_save_reports_failure():
    store = MemoryStore()
    store.set(SAVE_KEY, b"\x00\xffnot json")
    result = load_state(store)
    assert not result.success
    assert result.state is None


def test_newer_save_is_refused():
    doc = state_to_dict(create_initial_state(now=0))
    doc["version"] = "9.0.0"
    result = import_save(json.dumps(doc))
    assert not result.success
    assert "newer" in result.message


def test_malformed_field_is_refused():
    doc = state_to_dict(create_initial_state(now=0))
    doc["generators"] = "lots"
    result = import_save(json.dumps(doc))
    assert not result.success


def test_dict_to_state_raises_on_bad_numbers():
    doc = state_to_dict(create_initial_state(now=0))
    doc["creds"] = "plenty"
    with pytest.raises(SaveFormatError):
        dict_to_state(doc)


def test_bad_stat_value_is_refused():
    result = import_save(json.dumps({"version": GAME_VERSION, "stats": {"total_clicks": "many"}}))
    assert not result.success
    assert result.state is None


def test_stats_are_cast_to_their_types():
    doc = state_to_dict(create_initial_state(now=0))
    doc["stats"]["total_clicks"] = 12.0
    doc["stats"]["play_time"] = 500
    stats = import_save(json.dumps(doc)).state.stats
    assert stats.total_clicks == 12
    assert isinstance(stats.total_clicks, int)
    assert isinstance(stats.play_time, float)


def test_achievements_persist_and_unknown_ones_drop():
    doc = state_to_dict(create_initial_state(now=0))
    doc["achievements"] = {"nice": 42.0, "speedrunner": 7.0}
    result = import_save(json.dumps(doc))
    assert result.success
    assert dict(result.state.achievements) == {"nice": 42.0}
    assert any("speedrunner" in w for w in result.warnings)


def test_malformed_achievements_are_refused():
    doc = state_to_dict(create_initial_state(now=0))
    doc["achievements"] = ["nice"]
    assert not import_save(json.dumps(doc)).success


def test_unknown_ids_are_dropped_with_warning(caplog):
    doc = state_to_dict(create_initial_state(now=0))
    doc["generators"].append({"id": "hologram", "count": 3, "unlocked": True})
    doc["upgrades"].append({"id": "time_machine", "kind": "one_shot", "purchased": True})
    doc["notoriety_upgrades"]["fame_ray"] = 2

    result = import_save(json.dumps(doc))

    assert result.success
    assert not result.state.has_generator("hologram")
    assert not result.state.has_upgrade("time_machine")
    assert "fame_ray" not in result.state.notoriety_upgrades
    assert len(result.warnings) == 3
    assert "hologram" in caplog.text


def test_missing_roster_entries_keep_defaults():
    doc = state_to_dict(create_initial_state(now=0))
    doc["generators"] = [{"id": "photo", "count": 4, "unlocked": True}]
    state = import_save(json.dumps(doc)).state
    assert state.get_generator("photo").count == 4
    assert state.get_generator("agency").count == 0
    assert len(state.generators) == 6


def test_kind_mismatch_follows_roster():
    doc = state_to_dict(create_initial_state(now=0))
    for u in doc["upgrades"]:
        if u["id"] == "better_camera":
            u.clear()
            u.update(id="better_camera", kind="one_shot", purchased=True)
    state = import_save(json.dumps(doc)).state
    camera = state.get_upgrade("better_camera")
    assert camera.tier == camera.max_tier


def test_one_active_theme_enforced():
    doc = state_to_dict(create_initial_state(now=0))
    for t in doc["themes"]:
        t["active"] = False
    state = import_save(json.dumps(doc)).state
    assert [t.id for t in state.themes if t.active] == ["dark"]


# ── Export / import ──────────────────────────────────────────────


def test_export_is_pretty_json():
    text = export_save(_played_state())
    assert "\n" in text
    assert json.loads(text)["version"] == GAME_VERSION


def test_import_of_export():
    state = _played_state()
    result = import_save(export_save(state))
    assert result.success
    assert result.state.creds == state.creds
    assert result.state.active_theme.id == "light"


# ── Stores ───────────────────────────────────────────────────────


def test_failing_store_is_reported_not_raised():
    store = BrokenStore()
    assert not save_state(store, create_initial_state(now=0)).success
    assert not load_state(store).success
    assert not delete_save(store).success


def test_delete_save():
    store = MemoryStore()
    save_state(store, create_initial_state(now=0))
    assert delete_save(store).success
    assert store.get(SAVE_KEY) is None


def test_file_store(tmp_path):
    store = FileStore(tmp_path / "saves")
    assert store.get("slot") is None
    store.set("slot", b"{}")
    assert (tmp_path / "saves" / "slot.json").read_bytes() == b"{}"
    assert store.get("slot") == b"{}"
    store.delete("slot")
    assert store.get("slot") is None
    store.delete("slot")


def test_file_store_rejects_path_keys(tmp_path):
    store = FileStore(tmp_path)
    with pytest.raises(StorageError):
        store.set("../escape", b"{}")


def test_file_store_save_and_load(tmp_path):
    store = FileStore(tmp_path)
    state = _played_state()
    assert save_state(store, state).success
    assert load_state(store).state.creds == state.creds
