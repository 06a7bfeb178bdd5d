"""Tests for the GameEngine — pub/sub, clock, offline catch-up and lifecycle."""

import asyncio
import logging
from dataclasses import replace
from unittest.mock import patch

import pytest

from clickfluencer.engine.game_state import create_initial_state, frozen_map, now_ms, with_generator
from clickfluencer.engine.runtime import GameEngine
from clickfluencer.engine.save import SAVE_KEY, load_state
from clickfluencer.engine.storage import MemoryStore

HOUR_MS = 60 * 60 * 1000


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def _with_photos(count=10, now=0):
    state = create_initial_state(now=now)
    return with_generator(state, "photo", lambda g: replace(g, count=count))


# ── Pub/sub ──────────────────────────────────────────────────────


def test_subscribe_calls_listener_immediately():
    engine = GameEngine(clock=FakeClock())
    seen = []
    engine.subscribe(seen.append)
    assert seen == [engine.state]


def test_listeners_see_every_change_until_unsubscribed():
    engine = GameEngine(state=replace(create_initial_state(now=0), creds=100), clock=FakeClock())
    seen = []
    unsubscribe = engine.subscribe(lambda s: seen.append(s.creds))
    engine.buy_generator("photo")
    unsubscribe()
    engine.buy_generator("photo")
    assert seen == [100, 90]


def test_rejected_action_does_not_notify():
    engine = GameEngine(clock=FakeClock())
    seen = []
    engine.subscribe(seen.append)
    result = engine.buy_generator("photo")
    assert not result.success
    assert len(seen) == 1


def test_failing_listener_does_not_block_others(caplog):
    engine = GameEngine(clock=FakeClock())
    seen = []

    def broken(state):
        raise RuntimeError("boom")

    engine.subscribe(broken)
    engine.subscribe(seen.append)
    with caplog.at_level(logging.ERROR, logger="clickfluencer.engine.runtime"):
        engine.click()
    assert len(seen) == 2
    assert "Listener" in caplog.text


def test_listener_cannot_mutate_state(caplog):
    engine = GameEngine(clock=FakeClock())
    armed = []

    def greedy(state):
        if armed:
            engine.click()

    engine.subscribe(greedy)
    armed.append(True)
    with caplog.at_level(logging.ERROR, logger="clickfluencer.engine.runtime"):
        engine.click()
    assert engine.state.stats.total_clicks == 1
    assert "ReentrantMutationError" in caplog.text


def test_named_events():
    engine = GameEngine(state=replace(create_initial_state(now=0), creds=100), clock=FakeClock())
    results = []
    engine.on("action:executed", results.append)
    engine.buy_generator("photo")
    engine.buy_generator("video")
    assert [r.success for r in results] == [True, False]


def test_unknown_event_type_rejected():
    engine = GameEngine(clock=FakeClock())
    with pytest.raises(ValueError):
        engine.on("game:exploded", print)


def test_reset_emits_and_keeps_settings():
    engine = GameEngine(state=replace(create_initial_state(now=0), creds=500), clock=FakeClock(10))
    engine.update_setting("sound_enabled", False)
    resets = []
    engine.on("game:reset", resets.append)
    engine.reset_game()
    assert engine.state.creds == 0
    assert engine.state.settings.sound_enabled is False
    assert resets == [engine.state]


# ── Clock ────────────────────────────────────────────────────────


def test_step_covers_real_elapsed_time():
    clock = FakeClock(0)
    engine = GameEngine(state=_with_photos(10, now=0), clock=clock)
    clock.now = 1_000
    engine.step()
    assert engine.state.creds == pytest.approx(1.0)
    clock.now = 3_000
    engine.step()
    assert engine.state.creds == pytest.approx(3.0)
    assert engine.state.stats.play_time == 3_000


def test_event_check_starts_event():
    engine = GameEngine(clock=FakeClock(0))
    started = []
    engine.on("event:started", started.append)
    with patch("clickfluencer.engine.events.random") as mock_rng:
        mock_rng.random.return_value = 0.0
        assert engine.check_for_event()
    assert len(engine.state.active_events) == 1
    assert started[0].id == engine.state.active_events[0].id


def test_event_check_respects_trigger_chance():
    engine = GameEngine(clock=FakeClock(0))
    with patch("clickfluencer.engine.events.random") as mock_rng:
        mock_rng.random.return_value = 0.5
        assert not engine.check_for_event()
    assert engine.state.active_events == ()


def test_event_cap():
    engine = GameEngine(clock=FakeClock(0))
    with patch("clickfluencer.engine.events.random") as mock_rng:
        mock_rng.random.return_value = 0.0
        for _ in range(5):
            engine.check_for_event()
    assert len(engine.state.active_events) == 3


# ── Offline progress ─────────────────────────────────────────────


def test_offline_progress_is_capped():
    clock = FakeClock(10 * HOUR_MS)
    engine = GameEngine(state=_with_photos(10, now=0), clock=clock)
    reports = []
    engine.on("offline:progress", reports.append)

    progress = engine.process_offline_progress()

    assert progress.was_capped
    assert progress.time_away == 10 * HOUR_MS
    assert progress.time_processed == 8 * HOUR_MS
    # 1 cred/s × 8h × 50%
    assert progress.creds_gained == pytest.approx(14_400)
    assert engine.state.creds == pytest.approx(14_400)
    assert engine.state.last_save_time == 10 * HOUR_MS
    assert reports == [progress]


def test_short_absence_is_ignored():
    engine = GameEngine(state=_with_photos(10, now=0), clock=FakeClock(30_000))
    assert engine.process_offline_progress() is None
    assert engine.state.creds == 0


def test_offline_progress_can_be_disabled():
    engine = GameEngine(state=_with_photos(10, now=0), clock=FakeClock(HOUR_MS))
    engine.update_setting("offline_progress_enabled", False)
    assert engine.process_offline_progress() is None


def test_offline_skips_upkeep():
    state = replace(_with_photos(10, now=0), notoriety_generators=frozen_map({"smm": 1}))
    engine = GameEngine(state=state, clock=FakeClock(HOUR_MS))
    progress = engine.process_offline_progress()
    assert progress.creds_gained == pytest.approx(1800)
    assert engine.state.notoriety == 0


# ── Lifecycle ────────────────────────────────────────────────────


def test_start_is_idempotent_and_stop_cancels_timers():
    async def scenario():
        engine = GameEngine()
        started = []
        engine.on("engine:started", started.append)
        engine.start()
        first_handle = engine._tick_handle
        engine.start()
        assert engine._tick_handle is first_handle
        assert len(started) == 1
        assert engine.state.stats.session_count == 2

        engine.stop()
        assert not engine.is_running
        assert engine._tick_handle is None
        assert engine._event_handle is None
        engine.stop()

    asyncio.run(scenario())


def test_running_engine_ticks():
    async def scenario():
        engine = GameEngine(state=_with_photos(10, now=now_ms()))
        engine.start()
        await asyncio.sleep(0.6)
        engine.stop()
        return engine.state

    state = asyncio.run(scenario())
    assert state.creds > 0
    assert state.stats.play_time > 0


def test_pause_stops_ticking():
    async def scenario():
        engine = GameEngine()
        engine.start()
        engine.pause()
        assert engine.is_paused
        assert engine._tick_handle is None
        engine.resume()
        assert not engine.is_paused
        assert engine._tick_handle is not None
        engine.stop()

    asyncio.run(scenario())


# ── Persistence ──────────────────────────────────────────────────


def test_autosave_is_coalesced_until_forced():
    async def scenario():
        store = MemoryStore()
        engine = GameEngine(store=store)
        engine.start()
        engine.click()
        engine.click()
        assert engine.has_pending_save
        assert store.get(SAVE_KEY) is None

        saved = []
        engine.on("game:saved", saved.append)
        result = engine.force_save()
        assert result.success
        assert not engine.has_pending_save
        assert len(saved) == 1
        engine.stop()
        return store

    store = asyncio.run(scenario())
    loaded = load_state(store)
    assert loaded.success
    assert loaded.state.stats.total_clicks == 2


def test_autosave_off_cancels_pending_write():
    async def scenario():
        engine = GameEngine(store=MemoryStore())
        engine.start()
        engine.click()
        assert engine.has_pending_save
        engine.update_setting("auto_save", False)
        assert not engine.has_pending_save
        engine.click()
        assert not engine.has_pending_save
        engine.stop()

    asyncio.run(scenario())


def test_force_save_without_store():
    result = GameEngine(clock=FakeClock()).force_save()
    assert not result.success


def test_from_store_resumes_saved_game():
    store = MemoryStore()
    first = GameEngine(state=replace(create_initial_state(now=0), creds=1234), store=store, clock=FakeClock())
    assert first.force_save().success

    engine, result = GameEngine.from_store(store, clock=FakeClock())
    assert result.success
    assert engine.state.creds == 1234


def test_from_store_starts_fresh_on_corrupt_save():
    store = MemoryStore()
    store.set(SAVE_KEY, b"{not json")
    engine, result = GameEngine.from_store(store, clock=FakeClock())
    assert not result.success
    assert engine.state.creds == 0


def test_set_state_replaces_and_notifies():
    engine = GameEngine(clock=FakeClock())
    seen = []
    engine.subscribe(seen.append)
    imported = replace(create_initial_state(now=0), creds=777)
    engine.set_state(imported)
    assert engine.state is imported
    assert seen[-1] is imported


class FailingStore(MemoryStore):
    def set(self, key, data):
        raise OSError("disk full")


def test_failed_write_keeps_previous_save_time():
    engine = GameEngine(state=create_initial_state(now=0), store=FailingStore(), clock=FakeClock(5_000))
    result = engine.force_save()
    assert not result.success
    assert engine.state.last_save_time == 0


def test_successful_write_stamps_save_time():
    store = MemoryStore()
    engine = GameEngine(state=create_initial_state(now=0), store=store, clock=FakeClock(5_000))
    assert engine.force_save().success
    assert engine.state.last_save_time == 5_000
    assert load_state(store).state.last_save_time == 5_000


# ── Achievements ─────────────────────────────────────────────────


def test_action_unlocks_achievement_and_emits():
    engine = GameEngine(clock=FakeClock(7))
    unlocked = []
    engine.on("achievement:unlocked", unlocked.append)
    with patch("clickfluencer.engine.actions.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        engine.click()
        engine.click()
    assert [a.id for a in unlocked] == ["first_click"]
    assert engine.state.achievements["first_click"] == 7


def test_listeners_see_the_unlock_in_state():
    engine = GameEngine(clock=FakeClock())
    seen = []
    engine.subscribe(lambda s: seen.append(dict(s.achievements)))
    with patch("clickfluencer.engine.actions.random") as mock_rng:
        mock_rng.random.return_value = 0.99
        engine.click()
    assert seen[-1] == {"first_click": 0}


def test_long_absence_grants_welcome_back():
    async def scenario():
        engine = GameEngine(state=create_initial_state(now=0), clock=FakeClock(25 * HOUR_MS))
        unlocked = []
        engine.on("achievement:unlocked", unlocked.append)
        engine.start()
        engine.stop()
        return engine, unlocked

    engine, unlocked = asyncio.run(scenario())
    assert [a.id for a in unlocked] == ["welcome_back"]
    assert engine.state.has_achievement("welcome_back")


def test_short_absence_grants_nothing():
    async def scenario():
        engine = GameEngine(state=create_initial_state(now=0), clock=FakeClock(HOUR_MS))
        engine.start()
        engine.stop()
        return engine

    assert not asyncio.run(scenario()).state.has_achievement("welcome_back")
