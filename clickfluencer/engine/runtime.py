"""Runtime — the long-lived owner of one game.

``GameEngine`` holds the current GameState, drives the tick and event
timers on the running asyncio loop, applies offline catch-up on start,
checks achievements after every change and fans every change out to
subscribers. The hosting application builds one
engine and hands it to whatever needs it.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Callable

from clickfluencer.data.achievements import AchievementDef
from clickfluencer.data.balance import BALANCE
from clickfluencer.engine import actions
from clickfluencer.engine.achievements import check_achievements, returned_after_absence, unlock_achievement
from clickfluencer.engine.economy import offline_efficiency, production_per_second
from clickfluencer.engine.errors import ReentrantMutationError
from clickfluencer.engine.events import EventManager
from clickfluencer.engine.game_state import GameState, create_initial_state, now_ms
from clickfluencer.engine.results import ActionResult, ClickResult
from clickfluencer.engine.save import LoadResult, SaveResult, load_state, save_state
from clickfluencer.engine.storage import ByteStore

logger = logging.getLogger(__name__)

StateListener = Callable[[GameState], Any]
EventListener = Callable[[Any], Any]

ENGINE_EVENTS = (
    "engine:started",
    "engine:stopped",
    "achievement:unlocked",
    "event:started",
    "offline:progress",
    "action:executed",
    "game:saved",
    "game:reset",
)


@dataclass(frozen=True)
class OfflineProgress:
    time_away: float        # ms
    time_processed: float   # ms, capped
    creds_gained: float
    was_capped: bool


class GameEngine:
    """Owns the state, the timers and the subscriber lists."""

    def __init__(
        self,
        state: GameState | None = None,
        store: ByteStore | None = None,
        clock: Callable[[], float] = now_ms,
        event_manager: EventManager | None = None,
    ) -> None:
        self._clock = clock
        self._state: GameState = state if state is not None else create_initial_state(clock())
        self._store = store
        self._event_manager = event_manager or EventManager()

        self._listeners: list[StateListener] = []
        self._event_listeners: dict[str, list[EventListener]] = {}
        self._publishing = False

        self._loop: asyncio.AbstractEventLoop | None = None
        self._tick_handle: asyncio.TimerHandle | None = None
        self._event_handle: asyncio.TimerHandle | None = None
        self._save_handle: asyncio.TimerHandle | None = None
        self._running = False
        self._paused = False
        self._last_tick_time: float = self._state.stats.last_tick_time

    @classmethod
    def from_store(cls, store: ByteStore, clock: Callable[[], float] = now_ms) -> tuple[GameEngine, LoadResult]:
        """Resume the saved game in ``store``, or start fresh if there is none."""
        result = load_state(store)
        if result.success:
            engine = cls(state=result.state, store=store, clock=clock)
        else:
            if result.message != "No save found.":
                logger.warning("Starting a new game: %s", result.message)
            engine = cls(store=store, clock=clock)
        return engine, result

    # ── Read side ────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def has_pending_save(self) -> bool:
        return self._save_handle is not None

    # ── Pub/sub ──────────────────────────────────────────────────

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; it is called once right away.

        Returns a callable that removes the listener again.
        """
        self._listeners.append(listener)
        self._call_isolated(listener, self._state)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def on(self, event_type: str, listener: EventListener) -> Callable[[], None]:
        """Listen for a named engine event such as ``"game:saved"``."""
        if event_type not in ENGINE_EVENTS:
            raise ValueError(f"Unknown engine event: {event_type}")
        self._event_listeners.setdefault(event_type, []).append(listener)

        def off() -> None:
            listeners = self._event_listeners.get(event_type, [])
            if listener in listeners:
                listeners.remove(listener)

        return off

    def _call_isolated(self, listener: Callable[[Any], Any], payload: Any) -> None:
        was_publishing = self._publishing
        self._publishing = True
        try:
            listener(payload)
        except Exception:
            logger.exception("Listener %r failed", listener)
        finally:
            self._publishing = was_publishing

    def _notify(self) -> None:
        for listener in list(self._listeners):
            self._call_isolated(listener, self._state)

    def _emit(self, event_type: str, payload: Any = None) -> None:
        for listener in list(self._event_listeners.get(event_type, [])):
            self._call_isolated(listener, payload)

    # ── Mutation ─────────────────────────────────────────────────

    def _commit(self, new_state: GameState, granted: tuple[AchievementDef, ...] = ()) -> None:
        if self._publishing:
            raise ReentrantMutationError("State changed from inside a listener")
        new_state, unlocked = check_achievements(new_state, self._clock())
        self._state = new_state
        self._notify()
        for adef in granted + unlocked:
            logger.info("Achievement unlocked: %s", adef.id)
            self._emit("achievement:unlocked", adef)
        self._schedule_autosave()

    def _grant(self, achievement_id: str) -> None:
        new_state, adef = unlock_achievement(self._state, achievement_id, self._clock())
        if adef is not None:
            self._commit(new_state, granted=(adef,))

    def set_state(self, state: GameState) -> None:
        """Replace the whole state (e.g. after an import)."""
        self._commit(state)

    def _run(self, result: ActionResult) -> ActionResult:
        if result.success:
            self._commit(result.state)
        self._emit("action:executed", result)
        return result

    # ── Actions ──────────────────────────────────────────────────

    def click(self) -> ClickResult:
        result = actions.click(self._state)
        self._commit(result.state)
        self._emit("action:executed", result)
        return result

    def buy_generator(self, generator_id: str) -> ActionResult:
        return self._run(actions.buy_generator(self._state, generator_id))

    def buy_generator_bulk(self, generator_id: str, quantity: int) -> ActionResult:
        return self._run(actions.buy_generator_bulk(self._state, generator_id, quantity))

    def buy_generator_batch(self, generator_id: str, quantity: int) -> ActionResult:
        return self._run(actions.buy_generator_batch(self._state, generator_id, quantity))

    def buy_upgrade(self, upgrade_id: str) -> ActionResult:
        return self._run(actions.buy_upgrade(self._state, upgrade_id))

    def purchase_theme(self, theme_id: str) -> ActionResult:
        return self._run(actions.purchase_theme(self._state, theme_id))

    def activate_theme(self, theme_id: str) -> ActionResult:
        return self._run(actions.activate_theme(self._state, theme_id))

    def update_setting(self, key: str, value: bool) -> ActionResult:
        result = self._run(actions.update_setting(self._state, key, value))
        if result.success and key == "auto_save" and not value:
            self._cancel_autosave()
        return result

    def prestige(self) -> ActionResult:
        return self._run(actions.prestige(self._state))

    def buy_notoriety_generator(self, generator_id: str) -> ActionResult:
        return self._run(actions.buy_notoriety_generator(self._state, generator_id))

    def buy_notoriety_upgrade(self, upgrade_id: str) -> ActionResult:
        return self._run(actions.buy_notoriety_upgrade(self._state, upgrade_id))

    def reset_game(self) -> ActionResult:
        result = self._run(actions.reset_game(self._state, self._clock()))
        self._last_tick_time = self._clock()
        self._emit("game:reset", result.state)
        return result

    # ── Clock ────────────────────────────────────────────────────

    def step(self, now: float | None = None) -> GameState:
        """Run one tick covering the real time since the previous one."""
        if now is None:
            now = self._clock()
        delta = max(0.0, now - self._last_tick_time)
        self._last_tick_time = now
        self._commit(actions.tick(self._state, delta, now))
        return self._state

    def check_for_event(self, now: float | None = None) -> bool:
        """Roll for a random event; True if one started."""
        event_def = self._event_manager.roll(self._state)
        if event_def is None:
            return False
        now = self._clock() if now is None else now
        self._commit(actions.apply_event(self._state, event_def, now))
        logger.debug("Event started: %s", event_def.id)
        self._emit("event:started", event_def)
        return True

    def process_offline_progress(self, now: float | None = None) -> OfflineProgress | None:
        """Credit production earned since ``last_save_time``.

        Returns None when the gap is too short or offline progress is off.
        """
        if not self._state.settings.offline_progress_enabled:
            return None
        now = self._clock() if now is None else now
        bal = BALANCE.engine
        time_away = now - self._state.last_save_time
        if time_away < bal.offline_min_ms:
            return None

        time_processed = min(time_away, bal.offline_cap_ms)
        gained = (
            production_per_second(self._state)
            * (time_processed / 1000)
            * offline_efficiency(self._state)
        )
        stats = self._state.stats
        new_state = replace(
            self._state,
            creds=self._state.creds + gained,
            last_save_time=now,
            stats=replace(
                stats,
                total_creds_earned=stats.total_creds_earned + gained,
                last_tick_time=now,
            ),
        )
        progress = OfflineProgress(
            time_away=time_away,
            time_processed=time_processed,
            creds_gained=gained,
            was_capped=time_away > bal.offline_cap_ms,
        )
        self._last_tick_time = now
        self._commit(new_state)
        logger.info("Offline for %.0fs, credited %.2f creds", time_away / 1000, gained)
        if gained > 0:
            self._emit("offline:progress", progress)
        return progress

    # ── Lifecycle ────────────────────────────────────────────────

    def start(self) -> OfflineProgress | None:
        """Start the timers on the running loop. No-op if already running."""
        if self._running:
            return None
        self._loop = asyncio.get_running_loop()
        self._running = True
        self._paused = False

        stats = self._state.stats
        self._state = replace(self._state, stats=replace(stats, session_count=stats.session_count + 1))
        away = self._clock() - self._state.last_save_time
        progress = self.process_offline_progress()
        for achievement_id in returned_after_absence(away):
            self._grant(achievement_id)
        self._last_tick_time = self._clock()

        self._schedule_tick()
        self._schedule_event_check()
        logger.info("Engine started")
        self._emit("engine:started", self._state)
        return progress

    def stop(self) -> None:
        """Cancel every pending timer before returning."""
        if not self._running:
            return
        self._running = False
        self._paused = False
        for handle in (self._tick_handle, self._event_handle):
            if handle is not None:
                handle.cancel()
        self._tick_handle = None
        self._event_handle = None
        self._cancel_autosave()
        self._state = replace(self._state, last_save_time=self._clock())
        logger.info("Engine stopped")
        self._emit("engine:stopped", self._state)

    def pause(self) -> None:
        if not self._running or self._paused:
            return
        self._paused = True
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def resume(self) -> None:
        if not self._running or not self._paused:
            return
        self._paused = False
        # Paused time is not credited
        self._last_tick_time = self._clock()
        self._schedule_tick()

    def _schedule_tick(self) -> None:
        assert self._loop is not None
        self._tick_handle = self._loop.call_later(
            BALANCE.engine.tick_interval_ms / 1000, self._on_tick
        )

    def _on_tick(self) -> None:
        self._tick_handle = None
        if not self._running or self._paused:
            return
        try:
            self.step()
        finally:
            if self._running and not self._paused:
                self._schedule_tick()

    def _schedule_event_check(self) -> None:
        assert self._loop is not None
        self._event_handle = self._loop.call_later(
            BALANCE.events.check_interval_s, self._on_event_check
        )

    def _on_event_check(self) -> None:
        self._event_handle = None
        if not self._running:
            return
        try:
            self.check_for_event()
        finally:
            if self._running:
                self._schedule_event_check()

    # ── Persistence ──────────────────────────────────────────────

    def _schedule_autosave(self) -> None:
        if (
            self._store is None
            or not self._running
            or not self._state.settings.auto_save
            or self._save_handle is not None
        ):
            return
        assert self._loop is not None
        self._save_handle = self._loop.call_later(BALANCE.engine.autosave_delay_s, self._on_autosave)

    def _cancel_autosave(self) -> None:
        if self._save_handle is not None:
            self._save_handle.cancel()
            self._save_handle = None

    def _on_autosave(self) -> None:
        self._save_handle = None
        self._write()

    def force_save(self) -> SaveResult:
        """Write now, skipping (and cancelling) any pending autosave."""
        self._cancel_autosave()
        return self._write()

    def _write(self) -> SaveResult:
        if self._store is None:
            return SaveResult(False, "No save store attached.")
        # The live state only takes the new stamp once the write succeeded
        stamped = replace(self._state, last_save_time=self._clock())
        result = save_state(self._store, stamped)
        if result.success:
            self._state = stamped
            self._emit("game:saved", stamped)
        return result
