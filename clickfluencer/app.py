"""Clickfluencer — Main Textual Application.

A thin host around an injected GameEngine: it forwards keypresses to the
engine and redraws on every state change. All game logic lives in
``clickfluencer.engine``.
"""

from __future__ import annotations

from typing import Callable

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header

from clickfluencer.data.achievements import AchievementDef
from clickfluencer.data.events import EventDef
from clickfluencer.engine.economy import format_duration, format_number, generator_cost
from clickfluencer.engine.game_state import GameState
from clickfluencer.engine.runtime import GameEngine, OfflineProgress
from clickfluencer.ui.hud import HUD
from clickfluencer.ui.shop_panel import GENERATOR_KEYS, UPGRADE_KEYS, GeneratorPanel, UpgradePanel


class ClickfluencerApp(App):
    """The Clickfluencer TUI game application."""

    TITLE = "Clickfluencer"
    SUB_TITLE = "Post. Grow. Go viral."

    CSS = """
    #game-container {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("space", "click", "Click", show=True, priority=True),
        Binding("enter", "click", "Click", show=False),
        *[
            Binding(key, f"buy_generator({index})", f"Buy #{key}", show=False)
            for index, key in enumerate(GENERATOR_KEYS)
        ],
        *[
            Binding(key, f"buy_upgrade({index})", f"Upgrade {key}", show=False)
            for index, key in enumerate(UPGRADE_KEYS)
        ],
        Binding("x", "buy_ten", "Buy x10 cheapest", show=True),
        Binding("p", "prestige", "Prestige", show=True),
        Binding("s", "save", "Save", show=True),
        Binding("q", "quit_game", "Quit", show=True),
    ]

    def __init__(self, engine: GameEngine) -> None:
        super().__init__()
        self._engine = engine
        self._unsubscribers: list[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="game-container"):
            yield HUD(id="hud-panel")
            yield GeneratorPanel(id="generator-panel")
            yield UpgradePanel(id="upgrade-panel")
        yield Footer()

    def on_mount(self) -> None:
        """Wire engine events to the UI, then start the game loop."""
        engine = self._engine
        self._unsubscribers = [
            engine.subscribe(self._sync_ui),
            engine.on("event:started", self._on_event_started),
            engine.on("offline:progress", self._on_offline_progress),
            engine.on("achievement:unlocked", self._on_achievement),
        ]
        engine.start()

    def on_unmount(self) -> None:
        """Save and stop however the app is closed."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._engine.force_save()
        self._engine.stop()

    def _sync_ui(self, state: GameState) -> None:
        """Push game state to all UI widgets."""
        self.query_one("#hud-panel", HUD).update_from_state(state)
        self.query_one("#generator-panel", GeneratorPanel).update_from_state(state)
        self.query_one("#upgrade-panel", UpgradePanel).update_from_state(state)

    def _notify(self, message: str, severity: str = "information", timeout: float = 2) -> None:
        if self._engine.state.settings.show_notifications:
            self.notify(message, severity=severity, timeout=timeout)

    def _on_event_started(self, event: EventDef) -> None:
        self._notify(f"✦ {event.name}! {event.description}", severity="warning", timeout=4)

    def _on_achievement(self, achievement: AchievementDef) -> None:
        self._notify(f"{achievement.icon} Achievement: {achievement.name}", timeout=3)

    def _on_offline_progress(self, progress: OfflineProgress) -> None:
        away = format_duration(progress.time_away)
        capped = " (capped)" if progress.was_capped else ""
        self._notify(
            f"Welcome back! Away {away}{capped}: +{format_number(progress.creds_gained)} creds",
            timeout=5,
        )

    # ── Actions ──────────────────────────────────────

    def action_click(self) -> None:
        result = self._engine.click()
        if result.award_dropped:
            self._notify("🏆 An award dropped!", severity="warning")
        if result.cache_dropped:
            self._notify(f"💰 Cred Cache! +{format_number(result.cache_amount)}", severity="warning")

    def action_buy_generator(self, index: int) -> None:
        generators = self._engine.state.generators
        if index >= len(generators):
            return
        result = self._engine.buy_generator(generators[index].id)
        if not result.success:
            self._notify(result.message, severity="error", timeout=1)

    def action_buy_ten(self) -> None:
        """Buy ten of the cheapest unlocked generator, all or nothing."""
        unlocked = [g for g in self._engine.state.generators if g.unlocked]
        if not unlocked:
            return
        cheapest = min(unlocked, key=generator_cost)
        result = self._engine.buy_generator_batch(cheapest.id, 10)
        severity = "information" if result.success else "error"
        self._notify(result.message, severity=severity, timeout=1)

    def action_buy_upgrade(self, index: int) -> None:
        upgrades = self._engine.state.upgrades
        if index >= len(upgrades):
            return
        result = self._engine.buy_upgrade(upgrades[index].id)
        severity = "information" if result.success else "error"
        self._notify(result.message, severity=severity, timeout=1)

    def action_prestige(self) -> None:
        result = self._engine.prestige()
        severity = "warning" if result.success else "error"
        self._notify(result.message, severity=severity, timeout=3)

    def action_save(self) -> None:
        result = self._engine.force_save()
        severity = "information" if result.success else "error"
        self._notify(result.message, severity=severity, timeout=1)

    def action_quit_game(self) -> None:
        """Quit; on_unmount saves and stops the engine."""
        self.exit()
