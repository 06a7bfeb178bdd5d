"""HUD widget — currencies, rates, prestige progress and active events."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from clickfluencer.data.achievements import ALL_ACHIEVEMENTS
from clickfluencer.engine.economy import (
    click_power,
    format_duration,
    format_number,
    prestige_multiplier,
    production_per_second,
    upkeep_per_second,
)
from clickfluencer.engine.game_state import GameState, now_ms
from clickfluencer.engine.notoriety import notoriety_per_second
from clickfluencer.engine.prestige import can_prestige, estimate_time_to_prestige, prestige_cost


class HUD(Widget):
    """Heads-up display showing core game stats."""

    DEFAULT_CSS = """
    HUD {
        width: 34;
        height: 100%;
        padding: 1;
        border: round $primary;
    }
    """

    creds: reactive[str] = reactive("0")
    per_second: reactive[str] = reactive("0/s")
    per_click: reactive[str] = reactive("1")
    awards: reactive[str] = reactive("0")
    prestige: reactive[str] = reactive("0")
    prestige_mult: reactive[str] = reactive("1.00x")
    prestige_goal: reactive[str] = reactive("")
    prestige_ready: reactive[bool] = reactive(False)
    notoriety: reactive[str] = reactive("0")
    notoriety_rate: reactive[str] = reactive("0/h")
    upkeep: reactive[str] = reactive("")
    theme_name: reactive[str] = reactive("Dark")
    achievements: reactive[str] = reactive("0")
    events_text: reactive[str] = reactive("")

    def render(self) -> Text:
        text = Text()
        text.append("  === Clickfluencer ===\n\n", style="bold magenta")

        text.append("  Creds: ", style="dim")
        text.append(f"{self.creds}\n", style="bold green")
        text.append("  Per Click: ", style="dim")
        text.append(f"{self.per_click}\n", style="green")
        text.append("  Passive: ", style="dim")
        text.append(f"{self.per_second}\n", style="green")
        if self.upkeep:
            text.append("  Upkeep: ", style="dim")
            text.append(f"{self.upkeep}\n", style="red")

        text.append("\n")
        text.append("  Awards: ", style="dim")
        text.append(f"{self.awards}\n", style="bold yellow")
        text.append("  Notoriety: ", style="dim")
        text.append(f"{self.notoriety} ({self.notoriety_rate})\n", style="bold cyan")
        text.append("  Theme: ", style="dim")
        text.append(f"{self.theme_name}\n", style="cyan")
        text.append("  Achievements: ", style="dim")
        text.append(f"{self.achievements}\n", style="magenta")

        text.append("\n")
        text.append("  Prestige: ", style="dim")
        text.append(f"{self.prestige} ({self.prestige_mult})\n", style="bold yellow")
        goal_style = "bold green" if self.prestige_ready else "dim"
        text.append(f"  {self.prestige_goal}\n", style=goal_style)

        if self.events_text:
            text.append("\n")
            text.append("  Events:\n", style="bold red")
            text.append(self.events_text, style="red")

        text.append("\n")
        text.append("  [Space] Click  [1-6] Buy\n", style="dim italic")
        text.append("  [a-l] Upgrade  [P] Prestige\n", style="dim italic")
        text.append("  [Q] Quit\n", style="dim italic")
        return text

    def update_from_state(self, state: GameState) -> None:
        """Sync HUD with game state."""
        self.creds = format_number(state.creds)
        self.per_click = format_number(click_power(state))
        self.per_second = f"{format_number(production_per_second(state))}/s"
        upkeep = upkeep_per_second(state)
        self.upkeep = f"-{format_number(upkeep)}/s" if upkeep > 0 else ""

        self.awards = format_number(state.awards)
        self.notoriety = format_number(state.notoriety)
        self.notoriety_rate = f"{format_number(notoriety_per_second(state) * 3600)}/h"
        theme = state.active_theme
        self.theme_name = theme.name if theme else "None"
        self.achievements = f"{len(state.achievements)}/{len(ALL_ACHIEVEMENTS)}"

        self.prestige = format_number(state.prestige)
        self.prestige_mult = f"{prestige_multiplier(state):.2f}x"
        self.prestige_ready = can_prestige(state)
        cost = format_number(prestige_cost(state.prestige))
        if self.prestige_ready:
            self.prestige_goal = f"Ready! [P] for {cost}"
        else:
            eta = format_duration(estimate_time_to_prestige(state))
            self.prestige_goal = f"Next at {cost} (~{eta})"

        now = now_ms()
        self.events_text = "".join(
            f"  {e.name} x{e.multiplier:g} ({format_duration(max(0.0, e.end_time - now))})\n"
            for e in state.active_events
        )
