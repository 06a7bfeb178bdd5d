"""Shop panels — generators and upgrades with prices and hotkeys."""

from __future__ import annotations

from rich.text import Text
from textual.reactive import reactive
from textual.widget import Widget

from clickfluencer.data.upgrades import InfiniteUpgrade, TieredUpgrade, Upgrade
from clickfluencer.engine.economy import format_number, generator_cost, generator_production
from clickfluencer.engine.game_state import GameState

GENERATOR_KEYS = "123456"
UPGRADE_KEYS = "abcdefghijkl"


def _upgrade_progress(u: Upgrade) -> str:
    if isinstance(u, TieredUpgrade):
        return f"tier {u.tier}/{u.max_tier}"
    if isinstance(u, InfiniteUpgrade):
        return f"lvl {u.level}"
    return "owned" if u.purchased else ""


class GeneratorPanel(Widget):
    """Owned generators, their output and next price."""

    DEFAULT_CSS = """
    GeneratorPanel {
        width: 1fr;
        height: 100%;
        padding: 1;
        border: round $secondary;
    }
    """

    lines: reactive[tuple] = reactive(())

    def render(self) -> Text:
        text = Text()
        text.append("  GENERATORS\n\n", style="bold underline")
        for key, name, count, rate, cost, unlocked, affordable in self.lines:
            if not unlocked:
                text.append(f"  [{key}] ???  (locked)\n", style="dim")
                continue
            style = "bold green" if affordable else "white"
            text.append(f"  [{key}] {name}", style=style)
            text.append(f"  x{count}\n", style="cyan")
            text.append(f"      {rate}/s  ·  next {cost}\n", style="dim")
        return text

    def update_from_state(self, state: GameState) -> None:
        lines = []
        for key, g in zip(GENERATOR_KEYS, state.generators):
            cost = generator_cost(g)
            lines.append((
                key,
                g.name,
                g.count,
                format_number(generator_production(state, g)),
                format_number(cost),
                g.unlocked,
                g.unlocked and state.creds >= cost,
            ))
        self.lines = tuple(lines)


class UpgradePanel(Widget):
    """Every upgrade with its progress and next price."""

    DEFAULT_CSS = """
    UpgradePanel {
        width: 1fr;
        height: 100%;
        padding: 1;
        border: round $accent;
    }
    """

    lines: reactive[tuple] = reactive(())

    def render(self) -> Text:
        text = Text()
        text.append("  UPGRADES\n\n", style="bold underline")
        for key, name, progress, cost, maxed, affordable in self.lines:
            if maxed:
                text.append(f"  [{key}] {name}  ✓\n", style="dim green")
                continue
            style = "bold green" if affordable else "white"
            text.append(f"  [{key}] {name}", style=style)
            if progress:
                text.append(f"  {progress}", style="cyan")
            text.append(f"  {cost}\n", style="dim")
        return text

    def update_from_state(self, state: GameState) -> None:
        lines = []
        for key, u in zip(UPGRADE_KEYS, state.upgrades):
            cost = u.cost()
            lines.append((
                key,
                u.name,
                _upgrade_progress(u),
                format_number(cost),
                u.is_maxed,
                not u.is_maxed and state.creds >= cost,
            ))
        self.lines = tuple(lines)
