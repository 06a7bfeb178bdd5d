"""Game state — the single immutable snapshot of a game in progress.

Every type here is frozen. Sequences are tuples and id → level maps are
read-only mappings, so an updated snapshot never shares a mutable container
with the one it was built from. Use the ``with_*`` builders below (or
``dataclasses.replace``) to derive new snapshots.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Callable, Mapping, TypeVar

from clickfluencer.data.events import EventDef, EventEffect
from clickfluencer.data.generators import ALL_GENERATORS, GeneratorDef
from clickfluencer.data.notoriety import NOTORIETY_GENERATORS, NOTORIETY_UPGRADES
from clickfluencer.data.themes import ALL_THEMES, DEFAULT_THEME_ID, ThemeDef
from clickfluencer.data.upgrades import ALL_UPGRADES, Upgrade
from clickfluencer.engine.errors import UnknownIdError

GAME_VERSION = "1.0.0"

T = TypeVar("T")


def now_ms() -> float:
    """Wall-clock time in epoch milliseconds."""
    return time.time() * 1000


def frozen_map(data: Mapping[str, T] | None = None) -> Mapping[str, T]:
    """Read-only copy of an id → level (or id → unlock time) mapping."""
    return MappingProxyType(dict(data or {}))


@dataclass(frozen=True)
class Generator:
    """One generator slot: the fixed definition plus its owned count."""

    id: str
    name: str
    base_creds_per_second: float
    base_cost: float
    cost_multiplier: float
    count: int = 0
    unlocked: bool = False

    @classmethod
    def from_def(cls, gdef: GeneratorDef) -> Generator:
        return cls(
            id=gdef.id,
            name=gdef.name,
            base_creds_per_second=gdef.base_creds_per_second,
            base_cost=gdef.base_cost,
            cost_multiplier=gdef.cost_multiplier,
            unlocked=gdef.unlocked_by_default,
        )


@dataclass(frozen=True)
class Theme:
    id: str
    name: str
    cost: int
    bonus_multiplier: float = 1.0
    click_bonus: float = 0.0
    unlocked: bool = False
    active: bool = False


@dataclass(frozen=True)
class ActiveEvent:
    """A running timed buff."""

    id: str
    name: str
    description: str
    effect: EventEffect
    multiplier: float
    duration_ms: float
    end_time: float

    @classmethod
    def from_def(cls, edef: EventDef, now: float) -> ActiveEvent:
        return cls(
            id=edef.id,
            name=edef.name,
            description=edef.description,
            effect=edef.effect,
            multiplier=edef.multiplier,
            duration_ms=edef.duration_ms,
            end_time=now + edef.duration_ms,
        )


@dataclass(frozen=True)
class Statistics:
    """Lifetime counters."""

    total_clicks: int = 0
    total_creds_earned: float = 0.0
    total_generators_purchased: int = 0
    total_upgrades_purchased: int = 0
    prestige_count: int = 0
    awards_earned: int = 0
    caches_found: int = 0
    total_notoriety_earned: float = 0.0
    play_time: float = 0.0          # ms
    last_tick_time: float = 0.0     # epoch ms
    run_start_time: float = 0.0     # epoch ms
    session_count: int = 1


@dataclass(frozen=True)
class Settings:
    auto_save: bool = True
    show_notifications: bool = True
    sound_enabled: bool = True
    offline_progress_enabled: bool = True


SETTING_KEYS: tuple[str, ...] = (
    "auto_save",
    "show_notifications",
    "sound_enabled",
    "offline_progress_enabled",
)


@dataclass(frozen=True)
class GameState:
    """Complete snapshot of one game."""

    # ── Currencies ───────────────────────────────────────
    creds: float = 0.0
    awards: int = 0
    prestige: float = 0.0
    notoriety: float = 0.0

    # ── Rosters (fixed at initialization) ────────────────
    generators: tuple[Generator, ...] = ()
    upgrades: tuple[Upgrade, ...] = ()
    themes: tuple[Theme, ...] = ()

    # ── Notoriety: id → level ────────────────────────────
    notoriety_generators: Mapping[str, int] = field(default_factory=frozen_map)
    notoriety_upgrades: Mapping[str, int] = field(default_factory=frozen_map)

    # ── Timed buffs ──────────────────────────────────────
    active_events: tuple[ActiveEvent, ...] = ()

    # ── Achievements: id → unlock time (epoch ms) ────────
    achievements: Mapping[str, float] = field(default_factory=frozen_map)

    stats: Statistics = field(default_factory=Statistics)
    settings: Settings = field(default_factory=Settings)

    version: str = GAME_VERSION
    last_save_time: float = 0.0

    # ── Lookups (programmer faults raise) ────────────────

    def get_generator(self, generator_id: str) -> Generator:
        for g in self.generators:
            if g.id == generator_id:
                return g
        raise UnknownIdError("generator", generator_id)

    def get_upgrade(self, upgrade_id: str) -> Upgrade:
        for u in self.upgrades:
            if u.id == upgrade_id:
                return u
        raise UnknownIdError("upgrade", upgrade_id)

    def get_theme(self, theme_id: str) -> Theme:
        for t in self.themes:
            if t.id == theme_id:
                return t
        raise UnknownIdError("theme", theme_id)

    def has_generator(self, generator_id: str) -> bool:
        return any(g.id == generator_id for g in self.generators)

    def has_upgrade(self, upgrade_id: str) -> bool:
        return any(u.id == upgrade_id for u in self.upgrades)

    def has_theme(self, theme_id: str) -> bool:
        return any(t.id == theme_id for t in self.themes)

    @property
    def active_theme(self) -> Theme | None:
        for t in self.themes:
            if t.active:
                return t
        return None

    def notoriety_generator_level(self, generator_id: str) -> int:
        return self.notoriety_generators.get(generator_id, 0)

    def notoriety_upgrade_level(self, upgrade_id: str) -> int:
        return self.notoriety_upgrades.get(upgrade_id, 0)

    def has_achievement(self, achievement_id: str) -> bool:
        return achievement_id in self.achievements


# ── Builders ──────────────────────────────────────────────────────


def _replace_by_id(items: tuple[T, ...], item_id: str, fn: Callable[[T], T]) -> tuple[T, ...]:
    return tuple(fn(item) if item.id == item_id else item for item in items)


def with_generator(state: GameState, generator_id: str, fn: Callable[[Generator], Generator]) -> GameState:
    return replace(state, generators=_replace_by_id(state.generators, generator_id, fn))


def with_upgrade(state: GameState, upgrade_id: str, fn: Callable[[Upgrade], Upgrade]) -> GameState:
    return replace(state, upgrades=_replace_by_id(state.upgrades, upgrade_id, fn))


def with_theme(state: GameState, theme_id: str, fn: Callable[[Theme], Theme]) -> GameState:
    return replace(state, themes=_replace_by_id(state.themes, theme_id, fn))


def with_stats(state: GameState, **changes) -> GameState:
    return replace(state, stats=replace(state.stats, **changes))


def with_level(mapping: Mapping[str, T], key: str, level: T) -> Mapping[str, T]:
    """New read-only mapping with ``key`` set to ``level``."""
    updated = dict(mapping)
    updated[key] = level
    return MappingProxyType(updated)


# ── Data table lookups ────────────────────────────────────────────


def get_generator_def(generator_id: str) -> GeneratorDef:
    try:
        return ALL_GENERATORS[generator_id]
    except KeyError:
        raise UnknownIdError("generator", generator_id) from None


def get_upgrade_def(upgrade_id: str) -> Upgrade:
    try:
        return ALL_UPGRADES[upgrade_id]
    except KeyError:
        raise UnknownIdError("upgrade", upgrade_id) from None


def get_theme_def(theme_id: str) -> ThemeDef:
    try:
        return ALL_THEMES[theme_id]
    except KeyError:
        raise UnknownIdError("theme", theme_id) from None


# ── Initial state ─────────────────────────────────────────────────


def create_initial_state(now: float | None = None) -> GameState:
    """Assemble the fixed rosters with zeroed counters."""
    if now is None:
        now = now_ms()
    themes = tuple(
        Theme(
            id=t.id,
            name=t.name,
            cost=t.cost,
            bonus_multiplier=t.bonus_multiplier,
            click_bonus=t.click_bonus,
            unlocked=t.id == DEFAULT_THEME_ID,
            active=t.id == DEFAULT_THEME_ID,
        )
        for t in ALL_THEMES.values()
    )
    return GameState(
        generators=tuple(Generator.from_def(g) for g in ALL_GENERATORS.values()),
        upgrades=tuple(ALL_UPGRADES.values()),
        themes=themes,
        notoriety_generators=frozen_map({gid: 0 for gid in NOTORIETY_GENERATORS}),
        notoriety_upgrades=frozen_map({uid: 0 for uid in NOTORIETY_UPGRADES}),
        stats=Statistics(last_tick_time=now, run_start_time=now),
        last_save_time=now,
    )
