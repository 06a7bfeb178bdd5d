"""Achievements — evaluate unlock conditions against a GameState."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from clickfluencer.data.achievements import ALL_ACHIEVEMENTS, AchievementCondition, AchievementDef
from clickfluencer.engine.economy import click_power
from clickfluencer.engine.errors import UnknownIdError
from clickfluencer.engine.game_state import GameState, now_ms, with_level

C = AchievementCondition

# Conditions that compare one number against the threshold
_PROGRESS: dict[AchievementCondition, Callable[[GameState], float]] = {
    C.TOTAL_CLICKS: lambda s: s.stats.total_clicks,
    C.CLICK_POWER: click_power,
    C.TOTAL_CREDS_EARNED: lambda s: s.stats.total_creds_earned,
    C.AWARDS_EARNED: lambda s: s.stats.awards_earned,
    C.PRESTIGE_POINTS: lambda s: s.prestige,
    C.NOTORIETY: lambda s: s.notoriety,
    C.GENERATORS_PURCHASED: lambda s: s.stats.total_generators_purchased,
    C.UPGRADES_PURCHASED: lambda s: s.stats.total_upgrades_purchased,
    C.PRESTIGE_COUNT: lambda s: s.stats.prestige_count,
    C.THEMES_UNLOCKED: lambda s: sum(1 for t in s.themes if t.unlocked),
    C.PLAY_TIME: lambda s: s.stats.play_time,
    C.SESSION_COUNT: lambda s: s.stats.session_count,
}


def get_achievement_def(achievement_id: str) -> AchievementDef:
    try:
        return ALL_ACHIEVEMENTS[achievement_id]
    except KeyError:
        raise UnknownIdError("achievement", achievement_id) from None


def is_met(adef: AchievementDef, state: GameState) -> bool:
    cond = adef.condition
    if cond in _PROGRESS:
        return _PROGRESS[cond](state) >= adef.threshold
    if cond is C.ALL_GENERATORS_UNLOCKED:
        return all(g.unlocked for g in state.generators)
    if cond is C.ALL_THEMES_UNLOCKED:
        return all(t.unlocked for t in state.themes)
    if cond is C.PRESTIGE_EXACT:
        return state.stats.prestige_count == adef.threshold
    return False


def achievement_progress(state: GameState, achievement_id: str) -> float:
    """0.0 to 1.0 toward an unlock; 1.0 once unlocked."""
    adef = get_achievement_def(achievement_id)
    if state.has_achievement(achievement_id):
        return 1.0
    if adef.condition not in _PROGRESS or adef.threshold <= 0:
        return 0.0
    return min(1.0, _PROGRESS[adef.condition](state) / adef.threshold)


def check_achievements(
    state: GameState, now: float | None = None
) -> tuple[GameState, tuple[AchievementDef, ...]]:
    """Unlock every achievement whose condition now holds.

    Returns the updated state and the newly unlocked definitions in table
    order. The state is returned unchanged when nothing new unlocks.
    """
    unlocked = tuple(
        adef
        for adef in ALL_ACHIEVEMENTS.values()
        if adef.id not in state.achievements and is_met(adef, state)
    )
    if not unlocked:
        return state, ()
    if now is None:
        now = now_ms()
    achievements = state.achievements
    for adef in unlocked:
        achievements = with_level(achievements, adef.id, now)
    return replace(state, achievements=achievements), unlocked


def unlock_achievement(
    state: GameState, achievement_id: str, now: float | None = None
) -> tuple[GameState, AchievementDef | None]:
    """Grant one achievement directly. None when it was already unlocked."""
    adef = get_achievement_def(achievement_id)
    if state.has_achievement(achievement_id):
        return state, None
    if now is None:
        now = now_ms()
    return replace(state, achievements=with_level(state.achievements, achievement_id, now)), adef


def returned_after_absence(away_ms: float) -> tuple[str, ...]:
    """Ids of the achievements earned by coming back after ``away_ms``."""
    return tuple(
        adef.id
        for adef in ALL_ACHIEVEMENTS.values()
        if adef.condition is C.RETURN_AFTER and away_ms >= adef.threshold
    )
