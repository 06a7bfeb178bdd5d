"""Notoriety — producers that trade cred upkeep for notoriety, and its upgrade tree."""

from __future__ import annotations

import math
from dataclasses import replace

from clickfluencer.data.balance import BALANCE
from clickfluencer.data.notoriety import (
    NOTORIETY_GENERATORS,
    NOTORIETY_UPGRADES,
    NotorietyEffect,
    NotorietyGeneratorDef,
    NotorietyUpgradeDef,
)
from clickfluencer.engine.economy import format_number, production_per_second, upkeep_per_second
from clickfluencer.engine.errors import UnknownIdError
from clickfluencer.engine.game_state import GameState, with_level
from clickfluencer.engine.results import ActionResult, accepted, rejected


def get_notoriety_generator_def(generator_id: str) -> NotorietyGeneratorDef:
    try:
        return NOTORIETY_GENERATORS[generator_id]
    except KeyError:
        raise UnknownIdError("notoriety generator", generator_id) from None


def get_notoriety_upgrade_def(upgrade_id: str) -> NotorietyUpgradeDef:
    try:
        return NOTORIETY_UPGRADES[upgrade_id]
    except KeyError:
        raise UnknownIdError("notoriety upgrade", upgrade_id) from None


# ── Yield ─────────────────────────────────────────────────────────


def notoriety_boost_multiplier(state: GameState) -> float:
    level = state.notoriety_upgrade_level("notoriety_boost")
    return BALANCE.notoriety.notoriety_boost_rate ** level


def notoriety_per_second(state: GameState) -> float:
    """Gross notoriety/s from every owned producer level."""
    total = 0.0
    for gid, level in state.notoriety_generators.items():
        gdef = NOTORIETY_GENERATORS.get(gid)
        if gdef and level > 0:
            total += gdef.notoriety_per_second * level
    return total * notoriety_boost_multiplier(state)


# ── Producer purchase guard ───────────────────────────────────────


def is_notoriety_generator_unlocked(state: GameState, generator_id: str) -> bool:
    gdef = get_notoriety_generator_def(generator_id)
    if state.notoriety_generator_level(generator_id) > 0:
        return True
    return state.creds >= gdef.base_cost * BALANCE.notoriety.unlock_fraction


def projected_net_production(production: float, current_upkeep: float, added_upkeep: float) -> float:
    """Net creds/s left after one more producer's upkeep is added."""
    return production - current_upkeep - added_upkeep


def upkeep_guard_allows(production: float, current_upkeep: float, added_upkeep: float) -> bool:
    """True when net creds/s, in whole creds rounded half up, stays at the floor or above.

    Rounding means a purchase may leave as little as 0.5 creds/s, so 5000.5
    creds/s covers a 5000 creds/s upkeep. A plain ``net >= 1`` comparison
    would refuse that purchase.
    """
    net = projected_net_production(production, current_upkeep, added_upkeep)
    return math.floor(net + 0.5) >= BALANCE.notoriety.min_net_production


def buy_notoriety_generator(state: GameState, generator_id: str) -> ActionResult:
    gdef = NOTORIETY_GENERATORS.get(generator_id)
    if gdef is None:
        return rejected(state, f"Unknown notoriety generator: {generator_id}")

    level = state.notoriety_generator_level(generator_id)
    if level >= gdef.max_level:
        return rejected(state, f"{gdef.name} is at max level.")
    if not is_notoriety_generator_unlocked(state, generator_id):
        return rejected(state, f"{gdef.name} is not unlocked yet.")

    cost = gdef.cost_at_level(level)
    if state.creds < cost:
        return rejected(state, f"Not enough creds for {gdef.name}.")

    if not upkeep_guard_allows(production_per_second(state), upkeep_per_second(state), gdef.upkeep):
        return rejected(state, f"Your creds/s cannot cover the upkeep of another {gdef.name}.")

    new_state = replace(
        state,
        creds=state.creds - cost,
        notoriety_generators=with_level(state.notoriety_generators, generator_id, level + 1),
    )
    return accepted(new_state, f"Hired {gdef.name} (level {level + 1}).")


# ── Upgrades ──────────────────────────────────────────────────────


def notoriety_upgrade_cost(state: GameState, upgrade_id: str) -> float:
    udef = get_notoriety_upgrade_def(upgrade_id)
    return udef.cost_at_level(state.notoriety_upgrade_level(upgrade_id))


def is_notoriety_upgrade_maxed(state: GameState, upgrade_id: str) -> bool:
    udef = get_notoriety_upgrade_def(upgrade_id)
    return udef.cap is not None and state.notoriety_upgrade_level(upgrade_id) >= udef.cap


def instant_income(state: GameState) -> float:
    """Creds granted by one "Buy Creds" purchase."""
    return production_per_second(state) * BALANCE.notoriety.instant_income_seconds


def buy_notoriety_upgrade(state: GameState, upgrade_id: str) -> ActionResult:
    udef = NOTORIETY_UPGRADES.get(upgrade_id)
    if udef is None:
        return rejected(state, f"Unknown notoriety upgrade: {upgrade_id}")

    level = state.notoriety_upgrade_level(upgrade_id)
    if udef.cap is not None and level >= udef.cap:
        return rejected(state, f"{udef.name} is maxed.")

    cost = udef.cost_at_level(level)
    if state.notoriety < cost:
        return rejected(state, f"Not enough notoriety for {udef.name}.")

    creds = state.creds
    stats = state.stats
    message = f"{udef.name} upgraded to level {level + 1}."
    if udef.effect == NotorietyEffect.INSTANT_INCOME:
        # Paid out from the pre-purchase production rate
        income = instant_income(state)
        creds += income
        stats = replace(stats, total_creds_earned=stats.total_creds_earned + income)
        message = f"Bought {format_number(income)} creds."

    new_state = replace(
        state,
        creds=creds,
        notoriety=state.notoriety - cost,
        notoriety_upgrades=with_level(state.notoriety_upgrades, upgrade_id, level + 1),
        stats=stats,
    )
    return accepted(new_state, message)
