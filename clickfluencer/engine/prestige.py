"""Prestige — buy permanent +10% bonus points with creds.

Prestige is a spend model: each point costs more than the last and buying
one resets nothing. Generators, upgrades, themes and notoriety all carry
over untouched.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace

from clickfluencer.data.balance import BALANCE
from clickfluencer.engine.economy import (
    drama_multiplier,
    production_per_second,
    time_to_afford,
)
from clickfluencer.engine.game_state import GameState
from clickfluencer.engine.results import ActionResult, accepted, rejected

logger = logging.getLogger(__name__)


def prestige_cost(current_prestige: float) -> float:
    """Creds needed for the next point: base × (P + 1) ^ (1 / 0.4)."""
    bal = BALANCE.prestige
    return math.floor(bal.base_cost * (current_prestige + 1) ** (1 / bal.exponent))


def prestige_gain(state: GameState) -> float:
    """Points granted by one purchase, raised by Influencer Endorsement."""
    table = BALANCE.notoriety.endorsement_multipliers
    level = state.notoriety_upgrade_level("influencer_endorsement")
    return table[min(level, len(table) - 1)]


def post_prestige_multiplier(state: GameState) -> float:
    """Prestige multiplier the player would have after the next purchase."""
    after = state.prestige + prestige_gain(state)
    return (1.0 + after * BALANCE.prestige.bonus_per_point) * drama_multiplier(state)


def can_prestige(state: GameState) -> bool:
    return state.creds >= prestige_cost(state.prestige)


def buy_prestige(state: GameState) -> ActionResult:
    cost = prestige_cost(state.prestige)
    if state.creds < cost:
        return rejected(state, "Not enough creds to prestige.")

    gain = prestige_gain(state)
    new_state = replace(
        state,
        creds=state.creds - cost,
        prestige=state.prestige + gain,
        stats=replace(state.stats, prestige_count=state.stats.prestige_count + 1),
    )
    logger.info("Prestige bought: %.2f -> %.2f for %d creds", state.prestige, new_state.prestige, cost)
    return accepted(new_state, f"Prestige +{gain:g}!")


def estimate_time_to_prestige(state: GameState) -> float:
    """Milliseconds until the next point is affordable at current creds/s.

    ``math.inf`` when production is zero, 0 when it is already affordable.
    """
    return time_to_afford(state.creds, prestige_cost(state.prestige), production_per_second(state))
