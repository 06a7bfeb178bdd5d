"""Economy — pure selectors over a GameState, plus number formatting.

Nothing here mutates state or rolls dice. Every value the UI shows
(click power, creds/s, prices, drop chances) is derived here.
"""

from __future__ import annotations

import math

from clickfluencer.data.balance import BALANCE
from clickfluencer.data.events import PRODUCTION_EFFECTS, EventEffect
from clickfluencer.data.notoriety import NOTORIETY_GENERATORS
from clickfluencer.data.upgrades import InfiniteUpgrade, UpgradeEffect
from clickfluencer.engine.game_state import GameState, Generator


# ── Generator pricing ─────────────────────────────────────────────


def generator_cost(g: Generator) -> float:
    """Price of the next unit: floor(base_cost × cost_multiplier ^ count)."""
    return math.floor(g.base_cost * g.cost_multiplier ** g.count)


def geometric_series_cost(g: Generator, quantity: int) -> float:
    """Closed-form estimate of the next ``quantity`` units, floored.

    Ignores per-unit flooring, so it can overshoot the true price by up to
    ``quantity - 1`` creds. Use it only to estimate.
    """
    if quantity <= 0:
        return 0
    first = g.base_cost * g.cost_multiplier ** g.count
    if g.cost_multiplier == 1:
        return math.floor(first * quantity)
    return math.floor(first * (g.cost_multiplier ** quantity - 1) / (g.cost_multiplier - 1))


def bulk_generator_cost(g: Generator, quantity: int) -> float:
    """Exact price of the next ``quantity`` units.

    Sums the individual floored prices so buying one at a time and buying
    the batch always cost the same to the last cred.
    """
    if quantity <= 0:
        return 0
    return sum(
        math.floor(g.base_cost * g.cost_multiplier ** (g.count + i)) for i in range(quantity)
    )


def max_affordable(g: Generator, creds: float) -> int:
    """Largest quantity whose bulk price fits in ``creds``."""
    first = g.base_cost * g.cost_multiplier ** g.count
    if creds < math.floor(first):
        return 0
    if g.cost_multiplier == 1:
        n = int(creds // max(math.floor(first), 1))
    else:
        n = int(math.log(creds * (g.cost_multiplier - 1) / first + 1, g.cost_multiplier))
    n = max(n, 0)
    # Closed form ignores flooring; walk to the exact boundary
    while n > 0 and bulk_generator_cost(g, n) > creds:
        n -= 1
    while bulk_generator_cost(g, n + 1) <= creds:
        n += 1
    return n


def should_unlock(g: Generator, creds: float) -> bool:
    return creds >= g.base_cost * BALANCE.economy.generator_unlock_fraction


def can_afford(balance: float, cost: float) -> bool:
    return balance >= cost


# ── Multipliers ───────────────────────────────────────────────────


def drama_multiplier(state: GameState) -> float:
    level = state.notoriety_upgrade_level("drama_boost")
    return 1.0 + level * BALANCE.notoriety.drama_boost_per_level


def prestige_multiplier(state: GameState) -> float:
    """Bonus from prestige points: (1 + 10% per point) × drama boost."""
    bonus = 1.0 + state.prestige * BALANCE.prestige.bonus_per_point
    return bonus * drama_multiplier(state)


def theme_multiplier(state: GameState) -> float:
    """Only the active theme counts; owned-but-inactive themes grant nothing."""
    theme = state.active_theme
    return theme.bonus_multiplier if theme else 1.0


def theme_click_bonus(state: GameState) -> float:
    theme = state.active_theme
    return theme.click_bonus if theme else 0.0


def event_production_multiplier(state: GameState) -> float:
    mult = 1.0
    for event in state.active_events:
        if event.effect in PRODUCTION_EFFECTS:
            mult *= event.multiplier
    return mult


def click_event_multiplier(state: GameState) -> float:
    mult = 1.0
    for event in state.active_events:
        if event.effect == EventEffect.CLICK:
            mult *= event.multiplier
    return mult


def cred_boost_multiplier(state: GameState) -> float:
    level = state.notoriety_upgrade_level("cred_boost")
    return 1.0 + level * BALANCE.notoriety.cred_boost_per_level


# ── Click power / production ──────────────────────────────────────


def click_power(state: GameState) -> float:
    """Creds per click, before click events.

    Additive terms (base, Better Camera tier table, theme click bonus) are
    summed first, then every multiplier is applied.
    """
    additive = BALANCE.economy.base_click_power + theme_click_bonus(state)
    mult = 1.0
    for u in state.upgrades:
        if u.effect == UpgradeEffect.CLICK_ADDITIVE:
            additive += u.bonus()
        elif u.effect == UpgradeEffect.CLICK_MULTIPLIER:
            mult *= u.multiplier()
        elif u.effect == UpgradeEffect.GLOBAL_MULTIPLIER and isinstance(u, InfiniteUpgrade):
            # Only the infinite global upgrade reaches clicks
            mult *= u.multiplier()

    return additive * mult * prestige_multiplier(state) * theme_multiplier(state)


def generator_production(state: GameState, g: Generator) -> float:
    """Creds/s from one generator before global multipliers."""
    rate = g.base_creds_per_second * g.count
    for u in state.upgrades:
        if u.effect == UpgradeEffect.GENERATOR_MULTIPLIER and u.target_generator_id == g.id:
            rate *= u.multiplier()
    return rate


def production_per_second(state: GameState) -> float:
    """Gross creds/s from generators, before notoriety upkeep."""
    base = sum(generator_production(state, g) for g in state.generators)
    if base <= 0:
        return 0.0

    mult = 1.0
    for u in state.upgrades:
        if u.effect == UpgradeEffect.GLOBAL_MULTIPLIER:
            mult *= u.multiplier()

    return (
        base
        * mult
        * prestige_multiplier(state)
        * theme_multiplier(state)
        * event_production_multiplier(state)
        * cred_boost_multiplier(state)
    )


def upkeep_per_second(state: GameState) -> float:
    """Creds/s drained by owned notoriety producers."""
    total = 0.0
    for gid, level in state.notoriety_generators.items():
        gdef = NOTORIETY_GENERATORS.get(gid)
        if gdef and level > 0:
            total += gdef.upkeep * level
    return total


def net_production_per_second(state: GameState) -> float:
    return max(0.0, production_per_second(state) - upkeep_per_second(state))


# ── Drops ─────────────────────────────────────────────────────────


def award_drop_rate(state: GameState) -> float:
    rate = BALANCE.economy.award_base_drop_rate
    for u in state.upgrades:
        if u.effect == UpgradeEffect.AWARD_DROP_RATE:
            rate += u.bonus()
    return rate


def cache_drop_rate(state: GameState) -> float:
    rate = 0.0
    for u in state.upgrades:
        if u.effect == UpgradeEffect.CACHE_RATE:
            rate += u.bonus()
    return rate


def cache_payout_multiplier(state: GameState) -> float:
    level = state.notoriety_upgrade_level("cache_value")
    return 1.0 + level * BALANCE.notoriety.cache_value_per_level


def offline_efficiency(state: GameState) -> float:
    """Fraction of production credited while away (0.5 up to 1.0)."""
    eff = BALANCE.engine.base_offline_efficiency
    for u in state.upgrades:
        if u.effect == UpgradeEffect.OFFLINE_EFFICIENCY and u.is_owned:
            eff = max(eff, u.bonus())
    return eff


# ── Time ──────────────────────────────────────────────────────────


def time_to_afford(balance: float, cost: float, rate: float) -> float:
    """Milliseconds until ``balance`` reaches ``cost`` at ``rate`` creds/s.

    0 when already affordable, ``math.inf`` when the rate cannot get there.
    """
    if balance >= cost:
        return 0.0
    if rate <= 0:
        return math.inf
    return (cost - balance) / rate * 1000


def total_play_time(state: GameState) -> float:
    """Milliseconds of simulated play across all sessions."""
    return state.stats.play_time


# ── Formatting ────────────────────────────────────────────────────


def format_number(n: float) -> str:
    """Format a number with suffixes for readability."""
    if math.isinf(n):
        return "∞"
    if n < 0:
        return f"-{format_number(-n)}"

    for threshold, suffix in reversed(BALANCE.economy.suffixes):
        if n >= threshold:
            value = n / threshold
            if value >= 100:
                return f"{value:.0f}{suffix}"
            elif value >= 10:
                return f"{value:.1f}{suffix}"
            else:
                return f"{value:.2f}{suffix}"

    if n >= 100:
        return f"{n:.0f}"
    elif n >= 10:
        return f"{n:.1f}"
    elif n == int(n):
        return str(int(n))
    else:
        return f"{n:.1f}"


def format_duration(ms: float) -> str:
    """Compact duration like ``1h 05m`` or ``42s``."""
    if math.isinf(ms):
        return "never"
    seconds = int(ms // 1000)
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    if hours:
        return f"{hours}h {minutes:02d}m"
    if minutes:
        return f"{minutes}m {secs:02d}s"
    return f"{secs}s"
