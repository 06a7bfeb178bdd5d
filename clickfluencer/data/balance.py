"""Balance constants — all tuning knobs in one place.

Tweak these to adjust pacing and progression curves.
Generator costs follow: base_cost * (cost_multiplier ^ count)
Times are epoch milliseconds unless a field name says otherwise.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for clicks, generators, drops and number formatting."""

    # Creds per click before upgrades / prestige / theme
    base_click_power: float = 1.0

    # A generator unlocks once creds >= base_cost * this fraction
    generator_unlock_fraction: float = 1.0

    # Award (premium currency) drop chance per click before Lucky Charm
    award_base_drop_rate: float = 0.003

    # Cred Cache payout band: uniform fraction of current creds
    cache_payout_min: float = 0.01
    cache_payout_max: float = 0.05

    # Large number formatting thresholds
    suffixes: tuple[tuple[float, str], ...] = (
        (1e3, "K"),
        (1e6, "M"),
        (1e9, "B"),
        (1e12, "T"),
        (1e15, "Qa"),
        (1e18, "Qi"),
    )


@dataclass(frozen=True)
class PrestigeBalance:
    """Tuning for the prestige (spend) model.

    cost(P) = base_cost * (P + 1) ^ (1 / exponent)
    bonus   = 1 + prestige * bonus_per_point
    """

    base_cost: float = 1e7
    exponent: float = 0.4
    bonus_per_point: float = 0.10


@dataclass(frozen=True)
class NotorietyBalance:
    """Tuning for the notoriety producers and upgrades."""

    # Net creds/s that must remain after a producer's upkeep is added
    min_net_production: float = 1.0
    # A notoriety producer is shown unlocked at creds >= base_cost * fraction
    unlock_fraction: float = 0.5
    # "Buy Creds" credits this many seconds of current production
    instant_income_seconds: float = 1800.0

    cred_boost_per_level: float = 0.01
    notoriety_boost_rate: float = 1.01
    cache_value_per_level: float = 0.05
    drama_boost_per_level: float = 0.002
    # Prestige gain multiplier by Influencer Endorsement level (index = level)
    endorsement_multipliers: tuple[float, ...] = (1.0, 1.10, 1.25, 1.50)


@dataclass(frozen=True)
class EventBalance:
    """Tuning for timed random events."""

    check_interval_s: float = 30.0
    trigger_chance: float = 0.05
    max_active: int = 3


@dataclass(frozen=True)
class EngineBalance:
    """Tuning for the tick loop, offline catch-up and autosave."""

    tick_interval_ms: float = 250.0

    # Offline catch-up
    offline_min_ms: float = 60_000.0            # shorter gaps are a tab refresh
    offline_cap_ms: float = 8 * 60 * 60 * 1000.0
    base_offline_efficiency: float = 0.5

    # Coalesced autosave delay after the first unsaved change
    autosave_delay_s: float = 5.0


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    prestige: PrestigeBalance = field(default_factory=PrestigeBalance)
    notoriety: NotorietyBalance = field(default_factory=NotorietyBalance)
    events: EventBalance = field(default_factory=EventBalance)
    engine: EngineBalance = field(default_factory=EngineBalance)


BALANCE = GameBalance()
