"""Upgrade definitions — all purchasable cred upgrades and their effects.

Each upgrade is exactly one of three variants:

* ``OneShotUpgrade``  — bought once, then done.
* ``TieredUpgrade``   — a bounded number of tiers, each with its own value.
* ``InfiniteUpgrade`` — an uncapped level counter, effect ``value ^ level``.

All three are frozen and share the same interface (``cost``, ``is_maxed``,
``is_owned``, ``purchased``, ``multiplier``, ``bonus``), so callers never
need to ask which optional field is present.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import ClassVar, Union


class UpgradeEffect(Enum):
    """What an upgrade modifies."""

    CLICK_ADDITIVE = auto()        # Flat creds added to base click power
    CLICK_MULTIPLIER = auto()      # Multiply click power
    GENERATOR_MULTIPLIER = auto()  # Multiply one generator's output
    GLOBAL_MULTIPLIER = auto()     # Multiply all production (infinite: clicks too)
    AWARD_DROP_RATE = auto()       # Added to the per-click award chance
    OFFLINE_EFFICIENCY = auto()    # Replaces the base offline efficiency
    CACHE_RATE = auto()            # Per-click Cred Cache chance


@dataclass(frozen=True)
class _UpgradeBase:
    id: str
    name: str
    description: str
    effect: UpgradeEffect
    base_cost: float


@dataclass(frozen=True)
class OneShotUpgrade(_UpgradeBase):
    """Purchasable exactly once."""

    kind: ClassVar[str] = "one_shot"

    value: float = 1.0
    target_generator_id: str = ""
    purchased: bool = False

    def cost(self) -> float:
        return self.base_cost

    @property
    def is_maxed(self) -> bool:
        return self.purchased

    @property
    def is_owned(self) -> bool:
        return self.purchased

    def purchased_next(self) -> OneShotUpgrade:
        return replace(self, purchased=True)

    def multiplier(self) -> float:
        return self.value if self.purchased else 1.0

    def bonus(self) -> float:
        return self.value if self.purchased else 0.0


@dataclass(frozen=True)
class TieredUpgrade(_UpgradeBase):
    """Bounded tiers. ``tier_values[n - 1]`` is the effect at tier n."""

    kind: ClassVar[str] = "tiered"

    tier_values: tuple[float, ...] = ()
    tier_cost_multiplier: float = 1.0
    tier: int = 0
    target_generator_id: str = ""

    @property
    def max_tier(self) -> int:
        return len(self.tier_values)

    @property
    def purchased(self) -> bool:
        # "purchased" means every tier is bought
        return self.tier >= self.max_tier

    def cost(self) -> float:
        return math.floor(self.base_cost * self.tier_cost_multiplier ** self.tier)

    @property
    def is_maxed(self) -> bool:
        return self.purchased

    @property
    def is_owned(self) -> bool:
        return self.tier > 0

    def purchased_next(self) -> TieredUpgrade:
        return replace(self, tier=self.tier + 1)

    def current_value(self) -> float:
        if self.tier <= 0:
            return 0.0
        return self.tier_values[min(self.tier, self.max_tier) - 1]

    def multiplier(self) -> float:
        return self.current_value() if self.tier > 0 else 1.0

    def bonus(self) -> float:
        return self.current_value()


@dataclass(frozen=True)
class InfiniteUpgrade(_UpgradeBase):
    """Uncapped levels; never completes."""

    kind: ClassVar[str] = "infinite"

    value: float = 1.0
    level_cost_multiplier: float = 1.0
    level: int = 0
    target_generator_id: str = ""

    @property
    def purchased(self) -> bool:
        return self.level > 0

    def cost(self) -> float:
        return math.floor(self.base_cost * self.level_cost_multiplier ** self.level)

    @property
    def is_maxed(self) -> bool:
        return False

    @property
    def is_owned(self) -> bool:
        return self.level > 0

    def purchased_next(self) -> InfiniteUpgrade:
        return replace(self, level=self.level + 1)

    def multiplier(self) -> float:
        return self.value ** self.level

    def bonus(self) -> float:
        return self.value * self.level


Upgrade = Union[OneShotUpgrade, TieredUpgrade, InfiniteUpgrade]


# ── Tiered upgrades ───────────────────────────────────────────────

BETTER_CAMERA = TieredUpgrade(
    id="better_camera",
    name="Better Camera",
    description="Adds to base click power per tier (+1, +2, +3, +5, +8, +15, +25).",
    effect=UpgradeEffect.CLICK_ADDITIVE,
    base_cost=500,
    tier_values=(1, 2, 3, 5, 8, 15, 25),
    tier_cost_multiplier=3,
)

LUCKY_CHARM = TieredUpgrade(
    id="lucky_charm",
    name="Lucky Charm",
    description="Raises the award drop rate by +0.3% per tier.",
    effect=UpgradeEffect.AWARD_DROP_RATE,
    base_cost=1_000,
    tier_values=(0.003, 0.006, 0.009, 0.012),
    tier_cost_multiplier=15,
)

OVERNIGHT_SUCCESS = TieredUpgrade(
    id="overnight_success",
    name="Overnight Success",
    description="Offline gains at 50%, 60%, 75%, then 100% efficiency.",
    effect=UpgradeEffect.OFFLINE_EFFICIENCY,
    base_cost=25_000,
    tier_values=(0.5, 0.6, 0.75, 1.0),
    tier_cost_multiplier=5,
)

CRED_CACHE = TieredUpgrade(
    id="cred_cache",
    name="Cred Cache",
    description="Chance per click to find a cache of bonus creds (1/1000 up to 1/500).",
    effect=UpgradeEffect.CACHE_RATE,
    base_cost=10_000,
    tier_values=(1 / 1000, 1 / 900, 1 / 800, 1 / 700, 1 / 600, 1 / 500),
    tier_cost_multiplier=5,
)

# ── One-shot upgrades ─────────────────────────────────────────────

EDITING_SOFTWARE = OneShotUpgrade(
    id="editing_software",
    name="Editing Software",
    description="Photo Posts produce 2x creds.",
    effect=UpgradeEffect.GENERATOR_MULTIPLIER,
    base_cost=2_500,
    value=2,
    target_generator_id="photo",
)

VIDEO_BOOST = OneShotUpgrade(
    id="video_boost",
    name="Pro Video Editor",
    description="Video Content produces 2x creds.",
    effect=UpgradeEffect.GENERATOR_MULTIPLIER,
    base_cost=15_000,
    value=2,
    target_generator_id="video",
)

GOLDEN_CLICKS = OneShotUpgrade(
    id="golden_clicks",
    name="Golden Fingers",
    description="Triple your click power.",
    effect=UpgradeEffect.CLICK_MULTIPLIER,
    base_cost=25_000,
    value=3,
)

VIRAL_STRATEGY = OneShotUpgrade(
    id="viral_strategy",
    name="Viral Strategy",
    description="All production increased by 50%.",
    effect=UpgradeEffect.GLOBAL_MULTIPLIER,
    base_cost=50_000,
    value=1.5,
)

STREAM_BOOST = OneShotUpgrade(
    id="stream_boost",
    name="Streaming Setup",
    description="Live Streams produce 2x creds.",
    effect=UpgradeEffect.GENERATOR_MULTIPLIER,
    base_cost=75_000,
    value=2,
    target_generator_id="stream",
)

ALGORITHM_MASTER = OneShotUpgrade(
    id="algorithm_master",
    name="Algorithm Master",
    description="All production increased by 100%.",
    effect=UpgradeEffect.GLOBAL_MULTIPLIER,
    base_cost=250_000,
    value=2,
)

# ── Infinite upgrades ─────────────────────────────────────────────

BETTER_FILTERS = InfiniteUpgrade(
    id="better_filters",
    name="Better Filters",
    description="+1% click power per level.",
    effect=UpgradeEffect.CLICK_MULTIPLIER,
    base_cost=100_000,
    value=1.01,
    level_cost_multiplier=1.25,
)

AI_ENHANCEMENTS = InfiniteUpgrade(
    id="ai_enhancements",
    name="AI Enhancements",
    description="+5% to clicks and production per level.",
    effect=UpgradeEffect.GLOBAL_MULTIPLIER,
    base_cost=1_000_000,
    value=1.05,
    level_cost_multiplier=1.35,
)

# ── All upgrades registry (roster order) ──────────────────────────

ALL_UPGRADES: dict[str, Upgrade] = {
    u.id: u
    for u in [
        BETTER_CAMERA,
        EDITING_SOFTWARE,
        LUCKY_CHARM,
        CRED_CACHE,
        VIDEO_BOOST,
        GOLDEN_CLICKS,
        OVERNIGHT_SUCCESS,
        VIRAL_STRATEGY,
        STREAM_BOOST,
        BETTER_FILTERS,
        ALGORITHM_MASTER,
        AI_ENHANCEMENTS,
    ]
}
