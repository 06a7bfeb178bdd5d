"""Notoriety definitions — producers that drain creds, and the notoriety upgrade tree.

Notoriety producers yield notoriety over time but charge a per-second cred
upkeep for every owned level. Notoriety persists through prestige and is
spent on the permanent upgrades below.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum, auto


@dataclass(frozen=True)
class NotorietyGeneratorDef:
    """Definition of a notoriety producer tier."""

    id: str
    name: str
    description: str
    base_cost: float          # in creds
    growth: float             # cost multiplier per owned level
    notoriety_per_hour: float
    upkeep: float             # creds per second, per level
    max_level: int

    def cost_at_level(self, current_level: int) -> float:
        """Creds cost for the *next* level given current_level owned."""
        return math.floor(self.base_cost * (self.growth ** current_level))

    @property
    def notoriety_per_second(self) -> float:
        return self.notoriety_per_hour / 3600


class NotorietyEffect(Enum):
    CRED_BOOST = auto()              # production × (1 + 0.01 × level)
    NOTORIETY_BOOST = auto()         # notoriety yield × 1.01 ^ level
    CACHE_VALUE = auto()             # cache payout × (1 + 0.05 × level)
    DRAMA_BOOST = auto()             # prestige multiplier × (1 + 0.002 × level)
    INFLUENCER_ENDORSEMENT = auto()  # prestige gain × 1.10 / 1.25 / 1.50
    INSTANT_INCOME = auto()          # credit 30 minutes of production at once


@dataclass(frozen=True)
class NotorietyUpgradeDef:
    """Definition of a notoriety upgrade."""

    id: str
    name: str
    description: str
    effect: NotorietyEffect
    base_cost: float
    cost_growth: float = 1.0
    # Linear cost component per owned level
    cost_step: float = 0.0
    # None = infinite
    cap: int | None = None

    def cost_at_level(self, current_level: int) -> float:
        """Notoriety cost for the *next* purchase given current_level owned."""
        return math.floor(
            self.base_cost * (self.cost_growth ** current_level)
            + self.cost_step * current_level
        )


NOTORIETY_GENERATORS: dict[str, NotorietyGeneratorDef] = {
    g.id: g
    for g in [
        NotorietyGeneratorDef(
            id="smm",
            name="Social Media Manager",
            description="Builds your online presence and reputation.",
            base_cost=1e5,
            growth=1.8,
            notoriety_per_hour=1,
            upkeep=5_000,
            max_level=10,
        ),
        NotorietyGeneratorDef(
            id="pr_team",
            name="PR Team",
            description="Handles publicity and media relations.",
            base_cost=1e8,
            growth=2.2,
            notoriety_per_hour=5,
            upkeep=25_000,
            max_level=10,
        ),
        NotorietyGeneratorDef(
            id="key_client",
            name="Key Client",
            description="High-profile partnerships boost your notoriety.",
            base_cost=1e10,
            growth=2.5,
            notoriety_per_hour=25,
            upkeep=250_000,
            max_level=10,
        ),
    ]
}


NOTORIETY_UPGRADES: dict[str, NotorietyUpgradeDef] = {
    u.id: u
    for u in [
        NotorietyUpgradeDef(
            id="cache_value",
            name="Cache Value Increase",
            description="+5% to Cred Cache payout per level.",
            effect=NotorietyEffect.CACHE_VALUE,
            base_cost=10,
            cost_step=10,
            cap=10,
        ),
        NotorietyUpgradeDef(
            id="drama_boost",
            name="Drama Multiplier Boost",
            description="+0.2% to the global prestige bonus per level.",
            effect=NotorietyEffect.DRAMA_BOOST,
            base_cost=25,
            cost_growth=2.5,
            cap=5,
        ),
        NotorietyUpgradeDef(
            id="buy_creds",
            name="Buy Creds",
            description="Instantly grants 30 minutes of current creds/s.",
            effect=NotorietyEffect.INSTANT_INCOME,
            base_cost=10,
        ),
        NotorietyUpgradeDef(
            id="cred_boost",
            name="Cred Boost",
            description="+1% to all passive creds/s per level.",
            effect=NotorietyEffect.CRED_BOOST,
            base_cost=50,
            cost_growth=1.4,
        ),
        NotorietyUpgradeDef(
            id="notoriety_boost",
            name="Notoriety Boost",
            description="+1% to total notoriety/hr per level, compounding.",
            effect=NotorietyEffect.NOTORIETY_BOOST,
            base_cost=100,
            cost_growth=1.55,
        ),
        NotorietyUpgradeDef(
            id="influencer_endorsement",
            name="Influencer Endorsement",
            description="+10%, +25%, +50% prestige gain.",
            effect=NotorietyEffect.INFLUENCER_ENDORSEMENT,
            base_cost=1_000,
            cost_growth=3,
            cap=3,
        ),
    ]
}
