"""Random event definitions — timed multiplicative buffs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventEffect(Enum):
    """What a timed event multiplies."""

    PRODUCTION = "production"   # all passive creds/s
    GENERATOR = "generator"     # generator output (same channel as production)
    CLICK = "click"             # creds per click


PRODUCTION_EFFECTS = frozenset({EventEffect.PRODUCTION, EventEffect.GENERATOR})


@dataclass(frozen=True)
class EventDef:
    """Definition of a random event."""

    id: str
    name: str
    description: str
    duration_ms: float
    # Relative probability in the weighted draw
    weight: float
    effect: EventEffect
    multiplier: float


ALL_EVENTS: dict[str, EventDef] = {
    e.id: e
    for e in [
        EventDef(
            id="viral_post",
            name="Viral Post",
            description="Your post went viral! 3x creds for 60 seconds.",
            duration_ms=60_000,
            weight=10,
            effect=EventEffect.PRODUCTION,
            multiplier=3,
        ),
        EventDef(
            id="trending_topic",
            name="Trending Topic",
            description="You jumped on a trending topic! 2x production for 2 minutes.",
            duration_ms=120_000,
            weight=15,
            effect=EventEffect.GENERATOR,
            multiplier=2,
        ),
        EventDef(
            id="celebrity_mention",
            name="Celebrity Mention",
            description="A celebrity mentioned you! 5x click power for 30 seconds.",
            duration_ms=30_000,
            weight=5,
            effect=EventEffect.CLICK,
            multiplier=5,
        ),
        EventDef(
            id="algorithm_boost",
            name="Algorithm Boost",
            description="The algorithm favors you! 2x all production for 90 seconds.",
            duration_ms=90_000,
            weight=8,
            effect=EventEffect.PRODUCTION,
            multiplier=2,
        ),
        EventDef(
            id="sponsored_post",
            name="Sponsored Post",
            description="Sponsored content bonus! 4x creds for 45 seconds.",
            duration_ms=45_000,
            weight=12,
            effect=EventEffect.PRODUCTION,
            multiplier=4,
        ),
        EventDef(
            id="collaboration_boom",
            name="Collab Frenzy",
            description="Multiple collabs at once! 3x generators for 75 seconds.",
            duration_ms=75_000,
            weight=10,
            effect=EventEffect.GENERATOR,
            multiplier=3,
        ),
        EventDef(
            id="golden_hour",
            name="Golden Hour",
            description="Perfect lighting for content! 2.5x all production for 60 seconds.",
            duration_ms=60_000,
            weight=7,
            effect=EventEffect.PRODUCTION,
            multiplier=2.5,
        ),
    ]
}
