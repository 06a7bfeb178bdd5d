"""Theme definitions — cosmetic unlocks bought with awards.

A theme also carries a production/click multiplier, but only the *active*
theme's bonus applies. Owning a theme without wearing it grants nothing.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeDef:
    """Definition of a single theme."""

    id: str
    name: str
    description: str
    # Cost in awards
    cost: int
    bonus_multiplier: float = 1.0
    # Flat creds added to base click power while active
    click_bonus: float = 0.0


DEFAULT_THEME_ID = "dark"

ALL_THEMES: dict[str, ThemeDef] = {}


def _register(*themes: ThemeDef) -> None:
    for t in themes:
        ALL_THEMES[t.id] = t


_register(
    ThemeDef(
        id="dark",
        name="Dark",
        description="Default stormy slate theme.",
        cost=0,
    ),
    ThemeDef(
        id="light",
        name="Light",
        description="Bright material-inspired palette. +5% creds.",
        cost=5,
        bonus_multiplier=1.05,
    ),
    ThemeDef(
        id="cherry_blossom",
        name="Cherry Blossom",
        description="Soft pinks drifting through spring air. +7% creds.",
        cost=10,
        bonus_multiplier=1.07,
    ),
    ThemeDef(
        id="touch_grass",
        name="Touch Grass",
        description="A peaceful palette of greens and sunlight. +8% creds.",
        cost=15,
        bonus_multiplier=1.08,
    ),
    ThemeDef(
        id="night_sky",
        name="Night Sky",
        description="Cool purples and silvers under starlight. +10% creds.",
        cost=25,
        bonus_multiplier=1.10,
    ),
    ThemeDef(
        id="terminal",
        name="Terminal",
        description="Monokai dark for true hackers. +12% creds, +1 per click.",
        cost=50,
        bonus_multiplier=1.12,
        click_bonus=1.0,
    ),
    ThemeDef(
        id="nightshade",
        name="Nightshade",
        description="Belladonna tones of violet and green. +15% creds.",
        cost=75,
        bonus_multiplier=1.15,
    ),
    ThemeDef(
        id="el_blue",
        name="EL Blue",
        description="A heroic blue. +20% creds.",
        cost=100,
        bonus_multiplier=1.20,
    ),
    ThemeDef(
        id="gold",
        name="Gold",
        description="Luxury that shines bright and bold. +25% creds.",
        cost=150,
        bonus_multiplier=1.25,
    ),
)
