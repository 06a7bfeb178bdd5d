"""Generator definitions — the fixed roster of cred producers."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GeneratorDef:
    """Definition of a single generator."""

    id: str
    name: str
    base_creds_per_second: float
    base_cost: float
    # Cost growth per owned unit (1.10 - 1.22)
    cost_multiplier: float
    unlocked_by_default: bool = False


ALL_GENERATORS: dict[str, GeneratorDef] = {}


def _register(*generators: GeneratorDef) -> None:
    for g in generators:
        ALL_GENERATORS[g.id] = g


_register(
    GeneratorDef(
        id="photo",
        name="Photo Post",
        base_creds_per_second=0.1,
        base_cost=10,
        cost_multiplier=1.15,
        unlocked_by_default=True,
    ),
    GeneratorDef(
        id="video",
        name="Video Content",
        base_creds_per_second=1.0,
        base_cost=100,
        cost_multiplier=1.14,
    ),
    GeneratorDef(
        id="stream",
        name="Live Stream",
        base_creds_per_second=8.0,
        base_cost=1_100,
        cost_multiplier=1.13,
    ),
    GeneratorDef(
        id="collab",
        name="Collaboration",
        base_creds_per_second=47.0,
        base_cost=12_000,
        cost_multiplier=1.12,
    ),
    GeneratorDef(
        id="brand",
        name="Brand Deal",
        base_creds_per_second=260.0,
        base_cost=130_000,
        cost_multiplier=1.11,
    ),
    GeneratorDef(
        id="agency",
        name="Talent Agency",
        base_creds_per_second=1_400.0,
        base_cost=1_400_000,
        cost_multiplier=1.10,
    ),
)
