"""Tests for the prestige spend model."""

import math
from dataclasses import replace

import pytest

from clickfluencer.engine.actions import prestige
from clickfluencer.engine.economy import prestige_multiplier
from clickfluencer.engine.game_state import create_initial_state, frozen_map, with_generator
from clickfluencer.engine.prestige import (
    buy_prestige,
    can_prestige,
    estimate_time_to_prestige,
    post_prestige_multiplier,
    prestige_cost,
    prestige_gain,
)


def _fresh(**changes):
    return replace(create_initial_state(now=0), **changes)


# ── Cost curve ───────────────────────────────────────────────────


def test_first_point_costs_ten_million():
    assert prestige_cost(0) == 10_000_000


def test_cost_follows_power_curve():
    for p in range(1, 6):
        assert prestige_cost(p) == math.floor(1e7 * (p + 1) ** 2.5)


def test_cost_strictly_increasing():
    costs = [prestige_cost(p) for p in range(30)]
    assert all(b > a for a, b in zip(costs, costs[1:]))


def test_can_prestige():
    assert not can_prestige(_fresh(creds=9_999_999))
    assert can_prestige(_fresh(creds=10_000_000))


# ── Buying ───────────────────────────────────────────────────────


def test_prestige_rejected_when_short():
    state = _fresh(creds=9_999_999)
    result = buy_prestige(state)
    assert not result.success
    assert result.state is state


def test_prestige_spends_creds_and_resets_nothing():
    state = with_generator(_fresh(creds=15_000_000, awards=4), "photo", lambda g: replace(g, count=12))
    result = prestige(state)
    assert result.success
    after = result.state
    assert after.prestige == 1
    assert after.creds == 5_000_000
    assert after.awards == 4
    assert after.get_generator("photo").count == 12
    assert after.stats.prestige_count == 1


def test_second_point_costs_more():
    state = buy_prestige(_fresh(creds=1e9)).state
    before = state.creds
    state = buy_prestige(state).state
    assert state.prestige == 2
    assert before - state.creds == prestige_cost(1)


def test_prestige_raises_multiplier_by_ten_percent():
    state = buy_prestige(_fresh(creds=1e7)).state
    assert prestige_multiplier(state) == pytest.approx(1.1)


# ── Notoriety interplay ──────────────────────────────────────────


@pytest.mark.parametrize("level,gain", [(0, 1.0), (1, 1.10), (2, 1.25), (3, 1.50)])
def test_endorsement_raises_gain(level, gain):
    state = _fresh(creds=1e7, notoriety_upgrades=frozen_map({"influencer_endorsement": level}))
    assert prestige_gain(state) == gain
    assert buy_prestige(state).state.prestige == pytest.approx(gain)


def test_drama_boost_scales_multiplier():
    state = _fresh(prestige=2, notoriety_upgrades=frozen_map({"drama_boost": 5}))
    assert prestige_multiplier(state) == pytest.approx(1.2 * 1.01)


def test_post_prestige_multiplier_previews_next_point():
    state = _fresh(prestige=3)
    assert post_prestige_multiplier(state) == pytest.approx(1.4)


# ── Estimate ─────────────────────────────────────────────────────


def test_estimate_without_production_is_infinite():
    assert estimate_time_to_prestige(_fresh()) == math.inf


def test_estimate_when_affordable_is_zero():
    assert estimate_time_to_prestige(_fresh(creds=2e7)) == 0


def test_estimate_uses_production_rate():
    state = with_generator(_fresh(), "photo", lambda g: replace(g, count=10))
    # 1 cred/s toward ten million
    assert estimate_time_to_prestige(state) == pytest.approx(1e7 * 1000)
