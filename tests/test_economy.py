"""Tests for the economy selectors."""

import math
from dataclasses import replace

import pytest

from clickfluencer.data.balance import BALANCE
from clickfluencer.data.events import ALL_EVENTS
from clickfluencer.engine.actions import activate_theme, apply_event, buy_upgrade
from clickfluencer.engine.economy import (
    award_drop_rate,
    bulk_generator_cost,
    cache_drop_rate,
    cache_payout_multiplier,
    can_afford,
    click_event_multiplier,
    click_power,
    format_duration,
    format_number,
    generator_cost,
    geometric_series_cost,
    max_affordable,
    net_production_per_second,
    offline_efficiency,
    production_per_second,
    should_unlock,
    time_to_afford,
)
from clickfluencer.engine.game_state import (
    create_initial_state,
    frozen_map,
    with_generator,
    with_theme,
    with_upgrade,
)


def _fresh():
    return create_initial_state(now=0)


def _with_photos(state, count):
    return with_generator(state, "photo", lambda g: replace(g, count=count))


# ── Formatting ───────────────────────────────────────────────────


def test_format_number_small():
    assert format_number(0) == "0"
    assert format_number(5) == "5"
    assert format_number(99.5) == "99.5"


def test_format_number_thousands():
    result = format_number(1500)
    assert "K" in result
    assert "1.5" in result


def test_format_number_millions():
    assert "M" in format_number(2_300_000)


def test_format_number_infinite():
    assert format_number(math.inf) == "∞"


def test_format_duration():
    assert format_duration(42_000) == "42s"
    assert format_duration(65_000) == "1m 05s"
    assert format_duration(3_900_000) == "1h 05m"
    assert format_duration(math.inf) == "never"


# ── Generator pricing ────────────────────────────────────────────


def test_first_photo_costs_ten_then_eleven():
    photo = _fresh().get_generator("photo")
    assert generator_cost(photo) == 10
    assert generator_cost(replace(photo, count=1)) == 11


def test_generator_cost_strictly_increasing():
    for g in _fresh().generators:
        costs = [generator_cost(replace(g, count=n)) for n in range(60)]
        assert all(b > a for a, b in zip(costs, costs[1:])), g.id


def test_bulk_of_one_is_single_cost():
    for g in _fresh().generators:
        for n in (0, 1, 7, 25):
            owned = replace(g, count=n)
            assert bulk_generator_cost(owned, 1) == generator_cost(owned)


def test_bulk_matches_unit_prices_exactly():
    photo = replace(_fresh().get_generator("photo"), count=3)
    expected = sum(generator_cost(replace(photo, count=3 + i)) for i in range(12))
    assert bulk_generator_cost(photo, 12) == expected


def test_bulk_of_ten_photos_is_200():
    photo = _fresh().get_generator("photo")
    assert bulk_generator_cost(photo, 10) == 200
    # The unfloored closed form overshoots
    assert geometric_series_cost(photo, 10) >= 200


def test_bulk_of_zero_is_free():
    assert bulk_generator_cost(_fresh().get_generator("photo"), 0) == 0


def test_max_affordable():
    photo = _fresh().get_generator("photo")
    assert max_affordable(photo, 200) == 10
    assert max_affordable(photo, 199) == 9
    assert max_affordable(photo, 5) == 0


def test_unlock_threshold_is_full_base_cost():
    assert BALANCE.economy.generator_unlock_fraction == 1.0
    video = _fresh().get_generator("video")
    assert not should_unlock(video, 99)
    assert should_unlock(video, 100)


def test_can_afford():
    assert can_afford(10, 10)
    assert not can_afford(9.99, 10)


# ── Click power ──────────────────────────────────────────────────


def test_fresh_click_power_is_one():
    assert click_power(_fresh()) == 1


def test_first_camera_tier_doubles_click_power():
    state = replace(_fresh(), creds=500)
    result = buy_upgrade(state, "better_camera")
    assert result.success
    assert click_power(result.state) == 2


def test_camera_tiers_follow_table():
    state = _fresh()
    for tier, bonus in enumerate((1, 2, 3, 5, 8, 15, 25), start=1):
        s = with_upgrade(state, "better_camera", lambda u, t=tier: replace(u, tier=t))
        assert click_power(s) == 1 + bonus


def test_additive_terms_combine_before_multipliers():
    state = with_upgrade(_fresh(), "better_camera", lambda u: replace(u, tier=1))
    state = with_upgrade(state, "golden_clicks", lambda u: replace(u, purchased=True))
    # (1 + 1) × 3, not 1 × 3 + 1
    assert click_power(state) == 6


def test_infinite_global_upgrade_reaches_clicks():
    state = with_upgrade(_fresh(), "ai_enhancements", lambda u: replace(u, level=2))
    assert click_power(state) == pytest.approx(1.05 ** 2)


def test_one_shot_global_upgrade_skips_clicks():
    state = with_upgrade(_fresh(), "viral_strategy", lambda u: replace(u, purchased=True))
    assert click_power(state) == 1


def test_terminal_theme_adds_click_bonus():
    state = with_theme(_fresh(), "terminal", lambda t: replace(t, unlocked=True))
    state = activate_theme(state, "terminal").state
    assert click_power(state) == pytest.approx((1 + 1) * 1.12)


# ── Production ───────────────────────────────────────────────────


def test_fresh_production_is_zero():
    assert production_per_second(_fresh()) == 0


def test_production_sums_generators():
    state = _with_photos(_fresh(), 10)
    state = with_generator(state, "video", lambda g: replace(g, count=2))
    assert production_per_second(state) == pytest.approx(10 * 0.1 + 2 * 1.0)


def test_generator_targeted_upgrade():
    state = _with_photos(_fresh(), 10)
    state = with_upgrade(state, "editing_software", lambda u: replace(u, purchased=True))
    assert production_per_second(state) == pytest.approx(2.0)


def test_global_upgrades_stack():
    state = _with_photos(_fresh(), 10)
    state = with_upgrade(state, "viral_strategy", lambda u: replace(u, purchased=True))
    state = with_upgrade(state, "algorithm_master", lambda u: replace(u, purchased=True))
    state = with_upgrade(state, "ai_enhancements", lambda u: replace(u, level=1))
    assert production_per_second(state) == pytest.approx(1.0 * 1.5 * 2 * 1.05)


def test_cred_boost_scales_production():
    state = replace(_with_photos(_fresh(), 10), notoriety_upgrades=frozen_map({"cred_boost": 5}))
    assert production_per_second(state) == pytest.approx(1.05)


def test_production_events_multiply_click_events_do_not():
    state = _with_photos(_fresh(), 10)
    state = apply_event(state, ALL_EVENTS["viral_post"], now=0)
    state = apply_event(state, ALL_EVENTS["trending_topic"], now=0)
    state = apply_event(state, ALL_EVENTS["celebrity_mention"], now=0)
    assert production_per_second(state) == pytest.approx(1.0 * 3 * 2)
    assert click_event_multiplier(state) == 5
    assert click_power(state) == 1


def test_net_production_floors_at_zero():
    state = replace(_with_photos(_fresh(), 10), notoriety_generators=frozen_map({"smm": 1}))
    assert net_production_per_second(state) == 0


# ── Prestige scaling ─────────────────────────────────────────────


@pytest.mark.parametrize("p", [0, 1, 2, 5, 13])
def test_prestige_point_scales_by_exact_ratio(p):
    base = _with_photos(_fresh(), 25)
    base = with_upgrade(base, "better_camera", lambda u: replace(u, tier=3))
    low = replace(base, prestige=p)
    high = replace(base, prestige=p + 1)
    ratio = (1 + 0.1 * (p + 1)) / (1 + 0.1 * p)
    assert click_power(high) / click_power(low) == pytest.approx(ratio)
    assert production_per_second(high) / production_per_second(low) == pytest.approx(ratio)


# ── Themes ───────────────────────────────────────────────────────


def test_only_active_theme_counts():
    base = _with_photos(_fresh(), 10)
    owned = with_theme(base, "gold", lambda t: replace(t, unlocked=True))
    owned = with_theme(owned, "el_blue", lambda t: replace(t, unlocked=True))
    # Owning themes without wearing them grants nothing
    assert production_per_second(owned) == pytest.approx(production_per_second(base))

    worn = activate_theme(owned, "gold").state
    assert production_per_second(worn) == pytest.approx(1.0 * 1.25)


# ── Drops and offline ────────────────────────────────────────────


def test_award_drop_rate():
    state = _fresh()
    assert award_drop_rate(state) == pytest.approx(0.003)
    state = with_upgrade(state, "lucky_charm", lambda u: replace(u, tier=2))
    assert award_drop_rate(state) == pytest.approx(0.009)


def test_cache_drop_rate():
    state = _fresh()
    assert cache_drop_rate(state) == 0
    state = with_upgrade(state, "cred_cache", lambda u: replace(u, tier=6))
    assert cache_drop_rate(state) == pytest.approx(1 / 500)


def test_cache_payout_multiplier():
    state = replace(_fresh(), notoriety_upgrades=frozen_map({"cache_value": 4}))
    assert cache_payout_multiplier(state) == pytest.approx(1.2)


def test_offline_efficiency_tiers():
    state = _fresh()
    assert offline_efficiency(state) == 0.5
    for tier, expected in ((1, 0.5), (2, 0.6), (3, 0.75), (4, 1.0)):
        s = with_upgrade(state, "overnight_success", lambda u, t=tier: replace(u, tier=t))
        assert offline_efficiency(s) == expected


# ── Time ─────────────────────────────────────────────────────────


def test_time_to_afford():
    assert time_to_afford(0, 100, 10) == pytest.approx(10_000)
    assert time_to_afford(100, 100, 0) == 0
    assert time_to_afford(0, 100, 0) == math.inf
