"""Actions — every state transition the player or the clock can cause.

Each action takes a GameState and returns a result holding the next state.
Business rejections (can't afford, locked, maxed, unknown id from the UI)
come back as ``success=False`` with the input state untouched; nothing here
raises for them.
"""

from __future__ import annotations

import random
from dataclasses import replace

from clickfluencer.data.balance import BALANCE
from clickfluencer.data.events import EventDef
from clickfluencer.engine import notoriety, prestige as prestige_system
from clickfluencer.engine.economy import (
    award_drop_rate,
    bulk_generator_cost,
    cache_drop_rate,
    cache_payout_multiplier,
    click_event_multiplier,
    click_power,
    generator_cost,
    production_per_second,
    should_unlock,
    upkeep_per_second,
)
from clickfluencer.engine.game_state import (
    SETTING_KEYS,
    ActiveEvent,
    GameState,
    create_initial_state,
    now_ms,
    with_generator,
    with_stats,
    with_theme,
    with_upgrade,
)
from clickfluencer.engine.results import ActionResult, ClickResult, accepted, rejected


# ── Click ─────────────────────────────────────────────────────────


def click(state: GameState) -> ClickResult:
    """One click: base gain, an award roll and a cache roll.

    All three are computed from the pre-click state and land together.
    """
    gained = click_power(state) * click_event_multiplier(state)

    award_dropped = random.random() < award_drop_rate(state)

    cache_amount = 0.0
    cache_rate = cache_drop_rate(state)
    cache_dropped = cache_rate > 0 and random.random() < cache_rate
    if cache_dropped:
        bal = BALANCE.economy
        fraction = random.uniform(bal.cache_payout_min, bal.cache_payout_max)
        cache_amount = state.creds * fraction * cache_payout_multiplier(state)

    stats = state.stats
    new_state = replace(
        state,
        creds=state.creds + gained + cache_amount,
        awards=state.awards + (1 if award_dropped else 0),
        stats=replace(
            stats,
            total_clicks=stats.total_clicks + 1,
            total_creds_earned=stats.total_creds_earned + gained + cache_amount,
            awards_earned=stats.awards_earned + (1 if award_dropped else 0),
            caches_found=stats.caches_found + (1 if cache_dropped else 0),
        ),
    )
    return ClickResult(
        state=new_state,
        gained=gained,
        award_dropped=award_dropped,
        cache_dropped=cache_dropped,
        cache_amount=cache_amount,
    )


# ── Generators ────────────────────────────────────────────────────


def buy_generator(state: GameState, generator_id: str) -> ActionResult:
    if not state.has_generator(generator_id):
        return rejected(state, f"Unknown generator: {generator_id}")
    g = state.get_generator(generator_id)
    if not g.unlocked:
        return rejected(state, f"{g.name} is not unlocked yet.")

    cost = generator_cost(g)
    if state.creds < cost:
        return rejected(state, f"Not enough creds for {g.name}.")

    new_state = with_generator(state, generator_id, lambda gen: replace(gen, count=gen.count + 1))
    new_state = replace(new_state, creds=state.creds - cost)
    new_state = with_stats(
        new_state,
        total_generators_purchased=state.stats.total_generators_purchased + 1,
    )
    return accepted(new_state, f"Bought {g.name}.", quantity=1)


def buy_generator_bulk(state: GameState, generator_id: str, quantity: int) -> ActionResult:
    """Buy up to ``quantity`` units one at a time, stopping when unaffordable."""
    current = state
    bought = 0
    last: ActionResult | None = None
    while bought < quantity:
        last = buy_generator(current, generator_id)
        if not last.success:
            break
        current = last.state
        bought += 1

    if bought == 0:
        return last if last is not None else rejected(state, "Nothing to buy.")
    name = current.get_generator(generator_id).name
    return accepted(current, f"Bought {bought}x {name}.", quantity=bought)


def buy_generator_batch(state: GameState, generator_id: str, quantity: int) -> ActionResult:
    """Buy exactly ``quantity`` units at the bulk price, or nothing."""
    if not state.has_generator(generator_id):
        return rejected(state, f"Unknown generator: {generator_id}")
    if quantity <= 0:
        return rejected(state, "Quantity must be positive.")
    g = state.get_generator(generator_id)
    if not g.unlocked:
        return rejected(state, f"{g.name} is not unlocked yet.")

    cost = bulk_generator_cost(g, quantity)
    if state.creds < cost:
        return rejected(state, f"Not enough creds for {quantity}x {g.name}.")

    new_state = with_generator(state, generator_id, lambda gen: replace(gen, count=gen.count + quantity))
    new_state = replace(new_state, creds=state.creds - cost)
    new_state = with_stats(
        new_state,
        total_generators_purchased=state.stats.total_generators_purchased + quantity,
    )
    return accepted(new_state, f"Bought {quantity}x {g.name}.", quantity=quantity)


# ── Upgrades ──────────────────────────────────────────────────────


def buy_upgrade(state: GameState, upgrade_id: str) -> ActionResult:
    if not state.has_upgrade(upgrade_id):
        return rejected(state, f"Unknown upgrade: {upgrade_id}")
    upgrade = state.get_upgrade(upgrade_id)
    if upgrade.is_maxed:
        return rejected(state, f"{upgrade.name} is already maxed.")

    cost = upgrade.cost()
    if state.creds < cost:
        return rejected(state, f"Not enough creds for {upgrade.name}.")

    new_state = with_upgrade(state, upgrade_id, lambda u: u.purchased_next())
    new_state = replace(new_state, creds=state.creds - cost)
    new_state = with_stats(
        new_state,
        total_upgrades_purchased=state.stats.total_upgrades_purchased + 1,
    )
    return accepted(new_state, f"Purchased {upgrade.name}.")


# ── Themes ────────────────────────────────────────────────────────


def purchase_theme(state: GameState, theme_id: str) -> ActionResult:
    if not state.has_theme(theme_id):
        return rejected(state, f"Unknown theme: {theme_id}")
    theme = state.get_theme(theme_id)
    if theme.unlocked:
        return rejected(state, f"{theme.name} is already unlocked.")
    if state.awards < theme.cost:
        return rejected(state, f"Not enough awards for {theme.name}.")

    new_state = with_theme(state, theme_id, lambda t: replace(t, unlocked=True))
    new_state = replace(new_state, awards=state.awards - theme.cost)
    return accepted(new_state, f"Unlocked {theme.name}.")


def activate_theme(state: GameState, theme_id: str) -> ActionResult:
    if not state.has_theme(theme_id):
        return rejected(state, f"Unknown theme: {theme_id}")
    theme = state.get_theme(theme_id)
    if not theme.unlocked:
        return rejected(state, f"{theme.name} is locked.")

    themes = tuple(replace(t, active=t.id == theme_id) for t in state.themes)
    return accepted(replace(state, themes=themes), f"{theme.name} theme active.")


# ── Events ────────────────────────────────────────────────────────


def apply_event(state: GameState, event_def: EventDef, now: float | None = None) -> GameState:
    """Start a timed buff ending at ``now + duration``."""
    if now is None:
        now = now_ms()
    event = ActiveEvent.from_def(event_def, now)
    return replace(state, active_events=state.active_events + (event,))


def expire_events(state: GameState, now: float | None = None) -> GameState:
    if now is None:
        now = now_ms()
    remaining = tuple(e for e in state.active_events if e.end_time > now)
    if len(remaining) == len(state.active_events):
        return state
    return replace(state, active_events=remaining)


# ── Tick ──────────────────────────────────────────────────────────


def tick(state: GameState, delta_ms: float, now: float | None = None) -> GameState:
    """Advance the simulation by ``delta_ms`` of wall-clock time.

    Production is credited, then notoriety upkeep drained with creds
    clamped at zero. Notoriety accrues only when the interval's upkeep was
    fully covered.
    """
    if now is None:
        now = now_ms()
    delta_ms = max(0.0, delta_ms)
    seconds = delta_ms / 1000

    produced = production_per_second(state) * seconds
    upkeep = upkeep_per_second(state) * seconds
    available = state.creds + produced
    covered = available >= upkeep
    creds = max(0.0, available - upkeep)

    gained_notoriety = notoriety.notoriety_per_second(state) * seconds if covered else 0.0

    generators = tuple(
        replace(g, unlocked=True) if not g.unlocked and should_unlock(g, creds) else g
        for g in state.generators
    )

    stats = state.stats
    new_state = replace(
        state,
        creds=creds,
        notoriety=state.notoriety + gained_notoriety,
        generators=generators,
        stats=replace(
            stats,
            total_creds_earned=stats.total_creds_earned + produced,
            total_notoriety_earned=stats.total_notoriety_earned + gained_notoriety,
            play_time=stats.play_time + delta_ms,
            last_tick_time=now,
        ),
    )
    return expire_events(new_state, now)


# ── Settings ──────────────────────────────────────────────────────


def update_setting(state: GameState, key: str, value: bool) -> ActionResult:
    if key not in SETTING_KEYS:
        return rejected(state, f"Unknown setting: {key}")
    if not isinstance(value, bool):
        return rejected(state, f"Setting {key} must be true or false.")
    settings = replace(state.settings, **{key: value})
    return accepted(replace(state, settings=settings), f"{key} set to {value}.")


# ── Meta ──────────────────────────────────────────────────────────


def prestige(state: GameState) -> ActionResult:
    return prestige_system.buy_prestige(state)


def buy_notoriety_generator(state: GameState, generator_id: str) -> ActionResult:
    return notoriety.buy_notoriety_generator(state, generator_id)


def buy_notoriety_upgrade(state: GameState, upgrade_id: str) -> ActionResult:
    return notoriety.buy_notoriety_upgrade(state, upgrade_id)


def reset_game(state: GameState, now: float | None = None) -> ActionResult:
    """Wipe all progress. Player settings survive."""
    fresh = create_initial_state(now)
    return accepted(replace(fresh, settings=state.settings), "Game reset.")
