"""Events — periodic roll for timed random buffs."""

from __future__ import annotations

import random

from clickfluencer.data.balance import BALANCE
from clickfluencer.data.events import ALL_EVENTS, EventDef
from clickfluencer.engine.errors import UnknownIdError
from clickfluencer.engine.game_state import GameState


def get_event_def(event_id: str) -> EventDef:
    try:
        return ALL_EVENTS[event_id]
    except KeyError:
        raise UnknownIdError("event", event_id) from None


def select_weighted_event(events: list[EventDef] | None = None) -> EventDef | None:
    """Pick one definition with probability proportional to its weight."""
    pool = list(ALL_EVENTS.values()) if events is None else events
    total = sum(e.weight for e in pool)
    if total <= 0:
        return None
    roll = random.random() * total
    for event in pool:
        roll -= event.weight
        if roll <= 0:
            return event
    return pool[-1]


class EventManager:
    """Decides, once per check interval, whether a new event starts."""

    def __init__(self, events: list[EventDef] | None = None) -> None:
        self._events = list(ALL_EVENTS.values()) if events is None else list(events)

    def roll(self, state: GameState) -> EventDef | None:
        """Return the event to start now, or None.

        Nothing starts while the active cap is reached; otherwise a fixed
        chance gates one weighted draw.
        """
        bal = BALANCE.events
        if len(state.active_events) >= bal.max_active:
            return None
        if random.random() >= bal.trigger_chance:
            return None
        return select_weighted_event(self._events)
