"""Action results — what every state transition hands back to the UI."""

from __future__ import annotations

from dataclasses import dataclass

from clickfluencer.engine.game_state import GameState


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an action.

    On rejection ``state`` is the untouched input state and ``message``
    says why. ``quantity`` counts units bought by bulk purchases.
    """

    success: bool
    state: GameState
    message: str = ""
    quantity: int = 0


@dataclass(frozen=True)
class ClickResult:
    state: GameState
    gained: float
    award_dropped: bool = False
    cache_dropped: bool = False
    cache_amount: float = 0.0

    @property
    def success(self) -> bool:
        return True


def accepted(state: GameState, message: str = "", quantity: int = 0) -> ActionResult:
    return ActionResult(True, state, message, quantity)


def rejected(state: GameState, message: str) -> ActionResult:
    return ActionResult(False, state, message)
