from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

ACTION_GROW = "GROW"
ACTION_SEED = "SEED"
ACTION_COMPLETE = "COMPLETE"
ACTION_WAIT = "WAIT"


@dataclass(frozen=True)
class GameAction:
    """Hashable tagged action.

    `cell_id` is the grown/completed cell, or the seed target. `origin_id` is
    only set for seeds.
    """

    kind: str
    cell_id: Optional[int] = None
    origin_id: Optional[int] = None

    def canonical(self) -> str:
        if self.kind == ACTION_SEED:
            return f"{ACTION_SEED} {self.origin_id} {self.cell_id}"
        if self.kind in (ACTION_GROW, ACTION_COMPLETE):
            return f"{self.kind} {self.cell_id}"
        return self.kind

    def __str__(self) -> str:
        return self.canonical()


def grow(cell_id: int) -> GameAction:
    return GameAction(kind=ACTION_GROW, cell_id=int(cell_id))


def seed(origin_id: int, target_id: int) -> GameAction:
    return GameAction(kind=ACTION_SEED, cell_id=int(target_id), origin_id=int(origin_id))


def complete(cell_id: int) -> GameAction:
    return GameAction(kind=ACTION_COMPLETE, cell_id=int(cell_id))


def wait() -> GameAction:
    return GameAction(kind=ACTION_WAIT)


def canonical_order(actions: list[GameAction]) -> list[GameAction]:
    return sorted(actions, key=GameAction.canonical)
