from __future__ import annotations

from forest_planner.domain.board import DIRECTION_COUNT, NO_NEIGHBOR
from forest_planner.game.actions import ACTION_COMPLETE, ACTION_GROW, ACTION_SEED, GameAction
from forest_planner.game.state import GameState

RICHNESS_HARVEST_BONUS = {
    1: 0,
    2: 2,
    3: 4,
}
GROW_FROM_SEED_BONUS = 10
LATE_HARVEST_DAY = 15
SEED_CROWDING_PENALTY = 2
SEED_POSITION_ORIGIN = 36


def shadow_points(state: GameState, cell_id: int, day: int, *, growing: bool = False) -> int:
    """Shadow the tree on `cell_id` casts on `day`, from the primary player's side.

    Shaded opponent trees count for their size, shaded own trees against it.
    With `growing`, only the hop the tree reaches after growing one size is
    counted.
    """
    size = state.trees[cell_id].size
    direction = day % DIRECTION_COUNT
    current_id = cell_id
    points = 0
    for hop in range(size + 1):
        next_id = state.board.neighbor(current_id, direction)
        if next_id is None:
            break
        current_id = next_id
        if growing and hop != size:
            continue
        shaded = state.trees.get(current_id)
        if shaded is None:
            continue
        points += -shaded.size if shaded.is_mine else shaded.size
    return points


def complete_heuristic(state: GameState, cell_id: int) -> int:
    """Shade given up by harvesting, plus a late bonus of nutrients and richness.

    Nutrients are clamped at 0 by `apply_action`, never negative here.
    """
    day = state.day
    value = -shadow_points(state, cell_id, day + 1) - shadow_points(state, cell_id, day + 2)
    if day > LATE_HARVEST_DAY:
        value += state.nutrients + RICHNESS_HARVEST_BONUS.get(state.board.richness(cell_id), 0)
    return value + day // 20 * 10


def grow_heuristic(state: GameState, cell_id: int) -> int:
    day = state.day
    size = state.trees[cell_id].size
    value = shadow_points(state, cell_id, day + 1, growing=True) + shadow_points(
        state, cell_id, day + 2, growing=True
    )
    if size == 0:
        value += GROW_FROM_SEED_BONUS
    return value + day // 24 * (5 + size + 1)


def seed_heuristic(state: GameState, target_id: int) -> int:
    board = state.board
    crowded = 0
    for neighbor_id in board.get_cell(target_id).neighbors:
        if neighbor_id == NO_NEIGHBOR or board.richness(neighbor_id) == 0 or neighbor_id in state.trees:
            crowded += 1
    return (
        -SEED_CROWDING_PENALTY * crowded
        + (SEED_POSITION_ORIGIN - target_id) // 10
        + board.richness(target_id)
    )


def action_heuristic(state: GameState, action: GameAction) -> int:
    """Shaping reward for a primary-player action, on the state before it applies."""
    if action.kind == ACTION_COMPLETE:
        return complete_heuristic(state, action.cell_id)
    if action.kind == ACTION_GROW:
        return grow_heuristic(state, action.cell_id)
    if action.kind == ACTION_SEED:
        return seed_heuristic(state, action.cell_id)
    return 0
