from __future__ import annotations

import random
from dataclasses import replace
from typing import List, Optional

from forest_planner.domain.board import DIRECTION_COUNT, BoardState

from .actions import (
    ACTION_COMPLETE,
    ACTION_GROW,
    ACTION_SEED,
    ACTION_WAIT,
    GameAction,
    complete,
    grow,
    seed,
    wait,
)
from .state import (
    MAX_TREE_SIZE,
    PLAYER_IDS,
    PRIMARY_PLAYER,
    Forest,
    GameState,
    Tree,
)

GROW_BASE_COST = {
    1: 1,
    2: 3,
    3: 7,
}
COMPLETE_COST = 4
MIN_SUN_TO_ACT = 4
SEED_TREE_CAP = 8
SEED_DAY_THRESHOLD_RANGE = (5, 15)
SHADE_HOPS = 3
SCORED_INCOME_DAY_LIMIT = 14


def grow_cost(state: GameState, player_id: int, tree: Tree) -> int:
    target_size = tree.size + 1
    return GROW_BASE_COST[target_size] + state.tree_counts[player_id][target_size]


def seed_cost(state: GameState, player_id: int) -> int:
    return state.tree_counts[player_id][0]


def action_cost(state: GameState, player_id: int, action: GameAction) -> int:
    if action.kind == ACTION_GROW:
        return grow_cost(state, player_id, state.trees[action.cell_id])
    if action.kind == ACTION_SEED:
        return seed_cost(state, player_id)
    if action.kind == ACTION_COMPLETE:
        return COMPLETE_COST
    return 0


def legal_grow_actions(state: GameState, player_id: int) -> List[GameAction]:
    sun = state.sun[player_id]
    return [
        grow(tree.cell_index)
        for tree in state.player_trees(player_id)
        if not tree.is_dormant and tree.size < MAX_TREE_SIZE and grow_cost(state, player_id, tree) <= sun
    ]


def legal_complete_actions(state: GameState, player_id: int) -> List[GameAction]:
    if state.sun[player_id] < COMPLETE_COST:
        return []
    return [
        complete(tree.cell_index)
        for tree in state.player_trees(player_id)
        if not tree.is_dormant and tree.size == MAX_TREE_SIZE
    ]


def seed_targets(board: BoardState, trees: Forest, origin_id: int, reach: int) -> List[int]:
    """Free usable cells within `reach` hops of `origin_id`.

    The frontier walks through every on-board neighbour, occupied or not; only
    the collected targets have to be free and usable.
    """
    frontier = {origin_id}
    targets: set[int] = set()
    for _ in range(reach):
        next_frontier: set[int] = set()
        for cell_id in frontier:
            for neighbor_id in board.neighbor_ids(cell_id):
                next_frontier.add(neighbor_id)
                if board.richness(neighbor_id) > 0 and neighbor_id not in trees:
                    targets.add(neighbor_id)
        frontier = next_frontier
    return sorted(targets)


def legal_seed_actions(state: GameState, player_id: int) -> List[GameAction]:
    if seed_cost(state, player_id) > state.sun[player_id]:
        return []

    actions: List[GameAction] = []
    for tree in state.player_trees(player_id):
        if tree.is_dormant or tree.size == 0:
            continue
        for target_id in seed_targets(state.board, state.trees, tree.cell_index, tree.size):
            actions.append(seed(tree.cell_index, target_id))
    return actions


def draw_seed_day_threshold(rng: random.Random) -> int:
    low, high = SEED_DAY_THRESHOLD_RANGE
    return rng.randrange(low, high)


def list_legal_actions(
    state: GameState,
    player_id: int,
    rng: Optional[random.Random] = None,
    *,
    seed_day_threshold: Optional[int] = None,
) -> List[GameAction]:
    """Grow, complete and seed options for `player_id`, or just WAIT.

    Without an explicit `seed_day_threshold` a fresh one is drawn from `rng`
    on every call, so whether seeding is still considered is re-rolled each
    time.
    """
    if seed_day_threshold is None:
        if rng is None:
            raise ValueError("Either rng or seed_day_threshold is required.")
        seed_day_threshold = draw_seed_day_threshold(rng)

    actions = legal_grow_actions(state, player_id) + legal_complete_actions(state, player_id)
    if state.total_trees(player_id) < SEED_TREE_CAP and state.day < seed_day_threshold:
        actions.extend(legal_seed_actions(state, player_id))

    if state.sun[player_id] < MIN_SUN_TO_ACT or not actions:
        return [wait()]
    return actions


def shade_direction(day: int) -> int:
    return (day + 3) % DIRECTION_COUNT


def tree_sun_income(board: BoardState, trees: Forest, tree: Tree, direction: int) -> int:
    cell_id = tree.cell_index
    for hop in range(SHADE_HOPS):
        neighbor_id = board.neighbor(cell_id, direction)
        if neighbor_id is None:
            return tree.size
        blocker = trees.get(neighbor_id)
        if blocker is not None and blocker.size > hop and blocker.size >= tree.size:
            return 0
        cell_id = neighbor_id
    return tree.size


def sun_income(state: GameState, player_id: int, day: Optional[int] = None) -> int:
    direction = shade_direction(state.day if day is None else day)
    return sum(
        tree_sun_income(state.board, state.trees, tree, direction)
        for tree in state.player_trees(player_id)
        if tree.size > 0
    )


def collect_daily_income(state: GameState) -> List[int]:
    """Pay out sun once per day. Only the primary player's early income also scores."""
    if state.day == state.income_day:
        return [0 for _ in PLAYER_IDS]

    state.income_day = state.day
    incomes: List[int] = []
    for player_id in PLAYER_IDS:
        income = sun_income(state, player_id)
        state.sun[player_id] += income
        if player_id == PRIMARY_PLAYER and state.day < SCORED_INCOME_DAY_LIMIT:
            state.score[player_id] += income
        incomes.append(income)
    return incomes


def apply_action(state: GameState, player_id: int, action: GameAction) -> None:
    """Apply `action` for `player_id` to `state` in place.

    COMPLETE takes one nutrient but never drives nutrients below 0, so the late
    harvest bonus in `complete_heuristic` bottoms out at the richness bonus.
    """
    state.sun[player_id] -= action_cost(state, player_id, action)
    counts = state.tree_counts[player_id]

    if action.kind == ACTION_GROW:
        tree = state.trees[action.cell_id]
        counts[tree.size] -= 1
        grown = replace(tree, size=tree.size + 1, is_dormant=True)
        counts[grown.size] += 1
        state.trees[action.cell_id] = grown
    elif action.kind == ACTION_SEED:
        state.trees[action.cell_id] = Tree(
            cell_index=action.cell_id,
            size=0,
            is_mine=player_id == PRIMARY_PLAYER,
            is_dormant=True,
        )
        state.trees[action.origin_id] = replace(state.trees[action.origin_id], is_dormant=True)
        counts[0] += 1
    elif action.kind == ACTION_COMPLETE:
        tree = state.trees.pop(action.cell_id)
        counts[tree.size] -= 1
        state.nutrients = max(0, state.nutrients - 1)
    elif action.kind == ACTION_WAIT:
        state.waiting[player_id] = True
        if state.both_waiting():
            state.day += 1
            state.trees = {
                cell_id: replace(tree, is_dormant=False) if tree.is_dormant else tree
                for cell_id, tree in state.trees.items()
            }
