"""Forest game model: state, actions and rules."""

from .actions import (
    ACTION_COMPLETE,
    ACTION_GROW,
    ACTION_SEED,
    ACTION_WAIT,
    GameAction,
    canonical_order,
    complete,
    grow,
    seed,
    wait,
)
from .rules import (
    COMPLETE_COST,
    GROW_BASE_COST,
    MIN_SUN_TO_ACT,
    SEED_DAY_THRESHOLD_RANGE,
    SEED_TREE_CAP,
    action_cost,
    apply_action,
    collect_daily_income,
    list_legal_actions,
    seed_targets,
    shade_direction,
    sun_income,
    tree_sun_income,
)
from .state import (
    FINAL_DAY,
    MAX_TREE_SIZE,
    OPPONENT_PLAYER,
    PLAYER_IDS,
    PRIMARY_PLAYER,
    Forest,
    GameState,
    Tree,
    build_forest,
    count_trees_by_size,
    initialize_game_state,
)

__all__ = [
    "ACTION_COMPLETE",
    "ACTION_GROW",
    "ACTION_SEED",
    "ACTION_WAIT",
    "GameAction",
    "canonical_order",
    "complete",
    "grow",
    "seed",
    "wait",
    "COMPLETE_COST",
    "GROW_BASE_COST",
    "MIN_SUN_TO_ACT",
    "SEED_DAY_THRESHOLD_RANGE",
    "SEED_TREE_CAP",
    "action_cost",
    "apply_action",
    "collect_daily_income",
    "list_legal_actions",
    "seed_targets",
    "shade_direction",
    "sun_income",
    "tree_sun_income",
    "FINAL_DAY",
    "MAX_TREE_SIZE",
    "OPPONENT_PLAYER",
    "PLAYER_IDS",
    "PRIMARY_PLAYER",
    "Forest",
    "GameState",
    "Tree",
    "build_forest",
    "count_trees_by_size",
    "initialize_game_state",
]
