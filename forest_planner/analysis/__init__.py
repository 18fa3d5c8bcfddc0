"""Rollout planning and heuristics."""

from .rollout import RolloutOutcome, RolloutPlanner, aggregate_outcomes
from .runtime import TimeBudget
from .scoring import action_heuristic, shadow_points
from .seeding import planner_seed
from .types import (
    DEFAULT_BUDGET_MS,
    DEFAULT_HORIZON_DAYS,
    FirstActionReport,
    PlannerConfig,
    PlannerPhase,
    PlanResult,
)

__all__ = [
    "RolloutOutcome",
    "RolloutPlanner",
    "aggregate_outcomes",
    "TimeBudget",
    "action_heuristic",
    "shadow_points",
    "planner_seed",
    "DEFAULT_BUDGET_MS",
    "DEFAULT_HORIZON_DAYS",
    "FirstActionReport",
    "PlannerConfig",
    "PlannerPhase",
    "PlanResult",
]
