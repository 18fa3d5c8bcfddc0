from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from forest_planner.game.actions import GameAction
from forest_planner.game.rules import SEED_DAY_THRESHOLD_RANGE

DEFAULT_BUDGET_MS = 95.0
DEFAULT_HORIZON_DAYS = 10


class PlannerPhase(str, Enum):
    SAMPLING = "sampling"
    AGGREGATING = "aggregating"
    DONE = "done"


@dataclass(frozen=True)
class PlannerConfig:
    budget_ms: float = DEFAULT_BUDGET_MS
    horizon_days: int = DEFAULT_HORIZON_DAYS
    max_rollouts: int = 0  # 0 = unlimited
    seed: Optional[int] = None
    seed_day_threshold_range: Tuple[int, int] = SEED_DAY_THRESHOLD_RANGE
    per_rollout_seed_threshold: bool = False

    def __post_init__(self) -> None:
        if self.budget_ms <= 0:
            raise ValueError("budget_ms must be positive.")
        if self.horizon_days < 1:
            raise ValueError("horizon_days must be at least 1.")
        if self.max_rollouts < 0:
            raise ValueError("max_rollouts must be >= 0.")
        low, high = self.seed_day_threshold_range
        if high <= low:
            raise ValueError("seed_day_threshold_range must be a non-empty [low, high) range.")


@dataclass
class FirstActionReport:
    action: GameAction
    rollouts: int
    mean_score: float


@dataclass
class PlanResult:
    action: GameAction
    mean_score: float
    distinct_actions: int
    rollouts: int
    elapsed_ms: float
    candidates: list[FirstActionReport] = field(default_factory=list)
