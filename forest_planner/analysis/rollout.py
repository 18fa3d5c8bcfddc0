from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from forest_planner.game import (
    FINAL_DAY,
    OPPONENT_PLAYER,
    PRIMARY_PLAYER,
    GameAction,
    GameState,
    apply_action,
    canonical_order,
    collect_daily_income,
    list_legal_actions,
    wait,
)

from .runtime import Clock, TimeBudget
from .scoring import action_heuristic
from .types import FirstActionReport, PlanResult, PlannerConfig, PlannerPhase

logger = logging.getLogger(__name__)

SUN_PER_ENDGAME_POINT = 3


@dataclass
class _FirstActionStats:
    rollouts: int = 0
    mean_score: float = 0.0

    def record(self, score: float) -> None:
        self.rollouts += 1
        self.mean_score += (float(score) - self.mean_score) / self.rollouts


@dataclass(frozen=True)
class RolloutOutcome:
    first_action: GameAction
    score: int
    plies: int
    final_day: int


def aggregate_outcomes(outcomes: Iterable[RolloutOutcome]) -> Dict[GameAction, _FirstActionStats]:
    stats: Dict[GameAction, _FirstActionStats] = {}
    for outcome in outcomes:
        entry = stats.get(outcome.first_action)
        if entry is None:
            entry = stats[outcome.first_action] = _FirstActionStats()
        entry.record(outcome.score)
    return stats


class RolloutPlanner:
    """Time-boxed Monte-Carlo playouts keyed by the primary player's first action.

    The first ply of rollout `n` takes candidate `n % len(candidates)` from the
    canonically sorted legal list, so successive rollouts sweep every opening
    move. All later plies, for both players, are uniform random picks. A single
    RNG is shared by every rollout of the planner's lifetime.
    """

    def __init__(
        self,
        config: PlannerConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self.config = config or PlannerConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)
        self.clock = clock
        self.phase = PlannerPhase.DONE

    def plan(self, state: GameState) -> PlanResult:
        budget = TimeBudget(self.config.budget_ms, clock=self.clock)
        max_rollouts = int(self.config.max_rollouts)

        self.phase = PlannerPhase.SAMPLING
        outcomes: list[RolloutOutcome] = []
        while not budget.expired():
            if max_rollouts and len(outcomes) >= max_rollouts:
                break
            outcomes.append(self.run_rollout(state, len(outcomes)))

        self.phase = PlannerPhase.AGGREGATING
        stats = aggregate_outcomes(outcomes)

        self.phase = PlannerPhase.DONE
        result = self._build_result(stats, rollouts=len(outcomes), elapsed_ms=budget.elapsed_ms())
        logger.debug(
            "day %d: %s mean=%.2f over %d rollouts (%d first actions, %.1f ms)",
            state.day,
            result.action,
            result.mean_score,
            result.rollouts,
            result.distinct_actions,
            result.elapsed_ms,
        )
        return result

    def run_rollout(self, base_state: GameState, rollout_index: int) -> RolloutOutcome:
        state = base_state.clone()
        horizon = min(FINAL_DAY, state.day + int(self.config.horizon_days))
        rollout_threshold = self._draw_seed_threshold() if self.config.per_rollout_seed_threshold else None

        player_id = PRIMARY_PLAYER
        first_action = self._play_ply(state, player_id, rollout_threshold, first_index=rollout_index)
        plies = 1
        while True:
            if state.is_over() and state.both_waiting():
                state.score[PRIMARY_PLAYER] += state.sun[PRIMARY_PLAYER] // SUN_PER_ENDGAME_POINT
                break
            if state.day >= horizon:
                break
            player_id = OPPONENT_PLAYER if player_id == PRIMARY_PLAYER else PRIMARY_PLAYER
            self._play_ply(state, player_id, rollout_threshold)
            plies += 1

        return RolloutOutcome(
            first_action=first_action,
            score=state.score[PRIMARY_PLAYER],
            plies=plies,
            final_day=state.day,
        )

    def _play_ply(
        self,
        state: GameState,
        player_id: int,
        rollout_threshold: Optional[int],
        *,
        first_index: Optional[int] = None,
    ) -> GameAction:
        collect_daily_income(state)
        threshold = rollout_threshold if rollout_threshold is not None else self._draw_seed_threshold()
        actions = list_legal_actions(state, player_id, seed_day_threshold=threshold)

        if first_index is None:
            action = self.rng.choice(actions)
        else:
            ordered = canonical_order(actions)
            action = ordered[first_index % len(ordered)]

        if player_id == PRIMARY_PLAYER:
            state.score[PRIMARY_PLAYER] += action_heuristic(state, action)
        apply_action(state, player_id, action)
        return action

    def _draw_seed_threshold(self) -> int:
        low, high = self.config.seed_day_threshold_range
        return self.rng.randrange(low, high)

    @staticmethod
    def _build_result(
        stats: Dict[GameAction, _FirstActionStats],
        *,
        rollouts: int,
        elapsed_ms: float,
    ) -> PlanResult:
        if not stats:
            # Budget ran out before a single playout finished.
            return PlanResult(
                action=wait(),
                mean_score=0.0,
                distinct_actions=0,
                rollouts=0,
                elapsed_ms=round(elapsed_ms, 2),
            )

        best_action, best_stats = max(stats.items(), key=lambda item: item[1].mean_score)
        candidates = [
            FirstActionReport(action=action, rollouts=entry.rollouts, mean_score=round(entry.mean_score, 4))
            for action, entry in stats.items()
        ]
        candidates.sort(key=lambda report: report.mean_score, reverse=True)
        return PlanResult(
            action=best_action,
            mean_score=best_stats.mean_score,
            distinct_actions=len(stats),
            rollouts=rollouts,
            elapsed_ms=round(elapsed_ms, 2),
            candidates=candidates,
        )
