from __future__ import annotations

import logging
import random
import time
from typing import Callable, Iterator, Optional

from forest_planner.analysis.rollout import RolloutPlanner
from forest_planner.analysis.runtime import Clock
from forest_planner.analysis.seeding import planner_seed
from forest_planner.analysis.types import PlannerConfig, PlanResult
from forest_planner.domain.board import BoardState
from forest_planner.game import FINAL_DAY, PRIMARY_PLAYER, list_legal_actions

from .protocol import TurnInput, format_decision, read_board, read_turn

logger = logging.getLogger(__name__)

ResultCallback = Callable[[TurnInput, PlanResult], None]


class ForestBot:
    """One game's worth of decisions against a fixed board.

    The RNG lives as long as the bot, so draws carry over from turn to turn.
    """

    def __init__(
        self,
        board: BoardState,
        config: PlannerConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Clock = time.perf_counter,
    ) -> None:
        self.board = board
        self.config = config or PlannerConfig()
        self.rng = rng if rng is not None else random.Random(
            planner_seed(board, self.config.seed, salt="forest_rollouts")
        )
        self.planner = RolloutPlanner(self.config, rng=self.rng, clock=clock)
        self.last_day = -1
        self.turns_played = 0

    def decide(self, turn: TurnInput) -> PlanResult:
        state = turn.state
        if state.day != self.last_day:
            logger.info(
                "Day %d: nutrients=%d sun=%d score=%d trees=%d",
                state.day,
                state.nutrients,
                state.sun[PRIMARY_PLAYER],
                state.score[PRIMARY_PLAYER],
                state.total_trees(PRIMARY_PLAYER),
            )
            self.last_day = state.day

        self._log_offer_mismatch(turn)
        result = self.planner.plan(state)
        self.turns_played += 1
        logger.info("Turn %d: %s (mean %.2f, %d rollouts)", self.turns_played, result.action, result.mean_score, result.rollouts)
        return result

    def _log_offer_mismatch(self, turn: TurnInput) -> None:
        if not turn.offered_actions or not logger.isEnabledFor(logging.DEBUG):
            return
        # Seeding left open so only rule differences show up.
        ours = set(list_legal_actions(turn.state, PRIMARY_PLAYER, seed_day_threshold=FINAL_DAY))
        offered = set(turn.offered_actions)
        missing = sorted(action.canonical() for action in offered - ours)
        extra = sorted(action.canonical() for action in ours - offered)
        if missing or extra:
            logger.debug("Legal set differs from referee: missing=%s extra=%s", missing, extra)


def run_session(
    lines: Iterator[str],
    write: Callable[[str], None],
    config: PlannerConfig | None = None,
    *,
    on_result: Optional[ResultCallback] = None,
    clock: Clock = time.perf_counter,
) -> int:
    """Read the board, then answer turns until input closes. Returns turns played."""
    board = read_board(lines)
    bot = ForestBot(board, config, clock=clock)
    logger.debug("Board loaded: %d cells, %d usable", len(board), len(board.usable_cells()))

    while True:
        try:
            turn = read_turn(lines, board)
        except EOFError:
            break
        result = bot.decide(turn)
        write(format_decision(result, len(turn.offered_actions)))
        if on_result is not None:
            on_result(turn, result)
    return bot.turns_played
