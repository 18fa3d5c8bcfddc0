"""Line-oriented referee protocol: board and turn readers, decision writer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Sequence

from forest_planner.analysis.types import PlanResult
from forest_planner.domain.board import DIRECTION_COUNT, BoardState, build_board
from forest_planner.game.actions import (
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
from forest_planner.game.state import OPPONENT_PLAYER, PRIMARY_PLAYER, GameState, Tree, initialize_game_state

ACTION_ARITY = {
    ACTION_GROW: 1,
    ACTION_SEED: 2,
    ACTION_COMPLETE: 1,
    ACTION_WAIT: 0,
}
CELL_ROW_WIDTH = 2 + DIRECTION_COUNT


class ProtocolError(ValueError):
    """Raised when referee input cannot be understood."""


@dataclass
class TurnInput:
    state: GameState
    offered_actions: List[GameAction] = field(default_factory=list)


def _next_tokens(lines: Iterator[str], expected: int | None = None) -> List[str]:
    line = next(lines, None)
    if line is None:
        raise EOFError("Input ended.")
    tokens = line.split()
    if expected is not None and len(tokens) != expected:
        raise ProtocolError(f"Expected {expected} values, received {len(tokens)}: {line.strip()!r}.")
    return tokens


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise ProtocolError(f"Expected an integer, received {token!r}.") from exc


def _next_ints(lines: Iterator[str], expected: int) -> List[int]:
    return [_to_int(token) for token in _next_tokens(lines, expected)]


def _next_int(lines: Iterator[str]) -> int:
    return _next_ints(lines, 1)[0]


def parse_action(text: str) -> GameAction:
    tokens = text.split()
    if not tokens:
        raise ProtocolError("Empty action line.")
    verb, arguments = tokens[0], tokens[1:]
    arity = ACTION_ARITY.get(verb)
    if arity is None:
        raise ProtocolError(f"Unknown action verb {verb!r}.")
    if len(arguments) != arity:
        raise ProtocolError(f"{verb} takes {arity} argument(s), received {len(arguments)}.")

    values = [_to_int(token) for token in arguments]
    if verb == ACTION_GROW:
        return grow(values[0])
    if verb == ACTION_SEED:
        return seed(values[0], values[1])
    if verb == ACTION_COMPLETE:
        return complete(values[0])
    return wait()


def read_board(lines: Iterator[str]) -> BoardState:
    try:
        cell_count = _next_int(lines)
        rows = [_next_ints(lines, CELL_ROW_WIDTH) for _ in range(cell_count)]
    except EOFError as exc:
        raise ProtocolError("Board input ended early.") from exc

    try:
        return build_board(rows)
    except ValueError as exc:
        raise ProtocolError(str(exc)) from exc


def read_turn(lines: Iterator[str], board: BoardState) -> TurnInput:
    """Read one turn. EOFError means the referee closed input between turns."""
    day = _next_int(lines)
    try:
        nutrients = _next_int(lines)
        sun, score = _next_ints(lines, 2)
        opponent_sun, opponent_score, opponent_waiting = _next_ints(lines, 3)

        trees: List[Tree] = []
        for _ in range(_next_int(lines)):
            cell_index, size, is_mine, is_dormant = _next_ints(lines, 4)
            trees.append(
                Tree(
                    cell_index=cell_index,
                    size=size,
                    is_mine=is_mine == 1,
                    is_dormant=is_dormant == 1,
                )
            )

        offered: List[GameAction] = []
        for _ in range(_next_int(lines)):
            line = next(lines, None)
            if line is None:
                raise EOFError("Input ended.")
            offered.append(parse_action(line))
    except EOFError as exc:
        raise ProtocolError(f"Turn input for day {day} ended early.") from exc

    try:
        state = initialize_game_state(
            board,
            day=day,
            nutrients=nutrients,
            trees=trees,
            sun=sun,
            score=score,
            opponent_sun=opponent_sun,
            opponent_score=opponent_score,
            opponent_waiting=opponent_waiting == 1,
        )
    except ValueError as exc:
        raise ProtocolError(str(exc)) from exc
    return TurnInput(state=state, offered_actions=offered)


def format_decision(result: PlanResult, offered_count: int) -> str:
    return (
        f"{result.action} score: {result.mean_score:.2f} "
        f"choices: {result.distinct_actions} ({offered_count}) "
        f"rolls: {result.rollouts} time: {int(result.elapsed_ms)}"
    )


def format_board(board: BoardState) -> List[str]:
    lines = [str(len(board))]
    for cell in board.cells:
        lines.append(" ".join(str(value) for value in (cell.index, cell.richness, *cell.neighbors)))
    return lines


def format_turn(state: GameState, offered_actions: Sequence[GameAction] = ()) -> List[str]:
    """Encode a state the way the referee sends it, from the primary player's seat."""
    lines = [
        str(state.day),
        str(state.nutrients),
        f"{state.sun[PRIMARY_PLAYER]} {state.score[PRIMARY_PLAYER]}",
        f"{state.sun[OPPONENT_PLAYER]} {state.score[OPPONENT_PLAYER]} {int(state.waiting[OPPONENT_PLAYER])}",
        str(len(state.trees)),
    ]
    for cell_index, tree in sorted(state.trees.items()):
        lines.append(f"{cell_index} {tree.size} {int(tree.is_mine)} {int(tree.is_dormant)}")
    lines.append(str(len(offered_actions)))
    lines.extend(action.canonical() for action in offered_actions)
    return lines
