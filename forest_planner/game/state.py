from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from forest_planner.domain.board import BoardState

PRIMARY_PLAYER = 0
OPPONENT_PLAYER = 1
PLAYER_IDS = (PRIMARY_PLAYER, OPPONENT_PLAYER)

MAX_TREE_SIZE = 3
TREE_SIZES = tuple(range(MAX_TREE_SIZE + 1))
FINAL_DAY = 24
STARTING_NUTRIENTS = 20


@dataclass(frozen=True)
class Tree:
    cell_index: int
    size: int
    is_mine: bool
    is_dormant: bool = False

    @property
    def owner(self) -> int:
        return PRIMARY_PLAYER if self.is_mine else OPPONENT_PLAYER

    def owned_by(self, player_id: int) -> bool:
        return self.is_mine == (player_id == PRIMARY_PLAYER)


Forest = Dict[int, Tree]


@dataclass
class GameState:
    board: BoardState
    day: int
    nutrients: int
    trees: Forest
    sun: List[int]
    score: List[int]
    waiting: List[bool] = field(default_factory=lambda: [False, False])
    tree_counts: List[List[int]] = field(default_factory=list)
    income_day: int | None = None

    def __post_init__(self) -> None:
        if not self.tree_counts:
            self.tree_counts = count_trees_by_size(self.trees.values())
        if self.income_day is None:
            # The referee already paid out today's sun.
            self.income_day = self.day

    def clone(self) -> "GameState":
        return GameState(
            board=self.board,
            day=self.day,
            nutrients=self.nutrients,
            trees=dict(self.trees),
            sun=list(self.sun),
            score=list(self.score),
            waiting=list(self.waiting),
            tree_counts=[list(counts) for counts in self.tree_counts],
            income_day=self.income_day,
        )

    def player_trees(self, player_id: int) -> List[Tree]:
        return [tree for _, tree in sorted(self.trees.items()) if tree.owned_by(player_id)]

    def total_trees(self, player_id: int) -> int:
        return int(sum(self.tree_counts[player_id]))

    def both_waiting(self) -> bool:
        return all(self.waiting)

    def is_over(self) -> bool:
        return self.day >= FINAL_DAY


def count_trees_by_size(trees: Iterable[Tree]) -> List[List[int]]:
    counts = [[0] * len(TREE_SIZES) for _ in PLAYER_IDS]
    for tree in trees:
        counts[tree.owner][tree.size] += 1
    return counts


def build_forest(trees: Iterable[Tree]) -> Forest:
    forest: Forest = {}
    for tree in trees:
        if tree.cell_index in forest:
            raise ValueError(f"Two trees on cell {tree.cell_index}.")
        if tree.size not in TREE_SIZES:
            raise ValueError(f"Tree on cell {tree.cell_index} has invalid size {tree.size}.")
        forest[tree.cell_index] = tree
    return forest


def initialize_game_state(
    board: BoardState,
    *,
    day: int = 0,
    nutrients: int = STARTING_NUTRIENTS,
    trees: Iterable[Tree] = (),
    sun: int = 0,
    score: int = 0,
    opponent_sun: int = 0,
    opponent_score: int = 0,
    opponent_waiting: bool = False,
) -> GameState:
    return GameState(
        board=board,
        day=int(day),
        nutrients=int(nutrients),
        trees=build_forest(trees),
        sun=[int(sun), int(opponent_sun)],
        score=[int(score), int(opponent_score)],
        waiting=[False, bool(opponent_waiting)],
    )
