import random
import unittest

from forest_planner.analysis.scoring import complete_heuristic
from forest_planner.domain.board import build_board, build_standard_board
from forest_planner.game import (
    PRIMARY_PLAYER,
    OPPONENT_PLAYER,
    GameAction,
    Tree,
    action_cost,
    apply_action,
    collect_daily_income,
    complete,
    grow,
    initialize_game_state,
    list_legal_actions,
    seed,
    seed_targets,
    sun_income,
    wait,
)

NO_SEEDING = 0
OPEN_SEEDING = 24


def _board_with_richness(cell_id: int, richness: int):
    rows = [
        (cell.index, richness if cell.index == cell_id else cell.richness, *cell.neighbors)
        for cell in build_standard_board().cells
    ]
    return build_board(rows)


def _mine(cell_index: int, size: int, dormant: bool = False) -> Tree:
    return Tree(cell_index=cell_index, size=size, is_mine=True, is_dormant=dormant)


def _theirs(cell_index: int, size: int) -> Tree:
    return Tree(cell_index=cell_index, size=size, is_mine=False)


class LegalActionTests(unittest.TestCase):
    def test_single_small_tree_can_grow_but_not_complete(self) -> None:
        board = _board_with_richness(5, 2)
        state = initialize_game_state(board, sun=10, trees=[_mine(5, 1)])

        actions = list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=OPEN_SEEDING)

        self.assertIn(grow(5), actions)
        self.assertFalse(any(action.kind == "COMPLETE" for action in actions))
        self.assertIn(seed(5, 0), actions)

    def test_dormant_full_size_and_unaffordable_trees_never_grow(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            sun=5,
            trees=[_mine(0, 3), _mine(1, 1, dormant=True), _mine(2, 2)],
        )

        actions = list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=NO_SEEDING)

        self.assertEqual(actions, [complete(0)])

    def test_low_sun_leaves_only_wait(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=3, trees=[_mine(0, 1)])
        actions = list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=OPEN_SEEDING)
        self.assertEqual(actions, [wait()])

    def test_no_trees_leaves_only_wait(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=50)
        self.assertEqual(list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=OPEN_SEEDING), [wait()])

    def test_grow_cost_counts_own_trees_at_the_new_size(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            sun=20,
            trees=[_mine(1, 1), _mine(2, 2), _mine(3, 2), _theirs(4, 2)],
        )
        self.assertEqual(action_cost(state, PRIMARY_PLAYER, grow(1)), 5)
        self.assertEqual(action_cost(state, PRIMARY_PLAYER, grow(2)), 7)
        self.assertEqual(action_cost(state, OPPONENT_PLAYER, grow(4)), 7)

    def test_seed_cost_is_own_seed_count(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            sun=20,
            trees=[_mine(0, 2), _mine(10, 0), _mine(11, 0), _theirs(12, 0)],
        )
        self.assertEqual(action_cost(state, PRIMARY_PLAYER, seed(0, 1)), 2)
        self.assertEqual(action_cost(state, OPPONENT_PLAYER, seed(12, 13)), 1)
        self.assertEqual(action_cost(state, PRIMARY_PLAYER, complete(0)), 4)
        self.assertEqual(action_cost(state, PRIMARY_PLAYER, wait()), 0)

    def test_seed_targets_within_tree_size(self) -> None:
        board = build_standard_board()
        trees = {0: _mine(0, 2)}
        self.assertEqual(seed_targets(board, trees, 0, 1), [1, 2, 3, 4, 5, 6])
        self.assertEqual(seed_targets(board, trees, 0, 2), list(range(1, 19)))

    def test_seed_targets_skip_occupied_and_unusable_cells(self) -> None:
        board = build_standard_board(unusable_cells=[3])
        trees = {0: _mine(0, 2), 1: _theirs(1, 1)}

        targets = seed_targets(board, trees, 0, 2)

        self.assertNotIn(0, targets)
        self.assertNotIn(1, targets)
        self.assertNotIn(3, targets)
        # Only reachable through the occupied cell 1.
        self.assertIn(7, targets)

    def test_dormant_trees_and_seeds_do_not_seed(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            sun=10,
            trees=[_mine(0, 1, dormant=True), _mine(20, 0, dormant=True)],
        )
        self.assertEqual(list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=OPEN_SEEDING), [wait()])

    def test_seeding_stops_at_tree_cap_and_day_threshold(self) -> None:
        trees = [_mine(0, 1)] + [_mine(cell_id, 0) for cell_id in range(19, 26)]
        capped = initialize_game_state(build_standard_board(), sun=20, trees=trees)
        capped_actions = list_legal_actions(capped, PRIMARY_PLAYER, seed_day_threshold=OPEN_SEEDING)
        self.assertFalse(any(action.kind == "SEED" for action in capped_actions))

        state = initialize_game_state(build_standard_board(), day=5, sun=20, trees=[_mine(0, 1)])
        late = list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=5)
        early = list_legal_actions(state, PRIMARY_PLAYER, seed_day_threshold=6)
        self.assertFalse(any(action.kind == "SEED" for action in late))
        self.assertEqual(sum(action.kind == "SEED" for action in early), 6)

    def test_threshold_source_is_required(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, trees=[_mine(0, 1)])
        with self.assertRaises(ValueError):
            list_legal_actions(state, PRIMARY_PLAYER)
        self.assertIn(grow(0), list_legal_actions(state, PRIMARY_PLAYER, random.Random(4)))

    def test_threshold_is_redrawn_on_every_query(self) -> None:
        draws = []

        class RecordingRandom(random.Random):
            def randrange(self, *args, **kwargs):
                value = super().randrange(*args, **kwargs)
                draws.append(value)
                return value

        state = initialize_game_state(build_standard_board(), day=9, sun=10, trees=[_mine(0, 1)])
        rng = RecordingRandom(8)
        seeding_offered = [
            any(action.kind == "SEED" for action in list_legal_actions(state, PRIMARY_PLAYER, rng))
            for _ in range(40)
        ]

        self.assertEqual(len(draws), 40)
        self.assertTrue(all(5 <= value < 15 for value in draws))
        self.assertEqual(seeding_offered, [state.day < value for value in draws])

    def test_opponent_actions_use_opponent_trees(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            sun=0,
            opponent_sun=10,
            trees=[_mine(0, 1), _theirs(30, 1)],
        )
        actions = list_legal_actions(state, OPPONENT_PLAYER, seed_day_threshold=NO_SEEDING)
        self.assertEqual(actions, [grow(30)])


class ApplyActionTests(unittest.TestCase):
    def test_grow_spends_sun_and_makes_tree_dormant(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, trees=[_mine(5, 1)])

        apply_action(state, PRIMARY_PLAYER, grow(5))

        self.assertEqual(state.sun[PRIMARY_PLAYER], 7)
        self.assertEqual(state.trees[5].size, 2)
        self.assertTrue(state.trees[5].is_dormant)
        self.assertEqual(state.tree_counts[PRIMARY_PLAYER][1], 0)
        self.assertEqual(state.tree_counts[PRIMARY_PLAYER][2], 1)

    def test_seed_plants_dormant_seed_and_marks_origin(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, trees=[_mine(0, 1), _mine(20, 0)])

        apply_action(state, PRIMARY_PLAYER, seed(0, 1))

        self.assertEqual(state.sun[PRIMARY_PLAYER], 9)
        planted = state.trees[1]
        self.assertEqual((planted.size, planted.is_mine, planted.is_dormant), (0, True, True))
        self.assertTrue(state.trees[0].is_dormant)
        self.assertEqual(state.tree_counts[PRIMARY_PLAYER][0], 2)

    def test_opponent_seed_belongs_to_opponent(self) -> None:
        state = initialize_game_state(build_standard_board(), opponent_sun=3, trees=[_theirs(0, 2)])
        apply_action(state, OPPONENT_PLAYER, seed(0, 4))
        self.assertFalse(state.trees[4].is_mine)
        self.assertEqual(state.tree_counts[OPPONENT_PLAYER][0], 1)

    def test_complete_removes_tree_and_uses_nutrients(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, nutrients=20, trees=[_mine(0, 3)])

        apply_action(state, PRIMARY_PLAYER, complete(0))

        self.assertEqual(state.sun[PRIMARY_PLAYER], 6)
        self.assertNotIn(0, state.trees)
        self.assertEqual(state.nutrients, 19)
        self.assertEqual(state.tree_counts[PRIMARY_PLAYER][3], 0)

    def test_nutrients_never_go_negative(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, nutrients=0, trees=[_mine(0, 3)])
        apply_action(state, PRIMARY_PLAYER, complete(0))
        self.assertEqual(state.nutrients, 0)

    def test_exhausted_nutrients_leave_only_richness_bonus(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            day=16,
            sun=20,
            nutrients=0,
            trees=[_mine(0, 3), _mine(4, 3)],
        )
        apply_action(state, PRIMARY_PLAYER, complete(0))

        self.assertEqual(state.nutrients, 0)
        self.assertEqual(complete_heuristic(state, 4), 4)

    def test_day_advances_only_when_both_players_wait(self) -> None:
        state = initialize_game_state(build_standard_board(), day=3, trees=[_mine(0, 2, dormant=True)])

        apply_action(state, PRIMARY_PLAYER, wait())
        self.assertEqual(state.day, 3)
        self.assertTrue(state.trees[0].is_dormant)

        apply_action(state, OPPONENT_PLAYER, wait())
        self.assertEqual(state.day, 4)
        self.assertFalse(state.trees[0].is_dormant)

    def test_waiting_opponent_lets_one_wait_end_the_day(self) -> None:
        state = initialize_game_state(build_standard_board(), day=7, opponent_waiting=True)
        apply_action(state, PRIMARY_PLAYER, wait())
        self.assertEqual(state.day, 8)

    def test_unknown_action_kind_is_ignored(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, trees=[_mine(0, 1)])
        before = (dict(state.trees), list(state.sun), state.day)

        apply_action(state, PRIMARY_PLAYER, GameAction(kind="NONE"))

        self.assertEqual((state.trees, state.sun, state.day), before)

    def test_clone_is_isolated(self) -> None:
        state = initialize_game_state(build_standard_board(), sun=10, trees=[_mine(0, 1)])
        copy = state.clone()

        apply_action(copy, PRIMARY_PLAYER, grow(0))
        apply_action(copy, PRIMARY_PLAYER, wait())

        self.assertEqual(state.trees[0].size, 1)
        self.assertEqual(state.sun, [10, 0])
        self.assertEqual(state.waiting, [False, False])
        self.assertEqual(state.tree_counts[PRIMARY_PLAYER], [0, 1, 0, 0])


class SunIncomeTests(unittest.TestCase):
    def test_equal_tree_directly_behind_blocks_the_sun(self) -> None:
        # Day 0 shadows fall from the west, cell 0 is west of cell 1.
        state = initialize_game_state(build_standard_board(), trees=[_mine(1, 3), _theirs(0, 3)])
        self.assertEqual(sun_income(state, PRIMARY_PLAYER), 0)
        self.assertEqual(sun_income(state, OPPONENT_PLAYER), 3)

    def test_unshaded_tree_earns_its_size(self) -> None:
        state = initialize_game_state(build_standard_board(), trees=[_mine(0, 2), _mine(20, 1)])
        self.assertEqual(sun_income(state, PRIMARY_PLAYER), 3)

    def test_smaller_tree_does_not_shade(self) -> None:
        state = initialize_game_state(build_standard_board(), trees=[_mine(1, 3), _theirs(0, 2)])
        self.assertEqual(sun_income(state, PRIMARY_PLAYER), 3)

    def test_distant_tree_must_be_tall_enough(self) -> None:
        short = initialize_game_state(build_standard_board(), trees=[_mine(1, 1), _theirs(4, 1)])
        tall = initialize_game_state(build_standard_board(), trees=[_mine(1, 1), _theirs(4, 2)])
        self.assertEqual(sun_income(short, PRIMARY_PLAYER), 1)
        self.assertEqual(sun_income(tall, PRIMARY_PLAYER), 0)

    def test_seeds_earn_nothing(self) -> None:
        state = initialize_game_state(build_standard_board(), trees=[_mine(0, 0)])
        self.assertEqual(sun_income(state, PRIMARY_PLAYER), 0)

    def test_income_paid_once_per_new_day(self) -> None:
        state = initialize_game_state(
            build_standard_board(),
            sun=1,
            score=2,
            trees=[_mine(0, 2), _theirs(19, 1)],
        )
        self.assertEqual(collect_daily_income(state), [0, 0])

        state.day = 1
        self.assertEqual(collect_daily_income(state), [2, 1])
        self.assertEqual(state.sun, [3, 1])
        self.assertEqual(state.score, [4, 0])

        self.assertEqual(collect_daily_income(state), [0, 0])
        self.assertEqual(state.sun, [3, 1])

    def test_late_income_is_not_scored(self) -> None:
        state = initialize_game_state(build_standard_board(), day=13, sun=0, score=0, trees=[_mine(0, 2)])
        state.day = 14

        collect_daily_income(state)

        self.assertEqual(state.sun[PRIMARY_PLAYER], 2)
        self.assertEqual(state.score[PRIMARY_PLAYER], 0)


if __name__ == "__main__":
    unittest.main()
