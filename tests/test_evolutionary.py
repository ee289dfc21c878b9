"""Unit tests for the genetic solver and its operators."""

import pytest

from board import Board, Position
from constants import recommend_params
from Evolutionary.genetic_operators import build_child, mutate, segment_crossover
from Evolutionary.selection import pick_parents, select_survivors
import evolutionary
from evolutionary import GASettings, GeneticSolver, PopulationCollapse, run_ga
from hill_climbing import StuckInLocalMinimum


def board_of(n, cells, rng=None):
    return Board(n, [Position(r, c) for r, c in cells], rng=rng)


@pytest.fixture
def small_settings():
    return GASettings(
        population_size=8,
        parents_per_child=2,
        survivor_count=6,
        mutation_chance=10,
        moves_per_generation=0,
        generations=5,
    )


class TestSettings:

    def test_round_trip_dict(self, small_settings):
        assert GASettings.from_dict(small_settings.to_dict()).to_dict() == small_settings.to_dict()

    def test_defaults(self):
        settings = GASettings()
        assert settings.population_size == 30
        assert settings.parents_per_child == 2
        assert settings.survivor_count == 6
        assert settings.moves_per_generation == 3
        assert settings.generations == 1000

    @pytest.mark.parametrize("field,value", [
        ("parents_per_child", 8),
        ("parents_per_child", 0),
        ("survivor_count", 30),
        ("mutation_chance", 101),
        ("mutation_chance", -1),
        ("moves_per_generation", -1),
        ("generations", -1),
    ])
    def test_invalid_settings_rejected_at_construction(self, field, value):
        settings = GASettings()
        setattr(settings, field, value)
        with pytest.raises(ValueError):
            GeneticSolver(8, settings)

    def test_recommend_params_are_valid(self):
        for n in (2, 3, 4, 8, 16):
            GASettings.from_dict(recommend_params(n)).validate(n)


class TestOperators:

    def test_two_parents_split_evenly(self):
        p1 = board_of(8, [(i, i) for i in range(8)])
        p2 = board_of(8, [(i, 7 - i) for i in range(8)])

        genes = segment_crossover([p1, p2], 8)

        assert len(genes) == 8
        assert genes[:4] == p1.pieces[:4]
        assert genes[4:] == p2.pieces[4:]

    def test_last_parent_takes_remainder(self):
        parents = [board_of(8, [(i, (i + k) % 8) for i in range(8)]) for k in range(3)]

        genes = segment_crossover(parents, 8)

        assert len(genes) == 8
        assert genes[0:2] == parents[0].pieces[0:2]
        assert genes[2:4] == parents[1].pieces[2:4]
        assert genes[4:8] == parents[2].pieces[4:8]

    def test_mutation_rolls(self, scripted_rng):
        genes = [Position(0, 0), Position(1, 1), Position(2, 2)]
        # roll 4 -> new row 3; roll 7 -> new column 2; roll 50 -> unchanged
        rng = scripted_rng([4, 3, 7, 2, 50])

        assert mutate(genes, 4, 10, rng) == [Position(3, 0), Position(1, 2), Position(2, 2)]
        assert genes == [Position(0, 0), Position(1, 1), Position(2, 2)]

    def test_odd_chance_rounds_row_threshold_down(self, scripted_rng):
        genes = [Position(0, 0), Position(1, 1)]
        # chance 5: rolls 0-1 replace the row, rolls 2-4 the column
        rng = scripted_rng([1, 3, 2, 0])

        assert mutate(genes, 4, 5, rng) == [Position(3, 0), Position(1, 0)]

    def test_zero_chance_never_mutates(self, rng):
        genes = [Position(i, i) for i in range(8)]
        assert mutate(genes, 8, 0, rng) == genes

    def test_colliding_genes_are_not_viable(self):
        assert build_child([Position(0, 0), Position(0, 0)], 4) is None

        child = build_child([Position(0, 1), Position(1, 3)], 4)
        assert child.pieces == [Position(0, 1), Position(1, 3)]

    def test_select_survivors_sorts_ascending(self):
        boards = [
            board_of(4, [(0, 0), (0, 1), (0, 2)]),
            board_of(4, [(0, 1), (1, 3)]),
            board_of(4, [(0, 0), (1, 1)]),
        ]
        survivors = select_survivors(boards, 2)
        assert [b.total_conflicts() for b in survivors] == [0, 1]
        assert [b.total_conflicts() for b in boards] == [0, 1, 3]

    def test_parents_drawn_with_replacement(self, rng, solved_board):
        parents = pick_parents([solved_board], 3, rng)
        assert parents == [solved_board, solved_board, solved_board]


class TestGeneticSolver:

    def test_init_population(self, rng, small_settings):
        solver = GeneticSolver(4, small_settings, rng=rng)
        population = solver.init_population()

        assert len(population) == 8
        for board in population:
            assert len(set(board.pieces)) == 4
            assert board.rng is rng

    def test_solved_individual_stops_the_run(self, rng, small_settings, solved_board):
        solver = GeneticSolver(4, small_settings, rng=rng)
        solver.population = [solved_board.clone() for _ in range(7)]

        result = solver.run(verbose=False)

        assert result.solved
        assert result.generations == 1
        assert result.best.total_conflicts() == 0
        assert result.history[0].survivors == [0] * 6
        assert result.history[0].population == [0] * 7

    def test_self_pairing_without_mutation_copies_parent(self, rng, small_settings, solved_board):
        small_settings.mutation_chance = 0
        solver = GeneticSolver(4, small_settings, rng=rng)

        child = solver.breed([solved_board])

        assert child.pieces == solved_board.pieces
        assert child is not solved_board

    def test_reproduction_attempt_count(self, rng, small_settings, solved_board):
        small_settings.mutation_chance = 0
        solver = GeneticSolver(4, small_settings, rng=rng)

        children = solver.reproduce([solved_board])

        assert len(children) == 8 // 2

    def test_refine_ignores_stuck_descents(self, rng, small_settings, monkeypatch):
        small_settings.moves_per_generation = 3
        solver = GeneticSolver(4, small_settings, rng=rng, refine_attempts=7)
        solver.init_population()
        before = [list(b.pieces) for b in solver.population]
        calls = []

        def stuck(board, max_attempts):
            calls.append((board, max_attempts))
            raise StuckInLocalMinimum("no move")

        monkeypatch.setattr(evolutionary, "descend_once", stuck)
        solver.refine()

        assert len(calls) == 8 * 3
        assert all(attempts == 7 for _, attempts in calls)
        for board in solver.population:
            assert [b for b, _ in calls].count(board) == 3
        assert [list(b.pieces) for b in solver.population] == before

    def test_non_viable_children_shrink_the_next_generation(self, small_settings, scripted_rng):
        # Crossing a with b (either order) lands two genes on one square.
        a = board_of(4, [(0, 0), (1, 1), (2, 3), (3, 2)])
        b = board_of(4, [(2, 3), (3, 2), (0, 0), (1, 1)])
        small_settings.mutation_chance = 0
        no_mutation = [50] * 4
        rng = scripted_rng([0, 1] + no_mutation + [0, 0] + no_mutation
                           + [0, 1] + no_mutation + [1, 0] + no_mutation)
        solver = GeneticSolver(4, small_settings, rng=rng)

        children = solver.reproduce([a, b])

        assert len(children) == 1 < 8 // 2
        assert children[0].pieces == a.pieces

    def test_shrunken_population_collapses(self, small_settings, scripted_rng):
        a = board_of(4, [(0, 0), (1, 1), (2, 3), (3, 2)])
        b = board_of(4, [(2, 3), (3, 2), (0, 0), (1, 1)])
        small_settings.mutation_chance = 0
        no_mutation = [50] * 4
        rng = scripted_rng([0, 1] + no_mutation + [0, 0] + no_mutation
                           + [0, 1] + no_mutation + [1, 0] + no_mutation)
        solver = GeneticSolver(4, small_settings, rng=rng)
        solver.population = [a.clone(), b.clone()] * 3

        with pytest.raises(PopulationCollapse):
            solver.run(verbose=False)
        assert len(solver.population) == 1

    def test_population_collapse(self, rng, small_settings, solved_board):
        solver = GeneticSolver(4, small_settings, rng=rng)
        solver.population = [solved_board.clone() for _ in range(2)]

        with pytest.raises(PopulationCollapse):
            solver.run(verbose=False)

    def test_no_generations_is_a_failure(self, rng, small_settings):
        small_settings.generations = 0
        result = GeneticSolver(4, small_settings, rng=rng).run(verbose=False)

        assert not result.solved
        assert result.best is None
        assert result.history == []

    def test_run_history(self, rng):
        settings = GASettings(population_size=40, parents_per_child=2, survivor_count=6,
                              mutation_chance=5, moves_per_generation=3, generations=10)
        result = run_ga(settings, 8, rng=rng, verbose=False)

        assert 1 <= result.generations <= 10
        assert len(result.history) == result.generations
        for report in result.history:
            assert len(report.survivors) == 6
            assert report.survivors == sorted(report.survivors)
            assert report.survivors == report.population[:6]
        assert result.solved == (result.best.total_conflicts() == 0)
        assert result.best.total_conflicts() == result.history[-1].survivors[0]

    def test_trace_file(self, rng, small_settings, solved_board, tmp_path):
        solver = GeneticSolver(4, small_settings, rng=rng)
        solver.population = [solved_board.clone() for _ in range(7)]
        trace = tmp_path / "traces" / "run.tsv"

        solver.run(verbose=False, trace_path=str(trace))

        lines = trace.read_text(encoding="utf-8").splitlines()
        assert lines == ["gen\tpopulation\tsurvivors", "1\t0,0,0,0,0,0,0\t0,0,0,0,0,0"]

    def test_verbose_output(self, rng, small_settings, solved_board, capsys):
        solver = GeneticSolver(4, small_settings, rng=rng)
        solver.population = [solved_board.clone() for _ in range(7)]
        solver.run(verbose=True)
        assert "Solved at generation 1" in capsys.readouterr().out
