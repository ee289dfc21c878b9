import random
import time
from pathlib import Path
from typing import List, NamedTuple, Optional

from board import Board, NQueensError
from constants import (
    GENERATIONS,
    MAX_PLACEMENT_ATTEMPTS,
    MAX_REFINE_ATTEMPTS,
    MOVES_PER_GENERATION,
    MUTATION_CHANCE,
    PARENTS_PER_CHILD,
    POPULATION_SIZE,
    SURVIVOR_COUNT,
)
from Evolutionary.genetic_operators import build_child, mutate, segment_crossover
from Evolutionary.selection import pick_parents, select_survivors
from hill_climbing import StuckInLocalMinimum, descend_once


class PopulationCollapse(NQueensError):
    """Fewer individuals are left than the number of survivors required."""


# ---------------------------
# GA configuration structures
# ---------------------------

class GASettings:
    def __init__(
        self,
        population_size: int = POPULATION_SIZE,
        parents_per_child: int = PARENTS_PER_CHILD,
        survivor_count: int = SURVIVOR_COUNT,
        mutation_chance: int = MUTATION_CHANCE,
        moves_per_generation: int = MOVES_PER_GENERATION,
        generations: int = GENERATIONS,
    ) -> None:
        self.population_size = int(population_size)
        self.parents_per_child = int(parents_per_child)
        self.survivor_count = int(survivor_count)
        self.mutation_chance = int(mutation_chance)
        self.moves_per_generation = int(moves_per_generation)
        self.generations = int(generations)

    def validate(self, board_size: int) -> None:
        if self.population_size < 1:
            raise ValueError(f"population_size must be positive, got {self.population_size}")
        if not 1 <= self.parents_per_child < board_size:
            raise ValueError(
                f"parents_per_child must be in [1, {board_size}), got {self.parents_per_child}"
            )
        if not 0 < self.survivor_count < self.population_size:
            raise ValueError(
                f"survivor_count must be in (0, {self.population_size}), got {self.survivor_count}"
            )
        if not 0 <= self.mutation_chance <= 100:
            raise ValueError(f"mutation_chance must be in [0, 100], got {self.mutation_chance}")
        if self.moves_per_generation < 0:
            raise ValueError(f"moves_per_generation must not be negative, got {self.moves_per_generation}")
        if self.generations < 0:
            raise ValueError(f"generations must not be negative, got {self.generations}")

    def to_dict(self) -> dict:
        return {
            "population_size": self.population_size,
            "parents_per_child": self.parents_per_child,
            "survivor_count": self.survivor_count,
            "mutation_chance": self.mutation_chance,
            "moves_per_generation": self.moves_per_generation,
            "generations": self.generations,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "GASettings":
        return cls(
            population_size=d.get("population_size", POPULATION_SIZE),
            parents_per_child=d.get("parents_per_child", PARENTS_PER_CHILD),
            survivor_count=d.get("survivor_count", SURVIVOR_COUNT),
            mutation_chance=d.get("mutation_chance", MUTATION_CHANCE),
            moves_per_generation=d.get("moves_per_generation", MOVES_PER_GENERATION),
            generations=d.get("generations", GENERATIONS),
        )


class GenerationReport(NamedTuple):
    generation: int
    population: List[int]
    survivors: List[int]


class GAResult:
    def __init__(self, best: Optional[Board], generations: int, history: List[GenerationReport],
                 solved: bool, duration: float) -> None:
        self.best = best
        self.generations = generations
        self.history = history
        self.solved = solved
        self.duration = duration


# ---------------------------
# GA main loop
# ---------------------------

class GeneticSolver:
    """Refine, select, reproduce; repeated until a board has no conflicts."""

    def __init__(self, board_size: int, settings: Optional[GASettings] = None, rng=None,
                 refine_attempts: int = MAX_REFINE_ATTEMPTS) -> None:
        self.board_size = board_size
        self.settings = settings if settings is not None else GASettings()
        self.settings.validate(board_size)
        self.rng = rng if rng is not None else random
        self.refine_attempts = refine_attempts
        self.population: List[Board] = []

    def init_population(self, max_attempts: int = MAX_PLACEMENT_ATTEMPTS) -> List[Board]:
        population = []
        for _ in range(self.settings.population_size):
            board = Board(self.board_size, rng=self.rng)
            board.fill_n(max_attempts)
            population.append(board)
        self.population = population
        return population

    def refine(self) -> None:
        for board in self.population:
            for _ in range(self.settings.moves_per_generation):
                try:
                    descend_once(board, self.refine_attempts)
                except StuckInLocalMinimum:
                    pass

    def select(self) -> List[Board]:
        if len(self.population) < self.settings.survivor_count:
            raise PopulationCollapse(
                f"Only {len(self.population)} boards left, {self.settings.survivor_count} survivors required"
            )
        return select_survivors(self.population, self.settings.survivor_count)

    def breed(self, survivors: List[Board]) -> Optional[Board]:
        """One reproduction attempt; None when the child is not viable."""
        n = self.board_size
        parents = pick_parents(survivors, self.settings.parents_per_child, self.rng)
        genes = segment_crossover(parents, n)
        genes = mutate(genes, n, self.settings.mutation_chance, self.rng)
        return build_child(genes, n, rng=self.rng)

    def reproduce(self, survivors: List[Board]) -> List[Board]:
        children = []
        for _ in range(self.settings.population_size // self.settings.parents_per_child):
            child = self.breed(survivors)
            if child is not None:
                children.append(child)
        return children

    def run(self, verbose: bool = True, trace_path: Optional[str] = None) -> GAResult:
        start = time.perf_counter()
        if not self.population:
            self.init_population()
        history: List[GenerationReport] = []
        best = None
        solved = False
        last_generation = 0

        trace_file = None
        if trace_path:
            tp = Path(trace_path)
            tp.parent.mkdir(parents=True, exist_ok=True)
            trace_file = open(tp, "w", encoding="utf-8")
            trace_file.write("\t".join(["gen", "population", "survivors"]) + "\n")

        try:
            for gen in range(1, self.settings.generations + 1):
                last_generation = gen
                self.refine()
                survivors = self.select()
                report = GenerationReport(
                    generation=gen,
                    population=[b.total_conflicts() for b in self.population],
                    survivors=[b.total_conflicts() for b in survivors],
                )
                history.append(report)
                best = survivors[0]

                if trace_file is not None:
                    trace_file.write(
                        "\t".join([
                            str(gen),
                            ",".join(str(c) for c in report.population),
                            ",".join(str(c) for c in report.survivors),
                        ]) + "\n"
                    )

                if best.total_conflicts() == 0:
                    solved = True
                    if verbose:
                        print(f"\nSolved at generation {gen} in {time.perf_counter() - start:.3f}s.")
                    break

                if verbose and (gen % 100 == 0 or gen == 1):
                    print(
                        f"Gen {gen:5d} | best fit = {best.fitness():3d}/{best.max_conflicts()} "
                        f"| conflicts={best.total_conflicts()} | population={len(self.population)}"
                    )

                self.population = self.reproduce(survivors)
        finally:
            if trace_file is not None:
                trace_file.close()

        duration = time.perf_counter() - start
        if verbose and not solved:
            print(f"\nNo solution after {last_generation} generations ({duration:.3f}s).")
        return GAResult(best=best, generations=last_generation, history=history,
                        solved=solved, duration=duration)


def run_ga(
    settings: GASettings,
    board_size: int,
    rng=None,
    verbose: bool = True,
    trace_path: Optional[str] = None,
) -> GAResult:
    solver = GeneticSolver(board_size, settings, rng=rng)
    if verbose:
        print(f"Config | n={board_size} | " + " ".join(f"{k}={v}" for k, v in settings.to_dict().items()))
    return solver.run(verbose=verbose, trace_path=trace_path)
