"""
Central defaults for the N-Queens heuristic solvers.

This module provides:
 - BOARD_SIZE: default board size
 - default genetic algorithm parameters
 - attempt budgets that bound every random retry loop
 - recommend_params(n): GA starting values valid for any n >= 2
"""

from typing import Any, Dict

# Problem constant: default board size
BOARD_SIZE = 8  # Try 4, 8, 12, 16, ...
MIN_BOARD_SIZE = 4

# Genetic algorithm defaults
POPULATION_SIZE = 30
PARENTS_PER_CHILD = 2
SURVIVOR_COUNT = 6
# Both chances are in use; pick one per run (percent per gene).
MUTATION_CHANCE_LOW = 5
MUTATION_CHANCE_HIGH = 10
MUTATION_CHANCE = MUTATION_CHANCE_HIGH
MOVES_PER_GENERATION = 3
GENERATIONS = 1000

# Attempt budgets
MAX_PLACEMENT_ATTEMPTS = 100000    # random draws when filling a board
MAX_DESTINATION_ATTEMPTS = 100000  # random draws when moving a queen
MAX_DESCENT_ATTEMPTS = 1000000     # tries to find a non-worsening move
MAX_MOVES = 100000                 # accepted moves per hill-climbing run
MAX_REFINE_ATTEMPTS = 1000         # descent tries per GA refinement step

# Defaults for repeated running
SOLVE_REPEATS = 1


def recommend_params(n: int) -> Dict[str, Any]:
    """Return GA parameters that pass validation for board size n.

    parents_per_child must stay below n, so it is clamped for tiny boards.
    """
    n = int(n)
    return {
        "population_size": POPULATION_SIZE,
        "parents_per_child": max(1, min(PARENTS_PER_CHILD, n - 1)),
        "survivor_count": SURVIVOR_COUNT,
        "mutation_chance": MUTATION_CHANCE,
        "moves_per_generation": MOVES_PER_GENERATION,
        "generations": GENERATIONS,
    }
