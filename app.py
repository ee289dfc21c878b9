import argparse
import sys
import time
import random
from statistics import median
from typing import Optional

from board import Board, CouldNotPlace
from constants import (
    BOARD_SIZE,
    MIN_BOARD_SIZE,
    MAX_DESCENT_ATTEMPTS,
    MAX_MOVES,
    MUTATION_CHANCE_HIGH,
    MUTATION_CHANCE_LOW,
    SOLVE_REPEATS,
    recommend_params,
)
from evolutionary import GASettings, PopulationCollapse, run_ga
from hill_climbing import StuckInLocalMinimum, climb
import view


# ---------------------------
# Solvers
# ---------------------------

def solve_hill_climbing(n: int, rng=None, max_moves: int = MAX_MOVES,
                        max_attempts: int = MAX_DESCENT_ATTEMPTS, verbose: bool = True) -> bool:
    board = Board(n, rng=rng)
    board.fill_n()
    if verbose:
        view.print_board_box(board)
        print("Not printing random moves without a heuristic change")

    def on_move(index, move, before_render):
        view.print_move(index, move, before_render, board)

    result = climb(board, max_moves=max_moves, max_attempts=max_attempts,
                   on_move=on_move if verbose else None, verbose=False)
    if verbose:
        if result.solved:
            print(board.render())
            print("SOLVED!")
        else:
            print(f"No solution after {len(result.moves)} moves ({board.total_conflicts()}h left).")
    return result.solved


def solve_genetic(n: int, settings: GASettings, rng=None, verbose: bool = True,
                  trace_path: Optional[str] = None, plot: bool = False) -> bool:
    result = run_ga(settings, n, rng=rng, verbose=verbose, trace_path=trace_path)
    if verbose and result.best is not None:
        view.print_board_box(result.best, title="\nBest board:")
    if plot:
        view.plot_generation_history(result.history)
        if result.best is not None:
            view.plot_board(result.best)
    return result.solved


def solve_once(args, settings: GASettings, rng, verbose: bool) -> bool:
    try:
        if args.mode == "hill":
            return solve_hill_climbing(args.board_size, rng=rng, max_moves=args.max_moves,
                                       max_attempts=args.max_attempts, verbose=verbose)
        return solve_genetic(args.board_size, settings, rng=rng, verbose=verbose,
                             trace_path=args.trace, plot=args.plot)
    except (StuckInLocalMinimum, CouldNotPlace, PopulationCollapse) as e:
        if verbose:
            print(f"Search failed: {e}")
        return False


def evaluate_runs(args, settings: GASettings, repeats: int, rng) -> dict:
    durations = []
    solved = 0
    for _ in range(repeats):
        start = time.perf_counter()
        if solve_once(args, settings, rng, verbose=False):
            solved += 1
        durations.append(time.perf_counter() - start)
    return {
        "runs": repeats,
        "success_rate": solved / repeats,
        "median_duration": median(durations),
    }


# ---------------------------
# Entry point and CLI
# ---------------------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="N-Queens by hill climbing or a genetic algorithm")
    parser.add_argument("board_size", type=int, nargs="?", default=BOARD_SIZE)
    parser.add_argument("--mode", choices=["hill", "genetic"], default="hill")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run")
    parser.add_argument("--max-moves", type=int, default=MAX_MOVES)
    parser.add_argument("--max-attempts", type=int, default=MAX_DESCENT_ATTEMPTS)
    parser.add_argument("--population", type=int)
    parser.add_argument("--parents", type=int)
    parser.add_argument("--survivors", type=int)
    parser.add_argument(
        "--mutation-chance",
        type=int,
        help=f"Per-gene mutation chance in percent (commonly {MUTATION_CHANCE_LOW} or {MUTATION_CHANCE_HIGH})",
    )
    parser.add_argument("--moves", type=int, help="Hill-climbing moves per individual per generation")
    parser.add_argument("--generations", type=int)
    parser.add_argument("--repeats", type=int, default=SOLVE_REPEATS, help="Solve N times and summarize")
    parser.add_argument("--trace", type=str, default=None, help="Write a per-generation TSV trace")
    parser.add_argument("--plot", action="store_true", help="Show matplotlib plots after a genetic run")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.board_size < MIN_BOARD_SIZE:
        print(f"Board size must be at least {MIN_BOARD_SIZE}")
        return 2

    settings = GASettings.from_dict(recommend_params(args.board_size))
    # Overrides
    overrides = {
        "population_size": args.population,
        "parents_per_child": args.parents,
        "survivor_count": args.survivors,
        "mutation_chance": args.mutation_chance,
        "moves_per_generation": args.moves,
        "generations": args.generations,
    }
    for name, val in overrides.items():
        if val is not None:
            setattr(settings, name, val)
    if args.mode == "genetic":
        try:
            settings.validate(args.board_size)
        except ValueError as e:
            print(f"Invalid configuration: {e}")
            return 2

    rng = random.Random(args.seed) if args.seed is not None else None

    if args.repeats > 1:
        metrics = evaluate_runs(args, settings, args.repeats, rng)
        print(
            f"Repeated {metrics['runs']} runs | median={metrics['median_duration']:.4f}s "
            f"success={metrics['success_rate']:.2f}"
        )
        return 0 if metrics["success_rate"] > 0 else 1

    return 0 if solve_once(args, settings, rng, verbose=True) else 1


if __name__ == "__main__":
    sys.exit(main())
