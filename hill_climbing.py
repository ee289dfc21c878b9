"""Greedy single-state descent on the conflict heuristic.

The most threatened queen is moved to a random free square. The move is
kept unless it raises the number of conflicts, so sideways moves across
plateaus are accepted.
"""

from typing import Callable, List, NamedTuple, Optional

from board import AlreadyOccupied, Board, CouldNotPlace, NQueensError, Position
from constants import MAX_DESCENT_ATTEMPTS, MAX_DESTINATION_ATTEMPTS, MAX_MOVES


class StuckInLocalMinimum(NQueensError):
    """No non-worsening move was found within the attempt budget."""


class Move(NamedTuple):
    before: int
    after: int
    source: Optional[Position]
    destination: Optional[Position]

    @property
    def progress(self) -> int:
        return self.before - self.after


class ClimbResult(NamedTuple):
    board: Board
    moves: List[Move]
    solved: bool


def relocate_most_conflicted(board: Board, max_attempts: int = MAX_DESTINATION_ATTEMPTS):
    """Move the most threatened queen to a random free square.

    Returns the (source, destination) pair.
    """
    index = board.most_conflicted_index()
    if index is None:
        raise ValueError("Place a queen on the board before moving the most conflicted one")
    source = board.pieces[index]
    for _ in range(max_attempts):
        destination = board.random_position()
        try:
            board.relocate(source, destination)
        except AlreadyOccupied:
            continue
        return source, destination
    raise CouldNotPlace(f"No free square for {source} after {max_attempts} attempts (is the board filled?)")


def descend_once(board: Board, max_attempts: int = MAX_DESCENT_ATTEMPTS,
                 max_destination_attempts: int = MAX_DESTINATION_ATTEMPTS) -> Move:
    """Apply one move that does not increase the conflict count.

    Worsening moves are undone and another random destination is tried.
    A board without conflicts is already optimal and is left untouched.
    """
    if board.total_conflicts() == 0:
        return Move(0, 0, None, None)
    for _ in range(max_attempts):
        before = board.total_conflicts()
        source, destination = relocate_most_conflicted(board, max_destination_attempts)
        after = board.total_conflicts()
        if after > before:
            board.relocate(destination, source)
            continue
        return Move(before, after, source, destination)
    raise StuckInLocalMinimum(f"Got stuck in a local minimum after {max_attempts} attempts")


def climb(
    board: Board,
    max_moves: int = MAX_MOVES,
    max_attempts: int = MAX_DESCENT_ATTEMPTS,
    on_move: Optional[Callable[[int, Move, str], None]] = None,
    verbose: bool = False,
) -> ClimbResult:
    """Descend until the board has no conflicts or ``max_moves`` run out.

    ``on_move`` gets the move number, the move and the board rendering
    from before the move. A stuck descent propagates StuckInLocalMinimum.
    """
    moves: List[Move] = []
    if verbose:
        print(f"Initial heuristic: {board.total_conflicts()}/{board.max_conflicts()}")
    for i in range(max_moves):
        if board.total_conflicts() == 0:
            break
        before_render = board.render() if on_move is not None else ""
        move = descend_once(board, max_attempts)
        moves.append(move)
        if on_move is not None:
            on_move(i, move, before_render)
    solved = board.total_conflicts() == 0
    if verbose:
        print("SOLVED!" if solved else f"Gave up after {max_moves} moves at {board.total_conflicts()}h")
    return ClimbResult(board=board, moves=moves, solved=solved)
