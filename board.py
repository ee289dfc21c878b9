import random
from typing import List, NamedTuple, Optional

from constants import MAX_PLACEMENT_ATTEMPTS
from heuristic import (
    build_conflict_table,
    max_conflicts,
    most_conflicted_index,
    total_conflicts,
)


class NQueensError(Exception):
    """Base class for recoverable search failures."""


class AlreadyOccupied(NQueensError):
    def __init__(self, position: "Position"):
        super().__init__(f"The square {position} is already taken.")
        self.position = position


class CouldNotPlace(NQueensError):
    """A random placement budget ran out (is the board filled?)."""


class Position(NamedTuple):
    row: int
    col: int

    @classmethod
    def random(cls, n: int, rng=random) -> "Position":
        return cls(rng.randrange(n), rng.randrange(n))

    def __str__(self) -> str:
        return f"({self.row + 1}x{self.col + 1})"


class Board:
    """An ``size`` x ``size`` board holding distinct queens.

    The conflict table is rebuilt from scratch after every mutation:
    ``conflict_table[i]`` lists the positions threatening ``pieces[i]``.
    """

    def __init__(self, size: int, pieces: Optional[List[Position]] = None, rng=None):
        self.size = size
        self.rng = rng if rng is not None else random
        self.pieces: List[Position] = []
        self.conflict_table: List[List[Position]] = []
        self.max_possible_conflicts = 0
        for p in pieces or []:
            self.place(p)

    def calculate_conflicts(self):
        self.conflict_table = build_conflict_table(self.pieces)
        self.max_possible_conflicts = max_conflicts(len(self.pieces))

    def place(self, position: Position):
        if position in self.pieces:
            raise AlreadyOccupied(position)
        self.pieces.append(position)
        self.calculate_conflicts()

    def remove(self, position: Position):
        # Absent pieces are a caller bug; list.remove raises ValueError.
        self.pieces.remove(position)
        self.calculate_conflicts()

    def relocate(self, source: Position, destination: Position):
        """Move a queen; the moved queen goes to the end of ``pieces``.

        Relocating a queen onto its own square is a collision.
        """
        if destination in self.pieces:
            raise AlreadyOccupied(destination)
        self.pieces.remove(source)
        self.pieces.append(destination)
        self.calculate_conflicts()

    def index_of(self, position: Position) -> Optional[int]:
        try:
            return self.pieces.index(position)
        except ValueError:
            return None

    def total_conflicts(self) -> int:
        return total_conflicts(self.conflict_table)

    def max_conflicts(self) -> int:
        return self.max_possible_conflicts

    def fitness(self) -> int:
        """Higher is better (non-conflicting pairs)."""
        return self.max_possible_conflicts - self.total_conflicts()

    def most_conflicted_index(self) -> Optional[int]:
        return most_conflicted_index(self.conflict_table)

    def random_position(self) -> Position:
        return Position.random(self.size, self.rng)

    def fill_randomly(self, count: int, max_attempts: int = MAX_PLACEMENT_ATTEMPTS):
        """Place ``count`` more queens on random free squares.

        Every draw counts against ``max_attempts``, including draws that
        land on an occupied square.
        """
        placed = 0
        for _ in range(max_attempts):
            if placed == count:
                return
            try:
                self.place(self.random_position())
            except AlreadyOccupied:
                continue
            placed += 1
        if placed != count:
            raise CouldNotPlace(
                f"Placed {placed} of {count} queens in {max_attempts} attempts (is the board filled?)"
            )

    def fill_n(self, max_attempts: int = MAX_PLACEMENT_ATTEMPTS):
        self.fill_randomly(self.size, max_attempts)

    def clone(self) -> "Board":
        copy = Board(self.size, rng=self.rng)
        copy.pieces = list(self.pieces)
        copy.conflict_table = [list(threats) for threats in self.conflict_table]
        copy.max_possible_conflicts = self.max_possible_conflicts
        return copy

    def pieces_display(self) -> str:
        return "[" + ", ".join(str(p) for p in self.pieces) + "]"

    def render(self) -> str:
        """Grid with 1-based labels; each queen shows its conflict count."""
        n = self.size

        def div(filler: str, sep: str) -> str:
            return sep.join([filler * 3] * n)

        header = "    " + " ".join(f" {c % 10} " for c in range(1, n + 1)) + "    "
        lines = [header, f"   ╔{div('═', '╦')}╗   "]
        for r in range(n):
            cells = []
            for c in range(n):
                i = self.index_of(Position(r, c))
                cells.append("   " if i is None else f"{len(self.conflict_table[i]):^3}")
            label = (r + 1) % 10
            lines.append(f" {label} ║{'│'.join(cells)}║ {label} ")
            if r != n - 1:
                lines.append(f"   ╠{div('─', '┼')}╣   ")
        lines.append(f"   ╚{div('═', '╩')}╝   ")
        lines.append(header)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Board({self.size}, {self.pieces_display()})"
