"""Conflict counting for queens on a square board.

Every count here reduces to the pairwise ``conflicts`` predicate. A pair
that threatens each other shows up twice in a conflict table, once from
each side, so totals are halved.
"""

from typing import List, Optional, Sequence


def conflicts(a, b) -> bool:
    """Two queens threaten each other on a row, a column or a diagonal.

    A queen never threatens itself. Pieces standing between the two do
    not block the threat.
    """
    if a == b:
        return False
    return a.row == b.row or a.col == b.col or abs(a.row - b.row) == abs(a.col - b.col)


def build_conflict_table(pieces: Sequence) -> List[list]:
    table = []
    for i, queen in enumerate(pieces):
        threats = [other for j, other in enumerate(pieces) if j != i and conflicts(queen, other)]
        table.append(threats)
    return table


def total_conflicts(table: Sequence[Sequence]) -> int:
    return sum(len(threats) for threats in table) // 2


def max_conflicts(count: int) -> int:
    """Number of edges of the complete graph over ``count`` pieces."""
    return count * max(0, count - 1) // 2


def most_conflicted_index(table: Sequence[Sequence]) -> Optional[int]:
    """Index of the piece with the most threats, None for an empty table.

    The indices are sorted by threat count (stable) and the last one is
    taken, so ties go to the highest index.
    """
    if not table:
        return None
    order = sorted(range(len(table)), key=lambda i: len(table[i]))
    return order[-1]
