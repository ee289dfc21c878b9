import random

from board import AlreadyOccupied, Board, Position


def segment_crossover(parents, n):
    """Combines parents by concatenating one contiguous gene segment from each.

    Parent i gives the genes at [i * portion, i * portion + portion) of its
    own pieces, with portion = n // len(parents). The last parent also gives
    the n % len(parents) remaining genes.

    Args:
        parents: Parent boards, each holding n pieces.
        n: Board size.

    Returns:
        A list of exactly n genes.
    """

    portion = n // len(parents)
    remainder = n % len(parents)
    genes = []

    for i, parent in enumerate(parents):
        start = i * portion
        count = portion + (remainder if i == len(parents) - 1 else 0)
        genes.extend(parent.pieces[start:start + count])

    return genes


def mutate(genes, n, chance, rng=random):
    """Mutate each gene independently.

    A roll below chance // 2 replaces the row, a roll below chance replaces
    the column, anything else keeps the gene.

    Args:
        genes: The genes to be mutated.
        n: Board size.
        chance: Mutation chance in percent (0-100).
        rng: Source of randomness.

    Returns:
        The mutated genes, as a new list.
    """

    mutated = []

    for gene in genes:
        roll = rng.randrange(100)
        if roll < chance // 2:
            gene = Position(rng.randrange(n), gene.col)
        elif roll < chance:
            gene = Position(gene.row, rng.randrange(n))
        mutated.append(gene)

    return mutated


def build_child(genes, n, rng=None):
    """Place the genes on a fresh board.

    Returns:
        The child board, or None when two genes share a square.
    """

    child = Board(n, rng=rng)
    for gene in genes:
        try:
            child.place(gene)
        except AlreadyOccupied:
            return None
    return child
