import random


def select_survivors(boards, survivor_count):
    """Sort boards by conflict count and keep the best ones.

    Args:
        boards: List of boards, sorted in place (fewest conflicts first).
        survivor_count: How many boards survive.

    Returns:
        A list of the surviving boards.
    """

    boards.sort(key=lambda b: b.total_conflicts())
    return boards[:survivor_count]


def pick_parents(survivors, amount, rng=random):
    """Draw parents uniformly, with replacement.

    Args:
        survivors: A list of candidate parents.
        amount: The amount of parents to draw.
        rng: Source of randomness.

    Returns:
        A list of parents; the same board may appear more than once.
    """

    return [survivors[rng.randrange(len(survivors))] for _ in range(amount)]
