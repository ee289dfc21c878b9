"""Pytest configuration and shared fixtures."""

import random

import matplotlib
matplotlib.use("Agg")

import pytest

from board import Board, Position


@pytest.fixture
def rng():
    """Seeded random source for reproducible tests."""
    return random.Random(42)


@pytest.fixture
def empty_board(rng):
    return Board(4, rng=rng)


@pytest.fixture
def row_pair_board(rng):
    """4x4 board with two queens sharing the first row."""
    return Board(4, [Position(0, 0), Position(0, 1)], rng=rng)


@pytest.fixture
def solved_board(rng):
    """A known 4-queens solution."""
    return Board(4, [Position(0, 1), Position(1, 3), Position(2, 0), Position(3, 2)], rng=rng)


class ScriptedRng:
    """Hands out a fixed sequence of values from randrange."""

    def __init__(self, values):
        self.values = iter(values)

    def randrange(self, stop):
        value = next(self.values)
        assert 0 <= value < stop
        return value


@pytest.fixture
def scripted_rng():
    """Factory for random sources that replay a fixed list of values."""
    return ScriptedRng
