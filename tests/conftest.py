import logging

import pytest

from sudoku import SOLVER_LOGGERS

from puzzles import PUZZLE, SEVENTEEN, SOLUTION, to_grid


@pytest.fixture(autouse=True)
def reset_solver_loggers():
    yield
    for name in SOLVER_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


@pytest.fixture
def puzzle():
    return to_grid(PUZZLE)


@pytest.fixture
def solution():
    return to_grid(SOLUTION)


@pytest.fixture
def seventeen():
    return to_grid(SEVENTEEN)
