import logging

import numpy as np
import pytest

from possibilities import ContradictionError, Possibilities
from sudoku import (
    SOLVER_LOGGERS,
    SolverConfig,
    normalize_grid,
    parse_puzzle,
    prepare,
    search,
    solve,
    solve_grids,
    solve_with_config,
    sudoku_board_string,
)
from template import TEMPLATE_COUNT, Template

from puzzles import PUZZLE, SOLUTION, SEVENTEEN, is_valid_solution


def test_empty_grid_gives_one_solution():
    solutions = solve(np.zeros((9, 9), dtype=int), 1)
    assert len(solutions) == 1
    assert len(solutions[0]) == 81
    assert set(solutions[0]) == set("123456789")
    assert is_valid_solution(solutions[0])


def test_empty_grid_respects_the_cap():
    solutions = search(Possibilities().patterns, 3)
    assert len(solutions) == 3
    assert len(set(solutions)) == 3
    assert all(s.is_valid() for s in solutions)


def test_repeated_digit_in_row(puzzle):
    grid = np.zeros((9, 9), dtype=int)
    grid[0, 0] = 5
    grid[0, 3] = 5
    with pytest.raises(ContradictionError):
        prepare(grid)
    assert solve(grid, 5) == []
    assert solve_grids(grid, 5) == []


def test_seventeen_clue_puzzle(seventeen):
    solutions = solve(seventeen, 2)
    assert len(solutions) == 1
    assert is_valid_solution(solutions[0])
    for clue, cell in zip(SEVENTEEN, solutions[0]):
        assert clue == "0" or clue == cell

    engine = prepare(seventeen)
    assert min(Template.within(p).count() for p in engine.patterns) < TEMPLATE_COUNT // 20


def test_easy_puzzle(puzzle):
    assert solve(puzzle, 10) == [SOLUTION]
    grids = solve_grids(puzzle)
    assert len(grids) == 1
    assert grids[0].shape == (9, 9)
    assert "".join(str(v) for v in grids[0].flatten()) == SOLUTION


def test_accepts_flat_grid():
    flat = [int(ch) for ch in PUZZLE]
    assert solve(flat) == [SOLUTION]


def test_multiple_solutions_are_distinct_and_keep_clues(puzzle):
    grid = puzzle.copy()
    grid[0, :] = 0
    grid[:, 0] = 0
    solutions = solve(grid, 4)
    assert 1 <= len(solutions) <= 4
    assert len(set(solutions)) == len(solutions)
    for text in solutions:
        assert is_valid_solution(text)
        for index, clue in enumerate(grid.flatten()):
            assert clue == 0 or int(text[index]) == clue


def test_search_is_deterministic(seventeen):
    engine = prepare(seventeen)
    assert search(engine.patterns, 2) == search(engine.patterns, 2)


def test_zero_cap():
    assert solve(np.zeros((9, 9), dtype=int), 0) == []


def test_solve_with_config(puzzle):
    assert solve_with_config(puzzle, SolverConfig(max_solutions=3)) == [SOLUTION]
    assert SolverConfig().max_solutions == 1


def test_verbose_config_turns_on_debug_logging(puzzle, caplog):
    solve_with_config(puzzle, SolverConfig(verbose=True))
    for name in SOLVER_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG
    assert "Search found 1 solution(s)" in caplog.text


def test_quiet_config_leaves_logging_alone(puzzle):
    solve_with_config(puzzle, SolverConfig())
    assert logging.getLogger("sudoku").level == logging.NOTSET


def test_normalize_grid():
    assert normalize_grid([0] * 81).shape == (9, 9)
    with pytest.raises(ValueError):
        normalize_grid([0] * 80)
    with pytest.raises(ValueError):
        normalize_grid(np.zeros((3, 27), dtype=int))
    with pytest.raises(ValueError):
        normalize_grid([10] + [0] * 80)
    with pytest.raises(ValueError):
        normalize_grid([0.5] * 81)
    with pytest.raises(ValueError):
        solve([-1] + [0] * 80)


def test_parse_puzzle_reads_board_strings(puzzle):
    text = sudoku_board_string(puzzle)
    assert text.startswith("+-------+")
    assert "| 5 3 . | . 7 . | . . . |" in text
    assert (parse_puzzle(text) == puzzle).all()
    assert (parse_puzzle(PUZZLE.replace("0", ".")) == puzzle).all()


def test_parse_puzzle_rejects_bad_text():
    with pytest.raises(ValueError):
        parse_puzzle("12x" + "0" * 78)
    with pytest.raises(ValueError):
        parse_puzzle("0" * 80)
