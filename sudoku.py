# sudoku.py

import logging
from dataclasses import dataclass

import numpy as np

from pattern import Pattern
from possibilities import ContradictionError, Possibilities
from template import Solution, Template, catalog_bits, catalog_words, split_words, within_indices

log = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    max_solutions: int = 1
    verbose: bool = False


def normalize_grid(grid):
    """Accept a 9x9 grid or a flat row-major list of 81 values (0 = unknown)."""
    board = np.asarray(grid)
    if board.size != 81 or board.ndim not in (1, 2) or (board.ndim == 2 and board.shape != (9, 9)):
        raise ValueError(f"expected a 9x9 grid or 81 values, got shape {board.shape}")
    if not np.issubdtype(board.dtype, np.integer):
        raise ValueError(f"grid values must be integers, got {board.dtype}")
    board = board.reshape(9, 9).astype(int)
    if board.min() < 0 or board.max() > 9:
        raise ValueError("grid values must be between 0 and 9")
    return board


def parse_puzzle(text: str):
    """Read 81 cells from text: 1-9 are clues, 0 or . unknown.

    Whitespace and the frame characters of `sudoku_board_string` are skipped.
    """
    values = []
    for ch in text:
        if ch.isspace() or ch in "|+-":
            continue
        if ch == ".":
            values.append(0)
        elif ch.isdigit():
            values.append(int(ch))
        else:
            raise ValueError(f"unexpected character {ch!r} in puzzle")
    if len(values) != 81:
        raise ValueError(f"a puzzle has 81 cells, found {len(values)}")
    return np.array(values, dtype=int).reshape(9, 9)


def prepare(grid) -> Possibilities:
    """Place every clue of the grid, raising ContradictionError if they clash."""
    board = normalize_grid(grid)
    puzzle = Possibilities()
    for r in range(9):
        for c in range(9):
            if board[r, c] != 0:
                puzzle.set(r, c, int(board[r, c]))
    return puzzle


def search(patterns, max_solutions):
    """Combine one template per digit into up to `max_solutions` solutions."""
    if max_solutions <= 0:
        return []

    bits = catalog_bits()
    low, high = catalog_words()

    # Most restricted digits first. With few clues this prunes far earlier;
    # the cost is that solution order shifts as clues are added.
    templates = []
    for digit in range(9):
        possible = within_indices(patterns[digit])
        templates.append((digit, possible, low[possible], high[possible]))
    templates.sort(key=lambda item: len(item[1]))
    log.debug("Search order: %s", [(item[0] + 1, len(item[1])) for item in templates])

    solutions = []
    scratch = [Template(0)] * 9

    def _search_recursive(remaining, filled):
        if not remaining:
            solutions.append(Solution(scratch))
            return
        # Every list in `remaining` already excludes templates touching `filled`.
        (digit, possible, _, _), rest = remaining[0], remaining[1:]
        for template in possible.tolist():
            now_filled = filled | bits[template]
            f_low, f_high = split_words(now_filled)
            narrowed = []
            for other, o_possible, o_low, o_high in rest:
                fits = ((o_low & f_low) | (o_high & f_high)) == 0
                if not fits.any():
                    break  # that digit has nowhere left to go
                narrowed.append((other, o_possible[fits], o_low[fits], o_high[fits]))
            else:
                scratch[digit] = Template(template)
                _search_recursive(narrowed, now_filled)
                if len(solutions) >= max_solutions:
                    return

    if all(len(item[1]) for item in templates):
        _search_recursive(templates, Pattern.EMPTY.bits)
    log.debug("Search found %d solution(s)", len(solutions))
    return solutions


def solve_grids(grid, max_solutions=1):
    try:
        puzzle = prepare(grid)
    except ContradictionError:
        return []
    return [s.to_grid() for s in search(puzzle.patterns, max_solutions)]


def solve(grid, max_solutions=1):
    """Solve a puzzle, stopping after `max_solutions` solutions.

    Two phases: logic first (see `Possibilities`), then exhaustive search by
    digit over the template catalog. Each solution is an 81-character string
    of digits. Impossible puzzles give an empty list.
    """
    try:
        puzzle = prepare(grid)
    except ContradictionError:
        return []
    return [str(s) for s in search(puzzle.patterns, max_solutions)]


SOLVER_LOGGERS = ("sudoku", "possibilities", "template")


def apply_logging(config: SolverConfig):
    """Turn on debug records from the solver modules when `config.verbose`."""
    if config.verbose:
        for name in SOLVER_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)


def solve_with_config(grid, config: SolverConfig):
    apply_logging(config)
    return solve(grid, config.max_solutions)


def sudoku_board_string(board):
    horizontal_line = "+-------+-------+-------+"
    result = horizontal_line + "\n"
    for i, row in enumerate(normalize_grid(board)):
        line = "|"
        for j, cell in enumerate(row):
            display_value = "." if cell == 0 else str(int(cell))
            line += f" {display_value}"
            if (j + 1) % 3 == 0:
                line += " |"
        result += line + "\n"
        if (i + 1) % 3 == 0:
            result += horizontal_line + "\n"
    return result.strip()
