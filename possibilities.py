# possibilities.py

import logging
from collections import deque

import numpy as np

from pattern import Pattern
from template import Solution, Template

log = logging.getLogger(__name__)


class ContradictionError(Exception):
    """Some row, column, box or cell has no way left to hold a digit."""


def box_index(row, col):
    return (row // 3) * 3 + col // 3


def box_cells(row, col):
    """All cells of the box containing (row, col), the cell itself included."""
    top, left = (row // 3) * 3, (col // 3) * 3
    return [(top + r, left + c) for r in range(3) for c in range(3)]


class Possibilities:
    """Candidate digits for every cell, kept consistent by simple logic.

    The grid is viewed as 9 rows x 9 columns x 9 digits of booleans. Sudoku
    gives four kinds of "exactly one" constraints over slices of it: each cell
    holds one digit, and each row, column and box holds each digit once.
    Every slice keeps a count of its remaining candidates. When a count drops
    to one the survivor is forced and more eliminations are queued; when it
    drops to zero the puzzle is impossible.

    This fully resolves naked and hidden singles, which is enough for easy
    puzzles and trims the search space for hard ones.
    """

    def __init__(self):
        self.patterns = [Pattern.FULL] * 9
        self.cell_counts = np.full((9, 9), 9, dtype=int)  # [row, col]
        self.row_counts = np.full((9, 9), 9, dtype=int)   # [row, digit]
        self.col_counts = np.full((9, 9), 9, dtype=int)   # [col, digit]
        self.box_counts = np.full((9, 9), 9, dtype=int)   # [box, digit]
        self.work_queue = deque()
        self.failed = False

    def set(self, row: int, col: int, digit: int) -> None:
        """Place a clue: remove every other digit from the cell, then propagate."""
        if not (0 <= row < 9 and 0 <= col < 9):
            raise ValueError(f"cell ({row}, {col}) is outside the 9x9 grid")
        if not 1 <= digit <= 9:
            raise ValueError(f"digit must be in 1..9, got {digit}")
        if self.failed:
            raise ContradictionError("puzzle already found impossible")

        self._enqueue_others(row, col, digit - 1)
        try:
            self._work()
        except ContradictionError:
            self.failed = True
            self.work_queue.clear()
            log.debug("Contradiction while placing %d at (%d, %d)", digit, row, col)
            raise

    def _work(self):
        while self.work_queue:
            row, col, digit = self.work_queue.popleft()
            self._eliminate(row, col, digit)

    def _enqueue_others(self, row, col, digit):
        for other in range(9):
            if other != digit:
                self.work_queue.append((row, col, other))

    def _enqueue_adjacent(self, row, col, digit):
        for other_col in range(9):
            if other_col != col:
                self.work_queue.append((row, other_col, digit))
        for other_row in range(9):
            if other_row != row:
                self.work_queue.append((other_row, col, digit))
        for other_row, other_col in box_cells(row, col):
            if other_row != row or other_col != col:
                self.work_queue.append((other_row, other_col, digit))

    def _eliminate(self, row, col, digit):
        remaining_cells, was_set = self.patterns[digit].remove(row, col)
        if not was_set:
            return  # already gone
        self.patterns[digit] = remaining_cells

        self.cell_counts[row, col] -= 1
        remaining = self.cell_counts[row, col]
        if remaining == 0:
            raise ContradictionError()
        if remaining == 1:
            self._enqueue_adjacent(row, col, self._find_in_cell(row, col))

        self.row_counts[row, digit] -= 1
        remaining = self.row_counts[row, digit]
        if remaining == 0:
            raise ContradictionError()
        if remaining == 1:
            self._enqueue_others(row, self._find_in_row(row, digit), digit)

        self.col_counts[col, digit] -= 1
        remaining = self.col_counts[col, digit]
        if remaining == 0:
            raise ContradictionError()
        if remaining == 1:
            self._enqueue_others(self._find_in_col(col, digit), col, digit)

        box = box_index(row, col)
        self.box_counts[box, digit] -= 1
        remaining = self.box_counts[box, digit]
        if remaining == 0:
            raise ContradictionError()
        if remaining == 1:
            found_row, found_col = self._find_in_box(row, col, digit)
            self._enqueue_others(found_row, found_col, digit)

    def _find_in_cell(self, row, col):
        for digit in range(9):
            if self.patterns[digit].has(row, col):
                return digit
        raise RuntimeError(f"no digit left in cell ({row}, {col})")

    def _find_in_row(self, row, digit):
        for col in range(9):
            if self.patterns[digit].has(row, col):
                return col
        raise RuntimeError(f"no {digit + 1} left in row {row}")

    def _find_in_col(self, col, digit):
        for row in range(9):
            if self.patterns[digit].has(row, col):
                return row
        raise RuntimeError(f"no {digit + 1} left in column {col}")

    def _find_in_box(self, row, col, digit):
        for cell in box_cells(row, col):
            if self.patterns[digit].has(*cell):
                return cell
        raise RuntimeError(f"no {digit + 1} left in box {box_index(row, col)}")

    def candidates(self, row: int, col: int):
        return [digit + 1 for digit in range(9) if self.patterns[digit].has(row, col)]

    def is_solved(self) -> bool:
        return bool((self.cell_counts == 1).all())

    def unique(self):
        """If the remaining templates pin down a single solution, return it."""
        templates = []
        for digit in range(9):
            found = iter(Template.within(self.patterns[digit]))
            first = next(found, None)
            if first is None:
                return None
            if next(found, None) is not None:
                return None  # not unique
            templates.append(first)

        solution = Solution(templates)
        return solution if solution.is_valid() else None

    def copy(self) -> "Possibilities":
        other = Possibilities()
        other.patterns = list(self.patterns)
        other.cell_counts = self.cell_counts.copy()
        other.row_counts = self.row_counts.copy()
        other.col_counts = self.col_counts.copy()
        other.box_counts = self.box_counts.copy()
        other.failed = self.failed
        return other

    def __str__(self):
        # One 9-character block per cell; a space where a digit is ruled out.
        rule = "+".join(["-" * 29] * 3)
        lines = []
        for row in range(9):
            if row in (3, 6):
                lines.append(rule)
            blocks = []
            for col in range(9):
                block = "".join(
                    str(digit + 1) if self.patterns[digit].has(row, col) else " "
                    for digit in range(9)
                )
                blocks.append(block)
            bands = [" ".join(blocks[i:i + 3]) for i in (0, 3, 6)]
            lines.append("|".join(bands))
        return "\n".join(lines)
