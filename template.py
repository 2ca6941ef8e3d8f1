# template.py

import logging
import threading

import numpy as np

from pattern import Pattern

log = logging.getLogger(__name__)

TEMPLATE_COUNT = 46656
_LOW_MASK = (1 << 64) - 1

_catalog = None
_catalog_bits = None
_catalog_words = None
_catalog_lock = threading.Lock()


def _fill(bits, cols, boxes, row, into):
    # Row by row, pick a free column inside a free box.
    if row == 9:
        into.append(bits)
        return
    for col in range(9):
        box_idx = (row // 3) * 3 + col // 3
        if cols & (1 << col) == 0 and boxes & (1 << box_idx) == 0:
            _fill(
                bits | (1 << (9 * row + col)),
                cols | (1 << col),
                boxes | (1 << box_idx),
                row + 1,
                into,
            )


def split_words(bits):
    """Low 64 and high 17 bits of a pattern, as numpy words."""
    return np.uint64(bits & _LOW_MASK), np.uint64(bits >> 64)


def _build_catalog():
    global _catalog, _catalog_bits, _catalog_words
    with _catalog_lock:
        if _catalog is None:
            found = []
            _fill(0, 0, 0, 0, found)
            if len(found) != TEMPLATE_COUNT:
                raise RuntimeError(f"expected {TEMPLATE_COUNT} templates, built {len(found)}")
            low = np.array([bits & _LOW_MASK for bits in found], dtype=np.uint64)
            high = np.array([bits >> 64 for bits in found], dtype=np.uint64)
            low.flags.writeable = False
            high.flags.writeable = False
            _catalog_words = (low, high)
            _catalog_bits = tuple(found)
            # Published last: readers only check this one.
            _catalog = tuple(Pattern(bits) for bits in found)
            log.debug("Built template catalog with %d layouts", len(_catalog))
    return _catalog


def catalog_bits():
    """Raw integer form of the catalog, indexed like `Template.all()`."""
    if _catalog is None:
        _build_catalog()
    return _catalog_bits


def catalog_words():
    """The catalog as two read-only uint64 arrays: low and high words."""
    if _catalog is None:
        _build_catalog()
    return _catalog_words


def within_indices(possible: Pattern):
    """Vectorised `Template.within`: catalog indices as an int64 array."""
    low, high = catalog_words()
    p_low, p_high = split_words(possible.bits)
    fits = ((low & ~p_low) | (high & ~p_high)) == 0
    return np.flatnonzero(fits)


class Within:
    """Templates whose layout fits inside a pattern of possible cells.

    Lazy and restartable: every iteration scans the catalog afresh.
    """

    def __init__(self, possible: Pattern):
        self.possible = possible

    def __iter__(self):
        possible = self.possible.bits
        for i, bits in enumerate(catalog_bits()):
            if bits & possible == bits:
                yield Template(i)

    def count(self) -> int:
        return sum(1 for _ in self)


class Template(int):
    """A legal layout for a single digit, stored as its index in the catalog.

    There are only 46656 layouts with one cell per row, column and box. They
    are computed once and shared by every search.
    """

    __slots__ = ()

    @staticmethod
    def all():
        """Every legal single-digit layout, built on first use."""
        if _catalog is None:
            return _build_catalog()
        return _catalog

    @staticmethod
    def within(possible: Pattern) -> Within:
        return Within(possible)

    def as_pattern(self) -> Pattern:
        return Template.all()[self]

    def __repr__(self):
        return f"Template({int(self)})"


class Solution:
    """Full solution to a puzzle: one template per digit, digit 1 first."""

    __slots__ = ("templates",)

    def __init__(self, templates):
        templates = tuple(Template(t) for t in templates)
        if len(templates) != 9:
            raise ValueError(f"a solution needs 9 templates, got {len(templates)}")
        self.templates = templates

    def is_valid(self) -> bool:
        bits = catalog_bits()
        filled = 0
        for template in self.templates:
            if bits[template] & filled:
                return False
            filled |= bits[template]
        return filled == Pattern.FULL.bits

    def cell(self, row: int, col: int) -> int:
        for digit, template in enumerate(self.templates):
            if template.as_pattern().has(row, col):
                return digit + 1
        raise ValueError(f"no digit placed at ({row}, {col})")

    def to_grid(self):
        if not self.is_valid():
            raise ValueError("templates overlap or leave cells empty")
        grid = np.zeros((9, 9), dtype=int)
        for digit, template in enumerate(self.templates):
            for row, col in template.as_pattern().cells():
                grid[row, col] = digit + 1
        return grid

    def __eq__(self, other):
        if not isinstance(other, Solution):
            return NotImplemented
        return self.templates == other.templates

    def __hash__(self):
        return hash(self.templates)

    def __repr__(self):
        return f"Solution({list(map(int, self.templates))})"

    def __str__(self):
        return "".join(str(v) for v in self.to_grid().flatten())
