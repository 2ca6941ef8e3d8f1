# pattern.py

import operator

CELLS = 81
_MASK = (1 << CELLS) - 1


def _index(row, col) -> int:
    # Plain ints only: numpy integers would overflow past bit 63.
    row, col = operator.index(row), operator.index(col)
    if not (0 <= row < 9 and 0 <= col < 9):
        raise IndexError(f"cell ({row}, {col}) is outside the 9x9 grid")
    return 9 * row + col


class Pattern:
    """Bit field of Sudoku cells, row-major.

    Bit 0 is the top-left cell and bit 80 the bottom-right one. Nothing above
    bit 80 is ever set, so complement stays inside the 81-cell universe.
    Patterns are immutable values; every operation returns a new one.
    """

    __slots__ = ("bits",)

    def __init__(self, bits: int = 0):
        object.__setattr__(self, "bits", operator.index(bits) & _MASK)

    def __setattr__(self, name, value):
        raise AttributeError("Pattern is immutable")

    def __delattr__(self, name):
        raise AttributeError("Pattern is immutable")

    @classmethod
    def from_cells(cls, cells):
        bits = 0
        for row, col in cells:
            bits |= 1 << _index(row, col)
        return cls(bits)

    def has(self, row: int, col: int) -> bool:
        return (self.bits >> _index(row, col)) & 1 == 1

    def remove(self, row: int, col: int):
        """Pattern without the cell, and whether the cell was set before."""
        bit = 1 << _index(row, col)
        return Pattern(self.bits & ~bit), self.bits & bit != 0

    def with_cell(self, row: int, col: int) -> "Pattern":
        return Pattern(self.bits | (1 << _index(row, col)))

    def is_subset(self, other: "Pattern") -> bool:
        return self.bits & other.bits == self.bits

    def intersects(self, other: "Pattern") -> bool:
        return self.bits & other.bits != 0

    def cells(self):
        bits = self.bits
        while bits:
            low = bits & -bits
            idx = low.bit_length() - 1
            yield divmod(idx, 9)
            bits ^= low

    def __and__(self, other):
        return Pattern(self.bits & other.bits)

    def __or__(self, other):
        return Pattern(self.bits | other.bits)

    def __invert__(self):
        return Pattern(~self.bits)

    def __len__(self):
        return bin(self.bits).count("1")

    def __bool__(self):
        return self.bits != 0

    def __eq__(self, other):
        if not isinstance(other, Pattern):
            return NotImplemented
        return self.bits == other.bits

    def __hash__(self):
        return hash(self.bits)

    def __repr__(self):
        return f"Pattern({self.bits:#x})"

    def __str__(self):
        lines = []
        for row in range(9):
            if row in (3, 6):
                lines.append("---+---+---")
            line = ""
            for col in range(9):
                if col in (3, 6):
                    line += "|"
                line += "X" if self.has(row, col) else " "
            lines.append(line)
        return "\n".join(lines)


Pattern.EMPTY = Pattern(0)
Pattern.FULL = Pattern(_MASK)
