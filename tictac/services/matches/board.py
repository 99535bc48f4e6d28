"""Board primitives shared by the state machine and the practice opponent.

A board is a flat sequence of 9 (3x3) or 16 (4x4) cells, each ``None``,
``'X'`` or ``'O'``. A line wins when every cell on it holds the same symbol.
"""

from functools import lru_cache
from typing import Optional, Sequence, Tuple

X = 'X'
O = 'O'
SYMBOLS = (X, O)

# cells -> side length
BOARD_SIZES = {9: 3, 16: 4}


def other(symbol: str) -> str:
    return O if symbol == X else X


def side_length(size: int) -> int:
    return BOARD_SIZES[size]


@lru_cache(maxsize=None)
def winning_lines(size: int) -> Tuple[Tuple[int, ...], ...]:
    """All rows, columns and both diagonals for a board of ``size`` cells."""
    n = side_length(size)
    rows = [tuple(r * n + c for c in range(n)) for r in range(n)]
    cols = [tuple(r * n + c for r in range(n)) for c in range(n)]
    diagonals = [
        tuple(i * n + i for i in range(n)),
        tuple(i * n + (n - 1 - i) for i in range(n)),
    ]
    return tuple(rows + cols + diagonals)


def find_winning_line(cells: Sequence[Optional[str]]) -> Optional[Tuple[int, ...]]:
    for line in winning_lines(len(cells)):
        first = cells[line[0]]
        if first is not None and all(cells[i] == first for i in line):
            return line
    return None


def find_winner(cells: Sequence[Optional[str]]) -> Optional[str]:
    line = find_winning_line(cells)
    return cells[line[0]] if line else None


def is_full(cells: Sequence[Optional[str]]) -> bool:
    return all(cell is not None for cell in cells)


def empty_positions(cells: Sequence[Optional[str]]) -> list[int]:
    return [i for i, cell in enumerate(cells) if cell is None]
