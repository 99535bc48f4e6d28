"""Computer opponent for practice matches."""

import random
from typing import Optional, Sequence

from .board import empty_positions, find_winner, is_full, other, side_length, winning_lines

EASY = 'easy'
MEDIUM = 'medium'
HARD = 'hard'
DIFFICULTIES = (EASY, MEDIUM, HARD)

# Share of easy-mode moves that are picked at random
EASY_RANDOM_RATE = 0.7


def find_completing_move(cells: Sequence[Optional[str]], symbol: str) -> Optional[int]:
    """Empty cell that would complete a line of ``symbol``, if any."""
    for line in winning_lines(len(cells)):
        values = [cells[i] for i in line]
        if values.count(symbol) == len(line) - 1 and values.count(None) == 1:
            return line[values.index(None)]
    return None


def preferred_cells(size: int) -> list[int]:
    """Centre cells first, then corners."""
    n = side_length(size)
    mid = n // 2
    if n % 2:
        centre = [mid * n + mid]
    else:
        centre = [(mid - 1) * n + mid - 1, (mid - 1) * n + mid, mid * n + mid - 1, mid * n + mid]
    corners = [0, n - 1, n * (n - 1), n * n - 1]
    return centre + corners


def _minimax(cells: list, to_move: str, me: str, depth: int) -> int:
    winner = find_winner(cells)
    if winner == me:
        return 10 - depth
    if winner is not None:
        return depth - 10
    if is_full(cells):
        return 0
    scores = []
    for pos in empty_positions(cells):
        cells[pos] = to_move
        scores.append(_minimax(cells, other(to_move), me, depth + 1))
        cells[pos] = None
    return max(scores) if to_move == me else min(scores)


def _best_minimax_move(cells: Sequence[Optional[str]], symbol: str) -> int:
    board = list(cells)
    best_pos, best_score = -1, None
    for pos in empty_positions(board):
        board[pos] = symbol
        score = _minimax(board, other(symbol), symbol, 0)
        board[pos] = None
        if best_score is None or score > best_score:
            best_pos, best_score = pos, score
    return best_pos


def _tactical_move(cells, symbol, rng, prefer_positions):
    win = find_completing_move(cells, symbol)
    if win is not None:
        return win
    block = find_completing_move(cells, other(symbol))
    if block is not None:
        return block
    if prefer_positions:
        for pos in preferred_cells(len(cells)):
            if cells[pos] is None:
                return pos
    return rng.choice(empty_positions(cells))


def choose_move(
    cells: Sequence[Optional[str]],
    symbol: str,
    difficulty: str = MEDIUM,
    rng: Optional[random.Random] = None,
) -> int:
    """Pick the opponent's next cell.

    - easy: mostly random, otherwise take a win or block one
    - medium: take a win, block a loss, then centre and corners
    - hard: minimax on 3x3; 4x4 is too large to search so it plays medium
    """
    rng = rng or random.Random()
    open_cells = empty_positions(cells)
    if not open_cells:
        raise ValueError('No valid moves available')
    if difficulty not in DIFFICULTIES:
        raise ValueError(f'Unknown difficulty {difficulty!r}')

    if difficulty == EASY:
        if rng.random() < EASY_RANDOM_RATE:
            return rng.choice(open_cells)
        return _tactical_move(cells, symbol, rng, prefer_positions=False)
    if difficulty == HARD and len(cells) == 9:
        return _best_minimax_move(cells, symbol)
    return _tactical_move(cells, symbol, rng, prefer_positions=True)
