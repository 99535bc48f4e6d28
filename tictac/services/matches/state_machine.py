"""Lifecycle rules for a single match.

A match moves ``waiting -> active -> completed`` and never backwards.
Transitions are pure: they read a ``MatchState`` snapshot and return an
explicit update (``JoinUpdate`` / ``MoveUpdate``) or raise a ``MatchError``.
Nothing is written until the caller applies the update, so a rejected call
leaves the match untouched and any transition can be retried against a
freshly loaded snapshot.

Party A plays ``X`` and always moves first; party B plays ``O``.
"""

import uuid
from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from .board import BOARD_SIZES, X, O, find_winner, is_full, other
from .errors import (
    AlreadyFull,
    CellOccupied,
    InvalidBoardSize,
    InvalidStake,
    MatchFinished,
    NotActive,
    NotJoinable,
    NotYourTurn,
    PositionOutOfRange,
    SelfJoinRejected,
)

WAITING = 'waiting'
ACTIVE = 'active'
COMPLETED = 'completed'

DRAW = 'draw'

PRACTICE_OPPONENT = 'practice-bot'

# Largest stake whose pot (stake * 2) still fits a signed 64-bit column
MAX_STAKE = (2**63 - 1) // 2


@dataclass(frozen=True)
class MatchState:
    id: str
    party_a: str
    stake: int
    cells: Tuple[Optional[str], ...]
    turn: str = X
    phase: str = WAITING
    party_b: Optional[str] = None
    outcome: Optional[str] = None
    is_practice: bool = False

    @property
    def board_size(self) -> int:
        return len(self.cells)

    def party_for(self, symbol: str) -> Optional[str]:
        return self.party_a if symbol == X else self.party_b

    def apply(self, update: 'Update') -> 'MatchState':
        if isinstance(update, JoinUpdate):
            return replace(self, party_b=update.party_b, phase=update.phase)
        if isinstance(update, MoveUpdate):
            cells = list(self.cells)
            cells[update.position] = update.symbol
            return replace(
                self,
                cells=tuple(cells),
                turn=update.turn,
                phase=update.phase,
                outcome=update.outcome,
            )
        raise TypeError(f'Unknown update {update!r}')


@dataclass(frozen=True)
class JoinUpdate:
    party_b: str
    phase: str = ACTIVE


@dataclass(frozen=True)
class MoveUpdate:
    position: int
    symbol: str
    turn: str
    phase: str
    outcome: Optional[str] = None

    @property
    def completes(self) -> bool:
        return self.phase == COMPLETED


Update = Union[JoinUpdate, MoveUpdate]


def _empty_cells(board_size: int) -> Tuple[None, ...]:
    if board_size not in BOARD_SIZES:
        raise InvalidBoardSize()
    return (None,) * board_size


def create(party_a: str, stake: int, board_size: int = 9, match_id: Optional[str] = None) -> MatchState:
    """Open a new match waiting for a second party."""
    if isinstance(stake, bool) or not isinstance(stake, int) or not 0 <= stake <= MAX_STAKE:
        raise InvalidStake()
    return MatchState(
        id=match_id or str(uuid.uuid4()),
        party_a=party_a,
        stake=stake,
        cells=_empty_cells(board_size),
    )


def create_practice(party_a: str, board_size: int = 9, match_id: Optional[str] = None) -> MatchState:
    """Free match against the computer opponent; starts active."""
    return MatchState(
        id=match_id or str(uuid.uuid4()),
        party_a=party_a,
        stake=0,
        cells=_empty_cells(board_size),
        phase=ACTIVE,
        party_b=PRACTICE_OPPONENT,
        is_practice=True,
    )


def join(state: MatchState, party_b: str) -> JoinUpdate:
    if state.phase == COMPLETED:
        raise NotJoinable()
    if state.party_b is not None:
        raise AlreadyFull()
    if state.phase != WAITING:
        raise NotJoinable()
    if party_b == state.party_a:
        raise SelfJoinRejected()
    return JoinUpdate(party_b=party_b)


def move(state: MatchState, actor: str, position: int) -> MoveUpdate:
    if state.phase == COMPLETED:
        raise MatchFinished()
    if state.phase != ACTIVE or state.party_b is None:
        raise NotActive()
    if isinstance(position, bool) or not isinstance(position, int) or not 0 <= position < state.board_size:
        raise PositionOutOfRange()
    if actor != state.party_for(state.turn):
        raise NotYourTurn()
    if state.cells[position] is not None:
        raise CellOccupied()

    cells = list(state.cells)
    cells[position] = state.turn

    # only the mover's symbol can have completed a line
    winner = find_winner(cells)
    if winner:
        return MoveUpdate(position, state.turn, state.turn, COMPLETED, winner)
    if is_full(cells):
        return MoveUpdate(position, state.turn, state.turn, COMPLETED, DRAW)
    return MoveUpdate(position, state.turn, other(state.turn), ACTIVE)


def winner_party(state: MatchState) -> Optional[str]:
    if state.outcome in (X, O):
        return state.party_for(state.outcome)
    return None
