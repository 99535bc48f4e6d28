import pytest

from tictac.services.matches import state_machine as sm
from tictac.services.matches.board import find_winning_line, winning_lines
from tictac.services.matches.errors import (
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

A = 'party-a'
B = 'party-b'


def _active(stake=0, board_size=9):
    state = sm.create(A, stake, board_size)
    return state.apply(sm.join(state, B))


def _play(state, positions):
    """Alternate A, B, A, ... over the given positions."""
    for i, pos in enumerate(positions):
        actor = A if i % 2 == 0 else B
        state = state.apply(sm.move(state, actor, pos))
    return state


def test_create_starts_waiting_with_empty_board():
    state = sm.create(A, 5)
    assert state.phase == sm.WAITING
    assert state.turn == 'X'
    assert state.cells == (None,) * 9
    assert state.party_b is None
    assert state.outcome is None
    assert state.id


def test_create_4x4_board():
    assert sm.create(A, 0, board_size=16).cells == (None,) * 16


def test_create_rejects_negative_stake_and_bad_board():
    with pytest.raises(InvalidStake):
        sm.create(A, -1)
    with pytest.raises(InvalidBoardSize):
        sm.create(A, 0, board_size=12)


def test_create_caps_stake_at_64_bit_pot():
    assert sm.create(A, sm.MAX_STAKE).stake == sm.MAX_STAKE
    assert sm.MAX_STAKE * 2 <= 2**63 - 1
    with pytest.raises(InvalidStake):
        sm.create(A, sm.MAX_STAKE + 1)
    with pytest.raises(InvalidStake):
        sm.create(A, 10**20)


def test_join_activates_match():
    state = sm.create(A, 0)
    update = sm.join(state, B)
    assert update == sm.JoinUpdate(party_b=B, phase=sm.ACTIVE)
    joined = state.apply(update)
    assert joined.party_b == B
    assert joined.phase == sm.ACTIVE


def test_second_join_is_already_full_and_leaves_match_unchanged():
    joined = _active()
    with pytest.raises(AlreadyFull):
        sm.join(joined, 'party-c')
    assert joined.party_b == B


def test_self_join_rejected():
    with pytest.raises(SelfJoinRejected):
        sm.join(sm.create(A, 0), A)


def test_completed_match_rejects_join_and_move():
    done = _play(_active(), [0, 3, 1, 4, 2])
    assert done.phase == sm.COMPLETED
    with pytest.raises(NotJoinable):
        sm.join(done, 'party-c')
    with pytest.raises(MatchFinished):
        sm.move(done, B, 5)


def test_move_requires_active_match():
    with pytest.raises(NotActive):
        sm.move(sm.create(A, 0), A, 0)


def test_move_enforces_turn_order():
    state = _active()
    with pytest.raises(NotYourTurn):
        sm.move(state, B, 0)
    state = state.apply(sm.move(state, A, 0))
    with pytest.raises(NotYourTurn):
        sm.move(state, A, 1)


def test_move_into_occupied_cell_is_rejected():
    state = _play(_active(), [4])
    with pytest.raises(CellOccupied):
        sm.move(state, B, 4)
    assert state.cells[4] == 'X'
    assert state.turn == 'O'


@pytest.mark.parametrize('position', [-1, 9, 100])
def test_move_out_of_range(position):
    with pytest.raises(PositionOutOfRange):
        sm.move(_active(), A, position)


def test_accepted_move_fills_one_cell_and_flips_turn():
    state = _active()
    after = state.apply(sm.move(state, A, 7))
    changed = [i for i in range(9) if state.cells[i] != after.cells[i]]
    assert changed == [7]
    assert after.turn == 'O'
    assert after.phase == sm.ACTIVE


def test_top_row_win_for_party_a():
    state = _play(_active(), [0, 3, 1, 4, 2])
    assert state.phase == sm.COMPLETED
    assert state.outcome == 'X'
    assert sm.winner_party(state) == A
    # turn is not flipped on the finishing move
    assert state.turn == 'X'


def test_column_win_for_party_b():
    state = _play(_active(), [0, 1, 3, 4, 8, 7])
    assert state.outcome == 'O'
    assert sm.winner_party(state) == B


def test_full_board_without_line_is_draw():
    # X O X / X O O / O X X
    state = _play(_active(), [0, 1, 2, 4, 3, 5, 7, 6, 8])
    assert state.phase == sm.COMPLETED
    assert state.outcome == sm.DRAW
    assert sm.winner_party(state) is None


def test_4x4_needs_four_in_a_row():
    state = _active(board_size=16)
    # X on 0,1,2 and O on 4,5,6: three in a row does not win on 4x4
    state = _play(state, [0, 4, 1, 5, 2, 6])
    assert state.phase == sm.ACTIVE
    state = state.apply(sm.move(state, A, 3))
    assert state.outcome == 'X'
    assert find_winning_line(state.cells) == (0, 1, 2, 3)


def test_winning_lines_counts():
    assert len(winning_lines(9)) == 8
    assert len(winning_lines(16)) == 10
    assert (0, 5, 10, 15) in winning_lines(16)
    assert (3, 6, 9, 12) in winning_lines(16)


def test_practice_match_starts_active_against_bot():
    state = sm.create_practice(A)
    assert state.phase == sm.ACTIVE
    assert state.party_b == sm.PRACTICE_OPPONENT
    assert state.stake == 0
    assert state.is_practice
    with pytest.raises(AlreadyFull):
        sm.join(state, B)
