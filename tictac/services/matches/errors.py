"""Typed failures raised by match transitions and the match repository.

Each error carries the HTTP status the transport layer should answer with.
"""


class MatchError(Exception):
    status_code = 400
    message = 'Match error'

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class InvalidStake(MatchError):
    message = 'Stake must be a non-negative integer that fits a 64-bit pot'


class InvalidBoardSize(MatchError):
    message = 'Board must have 9 or 16 cells'


class AlreadyFull(MatchError):
    message = 'Match is already full'


class NotJoinable(MatchError):
    message = 'Match is not available to join'


class SelfJoinRejected(MatchError):
    message = 'Cannot join your own match'


class NotActive(MatchError):
    message = 'Match is not active'


class NotYourTurn(MatchError):
    message = 'Not your turn'


class CellOccupied(MatchError):
    message = 'Position already taken'


class PositionOutOfRange(MatchError):
    message = 'Position is outside the board'


class MatchFinished(MatchError):
    message = 'Match is already finished'


class MatchNotFound(MatchError):
    status_code = 404
    message = 'Match not found'


class ConcurrentUpdate(MatchError):
    status_code = 409
    message = 'Match was updated by another request, reload and retry'
