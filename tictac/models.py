from tictac import db
from tictac.services.matches.state_machine import MatchState, JoinUpdate, MoveUpdate, WAITING, winner_party
from datetime import datetime, timezone
import json


def utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


class Match(db.Model):
    __tablename__ = 'matches'
    id = db.Column(db.String(36), primary_key=True)
    party_a = db.Column(db.String(64), nullable=False, index=True)
    party_b = db.Column(db.String(64), nullable=True, index=True)
    stake = db.Column(db.BigInteger, nullable=False, default=0)
    turn = db.Column(db.String(1), nullable=False, default='X')
    cells = db.Column(db.Text, nullable=False)  # JSON-encoded list of None/'X'/'O'
    phase = db.Column(db.String(16), nullable=False, default=WAITING, index=True)  # waiting, active, completed
    outcome = db.Column(db.String(8), nullable=True)  # X, O, draw (only when completed)
    is_practice = db.Column(db.Boolean, nullable=False, default=False)
    difficulty = db.Column(db.String(16), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    version = db.Column(db.Integer, nullable=False)
    payouts = db.relationship('Payout', back_populates='match', order_by='Payout.id')

    # Optimistic concurrency: UPDATEs are guarded by the version column
    __mapper_args__ = {'version_id_col': version}

    @classmethod
    def from_state(cls, state: MatchState, difficulty=None):
        return cls(
            id=state.id,
            party_a=state.party_a,
            party_b=state.party_b,
            stake=state.stake,
            turn=state.turn,
            cells=json.dumps(list(state.cells)),
            phase=state.phase,
            outcome=state.outcome,
            is_practice=state.is_practice,
            difficulty=difficulty,
        )

    @property
    def board(self):
        return json.loads(self.cells) if self.cells else []

    def snapshot(self) -> MatchState:
        return MatchState(
            id=self.id,
            party_a=self.party_a,
            party_b=self.party_b,
            stake=int(self.stake or 0),
            cells=tuple(self.board),
            turn=self.turn,
            phase=self.phase,
            outcome=self.outcome,
            is_practice=bool(self.is_practice),
        )

    def apply(self, update):
        """Write a state machine update into this row."""
        if isinstance(update, JoinUpdate):
            self.party_b = update.party_b
            self.phase = update.phase
        elif isinstance(update, MoveUpdate):
            board = self.board
            board[update.position] = update.symbol
            self.cells = json.dumps(board)
            self.turn = update.turn
            self.phase = update.phase
            self.outcome = update.outcome
        else:
            raise TypeError(f'Unknown update {update!r}')
        self.updated_at = utcnow()

    def to_dict(self, include_payouts=False):
        data = {
            'id': self.id,
            'party_a': self.party_a,
            'party_b': self.party_b,
            'stake': int(self.stake or 0),
            'turn': self.turn,
            'cells': self.board,
            'board_size': len(self.board),
            'phase': self.phase,
            'outcome': self.outcome,
            'winner': winner_party(self.snapshot()),
            'is_practice': bool(self.is_practice),
            'difficulty': self.difficulty,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }
        if include_payouts:
            data['payouts'] = [p.to_dict() for p in self.payouts]
        return data

    def to_summary(self):
        return {
            'id': self.id,
            'party_a': self.party_a,
            'stake': int(self.stake or 0),
            'board_size': len(self.board),
            'created_at': _iso(self.created_at),
        }


class Payout(db.Model):
    """A transfer the game wallet owes once a staked match completes."""
    __tablename__ = 'payouts'
    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.String(36), db.ForeignKey('matches.id'), nullable=False, index=True)
    kind = db.Column(db.String(16), nullable=False)  # fee, winner, refund
    recipient = db.Column(db.String(64), nullable=True)  # None when the fee stays in the game wallet
    amount = db.Column(db.BigInteger, nullable=False)
    status = db.Column(db.String(16), nullable=False, default='pending')  # pending, retained
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    match = db.relationship('Match', back_populates='payouts')

    def to_dict(self):
        return {
            'id': self.id,
            'match_id': self.match_id,
            'kind': self.kind,
            'recipient': self.recipient,
            'amount': int(self.amount),
            'status': self.status,
            'created_at': _iso(self.created_at),
        }
