"""Fee and payout arithmetic for a completed match.

All amounts are integers in the smallest currency unit and every division
floors. On a draw the pot left after the fee is split evenly; an odd unit
is neither refunded nor collected and shows up as ``remainder``.
"""

from dataclasses import dataclass
from typing import Mapping, Optional

WINNER_DECIDED = 'winner_decided'
DRAW = 'draw'


@dataclass(frozen=True)
class FeeSchedule:
    win_fee_percent: int = 3
    draw_fee_percent: int = 1
    dust_threshold: int = 10_000_000

    def __post_init__(self):
        for name in ('win_fee_percent', 'draw_fee_percent'):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f'{name} must be between 0 and 100, got {value}')
        if self.dust_threshold < 0:
            raise ValueError(f'dust_threshold must not be negative, got {self.dust_threshold}')

    @classmethod
    def from_config(cls, config: Mapping) -> 'FeeSchedule':
        return cls(
            win_fee_percent=int(config.get('WIN_FEE_PERCENT', cls.win_fee_percent)),
            draw_fee_percent=int(config.get('DRAW_FEE_PERCENT', cls.draw_fee_percent)),
            dust_threshold=int(config.get('FEE_DUST_THRESHOLD', cls.dust_threshold)),
        )

    def to_dict(self):
        return {
            'win_fee_percent': self.win_fee_percent,
            'draw_fee_percent': self.draw_fee_percent,
            'dust_threshold': self.dust_threshold,
        }


@dataclass(frozen=True)
class SettlementResult:
    stake: int
    fee: int = 0
    winner_payout: Optional[int] = None
    refund_a: Optional[int] = None
    refund_b: Optional[int] = None

    @property
    def pot(self) -> int:
        return self.stake * 2

    @property
    def distributed(self) -> int:
        return self.fee + sum(a for a in (self.winner_payout, self.refund_a, self.refund_b) if a)

    @property
    def remainder(self) -> int:
        if self.stake == 0:
            return 0
        return self.pot - self.distributed

    def to_dict(self):
        return {
            'stake': self.stake,
            'pot': self.pot,
            'fee': self.fee,
            'winner_payout': self.winner_payout,
            'refund_a': self.refund_a,
            'refund_b': self.refund_b,
            'remainder': self.remainder,
        }


def outcome_kind(outcome: str) -> str:
    """Map a stored outcome (``X``, ``O``, ``draw``) to a settlement kind."""
    return DRAW if outcome == 'draw' else WINNER_DECIDED


def compute_fee(stake: int, kind: str, schedule: FeeSchedule) -> int:
    if stake < schedule.dust_threshold:
        return 0
    pot = stake * 2
    percent = schedule.win_fee_percent if kind == WINNER_DECIDED else schedule.draw_fee_percent
    return pot * percent // 100


def compute_payouts(stake: int, kind: str, schedule: FeeSchedule) -> SettlementResult:
    if stake == 0:
        return SettlementResult(stake=0)
    pot = stake * 2
    fee = compute_fee(stake, kind, schedule)
    if kind == WINNER_DECIDED:
        return SettlementResult(stake=stake, fee=fee, winner_payout=pot - fee)
    refund = (pot - fee) // 2
    return SettlementResult(stake=stake, fee=fee, refund_a=refund, refund_b=refund)
