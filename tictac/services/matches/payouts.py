"""Turn a settlement into payout ledger rows.

Signing and broadcasting transfers is left to whatever consumes the
``pending`` rows; this module only records what is owed. Rows are added
to the session and committed by the caller together with the match.
"""

from flask import current_app

from tictac import db
from tictac.models import Payout
from .settlement import FeeSchedule, SettlementResult, compute_payouts, outcome_kind
from .board import X
from .state_machine import COMPLETED, DRAW


class LedgerPayoutDispatcher:
    def __init__(self, treasury_wallet=None):
        self.treasury_wallet = treasury_wallet

    def dispatch(self, match, result: SettlementResult) -> list:
        if match.phase != COMPLETED:
            raise ValueError(f'Match {match.id} is not completed')

        rows = []
        if result.fee > 0:
            rows.append(Payout(
                match_id=match.id,
                kind='fee',
                recipient=self.treasury_wallet,
                amount=result.fee,
                status='pending' if self.treasury_wallet else 'retained',
            ))
        if result.winner_payout:
            winner = match.party_a if match.outcome == X else match.party_b
            rows.append(Payout(match_id=match.id, kind='winner', recipient=winner, amount=result.winner_payout, status='pending'))
        if match.outcome == DRAW and result.refund_a and result.refund_b:
            rows.append(Payout(match_id=match.id, kind='refund', recipient=match.party_a, amount=result.refund_a, status='pending'))
            rows.append(Payout(match_id=match.id, kind='refund', recipient=match.party_b, amount=result.refund_b, status='pending'))

        for row in rows:
            db.session.add(row)
            current_app.logger.info(
                f"[payout] match={match.id} kind={row.kind} amount={row.amount} to={row.recipient or 'game-wallet'} status={row.status}"
            )
        if result.remainder:
            current_app.logger.warning(f"[payout-remainder] match={match.id} unallocated={result.remainder}")
        return rows


def settle_match(match, schedule: FeeSchedule, dispatcher) -> SettlementResult | None:
    """Compute and dispatch the settlement of a completed staked match."""
    stake = int(match.stake or 0)
    if stake == 0 or match.phase != COMPLETED:
        return None
    result = compute_payouts(stake, outcome_kind(match.outcome), schedule)
    current_app.logger.info(
        f"[settle] match={match.id} outcome={match.outcome} pot={result.pot} fee={result.fee}"
    )
    dispatcher.dispatch(match, result)
    return result
