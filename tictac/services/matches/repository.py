from sqlalchemy.orm.exc import StaleDataError

from tictac import db
from tictac.models import Match
from .errors import ConcurrentUpdate, MatchNotFound
from .settlement import FeeSchedule, compute_payouts, outcome_kind
from .board import X, O
from .state_machine import COMPLETED, DRAW, WAITING


def load_match(match_id: str) -> Match:
    match = Match.query.filter_by(id=match_id).first()
    if not match:
        raise MatchNotFound()
    return match


def save_match(match: Match) -> Match:
    """Commit the row; a stale version means another writer got there first."""
    db.session.add(match)
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise ConcurrentUpdate()
    return match


def open_matches():
    return (
        Match.query.filter_by(phase=WAITING, is_practice=False)
        .order_by(Match.created_at.desc())
        .all()
    )


def player_matches(wallet: str):
    return (
        Match.query.filter((Match.party_a == wallet) | (Match.party_b == wallet))
        .order_by(Match.created_at.desc())
        .all()
    )


def player_stats(wallet: str, schedule: FeeSchedule) -> dict:
    """Results and net winnings over a wallet's completed, non-practice matches."""
    stats = {'games_played': 0, 'games_won': 0, 'games_lost': 0, 'games_draw': 0, 'total_earnings': 0}
    for match in player_matches(wallet):
        if match.phase != COMPLETED or match.is_practice:
            continue
        stats['games_played'] += 1
        stake = int(match.stake or 0)
        result = compute_payouts(stake, outcome_kind(match.outcome), schedule)
        if match.outcome == DRAW:
            stats['games_draw'] += 1
            stats['total_earnings'] += result.refund_a or 0
            continue
        winner = match.party_a if match.outcome == X else match.party_b if match.outcome == O else None
        if winner == wallet:
            stats['games_won'] += 1
            stats['total_earnings'] += result.winner_payout or 0
        else:
            stats['games_lost'] += 1
    return stats
