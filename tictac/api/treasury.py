from flask import Blueprint, jsonify, current_app
from tictac.services.matches.repository import open_matches
from tictac.services.matches.settlement import DRAW, WINNER_DECIDED, FeeSchedule, compute_fee

treasury = Blueprint('treasury', __name__)


@treasury.route('/config', methods=['GET'])
def get_config():
    cfg = current_app.config
    return jsonify({
        'treasury_wallet': cfg.get('TREASURY_WALLET') or 'Not configured',
        'game_wallet': cfg.get('GAME_WALLET') or 'Not configured',
        'fees': FeeSchedule.from_config(cfg).to_dict(),
    })


@treasury.route('/projections', methods=['GET'])
def get_projections():
    """Fees the treasury would collect if every open staked match ended one way."""
    schedule = FeeSchedule.from_config(current_app.config)
    staked = [m for m in open_matches() if int(m.stake or 0) > 0]
    total_pot = sum(int(m.stake) * 2 for m in staked)
    win_fees = sum(compute_fee(int(m.stake), WINNER_DECIDED, schedule) for m in staked)
    draw_fees = sum(compute_fee(int(m.stake), DRAW, schedule) for m in staked)
    return jsonify({
        'open_matches_with_stake': len(staked),
        'total_potential_pot': total_pot,
        'potential_fees_if_all_win': win_fees,
        'potential_fees_if_all_draw': draw_fees,
        'average_potential_fee': (win_fees + draw_fees) // 2,
    })
