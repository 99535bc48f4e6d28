from flask import Blueprint, jsonify, request, current_app
from tictac import db
from tictac.models import Match
from tictac.services.matches import state_machine
from tictac.services.matches.board import BOARD_SIZES, O
from tictac.services.matches.errors import MatchError, MatchNotFound
from tictac.services.matches.payouts import settle_match
from tictac.services.matches.practice import DIFFICULTIES, MEDIUM, choose_move
from tictac.services.matches.repository import load_match, open_matches, player_matches, player_stats, save_match
from tictac.services.matches.settlement import FeeSchedule
from tictac.socketio_events import (
    notify_match_completed,
    notify_match_created,
    notify_move_applied,
    notify_party_joined,
)
from tictac.validation import parse_int, validate_match_id, validate_wallet_address


matches = Blueprint('matches', __name__)


@matches.errorhandler(MatchError)
def handle_match_error(err: MatchError):
    return jsonify(err.to_dict()), err.status_code


def _fee_schedule() -> FeeSchedule:
    return FeeSchedule.from_config(current_app.config)


def _load(match_id: str) -> Match:
    if not validate_match_id(match_id):
        raise MatchNotFound('Invalid match ID format')
    return load_match(match_id)


def _board_size(data):
    size = data.get('board_size', 9)
    size = parse_int(size)
    return size if size in BOARD_SIZES else None


@matches.route('/create', methods=['POST'])
def create_match():
    data = request.get_json(silent=True) or {}
    party_a = data.get('party_a')
    if not validate_wallet_address(party_a):
        return jsonify({'error': 'Invalid wallet address'}), 400
    stake = parse_int(data.get('stake', 0))
    if stake is None:
        return jsonify({'error': 'Stake must be an integer amount in the smallest unit'}), 400
    board_size = _board_size(data)
    if board_size is None:
        return jsonify({'error': 'board_size must be 9 or 16'}), 400

    state = state_machine.create(party_a, stake, board_size)
    match = save_match(Match.from_state(state))
    current_app.logger.info(f"[match-create] match={match.id} party_a={party_a} stake={stake} size={board_size}")

    notify_match_created(match)
    return jsonify({'message': 'Match created successfully', 'match': match.to_dict()}), 201


@matches.route('/practice', methods=['POST'])
def create_practice_match():
    data = request.get_json(silent=True) or {}
    party_a = data.get('party_a')
    if not validate_wallet_address(party_a):
        return jsonify({'error': 'Invalid wallet address'}), 400
    difficulty = data.get('difficulty') or MEDIUM
    if difficulty not in DIFFICULTIES:
        return jsonify({'error': f"difficulty must be one of {', '.join(DIFFICULTIES)}"}), 400
    board_size = _board_size(data)
    if board_size is None:
        return jsonify({'error': 'board_size must be 9 or 16'}), 400

    state = state_machine.create_practice(party_a, board_size)
    match = save_match(Match.from_state(state, difficulty=difficulty))
    current_app.logger.info(f"[practice-create] match={match.id} party_a={party_a} difficulty={difficulty}")
    return jsonify({'message': 'Practice match created', 'match': match.to_dict()}), 201


@matches.route('/open', methods=['GET'])
def list_open_matches():
    return jsonify({'matches': [m.to_summary() for m in open_matches()]})


@matches.route('/<string:match_id>', methods=['GET'])
def get_match(match_id):
    match = _load(match_id)
    return jsonify({'match': match.to_dict(include_payouts=True)})


@matches.route('/<string:match_id>/join', methods=['POST'])
def join_match(match_id):
    data = request.get_json(silent=True) or {}
    party_b = data.get('party_b')
    if not validate_wallet_address(party_b):
        return jsonify({'error': 'Invalid wallet address'}), 400

    match = _load(match_id)
    update = state_machine.join(match.snapshot(), party_b)
    match.apply(update)
    save_match(match)
    current_app.logger.info(f"[match-join] match={match.id} party_b={party_b}")

    notify_party_joined(match)
    return jsonify({'message': 'Successfully joined match', 'match': match.to_dict()})


def _apply_move(match: Match, actor: str, position: int):
    update = state_machine.move(match.snapshot(), actor, position)
    match.apply(update)
    settlement = None
    try:
        if update.completes:
            # payout rows go out in the same commit as the finishing move
            settlement = settle_match(match, _fee_schedule(), current_app.extensions['payouts'])
        save_match(match)
    except Exception:
        db.session.rollback()
        raise
    current_app.logger.info(
        f"[match-move] match={match.id} actor={actor} position={position} phase={match.phase}"
    )
    notify_move_applied(match, actor, position)
    if update.completes:
        current_app.logger.info(f"[match-complete] match={match.id} outcome={match.outcome}")
        notify_match_completed(match, settlement)
    return update, settlement


@matches.route('/<string:match_id>/move', methods=['POST'])
def make_move(match_id):
    data = request.get_json(silent=True) or {}
    actor = data.get('actor')
    if not validate_wallet_address(actor):
        return jsonify({'error': 'Invalid wallet address'}), 400
    position = parse_int(data.get('position'))
    if position is None:
        return jsonify({'error': 'Position must be an integer'}), 400

    match = _load(match_id)
    update, settlement = _apply_move(match, actor, position)

    # Practice: the computer answers straight away through the same rules
    if match.is_practice and not update.completes:
        reply = choose_move(match.board, O, match.difficulty or MEDIUM)
        update, settlement = _apply_move(match, state_machine.PRACTICE_OPPONENT, reply)

    response = {'match': match.to_dict()}
    if update.completes:
        if settlement is not None:
            response['settlement'] = settlement.to_dict()
            response['match'] = match.to_dict(include_payouts=True)
        if match.outcome == state_machine.DRAW:
            response['message'] = 'Match ended in a draw'
        else:
            response['message'] = f'Match won by {match.outcome}'
    else:
        response['message'] = 'Move made successfully'
    return jsonify(response)


@matches.route('/player/<string:wallet>', methods=['GET'])
def get_player(wallet):
    if not validate_wallet_address(wallet):
        return jsonify({'error': 'Invalid wallet address'}), 400
    return jsonify({
        'matches': [m.to_dict() for m in player_matches(wallet)],
        'stats': player_stats(wallet, _fee_schedule()),
    })
