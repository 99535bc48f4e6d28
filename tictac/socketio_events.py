from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from tictac import socketio

NAMESPACE = '/ws'
LOBBY_ROOM = 'lobby'


def match_room(match_id: str) -> str:
    return f"match:{match_id}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    current_app.logger.info(f"[ws-disconnect] sid={_get_sid()}")


def handle_join_match(data):
    match_id = (data or {}).get('match_id')
    if not match_id:
        emit('error', {'message': 'match_id is required'})
        return
    room = match_room(match_id)
    join_room(room)
    current_app.logger.info(f"[ws-join] sid={_get_sid()} room={room}")
    emit('joined', {'room': room})


def handle_leave_match(data):
    match_id = (data or {}).get('match_id')
    if not match_id:
        emit('error', {'message': 'match_id is required'})
        return
    room = match_room(match_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_join_lobby(data=None):
    join_room(LOBBY_ROOM)
    emit('joined', {'room': LOBBY_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


# ---- Server-side notifications (called from HTTP routes) ----

def notify_match_created(match) -> None:
    socketio.emit('match_created', {'match': match.to_dict()}, to=LOBBY_ROOM, namespace=NAMESPACE)


def notify_party_joined(match) -> None:
    payload = {'match': match.to_dict()}
    socketio.emit('party_joined', payload, to=match_room(match.id), namespace=NAMESPACE)
    # lobby clients drop the match from their open list
    socketio.emit('party_joined', payload, to=LOBBY_ROOM, namespace=NAMESPACE)


def notify_move_applied(match, actor: str, position: int) -> None:
    socketio.emit(
        'move_applied',
        {'match': match.to_dict(), 'actor': actor, 'position': position},
        to=match_room(match.id),
        namespace=NAMESPACE,
    )


def notify_match_completed(match, settlement=None) -> None:
    payload = {'match': match.to_dict(), 'outcome': match.outcome}
    if settlement is not None:
        payload['settlement'] = settlement.to_dict()
    socketio.emit('match_completed', payload, to=match_room(match.id), namespace=NAMESPACE)


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = [NAMESPACE, '/'] if testing else [NAMESPACE]
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_match', handle_join_match, namespace=namespace)
        socketio.on_event('leave_match', handle_leave_match, namespace=namespace)
        socketio.on_event('join_lobby', handle_join_lobby, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
