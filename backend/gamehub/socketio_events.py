from flask_socketio import join_room, leave_room, emit
from gamehub import socketio
from gamehub.games import normalize_game_id

NAMESPACE = '/ws'


def leaderboard_room(game) -> str:
    return f"leaderboard:{normalize_game_id(game).value}"


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def _room_from(data):
    game = (data or {}).get('game')
    if not game:
        emit('error', {'message': 'game is required'})
        return None
    try:
        return leaderboard_room(game)
    except ValueError as exc:
        emit('error', {'message': str(exc)})
        return None


def handle_watch_leaderboard(data):
    room = _room_from(data)
    if room is None:
        return
    join_room(room)
    emit('watching', {'room': room})


def handle_unwatch_leaderboard(data):
    room = _room_from(data)
    if room is None:
        return
    leave_room(room)
    emit('unwatched', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('watch_leaderboard', handle_watch_leaderboard, namespace=NAMESPACE)
    socketio.on_event('unwatch_leaderboard', handle_unwatch_leaderboard, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
