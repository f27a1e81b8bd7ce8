from flask import current_app
from flask_socketio import emit, join_room, leave_room, rooms

from casino import db, socketio
from casino.auth import verify_token
from casino.models import Player
from casino.services.wallet import player_room, wallet_snapshot


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def _player_for(data):
    token = (data or {}).get('token')
    if not token:
        emit('error', {'message': 'token is required'})
        return None
    payload = verify_token(token)
    player = db.session.get(Player, payload.get('player_id')) if payload else None
    if player is None or not player.is_active:
        emit('error', {'message': 'Invalid or expired token'})
        return None
    return player


def handle_join_wallet(data):
    player = _player_for(data)
    if player is None:
        return
    room = player_room(player.id)
    join_room(room)
    current_app.logger.info(f"[ws] player={player.id} joined {room}")
    emit('joined', {'room': room, 'wallet': wallet_snapshot(player)})


def handle_leave_wallet(data=None):
    joined = [room for room in rooms() if room.startswith('player:')]
    for room in joined:
        leave_room(room)
    emit('left', {'room': joined[0] if joined else None, 'rooms': joined})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Wire the wallet events onto the '/ws' namespace.

    Tests connect through the Flask-SocketIO test client, which may open the
    default namespace first, so ``testing`` registers the same events on '/'.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_wallet', handle_join_wallet, namespace='/ws')
    socketio.on_event('leave_wallet', handle_leave_wallet, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_wallet', handle_join_wallet, namespace='/')
        socketio.on_event('leave_wallet', handle_leave_wallet, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
