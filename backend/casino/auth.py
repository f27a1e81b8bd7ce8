"""Signed bearer tokens for players and admins.

Tokens are ``itsdangerous`` timed signatures over ``{player_id, role}``.
Player and admin tokens use different salts so an expired admin token can
never be replayed under the longer player lifetime.
"""

from functools import wraps

from flask import current_app, request
from flask_login import current_user, login_required
from itsdangerous import BadSignature, URLSafeTimedSerializer

from casino import db
from casino.errors import Forbidden
from casino.models import Player

PLAYER_SALT = 'player-auth'
ADMIN_SALT = 'admin-auth'
AUTH_COOKIE = 'auth_token'


def _serializer(salt: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config['SECRET_KEY'], salt=salt)


def issue_token(player: Player) -> str:
    salt = ADMIN_SALT if player.is_admin else PLAYER_SALT
    return _serializer(salt).dumps({'player_id': player.id, 'role': player.role})


def verify_token(token: str):
    """Return the token payload, or None when the token is invalid or expired."""
    attempts = (
        (PLAYER_SALT, 'PLAYER_TOKEN_MAX_AGE_SEC'),
        (ADMIN_SALT, 'ADMIN_TOKEN_MAX_AGE_SEC'),
    )
    for salt, max_age_key in attempts:
        try:
            return _serializer(salt).loads(token, max_age=current_app.config[max_age_key])
        except BadSignature:
            continue
    return None


def token_from_request():
    header = request.headers.get('Authorization', '')
    if header.startswith('Bearer '):
        return header[len('Bearer '):].strip() or None
    return request.cookies.get(AUTH_COOKIE)


def load_player_from_request(req):
    token = token_from_request()
    if not token:
        return None
    payload = verify_token(token)
    if not payload:
        return None
    player = db.session.get(Player, payload.get('player_id'))
    # A role change or suspension invalidates outstanding tokens
    if player is None or player.role != payload.get('role') or not player.is_active:
        return None
    return player


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not current_user.is_admin:
            raise Forbidden('Admin access required')
        return view(*args, **kwargs)
    return wrapped


def current_player() -> Player:
    """The authenticated player as a plain model instance (not the proxy)."""
    return current_user._get_current_object()
