from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required
from casino import db
from casino.auth import AUTH_COOKIE, current_player, issue_token
from casino.models import Player, utcnow
from casino.schemas import (
    AdminLoginRequest,
    LoginRequest,
    RegisterRequest,
    UpdateProfileRequest,
)

main = Blueprint('main', __name__)


def _json_body():
    return request.get_json(silent=True) or {}


def _token_response(player, status=200, key='player'):
    token = issue_token(player)
    resp = jsonify({'success': True, 'token': token, key: player.to_dict()})
    resp.status_code = status
    max_age = current_app.config['ADMIN_TOKEN_MAX_AGE_SEC' if player.is_admin else 'PLAYER_TOKEN_MAX_AGE_SEC']
    resp.set_cookie(AUTH_COOKIE, token, max_age=max_age, httponly=True, samesite='Lax')
    return resp


@main.route('/ping')
def ping():
    return jsonify({'message': 'pong'})


@main.route('/auth/register', methods=['POST'])
def register():
    data = RegisterRequest.model_validate(_json_body())
    if Player.query.filter_by(username=data.username).first():
        return jsonify({'success': False, 'error': 'Username already exists'}), 400
    if Player.query.filter_by(email=data.email.lower()).first():
        return jsonify({'success': False, 'error': 'Email already registered'}), 400

    player = Player(username=data.username, name=data.name, email=data.email.lower(), phone=data.phone)
    player.set_password(data.password)
    db.session.add(player)
    db.session.commit()
    current_app.logger.info(f"[auth] registered player={player.id} username={player.username}")
    return _token_response(player, status=201)


@main.route('/auth/login', methods=['POST'])
def login():
    data = LoginRequest.model_validate(_json_body())
    player = Player.query.filter_by(username=data.username, role='player').first()
    if not player or not player.check_password(data.password):
        return jsonify({'success': False, 'error': 'Invalid username or password'}), 401
    if not player.is_active:
        return jsonify({'success': False, 'error': 'Account is suspended or inactive'}), 403
    player.last_login = utcnow()
    db.session.commit()
    return _token_response(player)


@main.route('/auth/logout', methods=['POST'])
def logout():
    resp = jsonify({'success': True})
    resp.delete_cookie(AUTH_COOKIE)
    return resp


@main.route('/admin/login', methods=['POST'])
def admin_login():
    data = AdminLoginRequest.model_validate(_json_body())
    admin = Player.query.filter_by(email=data.email.lower(), role='admin').first()
    if not admin or not admin.check_password(data.password):
        return jsonify({'success': False, 'error': 'Invalid email or password'}), 401
    if not admin.is_active:
        return jsonify({'success': False, 'error': 'Admin account is inactive'}), 403
    admin.last_login = utcnow()
    db.session.commit()
    current_app.logger.info(f"[auth] admin login id={admin.id}")
    return _token_response(admin, key='admin')


@main.route('/user/profile', methods=['GET'])
@login_required
def get_profile():
    return jsonify({'success': True, 'data': current_player().to_dict()})


@main.route('/user/profile', methods=['PUT'])
@login_required
def update_profile():
    data = UpdateProfileRequest.model_validate(_json_body())
    player = current_player()
    if data.email and data.email.lower() != player.email:
        if Player.query.filter_by(email=data.email.lower()).first():
            return jsonify({'success': False, 'error': 'Email already registered'}), 400
        player.email = data.email.lower()
    if data.name:
        player.name = data.name
    if data.phone:
        player.phone = data.phone
    if data.password:
        player.set_password(data.password)
    db.session.add(player)
    db.session.commit()
    return jsonify({'success': True, 'data': player.to_dict()})
