import os
import sys
import pytest
from flask import g

# Ensure the backend root (containing the `casino` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from casino import create_app, db, socketio


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BCRYPT_LOG_ROUNDS = 4
    TWILIO_ACCOUNT_SID = ''
    TWILIO_AUTH_TOKEN = ''
    TWILIO_PHONE_NUMBER = ''


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)

    # Requests reuse the fixture's app context, so `g` outlives each request;
    # drop the player Flask-Login cached there by the previous one
    @application.before_request
    def forget_cached_login():
        g.pop('_login_user', None)

    with application.app_context():
        # Ensure models are imported so tables are created
        import casino.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


def bearer(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture()
def register_player(flask_app):
    """Register a player through the API; returns (player_dict, headers)."""
    http = flask_app.test_client()

    def _register(username='alice', phone=None, **extra):
        payload = {
            'username': username,
            'name': extra.pop('name', username.title()),
            'email': extra.pop('email', f'{username}@mail.com'),
            'password': extra.pop('password', 'secret123'),
        }
        if phone:
            payload['phone'] = phone
        res = http.post('/api/auth/register', json=payload)
        assert res.status_code == 201, res.get_json()
        body = res.get_json()
        return body['player'], bearer(body['token'])

    return _register


@pytest.fixture()
def admin_headers(flask_app):
    from casino.models import Player

    admin = Player(username='admin', name='Admin User', email='admin@sweepscasino.com', role='admin')
    admin.set_password('adminpass')
    db.session.add(admin)
    db.session.commit()
    res = flask_app.test_client().post(
        '/api/admin/login', json={'email': 'admin@sweepscasino.com', 'password': 'adminpass'}
    )
    assert res.status_code == 200, res.get_json()
    return bearer(res.get_json()['token'])


@pytest.fixture()
def fund(flask_app):
    """Credit a player's wallet directly through the ledger."""
    from casino.models import Player
    from casino.services.wallet import apply_transaction

    def _fund(player_id, gc=0, sc=0):
        player = db.session.get(Player, player_id)
        return apply_transaction(player, 'deposit', gc_amount=gc, sc_amount=sc, description='test funding')

    return _fund


@pytest.fixture()
def verify_kyc(flask_app):
    from casino.models import Player
    from casino.services import kyc

    def _verify(player_id, level='Full'):
        kyc.approve(db.session.get(Player, player_id), level)

    return _verify
