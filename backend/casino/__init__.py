from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config
from casino.sms import SmsService

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)
sms = SmsService()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    sms.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from casino.errors import register_error_handlers
    register_error_handlers(flask_app)

    # Player-facing routes are mounted under /api to match the frontend API client
    from casino.main import main
    flask_app.register_blueprint(main, url_prefix='/api')

    from casino.api.wallet import wallet
    flask_app.register_blueprint(wallet, url_prefix='/api/wallet')

    from casino.api.store import store
    flask_app.register_blueprint(store, url_prefix='/api/store')

    from casino.api.bonus import bonus
    flask_app.register_blueprint(bonus, url_prefix='/api/bonus')

    from casino.api.kyc import kyc
    flask_app.register_blueprint(kyc, url_prefix='/api/kyc')

    from casino.api.redemptions import redemptions
    flask_app.register_blueprint(redemptions, url_prefix='/api/redemptions')

    from casino.api.scratch_tickets import scratch_tickets
    flask_app.register_blueprint(scratch_tickets, url_prefix='/api/scratch-tickets')

    from casino.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api')

    from casino.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    # Register Socket.IO event handlers on the initialized socketio instance
    from casino.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Bearer-token auth; there is no server-side session login
    from casino.auth import load_player_from_request

    login_manager.request_loader(load_player_from_request)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from casino.seed import seed_database
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            seed_database(flask_app.config)
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
