import logging
import time

from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
import click
from gamehub.config import Config

db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

DEV_SECRET_KEY = 'dev-secret-key'
LOG_LINE_MAX = 80


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    if not flask_app.config.get('SQLALCHEMY_DATABASE_URI'):
        raise RuntimeError('DATABASE_URL environment variable is not set')
    if not flask_app.config.get('SECRET_KEY'):
        flask_app.logger.warning('SESSION_SECRET is not set; using the development key')
        flask_app.config['SECRET_KEY'] = DEV_SECRET_KEY

    db.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from gamehub.sessions import DatabaseSessionInterface
    flask_app.session_interface = DatabaseSessionInterface()

    from gamehub.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/api')

    from gamehub.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api')

    from gamehub.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from gamehub.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Unauthorized'}), 401

    _register_error_handlers(flask_app)
    _register_request_logging(flask_app)
    _register_commands(flask_app)

    return flask_app


def _register_error_handlers(flask_app):
    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        return jsonify({'message': 'Invalid payload', 'errors': errors}), 400

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        return jsonify({'message': exc.description}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        flask_app.logger.exception(f"[error] {request.method} {request.path} failed: {exc}")
        return jsonify({'message': 'Internal Server Error'}), 500


def _register_request_logging(flask_app):
    @flask_app.before_request
    def start_timer():
        request.environ['gamehub.start'] = time.perf_counter()

    @flask_app.after_request
    def log_api_request(response):
        if request.path.startswith('/api'):
            started = request.environ.get('gamehub.start', time.perf_counter())
            duration_ms = int((time.perf_counter() - started) * 1000)
            line = f"{request.method} {request.path} {response.status_code} in {duration_ms}ms"
            if response.is_json and not response.direct_passthrough:
                line += f" :: {response.get_data(as_text=True).strip()}"
            if len(line) > LOG_LINE_MAX:
                line = line[:LOG_LINE_MAX - 1] + '…'
            flask_app.logger.info(line)
        return response


def _register_commands(flask_app):
    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from gamehub.games import GameId
        from gamehub.models import User, GameScore
        from gamehub.services.achievements import seed_achievements
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users with one score per game
            users = ['testuser1', 'testuser2', 'testuser3']
            for idx, u in enumerate(users, start=1):
                user = User(username=u, email=f'{u}@example.com')
                user.set_password('password')
                db.session.add(user)
                db.session.flush()
                for game in GameId:
                    db.session.add(GameScore(user_id=user.id, game=game.value, score=idx * 100))

            db.session.commit()
            seed_achievements()
            click.echo('Database has been reset and seeded!')

    @click.command('seed-achievements')
    def seed_achievements_command():
        """Inserts the default achievement catalog."""
        from gamehub.services.achievements import seed_achievements
        with flask_app.app_context():
            created = seed_achievements()
            click.echo(f'{created} achievement(s) added.')

    @click.command('purge-sessions')
    def purge_sessions_command():
        """Deletes expired login sessions."""
        from gamehub.sessions import purge_expired_sessions
        with flask_app.app_context():
            removed = purge_expired_sessions()
            click.echo(f'{removed} expired session(s) removed.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(seed_achievements_command)
    flask_app.cli.add_command(purge_sessions_command)
