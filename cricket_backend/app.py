import logging

from flask import Flask, request, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_socketio import SocketIO
from flask_cors import CORS
from sqlalchemy import inspect, text
from cricket_backend.config import config

db = SQLAlchemy()
socketio = SocketIO()


def _parse_allowed_origins(raw_origins):
    if not raw_origins:
        return '*'

    if isinstance(raw_origins, (list, tuple, set)):
        cleaned = [origin for origin in raw_origins if origin]
        return cleaned or '*'

    raw_text = str(raw_origins).strip()
    if not raw_text or raw_text == '*':
        return '*'

    origins = [origin.strip() for origin in raw_text.split(',') if origin.strip()]
    return origins or '*'


def _configure_logging(app):
    level_name = str(app.config.get('LOG_LEVEL') or 'INFO').strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    app.logger.setLevel(level)


def _run_lightweight_migrations():
    """Apply small schema updates for local/dev databases without Alembic."""
    inspector = inspect(db.engine)
    table_names = inspector.get_table_names()
    if 'tournament' not in table_names:
        return

    tournament_columns = {col['name'] for col in inspector.get_columns('tournament')}
    with db.engine.begin() as connection:
        for column in ('captain_voting_enabled', 'is_voting_live', 'is_auction_live'):
            if column not in tournament_columns:
                connection.execute(text(
                    f'ALTER TABLE tournament ADD COLUMN {column} BOOLEAN NOT NULL DEFAULT FALSE'
                ))

        # Bid timer: one row per tournament
        if 'auction_timer' in table_names:
            connection.execute(text(
                'DELETE FROM auction_timer WHERE id NOT IN ('
                '  SELECT MAX(id) FROM auction_timer GROUP BY tournament_id'
                ')'
            ))
            connection.execute(text(
                'CREATE UNIQUE INDEX IF NOT EXISTS ix_auction_timer_tournament '
                'ON auction_timer (tournament_id)'
            ))

        if 'auction_config' in table_names:
            connection.execute(text(
                'CREATE INDEX IF NOT EXISTS ix_auction_config_tournament_active '
                'ON auction_config (tournament_id, is_active)'
            ))
        if 'tournament_captain' in table_names:
            connection.execute(text(
                'CREATE INDEX IF NOT EXISTS ix_tournament_captain_tournament_active '
                'ON tournament_captain (tournament_id, is_active)'
            ))
        if 'profile' in table_names:
            connection.execute(text(
                'CREATE INDEX IF NOT EXISTS ix_profile_mobile_registered '
                'ON profile (mobile, is_player_registered)'
            ))


def create_app(config_name='development'):
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    _configure_logging(app)

    allowed_origins = _parse_allowed_origins(app.config.get('CORS_ALLOWED_ORIGINS', '*'))
    if str(config_name).strip().lower() == 'production':
        secret_key = str(app.config.get('SECRET_KEY') or '').strip()
        if not secret_key or secret_key == 'dev-secret-key-change-in-prod':
            raise RuntimeError('SECRET_KEY must be set to a non-default value in production')
        if allowed_origins == '*':
            raise RuntimeError('CORS_ALLOWED_ORIGINS must be explicitly set in production')

    db.init_app(app)
    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'threading'),
    )
    CORS(app, resources={r'/api/*': {'origins': allowed_origins}})

    @app.before_request
    def _enforce_origin_for_mutating_api_requests():
        if request.method in {'GET', 'HEAD', 'OPTIONS'}:
            return None
        if not request.path.startswith('/api/'):
            return None

        origin = str(request.headers.get('Origin') or '').strip()
        if not origin:
            return None

        configured_origins = _parse_allowed_origins(
            app.config.get('CORS_ALLOWED_ORIGINS', '*')
        )
        if configured_origins != '*' and origin not in configured_origins:
            return jsonify({'error': 'Invalid request origin'}), 403

        auth_header = str(request.headers.get('Authorization') or '').strip()
        if not auth_header:
            return None

        csrf_header = request.headers.get('X-CSRF-Token')
        from cricket_backend.auth_utils import csrf_token_matches
        if not csrf_token_matches(auth_header, csrf_header):
            return jsonify({'error': 'Invalid CSRF token'}), 403
        return None

    from cricket_backend.routes.auth import auth_bp
    from cricket_backend.routes.players import players_bp
    from cricket_backend.routes.tournaments import tournaments_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(players_bp, url_prefix='/api/players')
    app.register_blueprint(tournaments_bp, url_prefix='/api/tournaments')

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok'})

    with app.app_context():
        from cricket_backend import models  # noqa: F401
        db.create_all()
        _run_lightweight_migrations()

    app.logger.debug('Application created with %s config', config_name)
    return app
