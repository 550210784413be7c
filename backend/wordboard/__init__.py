from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value == '*':
        return '*'
    if isinstance(value, str):
        return [origin.strip() for origin in value.split(',') if origin.strip()]
    return list(value)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))
    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from wordboard.models import UsageStatsRecord
    if flask_app.config.get('CREATE_TABLES_ON_START'):
        with flask_app.app_context():
            db.create_all()

    testing = flask_app.config.get('TESTING', False)
    # Background work runs inline under test so assertions see its effects
    start_task = None if testing else socketio.start_background_task

    from wordboard.services.stats import SqlStatsRepository, StatsNotifier, UsageStats
    from wordboard.services.board.presence import PresenceTracker
    from wordboard.services.board.reaper import IdleReaper
    from wordboard.services.board.registry import SessionRegistry
    from wordboard.socketio_events import BoardGateway, register_socketio_handlers

    stats = UsageStats(
        SqlStatsRepository(flask_app),
        logger=flask_app.logger,
        flush_interval=int(flask_app.config.get('STATS_FLUSH_INTERVAL_SEC', 30)),
    )
    notifier = StatsNotifier(stats, logger=flask_app.logger, start_task=start_task)
    registry = SessionRegistry()
    gateway = BoardGateway(registry, PresenceTracker(), notifier)
    reaper = IdleReaper(
        registry,
        idle_timeout=int(flask_app.config.get('SESSION_IDLE_TIMEOUT_SEC', 3600)),
        interval=int(flask_app.config.get('REAPER_INTERVAL_SEC', 3600)),
        on_removed=notifier.remove_game,
        logger=flask_app.logger,
    )
    flask_app.extensions['usage_stats'] = stats
    flask_app.extensions['board_gateway'] = gateway
    flask_app.extensions['idle_reaper'] = reaper

    from wordboard.main import main
    flask_app.register_blueprint(main)

    from wordboard.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    # Handlers bind to the shared socketio instance; the latest app wins
    register_socketio_handlers(gateway)

    if not testing:
        stats.start(socketio.start_background_task)
        reaper.start(socketio.start_background_task)

    @click.command('stats-reset')
    def stats_reset_command():
        """Drops and recreates the usage statistics table."""
        with flask_app.app_context():
            UsageStatsRecord.__table__.drop(db.engine, checkfirst=True)
            UsageStatsRecord.__table__.create(db.engine)
        stats.reset()
        stats.flush()
        print('Usage statistics have been reset!')

    flask_app.cli.add_command(stats_reset_command)

    return flask_app


def shutdown_app(flask_app):
    """Cancel background tasks and write any unsaved counters."""
    reaper = flask_app.extensions.get('idle_reaper')
    if reaper is not None:
        reaper.stop()
    stats = flask_app.extensions.get('usage_stats')
    if stats is not None:
        stats.shutdown()


def server_options(flask_app):
    """Keyword arguments for ``socketio.run``.

    Werkzeug's development server is only allowed when DEBUG is on.
    """
    debug = bool(flask_app.config.get('DEBUG', False))
    options = {
        'host': flask_app.config.get('HOST', '0.0.0.0'),
        'port': int(flask_app.config.get('PORT', 5000)),
        'debug': debug,
        'use_reloader': False,
    }
    if debug:
        options['allow_unsafe_werkzeug'] = True
    return options
