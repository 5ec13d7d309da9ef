import dataclasses
import random
import time

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

from memorygame.models import GameSettings
from memorygame.services.games import BackgroundScheduler, GameEngine, GameRegistry, ManualScheduler

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)


def get_registry(flask_app) -> GameRegistry:
    return flask_app.extensions['memorygame']


def make_engine_factory(flask_app):
    """Engines for this app: real timers normally, a virtual clock under TESTING."""
    settings = GameSettings.from_config(flask_app.config)
    manual = flask_app.config.get('TESTING') and not flask_app.config.get('ENABLE_SCHEDULER_IN_TESTS')

    def factory():
        scheduler = ManualScheduler(start=time.time()) if manual else BackgroundScheduler(socketio)
        return GameEngine(scheduler, settings)

    return factory


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Validates the board settings up front instead of on the first request
    make_engine_factory(flask_app)()
    flask_app.extensions['memorygame'] = GameRegistry(make_engine_factory(flask_app))

    from memorygame.main import main
    flask_app.register_blueprint(main)

    from memorygame.api.games import games
    # Mount game routes under /api to match frontend API client
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from memorygame.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('autoplay')
    @click.option('--pairs', type=int, default=None, help='Number of pairs (defaults to TOTAL_PAIRS).')
    @click.option('--seed', type=int, default=None, help='Seed for the board shuffle.')
    @click.option('--think', type=float, default=1.0, help='Simulated seconds between moves.')
    def autoplay_command(pairs, seed, think):
        """Plays one game with perfect memory and prints the status stream."""
        from memorygame.services.games.autoplay import play_perfect_memory

        settings = GameSettings.from_config(flask_app.config)
        if pairs:
            settings = dataclasses.replace(settings, total_pairs=pairs)
        engine = GameEngine(ManualScheduler(), settings, rng=random.Random(seed))

        def echo_status(event, payload):
            if event == 'status':
                click.echo(f"[{payload['category']}] {payload['text']}")

        engine.subscribe(echo_status)
        final = play_perfect_memory(engine, think_time=think)
        click.echo(f"moves={final['moves']} time={final['elapsed_display']} score={final['score']}")

    flask_app.cli.add_command(autoplay_command)

    return flask_app
