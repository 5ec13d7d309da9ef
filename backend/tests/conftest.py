import os
import random
import sys
import pytest

# Ensure the backend root (containing the `memorygame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from memorygame import create_app, get_registry, socketio
from memorygame.models import GameSettings
from memorygame.services.games import GameEngine, ManualScheduler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    TOTAL_PAIRS = 8
    REVEAL_DELAY_MS = 500
    MISMATCH_DELAY_MS = 600
    TIMER_TICK_SEC = 1
    CONTROLLER_DEBOUNCE_MS = 0


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def registry(flask_app):
    return get_registry(flask_app)


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


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def engine(scheduler):
    return GameEngine(scheduler, GameSettings(), rng=random.Random(1234))


def pair_positions(engine):
    """Map each symbol to its two board positions (reads the engine's private board)."""
    pairs = {}
    for tile in engine.tiles:
        pairs.setdefault(tile.symbol, []).append(tile.position)
    return list(pairs.values())


def mismatched_positions(engine):
    """Two positions holding different symbols."""
    tiles = engine.tiles
    first = tiles[0]
    other = next(t for t in tiles[1:] if t.symbol != first.symbol)
    return first.position, other.position
