import os
import sys
import pytest

# Ensure the backend root (containing the `wordboard` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from wordboard import create_app, db, socketio
from wordboard.services.board.cards import ASSASSIN, BLUE, NEUTRAL, RED, Card


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_IDLE_TIMEOUT_SEC = 3600
    REAPER_INTERVAL_SEC = 3600
    STATS_FLUSH_INTERVAL_SEC = 30


# 9 blue, 8 red, 7 neutral, 1 assassin
STANDARD_COLORS = [BLUE] * 9 + [RED] * 8 + [NEUTRAL] * 7 + [ASSASSIN]
FIRST_BLUE = 0
FIRST_RED = 9
FIRST_NEUTRAL = 17
ASSASSIN_INDEX = 24


def make_board(colors=None):
    colors = colors or STANDARD_COLORS
    return tuple(Card(f'word{i}', color) for i, color in enumerate(colors))


def board_payload(colors=None):
    return [card.to_dict() for card in make_board(colors)]


@pytest.fixture()
def board():
    return make_board()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import wordboard.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def sio_client(sio_factory):
    return sio_factory()
