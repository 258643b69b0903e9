import os
import random
import sys

import pytest

# Ensure the backend root (containing the `impostor` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from impostor.config import Config
from impostor.game import service
from impostor.game.models import WordEntry
from impostor.game.registry import RoomRegistry
from impostor.game.words import WordPool
from impostor.server import create_app


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    TRUST_PROXY_HEADERS = False
    LOG_LEVEL = "WARNING"
    COUNTDOWN_SEC = 0
    RESULTS_DURATION_SEC = 0
    DISCONNECT_GRACE_SEC = 0


SECRET = WordEntry(word="Pizza", hint="Triangel", hint_extra="Neapel")


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def words(rng):
    return WordPool([SECRET], rng=rng)


@pytest.fixture()
def registry():
    return RoomRegistry(rng=random.Random(7))


@pytest.fixture()
def make_room(registry):
    """Create a room seated with players p1..pN (p1 is host)."""

    def _make(n, is_private=False, password=None):
        room = registry.create_room(is_private=is_private, password=password)
        for i in range(1, n + 1):
            service.join(room, f"p{i}", f"sid-p{i}", password=password)
        return room

    return _make


@pytest.fixture()
def start_match(words):
    """Prepare and activate a match; returns the room in ``playing``."""

    def _start(room, rng=None):
        generation = service.prepare_start(room, room.host.identity, words, rng=rng or random.Random(99))
        assert service.activate(room, generation)
        return room

    return _start


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(app_and_socketio):
    app, socketio = app_and_socketio
    clients = []

    def _connect():
        test_client = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect

    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass
