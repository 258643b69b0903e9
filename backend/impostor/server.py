from __future__ import annotations

import logging
import sys

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .accounts import AccountStore
from .config import Config
from .game.registry import RoomRegistry
from .game.words import WordPool
from .identity import IdentityDirectory
from .realtime.handlers import register_socketio_handlers
from .realtime.timers import RoomTimers
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .routes.stats import bp as stats_bp


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    _configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    async_mode = app.config.get("SOCKETIO_ASYNC_MODE", "")
    if not async_mode:
        # Default choice:
        # - Windows: threading (eventlet has known compatibility issues on newer Python)
        # - Python >= 3.13: threading (safer default)
        # - Otherwise: eventlet
        if sys.platform.startswith("win") or sys.version_info >= (3, 13):
            async_mode = "threading"
        else:
            async_mode = "eventlet"

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    registry = RoomRegistry(
        code_length=app.config.get("ROOM_CODE_LENGTH"),
        code_attempts=app.config.get("ROOM_CODE_ATTEMPTS"),
    )
    identities = IdentityDirectory()
    accounts = AccountStore()
    words = WordPool()
    timers = RoomTimers(socketio, registry)

    app.extensions["impostor"] = {
        "registry": registry,
        "identities": identities,
        "accounts": accounts,
        "words": words,
        "timers": timers,
    }

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")
    app.register_blueprint(stats_bp, url_prefix="/api")

    register_socketio_handlers(
        socketio,
        registry,
        identities,
        accounts,
        words,
        timers,
        countdown_sec=app.config.get("COUNTDOWN_SEC", 3),
        results_sec=app.config.get("RESULTS_DURATION_SEC", 10),
        grace_sec=app.config.get("DISCONNECT_GRACE_SEC", 15),
    )

    return app, socketio
