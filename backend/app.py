import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("impostor")


def _wants_eventlet() -> bool:
    mode = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()
    if mode not in ("", "eventlet"):
        return False
    return not sys.platform.startswith("win") and sys.version_info < (3, 13)


def main() -> None:
    # .env must be loaded before Config reads the environment on import.
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")

    if _wants_eventlet():
        import eventlet

        eventlet.monkey_patch()

    try:
        from backend.impostor.server import create_app
    except ImportError:  # pragma: no cover
        from impostor.server import create_app

    app, socketio = create_app()

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))
    logger.info("Impostor server listening on %s:%d (async_mode=%s)", host, port, socketio.async_mode)

    socketio.run(
        app,
        host=host,
        port=port,
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
        use_reloader=os.environ.get("FLASK_USE_RELOADER", "0") == "1",
        allow_unsafe_werkzeug=os.environ.get("ALLOW_UNSAFE_WERKZEUG", "1") == "1",
    )


if __name__ == "__main__":
    main()
