from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parents[1] / ".env")

try:
    from backend.impostor.server import create_app
except ImportError:  # pragma: no cover
    from impostor.server import create_app

# Run with a single worker: rooms live in process memory.
app, socketio = create_app()
