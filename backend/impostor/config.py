import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO ("" picks a default per platform)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Rooms
    MAX_SEATS = int(os.environ.get("MAX_SEATS", "8"))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "4"))
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "6"))
    ROOM_CODE_ATTEMPTS = int(os.environ.get("ROOM_CODE_ATTEMPTS", "50"))

    # Input limits
    MAX_NAME_LENGTH = int(os.environ.get("MAX_NAME_LENGTH", "16"))
    MAX_CLUE_LENGTH = int(os.environ.get("MAX_CLUE_LENGTH", "40"))

    # Timers
    COUNTDOWN_SEC = int(os.environ.get("COUNTDOWN_SEC", "3"))
    RESULTS_DURATION_SEC = int(os.environ.get("RESULTS_DURATION_SEC", "10"))
    # Seconds a dropped connection keeps its seat for a reconnect
    DISCONNECT_GRACE_SEC = float(os.environ.get("DISCONNECT_GRACE_SEC", "15"))
