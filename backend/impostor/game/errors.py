from __future__ import annotations


class GameError(Exception):
    """Base class for every recoverable error raised by a room command.

    ``code`` is a stable machine-readable identifier sent to clients, while
    ``message`` is the human-readable text shown to the player.
    """

    kind = "game_error"

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}")

    def to_payload(self) -> dict:
        return {"error": self.code, "kind": self.kind, "message": self.message}


class ValidationError(GameError):
    """Malformed input: empty name, overlong clue, unknown vote kind."""

    kind = "validation"


class PreconditionError(GameError):
    """The command is well-formed but not allowed right now."""

    kind = "precondition"


class NotFoundError(GameError):
    kind = "not_found"


class RuleViolation(GameError):
    """The command breaks a game rule (speaking the secret word, spectator votes)."""

    kind = "rule"
