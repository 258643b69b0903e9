from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from threading import RLock

from .game.models import FinishOutcome

logger = logging.getLogger(__name__)


@dataclass
class PlayerStats:
    played: int = 0
    wins: int = 0
    losses: int = 0
    impostor_wins: int = 0


class AccountStore:
    """In-memory per-identity match statistics."""

    def __init__(self):
        self._lock = RLock()
        self._stats: dict[str, PlayerStats] = {}

    def record_finish(self, outcome: FinishOutcome, identities: list[str]) -> None:
        with self._lock:
            for identity in dict.fromkeys(identities):
                stats = self._stats.setdefault(identity, PlayerStats())
                stats.played += 1
                is_impostor = identity == outcome.impostor
                won = outcome.impostor_won if is_impostor else not outcome.impostor_won
                if won:
                    stats.wins += 1
                    if is_impostor:
                        stats.impostor_wins += 1
                else:
                    stats.losses += 1
        logger.info("Recorded result for %d players (impostor won=%s)", len(identities), outcome.impostor_won)

    def stats(self, identity: str) -> dict:
        with self._lock:
            s = self._stats.get(identity, PlayerStats())
            d = asdict(s)
        return {
            "name": identity,
            "played": d["played"],
            "wins": d["wins"],
            "losses": d["losses"],
            "impostorWins": d["impostor_wins"],
        }
