from __future__ import annotations

import logging
import random
import string
from threading import RLock

from ..config import Config
from .errors import NotFoundError, PreconditionError
from .models import Room
from .service import now_ms

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_code(length: int, rng: random.Random | None = None) -> str:
    return "".join((rng or random).choices(CODE_ALPHABET, k=length))


class RoomRegistry:
    """Process-wide table of live rooms keyed by their public code."""

    def __init__(
        self,
        code_length: int | None = None,
        code_attempts: int | None = None,
        rng: random.Random | None = None,
    ):
        self.code_length = code_length or Config.ROOM_CODE_LENGTH
        self.code_attempts = code_attempts or Config.ROOM_CODE_ATTEMPTS
        self._rng = rng or random.Random()
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        with self._lock:
            return code in self._rooms

    def create_room(self, is_private: bool = False, password: str | None = None) -> Room:
        with self._lock:
            for _ in range(self.code_attempts):
                code = generate_room_code(self.code_length, self._rng)
                if code not in self._rooms:
                    break
                logger.warning("Room code collision on %s, regenerating", code)
            else:
                raise PreconditionError("room_code_unavailable", "Could not allocate a room code, try again")

            room = Room(
                code=code,
                is_private=bool(is_private),
                password=(password or None) if is_private else None,
                created_at_ms=now_ms(),
            )
            self._rooms[code] = room
            logger.info("Created room %s (private=%s)", code, room.is_private)
            return room

    def get_room(self, code: str) -> Room | None:
        with self._lock:
            return self._rooms.get((code or "").strip().upper())

    def require_room(self, code: str) -> Room:
        room = self.get_room(code)
        if room is None:
            raise NotFoundError("room_not_found", "Room not found")
        return room

    def rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def delete_if_empty(self, code: str) -> bool:
        with self._lock:
            room = self._rooms.get(code)
            if room is None:
                return False
            with room.lock:
                if room.seats:
                    return False
                room.closed = True
                room.generation += 1
                del self._rooms[code]
        logger.info("Destroyed empty room %s", code)
        return True

    def list_open_rooms(self) -> list[dict]:
        summaries = []
        for room in self.rooms():
            with room.lock:
                if room.phase != "waiting" or room.closed:
                    continue
                host = room.host
                summaries.append(
                    {
                        "code": room.code,
                        "playerCount": len(room.seats),
                        "hostName": host.identity if host else "Unknown",
                        "isPrivate": room.is_private,
                        "hasPassword": room.is_private and bool(room.password),
                    }
                )
        return summaries
