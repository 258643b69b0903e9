from __future__ import annotations

import logging
from threading import RLock
from typing import Callable

from flask_socketio import SocketIO

from ..game.models import Room
from ..game.registry import RoomRegistry

logger = logging.getLogger(__name__)

TimerCallback = Callable[[Room, int], None]


class RoomTimers:
    """Deferred room transitions tagged with the room generation.

    A timer only fires if the room still exists, is still on the generation
    it was scheduled for and has not been cancelled. A delay of zero or less
    runs the callback inline.
    """

    def __init__(self, socketio: SocketIO, registry: RoomRegistry):
        self.socketio = socketio
        self.registry = registry
        self._lock = RLock()
        self._pending: dict[str, int] = {}

    def schedule(self, code: str, generation: int, delay_sec: float, callback: TimerCallback) -> None:
        with self._lock:
            self._pending[code] = generation
        logger.info("[timer-set] room=%s generation=%d delay=%ss", code, generation, delay_sec)

        if delay_sec <= 0:
            self._fire(code, generation, callback)
            return
        self.socketio.start_background_task(self._runner, code, generation, delay_sec, callback)

    def cancel(self, code: str) -> None:
        with self._lock:
            self._pending.pop(code, None)

    def is_pending(self, code: str) -> bool:
        with self._lock:
            return code in self._pending

    def _runner(self, code: str, generation: int, delay_sec: float, callback: TimerCallback) -> None:
        self.socketio.sleep(delay_sec)
        self._fire(code, generation, callback)

    def _fire(self, code: str, generation: int, callback: TimerCallback) -> None:
        with self._lock:
            if self._pending.get(code) != generation:
                logger.info("[timer-abort] room=%s generation=%d cancelled or superseded", code, generation)
                return
            del self._pending[code]

        room = self.registry.get_room(code)
        if room is None or room.closed or room.generation != generation:
            logger.info("[timer-abort] room=%s generation=%d room gone or moved on", code, generation)
            return

        try:
            callback(room, generation)
        except Exception:
            logger.exception("[timer-error] room=%s generation=%d", code, generation)
