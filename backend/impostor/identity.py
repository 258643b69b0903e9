from __future__ import annotations

import logging
import re
from threading import RLock

from .config import Config
from .game.errors import ValidationError

logger = logging.getLogger(__name__)


def validate_name(name: str, max_length: int | None = None) -> str:
    n = (name or "").strip()
    limit = max_length or Config.MAX_NAME_LENGTH
    if not n or len(n) > limit:
        raise ValidationError("invalid_name", f"Name must be between 1 and {limit} characters")
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        raise ValidationError("invalid_name", "Name contains forbidden characters")
    # No control characters.
    if re.search(r"[\x00-\x1f]", n):
        raise ValidationError("invalid_name", "Name contains forbidden characters")
    return n


class IdentityDirectory:
    """Maps account names to their live transport sid and current room.

    One identity has at most one sid. Binding a new sid drops the old mapping
    first, so a stale transport can no longer act for the identity.
    """

    def __init__(self):
        self._lock = RLock()
        self._sid_by_identity: dict[str, str] = {}
        self._identity_by_sid: dict[str, str] = {}
        self._room_by_identity: dict[str, str] = {}

    def resolve(self, sid: str) -> str | None:
        with self._lock:
            return self._identity_by_sid.get(sid)

    def sid_of(self, identity: str) -> str | None:
        with self._lock:
            return self._sid_by_identity.get(identity)

    def bind(self, identity: str, sid: str) -> str | None:
        """Attach ``sid`` to ``identity``. Returns the sid it replaced, if any."""
        with self._lock:
            previous_identity = self._identity_by_sid.get(sid)
            if previous_identity is not None and previous_identity != identity:
                self._sid_by_identity.pop(previous_identity, None)

            old_sid = self._sid_by_identity.get(identity)
            if old_sid is not None and old_sid != sid:
                self._identity_by_sid.pop(old_sid, None)
                logger.info("Identity %s replaced session %s with %s", identity, old_sid, sid)
            else:
                old_sid = None

            self._sid_by_identity[identity] = sid
            self._identity_by_sid[sid] = identity
            return old_sid

    def release(self, sid: str) -> str | None:
        """Forget ``sid``. Returns the identity it was bound to."""
        with self._lock:
            identity = self._identity_by_sid.pop(sid, None)
            if identity is not None and self._sid_by_identity.get(identity) == sid:
                del self._sid_by_identity[identity]
            return identity

    def room_of(self, identity: str) -> str | None:
        with self._lock:
            return self._room_by_identity.get(identity)

    def is_in_any_room(self, identity: str) -> bool:
        with self._lock:
            return identity in self._room_by_identity

    def claim_room(self, identity: str, code: str) -> bool:
        """Mark ``identity`` as being in ``code`` unless it is already in another room."""
        with self._lock:
            current = self._room_by_identity.get(identity)
            if current is not None and current != code:
                return False
            self._room_by_identity[identity] = code
            return True

    def mark_in_room(self, identity: str, code: str) -> None:
        with self._lock:
            self._room_by_identity[identity] = code

    def clear_room(self, identity: str) -> None:
        with self._lock:
            self._room_by_identity.pop(identity, None)
