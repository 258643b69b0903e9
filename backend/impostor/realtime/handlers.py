from __future__ import annotations

import functools
import logging
from typing import Any, Callable

from flask import request
from flask_socketio import SocketIO, disconnect, emit, join_room, leave_room

from ..accounts import AccountStore
from ..game import service
from ..game.errors import GameError, PreconditionError
from ..game.models import FinishOutcome, Room
from ..game.registry import RoomRegistry
from ..game.words import WordPool
from ..identity import IdentityDirectory, validate_name
from .timers import RoomTimers

logger = logging.getLogger(__name__)


def command(fn: Callable[[dict], Any]) -> Callable[..., Any]:
    """Run a room command and turn a ``GameError`` into an ack + ``room:error`` for the caller."""

    @functools.wraps(fn)
    def wrapper(data=None):
        payload = data if isinstance(data, dict) else {}
        try:
            return fn(payload)
        except GameError as exc:
            logger.debug("Command %s rejected for %s: %s", fn.__name__, request.sid, exc)
            emit("room:error", exc.to_payload())
            return {"ok": False, **exc.to_payload()}

    return wrapper


def register_socketio_handlers(
    socketio: SocketIO,
    registry: RoomRegistry,
    identities: IdentityDirectory,
    accounts: AccountStore,
    words: WordPool,
    timers: RoomTimers,
    countdown_sec: float = 3,
    results_sec: float = 10,
    grace_sec: float = 15,
) -> None:
    def _broadcast_room_state(room_code: str) -> None:
        room = registry.get_room(room_code)
        if not room:
            return

        with room.lock:
            seats = [(s.identity, s.sid) for s in room.seats]
        for identity, sid in seats:
            socketio.emit("room:state", service.room_view(room, viewer=identity), to=sid)

    def _broadcast_lobby() -> None:
        socketio.emit("lobby:update", {"rooms": registry.list_open_rooms()})

    def _safe(fn: Callable[..., None], *args: Any) -> None:
        # Transitions are already committed; delivery problems are only logged.
        try:
            fn(*args)
        except Exception:
            logger.exception("Broadcast %s failed", fn.__name__)

    def _require_identity() -> str:
        identity = identities.resolve(request.sid)
        if identity is None:
            raise PreconditionError("not_identified", "Choose a name first")
        return identity

    def _room_of(identity: str) -> Room:
        code = identities.room_of(identity)
        if not code:
            raise PreconditionError("not_in_room", "You are not in a room")
        return registry.require_room(code)

    # ---- deferred transitions ----

    def _activate_room(room: Room, generation: int) -> None:
        if not service.activate(room, generation):
            return
        with room.lock:
            seats = [(s.sid, s.word, s.is_impostor) for s in room.seats]
            current = room.turn_order[room.turn_index] if room.turn_order else None
            round_no = room.round
        for sid, word, is_impostor in seats:
            socketio.emit(
                "game:started",
                {
                    "roomCode": room.code,
                    "word": word,
                    "isImposter": is_impostor,
                    "currentPlayer": current,
                    "round": round_no,
                },
                to=sid,
            )
        _safe(_broadcast_room_state, room.code)

    def _reset_room(room: Room, generation: int) -> None:
        if not service.reset_to_lobby(room, generation=generation):
            return
        logger.info("Room %s back in lobby", room.code)
        _safe(_broadcast_room_state, room.code)
        _safe(_broadcast_lobby)

    def _on_finished(room: Room, finish: FinishOutcome) -> None:
        with room.lock:
            participants = list(room.participants)
            generation = room.generation
        accounts.record_finish(finish, participants)
        socketio.emit(
            "game:finished",
            {
                "roomCode": room.code,
                "imposterWon": finish.impostor_won,
                "imposter": finish.impostor,
                "word": finish.word,
                "eliminated": finish.eliminated,
                "reason": finish.reason,
            },
            to=room.code,
        )
        timers.schedule(room.code, generation, results_sec, _reset_room)

    def _after_transition(room: Room, event: str | None, finish: FinishOutcome | None) -> None:
        if finish is not None:
            _on_finished(room, finish)
        elif event == "round_complete":
            with room.lock:
                last = room.rounds[-1] if room.rounds else None
            socketio.emit(
                "round:complete",
                {
                    "roomCode": room.code,
                    "round": last.round if last else None,
                    "words": [{"player": c.identity, "word": c.text} for c in last.clues] if last else [],
                },
                to=room.code,
            )
        elif event is not None:
            socketio.emit("vote:update", {"roomCode": room.code, "event": event}, to=room.code)

    def _depart(identity: str, room_code: str, sid: str | None) -> None:
        identities.clear_room(identity)
        room = registry.get_room(room_code)
        if room is None:
            return

        if sid is not None:
            leave_room(room_code, sid=sid)
        try:
            outcome = service.leave(room, identity)
        except GameError as exc:
            logger.info("Departure of %s from %s ignored: %s", identity, room_code, exc)
            return

        if outcome.room_empty:
            timers.cancel(room_code)
            registry.delete_if_empty(room_code)
        else:
            _after_transition(room, outcome.event, outcome.finish)
            _safe(_broadcast_room_state, room_code)
        _safe(_broadcast_lobby)

    # identity -> sid whose drop is pending; a later drop supersedes an earlier one.
    dropped: dict[str, str] = {}

    def _depart_unless_back(identity: str, room_code: str, sid: str) -> None:
        socketio.sleep(grace_sec)
        if dropped.get(identity) != sid:
            return
        del dropped[identity]
        if identities.sid_of(identity) is not None or identities.room_of(identity) != room_code:
            return
        logger.info("%s did not come back to room %s", identity, room_code)
        _depart(identity, room_code, None)

    # ---- connection lifecycle ----

    @socketio.on("connect")
    def on_connect(auth=None):
        emit("lobby:update", {"rooms": registry.list_open_rooms()})

    @socketio.on("session:identify")
    @command
    def session_identify(payload: dict):
        name = validate_name(str(payload.get("name", "")))
        current = identities.resolve(request.sid)
        if current is not None and current != name:
            raise PreconditionError("already_identified", f"This connection already plays as {current}")

        old_sid = identities.bind(name, request.sid)
        room_code = identities.room_of(name)

        if old_sid:
            # The previous transport is already unbound; make sure it stops receiving room traffic.
            emit("session:replaced", {"name": name}, to=old_sid)
            if room_code:
                leave_room(room_code, sid=old_sid)
            disconnect(sid=old_sid)

        if room_code:
            room = registry.get_room(room_code)
            if room is not None and service.attach_sid(room, name, request.sid) is not None:
                join_room(room_code)
                logger.info("%s reattached to room %s", name, room_code)
                _safe(_broadcast_room_state, room_code)
            else:
                identities.clear_room(name)
                room_code = None

        return {"ok": True, "name": name, "roomCode": room_code}

    @socketio.on("disconnect")
    def on_disconnect(*args):
        sid = request.sid
        identity = identities.release(sid)
        if identity is None:
            return
        room_code = identities.room_of(identity)
        if not room_code:
            return
        if grace_sec <= 0:
            _depart(identity, room_code, sid)
            return
        leave_room(room_code, sid=sid)
        logger.info("%s dropped from room %s, holding seat for %ss", identity, room_code, grace_sec)
        dropped[identity] = sid
        socketio.start_background_task(_depart_unless_back, identity, room_code, sid)

    # ---- lobby ----

    @socketio.on("lobby:list")
    @command
    def lobby_list(payload: dict):
        return {"ok": True, "rooms": registry.list_open_rooms()}

    @socketio.on("room:create")
    @command
    def room_create(payload: dict):
        identity = _require_identity()
        if identities.is_in_any_room(identity):
            raise PreconditionError("already_in_room", "You are already in a game")

        is_private = bool(payload.get("isPrivate"))
        password = str(payload.get("password") or "").strip() or None

        room = registry.create_room(is_private=is_private, password=password)
        if not identities.claim_room(identity, room.code):
            registry.delete_if_empty(room.code)
            raise PreconditionError("already_in_room", "You are already in a game")

        try:
            service.join(room, identity, request.sid, password=password)
        except GameError:
            identities.clear_room(identity)
            registry.delete_if_empty(room.code)
            raise
        join_room(room.code)

        _safe(_broadcast_room_state, room.code)
        _safe(_broadcast_lobby)
        return {"ok": True, "roomCode": room.code}

    @socketio.on("room:join")
    @command
    def room_join(payload: dict):
        identity = _require_identity()
        room_code = str(payload.get("roomCode", "")).strip().upper()
        password = payload.get("password")
        room = registry.require_room(room_code)

        already_here = identities.room_of(identity) == room.code
        if not identities.claim_room(identity, room.code):
            raise PreconditionError("already_in_room", "You are already in another game")

        try:
            service.join(room, identity, request.sid, password=str(password) if password is not None else None)
        except GameError:
            if not already_here:
                identities.clear_room(identity)
            raise

        join_room(room.code)
        _safe(_broadcast_room_state, room.code)
        _safe(_broadcast_lobby)
        return {"ok": True, "roomCode": room.code}

    @socketio.on("room:leave")
    @command
    def room_leave(payload: dict):
        identity = _require_identity()
        room = _room_of(identity)
        _depart(identity, room.code, request.sid)
        return {"ok": True}

    # ---- match ----

    @socketio.on("game:start")
    @command
    def game_start(payload: dict):
        identity = _require_identity()
        room = _room_of(identity)

        generation = service.prepare_start(room, identity, words)
        socketio.emit(
            "game:countdown",
            {"roomCode": room.code, "seconds": countdown_sec, "endsAtMs": room.countdown_ends_at_ms},
            to=room.code,
        )
        _safe(_broadcast_room_state, room.code)
        _safe(_broadcast_lobby)
        timers.schedule(room.code, generation, countdown_sec, _activate_room)
        return {"ok": True}

    @socketio.on("clue:submit")
    @command
    def clue_submit(payload: dict):
        identity = _require_identity()
        room = _room_of(identity)

        result = service.submit_clue(room, identity, str(payload.get("text", payload.get("word", ""))))
        if result.clue is not None:
            socketio.emit(
                "clue:submitted",
                {"roomCode": room.code, "player": result.clue.identity, "word": result.clue.text},
                to=room.code,
            )
        if result.event != "clue_recorded":
            _after_transition(room, result.event, result.finish)
        _safe(_broadcast_room_state, room.code)
        return {"ok": True, "event": result.event}

    @socketio.on("vote:submit")
    @command
    def vote_submit(payload: dict):
        identity = _require_identity()
        room = _room_of(identity)

        kind = str(payload.get("kind", payload.get("voteType", "")))
        target = payload.get("target", payload.get("targetPlayerId"))
        result = service.submit_vote(room, identity, kind, str(target) if target is not None else None)

        if result.event != "vote_recorded":
            _after_transition(room, result.event, result.finish)
        _safe(_broadcast_room_state, room.code)
        return {"ok": True, "event": result.event, "eliminated": result.eliminated}
