from __future__ import annotations

import logging
import random
import time

from ..config import Config
from .errors import NotFoundError, PreconditionError, RuleViolation, ValidationError
from .models import (
    VOTING_PHASES,
    Ballot,
    Clue,
    ClueOutcome,
    FinishOutcome,
    LeaveOutcome,
    Participant,
    Room,
    RoundRecord,
    Seat,
    VoteOutcome,
)
from .words import WordPool

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


# ---- helpers (callers hold room.lock) ----


def _role_text(room: Room, identity: str) -> str | None:
    if room.word is None:
        return None
    if identity == room.impostor:
        if room.round >= 2 and room.hint_extra:
            return f"Impostor (hints: {room.hint}, {room.hint_extra})"
        return f"Impostor (hint: {room.hint})"
    return room.word


def _require_seat(room: Room, identity: str) -> Seat:
    seat = room.seat_of(identity)
    if seat is None:
        raise PreconditionError("not_in_room", "You are not in this room")
    return seat


def _current_identity(room: Room) -> str | None:
    if not room.turn_order:
        return None
    return room.turn_order[room.turn_index]


def _next_turn(room: Room, start: int) -> int | None:
    """First snapshot index at or after ``start`` (cyclic) that still owes a clue."""
    n = len(room.turn_order)
    submitted = {c.identity for c in room.clues}
    for k in range(n):
        idx = (start + k) % n
        seat = room.seat_of(room.turn_order[idx])
        if seat is not None and not seat.is_spectator and seat.identity not in submitted:
            return idx
    return None


def _insert_seat(room: Room, seat: Seat) -> None:
    # Keep the seat list in snapshot order so rejoining players land where they sat.
    if seat.identity in room.turn_order:
        pos = room.turn_order.index(seat.identity)
        for i, other in enumerate(room.seats):
            if other.identity in room.turn_order and room.turn_order.index(other.identity) > pos:
                room.seats.insert(i, seat)
                return
    room.seats.append(seat)


def _set_spectator(room: Room, identity: str) -> None:
    seat = room.seat_of(identity)
    if seat is not None:
        seat.is_spectator = True
        seat.word = None
    room.participants.setdefault(identity, Participant(identity=identity)).is_spectator = True


def _refresh_roles(room: Room) -> None:
    for seat in room.seats:
        seat.is_impostor = seat.identity == room.impostor
        seat.word = None if seat.is_spectator else _role_text(room, seat.identity)


def _start_round(room: Room, from_index: int) -> None:
    room.phase = "playing"
    room.clues = []
    room.ballots = {}
    _refresh_roles(room)
    nxt = _next_turn(room, from_index) if room.turn_order else None
    room.turn_index = nxt if nxt is not None else from_index


def _complete_round(room: Room) -> None:
    room.rounds.append(RoundRecord(round=room.round, clues=list(room.clues)))
    room.phase = "voting_continue"
    room.ballots = {}


def _round_done(room: Room) -> bool:
    active = room.active_seats()
    submitted = {c.identity for c in room.clues}
    return bool(active) and all(s.identity in submitted for s in active)


def _finish(room: Room, impostor_won: bool, reason: str, eliminated: str | None = None) -> FinishOutcome:
    outcome = FinishOutcome(
        impostor_won=impostor_won,
        impostor=room.impostor,
        word=room.word,
        reason=reason,  # type: ignore[arg-type]
        eliminated=eliminated,
    )
    room.phase = "finished"
    room.generation += 1
    room.outcome = outcome
    room.ballots = {}
    room.results_ends_at_ms = now_ms() + (Config.RESULTS_DURATION_SEC * 1000)
    logger.info(
        "Room %s finished: impostor=%s won=%s reason=%s",
        room.code,
        room.impostor,
        impostor_won,
        reason,
    )
    return outcome


def _plurality(counts: dict[str, int]) -> str | None:
    if not counts:
        return None
    best = max(counts.values())
    leaders = [target for target, count in counts.items() if count == best]
    if best <= 0 or len(leaders) != 1:
        return None
    return leaders[0]


def _tally_continue(room: Room, ballots: list[Ballot]) -> VoteOutcome:
    guess = sum(1 for b in ballots if b.kind == "guess")
    keep_going = sum(1 for b in ballots if b.kind == "continue")
    if guess > keep_going:
        room.phase = "voting_imposter"
        room.ballots = {}
        return VoteOutcome(event="accusation_started")

    room.round += 1
    _start_round(room, room.start_index)
    return VoteOutcome(event="round_continues")


def _tally_accusation(room: Room, ballots: list[Ballot]) -> VoteOutcome:
    counts: dict[str, int] = {}
    active = {s.identity for s in room.active_seats()}
    for b in ballots:
        if b.target in active:
            counts[b.target] = counts.get(b.target, 0) + 1

    accused = _plurality(counts)
    if accused is None:
        _start_round(room, room.start_index)
        return VoteOutcome(event="accusation_tied")

    if accused == room.impostor:
        finish = _finish(room, impostor_won=False, reason="impostor_found", eliminated=accused)
        return VoteOutcome(event="match_finished", eliminated=accused, finish=finish)

    _set_spectator(room, accused)
    room.round += 1
    logger.info("Room %s eliminated %s", room.code, accused)
    if len(room.active_seats()) <= 2:
        finish = _finish(room, impostor_won=True, reason="too_few_players", eliminated=accused)
        return VoteOutcome(event="match_finished", eliminated=accused, finish=finish)

    _start_round(room, 0)
    return VoteOutcome(event="seat_eliminated", eliminated=accused)


def _maybe_tally(room: Room) -> VoteOutcome | None:
    active = room.active_seats()
    if not active or any(s.identity not in room.ballots for s in active):
        return None
    ballots = [room.ballots[s.identity] for s in active]
    if room.phase == "voting_continue":
        return _tally_continue(room, ballots)
    return _tally_accusation(room, ballots)


# ---- membership ----


def join(room: Room, identity: str, sid: str, password: str | None = None) -> Seat:
    with room.lock:
        if room.closed:
            raise NotFoundError("room_not_found", "Room not found")

        seat = room.seat_of(identity)
        if seat is not None:
            seat.sid = sid
            return seat

        if len(room.seats) >= Config.MAX_SEATS:
            raise PreconditionError("room_full", "Room is full")

        returning = identity in room.participants
        if not returning:
            if room.phase != "waiting":
                raise PreconditionError("game_in_progress", "Game already started")
            if room.is_private and (room.password or "") != (password or ""):
                raise PreconditionError("wrong_password", "Wrong password")

        participant = room.participants.setdefault(identity, Participant(identity=identity))
        seat = Seat(identity=identity, sid=sid, is_host=not room.seats)
        if room.word is not None:
            seat.is_impostor = identity == room.impostor
            seat.is_spectator = participant.is_spectator
            seat.word = None if seat.is_spectator else _role_text(room, identity)
        _insert_seat(room, seat)

        if room.phase == "playing" and _current_identity(room) is not None:
            current = room.seat_of(_current_identity(room))
            if current is None or current.is_spectator:
                nxt = _next_turn(room, room.turn_index)
                if nxt is not None:
                    room.turn_index = nxt

        if returning and room.phase != "waiting":
            logger.info("%s rejoined room %s", identity, room.code)
        return seat


def attach_sid(room: Room, identity: str, sid: str) -> Seat | None:
    with room.lock:
        seat = room.seat_of(identity)
        if seat is not None:
            seat.sid = sid
        return seat


def leave(room: Room, identity: str) -> LeaveOutcome:
    with room.lock:
        seat = _require_seat(room, identity)
        held_turn = room.phase == "playing" and _current_identity(room) == identity

        room.seats.remove(seat)
        room.participants.setdefault(identity, Participant(identity=identity)).is_spectator = seat.is_spectator
        room.ballots.pop(identity, None)
        if room.phase == "voting_imposter":
            # Accusations against someone who left are void; those voters vote again.
            room.ballots = {v: b for v, b in room.ballots.items() if b.target != identity}

        if seat.is_host and room.seats:
            room.seats[0].is_host = True

        if not room.seats:
            return LeaveOutcome(room_empty=True)

        if room.phase == "playing":
            if held_turn:
                nxt = _next_turn(room, room.turn_index + 1)
                if nxt is not None:
                    room.turn_index = nxt
            if _round_done(room):
                _complete_round(room)
                return LeaveOutcome(room_empty=False, event="round_complete")
        elif room.phase in VOTING_PHASES:
            outcome = _maybe_tally(room)
            if outcome is not None:
                return LeaveOutcome(room_empty=False, event=outcome.event, finish=outcome.finish)

        return LeaveOutcome(room_empty=False)


# ---- match lifecycle ----


def prepare_start(room: Room, requester: str, words: WordPool, rng: random.Random | None = None) -> int:
    """Assign roles and enter the countdown. Returns the new room generation."""
    rng = rng or random.Random()
    with room.lock:
        seat = _require_seat(room, requester)
        if not seat.is_host:
            raise PreconditionError("only_host", "Only the host can start the game")
        if room.phase != "waiting":
            raise PreconditionError("wrong_phase", "Game already started")
        if len(room.active_seats()) < Config.MIN_PLAYERS:
            raise PreconditionError(
                "not_enough_players",
                f"At least {Config.MIN_PLAYERS} players are needed",
            )

        entry = words.pick_random_entry()
        impostor = rng.choice(room.seats)

        room.word = entry.word
        room.hint = entry.hint
        room.hint_extra = entry.hint_extra
        room.impostor = impostor.identity
        room.round = 1
        room.clues = []
        room.rounds = []
        room.ballots = {}
        room.outcome = None
        room.results_ends_at_ms = None
        room.participants = {s.identity: Participant(identity=s.identity) for s in room.seats}
        room.turn_order = [s.identity for s in room.seats]
        room.start_index = rng.randrange(len(room.turn_order))
        room.turn_index = room.start_index

        for s in room.seats:
            s.is_spectator = False
        _refresh_roles(room)

        room.generation += 1
        room.phase = "starting"
        room.countdown_ends_at_ms = now_ms() + (Config.COUNTDOWN_SEC * 1000)
        logger.info(
            "Room %s starting with %d players (generation %d)",
            room.code,
            len(room.seats),
            room.generation,
        )
        return room.generation


def activate(room: Room, generation: int) -> bool:
    with room.lock:
        if room.closed or room.generation != generation or room.phase != "starting":
            return False
        room.phase = "playing"
        room.countdown_ends_at_ms = None
        nxt = _next_turn(room, room.start_index)
        if nxt is not None:
            room.turn_index = nxt
        return True


def submit_clue(room: Room, identity: str, text: str) -> ClueOutcome:
    with room.lock:
        if room.phase != "playing":
            raise PreconditionError("wrong_phase", "It is not time for clues")
        seat = _require_seat(room, identity)
        if seat.is_spectator:
            raise RuleViolation("spectator", "Spectators cannot give clues")

        clue = (text or "").strip()
        says_word = bool(room.word) and clue.casefold() == room.word.casefold()

        # The impostor may blurt out the word at any point of the round.
        if says_word and identity == room.impostor:
            finish = _finish(room, impostor_won=True, reason="word_guessed")
            return ClueOutcome(event="match_finished", finish=finish)

        if _current_identity(room) != identity:
            raise PreconditionError("not_your_turn", "It is not your turn")
        if not clue or len(clue) > Config.MAX_CLUE_LENGTH:
            raise ValidationError("invalid_clue", "Clue must be between 1 and %d characters" % Config.MAX_CLUE_LENGTH)
        if says_word:
            raise RuleViolation("secret_word", "You must not say the secret word")

        record = Clue(identity=identity, text=clue)
        room.clues.append(record)

        nxt = _next_turn(room, room.turn_index + 1)
        if nxt is None:
            _complete_round(room)
            return ClueOutcome(event="round_complete", clue=record)

        room.turn_index = nxt
        return ClueOutcome(event="clue_recorded", clue=record)


def submit_vote(room: Room, identity: str, kind: str, target: str | None = None) -> VoteOutcome:
    with room.lock:
        if room.phase not in VOTING_PHASES:
            raise PreconditionError("wrong_phase", "There is no vote running")
        seat = _require_seat(room, identity)
        if seat.is_spectator:
            raise RuleViolation("spectator", "Spectators cannot vote")

        kind = (kind or "").strip().lower()
        if room.phase == "voting_continue":
            if kind not in ("continue", "guess"):
                raise ValidationError("invalid_vote", "Vote 'continue' or 'guess'")
            ballot = Ballot(voter=identity, kind=kind)  # type: ignore[arg-type]
        else:
            if kind not in ("accuse", ""):
                raise ValidationError("invalid_vote", "Pick a player to accuse")
            target_seat = room.seat_of(target or "")
            if target_seat is None or target_seat.is_spectator:
                raise ValidationError("invalid_vote", "Pick a player to accuse")
            ballot = Ballot(voter=identity, kind="accuse", target=target_seat.identity)

        room.ballots[identity] = ballot
        outcome = _maybe_tally(room)
        return outcome or VoteOutcome(event="vote_recorded")


def reset_to_lobby(room: Room, generation: int | None = None) -> bool:
    with room.lock:
        if generation is not None:
            if room.closed or room.generation != generation or room.phase != "finished":
                return False

        room.phase = "waiting"
        room.word = None
        room.hint = None
        room.hint_extra = None
        room.impostor = None
        room.round = 0
        room.turn_order = []
        room.start_index = 0
        room.turn_index = 0
        room.clues = []
        room.rounds = []
        room.ballots = {}
        room.outcome = None
        room.countdown_ends_at_ms = None
        room.results_ends_at_ms = None
        room.participants = {s.identity: Participant(identity=s.identity) for s in room.seats}
        for seat in room.seats:
            seat.word = None
            seat.is_impostor = False
            seat.is_spectator = False
        room.generation += 1
        return True


# ---- views ----


def room_view(room: Room, viewer: str | None = None) -> dict:
    with room.lock:
        submitted = {c.identity for c in room.clues}
        active = room.active_seats()

        players = []
        for s in room.seats:
            players.append(
                {
                    "name": s.identity,
                    "isHost": s.is_host,
                    "isSpectator": s.is_spectator,
                    "hasSubmitted": s.identity in submitted,
                    "hasVoted": s.identity in room.ballots,
                }
            )

        payload = {
            "code": room.code,
            "isPrivate": room.is_private,
            "hasPassword": room.is_private and bool(room.password),
            "state": room.phase,
            "round": room.round,
            "players": players,
            "turnOrder": list(room.turn_order),
            "currentPlayer": _current_identity(room) if room.phase == "playing" else None,
            "words": [{"player": c.identity, "word": c.text} for c in room.clues],
            "allRounds": [
                {"round": r.round, "words": [{"player": c.identity, "word": c.text} for c in r.clues]}
                for r in room.rounds
            ],
            "votes": [
                {"player": b.voter, "voteType": b.kind, "target": b.target}
                for b in room.ballots.values()
            ],
            "votesNeeded": len(active) if room.phase in VOTING_PHASES else 0,
            "countdownEndsAtMs": room.countdown_ends_at_ms,
            "resultsEndsAtMs": room.results_ends_at_ms,
        }

        seat = room.seat_of(viewer) if viewer else None
        if seat is not None:
            payload["you"] = {
                "name": seat.identity,
                "isHost": seat.is_host,
                "word": seat.word,
                "isImpostor": seat.is_impostor,
                "isSpectator": seat.is_spectator,
            }

        if room.phase == "finished" and room.outcome is not None:
            payload["outcome"] = {
                "imposterWon": room.outcome.impostor_won,
                "imposter": room.outcome.impostor,
                "word": room.outcome.word,
                "eliminated": room.outcome.eliminated,
                "reason": room.outcome.reason,
            }

        return payload
