from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import Literal


Phase = Literal["waiting", "starting", "playing", "voting_continue", "voting_imposter", "finished"]

VoteKind = Literal["continue", "guess", "accuse"]

FinishReason = Literal["word_guessed", "impostor_found", "too_few_players"]

VOTING_PHASES = ("voting_continue", "voting_imposter")


@dataclass(frozen=True)
class WordEntry:
    word: str
    hint: str
    hint_extra: str


@dataclass
class Seat:
    identity: str
    sid: str
    is_host: bool = False
    word: str | None = None
    is_impostor: bool = False
    is_spectator: bool = False


@dataclass
class Participant:
    """Everything a departed identity needs to get back into its match."""

    identity: str
    is_spectator: bool = False


@dataclass(frozen=True)
class Clue:
    identity: str
    text: str


@dataclass
class RoundRecord:
    round: int
    clues: list[Clue] = field(default_factory=list)


@dataclass(frozen=True)
class Ballot:
    voter: str
    kind: VoteKind
    target: str | None = None


@dataclass(frozen=True)
class FinishOutcome:
    impostor_won: bool
    impostor: str | None
    word: str | None
    reason: FinishReason
    eliminated: str | None = None


@dataclass(frozen=True)
class ClueOutcome:
    """Result of an accepted clue.

    ``event`` is one of ``clue_recorded``, ``round_complete`` or
    ``match_finished``.
    """

    event: str
    clue: Clue | None = None
    finish: FinishOutcome | None = None


@dataclass(frozen=True)
class VoteOutcome:
    """Result of an accepted ballot.

    ``event`` is ``vote_recorded`` until every active seat has voted, then one
    of ``round_continues``, ``accusation_started``, ``accusation_tied``,
    ``seat_eliminated`` or ``match_finished``.
    """

    event: str
    eliminated: str | None = None
    finish: FinishOutcome | None = None


@dataclass(frozen=True)
class LeaveOutcome:
    """Result of a departure; ``event`` names any transition it triggered."""

    room_empty: bool
    event: str | None = None
    finish: FinishOutcome | None = None


@dataclass
class Room:
    code: str
    is_private: bool = False
    password: str | None = None
    phase: Phase = "waiting"
    generation: int = 0
    closed: bool = False
    round: int = 0
    seats: list[Seat] = field(default_factory=list)
    participants: dict[str, Participant] = field(default_factory=dict)
    word: str | None = None
    hint: str | None = None
    hint_extra: str | None = None
    impostor: str | None = None
    # Identities in seat order at game start; turn rotation always walks this list.
    turn_order: list[str] = field(default_factory=list)
    start_index: int = 0
    turn_index: int = 0
    clues: list[Clue] = field(default_factory=list)
    rounds: list[RoundRecord] = field(default_factory=list)
    ballots: dict[str, Ballot] = field(default_factory=dict)
    outcome: FinishOutcome | None = None
    created_at_ms: int | None = None
    countdown_ends_at_ms: int | None = None
    results_ends_at_ms: int | None = None
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def seat_of(self, identity: str) -> Seat | None:
        for seat in self.seats:
            if seat.identity == identity:
                return seat
        return None

    @property
    def host(self) -> Seat | None:
        for seat in self.seats:
            if seat.is_host:
                return seat
        return None

    def active_seats(self) -> list[Seat]:
        return [s for s in self.seats if not s.is_spectator]
