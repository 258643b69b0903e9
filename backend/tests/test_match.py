import random

import pytest

from impostor.game import service
from impostor.game.errors import PreconditionError, RuleViolation, ValidationError

from helpers import civilians, current_turn, play_round, vote_all


# ---- start ----


def test_only_host_can_start(make_room, words):
    room = make_room(4)
    with pytest.raises(PreconditionError) as exc:
        service.prepare_start(room, "p2", words)
    assert exc.value.code == "only_host"
    assert room.phase == "waiting"


def test_start_needs_four_players(make_room, words):
    room = make_room(3)
    with pytest.raises(PreconditionError) as exc:
        service.prepare_start(room, "p1", words)
    assert exc.value.code == "not_enough_players"


def test_cannot_start_twice(make_room, start_match, words):
    room = start_match(make_room(4))
    with pytest.raises(PreconditionError) as exc:
        service.prepare_start(room, "p1", words)
    assert exc.value.code == "wrong_phase"


@pytest.mark.parametrize("seed", range(12))
@pytest.mark.parametrize("players", [4, 6, 8])
def test_exactly_one_impostor_and_shared_word(make_room, words, seed, players):
    room = make_room(players)
    service.prepare_start(room, "p1", words, rng=random.Random(seed))

    impostors = [s for s in room.seats if s.is_impostor]
    assert len(impostors) == 1
    assert impostors[0].identity == room.impostor
    assert impostors[0].word == "Impostor (hint: Triangel)"
    assert {s.word for s in room.seats if not s.is_impostor} == {"Pizza"}


def test_prepare_snapshots_turn_order(make_room, words):
    room = make_room(5)
    generation = service.prepare_start(room, "p1", words, rng=random.Random(3))

    assert room.phase == "starting"
    assert room.generation == generation
    assert room.round == 1
    assert room.turn_order == ["p1", "p2", "p3", "p4", "p5"]
    assert 0 <= room.start_index < 5
    assert room.turn_index == room.start_index
    assert room.countdown_ends_at_ms is not None


def test_activate_ignores_stale_generation(make_room, words):
    room = make_room(4)
    generation = service.prepare_start(room, "p1", words)
    assert service.activate(room, generation - 1) is False
    assert room.phase == "starting"
    assert service.activate(room, generation) is True
    assert room.phase == "playing"
    assert service.activate(room, generation) is False


def test_countdown_timer_after_reset_is_noop(make_room, words):
    room = make_room(4)
    generation = service.prepare_start(room, "p1", words)
    service.reset_to_lobby(room)
    assert service.activate(room, generation) is False
    assert room.phase == "waiting"


# ---- clues ----


def test_round_visits_every_seat_once_in_snapshot_order(make_room, start_match):
    room = start_match(make_room(6), rng=random.Random(5))
    start = room.start_index
    expected = [room.turn_order[(start + k) % 6] for k in range(6)]

    spoken = play_round(room)

    assert spoken == expected
    assert room.phase == "voting_continue"
    assert room.ballots == {}
    assert room.rounds[-1].round == 1
    assert [c.identity for c in room.rounds[-1].clues] == expected


def test_clue_out_of_turn_is_rejected(make_room, start_match):
    room = start_match(make_room(4))
    other = next(i for i in room.turn_order if i != current_turn(room))
    with pytest.raises(PreconditionError) as exc:
        service.submit_clue(room, other, "banana")
    assert exc.value.code == "not_your_turn"
    assert room.clues == []


def test_clue_outside_playing_phase(make_room):
    room = make_room(4)
    with pytest.raises(PreconditionError) as exc:
        service.submit_clue(room, "p1", "hello")
    assert exc.value.code == "wrong_phase"


@pytest.mark.parametrize("text", ["", "   ", "x" * 41])
def test_clue_length_is_validated(make_room, start_match, text):
    room = start_match(make_room(4))
    with pytest.raises(ValidationError):
        service.submit_clue(room, current_turn(room), text)


def _advance_to(room, predicate):
    while not predicate(current_turn(room)):
        service.submit_clue(room, current_turn(room), "something")
        assert room.phase == "playing"


def test_civilian_may_not_say_secret_word(make_room, start_match):
    room = start_match(make_room(4))
    _advance_to(room, lambda ident: ident != room.impostor)
    speaker = current_turn(room)
    before = list(room.clues)

    with pytest.raises(RuleViolation) as exc:
        service.submit_clue(room, speaker, "  PIZZA ")
    assert exc.value.code == "secret_word"
    assert current_turn(room) == speaker
    assert room.clues == before


def test_impostor_saying_secret_word_wins(make_room, start_match):
    room = start_match(make_room(5))
    _advance_to(room, lambda ident: ident == room.impostor)

    result = service.submit_clue(room, room.impostor, "pIzZa")

    assert result.event == "match_finished"
    assert result.finish.impostor_won is True
    assert result.finish.reason == "word_guessed"
    assert result.finish.word == "Pizza"
    assert result.finish.impostor == room.impostor
    assert room.phase == "finished"
    assert room.outcome == result.finish


def test_impostor_may_say_secret_word_out_of_turn(make_room, start_match):
    room = start_match(make_room(5))
    _advance_to(room, lambda ident: ident != room.impostor)

    result = service.submit_clue(room, room.impostor, "Pizza")

    assert result.event == "match_finished"
    assert result.finish.impostor_won is True


# ---- continue vote ----


def test_continue_majority_starts_next_round_at_first_speaker(make_room, start_match):
    room = start_match(make_room(5), rng=random.Random(11))
    play_round(room)

    result = vote_all(room, "continue")

    assert result.event == "round_continues"
    assert room.phase == "playing"
    assert room.round == 2
    assert room.clues == []
    assert room.turn_index == room.start_index
    impostor_seat = room.seat_of(room.impostor)
    assert impostor_seat.word == "Impostor (hints: Triangel, Neapel)"


def test_tied_continue_vote_keeps_playing(make_room, start_match):
    room = start_match(make_room(4))
    play_round(room)
    voters = [s.identity for s in room.seats]

    result = vote_all(
        room,
        "continue",
        overrides={voters[0]: ("guess", None), voters[1]: ("guess", None)},
    )

    assert result.event == "round_continues"
    assert room.phase == "playing"
    assert room.round == 2


def test_guess_majority_moves_to_accusation(make_room, start_match):
    room = start_match(make_room(4))
    play_round(room)
    voters = [s.identity for s in room.seats]

    result = vote_all(room, "guess", overrides={voters[0]: ("continue", None)})

    assert result.event == "accusation_started"
    assert room.phase == "voting_imposter"
    assert room.ballots == {}
    assert room.round == 1


def test_revote_replaces_ballot(make_room, start_match):
    room = start_match(make_room(4))
    play_round(room)
    voters = [s.identity for s in room.seats]

    service.submit_vote(room, voters[0], "continue")
    service.submit_vote(room, voters[0], "guess")
    assert len(room.ballots) == 1
    assert room.ballots[voters[0]].kind == "guess"

    for voter in voters[1:3]:
        service.submit_vote(room, voter, "guess")
    result = service.submit_vote(room, voters[3], "continue")
    assert result.event == "accusation_started"


def test_tally_waits_for_every_active_seat(make_room, start_match):
    room = start_match(make_room(4))
    play_round(room)
    voters = [s.identity for s in room.seats]
    for voter in voters[:3]:
        assert service.submit_vote(room, voter, "guess").event == "vote_recorded"
    assert room.phase == "voting_continue"


def test_vote_kind_must_match_phase(make_room, start_match):
    room = start_match(make_room(4))
    play_round(room)
    with pytest.raises(ValidationError) as exc:
        service.submit_vote(room, "p1", "accuse", "p2")
    assert exc.value.code == "invalid_vote"


def test_vote_outside_voting_phase(make_room, start_match):
    room = start_match(make_room(4))
    with pytest.raises(PreconditionError) as exc:
        service.submit_vote(room, "p1", "continue")
    assert exc.value.code == "wrong_phase"


# ---- accusation vote ----


def _to_accusation(room):
    play_round(room)
    vote_all(room, "guess")
    assert room.phase == "voting_imposter"


def test_clear_plurality_eliminates_civilian(make_room, start_match):
    room = start_match(make_room(4), rng=random.Random(21))
    _to_accusation(room)
    a, b = civilians(room)[:2]
    dissenter = next(s.identity for s in room.seats if s.identity != a)

    result = vote_all(room, "accuse", a, overrides={dissenter: ("accuse", b)})

    assert result.event == "seat_eliminated"
    assert result.eliminated == a
    seat = room.seat_of(a)
    assert seat.is_spectator and seat.word is None
    assert room.phase == "playing"
    assert room.round == 2
    first_active = next(i for i in room.turn_order if not room.seat_of(i).is_spectator)
    assert current_turn(room) == first_active
    assert a not in play_round(room)


def test_split_accusation_eliminates_nobody(make_room, start_match):
    room = start_match(make_room(4))
    _to_accusation(room)
    voters = [s.identity for s in room.seats]
    a, b = voters[0], voters[1]

    result = vote_all(
        room,
        "accuse",
        a,
        overrides={voters[2]: ("accuse", b), voters[3]: ("accuse", b)},
    )

    assert result.event == "accusation_tied"
    assert room.phase == "playing"
    assert room.round == 1
    assert room.clues == []
    assert room.ballots == {}
    assert not any(s.is_spectator for s in room.seats)


def test_unmasking_impostor_ends_match(make_room, start_match):
    room = start_match(make_room(5))
    _to_accusation(room)

    result = vote_all(room, "accuse", room.impostor)

    assert result.event == "match_finished"
    assert result.eliminated == room.impostor
    assert result.finish.impostor_won is False
    assert result.finish.reason == "impostor_found"
    assert room.phase == "finished"


def test_impostor_wins_when_two_players_remain(make_room, start_match):
    room = start_match(make_room(4), rng=random.Random(8))
    _to_accusation(room)
    victim = civilians(room)[0]
    vote_all(room, "accuse", victim)
    assert room.phase == "playing"

    _to_accusation(room)
    victim = civilians(room)[0]
    result = vote_all(room, "accuse", victim)

    assert result.event == "match_finished"
    assert result.finish.impostor_won is True
    assert result.finish.reason == "too_few_players"
    assert result.finish.eliminated == victim
    assert len(room.active_seats()) == 2


def test_spectator_cannot_vote_or_speak(make_room, start_match):
    room = start_match(make_room(5), rng=random.Random(2))
    _to_accusation(room)
    victim = civilians(room)[0]
    vote_all(room, "accuse", victim)

    with pytest.raises(RuleViolation):
        service.submit_clue(room, victim, "hello")

    play_round(room)
    with pytest.raises(RuleViolation) as exc:
        service.submit_vote(room, victim, "continue")
    assert exc.value.code == "spectator"


def test_cannot_accuse_spectator(make_room, start_match):
    room = start_match(make_room(5), rng=random.Random(2))
    _to_accusation(room)
    victim = civilians(room)[0]
    vote_all(room, "accuse", victim)
    _to_accusation(room)

    voter = room.active_seats()[0].identity
    with pytest.raises(ValidationError):
        service.submit_vote(room, voter, "accuse", victim)


def test_rejoining_spectator_stays_spectator(make_room, start_match):
    room = start_match(make_room(5), rng=random.Random(2))
    _to_accusation(room)
    victim = civilians(room)[0]
    vote_all(room, "accuse", victim)

    service.leave(room, victim)
    seat = service.join(room, victim, "sid-again")
    assert seat.is_spectator
    assert seat.word is None
    assert victim not in play_round(room)


# ---- views ----


def test_room_view_hides_other_roles(make_room, start_match):
    room = start_match(make_room(4))
    civilian = civilians(room)[0]

    view = service.room_view(room, viewer=civilian)
    assert view["state"] == "playing"
    assert view["you"]["word"] == "Pizza"
    assert view["you"]["isImpostor"] is False
    assert "outcome" not in view
    assert all("word" not in p for p in view["players"])

    impostor_view = service.room_view(room, viewer=room.impostor)
    assert impostor_view["you"]["isImpostor"] is True
    assert "Pizza" not in str(impostor_view)


def test_room_view_reveals_result_when_finished(make_room, start_match):
    room = start_match(make_room(4))
    _to_accusation(room)
    vote_all(room, "accuse", room.impostor)

    view = service.room_view(room)
    assert view["outcome"]["word"] == "Pizza"
    assert view["outcome"]["imposter"] == room.impostor
    assert view["outcome"]["imposterWon"] is False
