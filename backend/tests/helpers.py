from impostor.game import service


def current_turn(room):
    return room.turn_order[room.turn_index]


def play_round(room):
    """Have every remaining player give a harmless clue, in turn order."""
    spoken = []
    while room.phase == "playing":
        identity = current_turn(room)
        service.submit_clue(room, identity, f"clue-{identity}")
        spoken.append(identity)
    return spoken


def civilians(room):
    return [s.identity for s in room.active_seats() if s.identity != room.impostor]


def vote_all(room, kind, target=None, overrides=None):
    """Cast a ballot for every active seat; ``overrides`` maps voter -> (kind, target)."""
    overrides = overrides or {}
    result = None
    for seat in list(room.active_seats()):
        k, t = overrides.get(seat.identity, (kind, target))
        result = service.submit_vote(room, seat.identity, k, t)
        if room.phase not in ("voting_continue", "voting_imposter"):
            break
    return result


