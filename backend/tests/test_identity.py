import pytest

from impostor.game.errors import ValidationError
from impostor.identity import IdentityDirectory, validate_name


def test_bind_and_resolve():
    directory = IdentityDirectory()
    assert directory.bind("alice", "sid-1") is None
    assert directory.resolve("sid-1") == "alice"
    assert directory.sid_of("alice") == "sid-1"


def test_rebinding_invalidates_old_sid():
    directory = IdentityDirectory()
    directory.bind("alice", "sid-1")

    assert directory.bind("alice", "sid-2") == "sid-1"
    assert directory.resolve("sid-1") is None
    assert directory.resolve("sid-2") == "alice"

    # The stale transport going away must not unbind the new one.
    assert directory.release("sid-1") is None
    assert directory.sid_of("alice") == "sid-2"


def test_release_forgets_sid_but_keeps_room():
    directory = IdentityDirectory()
    directory.bind("alice", "sid-1")
    directory.mark_in_room("alice", "ROOM01")

    assert directory.release("sid-1") == "alice"
    assert directory.sid_of("alice") is None
    assert directory.room_of("alice") == "ROOM01"


def test_single_room_per_identity():
    directory = IdentityDirectory()
    assert directory.claim_room("alice", "AAAAAA")
    assert directory.claim_room("alice", "AAAAAA")
    assert not directory.claim_room("alice", "BBBBBB")
    assert directory.is_in_any_room("alice")

    directory.clear_room("alice")
    assert not directory.is_in_any_room("alice")
    assert directory.claim_room("alice", "BBBBBB")


@pytest.mark.parametrize("name", ["", "   ", "x" * 17, "<script>", "tab\tname"])
def test_invalid_names(name):
    with pytest.raises(ValidationError):
        validate_name(name)


def test_name_is_trimmed():
    assert validate_name("  Mia ") == "Mia"
