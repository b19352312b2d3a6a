import pytest

from lockstep.levels import BUILT_IN_LEVEL_NAMES, builtin_level_list, get_builtin_level, is_builtin
from lockstep.replay import verify_replay
from lockstep.validation import validate_level_text

KNOWN_SOLUTIONS = {
    "map0": ("4r", 4),
    "map1": ("8r", 8),
    "map2": ("5r", 5),
}


def test_manifest_lists_every_named_level_in_order() -> None:
    assert [level["id"] for level in builtin_level_list()] == list(BUILT_IN_LEVEL_NAMES)


@pytest.mark.parametrize("level_id", sorted(KNOWN_SOLUTIONS))
def test_builtin_levels_are_valid_and_solvable(level_id) -> None:
    level = get_builtin_level(level_id)
    assert level["isBuiltIn"] is True
    assert validate_level_text(level["text"]) == level["text"]

    replay, moves = KNOWN_SOLUTIONS[level_id]
    assert verify_replay(level["text"], replay).to_dict() == {"ok": True, "moves": moves}


def test_builtin_lookup_returns_copies() -> None:
    level = get_builtin_level("map0")
    level["text"] = "tampered"
    assert get_builtin_level("map0")["text"] != "tampered"


def test_unknown_builtin() -> None:
    assert get_builtin_level("nope") is None
    assert is_builtin("map1") is True
    assert is_builtin("my-level") is False
