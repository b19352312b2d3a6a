import pytest

from lockstep.replay import MalformedLevel, load_level
from lockstep.replay.grid import tile_phase


def test_load_level_scans_players_and_enemies_in_row_major_order() -> None:
    level = load_level("#####\n#P1P#\n#1 2#\n#####")

    assert level.width == 5
    assert level.height == 4
    assert level.player_spawns == [(1, 1), (3, 1)]
    assert level.enemy_spawns == [(2, 1), (1, 2)]


def test_only_value_one_tiles_spawn_enemies() -> None:
    level = load_level("#####\n#P2!#\n#####")
    assert level.enemy_spawns == []
    assert level.phases[1][2] == 2


def test_phase_overlay_is_none_for_non_numeric_tiles() -> None:
    level = load_level("###\n#P#\n#x!")
    assert level.phases == [[None] * 3, [None, None, None], [None, None, None]]


def test_trailing_newline_and_carriage_returns_are_ignored() -> None:
    level = load_level("###\r\n#P#\r\n###\n")
    assert level.height == 3
    assert level.to_text() == "###\n#P#\n###"


@pytest.mark.parametrize(
    "text",
    ["", "\n", "###\n#P##\n###", "###\n#P#\n\n", "#####\n#  !#\n#####", None],
)
def test_malformed_levels(text) -> None:
    with pytest.raises(MalformedLevel):
        load_level(text)


def test_tile_phase() -> None:
    assert tile_phase("7") == 7
    assert tile_phase("0") == 0
    assert tile_phase("P") is None
    assert tile_phase(" ") is None


def test_copy_phases_is_independent() -> None:
    level = load_level("#####\n#P12#\n#####")
    phases = level.copy_phases()
    phases[1][2] = 17
    assert level.phases[1][2] == 1
