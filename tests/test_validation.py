import pytest

from lockstep.validation import (
    ValidationError,
    validate_level_id,
    validate_level_payload,
    validate_level_text,
    validate_player_name,
    validate_register_payload,
    validate_score_payload,
    validate_username,
    validate_verify_payload,
)


def test_level_text_is_normalized() -> None:
    assert validate_level_text("###\r\n#P#\r\n###\n") == "###\n#P#\n###"


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "empty"),
        ("##\n#P", "at least 3"),
        ("###\n#P##\n###", "width mismatch"),
        ("###\n#P0\n###", "Invalid tile '0'"),
        ("###\n#Pz\n###", "Invalid tile 'z'"),
        ("###\n# !\n###", "player spawn"),
        (None, "must be a string"),
    ],
)
def test_level_text_rejections(text, message) -> None:
    with pytest.raises(ValidationError, match=message):
        validate_level_text(text)


def test_level_id_is_lowercased() -> None:
    assert validate_level_id("  My_Level-2 ") == "my_level-2"


@pytest.mark.parametrize("level_id", ["ab", "has space", "x" * 65, 7, "emoji✨"])
def test_level_id_rejections(level_id) -> None:
    with pytest.raises(ValidationError):
        validate_level_id(level_id)


def test_player_name_collapses_whitespace_and_truncates() -> None:
    assert validate_player_name("  Ada   Lovelace ") == "Ada Lovelace"
    assert len(validate_player_name("n" * 50)) == 32
    with pytest.raises(ValidationError):
        validate_player_name(" a ")


def test_username_rules() -> None:
    assert validate_username("Walker_9") == "walker_9"
    with pytest.raises(ValidationError):
        validate_username("no spaces")


def test_level_payload_defaults_name_to_id() -> None:
    payload = validate_level_payload({"id": "first-level", "text": "###\n#P!\n###", "replay": "r"})
    assert payload["name"] == "first-level"
    assert payload["replay"] == "r"


def test_level_payload_requires_replay() -> None:
    with pytest.raises(ValidationError, match="Replay is required"):
        validate_level_payload({"id": "first-level", "text": "###\n#P!\n###"})


def test_score_payload() -> None:
    payload = validate_score_payload({
        "levelId": "map0",
        "playerName": "Rin",
        "replay": "4r",
        "durationMs": "1200",
        "moves": 4,
    })
    assert payload == {
        "levelId": "map0",
        "playerName": "Rin",
        "replay": "4r",
        "durationMs": 1200,
        "claimedMoves": 4,
    }


@pytest.mark.parametrize(
    "overrides",
    [{"durationMs": -1}, {"durationMs": 86_400_001}, {"durationMs": "soon"}, {"moves": -3}, {"replay": ""}],
)
def test_score_payload_rejections(overrides) -> None:
    payload = {"levelId": "map0", "playerName": "Rin", "replay": "4r", "durationMs": 10}
    payload.update(overrides)
    with pytest.raises(ValidationError):
        validate_score_payload(payload)


def test_non_object_payloads_are_rejected() -> None:
    with pytest.raises(ValidationError, match="must be an object"):
        validate_score_payload(["map0"])
    with pytest.raises(ValidationError):
        validate_register_payload(None)


def test_verify_payload_prefers_inline_level_text() -> None:
    payload = validate_verify_payload({"levelText": "###\n#P!\n###", "levelId": "ignored", "replay": "r"})
    assert payload["levelId"] is None
    assert payload["levelText"] == "###\n#P!\n###"
