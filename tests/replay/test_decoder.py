import pytest

from lockstep.replay import REPLAY_MAX_MOVES, MalformedReplay, decode_replay, encode_replay


def test_decode_normalizes_case() -> None:
    assert decode_replay("RDLU") == "rdlu"


def test_decode_expands_run_lengths() -> None:
    assert decode_replay("6d2r") == "ddddddrr"
    assert decode_replay("3Lu2R") == "lllurr"


def test_decode_trims_surrounding_whitespace() -> None:
    assert decode_replay("  2u\n") == "uu"


def test_decode_allows_leading_zero_counts() -> None:
    assert decode_replay("03r") == "rrr"


@pytest.mark.parametrize(
    "raw",
    ["left-right", "", "   ", "r d", "2", "rr3", "0r", "r0l", "u,d", "x", "２r", None, 12],
)
def test_decode_rejects_malformed(raw) -> None:
    with pytest.raises(MalformedReplay):
        decode_replay(raw)


def test_grammar_error_message() -> None:
    with pytest.raises(MalformedReplay, match="(?i)replay must use only"):
        decode_replay("left-right")


def test_decode_accepts_exact_cap() -> None:
    assert len(decode_replay(f"{REPLAY_MAX_MOVES}u")) == REPLAY_MAX_MOVES


def test_decode_rejects_over_cap() -> None:
    with pytest.raises(MalformedReplay, match="cannot exceed"):
        decode_replay(f"{REPLAY_MAX_MOVES}u1d")
    with pytest.raises(MalformedReplay):
        decode_replay("99999999999999999999r")


@pytest.mark.parametrize("count", ["9" * 5000, "1" + "0" * 4400, "123456"])
def test_decode_rejects_counts_longer_than_the_cap(count) -> None:
    with pytest.raises(MalformedReplay, match="cannot exceed"):
        decode_replay(count + "r")


def test_decode_ignores_leading_zeros_before_checking_the_cap() -> None:
    assert decode_replay("01r") == "r"
    assert decode_replay("0" * 5000 + "2u") == "uu"
    with pytest.raises(MalformedReplay, match="positive integer"):
        decode_replay("000r")


def test_encode_compacts_runs() -> None:
    assert encode_replay("ddddddrr") == "6d2r"
    assert encode_replay("rdlu") == "rdlu"
    assert encode_replay("") == ""


def test_encode_output_decodes_back() -> None:
    moves = "uuurddddlr"
    assert decode_replay(encode_replay(moves)) == moves
