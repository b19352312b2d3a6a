# lockstep/replay/decoder.py
"""
Move-sequence decoder.

Replays travel as compact run-length text ("6d2r", "RDLU"). The decoder
expands them into one lowercase character per discrete step.
"""

from __future__ import annotations

import re

from .errors import MalformedReplay

REPLAY_MAX_MOVES = 10000
MOVE_LETTERS = "udlr"

_TOKEN_RE = re.compile(r"([0-9]*)([udlr])")
_GRAMMAR_MESSAGE = "Replay must use only U, D, L, R moves, with optional counts like 6d."


def decode_replay(raw, max_moves: int = REPLAY_MAX_MOVES) -> str:
    """
    Expand *raw* into a canonical move string.

    Raises MalformedReplay for anything outside the grammar, a zero run
    length, an empty result, or more than *max_moves* expanded moves.
    """
    if not isinstance(raw, str):
        raise MalformedReplay("Replay must be a string.")

    text = raw.strip().lower()
    if not text:
        raise MalformedReplay("Replay cannot be empty.")

    parts = []
    total = 0
    consumed = 0
    for token in _TOKEN_RE.finditer(text):
        if token.start() != consumed:
            raise MalformedReplay(_GRAMMAR_MESSAGE)
        consumed = token.end()

        count_text, direction = token.groups()
        digits = count_text.lstrip("0")
        if count_text and not digits:
            raise MalformedReplay("Replay run length must be a positive integer.")
        # Anything longer than the cap's own digit count is over the cap.
        if len(digits) > len(str(max_moves)):
            raise MalformedReplay(f"Replay cannot exceed {max_moves} moves.")
        run_length = int(digits) if digits else 1
        if total + run_length > max_moves:
            raise MalformedReplay(f"Replay cannot exceed {max_moves} moves.")

        parts.append(direction * run_length)
        total += run_length

    if consumed != len(text) or total == 0:
        raise MalformedReplay(_GRAMMAR_MESSAGE)

    return "".join(parts)


def encode_replay(moves: str) -> str:
    """Run-length encode a decoded move string ("ddddddrr" -> "6d2r")."""
    out = []
    i = 0
    while i < len(moves):
        j = i
        while j < len(moves) and moves[j] == moves[i]:
            j += 1
        run = j - i
        out.append(f"{run}{moves[i]}" if run > 1 else moves[i])
        i = j
    return "".join(out)
