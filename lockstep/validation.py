# lockstep/validation.py
"""
Payload validation for the JSON API.

Every validator returns the normalised value or raises ValidationError with
a message that is safe to show to the player.
"""

from __future__ import annotations

import re
from typing import Any, Dict

from lockstep.replay.grid import PLAYER_SPAWN, split_rows

LEVEL_ID_RE = re.compile(r"^[a-z0-9_-]{3,64}$")
USERNAME_RE = re.compile(r"^[a-z0-9_-]{3,32}$")
TILE_RE = re.compile(r"^[# !xP1-9]$")

MIN_LEVEL_WIDTH = 3
MAX_MOVES_CLAIM = 1_000_000
MAX_DURATION_MS = 86_400_000
MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 200


class ValidationError(ValueError):
    pass


def _require_object(payload: Any, label: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError(f"{label} payload must be an object.")
    return payload


def sanitize_name(raw: Any) -> str:
    if not isinstance(raw, str):
        return ""
    return re.sub(r"\s+", " ", raw.strip())[:32]


def validate_player_name(raw: Any) -> str:
    value = sanitize_name(raw)
    if len(value) < 2:
        raise ValidationError("Player name must be at least 2 characters.")
    return value


def validate_username(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValidationError("Username must be a string.")
    value = raw.strip().lower()
    if not USERNAME_RE.match(value):
        raise ValidationError("Username must use lowercase letters, numbers, underscore, or dash (3-32 chars).")
    return value


def validate_password(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValidationError("Password must be a string.")
    if not (MIN_PASSWORD_LENGTH <= len(raw) <= MAX_PASSWORD_LENGTH):
        raise ValidationError(f"Password must be {MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH} characters.")
    return raw


def validate_level_id(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValidationError("Level id must be a string.")
    value = raw.strip().lower()
    if not LEVEL_ID_RE.match(value):
        raise ValidationError("Level id must use lowercase letters, numbers, underscore, or dash (3-64 chars).")
    return value


def validate_level_text(raw: Any) -> str:
    """Stricter than the replay loader: editor tiles only, width >= 3."""
    if not isinstance(raw, str):
        raise ValidationError("Level text must be a string.")

    rows = split_rows(raw)
    if not rows:
        raise ValidationError("Level text is empty.")

    width = len(rows[0])
    if width < MIN_LEVEL_WIDTH:
        raise ValidationError(f"Level width must be at least {MIN_LEVEL_WIDTH}.")

    players = 0
    for y, row in enumerate(rows):
        if len(row) != width:
            raise ValidationError(f"Level row {y + 1} width mismatch.")
        for x, tile in enumerate(row):
            if not TILE_RE.match(tile):
                raise ValidationError(f"Invalid tile '{tile}' at {x + 1},{y + 1}.")
            if tile == PLAYER_SPAWN:
                players += 1

    if players == 0:
        raise ValidationError("Level needs at least one player spawn (P).")

    return "\n".join(rows)


def validate_replay_text(raw: Any) -> str:
    # Grammar is enforced by the decoder; this only rejects non-strings early.
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("Replay is required.")
    return raw.strip()


def _parse_int(raw: Any, message: str) -> int:
    if isinstance(raw, bool):
        raise ValidationError(message)
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)


def validate_level_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Level")
    level_id = validate_level_id(payload.get("id"))
    name = sanitize_name(payload.get("name") or level_id) or level_id
    return {
        "id": level_id,
        "name": name,
        "text": validate_level_text(payload.get("text")),
        "replay": validate_replay_text(payload.get("replay")),
    }


def validate_delete_level_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Delete")
    return {"levelId": validate_level_id(payload.get("levelId"))}


def validate_score_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Score")
    duration_ms = _parse_int(payload.get("durationMs"), "Duration must be between 0 and 86400000 ms.")
    if not (0 <= duration_ms <= MAX_DURATION_MS):
        raise ValidationError("Duration must be between 0 and 86400000 ms.")

    claimed_moves = None
    if payload.get("moves") is not None:
        claimed_moves = _parse_int(payload.get("moves"), "Moves must be a non-negative integer.")
        if not (0 <= claimed_moves <= MAX_MOVES_CLAIM):
            raise ValidationError("Moves must be a non-negative integer.")

    return {
        "levelId": validate_level_id(payload.get("levelId")),
        "playerName": validate_player_name(payload.get("playerName")),
        "replay": validate_replay_text(payload.get("replay")),
        "durationMs": duration_ms,
        "claimedMoves": claimed_moves,
    }


def validate_verify_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Verify")
    level_text = payload.get("levelText")
    out: Dict[str, Any] = {"replay": validate_replay_text(payload.get("replay"))}
    if level_text is not None:
        out["levelText"] = validate_level_text(level_text)
        out["levelId"] = None
    else:
        out["levelId"] = validate_level_id(payload.get("levelId"))
    return out


def validate_register_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Register")
    return {
        "username": validate_username(payload.get("username")),
        "password": validate_password(payload.get("password")),
        "playerName": validate_player_name(payload.get("playerName")),
    }


def validate_login_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Login")
    password = payload.get("password")
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required.")
    return {
        "username": validate_username(payload.get("username")),
        "password": password,
    }


def validate_progress_payload(payload: Any) -> Dict[str, Any]:
    payload = _require_object(payload, "Progress")
    return {"selectedLevelId": validate_level_id(payload.get("selectedLevelId"))}
