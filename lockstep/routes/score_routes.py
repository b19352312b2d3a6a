# lockstep/routes/score_routes.py
"""
Score submission and leaderboards.

Clients send the replay of their run, not a move count. The server replays it
and records the move number the engine reports; a claimed count is only
compared for logging.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from flask import Blueprint, current_app, jsonify
from flask_login import current_user

from lockstep.extensions import db
from lockstep.models import LevelScore
from lockstep.replay import decode_replay, encode_replay, verify_replay
from lockstep.routes import _abort_json, _json_body, find_level
from lockstep.security import client_ip, require_csrf, require_trusted_origin, session_id
from lockstep.validation import validate_level_id, validate_score_payload, validate_verify_payload

bp = Blueprint("scores", __name__, url_prefix="/api")


def _format_duration(ms: int) -> str:
    mm = ms // 60000
    ss = (ms % 60000) // 1000
    tenths = (ms % 1000) // 100
    return f"{mm}:{str(ss).zfill(2)}.{tenths}"


def share_line(level: Dict[str, Any], scores: List[LevelScore]) -> Optional[str]:
    """Plain-text brag line for the best score on a level."""
    if not scores:
        return None
    best = scores[0]
    return (
        f"Lockstep · {level.get('name') or level.get('id')}\n"
        f"(Top) {best.moves} moves in {_format_duration(best.duration_ms)} by {best.player_name}"
    )


def _top_scores(level_id: str) -> List[LevelScore]:
    return LevelScore.top_for_level(level_id, limit=current_app.config.get("SCORES_TOP_LIMIT", 10))


@bp.route("/scores/<level_id>", methods=["GET"])
def leaderboard(level_id):
    level_id = validate_level_id(level_id)
    level = find_level(level_id)
    if not level:
        return _abort_json(404, f"Level {level_id} not found.")
    scores = _top_scores(level_id)
    return jsonify({
        "levelId": level_id,
        "scores": [s.to_dict() for s in scores],
        "share": share_line(level, scores),
    })


@bp.route("/scores", methods=["POST"])
def submit_score():
    require_csrf()

    limiter = current_app.extensions["score_rate_limiter"]
    if limiter.hit(f"{session_id()}:{client_ip()}"):
        return _abort_json(429, "Too many score submissions. Please slow down.")

    payload = validate_score_payload(_json_body())
    level_id = payload["levelId"]
    level = find_level(level_id)
    if not level:
        return _abort_json(404, f"Level {level_id} not found.")

    verdict = verify_replay(level["text"], payload["replay"])
    if not verdict.ok:
        current_app.logger.info(
            "[scores] rejected level=%s outcome=%s moves=%d",
            level_id, verdict.outcome.value, verdict.moves,
        )
        return _abort_json(422, "Replay does not clear this level.", verdict=verdict.to_dict())

    claimed = payload["claimedMoves"]
    if claimed is not None and claimed != verdict.moves:
        current_app.logger.info(
            "[scores] claimed moves differ level=%s claimed=%d verified=%d",
            level_id, claimed, verdict.moves,
        )

    user_id = None
    player_name = payload["playerName"]
    if current_user.is_authenticated:
        user_id = current_user.id
        player_name = current_user.player_name

    moves = decode_replay(payload["replay"])[:verdict.moves]
    score = LevelScore(
        level_id=level_id,
        player_name=player_name,
        user_id=user_id,
        moves=verdict.moves,
        duration_ms=payload["durationMs"],
        replay=encode_replay(moves),
    )
    db.session.add(score)
    db.session.commit()

    scores = _top_scores(level_id)
    resp = jsonify({
        "levelId": level_id,
        "moves": verdict.moves,
        "scores": [s.to_dict() for s in scores],
    })
    resp.status_code = 201
    return resp


@bp.route("/replays/verify", methods=["POST"])
def verify():
    require_trusted_origin()
    payload = validate_verify_payload(_json_body())

    level_text = payload.get("levelText")
    if level_text is None:
        level = find_level(payload["levelId"])
        if not level:
            return _abort_json(404, f"Level {payload['levelId']} not found.")
        level_text = level["text"]

    verdict = verify_replay(level_text, payload["replay"])
    return jsonify({**verdict.to_dict(), "outcome": verdict.outcome.value})
