# lockstep/routes/level_routes.py
"""
Level listing, publishing and deletion.

Publishing is gated on proof of play: the request carries a replay and the
level is stored only if the replay engine confirms it clears the submitted
text.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required

from lockstep.extensions import db
from lockstep.levels import builtin_level_list, is_builtin
from lockstep.models import Level, LevelScore
from lockstep.replay import verify_replay
from lockstep.routes import _abort_json, _json_body, find_level
from lockstep.security import require_csrf
from lockstep.validation import validate_delete_level_payload, validate_level_id, validate_level_payload

bp = Blueprint("levels", __name__, url_prefix="/api")


@bp.route("/levels", methods=["GET"])
def list_levels():
    return jsonify({
        "builtIn": builtin_level_list(),
        "levels": [level.to_dict() for level in Level.newest_first()],
    })


@bp.route("/levels/<level_id>", methods=["GET"])
def get_level(level_id):
    level = find_level(validate_level_id(level_id))
    if not level:
        return _abort_json(404, f"Level {level_id} not found.")
    return jsonify({"level": level})


@bp.route("/levels", methods=["POST"])
@login_required
def publish_level():
    require_csrf()
    payload = validate_level_payload(_json_body())
    level_id = payload["id"]
    is_admin = bool(current_user.is_admin)

    if is_builtin(level_id):
        return _abort_json(403, "Built-in levels cannot be replaced.")

    existing = db.session.get(Level, level_id)
    if existing is not None:
        if existing.owner_user_id is None and not is_admin:
            return _abort_json(403, "Only admins can claim legacy unowned levels.")
        if existing.owner_user_id not in (None, current_user.id) and not is_admin:
            return _abort_json(403, "Only the level owner or an admin can edit this level.")

    verdict = verify_replay(payload["text"], payload["replay"])
    if not verdict.ok:
        current_app.logger.info(
            "[levels] publish rejected level=%s user=%s outcome=%s moves=%d",
            level_id, current_user.id, verdict.outcome.value, verdict.moves,
        )
        return _abort_json(
            422,
            "Beat this level in Test + Play before publishing.",
            verdict=verdict.to_dict(),
        )

    if existing is None:
        existing = Level(id=level_id, owner_user_id=current_user.id)
        db.session.add(existing)
    elif existing.owner_user_id is None:
        existing.owner_user_id = current_user.id
    existing.name = payload["name"]
    existing.text = payload["text"]
    existing.author_name = current_user.player_name
    db.session.commit()

    current_app.logger.info("[levels] published level=%s user=%s", level_id, current_user.id)
    return jsonify({"level": existing.to_dict(), "verdict": verdict.to_dict()})


@bp.route("/admin/delete-level", methods=["POST"])
@login_required
def delete_level():
    require_csrf()
    payload = validate_delete_level_payload(_json_body())
    level_id = payload["levelId"]

    existing = db.session.get(Level, level_id)
    if existing is None:
        return _abort_json(404, f"Level {level_id} not found.")
    if not current_user.is_admin and existing.owner_user_id != current_user.id:
        return _abort_json(403, "Only the level owner or an admin can delete this level.")

    LevelScore.query.filter_by(level_id=level_id).delete()
    db.session.delete(existing)
    db.session.commit()

    current_app.logger.info("[levels] deleted level=%s by user=%s", level_id, current_user.id)
    return jsonify({"ok": True, "levelId": level_id})
