# lockstep/routes/user_routes.py
from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from lockstep.extensions import db
from lockstep.models import UserProgress
from lockstep.routes import _json_body
from lockstep.security import require_csrf, require_trusted_origin
from lockstep.validation import validate_progress_payload

bp = Blueprint("user", __name__, url_prefix="/api")


@bp.route("/progress", methods=["GET"])
@login_required
def get_progress():
    require_trusted_origin()
    progress = db.session.get(UserProgress, current_user.id)
    return jsonify({"progress": progress.to_dict() if progress else None})


@bp.route("/progress", methods=["POST"])
@login_required
def save_progress():
    require_csrf()
    payload = validate_progress_payload(_json_body())

    progress = db.session.get(UserProgress, current_user.id)
    if progress is None:
        progress = UserProgress(user_id=current_user.id, selected_level_id=payload["selectedLevelId"])
        db.session.add(progress)
    else:
        progress.selected_level_id = payload["selectedLevelId"]
    db.session.commit()
    return jsonify({"progress": progress.to_dict()})
