# lockstep/routes/auth_routes.py
from __future__ import annotations

from flask import Blueprint, current_app, jsonify, session
from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import IntegrityError

from lockstep.extensions import db
from lockstep.models import User
from lockstep.routes import _abort_json, _json_body
from lockstep.security import CSRF_SESSION_KEY, generate_csrf_token, require_csrf, require_trusted_origin
from lockstep.validation import validate_login_payload, validate_register_payload

bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _session_payload(status: int = 200):
    user = current_user if current_user.is_authenticated else None
    resp = jsonify({
        "csrfToken": generate_csrf_token(),
        "authenticated": user is not None,
        "user": user.to_public() if user else None,
    })
    resp.status_code = status
    resp.headers["Cache-Control"] = "no-store"
    return resp


@bp.route("/session", methods=["POST"])
def issue_session():
    require_trusted_origin()
    return _session_payload()


@bp.route("/me", methods=["GET"])
def me():
    require_trusted_origin()
    if not current_user.is_authenticated:
        return jsonify({"authenticated": False, "user": None})
    return jsonify({"authenticated": True, "user": current_user.to_public()})


@bp.route("/register", methods=["POST"])
def register():
    require_csrf()
    payload = validate_register_payload(_json_body())

    if User.query.filter_by(username=payload["username"]).first():
        return _abort_json(409, "Username is already taken.")

    user = User(username=payload["username"], player_name=payload["playerName"], is_admin=False)
    user.set_password(payload["password"])
    try:
        db.session.add(user)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return _abort_json(409, "Username is already taken.")

    current_app.logger.info("[auth] registered user=%s", user.username)
    login_user(user, remember=True)
    return _session_payload(201)


@bp.route("/login", methods=["POST"])
def login():
    require_csrf()
    payload = validate_login_payload(_json_body())
    user = User.query.filter_by(username=payload["username"]).first()
    if not user or not user.check_password(payload["password"]):
        current_app.logger.info("[auth] failed login username=%s", payload["username"])
        return _abort_json(401, "Invalid username or password.")

    login_user(user, remember=True)
    return _session_payload()


@bp.route("/logout", methods=["POST"])
def logout():
    require_csrf()
    logout_user()
    session.pop(CSRF_SESSION_KEY, None)
    return _session_payload()
