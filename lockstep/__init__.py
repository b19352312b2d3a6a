import os

from flask import Flask, jsonify
from flask_cors import CORS

from lockstep.config import config
from lockstep.extensions import db, login_manager
from lockstep.replay import ReplayError
from lockstep.security import RateLimiter, apply_security_headers
from lockstep.validation import ValidationError, validate_username


def ensure_admin_account(app):
    """
    Create or refresh the configured admin and hand it every unowned level.
    Skipped when no admin password is configured.
    """
    from lockstep.models import Level, User

    password = app.config.get("ADMIN_PASSWORD")
    if not password:
        app.logger.info("[auth] ADMIN_PASSWORD not set; admin bootstrap skipped")
        return None

    username = validate_username(app.config.get("ADMIN_USERNAME", "admin"))
    player_name = app.config.get("ADMIN_PLAYER_NAME") or username

    admin = User.query.filter_by(username=username).first()
    if admin is None:
        admin = User(username=username, player_name=player_name, is_admin=True)
        admin.set_password(password)
        db.session.add(admin)
        db.session.flush()
    else:
        admin.is_admin = True
        if not admin.check_password(password) or admin.player_name != player_name:
            admin.set_password(password)
            admin.player_name = player_name

    Level.query.filter(Level.owner_user_id.is_(None)).update({"owner_user_id": admin.id})
    db.session.commit()
    return admin


def create_app(config_name=None):
    app = Flask(__name__)

    config_name = config_name or os.getenv("LOCKSTEP_ENV", "default")
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # ---- Extensions ----
    db.init_app(app)
    login_manager.init_app(app)
    login_manager.unauthorized_handler(lambda: (jsonify({"ok": False, "error": "Sign in required."}), 401))

    origins = [app.config["PUBLIC_ORIGIN"], *app.config["DEV_ALLOWED_ORIGINS"]]
    CORS(
        app,
        origins=origins,
        supports_credentials=True,
        allow_headers=["Content-Type", "X-CSRF-Token"],
        methods=["GET", "POST", "OPTIONS"],
    )

    app.extensions["score_rate_limiter"] = RateLimiter(
        window_s=app.config["SCORE_RATE_LIMIT_WINDOW_S"],
        max_hits=app.config["SCORE_RATE_LIMIT_MAX"],
    )

    # ---- Errors ----
    @app.errorhandler(ValidationError)
    @app.errorhandler(ReplayError)
    def handle_bad_input(exc):
        return jsonify({"ok": False, "error": str(exc)}), 400

    app.after_request(apply_security_headers)

    # ---- Models + tables ----
    from lockstep import models as _models  # noqa: F401
    with app.app_context():
        db.create_all()
        ensure_admin_account(app)

    # ---- Blueprints ----
    from lockstep.routes import auth_routes, level_routes, score_routes, user_routes
    app.register_blueprint(auth_routes.bp)
    app.register_blueprint(user_routes.bp)
    app.register_blueprint(level_routes.bp)
    app.register_blueprint(score_routes.bp)

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True})

    app.logger.info("lockstep ready (config=%s)", config_name)
    return app
