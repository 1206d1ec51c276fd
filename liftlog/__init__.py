# liftlog/__init__.py

from flask import Flask, current_app, flash, jsonify, redirect, render_template, request, url_for
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: API-key clients call /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # Auth service (session identity + route guards)
    # -----------------------------
    from .auth import AuthService

    auth = AuthService(jwt, password_hash_method=app.config["PASSWORD_HASH_METHOD"])
    app.extensions["liftlog.auth"] = auth

    # -----------------------------
    # Error handlers
    # -----------------------------
    from flask_jwt_extended.exceptions import CSRFError

    from .errors import LiftlogError, StorageError

    def _wants_html():
        if request.path.startswith("/api/"):
            return False
        best = request.accept_mimetypes.best_match(["application/json", "text/html"])
        return best == "text/html"

    @app.errorhandler(CSRFError)
    def csrf_error(e):
        # the session stays valid, only this request is refused
        current_app.logger.info(f"[auth] rejected request to {request.path}: {e}")
        return jsonify({"message": "Missing or invalid CSRF token"}), 401

    @app.errorhandler(StorageError)
    def storage_error(e):
        current_app.logger.exception(f"Storage Error: {e.__cause__!r}")
        if not _wants_html():
            return jsonify(e.to_dict()), e.status_code
        if request.endpoint == "dashboard.index":
            return render_template("error.html", message=e.message), e.status_code
        flash(e.message, "error")
        return redirect(url_for("dashboard.index"))

    @app.errorhandler(LiftlogError)
    def liftlog_error(e):
        return jsonify(e.to_dict()), e.status_code

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import create_auth_blueprint
    from .routes.dashboard_routes import create_dashboard_blueprint
    from .routes.workout_routes import create_workout_blueprint
    from .routes.template_routes import create_template_blueprint
    from .routes.stats_routes import create_stats_blueprint
    from .routes.api_routes import api_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(create_auth_blueprint(auth))
    app.register_blueprint(create_dashboard_blueprint(auth), url_prefix="/dashboard")
    app.register_blueprint(create_workout_blueprint(auth), url_prefix="/dashboard/workout")
    app.register_blueprint(create_template_blueprint(auth), url_prefix="/dashboard/template")
    app.register_blueprint(create_stats_blueprint(auth), url_prefix="/dashboard/stats")
    app.register_blueprint(api_bp, url_prefix="/api")

    # -----------------------------
    # DB init
    # -----------------------------
    from .models import exercise, stat, template, user, workout  # noqa: F401

    with app.app_context():
        db.create_all()

    return app
