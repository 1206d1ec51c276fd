# liftlog/routes/dashboard_routes.py

import secrets

from flask import Blueprint, current_app, jsonify, render_template, request
from flask_jwt_extended import current_user

from ..auth import AuthService
from ..errors import ConstraintError, ValidationError
from ..forms import parse_exercise_name, parse_settings_form, safe_int
from ..models.exercise import create_exercise, get_exercise, get_exercises
from ..models.stat import get_stats
from ..models.template import get_templates
from ..models.user import set_api_key, update_user
from ..models.workout import get_workout_history
from ..storage import atomic


def create_dashboard_blueprint(auth: AuthService) -> Blueprint:
    dashboard_bp = Blueprint("dashboard", __name__)

    # ------------------------------
    # GET /dashboard
    # ------------------------------
    @dashboard_bp.route("", methods=["GET"])
    @auth.login_required
    def index():
        rows = current_app.config["DASHBOARD_HISTORY_ROWS"]
        return render_template(
            "dashboard.html",
            user=current_user,
            history=get_workout_history(rows, current_user.id),
            templates=get_templates(current_user.id),
            stats=get_stats(current_user.id, pinned_only=True),
        )

    # ------------------------------
    # GET /dashboard/history?limit=20
    # ------------------------------
    @dashboard_bp.route("/history", methods=["GET"])
    @auth.login_required
    def history():
        max_rows = current_app.config["HISTORY_LIMIT"]
        limit = safe_int(request.args.get("limit"), max_rows)
        limit = max(1, min(limit, max_rows))

        return render_template(
            "history.html",
            history=get_workout_history(limit, current_user.id),
        )

    # ------------------------------
    # Exercise catalog
    # ------------------------------
    @dashboard_bp.route("/exercises", methods=["GET"])
    @auth.login_required
    def exercises():
        return jsonify({"exercises": [e.to_dict() for e in get_exercises()]}), 200

    @dashboard_bp.route("/exercises", methods=["POST"])
    @auth.login_required
    def add_exercise():
        name = parse_exercise_name(request.get_json(silent=True))
        try:
            with atomic():
                exercise_id = create_exercise(name)
        except ConstraintError:
            raise ValidationError("exercise already exists") from None

        return jsonify({"exercise": get_exercise(exercise_id).to_dict()}), 201

    # ------------------------------
    # Settings
    # ------------------------------
    @dashboard_bp.route("/settings", methods=["GET"])
    @auth.login_required
    def settings_page():
        return render_template("settings.html", user=current_user)

    @dashboard_bp.route("/settings", methods=["PUT"])
    @auth.login_required
    def update_settings():
        fields = parse_settings_form(request.get_json(silent=True))
        if "password" in fields:
            fields["password"] = auth.hash_password(fields["password"])

        try:
            with atomic():
                update_user(current_user.id, **fields)
        except ConstraintError:
            raise ValidationError(
                "Could not update your settings",
                errors=[{"field": "email", "error": "email already in use"}],
            ) from None

        current_app.logger.info(
            f"[settings] user_id={current_user.id} updated {sorted(fields)}"
        )
        return "", 200

    @dashboard_bp.route("/settings/apikey", methods=["POST"])
    @auth.login_required
    def regenerate_api_key():
        key = secrets.token_urlsafe(32)
        with atomic():
            set_api_key(current_user.id, key)
        return jsonify({"apikey": key}), 200

    return dashboard_bp
