# liftlog/routes/stats_routes.py

from flask import Blueprint, jsonify, render_template
from flask_jwt_extended import current_user

from ..auth import AuthService
from ..errors import ConstraintError, NotFoundError
from ..models.exercise import get_exercise
from ..models.stat import get_stats, pin_exercise, unpin_exercise
from ..storage import atomic


def create_stats_blueprint(auth: AuthService) -> Blueprint:
    stats_bp = Blueprint("stats", __name__)

    @stats_bp.route("", methods=["GET"])
    @auth.login_required
    def stats_page():
        return render_template("stats.html", stats=get_stats(current_user.id))

    @stats_bp.route("/data", methods=["GET"])
    @auth.login_required
    def stats_data():
        return jsonify({"stats": [s.to_dict() for s in get_stats(current_user.id)]}), 200

    @stats_bp.route("/<int:exercise_id>/pin", methods=["POST"])
    @auth.login_required
    def pin(exercise_id: int):
        if get_exercise(exercise_id) is None:
            raise NotFoundError("exercise not found")

        try:
            with atomic():
                pin_exercise(current_user.id, exercise_id)
        except ConstraintError:
            # already pinned
            pass

        return "", 200

    @stats_bp.route("/<int:exercise_id>/pin", methods=["DELETE"])
    @auth.login_required
    def unpin(exercise_id: int):
        with atomic():
            unpin_exercise(current_user.id, exercise_id)
        return "", 200

    return stats_bp
