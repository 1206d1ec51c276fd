# liftlog/routes/api_routes.py
"""
Read-only JSON API for scripts, authenticated with the per-user API key
(``X-API-Key`` header) instead of the login cookie.
"""

from functools import wraps

from flask import Blueprint, current_app, g, jsonify, request

from ..errors import AuthError
from ..forms import safe_int
from ..models.stat import get_stats
from ..models.user import get_user_by_api_key
from ..models.workout import get_workout_history

api_bp = Blueprint("api", __name__)


def api_key_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        key = request.headers.get("X-API-Key", "").strip()
        user = get_user_by_api_key(key) if key else None
        if user is None:
            raise AuthError("Missing or invalid API key")
        g.api_user = user
        return view(*args, **kwargs)

    return wrapper


@api_bp.route("/health")
def health():
    return {"status": "ok"}


# ------------------------------
# GET /api/history?limit=5
# ------------------------------
@api_bp.route("/history", methods=["GET"])
@api_key_required
def history():
    max_rows = current_app.config["HISTORY_LIMIT"]
    limit = safe_int(request.args.get("limit"), 5)
    limit = max(1, min(limit, max_rows))

    rows = get_workout_history(limit, g.api_user.id)
    return jsonify({"workouts": [w.to_dict() for w in rows]}), 200


@api_bp.route("/stats", methods=["GET"])
@api_key_required
def stats():
    return jsonify({"stats": [s.to_dict() for s in get_stats(g.api_user.id)]}), 200
