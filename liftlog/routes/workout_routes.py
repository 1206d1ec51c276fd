# liftlog/routes/workout_routes.py

from flask import Blueprint, current_app, redirect, render_template, request, url_for
from flask_jwt_extended import current_user

from ..auth import AuthService
from ..errors import NotFoundError, ValidationError
from ..forms import parse_workout_form
from ..models.exercise import get_exercises
from ..models.template import get_template
from ..models.workout import (
    delete_sets,
    delete_workout,
    get_workout,
    save_set,
    save_workout,
    update_workout,
)
from ..storage import atomic


def create_workout_blueprint(auth: AuthService) -> Blueprint:
    workout_bp = Blueprint("workout", __name__)

    # ------------------------------
    # GET /dashboard/workout?template=3
    # ------------------------------
    @workout_bp.route("", methods=["GET"])
    @auth.login_required
    def new_workout():
        template = None
        template_id = request.args.get("template")
        if template_id:
            if not template_id.isdigit():
                raise ValidationError("template must be an id")
            template = get_template(int(template_id), current_user.id)
            if template is None:
                raise NotFoundError("template not found")

        return render_template(
            "workout.html",
            workout=None,
            prefill=template,
            exercises=get_exercises(),
        )

    # ------------------------------
    # POST /dashboard/workout
    # ------------------------------
    @workout_bp.route("", methods=["POST"])
    @auth.login_required
    def create_workout():
        form = parse_workout_form(request.get_json(silent=True))

        with atomic():
            inserted = save_workout(form.name, form.time, current_user.id)
            for s in form.sets:
                save_set(s, inserted.id)

        current_app.logger.info(
            f"[workout] user_id={current_user.id} saved workout_id={inserted.id} "
            f"with {len(form.sets)} sets"
        )
        return redirect(url_for("dashboard.index"))

    # ------------------------------
    # GET /dashboard/workout/<id>
    # ------------------------------
    @workout_bp.route("/<int:workout_id>", methods=["GET"])
    @auth.login_required
    def edit_workout(workout_id: int):
        workout = get_workout(workout_id, current_user.id)
        if workout is None:
            raise NotFoundError("workout not found")

        return render_template(
            "workout.html",
            workout=workout,
            prefill=workout,
            exercises=get_exercises(),
        )

    # ------------------------------
    # PUT /dashboard/workout/<id>
    # Sets are replaced: old rows deleted, payload rows inserted.
    # ------------------------------
    @workout_bp.route("/<int:workout_id>", methods=["PUT"])
    @auth.login_required
    def replace_workout(workout_id: int):
        form = parse_workout_form(request.get_json(silent=True))

        with atomic():
            if not update_workout(workout_id, form.name, form.time, current_user.id):
                raise NotFoundError("workout not found")
            delete_sets(workout_id)
            for s in form.sets:
                save_set(s, workout_id)

        return "", 200

    # ------------------------------
    # DELETE /dashboard/workout/<id>
    # ------------------------------
    @workout_bp.route("/<int:workout_id>", methods=["DELETE"])
    @auth.login_required
    def remove_workout(workout_id: int):
        if get_workout(workout_id, current_user.id) is None:
            raise NotFoundError("workout not found")

        with atomic():
            delete_sets(workout_id)
            delete_workout(workout_id, current_user.id)

        return "", 200

    return workout_bp
