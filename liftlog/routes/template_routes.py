# liftlog/routes/template_routes.py

from flask import Blueprint, redirect, render_template, request, url_for
from flask_jwt_extended import current_user

from ..auth import AuthService
from ..errors import NotFoundError
from ..forms import parse_workout_form
from ..models.exercise import get_exercises
from ..models.template import (
    delete_template,
    delete_template_sets,
    get_template,
    save_template,
    save_template_set,
    update_template_name,
)
from ..storage import atomic


def create_template_blueprint(auth: AuthService) -> Blueprint:
    template_bp = Blueprint("template", __name__)

    def _parse():
        return parse_workout_form(request.get_json(silent=True), what="template")

    @template_bp.route("", methods=["GET"])
    @auth.login_required
    def new_template():
        return render_template("template.html", template=None, exercises=get_exercises())

    @template_bp.route("", methods=["POST"])
    @auth.login_required
    def create_template():
        form = _parse()

        with atomic():
            template_id = save_template(form.name, current_user.id)
            for s in form.sets:
                save_template_set(s, template_id)

        return redirect(url_for("dashboard.index"))

    @template_bp.route("/<int:template_id>", methods=["GET"])
    @auth.login_required
    def edit_template(template_id: int):
        template = get_template(template_id, current_user.id)
        if template is None:
            raise NotFoundError("template not found")
        return render_template("template.html", template=template, exercises=get_exercises())

    @template_bp.route("/<int:template_id>", methods=["PUT"])
    @auth.login_required
    def replace_template(template_id: int):
        form = _parse()

        with atomic():
            if not update_template_name(template_id, form.name, current_user.id):
                raise NotFoundError("template not found")
            delete_template_sets(template_id)
            for s in form.sets:
                save_template_set(s, template_id)

        return "", 200

    @template_bp.route("/<int:template_id>", methods=["DELETE"])
    @auth.login_required
    def remove_template(template_id: int):
        if get_template(template_id, current_user.id) is None:
            raise NotFoundError("template not found")

        with atomic():
            delete_template_sets(template_id)
            delete_template(template_id, current_user.id)

        return "", 200

    return template_bp
