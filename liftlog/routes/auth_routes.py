# liftlog/routes/auth_routes.py

from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for

from ..auth import AuthService, DuplicateAccountError, Error, InvalidCredentials, Ok
from ..errors import StorageError, ValidationError
from ..forms import parse_signup_form


def _form_data():
    # HTML forms post urlencoded, scripts may post JSON
    data = request.get_json(silent=True)
    if data is None:
        return request.form.to_dict()
    return data if isinstance(data, dict) else {}


def create_auth_blueprint(auth: AuthService) -> Blueprint:
    auth_bp = Blueprint("auth", __name__)

    @auth_bp.route("/", methods=["GET"])
    def home():
        if auth.current_user() is None:
            return redirect(url_for("auth.login_page"))
        return redirect(url_for("dashboard.index"))

    # -----------------------------
    # Signup
    # -----------------------------
    @auth_bp.route("/signup", methods=["GET"])
    @auth.anonymous_required
    def signup_page():
        return render_template("signup.html")

    @auth_bp.route("/signup", methods=["POST"])
    def signup():
        try:
            form = parse_signup_form(_form_data())
            auth.sign_up(form)
        except (ValidationError, DuplicateAccountError) as e:
            flash(e.message, "error")
            return redirect(url_for("auth.signup_page"))
        except StorageError as e:
            current_app.logger.exception(f"Registration Error: {e.__cause__!r}")
            flash(e.message, "error")
            return redirect(url_for("auth.signup_page"))

        flash("Account created, you can log in now.", "info")
        return redirect(url_for("auth.login_page"))

    # -----------------------------
    # Login / logout
    # -----------------------------
    @auth_bp.route("/login", methods=["GET"])
    @auth.anonymous_required
    def login_page():
        return render_template("login.html")

    @auth_bp.route("/login", methods=["POST"])
    def login():
        data = _form_data()
        result = auth.verify(data.get("email"), data.get("password"))

        if isinstance(result, Ok):
            return auth.log_in(redirect(url_for("dashboard.index")), result.user)

        if isinstance(result, Error):
            current_app.logger.exception(f"Login Error: {result.cause.__cause__!r}")
            flash(result.cause.message, "error")
        elif isinstance(result, InvalidCredentials):
            flash(result.message, "error")

        return redirect(url_for("auth.login_page"))

    @auth_bp.route("/logout", methods=["DELETE"])
    def logout():
        return auth.log_out(redirect(url_for("auth.home")))

    return auth_bp
