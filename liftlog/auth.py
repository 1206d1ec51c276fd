# liftlog/auth.py
"""
Login-session handling.

An ``AuthService`` is built once in ``create_app`` and handed to the
blueprints that need it. It owns:

* credential checks (``verify``) returning ``Ok`` / ``InvalidCredentials`` /
  ``Error`` instead of calling back,
* serialize / deserialize of the session identity: only the user id goes into
  the token, the user row is fetched again on every request,
* the ``login_required`` / ``anonymous_required`` route guards.

The token itself is a flask-jwt-extended access token kept in a cookie.
"""

import secrets
from dataclasses import dataclass
from functools import wraps
from typing import Optional, Union

from flask import current_app, redirect, url_for
from flask_jwt_extended import (
    JWTManager,
    create_access_token,
    get_current_user,
    set_access_cookies,
    unset_jwt_cookies,
    verify_jwt_in_request,
)
from werkzeug.security import check_password_hash, generate_password_hash

from .errors import ConstraintError, StorageError
from .forms import SignupForm
from .models.user import UserRecord, create_user, get_user_by_email, get_user_by_id
from .storage import atomic

GENERIC_LOGIN_FAILURE = "Invalid email or password."


# ------------------------------
# Verification results
# ------------------------------
@dataclass(frozen=True)
class Ok:
    user: UserRecord


@dataclass(frozen=True)
class InvalidCredentials:
    message: str = GENERIC_LOGIN_FAILURE


@dataclass(frozen=True)
class Error:
    cause: Exception


VerifyResult = Union[Ok, InvalidCredentials, Error]


class DuplicateAccountError(ConstraintError):
    message = "Could not create an account with those details"


class AuthService:
    def __init__(
        self,
        jwt: JWTManager,
        password_hash_method: str = "scrypt",
        login_endpoint: str = "auth.login_page",
        home_endpoint: str = "dashboard.index",
    ):
        self.password_hash_method = password_hash_method
        self.login_endpoint = login_endpoint
        self.home_endpoint = home_endpoint
        # compared against when the email is unknown so both failures cost the same
        self._dummy_hash = self.hash_password(secrets.token_hex(16))

        jwt.user_identity_loader(self.serialize)
        jwt.user_lookup_loader(self.deserialize)
        jwt.user_lookup_error_loader(self._session_rejected)
        jwt.unauthorized_loader(self._session_rejected)
        jwt.invalid_token_loader(self._session_rejected)
        jwt.expired_token_loader(self._token_expired)

    # ------------------------------
    # Passwords
    # ------------------------------
    def hash_password(self, password: str) -> str:
        return generate_password_hash(password, method=self.password_hash_method)

    def verify(self, email: str, password: str) -> VerifyResult:
        # non-string input is treated like any other failed login
        email = email.strip().lower() if isinstance(email, str) else ""
        password = password if isinstance(password, str) else ""
        try:
            user = get_user_by_email(email) if email else None
        except StorageError as e:
            return Error(e)

        if user is None:
            check_password_hash(self._dummy_hash, password)
            current_app.logger.info("[auth/login] rejected login attempt")
            return InvalidCredentials()

        if not check_password_hash(user.password, password):
            current_app.logger.info(f"[auth/login] rejected login for user_id={user.id}")
            return InvalidCredentials()

        return Ok(user)

    def sign_up(self, form: SignupForm) -> int:
        """
        Create the account. A taken email shows up as ``DuplicateAccountError``
        and leaves nothing behind.
        """
        password_hash = self.hash_password(form.password)
        try:
            with atomic():
                user_id = create_user(form.email, password_hash, form.username)
        except ConstraintError as e:
            raise DuplicateAccountError() from e

        current_app.logger.info(f"[auth/signup] created user_id={user_id}")
        return user_id

    # ------------------------------
    # Session identity
    # ------------------------------
    def serialize(self, user: UserRecord) -> str:
        return str(user.id)

    def deserialize(self, jwt_header, jwt_data) -> Optional[UserRecord]:
        try:
            user_id = int(jwt_data["sub"])
        except (KeyError, TypeError, ValueError):
            return None
        return get_user_by_id(user_id)

    def log_in(self, response, user: UserRecord):
        set_access_cookies(response, create_access_token(identity=user))
        return response

    def log_out(self, response):
        unset_jwt_cookies(response)
        return response

    def current_user(self) -> Optional[UserRecord]:
        """
        The logged-in user, or None. Expired or tampered tokens raise and are
        turned into a redirect by the JWT loaders.
        """
        if verify_jwt_in_request(optional=True) is None:
            return None
        return get_current_user()

    # ------------------------------
    # Route guards
    # ------------------------------
    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if self.current_user() is None:
                return redirect(url_for(self.login_endpoint))
            return view(*args, **kwargs)

        return wrapper

    def anonymous_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if self.current_user() is not None:
                return redirect(url_for(self.home_endpoint))
            return view(*args, **kwargs)

        return wrapper

    # ------------------------------
    # JWT loader callbacks
    # ------------------------------
    def _session_rejected(self, *args):
        return self.log_out(redirect(url_for(self.login_endpoint)))

    def _token_expired(self, jwt_header, jwt_payload):
        return self.log_out(redirect(url_for(self.login_endpoint)))
