# liftlog/forms.py
"""
Parsing of inbound form / JSON payloads into typed records.

Everything here raises ``ValidationError`` with a user-facing message; no
database access happens in this module.
"""

import math
from dataclasses import dataclass
from datetime import datetime, time as dt_time
from typing import Any, Dict, List, Optional

from .errors import ValidationError

MIN_PASSWORD_LENGTH = 6
MAX_NAME_LENGTH = 100
# bounds of the Integer / Numeric(7, 2) columns
MAX_INT = 2**31 - 1
MAX_WEIGHT = 99999.99
TIME_FORMATS = ("%H:%M:%S", "%H:%M")


@dataclass(frozen=True)
class SetForm:
    exercise_id: int
    weight: float
    reps: int


@dataclass(frozen=True)
class WorkoutForm:
    name: str
    sets: List[SetForm]
    time: Optional[dt_time] = None


@dataclass(frozen=True)
class SignupForm:
    email: str
    password: str
    username: str


# ------------------------------
# Helpers
# ------------------------------
def safe_int(v: Any, default: int) -> int:
    try:
        return int(v)
    except (TypeError, ValueError, OverflowError):
        return default


def _text(v: Any) -> str:
    return v if isinstance(v, str) else ""


def _to_int(v: Any, field: str) -> int:
    if isinstance(v, bool):
        raise ValidationError(f"{field} must be a whole number")
    if isinstance(v, float) and not v.is_integer():
        raise ValidationError(f"{field} must be a whole number")
    try:
        return int(v)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a whole number") from None


def _to_number(v: Any, field: str) -> float:
    if isinstance(v, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        number = float(v)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a number") from None
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field} must be a number")
    return number


def _name(v: Any, what: str) -> str:
    name = v.strip() if isinstance(v, str) else ""
    if not name:
        raise ValidationError(f"{what} name is required")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"{what} name must be at most {MAX_NAME_LENGTH} characters")
    return name


def parse_time(v: Any) -> Optional[dt_time]:
    """'01:05:30' or '01:05' -> datetime.time; empty -> None."""
    if v is None or v == "":
        return None
    if not isinstance(v, str):
        raise ValidationError("time must look like HH:MM:SS")
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(v.strip(), fmt).time()
        except ValueError:
            continue
    raise ValidationError("time must look like HH:MM:SS")


def parse_set(data: Any) -> SetForm:
    if not isinstance(data, dict):
        raise ValidationError("each set must be an object")

    exercise_id = _to_int(data.get("exerciseId", data.get("exercise_id")), "exerciseId")
    reps = _to_int(data.get("reps"), "reps")
    weight = _to_number(data.get("weight"), "weight")

    if not 0 < exercise_id <= MAX_INT:
        raise ValidationError("exerciseId is not a valid id")
    if reps < 0:
        raise ValidationError("reps cannot be negative")
    if reps > MAX_INT:
        raise ValidationError("reps is too large")
    if weight < 0:
        raise ValidationError("weight cannot be negative")
    if weight > MAX_WEIGHT:
        raise ValidationError(f"weight must be at most {MAX_WEIGHT}")

    return SetForm(exercise_id=exercise_id, weight=weight, reps=reps)


# ------------------------------
# Payloads
# ------------------------------
def parse_workout_form(data: Any, what: str = "workout") -> WorkoutForm:
    """
    Accepts ``{name, time?, sets: [{exerciseId, weight, reps}]}``, or the
    same object wrapped as ``{"workout": {...}}`` like the browser sends it.
    """
    if isinstance(data, dict) and isinstance(data.get(what), dict):
        data = data[what]
    if not isinstance(data, dict):
        raise ValidationError(f"{what} payload must be an object")

    name = _name(data.get("name"), what.capitalize())

    sets = data.get("sets")
    if not isinstance(sets, list) or not sets:
        raise ValidationError(f"a {what} needs at least one set")

    return WorkoutForm(
        name=name,
        sets=[parse_set(s) for s in sets],
        time=parse_time(data.get("time")),
    )


def parse_signup_form(data: Any) -> SignupForm:
    if not isinstance(data, dict):
        raise ValidationError("signup payload must be an object")

    email = _text(data.get("email")).strip().lower()
    username = _text(data.get("username")).strip()
    password = _text(data.get("password"))  # do NOT strip passwords

    if not email or not username or not password:
        raise ValidationError("email, username and password are required")
    if "@" not in email:
        raise ValidationError("email address is not valid")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"password must be at least {MIN_PASSWORD_LENGTH} characters")

    return SignupForm(email=email, password=password, username=username)


def parse_settings_form(data: Any) -> Dict[str, str]:
    """
    Returns only the fields that were sent, with the password still in
    plain text. Collects every problem before raising.
    """
    if not isinstance(data, dict):
        raise ValidationError("settings payload must be an object")

    fields: Dict[str, str] = {}
    errors: List[Dict[str, str]] = []

    if "username" in data:
        username = _text(data.get("username")).strip()
        if not username:
            errors.append({"field": "username", "error": "username cannot be empty"})
        else:
            fields["username"] = username

    if "email" in data:
        email = _text(data.get("email")).strip().lower()
        if "@" not in email:
            errors.append({"field": "email", "error": "email address is not valid"})
        else:
            fields["email"] = email

    if "password" in data:
        password = _text(data.get("password"))
        if len(password) < MIN_PASSWORD_LENGTH:
            errors.append(
                {
                    "field": "password",
                    "error": f"password must be at least {MIN_PASSWORD_LENGTH} characters",
                }
            )
        else:
            fields["password"] = password

    if errors:
        raise ValidationError("Could not update your settings", errors=errors)
    if not fields:
        raise ValidationError("nothing to update")
    return fields


def parse_exercise_name(data: Any) -> str:
    if not isinstance(data, dict):
        raise ValidationError("exercise payload must be an object")
    return _name(data.get("name"), "Exercise")
