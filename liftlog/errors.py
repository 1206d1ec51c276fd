# liftlog/errors.py
from typing import Any, Dict, List, Optional


class LiftlogError(Exception):
    """Base class for errors that are safe to show to the user."""

    status_code = 500
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(LiftlogError):
    status_code = 400
    message = "Invalid form data"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        # [{"field": "email", "error": "..."}]
        self.errors = errors or []

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class AuthError(LiftlogError):
    status_code = 401
    message = "Invalid email or password."


class NotFoundError(LiftlogError):
    status_code = 404
    message = "Not found"


class StorageError(LiftlogError):
    status_code = 500
    message = "Could not save your changes, please try again"


class ConstraintError(StorageError):
    status_code = 409
    message = "That conflicts with existing data"
