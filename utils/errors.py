# utils/errors.py
from flask import jsonify


class ApiError(Exception):
    """Error that maps straight onto a JSON ``{"message": ...}`` response."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_response(self):
        return jsonify({"message": self.message}), self.status_code


class ValidationError(ApiError):
    status_code = 400


class CapacityError(ValidationError):
    """Student already used every review round."""


class AuthenticationError(ValidationError):
    """Unknown email or wrong password; both read the same."""


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ValidationError):
    """Account already registered under the role."""
