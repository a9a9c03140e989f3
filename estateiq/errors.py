"""
Error taxonomy for EstateIQ.

Every error raised by the services carries the HTTP status it maps to, so the
exception handlers in ``estateiq.main`` can turn it into an ``{"error": ...}``
response without inspecting the type.
"""


class EstateIQError(Exception):
    """Base class for expected, caller-recoverable failures."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EstateIQError):
    """Malformed or missing required input."""


class ConflictError(EstateIQError):
    """Uniqueness violation, e.g. an email that is already registered."""


class AuthError(EstateIQError):
    """Credential mismatch. The message never says which part was wrong."""


class Unauthorized(AuthError):
    """Missing, unknown or expired session on a protected resource."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class TokenDecodeError(EstateIQError):
    """Malformed external identity token."""
