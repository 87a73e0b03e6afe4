"""Domain errors raised by the service layer.

Each error carries a ``kind`` so the HTTP layer can render a structured
failure without knowing about individual exception classes.
"""


class ValidaProError(Exception):
    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.message}


class ValidationError(ValidaProError):
    kind = "validation_error"
    status_code = 400


class NotFound(ValidaProError):
    kind = "not_found"
    status_code = 404


class ConstraintViolation(ValidaProError):
    kind = "constraint_violation"
    status_code = 409


class ConcurrencyConflict(ValidaProError):
    kind = "concurrency_conflict"
    status_code = 409


__all__ = [
    "ConcurrencyConflict",
    "ConstraintViolation",
    "NotFound",
    "ValidaProError",
    "ValidationError",
]
