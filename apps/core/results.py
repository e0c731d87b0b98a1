"""Tagged success/failure results returned by guards and services."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Machine-checkable failure kinds."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN_ADMIN_REQUIRED = "forbidden:admin_required"
    FORBIDDEN_ORG_MISMATCH = "forbidden:org_mismatch"
    FORBIDDEN_CSRF = "forbidden:csrf"
    VALIDATION_MISSING_FIELD = "validation:missing_field"
    VALIDATION_INVALID = "validation:invalid"
    NOT_FOUND = "not_found"
    CONFLICT_ALREADY_REVIEWED = "conflict:already_reviewed"
    CONFLICT_SLUG_TAKEN = "conflict:slug_taken"
    INTERNAL = "internal"

    @property
    def category(self) -> str:
        """Return the top-level kind, e.g. 'forbidden' for 'forbidden:org_mismatch'."""
        return self.value.split(":", 1)[0]


@dataclass(frozen=True)
class Result:
    """
    Outcome of a guard, transition or multi-step procedure.

    Callers branch on ``ok`` instead of catching exceptions. Failures carry
    the error kind, an HTTP status code and a caller-facing message.
    """

    ok: bool
    value: Any = None
    kind: ErrorKind | None = None
    status: int = 200
    message: str = ""

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, status: int, message: str) -> "Result":
        return cls(ok=False, kind=kind, status=status, message=message)

    def __bool__(self):
        return self.ok


def unauthorized(message: str = "Unauthorized") -> Result:
    return Result.failure(ErrorKind.UNAUTHORIZED, 401, message)


def validation_error(message: str) -> Result:
    return Result.failure(ErrorKind.VALIDATION_INVALID, 400, message)


def not_found(message: str) -> Result:
    return Result.failure(ErrorKind.NOT_FOUND, 404, message)


def internal_error(message: str = "Internal server error") -> Result:
    return Result.failure(ErrorKind.INTERNAL, 500, message)
