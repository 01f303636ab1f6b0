"""
Domain error kinds raised by the store-facing services.

Each error carries the HTTP status the API layer answers with, so the
services stay framework-agnostic and a single exception handler in
``admin_panel.main`` performs the translation.
"""

from __future__ import annotations


class AdminPanelError(Exception):
    """Base class for every deterministic validation outcome."""

    status_code: int = 400
    kind: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(AdminPanelError):
    status_code = 404
    kind = "not_found"


class ConflictError(AdminPanelError):
    """Duplicate email or duplicate profile name."""

    kind = "conflict"


class InvalidReferenceError(AdminPanelError):
    """A ``profileId`` that does not resolve to an existing profile."""

    kind = "invalid_reference"


class BusinessRuleError(AdminPanelError):
    kind = "business_rule"


class InvariantViolationError(BusinessRuleError):
    """The operation would leave the system without an active administrator."""

    kind = "invariant_violation"


class UnauthorizedError(AdminPanelError):
    """Login or actor resolution failed.

    Absent and inactive users are reported through this same kind so callers
    cannot tell which emails are registered.
    """

    status_code = 401
    kind = "unauthorized"


class ForbiddenError(AdminPanelError):
    status_code = 403
    kind = "forbidden"
