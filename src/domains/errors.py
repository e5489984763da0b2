# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain error taxonomy.

Every failure that leaves a domain service is one of these exceptions.
Each class carries a stable ``kind`` string that the HTTP layer reports
verbatim, plus the status code it maps to:

- ValidationError: missing or malformed input, raised before any side effect
- DuplicateIdentifierError: identifier collision in a role-scoped space
- AllocationExhaustedError: sequence allocator retry budget spent
- CollaboratorUnavailableError: identity or storage call failed or timed out
- ProvisioningInconsistentError: partial account state left behind
- AlreadySubmittedError: idempotency guard tripped
- InvalidCredentialsError: sign-in rejected by the identity provider
- NotFoundError: requested record does not exist
"""

from typing import Any


class PortalError(Exception):
    """Base exception for all domain errors.

    Attributes:
        kind: Stable machine-readable error kind.
        status_code: HTTP status the API layer responds with.
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    kind: str = "PortalError"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the error envelope body."""
        body: dict[str, Any] = {"kind": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(PortalError):
    """Raised when a required field is missing or out of range."""

    kind = "ValidationError"
    status_code = 422


class DuplicateIdentifierError(PortalError):
    """Raised when an identifier collides within its role-scoped space."""

    kind = "DuplicateIdentifier"
    status_code = 409


class AllocationExhaustedError(PortalError):
    """Raised when the sequence allocator gives up after repeated conflicts."""

    kind = "AllocationExhausted"
    status_code = 503


class CollaboratorUnavailableError(PortalError):
    """Raised when the identity provider or the store failed or timed out."""

    kind = "CollaboratorUnavailable"
    status_code = 503


class ProvisioningInconsistentError(PortalError):
    """Raised when compensation failed and partial state remains.

    The orphaned credential reference is kept in ``details`` so an
    operator can reconcile it manually.
    """

    kind = "ProvisioningInconsistent"
    status_code = 500


class AlreadySubmittedError(PortalError):
    """Raised when a grading record already exists for the same key."""

    kind = "AlreadySubmitted"
    status_code = 409


class InvalidCredentialsError(PortalError):
    """Raised when a sign-in attempt is rejected."""

    kind = "InvalidCredentials"
    status_code = 401


class NotFoundError(PortalError):
    """Raised when a requested record does not exist."""

    kind = "NotFound"
    status_code = 404
