# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity provider port.

The identity provider owns login credentials. The core only needs to
create a credential, delete it again during compensation, and forward
password sign-ins.
"""

from typing import Any, Protocol, runtime_checkable


class IdentityProviderError(Exception):
    """Base exception for identity provider failures.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status returned by the provider, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation with status code."""
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class DuplicateHandleError(IdentityProviderError):
    """Raised when the login handle is already registered."""


class ProviderUnavailableError(IdentityProviderError):
    """Raised when the provider cannot be reached, times out or errors."""


class AuthenticationFailedError(IdentityProviderError):
    """Raised when a sign-in is rejected."""


@runtime_checkable
class IdentityProvider(Protocol):
    """Operations the core consumes from the identity provider."""

    async def create_credential(
        self,
        login_handle: str,
        password: str,
        metadata: dict[str, Any],
    ) -> str:
        """Create a credential and return its opaque reference.

        Raises:
            DuplicateHandleError: If the handle is taken.
            ProviderUnavailableError: On transport failure or timeout.
        """
        ...

    async def delete_credential(self, credential_ref: str) -> None:
        """Delete a credential.

        Raises:
            ProviderUnavailableError: On transport failure or timeout.
        """
        ...

    async def sign_in(self, login_handle: str, password: str) -> dict[str, Any]:
        """Exchange a handle and password for a session payload.

        Raises:
            AuthenticationFailedError: If the credentials are rejected.
            ProviderUnavailableError: On transport failure or timeout.
        """
        ...
