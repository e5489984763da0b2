# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Supabase Auth (GoTrue) identity provider client.

Login handles are turned into emails (``<handle>@<login_email_domain>``)
because GoTrue keys password accounts by email. Accounts are created
pre-confirmed through the admin API with the service role key.

Endpoints used:
- POST   /auth/v1/admin/users            create credential
- DELETE /auth/v1/admin/users/{id}       delete credential
- POST   /auth/v1/token?grant_type=password  sign in

Example:
    client = SupabaseIdentityProvider.from_settings(settings.identity)
    ref = await client.create_credential("0001", "student", {"role": "student"})
"""

import logging
from typing import Any

import httpx

from src.core.config.settings import IdentitySettings
from src.infrastructure.identity.base import (
    AuthenticationFailedError,
    DuplicateHandleError,
    IdentityProviderError,
    ProviderUnavailableError,
)

logger = logging.getLogger(__name__)

# GoTrue error codes meaning "this email is taken"
_DUPLICATE_CODES = frozenset({"email_exists", "user_already_exists"})


class SupabaseIdentityProvider:
    """Async client for the Supabase Auth API.

    Attributes:
        base_url: Supabase project URL.
        login_email_domain: Domain appended to login handles.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        service_role_key: str,
        anon_key: str,
        login_email_domain: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Supabase project URL.
            service_role_key: Service role key for admin endpoints.
            anon_key: Public key for the token endpoint.
            login_email_domain: Domain appended to login handles.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        self.base_url = base_url.rstrip("/")
        self.login_email_domain = login_email_domain
        self.timeout = timeout
        self._service_role_key = service_role_key
        self._anon_key = anon_key
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: IdentitySettings) -> "SupabaseIdentityProvider":
        """Build a client from identity settings."""
        return cls(
            base_url=settings.base_url,
            service_role_key=settings.service_role_key.get_secret_value(),
            anon_key=settings.anon_key.get_secret_value(),
            login_email_domain=settings.login_email_domain,
            timeout=settings.timeout,
        )

    def email_for(self, login_handle: str) -> str:
        """Map a login handle to the email GoTrue stores."""
        if "@" in login_handle:
            return login_handle
        return f"{login_handle}@{self.login_email_domain}"

    def _admin_headers(self) -> dict[str, str]:
        return {
            "apikey": self._service_role_key,
            "Authorization": f"Bearer {self._service_role_key}",
            "Content-Type": "application/json",
        }

    def _public_headers(self) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        headers: dict[str, str],
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, mapping transport failures to ProviderUnavailableError."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                return await client.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("Identity provider timed out: %s %s", method, path)
            raise ProviderUnavailableError(f"Identity provider timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error("Identity provider connection error: %s", str(e))
            raise ProviderUnavailableError(f"Identity provider unreachable: {e}") from e

    @staticmethod
    def _error_body(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}

    @staticmethod
    def _error_message(body: dict[str, Any], fallback: str) -> str:
        for key in ("msg", "message", "error_description", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
        return fallback

    async def create_credential(
        self,
        login_handle: str,
        password: str,
        metadata: dict[str, Any],
    ) -> str:
        """Create a confirmed password account.

        Returns:
            The GoTrue user id.

        Raises:
            DuplicateHandleError: If the email is already registered.
            ProviderUnavailableError: On transport failure, timeout or 5xx.
            IdentityProviderError: On any other rejection.
        """
        payload = {
            "email": self.email_for(login_handle),
            "password": password,
            "email_confirm": True,
            "user_metadata": metadata,
        }
        response = await self._request(
            "POST",
            "/auth/v1/admin/users",
            headers=self._admin_headers(),
            json=payload,
        )

        if response.status_code in (200, 201):
            data = response.json()
            user = data.get("user", data) if isinstance(data, dict) else {}
            user_id = user.get("id")
            if not user_id:
                raise IdentityProviderError("Identity provider returned no user id", response.status_code)
            logger.info("Created credential for handle %s", login_handle)
            return str(user_id)

        body = self._error_body(response)
        message = self._error_message(body, "Failed to create credential")
        code = body.get("error_code") or body.get("code")

        if (
            response.status_code in (409, 422)
            and (code in _DUPLICATE_CODES or "already" in message.lower())
        ):
            raise DuplicateHandleError(message, response.status_code)
        if response.status_code >= 500:
            raise ProviderUnavailableError(message, response.status_code)
        raise IdentityProviderError(message, response.status_code)

    async def delete_credential(self, credential_ref: str) -> None:
        """Delete an account; a missing account counts as deleted.

        Raises:
            ProviderUnavailableError: On transport failure, timeout or 5xx.
            IdentityProviderError: On any other rejection.
        """
        response = await self._request(
            "DELETE",
            f"/auth/v1/admin/users/{credential_ref}",
            headers=self._admin_headers(),
        )

        if response.status_code in (200, 204, 404):
            logger.info("Deleted credential %s", credential_ref)
            return

        message = self._error_message(self._error_body(response), "Failed to delete credential")
        if response.status_code >= 500:
            raise ProviderUnavailableError(message, response.status_code)
        raise IdentityProviderError(message, response.status_code)

    async def sign_in(self, login_handle: str, password: str) -> dict[str, Any]:
        """Password sign-in.

        Returns:
            The token payload (access token, refresh token, user).

        Raises:
            AuthenticationFailedError: On 400/401 responses.
            ProviderUnavailableError: On transport failure, timeout or 5xx.
        """
        response = await self._request(
            "POST",
            "/auth/v1/token",
            headers=self._public_headers(),
            params={"grant_type": "password"},
            json={"email": self.email_for(login_handle), "password": password},
        )

        if response.status_code == 200:
            return response.json()

        message = self._error_message(self._error_body(response), "Sign-in failed")
        if response.status_code >= 500:
            raise ProviderUnavailableError(message, response.status_code)
        raise AuthenticationFailedError(message, response.status_code)
