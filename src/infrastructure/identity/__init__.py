# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identity provider integration.

- base: IdentityProvider protocol and its error types
- supabase: Supabase Auth (GoTrue) implementation
"""

from src.infrastructure.identity.base import (
    AuthenticationFailedError,
    DuplicateHandleError,
    IdentityProvider,
    IdentityProviderError,
    ProviderUnavailableError,
)
from src.infrastructure.identity.supabase import SupabaseIdentityProvider

__all__ = [
    "IdentityProvider",
    "IdentityProviderError",
    "DuplicateHandleError",
    "ProviderUnavailableError",
    "AuthenticationFailedError",
    "SupabaseIdentityProvider",
]
