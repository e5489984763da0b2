# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain: login pass-through to the identity provider."""

from src.domains.auth.service import AuthService

__all__ = ["AuthService"]
