# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Login schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Password sign-in with a login handle or an email."""

    model_config = ConfigDict(populate_by_name=True)

    login_handle: str = Field(min_length=1, alias="email")
    password: str = Field(min_length=1)


class LoginResult(BaseModel):
    """Session returned by the identity provider."""

    success: bool = True
    access_token: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None
    user: dict[str, Any] = Field(default_factory=dict)
