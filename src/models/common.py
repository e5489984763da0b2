# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Common response envelopes."""

from typing import Any, Literal

from pydantic import BaseModel


class ErrorBody(BaseModel):
    """Machine-readable error kind plus a human-readable message."""

    kind: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    success: Literal[False] = False
    error: ErrorBody

