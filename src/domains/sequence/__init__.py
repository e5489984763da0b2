# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Sequence allocation for role-scoped identifiers."""

from src.domains.sequence.service import (
    DEFAULT_IDENTIFIER_WIDTH,
    STUDENT_SPACE,
    SequenceAllocator,
    format_identifier,
)

__all__ = [
    "SequenceAllocator",
    "format_identifier",
    "STUDENT_SPACE",
    "DEFAULT_IDENTIFIER_WIDTH",
]
