# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Manual term result entry domain."""

from src.domains.results.service import ResultEntryService

__all__ = ["ResultEntryService"]
