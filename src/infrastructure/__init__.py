# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Infrastructure layer for external collaborators.

This package contains clients and managers for:
- Database connections, models and migrations (SQLAlchemy)
- Identity provider (Supabase Auth)
"""
