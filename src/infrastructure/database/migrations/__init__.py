# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Revisions live in ``versions/`` as alembic-style modules with an
``upgrade()`` function and are applied by ``runner.run_migrations``.
"""
