# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer.

Each domain module provides a service that orchestrates the identity
provider and the relational store for one use case.

Domains:
    assessment: Assessment submission scoring with an idempotency guard.
    auth: Password sign-in pass-through.
    provisioning: Teacher and student account provisioning.
    results: Manual continuous-assessment plus exam score entry.
    sequence: Role-scoped sequence number allocation.
"""
