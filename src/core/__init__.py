# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Core package for the school portal.

This package contains framework-free building blocks:
- config: Application configuration and settings
- grading: Grade band table and answer-key scoring
- saga: Step orchestration with compensation
"""
