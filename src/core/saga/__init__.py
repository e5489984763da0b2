# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saga orchestration: ordered steps with reverse-order compensation."""

from src.core.saga.orchestrator import (
    Saga,
    SagaAborted,
    SagaCancelledError,
    SagaCompleted,
    SagaContext,
    SagaInconsistent,
    SagaOutcome,
    SagaStep,
    StepFailed,
    StepResult,
    StepSucceeded,
)

__all__ = [
    "Saga",
    "SagaStep",
    "SagaContext",
    "SagaOutcome",
    "SagaCompleted",
    "SagaAborted",
    "SagaInconsistent",
    "SagaCancelledError",
    "StepResult",
    "StepSucceeded",
    "StepFailed",
]
