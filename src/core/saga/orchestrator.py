# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Saga orchestrator for multi-collaborator operations.

A saga is an ordered list of forward steps, each optionally paired with a
compensating step. Steps run in order. On the first failure the
compensations of the steps that already ran are executed in reverse order,
and the outcome is reported as a tagged value instead of an exception:

- SagaCompleted: every step succeeded
- SagaAborted: a step failed and every compensation succeeded
- SagaInconsistent: a step failed and at least one compensation failed too

Callers are expected to ``match`` on the outcome so that each case is
handled explicitly.

If the task running a saga is cancelled, the compensations still run
before the cancellation propagates.

Example:
    >>> saga = Saga("provision_student", [
    ...     SagaStep("create_credential", create, compensation=delete),
    ...     SagaStep("insert_profile", insert, compensation=rollback,
    ...              compensate_on_failure=True),
    ... ])
    >>> outcome = await saga.run({"identifier": "0001"})
    >>> match outcome:
    ...     case SagaCompleted(results=results): ...
    ...     case SagaAborted(error=error): ...
    ...     case SagaInconsistent(compensation_failures=failures): ...
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

SagaContext = dict[str, Any]
StepAction = Callable[[SagaContext], Awaitable[Any]]
StepCompensation = Callable[[SagaContext], Awaitable[None]]


@dataclass(frozen=True)
class SagaStep:
    """One forward step of a saga.

    Attributes:
        name: Step name; its result is stored in the context under this key.
        action: Coroutine function performing the step.
        compensation: Coroutine function undoing the step, if any.
        compensate_on_failure: Also run the compensation when this step
            itself fails (for steps that can leave partial effects).
    """

    name: str
    action: StepAction
    compensation: StepCompensation | None = None
    compensate_on_failure: bool = False


@dataclass(frozen=True)
class StepSucceeded:
    """A step (or compensation) that finished normally."""

    step: str
    value: Any = None


@dataclass(frozen=True)
class StepFailed:
    """A step (or compensation) that raised or timed out."""

    step: str
    error: Exception


StepResult = StepSucceeded | StepFailed


@dataclass(frozen=True)
class SagaCompleted:
    """Every step succeeded."""

    results: SagaContext


@dataclass(frozen=True)
class SagaAborted:
    """A step failed; all compensations ran cleanly."""

    failed_step: str
    error: Exception
    compensated: tuple[str, ...] = ()
    context: SagaContext = field(default_factory=dict)


@dataclass(frozen=True)
class SagaInconsistent:
    """A step failed and at least one compensation failed as well."""

    failed_step: str
    error: Exception
    compensation_failures: tuple[StepFailed, ...] = ()
    compensated: tuple[str, ...] = ()
    context: SagaContext = field(default_factory=dict)


SagaOutcome = SagaCompleted | SagaAborted | SagaInconsistent


class SagaCancelledError(Exception):
    """Recorded as the failure when the task running a saga is cancelled."""


class Saga:
    """Runs saga steps and their compensations.

    Attributes:
        name: Saga name used in log records.
        steps: Ordered forward steps.
        step_timeout: Optional per-step and per-compensation timeout in
            seconds. A timeout counts as a failure.
        cancelled_outcome: Rollback outcome of the last run that was
            cancelled, or None.
    """

    def __init__(
        self,
        name: str,
        steps: Sequence[SagaStep],
        step_timeout: float | None = None,
    ) -> None:
        names = [step.name for step in steps]
        if len(names) != len(set(names)):
            raise ValueError(f"Saga {name} has duplicate step names: {names}")

        self.name = name
        self.steps = tuple(steps)
        self.step_timeout = step_timeout
        self.cancelled_outcome: SagaAborted | SagaInconsistent | None = None

    async def run(self, context: SagaContext | None = None) -> SagaOutcome:
        """Run the saga.

        Args:
            context: Initial context shared by every step. Each step's
                return value is stored under the step name.

        Returns:
            The tagged outcome of the run.
        """
        context = dict(context or {})
        completed: list[SagaStep] = []
        self.cancelled_outcome = None

        for step in self.steps:
            try:
                result = await self._call(step.name, step.action, context)
            except asyncio.CancelledError:
                to_compensate = list(completed)
                if step.compensate_on_failure:
                    to_compensate.append(step)
                await self._compensate_cancelled(step.name, to_compensate, context)
                raise

            match result:
                case StepSucceeded(value=value):
                    context[step.name] = value
                    completed.append(step)
                case StepFailed(error=error):
                    logger.warning(
                        "Saga %s failed at step %s: %s: %s",
                        self.name,
                        step.name,
                        type(error).__name__,
                        error,
                    )
                    to_compensate = list(completed)
                    if step.compensate_on_failure:
                        to_compensate.append(step)
                    return await self._compensate(step.name, error, to_compensate, context)

        logger.debug("Saga %s completed (%d steps)", self.name, len(self.steps))
        return SagaCompleted(results=context)

    async def _compensate(
        self,
        failed_step: str,
        error: Exception,
        steps: list[SagaStep],
        context: SagaContext,
    ) -> SagaAborted | SagaInconsistent:
        """Run compensations in reverse order, collecting failures."""
        compensated: list[str] = []
        failures: list[StepFailed] = []

        for step in reversed(steps):
            if step.compensation is None:
                continue

            result = await self._call(f"compensate:{step.name}", step.compensation, context)
            match result:
                case StepSucceeded():
                    compensated.append(step.name)
                case StepFailed() as failure:
                    logger.error(
                        "Saga %s compensation for step %s failed: %s: %s",
                        self.name,
                        step.name,
                        type(failure.error).__name__,
                        failure.error,
                    )
                    failures.append(failure)

        if failures:
            return SagaInconsistent(
                failed_step=failed_step,
                error=error,
                compensation_failures=tuple(failures),
                compensated=tuple(compensated),
                context=context,
            )

        logger.info(
            "Saga %s rolled back after %s failed (compensated: %s)",
            self.name,
            failed_step,
            ", ".join(compensated) or "none",
        )
        return SagaAborted(
            failed_step=failed_step,
            error=error,
            compensated=tuple(compensated),
            context=context,
        )

    async def _compensate_cancelled(
        self,
        step_name: str,
        steps: list[SagaStep],
        context: SagaContext,
    ) -> None:
        """Roll back after the saga's task was cancelled.

        Compensations run in a shielded task, so a repeated cancellation
        cannot interrupt them. The outcome is kept in ``cancelled_outcome``
        because the cancellation itself is re-raised to the caller.
        """
        logger.warning("Saga %s cancelled during step %s", self.name, step_name)
        error = SagaCancelledError(f"Saga {self.name} cancelled during step {step_name}")
        rollback = asyncio.ensure_future(self._compensate(step_name, error, steps, context))
        try:
            self.cancelled_outcome = await asyncio.shield(rollback)
        except asyncio.CancelledError:
            self.cancelled_outcome = await rollback

        if isinstance(self.cancelled_outcome, SagaInconsistent):
            logger.error(
                "Saga %s cancelled and could not be rolled back (failed: %s)",
                self.name,
                ", ".join(failure.step for failure in self.cancelled_outcome.compensation_failures),
            )

    async def _call(
        self,
        label: str,
        func: Callable[[SagaContext], Awaitable[Any]],
        context: SagaContext,
    ) -> StepResult:
        """Invoke a step or compensation and wrap the outcome."""
        try:
            if self.step_timeout is not None:
                value = await asyncio.wait_for(func(context), timeout=self.step_timeout)
            else:
                value = await func(context)
        except Exception as e:
            return StepFailed(step=label, error=e)
        return StepSucceeded(step=label, value=value)
