# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Sequence allocator for role-scoped identifier spaces.

Each space (e.g. "student") has one row in ``sequence_counters`` holding
the last issued ordinal. An allocation reads the row and then advances it
with a compare-and-swap:

    UPDATE sequence_counters
       SET last_issued = n + 1
     WHERE space = :space AND last_issued = n

If no row is updated, another caller won the race and the cycle is
retried after a short jittered pause, up to ``max_retries`` times after
the first attempt. Every
allocation commits in its own session before the ordinal is returned, so
an ordinal is never handed out without being recorded.

The counter row is created lazily. For spaces backed by a profile table
the starting value is the largest numeric identifier already present,
so existing accounts are never re-issued.

Example:
    >>> allocator = SequenceAllocator(get_sessionmaker(), max_retries=5)
    >>> ordinal = await allocator.allocate("student")
    >>> format_identifier(ordinal)
    '0001'
"""

import asyncio
import logging
import random

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import InstrumentedAttribute

from src.domains.errors import AllocationExhaustedError, CollaboratorUnavailableError
from src.infrastructure.database.models import SequenceCounter, Student
from src.utils.datetime import utc_now

logger = logging.getLogger(__name__)

STUDENT_SPACE = "student"

DEFAULT_IDENTIFIER_WIDTH = 4

# Identifier columns scanned to seed a fresh counter
BOOTSTRAP_COLUMNS: dict[str, InstrumentedAttribute] = {
    STUDENT_SPACE: Student.identifier,
}


def format_identifier(ordinal: int, width: int = DEFAULT_IDENTIFIER_WIDTH) -> str:
    """Zero-pad an ordinal into an identifier.

    Ordinals wider than ``width`` are not truncated.

    Raises:
        ValueError: If the ordinal is not positive.
    """
    if ordinal < 1:
        raise ValueError(f"Ordinal must be positive, got {ordinal}")
    return str(ordinal).zfill(width)


class SequenceAllocator:
    """Issues strictly increasing ordinals per identifier space.

    Attributes:
        max_retries: Retries after the first attempt before giving up.
        retry_backoff: Upper bound in seconds of the random pause before
            the first retry; it grows linearly with each attempt.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        max_retries: int = 5,
        retry_backoff: float = 0.01,
    ) -> None:
        """Initialize the allocator.

        Args:
            sessionmaker: Factory for the short-lived allocation sessions.
            max_retries: Retries after the first attempt.
            retry_backoff: Base pause between attempts in seconds.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if retry_backoff < 0:
            raise ValueError("retry_backoff must be >= 0")
        self._sessionmaker = sessionmaker
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff

    async def allocate(self, space: str) -> int:
        """Allocate the next ordinal in a space.

        Args:
            space: Identifier space name.

        Returns:
            The newly issued ordinal, already committed.

        Raises:
            AllocationExhaustedError: If every attempt lost a race.
            CollaboratorUnavailableError: If the store fails.
        """
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                async with self._sessionmaker() as session:
                    ordinal = await self._try_allocate(session, space)
            except SQLAlchemyError as e:
                logger.error("Sequence allocation failed for space %s: %s", space, str(e))
                raise CollaboratorUnavailableError(
                    f"Sequence store unavailable for space '{space}'",
                    details={"space": space},
                ) from e

            if ordinal is not None:
                logger.debug("Allocated %s #%d (attempt %d)", space, ordinal, attempt)
                return ordinal

            logger.debug("Sequence conflict on %s (attempt %d/%d)", space, attempt, attempts)
            if attempt < attempts and self.retry_backoff:
                await asyncio.sleep(random.uniform(0, self.retry_backoff * attempt))

        logger.warning("Sequence allocation exhausted for space %s after %d attempts", space, attempts)
        raise AllocationExhaustedError(
            f"Could not allocate an identifier in space '{space}' after {attempts} attempts",
            details={"space": space, "attempts": attempts},
        )

    async def peek(self, space: str) -> int:
        """Return the last issued ordinal of a space (0 if never used)."""
        async with self._sessionmaker() as session:
            current = await session.scalar(
                select(SequenceCounter.last_issued).where(SequenceCounter.space == space)
            )
        return current or 0

    async def _try_allocate(self, session: AsyncSession, space: str) -> int | None:
        """Run one read-increment-write cycle.

        Returns:
            The issued ordinal, or None when another caller won the race.
        """
        current = await session.scalar(
            select(SequenceCounter.last_issued).where(SequenceCounter.space == space)
        )

        if current is None:
            current = await self._bootstrap_value(session, space)
            session.add(SequenceCounter(space=space, last_issued=current))
            try:
                await session.commit()
            except IntegrityError:
                # Someone else created the row first
                await session.rollback()
                return None
            logger.info("Initialized sequence space %s at %d", space, current)

        result = await session.execute(
            update(SequenceCounter)
            .where(
                SequenceCounter.space == space,
                SequenceCounter.last_issued == current,
            )
            .values(last_issued=current + 1, updated_at=utc_now())
        )
        if result.rowcount != 1:
            await session.rollback()
            return None

        await session.commit()
        return current + 1

    async def _bootstrap_value(self, session: AsyncSession, space: str) -> int:
        """Largest numeric identifier already stored for a space."""
        column = BOOTSTRAP_COLUMNS.get(space)
        if column is None:
            return 0

        result = await session.execute(select(column))
        numeric = [
            int(value)
            for value in result.scalars()
            if value and value.isascii() and value.isdigit()
        ]
        return max(numeric, default=0)
