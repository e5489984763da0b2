# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the sequence allocator (SQLite-backed)."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from src.core.config.settings import DatabaseSettings
from src.domains.errors import AllocationExhaustedError, CollaboratorUnavailableError
from src.domains.sequence import STUDENT_SPACE, SequenceAllocator
from src.domains.sequence import service as sequence_service
from src.infrastructure.database.connection import build_engine, build_sessionmaker
from src.infrastructure.database.models import SequenceCounter, Student

pytestmark = pytest.mark.integration


class AlwaysLosingAllocator(SequenceAllocator):
    """Allocator whose every compare-and-swap loses the race."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.attempts = 0

    async def _try_allocate(self, session, space):
        self.attempts += 1
        return None


class TestAllocate:
    """Tests for SequenceAllocator.allocate."""

    async def test_first_allocation_starts_at_one(self, db_sessionmaker) -> None:
        """Test an empty space issues ordinal 1 and records it."""
        allocator = SequenceAllocator(db_sessionmaker)

        assert await allocator.allocate(STUDENT_SPACE) == 1
        assert await allocator.peek(STUDENT_SPACE) == 1

    async def test_sequential_allocations_increase(self, db_sessionmaker) -> None:
        """Test consecutive allocations are strictly increasing."""
        allocator = SequenceAllocator(db_sessionmaker)

        ordinals = [await allocator.allocate(STUDENT_SPACE) for _ in range(5)]

        assert ordinals == [1, 2, 3, 4, 5]

    async def test_spaces_are_independent(self, db_sessionmaker) -> None:
        """Test each space keeps its own counter."""
        allocator = SequenceAllocator(db_sessionmaker)

        await allocator.allocate(STUDENT_SPACE)
        await allocator.allocate(STUDENT_SPACE)

        assert await allocator.allocate("receipt") == 1
        assert await allocator.peek(STUDENT_SPACE) == 2

    async def test_bootstraps_from_existing_identifiers(
        self, db_sessionmaker, db_session
    ) -> None:
        """Test a fresh counter starts after the largest numeric identifier."""
        db_session.add_all(
            [
                Student(identifier="0007", display_name="Ada Obi", class_level="JSS1"),
                Student(identifier="0012", display_name="Emeka Eze", class_level="JSS2"),
                Student(identifier="legacy-x", display_name="Old Record", class_level="SS3"),
                Student(identifier="\u00b2", display_name="Typo Record", class_level="SS1"),
            ]
        )
        await db_session.commit()

        allocator = SequenceAllocator(db_sessionmaker)

        assert await allocator.allocate(STUDENT_SPACE) == 13

    async def test_existing_counter_is_respected(self, db_sessionmaker, db_session) -> None:
        """Test an existing counter row is advanced, not re-seeded."""
        db_session.add(SequenceCounter(space=STUDENT_SPACE, last_issued=41))
        await db_session.commit()

        allocator = SequenceAllocator(db_sessionmaker)

        assert await allocator.allocate(STUDENT_SPACE) == 42

    async def test_concurrent_allocations_are_unique(self, db_sessionmaker) -> None:
        """Test concurrent callers never receive the same ordinal."""
        allocator = SequenceAllocator(db_sessionmaker, max_retries=10)
        await allocator.allocate(STUDENT_SPACE)

        ordinals = await asyncio.gather(*(allocator.allocate(STUDENT_SPACE) for _ in range(8)))

        assert sorted(ordinals) == list(range(2, 10))
        assert await allocator.peek(STUDENT_SPACE) == 9

    async def test_concurrent_allocators_share_counter(self, db_url, db_engine) -> None:
        """Test allocators on separate engines coordinate through the store."""
        other_engine = build_engine(DatabaseSettings(url=db_url))
        try:
            first = SequenceAllocator(build_sessionmaker(db_engine), max_retries=10)
            second = SequenceAllocator(build_sessionmaker(other_engine), max_retries=10)
            await first.allocate(STUDENT_SPACE)

            ordinals = await asyncio.gather(
                *(allocator.allocate(STUDENT_SPACE) for allocator in [first, second] * 3)
            )
        finally:
            await other_engine.dispose()

        assert len(set(ordinals)) == 6
        assert sorted(ordinals) == list(range(2, 8))

    async def test_exhaustion(self, db_sessionmaker) -> None:
        """Test losing every race raises AllocationExhaustedError."""
        allocator = AlwaysLosingAllocator(db_sessionmaker, max_retries=3)

        with pytest.raises(AllocationExhaustedError) as exc_info:
            await allocator.allocate(STUDENT_SPACE)

        assert allocator.attempts == 4
        assert exc_info.value.details == {"space": STUDENT_SPACE, "attempts": 4}

    async def test_retries_pause_with_growing_jitter(self, db_sessionmaker, monkeypatch) -> None:
        """Test each retry waits a random pause bounded by the attempt number."""
        sleep = AsyncMock()
        monkeypatch.setattr(sequence_service.asyncio, "sleep", sleep)
        allocator = AlwaysLosingAllocator(db_sessionmaker, max_retries=3, retry_backoff=0.5)

        with pytest.raises(AllocationExhaustedError):
            await allocator.allocate(STUDENT_SPACE)

        delays = [call.args[0] for call in sleep.await_args_list]
        assert len(delays) == 3
        for attempt, delay in enumerate(delays, start=1):
            assert 0 <= delay <= 0.5 * attempt

    async def test_zero_backoff_retries_immediately(self, db_sessionmaker, monkeypatch) -> None:
        """Test a zero backoff never pauses between attempts."""
        sleep = AsyncMock()
        monkeypatch.setattr(sequence_service.asyncio, "sleep", sleep)
        allocator = AlwaysLosingAllocator(db_sessionmaker, max_retries=2, retry_backoff=0)

        with pytest.raises(AllocationExhaustedError):
            await allocator.allocate(STUDENT_SPACE)

        assert allocator.attempts == 3
        sleep.assert_not_awaited()

    async def test_store_failure(self, tmp_path) -> None:
        """Test an unreachable store raises CollaboratorUnavailableError."""
        engine = build_engine(
            DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'portal.db'}")
        )
        try:
            allocator = SequenceAllocator(build_sessionmaker(engine))

            with pytest.raises(CollaboratorUnavailableError):
                await allocator.allocate(STUDENT_SPACE)
        finally:
            await engine.dispose()

    async def test_counter_row_persisted(self, db_sessionmaker, db_session) -> None:
        """Test the issued ordinal is committed before it is returned."""
        allocator = SequenceAllocator(db_sessionmaker)

        ordinal = await allocator.allocate(STUDENT_SPACE)

        stored = await db_session.scalar(
            select(SequenceCounter.last_issued).where(SequenceCounter.space == STUDENT_SPACE)
        )
        assert stored == ordinal


def test_negative_retries_rejected() -> None:
    """Test a negative retry budget is a configuration error."""
    with pytest.raises(ValueError):
        SequenceAllocator(None, max_retries=-1)  # type: ignore[arg-type]


def test_negative_backoff_rejected() -> None:
    """Test a negative retry pause is a configuration error."""
    with pytest.raises(ValueError):
        SequenceAllocator(None, retry_backoff=-0.1)  # type: ignore[arg-type]
