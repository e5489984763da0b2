# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest fixtures for integration tests.

Each test gets its own file-backed SQLite database. A file (not
``:memory:``) is used so that several connections see the same data,
which the concurrency tests rely on.
"""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.core.config.settings import DatabaseSettings
from src.infrastructure.database.connection import build_engine, build_sessionmaker
from src.infrastructure.database.models import Base


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of the per-test SQLite file."""
    return tmp_path / "portal.db"


@pytest.fixture
def db_url(db_path: Path) -> str:
    """Async SQLAlchemy URL of the per-test database."""
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture(scope="function")
async def db_engine(db_url: str):
    """Create the schema on a fresh database."""
    engine = build_engine(DatabaseSettings(url=db_url))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def db_sessionmaker(db_engine) -> async_sessionmaker[AsyncSession]:
    """Sessionmaker bound to the test database."""
    return build_sessionmaker(db_engine)


@pytest_asyncio.fixture(scope="function")
async def db_session(db_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for integration tests."""
    async with db_sessionmaker() as session:
        yield session
