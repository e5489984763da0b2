# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Durable per-space sequence counters."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base
from src.utils.datetime import utc_now


class SequenceCounter(Base):
    """Last issued ordinal of a role-scoped identifier space.

    Only the sequence allocator writes to this table, always through a
    compare-and-swap on ``last_issued``.
    """

    __tablename__ = "sequence_counters"
    __table_args__ = (CheckConstraint("last_issued >= 0", name="ck_sequence_last_issued"),)

    space: Mapped[str] = mapped_column(String(50), primary_key=True)
    last_issued: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
