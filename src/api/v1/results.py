# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Term result API endpoints.

- POST / - Record continuous-assessment and exam scores
- GET /{student_id} - List a student's results, optionally per term
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_result_service
from src.domains.results import ResultEntryService
from src.models.common import ErrorResponse
from src.models.results import (
    TermResultListResponse,
    TermResultRecord,
    TermResultRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=TermResultRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Record term result",
    responses={
        409: {"description": "Result already recorded", "model": ErrorResponse},
        422: {"description": "Score out of range", "model": ErrorResponse},
    },
)
async def record_result(
    data: TermResultRequest,
    service: ResultEntryService = Depends(get_result_service),
) -> TermResultRecord:
    """Record a student's scores for one subject and term."""
    return await service.record_result(
        student_id=data.student_id,
        subject_id=data.subject_id,
        term=data.term,
        ca_score=data.ca_score,
        exam_score=data.exam_score,
    )


@router.get(
    "/{student_id}",
    response_model=TermResultListResponse,
    summary="List term results",
)
async def list_results(
    student_id: str,
    term: str | None = Query(None, description="Only results of this term"),
    service: ResultEntryService = Depends(get_result_service),
) -> TermResultListResponse:
    """List a student's recorded results."""
    results = await service.list_results(student_id, term=term)
    return TermResultListResponse(results=results, total=len(results))
