# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assessment submission API endpoints.

- POST /{assessment_id}/submissions - Grade and record a submission
- GET /{assessment_id}/submissions/{subject_id} - Fetch a stored submission
"""

import logging

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_scoring_engine
from src.domains.assessment import ScoringEngine
from src.models.assessment import (
    SubmissionRecord,
    SubmitAssessmentRequest,
    SubmitAssessmentResponse,
)
from src.models.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/{assessment_id}/submissions",
    response_model=SubmitAssessmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit assessment answers",
    responses={
        409: {"description": "Already submitted", "model": ErrorResponse},
        503: {"description": "Store unavailable", "model": ErrorResponse},
    },
)
async def submit_assessment(
    assessment_id: str,
    data: SubmitAssessmentRequest,
    engine: ScoringEngine = Depends(get_scoring_engine),
) -> SubmitAssessmentResponse:
    """Grade a submission against the assessment's answer key."""
    result = await engine.grade(assessment_id, data.subject_id, data.answers)
    return SubmitAssessmentResponse(**result.model_dump())


@router.get(
    "/{assessment_id}/submissions/{subject_id}",
    response_model=SubmissionRecord,
    summary="Get a stored submission",
    responses={404: {"description": "Not submitted", "model": ErrorResponse}},
)
async def get_submission(
    assessment_id: str,
    subject_id: str,
    engine: ScoringEngine = Depends(get_scoring_engine),
) -> SubmissionRecord:
    """Return the recorded submission of a student."""
    return await engine.get_submission(assessment_id, subject_id)
