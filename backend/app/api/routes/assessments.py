"""
Assessment audit log - completed analyses recorded in the hosted backend.

Endpoints:
- POST /api/v1/assessments - Analyze a selection and record the result
- GET /api/v1/assessments - Recorded assessments, newest first
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from app.schemas.interaction_schema import (
    AssessmentHistoryResponse,
    AssessmentRecordRequest,
    AssessmentRecordResponse,
)
from app.services.backend.assessment_log import fetch_assessment_history, record_assessment
from app.services.backend.hosted_client import HostedBackendClient, get_backend_client
from app.services.interactions.risk_scorer import ClinicalDecisionEngine

router = APIRouter()


def _require_backend(client: Optional[HostedBackendClient]) -> HostedBackendClient:
    if client is None:
        raise HTTPException(status_code=503, detail="Hosted backend is not configured")
    return client


@router.post("", response_model=AssessmentRecordResponse)
async def create_assessment(
    request: AssessmentRecordRequest,
    client: Optional[HostedBackendClient] = Depends(get_backend_client),
):
    client = _require_backend(client)

    analysis = ClinicalDecisionEngine().analyze(request.selected_drugs, request.patient_factors)
    if not analysis.sufficient_data:
        raise HTTPException(status_code=400, detail=analysis.message)

    result = await record_assessment(client, analysis, request.patient_id, request.user_id)
    if not result.ok:
        raise HTTPException(status_code=502, detail=f"Failed to record assessment: {result.error}")

    return AssessmentRecordResponse(analysis=analysis, stored=result.data)


@router.get("", response_model=AssessmentHistoryResponse)
async def list_assessments(
    patient_id: Optional[str] = None,
    limit: int = Query(50, ge=1, le=500),
    client: Optional[HostedBackendClient] = Depends(get_backend_client),
):
    client = _require_backend(client)

    result = await fetch_assessment_history(client, patient_id, limit)
    if not result.ok:
        raise HTTPException(status_code=502, detail=f"Failed to fetch assessments: {result.error}")

    return AssessmentHistoryResponse(patient_id=patient_id, assessments=result.data or [])
