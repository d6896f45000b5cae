"""
Audit log of completed interaction analyses, stored in the hosted backend.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from app.services.backend.hosted_client import BackendResult, HostedBackendClient
from app.services.interactions.documentation import format_clinical_documentation
from app.services.interactions.models import ClinicalAnalysis

logger = logging.getLogger(__name__)

ASSESSMENT_COLLECTION = "interaction_assessments"


def build_assessment_record(
    analysis: ClinicalAnalysis,
    patient_id: Optional[str] = None,
    user_id: Optional[str] = None,
    recorded_at: Optional[datetime] = None,
) -> Dict:
    """Summary row for a completed analysis."""
    assessment = analysis.assessment
    if assessment is None:
        raise ValueError("Only analyses with a risk assessment can be recorded")

    recorded_at = recorded_at or datetime.now(timezone.utc)

    return {
        "patient_id": patient_id,
        "user_id": user_id,
        "selected_drugs": analysis.selected_drugs,
        "overall_risk": assessment.overall_risk.value,
        "risk_score": round(assessment.risk_score, 1),
        "interaction_count": analysis.interaction_count,
        "contraindications_found": assessment.contraindications_found,
        "recommendations": assessment.recommendations,
        "documentation": format_clinical_documentation(analysis),
        "created_at": recorded_at.isoformat(),
    }


async def record_assessment(
    client: HostedBackendClient,
    analysis: ClinicalAnalysis,
    patient_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> BackendResult:
    record = build_assessment_record(analysis, patient_id, user_id)
    result = await client.insert(ASSESSMENT_COLLECTION, record)
    if result.ok:
        logger.info("Recorded interaction assessment for patient %s", patient_id or "anonymous")
    return result


async def fetch_assessment_history(
    client: HostedBackendClient,
    patient_id: Optional[str] = None,
    limit: int = 50,
) -> BackendResult:
    filters = {"patient_id": patient_id} if patient_id else None
    return await client.select(
        ASSESSMENT_COLLECTION, filters=filters, order="created_at", limit=limit
    )
