"""
Drug Interaction API - interaction risk scoring and database queries.

Endpoints:
- POST /api/v1/interactions/analyze - Risk assessment for a drug selection
- POST /api/v1/interactions/check - Pairwise interaction check
- POST /api/v1/interactions/check-pair - Check a specific drug pair
- GET /api/v1/interactions - Filtered interaction database listing
- GET /api/v1/interactions/high-risk - Contraindicated and high-evidence major pairs
- GET /api/v1/interactions/summary - Database statistics
- POST /api/v1/interactions/export - CSV of a pairwise check
- GET /api/v1/interactions/export - CSV of the full database
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from app.schemas.interaction_schema import (
    AnalyzeRequest,
    AnalyzeResponse,
    CheckRequest,
    CheckResponse,
    DatabaseSummary,
    PairCheckRequest,
    PairCheckResponse,
)
from app.services.interactions.documentation import (
    export_database_csv,
    export_filename,
    export_interactions_csv,
    format_clinical_documentation,
)
from app.services.interactions.interaction_db import get_interaction_database
from app.services.interactions.medications import get_drug_name_by_id
from app.services.interactions.models import InteractionRecord
from app.services.interactions.pair_checker import PairChecker
from app.services.interactions.risk_scorer import ClinicalDecisionEngine

logger = logging.getLogger(__name__)

router = APIRouter()


def _csv_response(content: str, prefix: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(prefix)}"'},
    )


# ============================================================================
# Analysis
# ============================================================================

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_selection(request: AnalyzeRequest):
    """
    Score the interaction risk of a drug selection.

    Fewer than two distinct drugs is not an error: the response carries
    ``sufficient_data=false`` and the explanatory message instead of a score.
    """
    analysis = ClinicalDecisionEngine().analyze(request.selected_drugs, request.patient_factors)

    documentation = None
    if analysis.sufficient_data:
        documentation = format_clinical_documentation(analysis)

    return AnalyzeResponse(
        analysis=analysis,
        interaction_count=analysis.interaction_count,
        documentation=documentation,
    )


@router.post("/check", response_model=CheckResponse)
async def check_selection(request: CheckRequest):
    """First known interaction for each pair of the selection."""
    results = PairChecker().check_interactions(request.selected_drugs)
    return CheckResponse(
        selected_drugs=request.selected_drugs,
        interactions=results,
        interaction_count=len(results),
    )


@router.post("/check-pair", response_model=PairCheckResponse)
async def check_drug_pair(request: PairCheckRequest):
    """All interactions for one drug pair with an advisory recommendation."""
    interactions, recommendation = PairChecker().check_pair(request.drug_a, request.drug_b)
    return PairCheckResponse(
        drug_a=request.drug_a,
        drug_b=request.drug_b,
        has_interaction=len(interactions) > 0,
        interactions=interactions,
        recommendation=recommendation,
    )


# ============================================================================
# Database queries
# ============================================================================

@router.get("", response_model=List[InteractionRecord])
async def list_interactions(
    severity: Optional[str] = None,
    evidence_level: Optional[str] = None,
    drug: Optional[str] = None,
    drug_class: Optional[str] = None,
    mechanism: Optional[str] = None,
):
    """
    Get the interaction database.

    Optional filters:
    - severity: contraindicated/major/moderate/minor
    - evidence_level: High/Moderate/Low
    - drug: drug identifier on either side of the pair
    - drug_class: e.g. macrolide, fluoroquinolone
    - mechanism: substring of the pharmacological mechanism
    """
    db = get_interaction_database()

    try:
        filtered = db.filter_interactions(
            severity=severity.lower() if severity else None,
            evidence_level=evidence_level.capitalize() if evidence_level else None,
            drug=drug,
        )
    except ValueError:
        raise HTTPException(
            status_code=400,
            detail=(
                f"Invalid filter: severity={severity}, evidence_level={evidence_level}. "
                "Use contraindicated/major/moderate/minor and High/Moderate/Low"
            )
        )

    if drug_class:
        in_class = {id(r) for r in db.search_by_drug_class(drug_class)}
        filtered = [r for r in filtered if id(r) in in_class]

    if mechanism:
        by_mechanism = {id(r) for r in db.get_interactions_by_mechanism(mechanism)}
        filtered = [r for r in filtered if id(r) in by_mechanism]

    return filtered


@router.get("/high-risk", response_model=List[InteractionRecord])
async def list_high_risk_interactions():
    return get_interaction_database().get_high_risk_interactions()


@router.get("/summary", response_model=DatabaseSummary)
async def database_summary():
    return DatabaseSummary(**get_interaction_database().database_stats())


# ============================================================================
# Export
# ============================================================================

@router.post("/export")
async def export_check(request: CheckRequest):
    """CSV export of a pairwise interaction check."""
    results = PairChecker().check_interactions(request.selected_drugs)
    logger.info("Exporting %d interaction results", len(results))
    return _csv_response(export_interactions_csv(results), "drug_interactions")


@router.get("/export")
async def export_database():
    """CSV export of the full interaction database."""
    db = get_interaction_database()
    return _csv_response(
        export_database_csv(db.records, get_drug_name_by_id), "interaction_database"
    )
