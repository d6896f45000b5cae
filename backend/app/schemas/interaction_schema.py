from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from app.services.interactions.models import (
    ClinicalAnalysis,
    InteractionRecord,
    InteractionResult,
    PatientFactors,
)


class AnalyzeRequest(BaseModel):
    selected_drugs: List[str] = Field(..., description="Drug identifiers to analyze")
    patient_factors: Optional[PatientFactors] = Field(None, description="Optional patient attributes")


class AnalyzeResponse(BaseModel):
    analysis: ClinicalAnalysis
    interaction_count: int = Field(0, description="Number of matched interaction records")
    documentation: Optional[str] = Field(None, description="Clinical documentation text (null when insufficient)")


class CheckRequest(BaseModel):
    selected_drugs: List[str] = Field(..., description="Drug identifiers to check pairwise")


class CheckResponse(BaseModel):
    selected_drugs: List[str]
    interactions: List[InteractionResult]
    interaction_count: int


class PairCheckRequest(BaseModel):
    drug_a: str
    drug_b: str


class PairCheckResponse(BaseModel):
    drug_a: str
    drug_b: str
    has_interaction: bool
    interactions: List[InteractionRecord]
    recommendation: str


class DatabaseSummary(BaseModel):
    version: Optional[str] = None
    total_interactions: int
    unique_drugs: int
    severity_breakdown: Dict[str, int]
    evidence_levels: Dict[str, int]
    sources: Dict[str, int]


class AssessmentRecordRequest(BaseModel):
    selected_drugs: List[str] = Field(..., description="Drug identifiers to analyze and record")
    patient_factors: Optional[PatientFactors] = None
    patient_id: Optional[str] = Field(None, description="Patient identifier")
    user_id: Optional[str] = Field(None, description="Clinician identifier")


class AssessmentRecordResponse(BaseModel):
    analysis: ClinicalAnalysis
    stored: Optional[Any] = Field(None, description="Row(s) returned by the hosted backend")


class AssessmentHistoryResponse(BaseModel):
    patient_id: Optional[str] = None
    assessments: List[Dict[str, Any]]
