"""
Internal data models for the interaction risk service.
These models represent the static interaction records, optional patient
factors, and the ephemeral risk assessment derived from them.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple
from enum import Enum


def normalize_drug(drug: str) -> str:
    """Normalize a drug identifier for comparison."""
    return drug.strip().lower()


class Severity(str, Enum):
    """Severity tier of a drug-drug interaction."""
    CONTRAINDICATED = "contraindicated"  # Never co-administer
    MAJOR = "major"                      # Avoid or intervene
    MODERATE = "moderate"                # Monitor, may need adjustment
    MINOR = "minor"                      # Informational

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.MINOR: 1,
    Severity.MODERATE: 2,
    Severity.MAJOR: 3,
    Severity.CONTRAINDICATED: 4,
}


class EvidenceLevel(str, Enum):
    """Strength of the literature behind an interaction."""
    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"


class Frequency(str, Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"


class OrganFunction(str, Enum):
    """Renal or hepatic function grade."""
    NORMAL = "normal"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class RiskLevel(str, Enum):
    """Overall risk tier of a drug combination."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class InteractionRecord(BaseModel):
    """A known pairwise drug-drug interaction. Read-only once loaded."""
    model_config = ConfigDict(frozen=True)

    drug_a: str = Field(..., description="First drug identifier")
    drug_b: str = Field(..., description="Second drug identifier")
    severity: Severity = Field(..., description="Severity tier")
    description: str = Field(..., description="Clinical effect of the interaction")
    evidence_level: Optional[EvidenceLevel] = Field(None, description="Evidence level: High, Moderate, Low")
    mechanism: Optional[str] = Field(None, description="Pharmacological mechanism")
    clinical_management: Optional[str] = Field(None, description="Recommended clinical management")
    onset_time: Optional[str] = Field(None, description="Typical onset, e.g. '2-5 days'")
    frequency: Optional[Frequency] = Field(None, description="How often the interaction is seen")
    risk_factors: List[str] = Field(default_factory=list, description="Patient factors that aggravate the interaction")
    alternative_options: List[str] = Field(default_factory=list, description="Safer alternatives")
    reference: Optional[str] = Field(None, description="Literature reference")

    def involves(self, drug: str) -> bool:
        drug = normalize_drug(drug)
        return drug in (normalize_drug(self.drug_a), normalize_drug(self.drug_b))

    def pair_key(self) -> Tuple[str, str]:
        """Canonical (sorted, normalized) key for the drug pair."""
        return canonical_pair(self.drug_a, self.drug_b)


def canonical_pair(drug_a: str, drug_b: str) -> Tuple[str, str]:
    a, b = normalize_drug(drug_a), normalize_drug(drug_b)
    return (a, b) if a <= b else (b, a)


class PatientFactors(BaseModel):
    """Optional patient attributes that modulate interaction risk."""
    age: Optional[float] = Field(None, ge=0, description="Age in years")
    weight: Optional[float] = Field(None, gt=0, description="Weight in kg (display only)")
    renal_function: Optional[OrganFunction] = Field(None, description="Renal function grade")
    hepatic_function: Optional[OrganFunction] = Field(None, description="Hepatic function grade")
    pregnancy: bool = Field(False, description="Whether the patient is pregnant")
    allergies: List[str] = Field(default_factory=list, description="Known allergies (display only)")
    comorbidities: List[str] = Field(default_factory=list, description="Comorbid conditions (display only)")

    def has_renal_impairment(self) -> bool:
        return self.renal_function is not None and self.renal_function != OrganFunction.NORMAL

    def has_hepatic_impairment(self) -> bool:
        return self.hepatic_function is not None and self.hepatic_function != OrganFunction.NORMAL


class RiskAssessment(BaseModel):
    """Risk assessment for a set of selected drugs. Recomputed, never stored."""
    overall_risk: RiskLevel = Field(..., description="Risk tier: low, moderate, high, critical")
    risk_score: float = Field(..., ge=0.0, le=100.0, description="Display risk score (0-100)")
    raw_risk_score: float = Field(..., ge=0.0, description="Unclamped score used for classification")
    clinical_significance: str = Field(..., description="Advisory sentence for the risk tier")
    recommendations: List[str] = Field(default_factory=list, description="Deduplicated management advice")
    monitoring_requirements: List[str] = Field(default_factory=list, description="Deduplicated monitoring advice")
    contraindications_found: bool = Field(False, description="Whether any contraindicated pair was matched")


class ClinicalAnalysis(BaseModel):
    """Complete decision-support result for a drug selection."""
    selected_drugs: List[str] = Field(..., description="Distinct selected drugs, first-occurrence order")
    sufficient_data: bool = Field(..., description="False when fewer than two drugs were selected")
    message: Optional[str] = Field(None, description="Explanation shown instead of a score")
    interactions: List[InteractionRecord] = Field(default_factory=list, description="Matched interaction records")
    assessment: Optional[RiskAssessment] = Field(None, description="Risk assessment (None when insufficient)")
    risk_factors: List[str] = Field(default_factory=list, description="Active patient risk factors")
    onset_timeframes: List[str] = Field(default_factory=list, description="Onset lines for matched interactions")

    @property
    def interaction_count(self) -> int:
        return len(self.interactions)


class InteractionResult(BaseModel):
    """Result row of a pairwise interaction check."""
    drug_a: str = Field(..., description="Display name of first drug")
    drug_b: str = Field(..., description="Display name of second drug")
    severity: Severity
    description: str
    mechanism: Optional[str] = None
    reference: Optional[str] = None


class Medication(BaseModel):
    """Entry of the medication catalogue."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Drug identifier used in interaction records")
    name: str = Field(..., description="Display name")
    category: str = Field(..., description="Therapeutic class")
