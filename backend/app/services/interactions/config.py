"""
Configuration for the interaction risk service.
Centralizes tunable parameters for severity weighting, evidence and
patient-factor multipliers, and risk tier thresholds.
"""

from enum import Enum
from pydantic import BaseModel, Field


class EvidenceWeighting(str, Enum):
    """How evidence multipliers are applied while accumulating the score."""
    COMPOUNDING = "compounding"          # Scale the running total after each record
    PER_INTERACTION = "per_interaction"  # Scale only the record's own points


class SeverityPoints(BaseModel):
    """Points added to the risk score per matched interaction."""

    contraindicated: float = Field(default=100.0, ge=0.0, description="Points for a contraindicated pair")
    major: float = Field(default=50.0, ge=0.0, description="Points for a major interaction")
    moderate: float = Field(default=25.0, ge=0.0, description="Points for a moderate interaction")
    minor: float = Field(default=10.0, ge=0.0, description="Points for a minor interaction")


class EvidenceMultipliers(BaseModel):
    """Multipliers keyed on the evidence level of an interaction."""

    high: float = Field(default=1.2, gt=0.0, description="Multiplier for High evidence")
    moderate: float = Field(default=1.0, gt=0.0, description="Multiplier for Moderate evidence")
    low: float = Field(default=0.8, gt=0.0, description="Multiplier for Low evidence")


class PatientFactorMultipliers(BaseModel):
    """Multipliers applied when a patient risk factor is present."""

    advanced_age: float = Field(default=1.15, ge=1.0, description="Age above the advanced age threshold")
    renal_impairment: float = Field(default=1.3, ge=1.0, description="Renal function other than normal")
    hepatic_impairment: float = Field(default=1.25, ge=1.0, description="Hepatic function other than normal")
    pregnancy: float = Field(default=1.4, ge=1.0, description="Pregnancy")

    advanced_age_threshold: float = Field(
        default=65.0,
        ge=0.0,
        description="Age strictly above which the advanced age multiplier applies"
    )


class RiskThresholds(BaseModel):
    """Lower bounds (inclusive) of the risk tiers on the unclamped score."""

    critical: float = Field(default=100.0, description="Minimum score for critical risk")
    high: float = Field(default=60.0, description="Minimum score for high risk")
    moderate: float = Field(default=30.0, description="Minimum score for moderate risk")


class ScoringConfig(BaseModel):
    """Main configuration for the interaction risk service."""

    severity_points: SeverityPoints = Field(
        default_factory=SeverityPoints,
        description="Severity point configuration"
    )

    evidence_multipliers: EvidenceMultipliers = Field(
        default_factory=EvidenceMultipliers,
        description="Evidence multiplier configuration"
    )

    patient_factors: PatientFactorMultipliers = Field(
        default_factory=PatientFactorMultipliers,
        description="Patient factor multiplier configuration"
    )

    risk_thresholds: RiskThresholds = Field(
        default_factory=RiskThresholds,
        description="Risk tier thresholds"
    )

    evidence_weighting: EvidenceWeighting = Field(
        default=EvidenceWeighting.COMPOUNDING,
        description="Apply evidence multipliers to the running total or per interaction"
    )

    max_display_score: float = Field(
        default=100.0,
        gt=0.0,
        le=100.0,
        description="Upper clamp for the displayed risk score"
    )

    min_selected_drugs: int = Field(
        default=2,
        ge=2,
        description="Minimum number of distinct drugs before scoring is meaningful"
    )

    # Data paths (relative to the interactions package)
    interaction_data_path: str = Field(
        default="data/interactions.json",
        description="Path to the interaction database JSON"
    )

    medication_data_path: str = Field(
        default="data/medications.json",
        description="Path to the medication catalogue JSON"
    )

    # Logging
    verbose_logging: bool = Field(
        default=False,
        description="Log every scoring step at DEBUG level"
    )


# Global configuration instance
_config: ScoringConfig = ScoringConfig()


def get_config() -> ScoringConfig:
    """Get the global configuration instance."""
    return _config


def update_config(**kwargs):
    """Update configuration parameters."""
    global _config
    current_dict = _config.model_dump()

    # Update nested parameters
    for key, value in kwargs.items():
        if '.' in key:
            # Handle nested keys like 'evidence_multipliers.high'
            parts = key.split('.')
            current = current_dict
            for part in parts[:-1]:
                current = current[part]
            current[parts[-1]] = value
        else:
            current_dict[key] = value

    _config = ScoringConfig(**current_dict)
    return _config


def reset_config() -> ScoringConfig:
    """Restore the default configuration."""
    global _config
    _config = ScoringConfig()
    return _config


def load_config_from_file(filepath: str):
    """Load configuration from a JSON file."""
    import json
    global _config

    with open(filepath, 'r') as f:
        config_dict = json.load(f)

    _config = ScoringConfig(**config_dict)
    return _config


def save_config_to_file(filepath: str):
    """Save current configuration to a JSON file."""
    import json

    with open(filepath, 'w') as f:
        json.dump(_config.model_dump(mode="json"), f, indent=2)


# Convenience accessors
def get_severity_points() -> SeverityPoints:
    """Get severity point configuration."""
    return _config.severity_points


def get_evidence_multipliers() -> EvidenceMultipliers:
    """Get evidence multiplier configuration."""
    return _config.evidence_multipliers


def get_patient_factor_multipliers() -> PatientFactorMultipliers:
    """Get patient factor multiplier configuration."""
    return _config.patient_factors


def get_risk_thresholds() -> RiskThresholds:
    """Get risk threshold configuration."""
    return _config.risk_thresholds
