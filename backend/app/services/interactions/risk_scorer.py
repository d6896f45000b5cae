"""
Interaction Risk Scorer - severity and evidence weighted drug-interaction risk.

Features:
- Symmetric matching of selected drugs against the interaction database
- Severity points with evidence-level weighting
- Patient factor adjustment (age, renal/hepatic function, pregnancy)
- Risk tier classification and canned clinical significance
- Deduplicated management and monitoring advice
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .config import EvidenceWeighting, ScoringConfig, get_config
from .documentation import describe_risk_factors, onset_timeframes
from .interaction_db import find_matching, get_interaction_database
from .models import (
    ClinicalAnalysis,
    EvidenceLevel,
    InteractionRecord,
    PatientFactors,
    RiskAssessment,
    RiskLevel,
    Severity,
    normalize_drug,
)

logger = logging.getLogger(__name__)


CLINICAL_SIGNIFICANCE = {
    RiskLevel.CRITICAL: "Immediate intervention required. Contraindicated combinations detected.",
    RiskLevel.HIGH: "Significant clinical risk. Close monitoring and dose adjustments recommended.",
    RiskLevel.MODERATE: "Moderate risk requiring clinical attention and monitoring.",
    RiskLevel.LOW: "Low risk interaction profile. Standard monitoring sufficient.",
}

INSUFFICIENT_DATA_MESSAGE = (
    "Select at least two medications to activate clinical decision support analysis."
)


def dedupe(items: Iterable[str]) -> List[str]:
    """Remove repeats, keeping the first occurrence order."""
    return list(dict.fromkeys(items))


def distinct_drugs(selected_drugs: Iterable[str]) -> List[str]:
    """Distinct, non-empty drug names in first-occurrence order (case-insensitive)."""
    seen = set()
    distinct = []
    for drug in selected_drugs:
        key = normalize_drug(drug)
        if key and key not in seen:
            seen.add(key)
            distinct.append(drug.strip())
    return distinct


# ============================================================================
# Risk Scorer
# ============================================================================

class InteractionRiskScorer:
    """
    Score the interaction risk of a drug selection.

    Stateless apart from the read-only interaction records it is given; safe
    to share between concurrent callers.
    """

    def __init__(
        self,
        interaction_db: Optional[Sequence[InteractionRecord]] = None,
        config: Optional[ScoringConfig] = None,
    ):
        if interaction_db is None:
            interaction_db = get_interaction_database().records
        self.interaction_db = tuple(interaction_db)
        self._config = config

    @property
    def config(self) -> ScoringConfig:
        return self._config or get_config()

    def match(self, selected_drugs: Iterable[str]) -> List[InteractionRecord]:
        """Interaction records whose two drugs are both selected."""
        return find_matching(self.interaction_db, selected_drugs)

    def assess(
        self,
        selected_drugs: Iterable[str],
        patient_factors: Optional[PatientFactors] = None,
    ) -> RiskAssessment:
        """
        Match and score a drug selection.

        Args:
            selected_drugs: Drug identifiers; order and repeats are ignored
            patient_factors: Optional patient attributes

        Returns:
            RiskAssessment

        Raises:
            ValueError: fewer than the minimum number of distinct drugs
        """
        drugs = distinct_drugs(selected_drugs)
        minimum = self.config.min_selected_drugs
        if len(drugs) < minimum:
            raise ValueError(
                f"At least {minimum} distinct drugs required for interaction scoring, got {len(drugs)}"
            )

        return self.score(self.match(drugs), patient_factors)

    def score(
        self,
        interactions: Sequence[InteractionRecord],
        patient_factors: Optional[PatientFactors] = None,
    ) -> RiskAssessment:
        """Score already-matched interaction records, in the order given."""
        config = self.config
        factors = patient_factors or PatientFactors()

        risk_score = 0.0
        contraindications_found = False
        recommendations: List[str] = []
        monitoring_requirements: List[str] = []

        for interaction in interactions:
            points = self._severity_points(interaction.severity)
            multiplier = self._evidence_multiplier(interaction.evidence_level)

            if config.evidence_weighting == EvidenceWeighting.COMPOUNDING:
                # Multiplier applies to the whole running total
                risk_score = (risk_score + points) * multiplier
            else:
                risk_score += points * multiplier

            if interaction.severity == Severity.CONTRAINDICATED:
                contraindications_found = True

            if interaction.clinical_management:
                recommendations.append(interaction.clinical_management)

            if interaction.severity in (Severity.MAJOR, Severity.CONTRAINDICATED):
                monitoring_requirements.append(f"Monitor for {interaction.description.lower()}")

            if config.verbose_logging:
                logger.debug(
                    "Scored %s + %s: %s/%s -> running score %.2f",
                    interaction.drug_a, interaction.drug_b, interaction.severity.value,
                    interaction.evidence_level.value if interaction.evidence_level else "none",
                    risk_score,
                )

        risk_score = self._apply_patient_factors(risk_score, factors)
        overall_risk = self._get_risk_level(risk_score, contraindications_found)

        return RiskAssessment(
            overall_risk=overall_risk,
            risk_score=min(risk_score, config.max_display_score),
            raw_risk_score=risk_score,
            clinical_significance=CLINICAL_SIGNIFICANCE[overall_risk],
            recommendations=dedupe(recommendations),
            monitoring_requirements=dedupe(monitoring_requirements),
            contraindications_found=contraindications_found,
        )

    def _severity_points(self, severity: Severity) -> float:
        points = self.config.severity_points
        return {
            Severity.CONTRAINDICATED: points.contraindicated,
            Severity.MAJOR: points.major,
            Severity.MODERATE: points.moderate,
            Severity.MINOR: points.minor,
        }[severity]

    def _evidence_multiplier(self, evidence_level: Optional[EvidenceLevel]) -> float:
        multipliers = self.config.evidence_multipliers
        if evidence_level == EvidenceLevel.HIGH:
            return multipliers.high
        elif evidence_level == EvidenceLevel.LOW:
            return multipliers.low
        elif evidence_level == EvidenceLevel.MODERATE:
            return multipliers.moderate
        return 1.0

    def _apply_patient_factors(self, risk_score: float, factors: PatientFactors) -> float:
        """Apply each present patient factor multiplicatively."""
        multipliers = self.config.patient_factors

        if factors.age is not None and factors.age > multipliers.advanced_age_threshold:
            risk_score *= multipliers.advanced_age
        if factors.has_renal_impairment():
            risk_score *= multipliers.renal_impairment
        if factors.has_hepatic_impairment():
            risk_score *= multipliers.hepatic_impairment
        if factors.pregnancy:
            risk_score *= multipliers.pregnancy

        return risk_score

    def _get_risk_level(self, risk_score: float, contraindications_found: bool) -> RiskLevel:
        """Map the unclamped score to a risk tier."""
        thresholds = self.config.risk_thresholds

        if contraindications_found or risk_score >= thresholds.critical:
            return RiskLevel.CRITICAL
        elif risk_score >= thresholds.high:
            return RiskLevel.HIGH
        elif risk_score >= thresholds.moderate:
            return RiskLevel.MODERATE
        else:
            return RiskLevel.LOW


# ============================================================================
# Clinical Decision Engine
# ============================================================================

class ClinicalDecisionEngine:
    """
    Caller-side wrapper around the scorer.

    Enforces the minimum-selection precondition by returning an
    insufficient-data analysis instead of invoking the scorer.
    """

    def __init__(self, scorer: Optional[InteractionRiskScorer] = None):
        self.scorer = scorer or InteractionRiskScorer()

    def analyze(
        self,
        selected_drugs: Iterable[str],
        patient_factors: Optional[PatientFactors] = None,
    ) -> ClinicalAnalysis:
        """
        Analyze a drug selection for interaction risk.

        Args:
            selected_drugs: Drug identifiers
            patient_factors: Optional patient attributes

        Returns:
            ClinicalAnalysis; ``assessment`` is None when fewer than two
            distinct drugs were selected
        """
        config = self.scorer.config
        factors = patient_factors or PatientFactors()
        drugs = distinct_drugs(selected_drugs)
        risk_factors = describe_risk_factors(
            factors, config.patient_factors.advanced_age_threshold
        )

        if len(drugs) < config.min_selected_drugs:
            return ClinicalAnalysis(
                selected_drugs=drugs,
                sufficient_data=False,
                message=INSUFFICIENT_DATA_MESSAGE,
                risk_factors=risk_factors,
            )

        interactions = self.scorer.match(drugs)
        assessment = self.scorer.score(interactions, factors)

        logger.info(
            "Interaction analysis: %d drugs, %d interactions, risk=%s (score %.1f)",
            len(drugs), len(interactions), assessment.overall_risk.value, assessment.risk_score,
        )

        return ClinicalAnalysis(
            selected_drugs=drugs,
            sufficient_data=True,
            interactions=interactions,
            assessment=assessment,
            risk_factors=risk_factors,
            onset_timeframes=onset_timeframes(interactions),
        )


# ============================================================================
# Convenience Functions
# ============================================================================

def analyze_interactions(
    selected_drugs: Iterable[str],
    patient_factors: Optional[PatientFactors] = None,
) -> ClinicalAnalysis:
    """
    Convenience function for interaction analysis against the global database.

    Args:
        selected_drugs: Drug identifiers
        patient_factors: Optional patient attributes

    Returns:
        ClinicalAnalysis
    """
    engine = ClinicalDecisionEngine()
    return engine.analyze(selected_drugs, patient_factors)
