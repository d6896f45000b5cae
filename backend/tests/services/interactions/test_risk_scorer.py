"""
Unit tests for the interaction risk scorer.
Covers severity/evidence weighting, patient factors, tier classification,
display clamping and the insufficient-data precondition.
"""

import pytest
from app.services.interactions.config import EvidenceWeighting, ScoringConfig
from app.services.interactions.models import (
    EvidenceLevel,
    InteractionRecord,
    OrganFunction,
    PatientFactors,
    RiskLevel,
    Severity,
)
from app.services.interactions.risk_scorer import (
    CLINICAL_SIGNIFICANCE,
    INSUFFICIENT_DATA_MESSAGE,
    ClinicalDecisionEngine,
    InteractionRiskScorer,
    analyze_interactions,
    distinct_drugs,
)


def record(drug_a, drug_b, severity, evidence=None, management=None, description="Test interaction."):
    return InteractionRecord(
        drug_a=drug_a,
        drug_b=drug_b,
        severity=severity,
        description=description,
        evidence_level=evidence,
        clinical_management=management,
    )


class TestDatabaseScenarios:
    """Scoring against the bundled interaction database."""

    @pytest.fixture
    def scorer(self):
        return InteractionRiskScorer()

    def test_warfarin_fluconazole_is_high(self, scorer):
        """major (50) x High evidence (1.2) = 60 -> high"""
        assessment = scorer.assess(["warfarin", "fluconazole"])

        assert assessment.risk_score == pytest.approx(60.0)
        assert assessment.overall_risk == RiskLevel.HIGH
        assert assessment.contraindications_found is False
        assert assessment.recommendations == ["Reduce warfarin dose by 25-50%, monitor INR daily"]
        assert assessment.monitoring_requirements == [
            "Monitor for fluconazole significantly increases warfarin levels."
        ]
        assert assessment.clinical_significance == CLINICAL_SIGNIFICANCE[RiskLevel.HIGH]

    def test_ceftriaxone_calcium_is_critical_and_clamped(self, scorer):
        assessment = scorer.assess(["ceftriaxone", "calcium"])

        assert assessment.contraindications_found is True
        assert assessment.overall_risk == RiskLevel.CRITICAL
        assert assessment.raw_risk_score == pytest.approx(120.0)
        assert assessment.risk_score == 100.0

    def test_order_and_case_do_not_matter(self, scorer):
        forward = scorer.assess(["warfarin", "fluconazole"])
        reverse = scorer.assess([" FLUCONAZOLE ", "Warfarin"])

        assert forward == reverse

    def test_duplicates_treated_as_set(self, scorer):
        assessment = scorer.assess(["warfarin", "fluconazole", "warfarin"])
        assert assessment.risk_score == pytest.approx(60.0)

    def test_unknown_drugs_produce_no_matches(self, scorer):
        assessment = scorer.assess(["not-a-drug", "also-not-a-drug"])

        assert assessment.risk_score == 0
        assert assessment.overall_risk == RiskLevel.LOW
        assert assessment.recommendations == []
        assert assessment.monitoring_requirements == []
        assert assessment.contraindications_found is False

    def test_no_interaction_between_known_drugs(self, scorer):
        assessment = scorer.assess(["warfarin", "vancomycin"])
        assert assessment.risk_score == 0
        assert assessment.overall_risk == RiskLevel.LOW

    def test_advanced_age_raises_score(self, scorer):
        assessment = scorer.assess(["warfarin", "fluconazole"], PatientFactors(age=70))
        assert assessment.risk_score == pytest.approx(69.0)
        assert assessment.overall_risk == RiskLevel.HIGH

    def test_age_threshold_is_exclusive(self, scorer):
        assessment = scorer.assess(["warfarin", "fluconazole"], PatientFactors(age=65))
        assert assessment.risk_score == pytest.approx(60.0)

    def test_three_drug_selection_compounds(self, scorer):
        """erythromycin+warfarin then fluconazole+warfarin: (60 + 50) x 1.2"""
        assessment = scorer.assess(["warfarin", "fluconazole", "erythromycin"])

        assert assessment.raw_risk_score == pytest.approx(132.0)
        assert assessment.overall_risk == RiskLevel.CRITICAL
        assert assessment.contraindications_found is False
        assert len(assessment.monitoring_requirements) == 2

    def test_fewer_than_two_drugs_rejected(self, scorer):
        with pytest.raises(ValueError):
            scorer.assess(["warfarin"])

        with pytest.raises(ValueError):
            scorer.assess(["warfarin", "WARFARIN"])


class TestSyntheticRecords:
    """Scoring with hand-built records to pin down the arithmetic."""

    def test_minor_without_evidence(self):
        scorer = InteractionRiskScorer([record("a", "b", Severity.MINOR)])
        assessment = scorer.assess(["a", "b"])

        assert assessment.risk_score == pytest.approx(10.0)
        assert assessment.overall_risk == RiskLevel.LOW
        assert assessment.monitoring_requirements == []

    def test_moderate_tier(self):
        scorer = InteractionRiskScorer([
            record("a", "b", Severity.MODERATE, EvidenceLevel.MODERATE),
            record("a", "c", Severity.MINOR),
        ])
        assessment = scorer.assess(["a", "b", "c"])

        assert assessment.risk_score == pytest.approx(35.0)
        assert assessment.overall_risk == RiskLevel.MODERATE

    def test_compounding_weighting(self):
        records = [
            record("a", "b", Severity.MODERATE, EvidenceLevel.LOW),
            record("a", "c", Severity.MAJOR, EvidenceLevel.HIGH),
        ]
        scorer = InteractionRiskScorer(records, ScoringConfig())
        assessment = scorer.assess(["a", "b", "c"])

        # 25 x 0.8 = 20, then (20 + 50) x 1.2 = 84
        assert assessment.risk_score == pytest.approx(84.0)
        assert assessment.overall_risk == RiskLevel.HIGH

    def test_per_interaction_weighting(self):
        records = [
            record("a", "b", Severity.MODERATE, EvidenceLevel.LOW),
            record("a", "c", Severity.MAJOR, EvidenceLevel.HIGH),
        ]
        config = ScoringConfig(evidence_weighting=EvidenceWeighting.PER_INTERACTION)
        scorer = InteractionRiskScorer(records, config)
        assessment = scorer.assess(["a", "b", "c"])

        # 25 x 0.8 + 50 x 1.2
        assert assessment.risk_score == pytest.approx(80.0)

    def test_duplicate_records_double_count(self):
        records = [
            record("a", "b", Severity.MAJOR, EvidenceLevel.HIGH),
            record("b", "a", Severity.MAJOR, EvidenceLevel.HIGH),
        ]
        assessment = InteractionRiskScorer(records).assess(["a", "b"])

        assert assessment.raw_risk_score == pytest.approx(132.0)
        assert assessment.risk_score == 100.0
        assert assessment.overall_risk == RiskLevel.CRITICAL

    def test_recommendations_deduplicated_in_order(self):
        records = [
            record("a", "b", Severity.MAJOR, management="Monitor INR", description="Bleeding."),
            record("a", "c", Severity.MAJOR, management="Reduce dose", description="Bleeding."),
            record("b", "c", Severity.MAJOR, management="Monitor INR", description="Toxicity."),
        ]
        assessment = InteractionRiskScorer(records).assess(["a", "b", "c"])

        assert assessment.recommendations == ["Monitor INR", "Reduce dose"]
        assert assessment.monitoring_requirements == ["Monitor for bleeding.", "Monitor for toxicity."]

    def test_contraindication_is_critical_regardless_of_score(self):
        config = ScoringConfig()
        config.severity_points.contraindicated = 1.0
        scorer = InteractionRiskScorer([record("a", "b", Severity.CONTRAINDICATED, EvidenceLevel.LOW)], config)
        assessment = scorer.assess(["a", "b"])

        assert assessment.risk_score < 30
        assert assessment.contraindications_found is True
        assert assessment.overall_risk == RiskLevel.CRITICAL

    def test_classification_uses_unclamped_score(self):
        config = ScoringConfig(max_display_score=50.0)
        scorer = InteractionRiskScorer([record("a", "b", Severity.MAJOR, EvidenceLevel.HIGH)], config)
        assessment = scorer.assess(["a", "b"])

        assert assessment.risk_score == 50.0
        assert assessment.overall_risk == RiskLevel.HIGH


class TestPatientFactors:
    """Patient factor multipliers."""

    @pytest.fixture
    def scorer(self):
        return InteractionRiskScorer([record("a", "b", Severity.MODERATE, EvidenceLevel.MODERATE)])

    @pytest.mark.parametrize("factors,expected", [
        (PatientFactors(age=80), 25 * 1.15),
        (PatientFactors(renal_function=OrganFunction.SEVERE), 25 * 1.3),
        (PatientFactors(hepatic_function=OrganFunction.MILD), 25 * 1.25),
        (PatientFactors(pregnancy=True), 25 * 1.4),
        (PatientFactors(renal_function=OrganFunction.NORMAL, hepatic_function=OrganFunction.NORMAL), 25.0),
    ])
    def test_single_factor(self, scorer, factors, expected):
        assert scorer.assess(["a", "b"], factors).raw_risk_score == pytest.approx(expected)

    def test_all_factors_multiply(self, scorer):
        factors = PatientFactors(
            age=70,
            renal_function=OrganFunction.MODERATE,
            hepatic_function=OrganFunction.MODERATE,
            pregnancy=True,
        )
        assessment = scorer.assess(["a", "b"], factors)
        assert assessment.raw_risk_score == pytest.approx(25 * 1.15 * 1.3 * 1.25 * 1.4)

    def test_factors_never_decrease_score(self):
        scorer = InteractionRiskScorer()
        drugs = ["warfarin", "fluconazole", "amoxicillin-clavulanate"]
        baseline = scorer.assess(drugs).raw_risk_score

        variants = [
            PatientFactors(age=90),
            PatientFactors(renal_function=OrganFunction.MILD),
            PatientFactors(hepatic_function=OrganFunction.SEVERE),
            PatientFactors(pregnancy=True),
            PatientFactors(weight=70, allergies=["penicillin"], comorbidities=["diabetes"]),
        ]
        for factors in variants:
            assert scorer.assess(drugs, factors).raw_risk_score >= baseline

    def test_display_only_fields_have_no_effect(self, scorer):
        factors = PatientFactors(weight=55, allergies=["sulfa"], comorbidities=["asthma"])
        assert scorer.assess(["a", "b"], factors).raw_risk_score == pytest.approx(25.0)


class TestClinicalDecisionEngine:
    """Caller-side precondition handling and analysis assembly."""

    @pytest.fixture
    def engine(self):
        return ClinicalDecisionEngine()

    def test_single_drug_is_insufficient(self, engine):
        analysis = engine.analyze(["warfarin"])

        assert analysis.sufficient_data is False
        assert analysis.assessment is None
        assert analysis.message == INSUFFICIENT_DATA_MESSAGE
        assert analysis.interactions == []

    def test_empty_selection_is_insufficient(self, engine):
        analysis = engine.analyze([])
        assert analysis.sufficient_data is False
        assert analysis.selected_drugs == []

    def test_analysis_carries_interactions_and_onset(self, engine):
        analysis = engine.analyze(["warfarin", "fluconazole"], PatientFactors(age=72))

        assert analysis.sufficient_data is True
        assert analysis.interaction_count == 1
        assert analysis.assessment.overall_risk == RiskLevel.HIGH
        assert analysis.onset_timeframes == ["fluconazole + warfarin: 2-5 days"]
        assert analysis.risk_factors == ["Advanced Age (72)"]

    def test_convenience_function(self):
        analysis = analyze_interactions(["ceftriaxone", "calcium"])
        assert analysis.assessment.overall_risk == RiskLevel.CRITICAL


class TestDistinctDrugs:

    def test_keeps_first_occurrence(self):
        assert distinct_drugs(["Warfarin", " warfarin", "fluconazole", ""]) == ["Warfarin", "fluconazole"]
