"""
Plain-text and CSV renderings of interaction analyses.
"""

import csv
import io
import math
from datetime import date
from typing import Iterable, List, Optional, Sequence

from .models import ClinicalAnalysis, InteractionRecord, InteractionResult, PatientFactors

NO_RISK_FACTORS_MESSAGE = "No significant risk factors identified"

CSV_HEADER = ["Drug 1", "Drug 2", "Severity", "Description", "Mechanism", "Reference"]

MAX_DOCUMENTED_RECOMMENDATIONS = 3


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _format_age(age: float) -> str:
    return str(int(age)) if float(age).is_integer() else str(age)


def describe_risk_factors(
    patient_factors: Optional[PatientFactors],
    advanced_age_threshold: float = 65.0,
) -> List[str]:
    """Human-readable labels for the patient factors that raise risk."""
    if patient_factors is None:
        return []

    labels = []
    if patient_factors.age is not None and patient_factors.age > advanced_age_threshold:
        labels.append(f"Advanced Age ({_format_age(patient_factors.age)})")
    if patient_factors.has_renal_impairment():
        labels.append(f"Renal Impairment ({patient_factors.renal_function.value})")
    if patient_factors.has_hepatic_impairment():
        labels.append(f"Hepatic Impairment ({patient_factors.hepatic_function.value})")
    if patient_factors.pregnancy:
        labels.append("Pregnancy")
    return labels


def onset_timeframes(interactions: Iterable[InteractionRecord]) -> List[str]:
    """'<drug a> + <drug b>: <onset>' for each interaction with a known onset."""
    return [
        f"{interaction.drug_a} + {interaction.drug_b}: {interaction.onset_time}"
        for interaction in interactions
        if interaction.onset_time
    ]


def format_clinical_documentation(analysis: ClinicalAnalysis) -> str:
    """
    Clinical documentation block for a completed analysis.

    Raises:
        ValueError: the analysis has no risk assessment (insufficient data)
    """
    assessment = analysis.assessment
    if not analysis.sufficient_data or assessment is None:
        raise ValueError("Cannot document an analysis without a risk assessment")

    lines = [
        "Drug Interaction Assessment:",
        f"Selected medications: {', '.join(analysis.selected_drugs)}",
        f"Risk level: {assessment.overall_risk.value.upper()}",
        f"Risk score: {round_half_up(assessment.risk_score)}/100",
        f"Interactions identified: {analysis.interaction_count}",
    ]
    if assessment.contraindications_found:
        lines.append("CONTRAINDICATIONS PRESENT")
    lines.append("Clinical recommendations:")
    lines.extend(f"• {rec}" for rec in assessment.recommendations[:MAX_DOCUMENTED_RECOMMENDATIONS])

    return "\n".join(lines)


# ============================================================================
# CSV export
# ============================================================================

def _write_csv(rows: Iterable[Sequence[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    writer.writerows(rows)
    return buffer.getvalue()


def export_interactions_csv(results: Iterable[InteractionResult]) -> str:
    """CSV of pairwise check results."""
    return _write_csv(
        [r.drug_a, r.drug_b, r.severity.value, r.description, r.mechanism or "", r.reference or ""]
        for r in results
    )


def export_database_csv(records: Iterable[InteractionRecord], display_name=None) -> str:
    """CSV of interaction records; ``display_name`` maps ids to names."""
    display_name = display_name or (lambda drug_id: drug_id)
    return _write_csv(
        [
            display_name(r.drug_a),
            display_name(r.drug_b),
            r.severity.value,
            r.description,
            r.mechanism or "",
            r.reference or "",
        ]
        for r in records
    )


def export_filename(prefix: str, day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"{prefix}_{day.isoformat()}.csv"
