"""
Pairwise interaction checks for a medication list.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .interaction_db import InteractionMatrix, get_interaction_database
from .medications import get_drug_name_by_id
from .models import InteractionRecord, InteractionResult, Severity
from .risk_scorer import distinct_drugs

logger = logging.getLogger(__name__)

NO_INTERACTION_MESSAGE = "No known interaction detected for this drug pair."


class PairChecker:
    """Check every unordered pair of a selection against the interaction matrix."""

    def __init__(
        self,
        matrix: Optional[InteractionMatrix] = None,
        display_name: Optional[Callable[[str], str]] = None,
    ):
        self.matrix = matrix or get_interaction_database().matrix
        self.display_name = display_name or get_drug_name_by_id

    def check_interactions(self, selected_drugs: Sequence[str]) -> List[InteractionResult]:
        """
        First known interaction for each pair, in selection order.

        Pairs are visited i < j over the distinct selection; when the
        database holds several records for a pair only the first is reported.
        """
        drugs = distinct_drugs(selected_drugs)
        results = []

        for i, drug_a in enumerate(drugs):
            for drug_b in drugs[i + 1:]:
                records = self.matrix.get_interactions_for_pair(drug_a, drug_b)
                if not records:
                    continue

                interaction = records[0]
                results.append(InteractionResult(
                    drug_a=self.display_name(drug_a),
                    drug_b=self.display_name(drug_b),
                    severity=interaction.severity,
                    description=interaction.description,
                    mechanism=interaction.mechanism,
                    reference=interaction.reference,
                ))

        logger.info("Pair check: %d drugs, %d interacting pairs", len(drugs), len(results))
        return results

    def check_pair(self, drug_a: str, drug_b: str) -> Tuple[List[InteractionRecord], str]:
        """All records for one pair plus an advisory sentence."""
        interactions = self.matrix.get_interactions_for_pair(drug_a, drug_b)
        return interactions, pair_recommendation(interactions)


def pair_recommendation(interactions: Sequence[InteractionRecord]) -> str:
    """Advisory sentence keyed on the most severe interaction."""
    if not interactions:
        return NO_INTERACTION_MESSAGE

    worst = max(interactions, key=lambda i: i.severity.rank)
    management = worst.clinical_management or "Review combination."

    if worst.severity == Severity.CONTRAINDICATED:
        return f"AVOID combination: {worst.description} {management}"
    elif worst.severity == Severity.MAJOR:
        return f"Use with caution: {worst.description} {management}"
    else:
        return f"Monitor: {worst.description} {management}"


def check_interactions(selected_drugs: Sequence[str]) -> List[InteractionResult]:
    """Convenience wrapper using the global database and catalogue."""
    return PairChecker().check_interactions(selected_drugs)
