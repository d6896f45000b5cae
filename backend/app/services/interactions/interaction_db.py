"""
Interaction Database - Runtime singleton for the static drug-drug interaction list.

The database is a flat list assembled by concatenating several source lists
at load time. It is loaded once, never mutated afterwards, and may be shared
freely between concurrent requests.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from .models import (
    EvidenceLevel,
    InteractionRecord,
    Severity,
    canonical_pair,
    normalize_drug,
)

logger = logging.getLogger(__name__)

# Order in which source lists are concatenated
SOURCE_ORDER = ("core", "specialised", "critical_care", "critical")

# Drug class -> identifiers (substring match against drug_a / drug_b)
DRUG_CLASS_KEYWORDS: Dict[str, List[str]] = {
    "beta-lactam": ["amoxicillin", "ampicillin", "ceftriaxone", "cephalexin", "piperacillin"],
    "fluoroquinolone": ["ciprofloxacin", "levofloxacin", "moxifloxacin"],
    "macrolide": ["azithromycin", "clarithromycin", "erythromycin"],
    "aminoglycoside": ["gentamicin", "tobramycin", "amikacin"],
    "glycopeptide": ["vancomycin", "teicoplanin"],
    "oxazolidinone": ["linezolid"],
    "carbapenem": ["meropenem", "imipenem", "doripenem"],
}


def resolve_data_path(relative: str) -> Path:
    """Resolve a data path relative to the interactions package."""
    path = Path(relative)
    if path.is_absolute():
        return path
    return Path(__file__).parent / path


def load_interaction_records(
    path: Path,
) -> Tuple[Tuple[InteractionRecord, ...], Dict[str, int], Optional[str]]:
    """
    Load and validate interaction records from a JSON file.

    Accepts either a bare list of records or ``{"version": ..., "sources":
    {name: [records]}}``. Named sources are concatenated in SOURCE_ORDER,
    followed by any other sources in file order.

    Returns:
        (records, per-source counts, version)
    """
    if not path.exists():
        raise FileNotFoundError(f"Interaction database not found at {path}")

    with open(path, 'r', encoding='utf-8') as f:
        payload = json.load(f)

    if isinstance(payload, list):
        sources = {"core": payload}
        version = None
    else:
        sources = payload.get("sources", {})
        version = payload.get("version")

    ordered_names = [name for name in SOURCE_ORDER if name in sources]
    ordered_names += [name for name in sources if name not in SOURCE_ORDER]

    records: List[InteractionRecord] = []
    source_counts: Dict[str, int] = {}

    for name in ordered_names:
        items = sources[name]
        for i, item in enumerate(items):
            try:
                records.append(InteractionRecord.model_validate(item))
            except ValidationError as e:
                raise RuntimeError(
                    f"Invalid interaction record {name}[{i}] in {path}: {e}"
                ) from e
        source_counts[name] = len(items)

    return tuple(records), source_counts, version


def find_matching(
    records: Iterable[InteractionRecord],
    selected_drugs: Iterable[str],
) -> List[InteractionRecord]:
    """
    Records whose two drugs are both in the selection.

    Matching is symmetric and keeps database order. Duplicate records
    (including reversed pairs) are all returned.
    """
    selected = {normalize_drug(d) for d in selected_drugs}
    return [
        record for record in records
        if normalize_drug(record.drug_a) in selected
        and normalize_drug(record.drug_b) in selected
    ]


# ============================================================================
# Interaction Matrix
# ============================================================================

class InteractionMatrix:
    """Indexed view over interaction records for fast lookup."""

    def __init__(self, records: Sequence[InteractionRecord]):
        self.records = tuple(records)
        self._build_matrix()

    def _build_matrix(self):
        """Build indexes by canonical pair, by drug, and by severity."""
        self.by_drug_pair: Dict[Tuple[str, str], List[InteractionRecord]] = {}
        self.by_drug: Dict[str, List[InteractionRecord]] = {}
        self.by_severity: Dict[str, List[InteractionRecord]] = {}

        for record in self.records:
            self.by_drug_pair.setdefault(record.pair_key(), []).append(record)

            for drug in {normalize_drug(record.drug_a), normalize_drug(record.drug_b)}:
                self.by_drug.setdefault(drug, []).append(record)

            self.by_severity.setdefault(record.severity.value, []).append(record)

    def get_interactions_for_pair(self, drug_a: str, drug_b: str) -> List[InteractionRecord]:
        """Get all interactions for a drug pair, in either orientation."""
        return list(self.by_drug_pair.get(canonical_pair(drug_a, drug_b), []))

    def get_interactions_for_drug(self, drug: str) -> List[InteractionRecord]:
        """Get all interactions involving a drug."""
        return list(self.by_drug.get(normalize_drug(drug), []))

    def get_interactions_by_severity(self, severity: Severity) -> List[InteractionRecord]:
        """Get all interactions of a given severity."""
        return list(self.by_severity.get(Severity(severity).value, []))

    def known_drugs(self) -> List[str]:
        return sorted(self.by_drug)


# ============================================================================
# Database Singleton
# ============================================================================

class InteractionDatabase:
    """
    Singleton holder for the interaction database.
    Loads the JSON data file on first use and exposes read-only queries.
    """

    _instance: Optional['InteractionDatabase'] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not InteractionDatabase._initialized:
            self._records: Tuple[InteractionRecord, ...] = ()
            self._source_counts: Dict[str, int] = {}
            self._version: Optional[str] = None
            self._load_data()
            self._matrix = InteractionMatrix(self._records)
            InteractionDatabase._initialized = True

    def _load_data(self):
        """Load interaction records from the configured data file."""
        from .config import get_config

        config = get_config()
        data_file = resolve_data_path(config.interaction_data_path)

        self._records, self._source_counts, self._version = load_interaction_records(data_file)

        logger.info(
            "Interaction database loaded: %d records from %d sources (version %s)",
            len(self._records), len(self._source_counts), self._version or "unversioned",
        )

    @property
    def records(self) -> Tuple[InteractionRecord, ...]:
        return self._records

    @property
    def version(self) -> Optional[str]:
        return self._version

    @property
    def matrix(self) -> InteractionMatrix:
        return self._matrix

    def __len__(self) -> int:
        return len(self._records)

    # ===== Queries =====

    def find_matching(self, selected_drugs: Iterable[str]) -> List[InteractionRecord]:
        return find_matching(self._records, selected_drugs)

    def filter_interactions(
        self,
        severity: Optional[Severity] = None,
        evidence_level: Optional[EvidenceLevel] = None,
        drug: Optional[str] = None,
    ) -> List[InteractionRecord]:
        """Filter records by severity, evidence level and/or drug."""
        filtered: Iterable[InteractionRecord] = self._records

        if severity is not None:
            severity = Severity(severity)
            filtered = [r for r in filtered if r.severity == severity]

        if evidence_level is not None:
            evidence_level = EvidenceLevel(evidence_level)
            filtered = [r for r in filtered if r.evidence_level == evidence_level]

        if drug:
            filtered = [r for r in filtered if r.involves(drug)]

        return list(filtered)

    def search_by_drug_class(self, drug_class: str) -> List[InteractionRecord]:
        """Interactions involving any member of a drug class (unknown class -> [])."""
        keywords = DRUG_CLASS_KEYWORDS.get(drug_class.strip().lower(), [])
        return [
            record for record in self._records
            if any(
                keyword in record.drug_a.lower() or keyword in record.drug_b.lower()
                for keyword in keywords
            )
        ]

    def get_high_risk_interactions(self) -> List[InteractionRecord]:
        """Contraindicated pairs, and major pairs backed by High evidence."""
        return [
            record for record in self._records
            if record.severity == Severity.CONTRAINDICATED
            or (record.severity == Severity.MAJOR and record.evidence_level == EvidenceLevel.HIGH)
        ]

    def get_interactions_by_mechanism(self, mechanism: str) -> List[InteractionRecord]:
        needle = mechanism.lower()
        return [
            record for record in self._records
            if record.mechanism and needle in record.mechanism.lower()
        ]

    def database_stats(self) -> Dict:
        """Summary statistics of the database."""
        severity_breakdown = {severity.value: 0 for severity in Severity}
        evidence_breakdown = {level.value: 0 for level in EvidenceLevel}

        for record in self._records:
            severity_breakdown[record.severity.value] += 1
            if record.evidence_level is not None:
                evidence_breakdown[record.evidence_level.value] += 1

        return {
            "version": self._version,
            "total_interactions": len(self._records),
            "unique_drugs": len(self._matrix.known_drugs()),
            "severity_breakdown": severity_breakdown,
            "evidence_levels": evidence_breakdown,
            "sources": dict(self._source_counts),
        }


# Global singleton instance
_db_instance: Optional[InteractionDatabase] = None


def get_interaction_database() -> InteractionDatabase:
    """Get the global interaction database instance."""
    global _db_instance
    if _db_instance is None:
        _db_instance = InteractionDatabase()
    return _db_instance


def reload_interaction_database() -> InteractionDatabase:
    """Reload the interaction database (useful for testing or after data updates)."""
    global _db_instance
    InteractionDatabase._initialized = False
    _db_instance = InteractionDatabase()
    return _db_instance
