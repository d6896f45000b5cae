"""
Interaction Risk Service

Deterministic drug-drug interaction risk scoring for antibiotic
decision support. Scores a drug selection against a static interaction
database, adjusted by optional patient factors.
"""

from .models import (
    Severity,
    EvidenceLevel,
    Frequency,
    OrganFunction,
    RiskLevel,
    InteractionRecord,
    PatientFactors,
    RiskAssessment,
    ClinicalAnalysis,
    InteractionResult,
    Medication,
)
from .interaction_db import (
    InteractionDatabase,
    InteractionMatrix,
    get_interaction_database,
    reload_interaction_database,
)
from .medications import get_medication_catalog, get_drug_name_by_id, get_drug_category_by_id
from .risk_scorer import (
    InteractionRiskScorer,
    ClinicalDecisionEngine,
    analyze_interactions,
    INSUFFICIENT_DATA_MESSAGE,
)
from .pair_checker import PairChecker, check_interactions
from .documentation import format_clinical_documentation
from .config import (
    EvidenceWeighting,
    get_config,
    update_config,
    reset_config,
    load_config_from_file,
    save_config_to_file,
)

__all__ = [
    # Models
    'Severity',
    'EvidenceLevel',
    'Frequency',
    'OrganFunction',
    'RiskLevel',
    'InteractionRecord',
    'PatientFactors',
    'RiskAssessment',
    'ClinicalAnalysis',
    'InteractionResult',
    'Medication',

    # Data
    'InteractionDatabase',
    'InteractionMatrix',
    'get_interaction_database',
    'reload_interaction_database',
    'get_medication_catalog',
    'get_drug_name_by_id',
    'get_drug_category_by_id',

    # Scoring
    'InteractionRiskScorer',
    'ClinicalDecisionEngine',
    'analyze_interactions',
    'INSUFFICIENT_DATA_MESSAGE',
    'PairChecker',
    'check_interactions',
    'format_clinical_documentation',

    # Config
    'EvidenceWeighting',
    'get_config',
    'update_config',
    'reset_config',
    'load_config_from_file',
    'save_config_to_file',
]
