"""Medication catalogue: display names and therapeutic classes for drug ids."""

import json
import logging
from functools import lru_cache
from typing import Dict, List, Optional

from .config import get_config
from .interaction_db import resolve_data_path
from .models import Medication, normalize_drug

logger = logging.getLogger(__name__)


class MedicationCatalog:
    """Read-only lookup over the medication catalogue."""

    def __init__(self, medications: List[Medication], categories: Optional[Dict[str, str]] = None):
        self._medications = tuple(medications)
        self._by_id = {normalize_drug(m.id): m for m in self._medications}
        self._categories = dict(categories or {})

    @classmethod
    def from_file(cls, path) -> 'MedicationCatalog':
        with open(path, 'r', encoding='utf-8') as f:
            payload = json.load(f)

        medications = [Medication.model_validate(m) for m in payload.get("medications", [])]
        logger.info("Medication catalogue loaded: %d medications", len(medications))
        return cls(medications, payload.get("categories", {}))

    def get(self, drug_id: str) -> Optional[Medication]:
        return self._by_id.get(normalize_drug(drug_id))

    def get_drug_name_by_id(self, drug_id: str) -> str:
        """Display name for a drug id, or the id itself when unknown."""
        medication = self.get(drug_id)
        return medication.name if medication else drug_id

    def get_drug_category_by_id(self, drug_id: str) -> str:
        medication = self.get(drug_id)
        return medication.category if medication else ""

    def list_medications(self, category: Optional[str] = None) -> List[Medication]:
        if category is None:
            return list(self._medications)
        wanted = category.strip().lower()
        return [m for m in self._medications if m.category.lower() == wanted]

    def get_categories(self) -> Dict[str, str]:
        return dict(self._categories)


@lru_cache(maxsize=1)
def get_medication_catalog() -> MedicationCatalog:
    """Get the process-wide medication catalogue."""
    path = resolve_data_path(get_config().medication_data_path)
    if not path.exists():
        raise FileNotFoundError(f"Medication catalogue not found at {path}")
    return MedicationCatalog.from_file(path)


def get_drug_name_by_id(drug_id: str) -> str:
    return get_medication_catalog().get_drug_name_by_id(drug_id)


def get_drug_category_by_id(drug_id: str) -> str:
    return get_medication_catalog().get_drug_category_by_id(drug_id)
