from fastapi import APIRouter, HTTPException
from typing import Dict, List, Optional

from app.services.interactions.medications import get_medication_catalog
from app.services.interactions.models import Medication

router = APIRouter()


@router.get("", response_model=List[Medication])
async def list_medications(category: Optional[str] = None):
    """Medication catalogue, optionally restricted to one therapeutic class."""
    return get_medication_catalog().list_medications(category)


@router.get("/categories", response_model=Dict[str, str])
async def list_categories():
    return get_medication_catalog().get_categories()


@router.get("/{drug_id}", response_model=Medication)
async def get_medication(drug_id: str):
    medication = get_medication_catalog().get(drug_id)
    if medication is None:
        raise HTTPException(status_code=404, detail=f"Unknown medication: {drug_id}")
    return medication
