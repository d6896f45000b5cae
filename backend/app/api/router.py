from fastapi import APIRouter
from app.api.routes import interactions, medications, assessments

api_router = APIRouter()

api_router.include_router(interactions.router, prefix="/interactions", tags=["Interactions"])
api_router.include_router(medications.router, prefix="/medications", tags=["Medications"])
api_router.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
