import logging as std_logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api.router import api_router
from app.core import logging  # Initialize logging
from app.services.backend.hosted_client import close_backend_client, get_backend_client
from app.services.interactions.interaction_db import get_interaction_database
from app.services.interactions.medications import get_medication_catalog

logger = std_logging.getLogger(__name__)

app = FastAPI(
    title="Antibiotic Interaction API",
    description="Drug-Drug Interaction Risk Scoring for Antibiotic Decision Support",
    version="1.0.0"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API Routers
app.include_router(api_router, prefix="/api/v1")

@app.on_event("startup")
async def startup_event():
    # Preload static reference data
    db = get_interaction_database()
    catalog = get_medication_catalog()
    logger.info(
        "Reference data ready: %d interactions, %d medications",
        len(db), len(catalog.list_medications()),
    )

    if get_backend_client() is None:
        logger.warning("HOSTED_BACKEND_URL not set - assessment log endpoints will return 503")

@app.on_event("shutdown")
async def shutdown_event():
    await close_backend_client()

@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "interaction-risk"}
