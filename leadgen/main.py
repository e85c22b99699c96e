"""FastAPI application for the lead-gen ROI calculator."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from leadgen.api.admin import router as admin_router
from leadgen.api.dependencies import client_ip, get_stores
from leadgen.api.schemas import CalculateResponse, StrategicBenefitsResponse
from leadgen.config.settings import get_settings
from leadgen.models.inputs import CalculationInputs
from leadgen.services import CalculationService, LeadSubmission, SubmissionError
from leadgen.services.leads import load_roi_config, resolve_strategic_benefits
from leadgen.storage import StoreError, Stores

settings = get_settings()

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Lead-Gen ROI Calculator API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin_router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api/roi-defaults")
async def roi_defaults(stores: Stores = Depends(get_stores)) -> dict[str, Any]:
    """ROI defaults the calculator form pre-fills from."""
    return load_roi_config(stores.roi_defaults).to_dict()


@app.get("/api/strategic-benefits/{use_case}", response_model=StrategicBenefitsResponse)
async def strategic_benefits(use_case: str, stores: Stores = Depends(get_stores)):
    return StrategicBenefitsResponse(
        benefits=resolve_strategic_benefits(stores.benefits, use_case)
    )


@app.post("/api/calculate", response_model=CalculateResponse)
async def calculate(
    request: Request,
    payload: dict[str, Any] = Body(...),
    stores: Stores = Depends(get_stores),
):
    """Run the ROI calculation for a submitted form and capture the lead."""
    inputs = CalculationInputs.from_form(payload)
    submission = LeadSubmission.from_form(
        payload,
        ip_address=client_ip(request),
        user_agent=request.headers.get("user-agent"),
        referrer=request.headers.get("referer"),
    )

    try:
        results = CalculationService(stores).submit(submission, inputs)
    except SubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "results": results}
