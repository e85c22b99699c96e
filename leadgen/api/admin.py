"""Admin dashboard endpoints: session auth, lead management, benefit curation."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from leadgen.api.auth import (
    AdminSessionManager,
    AuthError,
    bearer_token,
    get_session_manager,
    require_admin,
)
from leadgen.api.dependencies import get_stores, parse_date_param
from leadgen.api.schemas import (
    AdminLoginRequest,
    AdminLoginResponse,
    AuthStatusResponse,
    BenefitCreateRequest,
    BenefitReorderRequest,
    BenefitUpdateRequest,
    LeadListResponse,
    LeadUpdateRequest,
    SuccessResponse,
)
from leadgen.config.settings import Settings, get_settings
from leadgen.exports.csv_export import export_filename, leads_to_csv
from leadgen.storage import LeadFilters, Stores

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@router.post("/auth", response_model=AdminLoginResponse)
async def login(
    body: AdminLoginRequest,
    settings: Settings = Depends(get_settings),
    sessions: AdminSessionManager = Depends(get_session_manager),
):
    token = sessions.login(body.password, settings.admin_password)
    if token is None:
        raise AuthError("Invalid password")
    return AdminLoginResponse(token=token)


@router.get("/auth/status", response_model=AuthStatusResponse)
async def auth_status(
    token: Optional[str] = Depends(bearer_token),
    sessions: AdminSessionManager = Depends(get_session_manager),
):
    return AuthStatusResponse(isAuthenticated=sessions.is_valid(token))


@router.post("/auth/logout", response_model=SuccessResponse)
async def logout(
    token: Optional[str] = Depends(bearer_token),
    sessions: AdminSessionManager = Depends(get_session_manager),
):
    sessions.logout(token)
    return SuccessResponse()


# ---------------------------------------------------------------------------
# Leads
# ---------------------------------------------------------------------------


@router.get("/stats")
async def lead_stats(
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
) -> dict[str, Any]:
    return stores.leads.stats().to_dict()


@router.get("/leads", response_model=LeadListResponse)
async def list_leads(
    status_filter: Optional[str] = Query(None, alias="status"),
    company_type: Optional[str] = None,
    use_case: Optional[str] = None,
    search: Optional[str] = None,
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    sort: Optional[str] = None,
    order: Optional[str] = None,
    page: Optional[str] = None,
    limit: Optional[str] = None,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
):
    filters = LeadFilters(
        status=status_filter,
        company_type=company_type,
        use_case=use_case,
        search=search,
        from_date=parse_date_param(from_date, "from"),
        to_date=parse_date_param(to_date, "to"),
        sort=sort,
        order=order,
        page=page,
        limit=limit,
    )
    return stores.leads.find(filters).to_dict()


@router.get("/leads/export")
async def export_leads(
    status_filter: Optional[str] = Query(None, alias="status"),
    from_date: Optional[str] = Query(None, alias="from"),
    to_date: Optional[str] = Query(None, alias="to"),
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
):
    filters = LeadFilters(
        status=status_filter,
        from_date=parse_date_param(from_date, "from"),
        to_date=parse_date_param(to_date, "to"),
    )
    rows = stores.leads.export_rows(filters)
    logger.info(f"Exporting {len(rows)} leads to CSV")
    return Response(
        content=leads_to_csv(rows),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/leads/{lead_id}")
async def get_lead(
    lead_id: str,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
) -> dict[str, Any]:
    lead = stores.leads.get(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.put("/leads/{lead_id}")
async def update_lead(
    lead_id: str,
    body: LeadUpdateRequest,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
) -> dict[str, Any]:
    lead = stores.leads.update(
        lead_id,
        status=body.status.value if body.status is not None else None,
        notes=body.notes,
    )
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.delete("/leads/{lead_id}", response_model=SuccessResponse)
async def delete_lead(
    lead_id: str,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
):
    if stores.leads.get(lead_id) is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    stores.leads.delete(lead_id)
    return SuccessResponse()


# ---------------------------------------------------------------------------
# Strategic benefits
# ---------------------------------------------------------------------------


@router.get("/benefits")
async def list_benefits(
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
) -> list[dict[str, Any]]:
    return stores.benefits.list_all()


@router.post("/benefits", status_code=status.HTTP_201_CREATED)
async def create_benefit(
    body: BenefitCreateRequest,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
) -> dict[str, Any]:
    return stores.benefits.create(
        body.use_case.value,
        body.benefit_text,
        display_order=body.display_order,
        is_active=body.is_active,
    )


@router.put("/benefits/reorder", response_model=SuccessResponse)
async def reorder_benefits(
    body: BenefitReorderRequest,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
):
    stores.benefits.reorder(body.use_case.value, body.ordered_ids)
    return SuccessResponse()


@router.put("/benefits/{benefit_id}")
async def update_benefit(
    benefit_id: str,
    body: BenefitUpdateRequest,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
) -> dict[str, Any]:
    benefit = stores.benefits.update(
        benefit_id,
        benefit_text=body.benefit_text,
        display_order=body.display_order,
        is_active=body.is_active,
    )
    if benefit is None:
        raise HTTPException(status_code=404, detail="Benefit not found")
    return benefit


@router.delete("/benefits/{benefit_id}", response_model=SuccessResponse)
async def delete_benefit(
    benefit_id: str,
    _: str = Depends(require_admin),
    stores: Stores = Depends(get_stores),
):
    if stores.benefits.get(benefit_id) is None:
        raise HTTPException(status_code=404, detail="Benefit not found")
    stores.benefits.delete(benefit_id)
    return SuccessResponse()
