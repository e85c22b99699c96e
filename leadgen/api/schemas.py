"""Request and response models for the HTTP API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

from leadgen.models.enums import LeadStatus, UseCase


class CalculationResults(BaseModel):
    monthly_hours_saved: float
    annual_savings: float
    annual_recurring_savings: float
    backfill_cost_saved: float
    ftes_avoided: float
    hours_per_unit: float
    unit_label: str
    roi_model: str
    strategic_benefits: list[str]
    use_case_label: str
    company_type_label: str


class CalculateResponse(BaseModel):
    success: bool = True
    results: CalculationResults


class StrategicBenefitsResponse(BaseModel):
    benefits: list[str]


class AdminLoginRequest(BaseModel):
    password: str = ""


class AdminLoginResponse(BaseModel):
    success: bool = True
    token: str


class AuthStatusResponse(BaseModel):
    isAuthenticated: bool


class SuccessResponse(BaseModel):
    success: bool = True


class LeadUpdateRequest(BaseModel):
    status: Optional[LeadStatus] = None
    notes: Optional[str] = None


class LeadListResponse(BaseModel):
    leads: list[dict[str, Any]]
    total: int
    page: int
    pages: int


class BenefitCreateRequest(BaseModel):
    use_case: UseCase
    benefit_text: str = Field(min_length=1)
    display_order: int = 0
    is_active: bool = True


class BenefitUpdateRequest(BaseModel):
    benefit_text: Optional[str] = Field(default=None, min_length=1)
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class BenefitReorderRequest(BaseModel):
    use_case: UseCase
    ordered_ids: list[int]
