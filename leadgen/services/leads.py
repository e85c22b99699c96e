"""Lead capture service -- runs the ROI engine and persists the lead."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

from leadgen.engine import calculate_roi, get_strategic_roi
from leadgen.engine.result import RoiResult
from leadgen.hooks.audit_hooks import log_calculation
from leadgen.models.enums import company_type_label, use_case_label
from leadgen.models.inputs import CalculationInputs
from leadgen.models.roi_config import DEFAULT_ROI_CONFIG, RoiConfig
from leadgen.storage import Stores
from leadgen.storage.base import RoiDefaultsStore, StrategicBenefitsStore

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("email", "first_name", "last_name", "company_name", "phone")
TRACKING_FIELDS = ("utm_source", "utm_medium", "utm_campaign")


class SubmissionError(Exception):
    """A lead submission the caller must fix (missing email or use case)."""


@dataclass(frozen=True)
class LeadSubmission:
    """Contact and tracking metadata that travels with a calculation."""

    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company_name: Optional[str] = None
    phone: Optional[str] = None
    company_type: Optional[str] = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None

    @classmethod
    def from_form(cls, payload: Mapping[str, Any], **request_meta: Optional[str]) -> LeadSubmission:
        def text(name: str) -> Optional[str]:
            value = payload.get(name)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        return cls(
            **{name: text(name) for name in CONTACT_FIELDS + TRACKING_FIELDS},
            company_type=text("company_type"),
            **request_meta,
        )


def load_roi_config(store: RoiDefaultsStore) -> RoiConfig:
    """Stored ROI defaults, or the hardcoded fallback when the store is unseeded."""
    config = store.get()
    if config is None:
        logger.warning("ROI defaults not seeded - using built-in fallback")
        return DEFAULT_ROI_CONFIG
    return config


def resolve_strategic_benefits(store: StrategicBenefitsStore, use_case: str) -> list[str]:
    """Admin-curated benefits for a use case, falling back to the built-in copy."""
    benefits = store.get_by_use_case(use_case)
    if not benefits:
        benefits = get_strategic_roi(use_case)["strategic"]
    return benefits


def build_lead_record(
    submission: LeadSubmission,
    inputs: CalculationInputs,
    result: RoiResult,
    benefits: list[str],
) -> dict[str, Any]:
    """Flat lead row: contact data, resolved model choices, inputs and results."""
    return {
        **asdict(submission),
        "use_case": inputs.use_case,
        "roi_model": result.roi_model.value,
        "fte_cost": result.fte_cost,
        "backfill_rate_type": result.backfill_rate_type.value,
        "monthly_documents": result.derived_monthly_documents,
        "annual_backfill": result.derived_annual_backfill,
        "m_and_a_transactions_per_year": inputs.m_and_a_transactions_per_year,
        "avg_households_per_transaction": inputs.avg_households_per_transaction,
        "historical_households_to_migrate": inputs.historical_households_to_migrate,
        "annual_new_clients": inputs.annual_new_clients,
        "annual_investors_onboarded": inputs.annual_investors_onboarded,
        "monthly_hours_saved": result.monthly_hours_saved,
        "annual_savings": result.annual_savings,
        "annual_recurring_savings": result.annual_recurring_savings,
        "backfill_cost_saved": result.backfill_cost_saved,
        "ftes_avoided": result.ftes_avoided,
        "strategic_benefits": list(benefits),
    }


def build_public_payload(
    result: RoiResult,
    benefits: list[str],
    use_case: str,
    company_type: Optional[str],
) -> dict[str, Any]:
    """Results shown to the prospect. Derived document counts stay internal."""
    return {
        "monthly_hours_saved": result.monthly_hours_saved,
        "annual_savings": result.annual_savings,
        "annual_recurring_savings": result.annual_recurring_savings,
        "backfill_cost_saved": result.backfill_cost_saved,
        "ftes_avoided": result.ftes_avoided,
        "hours_per_unit": result.hours_per_unit,
        "unit_label": result.unit_label,
        "roi_model": result.roi_model.value,
        "strategic_benefits": list(benefits),
        "use_case_label": use_case_label(use_case),
        "company_type_label": company_type_label(company_type),
    }


class CalculationService:
    """Coordinates a lead submission.

    Flow: validate -> load ROI defaults -> run the engine -> resolve
    strategic benefits -> persist the lead -> audit -> public payload.
    """

    def __init__(self, stores: Stores):
        self._stores = stores

    def submit(self, submission: LeadSubmission, inputs: CalculationInputs) -> dict[str, Any]:
        if not submission.email:
            raise SubmissionError("Email is required")
        if not inputs.use_case:
            raise SubmissionError("Use case is required")

        config = load_roi_config(self._stores.roi_defaults)
        result = calculate_roi(inputs, config)
        if result is None:
            raise SubmissionError("Unable to calculate ROI")

        benefits = resolve_strategic_benefits(self._stores.benefits, inputs.use_case)

        lead = self._stores.leads.create(
            build_lead_record(submission, inputs, result, benefits)
        )
        log_calculation(
            inputs.use_case,
            result,
            lead_id=lead.get("id"),
            company_type=submission.company_type,
        )

        return build_public_payload(result, benefits, inputs.use_case, submission.company_type)
