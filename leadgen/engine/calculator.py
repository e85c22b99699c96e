"""Core ROI engine.

Maps business inputs plus the global ROI configuration to hours saved, cost
saved and FTE-equivalents. Every function here is pure: no I/O, no state
kept between calls.

Two savings models price the recurring component:

- time_savings: recurring hours x analyst hourly rate
- fte_avoidance: recurring FTEs avoided x fully loaded FTE cost

Backfill is one-time labor and is always priced by the hour, at the staff
(analyst) or consultant rate.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from leadgen.models.coercion import (
    parse_float_or_default,
    parse_int_or_default,
    positive_or_default,
)
from leadgen.models.enums import (
    DEFAULT_BACKFILL_RATE_TYPE,
    DEFAULT_ROI_MODEL,
    BackfillRateType,
    RoiModel,
    UseCase,
    as_use_case,
)
from leadgen.models.roi_config import (
    DEFAULT_ANALYST_RATE,
    DEFAULT_CONSULTANT_RATE,
    DEFAULT_DATA_ENTRY_MINUTES,
    DEFAULT_TRIAGE_MINUTES,
    RoiConfig,
)

from .result import DocumentCounts, RoiResult

if TYPE_CHECKING:
    from leadgen.models.inputs import CalculationInputs

logger = logging.getLogger(__name__)

DEFAULT_FTE_COST = 85000.0
HOURS_PER_FTE = 2080  # 40 hrs/week * 52 weeks
HISTORICAL_LOOKBACK_YEARS = 3

_RATE_FIELDS = ("analyst_hourly_rate", "backfill_hourly_rate")
_INT_FIELDS = (
    "triage_time_per_doc",
    "data_entry_time_per_doc",
    "docs_per_household",
    "docs_per_client",
    "docs_per_investor",
)
_FLOAT_FIELDS = ("data_utilization_baseline",)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals with ties going up (2.5 -> 3, 0.125 -> 0.13)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _as_enum(enum_cls, value):
    if not value:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _round2(value: float) -> float:
    return round_half_up(value, 2)


def _ratio(value: Any) -> int:
    return parse_int_or_default(value)


def merge_roi_config(
    defaults: RoiConfig,
    override: Optional[Union[RoiConfig, Mapping[str, Any]]] = None,
) -> RoiConfig:
    """Overlay per-calculation overrides on the global defaults.

    Each field is resolved on its own. Numeric overrides are parsed and win
    when they are valid non-negative numbers; anything else keeps the default.
    The two hourly rates also treat a zero override as unset.
    """
    if override is None:
        return replace(defaults)

    if isinstance(override, RoiConfig):
        override = override.to_dict()

    resolved: dict[str, Any] = {}
    for name in RoiConfig.field_names():
        default_value = getattr(defaults, name)
        if name in _RATE_FIELDS:
            resolved[name] = parse_float_or_default(override.get(name)) or parse_float_or_default(
                default_value
            )
        elif name in _INT_FIELDS:
            resolved[name] = parse_int_or_default(override.get(name), default_value)
        elif name in _FLOAT_FIELDS:
            resolved[name] = parse_float_or_default(override.get(name), default_value)
        else:
            value = override.get(name)
            resolved[name] = value if value is not None else default_value

    return RoiConfig(**resolved)


def estimate_historical_households(
    transactions_per_year: int,
    avg_households_per_transaction: int,
    lookback_years: int = HISTORICAL_LOOKBACK_YEARS,
) -> int:
    """Estimate households still to migrate from past acquisitions."""
    return max(transactions_per_year, 0) * lookback_years * max(avg_households_per_transaction, 0)


def _monthly_from_annual(annual_docs: float) -> int:
    return int(round_half_up(annual_docs / 12))


def derive_document_counts(inputs: CalculationInputs, config: RoiConfig) -> DocumentCounts:
    """Derive monthly and backfill document volumes from use-case inputs.

    Backfill is a direct input for every use case. M&A can also estimate it
    structurally from historical households, and that estimate wins when it
    is positive.
    """
    use_case = as_use_case(inputs.use_case)
    direct_backfill = inputs.annual_backfill

    if use_case is UseCase.CRITICAL_BUSINESS_PROCESS:
        return DocumentCounts(
            monthly_documents=inputs.monthly_documents,
            annual_backfill=direct_backfill,
        )

    if use_case is UseCase.M_AND_A_TRANSITIONS:
        docs_per_household = _ratio(config.docs_per_household)
        annual_docs = (
            inputs.m_and_a_transactions_per_year
            * inputs.avg_households_per_transaction
            * docs_per_household
        )
        derived_backfill = inputs.historical_households_to_migrate * docs_per_household
        return DocumentCounts(
            monthly_documents=_monthly_from_annual(annual_docs),
            annual_backfill=derived_backfill if derived_backfill > 0 else direct_backfill,
        )

    if use_case is UseCase.PROSPECTS_ONBOARDING:
        annual_docs = inputs.annual_new_clients * _ratio(config.docs_per_client)
        return DocumentCounts(
            monthly_documents=_monthly_from_annual(annual_docs),
            annual_backfill=direct_backfill,
        )

    if use_case is UseCase.NEW_INVESTOR_ONBOARDING:
        annual_docs = inputs.annual_investors_onboarded * _ratio(config.docs_per_investor)
        return DocumentCounts(
            monthly_documents=_monthly_from_annual(annual_docs),
            annual_backfill=direct_backfill,
        )

    return DocumentCounts(monthly_documents=0, annual_backfill=direct_backfill)


def _hours_per_unit(
    use_case: Optional[UseCase],
    inputs: CalculationInputs,
    config: RoiConfig,
    total_time_per_doc: float,
) -> tuple[float, str]:
    if use_case is UseCase.CRITICAL_BUSINESS_PROCESS:
        return total_time_per_doc / 60, "document"
    if use_case is UseCase.M_AND_A_TRANSITIONS:
        docs = inputs.avg_households_per_transaction * _ratio(config.docs_per_household)
        return docs * total_time_per_doc / 60, "transition"
    if use_case is UseCase.PROSPECTS_ONBOARDING:
        return _ratio(config.docs_per_client) * total_time_per_doc / 60, "client"
    if use_case is UseCase.NEW_INVESTOR_ONBOARDING:
        return _ratio(config.docs_per_investor) * total_time_per_doc / 60, "investor"
    return 0.0, ""


def calculate_roi(inputs: CalculationInputs, config: RoiConfig) -> Optional[RoiResult]:
    """Compute the ROI metrics for one lead.

    Returns None when no use case was selected. Any other gap in the inputs
    degrades to zero-valued figures rather than an error.
    """
    if not inputs.use_case:
        return None

    use_case = as_use_case(inputs.use_case)
    if use_case is None:
        logger.debug("Unrecognised use case %r, returning zero-valued result", inputs.use_case)

    triage_time = positive_or_default(config.triage_time_per_doc, DEFAULT_TRIAGE_MINUTES)
    entry_time = positive_or_default(config.data_entry_time_per_doc, DEFAULT_DATA_ENTRY_MINUTES)
    total_time_per_doc = triage_time + entry_time  # minutes
    analyst_rate = positive_or_default(config.analyst_hourly_rate, DEFAULT_ANALYST_RATE)
    consultant_rate = positive_or_default(config.backfill_hourly_rate, DEFAULT_CONSULTANT_RATE)

    roi_model = (
        _as_enum(RoiModel, inputs.roi_model)
        or DEFAULT_ROI_MODEL.get(use_case)
        or RoiModel.TIME_SAVINGS
    )
    backfill_rate_type = (
        _as_enum(BackfillRateType, inputs.backfill_rate_type)
        or DEFAULT_BACKFILL_RATE_TYPE.get(use_case)
        or BackfillRateType.STAFF
    )
    fte_cost = positive_or_default(inputs.fte_cost, DEFAULT_FTE_COST)

    backfill_rate = (
        consultant_rate if backfill_rate_type is BackfillRateType.CONSULTANT else analyst_rate
    )

    counts = derive_document_counts(inputs, config)

    monthly_hours_saved = counts.monthly_documents * total_time_per_doc / 60
    backfill_hours_saved = counts.annual_backfill * total_time_per_doc / 60
    recurring_hours_saved = monthly_hours_saved * 12
    annual_hours_saved = recurring_hours_saved + backfill_hours_saved

    ftes_avoided = annual_hours_saved / HOURS_PER_FTE

    if roi_model is RoiModel.FTE_AVOIDANCE:
        # Only recurring hours count toward headcount; backfill is not standing work.
        recurring_ftes_avoided = recurring_hours_saved / HOURS_PER_FTE
        annual_recurring_savings = recurring_ftes_avoided * fte_cost
    else:
        annual_recurring_savings = recurring_hours_saved * analyst_rate
    backfill_cost_saved = backfill_hours_saved * backfill_rate

    annual_savings = annual_recurring_savings + backfill_cost_saved

    # Staff rate regardless of model or backfill rate type.
    monthly_cost_saved = monthly_hours_saved * analyst_rate

    hours_per_unit, unit_label = _hours_per_unit(use_case, inputs, config, total_time_per_doc)

    return RoiResult(
        monthly_hours_saved=_round2(monthly_hours_saved),
        monthly_cost_saved=_round2(monthly_cost_saved),
        backfill_hours_saved=_round2(backfill_hours_saved),
        annual_hours_saved=_round2(annual_hours_saved),
        backfill_cost_saved=_round2(backfill_cost_saved),
        annual_savings=_round2(annual_savings),
        annual_recurring_savings=_round2(annual_recurring_savings),
        ftes_avoided=_round2(ftes_avoided),
        hours_per_unit=_round2(hours_per_unit),
        unit_label=unit_label,
        derived_monthly_documents=counts.monthly_documents,
        derived_annual_backfill=counts.annual_backfill,
        roi_model=roi_model,
        backfill_rate_type=backfill_rate_type,
        fte_cost=fte_cost,
        backfill_rate_used=backfill_rate,
    )
