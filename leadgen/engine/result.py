"""Immutable value objects produced by the ROI engine."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from leadgen.models.enums import BackfillRateType, RoiModel


@dataclass(frozen=True)
class DocumentCounts:
    """Monthly recurring and one-time backfill document volumes."""

    monthly_documents: int
    annual_backfill: int


@dataclass(frozen=True)
class RoiResult:
    """Savings and capacity figures for one calculation.

    Hours, currency, per-unit and FTE figures are rounded to 2 decimals.
    ``monthly_cost_saved`` is always priced at the analyst (staff) rate,
    whatever the ROI model or backfill rate type, so the monthly figure reads
    the same across models.
    """

    monthly_hours_saved: float
    monthly_cost_saved: float
    backfill_hours_saved: float
    annual_hours_saved: float
    backfill_cost_saved: float
    annual_savings: float
    annual_recurring_savings: float
    ftes_avoided: float

    # Per-unit metrics
    hours_per_unit: float
    unit_label: str

    # Derived document counts (persisted with the lead, not shown publicly)
    derived_monthly_documents: int
    derived_annual_backfill: int

    # Resolved model selections
    roi_model: RoiModel
    backfill_rate_type: BackfillRateType
    fte_cost: float
    backfill_rate_used: float

    def to_dict(self) -> dict:
        data = asdict(self)
        data["roi_model"] = self.roi_model.value
        data["backfill_rate_type"] = self.backfill_rate_type.value
        return data
