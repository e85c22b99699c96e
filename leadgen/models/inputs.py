from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional

from leadgen.engine.calculator import estimate_historical_households

from .coercion import parse_float_or_default, parse_int_or_default
from .enums import BackfillRateType, RoiModel, UseCase

VOLUME_FIELDS = (
    "monthly_documents",
    "annual_backfill",
    "m_and_a_transactions_per_year",
    "avg_households_per_transaction",
    "historical_households_to_migrate",
    "annual_new_clients",
    "annual_investors_onboarded",
)


def _enum_or_none(enum_cls, value: Any):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class CalculationInputs:
    """Per-request business inputs for a single ROI calculation.

    ``use_case`` keeps the raw tag so an unrecognised value coming from a web
    form still reaches the engine (which degrades it to a zero result) instead
    of being mistaken for a missing selector.
    """

    use_case: Optional[str] = None
    roi_model: Optional[RoiModel] = None
    backfill_rate_type: Optional[BackfillRateType] = None
    fte_cost: Optional[float] = None

    # Volume inputs (non-negative integers)
    monthly_documents: int = 0
    annual_backfill: int = 0
    m_and_a_transactions_per_year: int = 0
    avg_households_per_transaction: int = 0
    historical_households_to_migrate: int = 0
    annual_new_clients: int = 0
    annual_investors_onboarded: int = 0

    @classmethod
    def from_form(cls, payload: Mapping[str, Any]) -> CalculationInputs:
        """Convert an untyped request body into validated inputs.

        Never raises: unknown selectors become None and malformed or negative
        volumes become 0. For M&A, an omitted
        ``historical_households_to_migrate`` is estimated from the deal volume
        (three-year lookback); an explicit value, including 0, is kept.
        """
        raw_use_case = payload.get("use_case")
        if isinstance(raw_use_case, UseCase):
            use_case = raw_use_case.value
        else:
            use_case = str(raw_use_case).strip() if raw_use_case is not None else ""

        volumes = {name: parse_int_or_default(payload.get(name)) for name in VOLUME_FIELDS}

        if (
            use_case == UseCase.M_AND_A_TRANSITIONS.value
            and payload.get("historical_households_to_migrate") is None
        ):
            volumes["historical_households_to_migrate"] = estimate_historical_households(
                volumes["m_and_a_transactions_per_year"],
                volumes["avg_households_per_transaction"],
            )

        fte_cost = parse_float_or_default(payload.get("fte_cost"))

        return cls(
            use_case=use_case or None,
            roi_model=_enum_or_none(RoiModel, payload.get("roi_model")),
            backfill_rate_type=_enum_or_none(BackfillRateType, payload.get("backfill_rate_type")),
            fte_cost=fte_cost or None,
            **volumes,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["roi_model"] = self.roi_model.value if self.roi_model else None
        data["backfill_rate_type"] = (
            self.backfill_rate_type.value if self.backfill_rate_type else None
        )
        return data
