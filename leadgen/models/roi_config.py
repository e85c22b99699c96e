from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping, Optional

from .coercion import parse_float_or_default, parse_int_or_default

# Hardcoded fallbacks used when the roi_defaults row has not been seeded.
DEFAULT_TRIAGE_MINUTES = 5
DEFAULT_DATA_ENTRY_MINUTES = 15
DEFAULT_ANALYST_RATE = 50.0
DEFAULT_CONSULTANT_RATE = 150.0
DEFAULT_DOCS_PER_HOUSEHOLD = 10
DEFAULT_DOCS_PER_CLIENT = 10
DEFAULT_DOCS_PER_INVESTOR = 5


@dataclass(frozen=True)
class RoiConfig:
    """Global ROI settings: per-document handling times, hourly rates and
    per-unit document ratios.

    Loaded from the configuration store on every calculation and passed to
    the engine explicitly. The engine never caches it.
    """

    triage_time_per_doc: Optional[int] = DEFAULT_TRIAGE_MINUTES  # minutes
    data_entry_time_per_doc: Optional[int] = DEFAULT_DATA_ENTRY_MINUTES  # minutes
    analyst_hourly_rate: Optional[float] = DEFAULT_ANALYST_RATE
    backfill_hourly_rate: Optional[float] = DEFAULT_CONSULTANT_RATE
    docs_per_household: Optional[int] = DEFAULT_DOCS_PER_HOUSEHOLD
    docs_per_client: Optional[int] = DEFAULT_DOCS_PER_CLIENT
    docs_per_investor: Optional[int] = DEFAULT_DOCS_PER_INVESTOR
    data_utilization_baseline: Optional[float] = None
    roi_notes: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> RoiConfig:
        """Build a config from a loosely typed store row.

        Unknown columns (id, timestamps) are ignored. Invalid numbers fall
        back to the hardcoded defaults.
        """
        return cls(
            triage_time_per_doc=parse_int_or_default(
                record.get("triage_time_per_doc"), DEFAULT_TRIAGE_MINUTES
            ),
            data_entry_time_per_doc=parse_int_or_default(
                record.get("data_entry_time_per_doc"), DEFAULT_DATA_ENTRY_MINUTES
            ),
            analyst_hourly_rate=parse_float_or_default(
                record.get("analyst_hourly_rate"), DEFAULT_ANALYST_RATE
            ),
            backfill_hourly_rate=parse_float_or_default(
                record.get("backfill_hourly_rate"), DEFAULT_CONSULTANT_RATE
            ),
            docs_per_household=parse_int_or_default(
                record.get("docs_per_household"), DEFAULT_DOCS_PER_HOUSEHOLD
            ),
            docs_per_client=parse_int_or_default(
                record.get("docs_per_client"), DEFAULT_DOCS_PER_CLIENT
            ),
            docs_per_investor=parse_int_or_default(
                record.get("docs_per_investor"), DEFAULT_DOCS_PER_INVESTOR
            ),
            data_utilization_baseline=parse_float_or_default(
                record.get("data_utilization_baseline")
            ),
            roi_notes=record.get("roi_notes") or None,
        )

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


DEFAULT_ROI_CONFIG = RoiConfig()
