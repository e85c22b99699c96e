from .calculator import (
    DEFAULT_FTE_COST,
    HOURS_PER_FTE,
    calculate_roi,
    derive_document_counts,
    estimate_historical_households,
    merge_roi_config,
)
from .narrative import get_strategic_roi
from .result import DocumentCounts, RoiResult

__all__ = [
    "DEFAULT_FTE_COST",
    "HOURS_PER_FTE",
    "calculate_roi",
    "derive_document_counts",
    "estimate_historical_households",
    "merge_roi_config",
    "get_strategic_roi",
    "DocumentCounts",
    "RoiResult",
]
