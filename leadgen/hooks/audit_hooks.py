"""Audit hooks -- logs ROI calculations for the audit trail."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from leadgen.engine.result import RoiResult

logger = logging.getLogger(__name__)


def log_calculation(
    use_case: str,
    result: RoiResult,
    lead_id: Any = None,
    company_type: str | None = None,
) -> dict[str, Any]:
    """Record a completed calculation in the audit log.

    Returns the audit entry dict for downstream persistence.
    """
    entry = {
        "lead_id": lead_id,
        "use_case": use_case,
        "company_type": company_type,
        "roi_model": result.roi_model.value,
        "backfill_rate_type": result.backfill_rate_type.value,
        "annual_savings": result.annual_savings,
        "ftes_avoided": result.ftes_avoided,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }
    logger.info(
        "ROI calculated: %s (%s) → $%.2f, %.2f FTEs, lead %s",
        use_case,
        entry["roi_model"],
        result.annual_savings,
        result.ftes_avoided,
        lead_id,
    )
    return entry
