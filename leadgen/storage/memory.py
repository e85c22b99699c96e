"""In-process stores used when no database is configured, and by the tests."""

from __future__ import annotations

import copy
import itertools
import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from leadgen.models.enums import LeadStatus
from leadgen.models.roi_config import RoiConfig

from .base import (
    SEARCHABLE_LEAD_COLUMNS,
    LeadFilters,
    LeadPage,
    LeadStats,
    LeadStore,
    RoiDefaultsStore,
    StrategicBenefitsStore,
    parse_timestamp,
    summarize_leads,
)

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


class InMemoryRoiDefaultsStore(RoiDefaultsStore):
    def __init__(self, config: Optional[RoiConfig] = None) -> None:
        self._config = config

    def get(self) -> Optional[RoiConfig]:
        return self._config

    def set(self, config: Optional[RoiConfig]) -> None:
        self._config = config


class InMemoryStrategicBenefitsStore(StrategicBenefitsStore):
    def __init__(self, seed: Optional[Mapping[str, list[str]]] = None) -> None:
        """``seed`` maps a use case to benefit texts, stored active in list order."""
        self._rows: dict[int, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        for use_case, texts in (seed or {}).items():
            for position, text in enumerate(texts, start=1):
                self.create(use_case, text, display_order=position)

    def get_by_use_case(self, use_case: str) -> list[str]:
        rows = [r for r in self._rows.values() if r["use_case"] == use_case and r["is_active"]]
        rows.sort(key=lambda r: (r["display_order"], r["id"]))
        return [r["benefit_text"] for r in rows]

    def list_all(self) -> list[dict[str, Any]]:
        rows = sorted(self._rows.values(), key=lambda r: (r["use_case"], r["display_order"], r["id"]))
        return [dict(r) for r in rows]

    def get(self, benefit_id: Any) -> Optional[dict[str, Any]]:
        row = self._rows.get(_int_id(benefit_id))
        return dict(row) if row is not None else None

    def create(
        self,
        use_case: str,
        benefit_text: str,
        display_order: int = 0,
        is_active: bool = True,
    ) -> dict[str, Any]:
        benefit_id = next(self._ids)
        row = {
            "id": benefit_id,
            "use_case": use_case,
            "benefit_text": benefit_text,
            "display_order": display_order or 0,
            "is_active": is_active is not False,
            "created_at": _now(),
        }
        self._rows[benefit_id] = row
        return dict(row)

    def update(
        self,
        benefit_id: Any,
        benefit_text: Optional[str] = None,
        display_order: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[dict[str, Any]]:
        row = self._rows.get(_int_id(benefit_id))
        if row is None:
            return None
        if benefit_text is not None:
            row["benefit_text"] = benefit_text
        if display_order is not None:
            row["display_order"] = display_order
        if is_active is not None:
            row["is_active"] = is_active
        return dict(row)

    def delete(self, benefit_id: Any) -> None:
        self._rows.pop(_int_id(benefit_id), None)

    def reorder(self, use_case: str, ordered_ids: list[Any]) -> None:
        for position, benefit_id in enumerate(ordered_ids, start=1):
            row = self._rows.get(_int_id(benefit_id))
            if row is not None and row["use_case"] == use_case:
                row["display_order"] = position


class InMemoryLeadStore(LeadStore):
    def __init__(self) -> None:
        self._rows: dict[int, dict[str, Any]] = {}
        self._ids = itertools.count(1)

    def create(self, record: dict[str, Any]) -> dict[str, Any]:
        lead_id = next(self._ids)
        now = _now()
        row = copy.deepcopy(record)
        row.update(
            {
                "id": lead_id,
                "status": LeadStatus.NEW.value,
                "notes": row.get("notes"),
                "created_at": row.get("created_at") or now,
                "updated_at": now,
                "contacted_at": None,
            }
        )
        self._rows[lead_id] = row
        logger.debug("Stored lead %s", lead_id)
        return copy.deepcopy(row)

    def _matching(self, filters: LeadFilters, apply_segment_filters: bool = True) -> list[dict[str, Any]]:
        rows = list(self._rows.values())
        if filters.status:
            rows = [r for r in rows if r.get("status") == filters.status]
        if apply_segment_filters:
            if filters.company_type:
                rows = [r for r in rows if r.get("company_type") == filters.company_type]
            if filters.use_case:
                rows = [r for r in rows if r.get("use_case") == filters.use_case]
            if filters.search:
                needle = filters.search.lower()
                rows = [
                    r
                    for r in rows
                    if any(needle in (r.get(col) or "").lower() for col in SEARCHABLE_LEAD_COLUMNS)
                ]
        if filters.from_date:
            rows = [r for r in rows if parse_timestamp(r["created_at"]) >= filters.from_date]
        if filters.to_date:
            rows = [r for r in rows if parse_timestamp(r["created_at"]) <= filters.to_date]
        return rows

    def find(self, filters: LeadFilters) -> LeadPage:
        rows = self._matching(filters)
        column = filters.sort_column
        # Nulls last in both directions.
        present = [r for r in rows if r.get(column) is not None]
        missing = [r for r in rows if r.get(column) is None]
        present.sort(key=lambda r: (r[column], r["id"]), reverse=filters.descending)
        ordered = present + missing
        page = ordered[filters.offset : filters.offset + filters.limit]
        return LeadPage.build([copy.deepcopy(r) for r in page], len(rows), filters)

    def get(self, lead_id: Any) -> Optional[dict[str, Any]]:
        row = self._rows.get(_int_id(lead_id))
        return copy.deepcopy(row) if row is not None else None

    def update(
        self,
        lead_id: Any,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        row = self._rows.get(_int_id(lead_id))
        if row is None:
            return None
        now = _now()
        row["updated_at"] = now
        if status is not None:
            row["status"] = status
            if status == LeadStatus.CONTACTED.value:
                row["contacted_at"] = now
        if notes is not None:
            row["notes"] = notes
        return copy.deepcopy(row)

    def delete(self, lead_id: Any) -> None:
        self._rows.pop(_int_id(lead_id), None)

    def stats(self, now: Optional[datetime] = None) -> LeadStats:
        return summarize_leads(self._rows.values(), now=now)

    def export_rows(self, filters: LeadFilters) -> list[dict[str, Any]]:
        rows = self._matching(filters, apply_segment_filters=False)
        rows.sort(key=lambda r: (parse_timestamp(r["created_at"]), r["id"]), reverse=True)
        return [copy.deepcopy(r) for r in rows]


def _int_id(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
