"""Supabase-backed stores.

Tables: ``roi_defaults`` (single row, id=1), ``strategic_benefits`` and
``leads``. Client failures are logged and re-raised as StoreError so the API
layer can answer with a 500 instead of leaking driver exceptions.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from postgrest.exceptions import APIError
from supabase import Client

from leadgen.models.enums import LeadStatus
from leadgen.models.roi_config import RoiConfig

from .base import (
    SEARCHABLE_LEAD_COLUMNS,
    LeadFilters,
    LeadPage,
    LeadStats,
    LeadStore,
    RoiDefaultsStore,
    StoreError,
    StrategicBenefitsStore,
    summarize_leads,
)

logger = logging.getLogger(__name__)

ROI_DEFAULTS_TABLE = "roi_defaults"
BENEFITS_TABLE = "strategic_benefits"
LEADS_TABLE = "leads"

EXPORT_COLUMNS = (
    "email, first_name, last_name, company_name, phone, "
    "company_type, use_case, roi_model, "
    "monthly_hours_saved, annual_savings, backfill_cost_saved, ftes_avoided, "
    "status, created_at, contacted_at, notes"
)

# PostgREST caps unranged selects at max-rows (1000 by default).
FETCH_PAGE_SIZE = 1000

# PostgREST answers 416 with this code when the requested range starts past the end.
RANGE_NOT_SATISFIABLE = "PGRST103"

# PostgREST filter syntax reserves these inside or_() expressions.
_FILTER_RESERVED = re.compile(r"[,()]")


def _execute(operation: str, query, allowed_codes: tuple[str, ...] = ()) -> Any:
    """Run a query; returns None when PostgREST answers with one of ``allowed_codes``."""
    try:
        return query.execute()
    except Exception as e:
        if isinstance(e, APIError) and e.code in allowed_codes:
            return None
        logger.exception(f"Supabase {operation} failed")
        raise StoreError(operation, e) from e


def _first(rows: Optional[list[dict[str, Any]]]) -> Optional[dict[str, Any]]:
    return rows[0] if rows else None


def _iso(value: datetime) -> str:
    return value.isoformat()


def _fetch_all(operation: str, build_query) -> list[dict[str, Any]]:
    """Page through a select with range() until a short page comes back."""
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        res = _execute(operation, build_query().range(start, start + FETCH_PAGE_SIZE - 1))
        page = res.data or []
        rows.extend(page)
        if len(page) < FETCH_PAGE_SIZE:
            return rows
        start += FETCH_PAGE_SIZE


class SupabaseRoiDefaultsStore(RoiDefaultsStore):
    def __init__(self, client: Client) -> None:
        self._client = client

    def get(self) -> Optional[RoiConfig]:
        res = _execute(
            "roi_defaults.get",
            self._client.table(ROI_DEFAULTS_TABLE).select("*").eq("id", 1).limit(1),
        )
        row = _first(res.data)
        return RoiConfig.from_record(row) if row is not None else None


class SupabaseStrategicBenefitsStore(StrategicBenefitsStore):
    def __init__(self, client: Client) -> None:
        self._client = client

    def _table(self):
        return self._client.table(BENEFITS_TABLE)

    def get_by_use_case(self, use_case: str) -> list[str]:
        res = _execute(
            "strategic_benefits.get_by_use_case",
            self._table()
            .select("benefit_text")
            .eq("use_case", use_case)
            .eq("is_active", True)
            .order("display_order")
            .order("id"),
        )
        return [row["benefit_text"] for row in res.data or []]

    def list_all(self) -> list[dict[str, Any]]:
        res = _execute(
            "strategic_benefits.list_all",
            self._table().select("*").order("use_case").order("display_order"),
        )
        return res.data or []

    def get(self, benefit_id: Any) -> Optional[dict[str, Any]]:
        res = _execute(
            "strategic_benefits.get",
            self._table().select("*").eq("id", benefit_id).limit(1),
        )
        return _first(res.data)

    def create(
        self,
        use_case: str,
        benefit_text: str,
        display_order: int = 0,
        is_active: bool = True,
    ) -> dict[str, Any]:
        res = _execute(
            "strategic_benefits.create",
            self._table().insert(
                {
                    "use_case": use_case,
                    "benefit_text": benefit_text,
                    "display_order": display_order or 0,
                    "is_active": is_active is not False,
                }
            ),
        )
        return _first(res.data) or {}

    def update(
        self,
        benefit_id: Any,
        benefit_text: Optional[str] = None,
        display_order: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[dict[str, Any]]:
        changes = {
            key: value
            for key, value in (
                ("benefit_text", benefit_text),
                ("display_order", display_order),
                ("is_active", is_active),
            )
            if value is not None
        }
        if not changes:
            return self.get(benefit_id)
        res = _execute(
            "strategic_benefits.update",
            self._table().update(changes).eq("id", benefit_id),
        )
        return _first(res.data)

    def delete(self, benefit_id: Any) -> None:
        _execute("strategic_benefits.delete", self._table().delete().eq("id", benefit_id))

    def reorder(self, use_case: str, ordered_ids: list[Any]) -> None:
        for position, benefit_id in enumerate(ordered_ids, start=1):
            _execute(
                "strategic_benefits.reorder",
                self._table()
                .update({"display_order": position})
                .eq("id", benefit_id)
                .eq("use_case", use_case),
            )


class SupabaseLeadStore(LeadStore):
    def __init__(self, client: Client) -> None:
        self._client = client

    def _table(self):
        return self._client.table(LEADS_TABLE)

    def create(self, record: dict[str, Any]) -> dict[str, Any]:
        row = {**record, "status": LeadStatus.NEW.value}
        res = _execute("leads.create", self._table().insert(row))
        return _first(res.data) or {}

    @staticmethod
    def _apply_filters(query, filters: LeadFilters, apply_segment_filters: bool = True):
        if filters.status:
            query = query.eq("status", filters.status)
        if apply_segment_filters:
            if filters.company_type:
                query = query.eq("company_type", filters.company_type)
            if filters.use_case:
                query = query.eq("use_case", filters.use_case)
            if filters.search:
                term = _FILTER_RESERVED.sub(" ", filters.search).strip()
                if term:
                    query = query.or_(
                        ",".join(f"{col}.ilike.%{term}%" for col in SEARCHABLE_LEAD_COLUMNS)
                    )
        if filters.from_date:
            query = query.gte("created_at", _iso(filters.from_date))
        if filters.to_date:
            query = query.lte("created_at", _iso(filters.to_date))
        return query

    def find(self, filters: LeadFilters) -> LeadPage:
        query = self._apply_filters(self._table().select("*", count="exact"), filters)
        query = query.order(filters.sort_column, desc=filters.descending).range(
            filters.offset, filters.offset + filters.limit - 1
        )
        res = _execute("leads.find", query, allowed_codes=(RANGE_NOT_SATISFIABLE,))
        if res is None:
            return LeadPage.build([], self._count(filters), filters)
        rows = res.data or []
        total = res.count if res.count is not None else len(rows)
        return LeadPage.build(rows, total, filters)

    def _count(self, filters: LeadFilters) -> int:
        query = self._apply_filters(self._table().select("id", count="exact", head=True), filters)
        return _execute("leads.count", query).count or 0

    def get(self, lead_id: Any) -> Optional[dict[str, Any]]:
        res = _execute("leads.get", self._table().select("*").eq("id", lead_id).limit(1))
        return _first(res.data)

    def update(
        self,
        lead_id: Any,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        now = _iso(datetime.now(tz=timezone.utc))
        changes: dict[str, Any] = {"updated_at": now}
        if status is not None:
            changes["status"] = status
            if status == LeadStatus.CONTACTED.value:
                changes["contacted_at"] = now
        if notes is not None:
            changes["notes"] = notes
        res = _execute("leads.update", self._table().update(changes).eq("id", lead_id))
        return _first(res.data)

    def delete(self, lead_id: Any) -> None:
        _execute("leads.delete", self._table().delete().eq("id", lead_id))

    def stats(self, now: Optional[datetime] = None) -> LeadStats:
        rows = _fetch_all(
            "leads.stats",
            lambda: (
                self._table()
                .select("id, status, company_type, use_case, created_at")
                .order("id")
            ),
        )
        return summarize_leads(rows, now=now)

    def export_rows(self, filters: LeadFilters) -> list[dict[str, Any]]:
        def build_query():
            query = self._apply_filters(
                self._table().select(EXPORT_COLUMNS), filters, apply_segment_filters=False
            )
            return query.order("created_at", desc=True).order("id", desc=True)

        return _fetch_all("leads.export", build_query)
