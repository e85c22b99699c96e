"""Abstract store interfaces for ROI defaults, strategic benefits and leads."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from leadgen.models.coercion import parse_int_or_default
from leadgen.models.roi_config import RoiConfig

SORTABLE_LEAD_COLUMNS = ("created_at", "email", "company_name", "status", "annual_savings")
SEARCHABLE_LEAD_COLUMNS = ("email", "company_name", "first_name", "last_name")
DEFAULT_PAGE_SIZE = 50


class StoreError(Exception):
    """Raised when a persistent backend fails to complete an operation."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        message = f"Store operation failed: {operation}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a stored timestamp (datetime or ISO-8601 string)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(text))


@dataclass
class LeadFilters:
    """Admin dashboard filters, sorting and pagination for the lead list."""

    status: Optional[str] = None
    company_type: Optional[str] = None
    use_case: Optional[str] = None
    search: Optional[str] = None
    from_date: Optional[datetime] = None
    to_date: Optional[datetime] = None
    sort: Optional[str] = None
    order: Optional[str] = None
    page: Any = 1
    limit: Any = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        self.from_date = as_utc(self.from_date)
        self.to_date = as_utc(self.to_date)
        self.page = parse_int_or_default(self.page, 1) or 1
        self.limit = parse_int_or_default(self.limit, DEFAULT_PAGE_SIZE) or DEFAULT_PAGE_SIZE

    @property
    def sort_column(self) -> str:
        return self.sort if self.sort in SORTABLE_LEAD_COLUMNS else "created_at"

    @property
    def descending(self) -> bool:
        return self.order != "asc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class LeadPage:
    leads: list[dict[str, Any]]
    total: int
    page: int
    pages: int

    @classmethod
    def build(cls, leads: list[dict[str, Any]], total: int, filters: LeadFilters) -> LeadPage:
        return cls(
            leads=leads,
            total=total,
            page=filters.page,
            pages=math.ceil(total / filters.limit),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class LeadStats:
    total_leads: int = 0
    new_leads: int = 0
    this_week: int = 0
    this_month: int = 0
    by_company_type: dict[str, int] = field(default_factory=dict)
    by_use_case: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def summarize_leads(rows: Iterable[dict[str, Any]], now: Optional[datetime] = None) -> LeadStats:
    """Aggregate dashboard counters over lead rows."""
    now = as_utc(now) or datetime.now(tz=timezone.utc)
    week_ago = now - timedelta(days=7)
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    stats = LeadStats()
    by_company_type: Counter[str] = Counter()
    by_use_case: Counter[str] = Counter()

    for row in rows:
        stats.total_leads += 1
        if row.get("status") == "new":
            stats.new_leads += 1
        created_at = parse_timestamp(row.get("created_at"))
        if created_at is not None:
            if created_at >= week_ago:
                stats.this_week += 1
            if created_at >= month_start:
                stats.this_month += 1
        if row.get("company_type"):
            by_company_type[row["company_type"]] += 1
        if row.get("use_case"):
            by_use_case[row["use_case"]] += 1

    stats.by_company_type = dict(by_company_type)
    stats.by_use_case = dict(by_use_case)
    return stats


class RoiDefaultsStore(ABC):
    """Source of the single global ROI defaults record."""

    @abstractmethod
    def get(self) -> Optional[RoiConfig]:
        """Return the stored defaults, or None when the store is unseeded."""
        ...


class StrategicBenefitsStore(ABC):
    """Admin-curated strategic benefit copy, ordered per use case."""

    @abstractmethod
    def get_by_use_case(self, use_case: str) -> list[str]:
        """Active benefit texts for a use case in display order."""
        ...

    @abstractmethod
    def list_all(self) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    def get(self, benefit_id: Any) -> Optional[dict[str, Any]]:
        ...

    @abstractmethod
    def create(
        self,
        use_case: str,
        benefit_text: str,
        display_order: int = 0,
        is_active: bool = True,
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    def update(
        self,
        benefit_id: Any,
        benefit_text: Optional[str] = None,
        display_order: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> Optional[dict[str, Any]]:
        """Update the given fields; None leaves a field untouched."""
        ...

    @abstractmethod
    def delete(self, benefit_id: Any) -> None:
        ...

    @abstractmethod
    def reorder(self, use_case: str, ordered_ids: list[Any]) -> None:
        """Assign display_order 1..n following ``ordered_ids`` within a use case."""
        ...


class LeadStore(ABC):
    """Persistence for captured leads and their ROI results."""

    @abstractmethod
    def create(self, record: dict[str, Any]) -> dict[str, Any]:
        ...

    @abstractmethod
    def find(self, filters: LeadFilters) -> LeadPage:
        ...

    @abstractmethod
    def get(self, lead_id: Any) -> Optional[dict[str, Any]]:
        ...

    @abstractmethod
    def update(
        self,
        lead_id: Any,
        status: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Update status and/or notes. Moving to ``contacted`` stamps contacted_at."""
        ...

    @abstractmethod
    def delete(self, lead_id: Any) -> None:
        ...

    @abstractmethod
    def stats(self, now: Optional[datetime] = None) -> LeadStats:
        ...

    @abstractmethod
    def export_rows(self, filters: LeadFilters) -> list[dict[str, Any]]:
        """Rows for CSV export filtered by status and date range, newest first."""
        ...
