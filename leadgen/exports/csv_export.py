"""CSV export of captured leads for the admin dashboard."""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Any, Iterable

from leadgen.models.enums import company_type_label, use_case_label
from leadgen.storage.base import parse_timestamp

CSV_HEADERS = [
    "Email",
    "First Name",
    "Last Name",
    "Company",
    "Phone",
    "Company Type",
    "Use Case",
    "ROI Model",
    "Monthly Hours Saved",
    "Annual Savings",
    "Backfill Savings",
    "FTEs Avoided",
    "Status",
    "Created At",
    "Contacted At",
    "Notes",
]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _timestamp_cell(value: Any) -> str:
    ts = parse_timestamp(value)
    return ts.isoformat() if ts is not None else ""


def lead_to_row(lead: dict[str, Any]) -> list[str]:
    company_type = lead.get("company_type")
    use_case = lead.get("use_case")
    return [
        _cell(lead.get("email")),
        _cell(lead.get("first_name")),
        _cell(lead.get("last_name")),
        _cell(lead.get("company_name")),
        _cell(lead.get("phone")),
        company_type_label(company_type) if company_type else "",
        use_case_label(use_case) if use_case else "",
        _cell(lead.get("roi_model")),
        _cell(lead.get("monthly_hours_saved")),
        _cell(lead.get("annual_savings")),
        _cell(lead.get("backfill_cost_saved")),
        _cell(lead.get("ftes_avoided")),
        _cell(lead.get("status")),
        _timestamp_cell(lead.get("created_at")),
        _timestamp_cell(lead.get("contacted_at")),
        _cell(lead.get("notes")),
    ]


def leads_to_csv(leads: Iterable[dict[str, Any]]) -> str:
    """Render leads as CSV with every cell quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for lead in leads:
        writer.writerow(lead_to_row(lead))
    return buffer.getvalue()


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"leads-{today.isoformat()}.csv"
