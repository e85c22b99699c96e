"""Tests for the admin CSV export."""

import csv
import io
from datetime import date, datetime, timezone

from leadgen.exports.csv_export import CSV_HEADERS, export_filename, lead_to_row, leads_to_csv

LEAD = {
    "email": "jane@acmewealth.com",
    "first_name": "Jane",
    "last_name": "Doe",
    "company_name": 'Acme "Wealth", LLC',
    "phone": None,
    "company_type": "point_solutions_b2b",
    "use_case": "prospects_onboarding",
    "roi_model": "fte_avoidance",
    "monthly_hours_saved": 166.67,
    "annual_savings": 81730.77,
    "backfill_cost_saved": 0.0,
    "ftes_avoided": 0.96,
    "status": "contacted",
    "created_at": datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc),
    "contacted_at": "2026-03-15T10:00:00Z",
    "notes": None,
}


class TestCsvExport:
    def test_header_row(self):
        text = leads_to_csv([])
        assert text.splitlines()[0].startswith('"Email","First Name"')
        assert len(next(csv.reader(io.StringIO(text)))) == len(CSV_HEADERS)

    def test_every_cell_quoted(self):
        line = leads_to_csv([LEAD]).splitlines()[1]
        assert line.startswith('"jane@acmewealth.com","Jane","Doe"')
        assert '"Acme ""Wealth"", LLC"' in line

    def test_row_uses_labels_and_iso_timestamps(self):
        row = dict(zip(CSV_HEADERS, lead_to_row(LEAD)))
        assert row["Company Type"] == "Point Solutions / B2B"
        assert row["Use Case"] == "Prospects & Onboarding"
        assert row["Created At"] == "2026-03-14T09:30:00+00:00"
        assert row["Contacted At"] == "2026-03-15T10:00:00+00:00"
        assert row["Phone"] == ""
        assert row["Notes"] == ""

    def test_round_trips_through_csv_reader(self):
        rows = list(csv.reader(io.StringIO(leads_to_csv([LEAD, LEAD]))))
        assert len(rows) == 3
        assert rows[1][3] == 'Acme "Wealth", LLC'

    def test_filename(self):
        assert export_filename(date(2026, 3, 15)) == "leads-2026-03-15.csv"
