"""Tests for overlaying per-calculation overrides on the global ROI defaults."""

import pytest

from leadgen.engine import calculate_roi, merge_roi_config
from leadgen.models.roi_config import DEFAULT_ROI_CONFIG, RoiConfig
from tests.conftest import make_inputs


class TestMergeRoiConfig:
    def test_no_override_returns_equal_copy(self, default_config):
        merged = merge_roi_config(default_config)
        assert merged == default_config
        assert merged is not default_config

    def test_override_wins_field_by_field(self, default_config):
        merged = merge_roi_config(default_config, {"triage_time_per_doc": 8, "docs_per_client": 3})
        assert merged.triage_time_per_doc == 8
        assert merged.docs_per_client == 3
        assert merged.data_entry_time_per_doc == default_config.data_entry_time_per_doc
        assert merged.docs_per_household == default_config.docs_per_household

    def test_none_override_keeps_default(self, default_config):
        merged = merge_roi_config(default_config, {"docs_per_investor": None})
        assert merged.docs_per_investor == default_config.docs_per_investor

    def test_rate_override_parsed_as_float(self, default_config):
        merged = merge_roi_config(default_config, {"analyst_hourly_rate": "75.5"})
        assert merged.analyst_hourly_rate == 75.5

    def test_unusable_rate_override_falls_back(self, default_config):
        merged = merge_roi_config(
            default_config, {"analyst_hourly_rate": "0", "backfill_hourly_rate": "abc"}
        )
        assert merged.analyst_hourly_rate == 50.0
        assert merged.backfill_hourly_rate == 150.0

    def test_notes_override(self):
        defaults = RoiConfig(roi_notes="Q1 assumptions")
        assert merge_roi_config(defaults, {"roi_notes": "Q2"}).roi_notes == "Q2"
        assert merge_roi_config(defaults, {}).roi_notes == "Q1 assumptions"

    def test_config_override(self, default_config):
        override = RoiConfig(triage_time_per_doc=2, analyst_hourly_rate=60.0)
        merged = merge_roi_config(default_config, override)
        assert merged.triage_time_per_doc == 2
        assert merged.analyst_hourly_rate == 60.0

    def test_defaults_untouched(self):
        merge_roi_config(DEFAULT_ROI_CONFIG, {"triage_time_per_doc": 99})
        assert DEFAULT_ROI_CONFIG.triage_time_per_doc == 5


class TestRoiConfigFromRecord:
    def test_ignores_unknown_columns(self):
        config = RoiConfig.from_record(
            {"id": 1, "updated_at": "2026-01-01", "triage_time_per_doc": 7}
        )
        assert config.triage_time_per_doc == 7
        assert config.docs_per_household == 10

    def test_invalid_numbers_fall_back(self):
        config = RoiConfig.from_record(
            {"analyst_hourly_rate": "n/a", "docs_per_client": -3, "docs_per_investor": None}
        )
        assert config.analyst_hourly_rate == 50.0
        assert config.docs_per_client == 10
        assert config.docs_per_investor == 5

    def test_numeric_strings_accepted(self):
        config = RoiConfig.from_record({"backfill_hourly_rate": "175.00", "roi_notes": ""})
        assert config.backfill_hourly_rate == 175.0
        assert config.roi_notes is None


class TestMergedOverridesThroughEngine:
    def test_string_ratio_override_is_numeric(self, default_config):
        merged = merge_roi_config(default_config, {"docs_per_household": "10"})
        assert merged.docs_per_household == 10
        result = calculate_roi(
            make_inputs(
                "m_and_a_transitions",
                m_and_a_transactions_per_year=3,
                avg_households_per_transaction=200,
            ),
            merged,
        )
        assert result.derived_monthly_documents == 500

    def test_string_client_ratio_override(self, default_config):
        merged = merge_roi_config(default_config, {"docs_per_client": "4"})
        result = calculate_roi(
            make_inputs("prospects_onboarding", annual_new_clients=120), merged
        )
        assert result.derived_monthly_documents == 40

    def test_string_time_overrides(self, default_config):
        merged = merge_roi_config(
            default_config, {"triage_time_per_doc": "10", "data_entry_time_per_doc": "20"}
        )
        assert merged.triage_time_per_doc == 10
        result = calculate_roi(make_inputs(monthly_documents=60), merged)
        assert result.monthly_hours_saved == pytest.approx(30.0)

    @pytest.mark.parametrize("garbage", ["abc", "", "-3", [], {"x": 1}, float("nan")])
    def test_garbage_overrides_keep_defaults(self, default_config, garbage):
        override = {
            name: garbage
            for name in (
                "triage_time_per_doc",
                "data_entry_time_per_doc",
                "docs_per_household",
                "docs_per_client",
                "docs_per_investor",
                "data_utilization_baseline",
            )
        }
        merged = merge_roi_config(default_config, override)
        assert merged == default_config
        for use_case in ("m_and_a_transitions", "prospects_onboarding", "new_investor_onboarding"):
            assert calculate_roi(make_inputs(use_case), merged) is not None

    def test_engine_tolerates_string_ratios_in_config(self, default_config):
        config = RoiConfig(docs_per_investor="5")
        result = calculate_roi(
            make_inputs("new_investor_onboarding", annual_investors_onboarded=60), config
        )
        assert result.derived_monthly_documents == 25
        assert result.hours_per_unit == pytest.approx(1.67)
