"""Shared test fixtures for the ROI calculator test suite."""

import pytest

from leadgen.models.inputs import CalculationInputs
from leadgen.models.roi_config import RoiConfig
from leadgen.storage import Stores
from leadgen.storage.memory import (
    InMemoryLeadStore,
    InMemoryRoiDefaultsStore,
    InMemoryStrategicBenefitsStore,
)


def make_inputs(use_case="critical_business_process", **overrides) -> CalculationInputs:
    """Helper to build CalculationInputs with minimal boilerplate."""
    return CalculationInputs(use_case=use_case, **overrides)


@pytest.fixture
def default_config() -> RoiConfig:
    """Fallback config: triage 5 min, entry 15 min, $50/hr analyst, $150/hr consultant."""
    return RoiConfig()


@pytest.fixture
def stores() -> Stores:
    return Stores(
        roi_defaults=InMemoryRoiDefaultsStore(RoiConfig()),
        benefits=InMemoryStrategicBenefitsStore(),
        leads=InMemoryLeadStore(),
    )


@pytest.fixture
def lead_form() -> dict:
    """A complete calculator submission as the web form posts it."""
    return {
        "email": "jane@acmewealth.com",
        "first_name": "Jane",
        "last_name": "Doe",
        "company_name": "Acme Wealth",
        "phone": "555-0100",
        "company_type": "wealth_management",
        "use_case": "critical_business_process",
        "roi_model": "time_savings",
        "monthly_documents": "500",
        "annual_backfill": "5000",
        "utm_source": "linkedin",
    }
