from __future__ import annotations

from enum import Enum


class UseCase(str, Enum):
    CRITICAL_BUSINESS_PROCESS = "critical_business_process"
    M_AND_A_TRANSITIONS = "m_and_a_transitions"
    PROSPECTS_ONBOARDING = "prospects_onboarding"
    NEW_INVESTOR_ONBOARDING = "new_investor_onboarding"


class CompanyType(str, Enum):
    WEALTH_MANAGEMENT = "wealth_management"
    PRIVATE_MARKETS_PLATFORM = "private_markets_platform"
    POINT_SOLUTIONS_B2B = "point_solutions_b2b"


class RoiModel(str, Enum):
    TIME_SAVINGS = "time_savings"
    FTE_AVOIDANCE = "fte_avoidance"


class BackfillRateType(str, Enum):
    STAFF = "staff"
    CONSULTANT = "consultant"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    CONVERTED = "converted"
    LOST = "lost"


USE_CASE_LABELS: dict[UseCase, str] = {
    UseCase.CRITICAL_BUSINESS_PROCESS: "Critical Business Process",
    UseCase.M_AND_A_TRANSITIONS: "M&A Transitions",
    UseCase.PROSPECTS_ONBOARDING: "Prospects & Onboarding",
    UseCase.NEW_INVESTOR_ONBOARDING: "New Investor Onboarding",
}

COMPANY_TYPE_LABELS: dict[CompanyType, str] = {
    CompanyType.WEALTH_MANAGEMENT: "Wealth Management Firm",
    CompanyType.PRIVATE_MARKETS_PLATFORM: "Private Markets Platform",
    CompanyType.POINT_SOLUTIONS_B2B: "Point Solutions / B2B",
}

DEFAULT_ROI_MODEL: dict[UseCase, RoiModel] = {
    UseCase.CRITICAL_BUSINESS_PROCESS: RoiModel.TIME_SAVINGS,
    UseCase.M_AND_A_TRANSITIONS: RoiModel.TIME_SAVINGS,
    UseCase.PROSPECTS_ONBOARDING: RoiModel.FTE_AVOIDANCE,
    UseCase.NEW_INVESTOR_ONBOARDING: RoiModel.FTE_AVOIDANCE,
}

DEFAULT_BACKFILL_RATE_TYPE: dict[UseCase, BackfillRateType] = {
    UseCase.CRITICAL_BUSINESS_PROCESS: BackfillRateType.STAFF,
    UseCase.M_AND_A_TRANSITIONS: BackfillRateType.CONSULTANT,
    UseCase.PROSPECTS_ONBOARDING: BackfillRateType.STAFF,
    UseCase.NEW_INVESTOR_ONBOARDING: BackfillRateType.STAFF,
}


def as_use_case(tag) -> UseCase | None:
    """Return the UseCase for a raw tag, or None when it is not one of the four."""
    if isinstance(tag, UseCase):
        return tag
    try:
        return UseCase(tag)
    except ValueError:
        return None


def use_case_label(tag) -> str:
    use_case = as_use_case(tag)
    if use_case is None:
        return tag or ""
    return USE_CASE_LABELS[use_case]


def company_type_label(tag) -> str:
    try:
        return COMPANY_TYPE_LABELS[CompanyType(tag)]
    except ValueError:
        return tag or ""
