"""Built-in strategic ROI narrative per use case.

This is the fallback copy shown when the admin-curated strategic benefits
list for a use case is empty.
"""

from __future__ import annotations

from leadgen.models.enums import UseCase, as_use_case

STRATEGIC_ROI: dict[UseCase, dict[str, list[str]]] = {
    UseCase.CRITICAL_BUSINESS_PROCESS: {
        "quantifiable": [
            "Hours saved on manual extraction",
            "FTE avoidance",
            "Consultant cost avoidance",
        ],
        "strategic": [
            "Flag discrepancies between billing actuals and fee schedules",
            "Avoid using outdated agreements",
            "Enable data-driven billing strategy changes",
            "Use data for marketing to different client segments",
        ],
    },
    UseCase.M_AND_A_TRANSITIONS: {
        "quantifiable": [
            "Hours saved per transition",
            "FTE avoidance per acquisition",
            "Consultant cost avoidance on backfill",
        ],
        "strategic": [
            'Eliminate "all hands on deck" fire drills for each acquisition',
            "Remove Excel burden from acquired firms",
            "Client data keeps pace with account migration",
            "Hit/beat 60-day integration benchmark",
            "Build track record that attracts better targets",
        ],
    },
    UseCase.PROSPECTS_ONBOARDING: {
        "quantifiable": [
            "Hours saved per new client",
            "FTE avoidance",
            "Reduced rework from errors",
        ],
        "strategic": [
            "Faster time-to-revenue",
            "Fewer NIGOs (Not In Good Order)",
            "Scale prospect volume without scaling ops team",
            "Unlock existing client organic growth by bringing data online",
        ],
    },
    UseCase.NEW_INVESTOR_ONBOARDING: {
        "quantifiable": [
            "Hours saved per investor onboarded",
            "FTE avoidance",
            "Reduced cycle time to capital deployment",
        ],
        "strategic": [
            "Faster capital deployment",
            "Stop passing burden to advisors and investors",
            'Close the gap between "tech-forward" marketing and operational reality',
            "Unlock subscription doc recycling",
            "Competitive differentiation vs. other platforms",
        ],
    },
}


def get_strategic_roi(use_case) -> dict[str, list[str]]:
    """Return fresh copies of the quantifiable and strategic bullets for a use case."""
    entry = STRATEGIC_ROI.get(as_use_case(use_case))
    if entry is None:
        return {"quantifiable": [], "strategic": []}
    return {
        "quantifiable": list(entry["quantifiable"]),
        "strategic": list(entry["strategic"]),
    }
