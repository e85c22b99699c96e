from .leads import (
    CalculationService,
    LeadSubmission,
    SubmissionError,
    build_lead_record,
    build_public_payload,
    load_roi_config,
    resolve_strategic_benefits,
)

__all__ = [
    "CalculationService",
    "LeadSubmission",
    "SubmissionError",
    "build_lead_record",
    "build_public_payload",
    "load_roi_config",
    "resolve_strategic_benefits",
]
