from __future__ import annotations

import logging
from dataclasses import dataclass, field

from leadgen.config.settings import Settings

from .base import (
    LeadFilters,
    LeadPage,
    LeadStats,
    LeadStore,
    RoiDefaultsStore,
    StoreError,
    StrategicBenefitsStore,
)
from .memory import InMemoryLeadStore, InMemoryRoiDefaultsStore, InMemoryStrategicBenefitsStore

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    """The three collaborator stores the API works against."""

    roi_defaults: RoiDefaultsStore = field(default_factory=InMemoryRoiDefaultsStore)
    benefits: StrategicBenefitsStore = field(default_factory=InMemoryStrategicBenefitsStore)
    leads: LeadStore = field(default_factory=InMemoryLeadStore)


def build_stores(settings: Settings) -> Stores:
    """Supabase stores when credentials are configured, in-memory otherwise."""
    if not settings.supabase_enabled:
        logger.warning("Supabase credentials not configured - using in-memory stores")
        return Stores()

    from supabase import create_client

    from .supabase_store import (
        SupabaseLeadStore,
        SupabaseRoiDefaultsStore,
        SupabaseStrategicBenefitsStore,
    )

    logger.info(f"Initializing Supabase connection to {settings.supabase_url[:50]}...")
    client = create_client(settings.supabase_url, settings.supabase_key)
    return Stores(
        roi_defaults=SupabaseRoiDefaultsStore(client),
        benefits=SupabaseStrategicBenefitsStore(client),
        leads=SupabaseLeadStore(client),
    )


__all__ = [
    "LeadFilters",
    "LeadPage",
    "LeadStats",
    "LeadStore",
    "RoiDefaultsStore",
    "StoreError",
    "StrategicBenefitsStore",
    "Stores",
    "build_stores",
]
