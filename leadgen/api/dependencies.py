"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request

from leadgen.config.settings import get_settings
from leadgen.storage import Stores, build_stores
from leadgen.storage.base import parse_timestamp

_stores: Optional[Stores] = None


def get_stores() -> Stores:
    """Process-wide stores, built from settings on first use."""
    global _stores
    if _stores is None:
        _stores = build_stores(get_settings())
    return _stores


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def parse_date_param(value: Optional[str], name: str):
    try:
        return parse_timestamp(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date for '{name}'")
