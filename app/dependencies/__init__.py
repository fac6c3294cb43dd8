"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_gemini_client,
    get_image_preparer,
    get_oracle_invoker,
    get_photo_analysis_service,
    get_photo_fetcher,
    get_safe_search_client,
    get_safety_gate,
)

__all__ = [
    "get_gemini_client",
    "get_image_preparer",
    "get_oracle_invoker",
    "get_photo_analysis_service",
    "get_photo_fetcher",
    "get_safe_search_client",
    "get_safety_gate",
]
