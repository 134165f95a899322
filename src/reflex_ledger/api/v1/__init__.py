# src/reflex_ledger/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import aim_router, pro_router, simple_router, system_router

__all__ = [
    "simple_router",
    "pro_router",
    "aim_router",
    "system_router",
]
