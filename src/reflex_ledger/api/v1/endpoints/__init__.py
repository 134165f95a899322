# src/reflex_ledger/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .aim import router as aim_router
from .pro import router as pro_router
from .simple import router as simple_router
from .system import router as system_router

__all__ = [
    "simple_router",
    "pro_router",
    "aim_router",
    "system_router",
]
