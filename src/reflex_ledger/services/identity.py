"""Seam to the external identity service.

Name claiming lives outside this service. The ledger only asks whether a
client identifier is already bound to a display name.
"""
from __future__ import annotations

from typing import Protocol


class IdentityResolver(Protocol):
    """Maps an opaque client identifier to its bound display name."""

    def resolve(self, client_id: str) -> str | None: ...


class UnboundIdentityResolver:
    """Resolver for deployments without an identity service; knows no bindings."""

    def resolve(self, client_id: str) -> str | None:
        return None


def get_identity_resolver() -> IdentityResolver:
    """Return the configured identity resolver."""
    return UnboundIdentityResolver()
