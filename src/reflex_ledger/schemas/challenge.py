# src/reflex_ledger/schemas/challenge.py
"""Schemas for issuing simple-mode challenges."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ChallengeRequest(BaseModel):
    """Request a challenge for a client playing under a name."""

    client_id: str = Field(..., description="Opaque identifier of the requesting client.")
    claimed_name: str = Field(..., description="Display name the run will be credited to.")


class ChallengeOut(BaseModel):
    """A signed challenge; the server stays authoritative on the timing window."""

    token: str
    ready_at: int = Field(..., description="Epoch ms after which a submission is accepted.")
    expires_at: int = Field(..., description="Epoch ms after which the challenge is void.")
