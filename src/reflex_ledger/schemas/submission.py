# src/reflex_ledger/schemas/submission.py
"""Request/response schemas for score submissions.

Bounds are deliberately not encoded here: the services validate every value
server-side and answer with ``invalid_input`` rather than a schema error.
"""
from __future__ import annotations

from pydantic import BaseModel, Field


class SimpleSubmission(BaseModel):
    """A challenge-gated simple-mode run."""

    name: str
    elapsed_ms: int = Field(..., description="Measured reaction time in milliseconds.")
    client_id: str
    token: str = Field(..., description="Challenge token issued for this run.")


class SimpleSubmissionOut(BaseModel):
    best_value: int
    record_broken: bool
    false_starts_before_record: int | None = None
    pending_false_starts: int


class FalseStartReport(BaseModel):
    client_id: str
    name: str


class FalseStartOut(BaseModel):
    pending_false_starts: int


class ProSubmission(BaseModel):
    name: str
    elapsed_ms: int


class ProSubmissionOut(BaseModel):
    best_value: int
    record_broken: bool


class AimSubmission(BaseModel):
    """Hit latencies for every target plus the number of missed clicks."""

    name: str
    hits: list[float]
    misses: int = 0


class AimSubmissionOut(BaseModel):
    best_value: int
    avg_ms: int
    misses: int
    record_broken: bool
