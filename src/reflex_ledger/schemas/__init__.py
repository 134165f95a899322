# src/reflex_ledger/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .challenge import ChallengeOut, ChallengeRequest
from .leaderboard import AimRow, LeaderboardAllOut, LeaderboardOut, ProRow, SimpleRow
from .submission import (
    AimSubmission,
    AimSubmissionOut,
    FalseStartOut,
    FalseStartReport,
    ProSubmission,
    ProSubmissionOut,
    SimpleSubmission,
    SimpleSubmissionOut,
)

__all__ = [
    "ChallengeRequest", "ChallengeOut",
    "SimpleSubmission", "SimpleSubmissionOut",
    "FalseStartReport", "FalseStartOut",
    "ProSubmission", "ProSubmissionOut",
    "AimSubmission", "AimSubmissionOut",
    "SimpleRow", "ProRow", "AimRow",
    "LeaderboardOut", "LeaderboardAllOut",
]
