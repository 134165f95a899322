# src/reflex_ledger/services/__init__.py
"""Business logic services for the Reflex Ledger service."""

from .challenge import ChallengeIssuer, IssuedChallenge
from .ledger import ScoreLedger
from .ranking import RankedEntry, RankQueryEngine
from .replay import ReplayGuard
from .submission import SubmissionValidator

__all__ = [
    "ChallengeIssuer",
    "IssuedChallenge",
    "RankedEntry",
    "RankQueryEngine",
    "ReplayGuard",
    "ScoreLedger",
    "SubmissionValidator",
]
