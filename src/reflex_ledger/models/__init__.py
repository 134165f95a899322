# src/reflex_ledger/models/__init__.py
"""SQLAlchemy models for the Reflex Ledger service."""

from .false_start import FalseStartCycle
from .replay_protection import ConsumedChallenge
from .score import SCORE_MODELS, AimScore, ProScore, ScoreEntry, SimpleScore

__all__ = [
    "AimScore", "ProScore", "SimpleScore", "ScoreEntry", "SCORE_MODELS",
    "ConsumedChallenge",
    "FalseStartCycle",
]
