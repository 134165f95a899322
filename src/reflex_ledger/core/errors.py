"""Error taxonomy for score submissions.

Every rejection a caller can observe is a :class:`LedgerError` subclass. The
``code`` is stable and machine readable; ``status_code`` is the HTTP status the
API layer answers with.
"""

from __future__ import annotations

from fastapi import status


class LedgerError(Exception):
    """Base class for rejected operations."""

    code: str = "ledger_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "request rejected"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidInput(LedgerError):
    """Malformed or out-of-range request fields."""

    code = "invalid_input"
    default_message = "invalid input"


class InvalidChallenge(LedgerError):
    """The challenge token is missing, forged or unreadable."""

    code = "invalid_challenge"
    default_message = "invalid challenge"


class ChallengeMismatch(LedgerError):
    """The challenge was issued to a different client or name."""

    code = "challenge_mismatch"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "challenge does not match submitter"


class TooEarly(LedgerError):
    """Submission arrived before the challenge's ready instant."""

    code = "too_early"
    status_code = status.HTTP_425_TOO_EARLY
    default_message = "submission arrived before the cue"


class ChallengeExpired(LedgerError):
    code = "challenge_expired"
    status_code = status.HTTP_410_GONE
    default_message = "challenge expired"


class ChallengeAlreadyUsed(LedgerError):
    code = "challenge_already_used"
    status_code = status.HTTP_409_CONFLICT
    default_message = "challenge already used"


class UnsupportedClient(LedgerError):
    """The requesting device class may not submit to this mode."""

    code = "unsupported_client"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "client not allowed for this mode"


class StorageFailure(LedgerError):
    """Unexpected persistence error; never retried automatically."""

    code = "storage_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "server error"


__all__ = [
    "LedgerError",
    "InvalidInput",
    "InvalidChallenge",
    "ChallengeMismatch",
    "TooEarly",
    "ChallengeExpired",
    "ChallengeAlreadyUsed",
    "UnsupportedClient",
    "StorageFailure",
]
