"""Signed challenge tokens.

A token is ``<payload>.<mac>`` where ``payload`` is the URL-safe base64
(unpadded) encoding of the challenge's compact JSON form and ``mac`` is the
lowercase hex HMAC-SHA256 of ``payload`` under the service secret. Tokens are
either fully valid or rejected; nothing from an unverified payload is read.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Literal

from pydantic import BaseModel, ConfigDict

TOKEN_VERSION = 1
SEPARATOR = "."


class InvalidToken(ValueError):
    """Raised when a token cannot be authenticated or parsed."""


class ChallengePayload(BaseModel):
    """Claims carried by a challenge token."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    client_id: str
    claimed_name: str
    ready_at: int
    expires_at: int
    nonce: str
    version: Literal[1] = TOKEN_VERSION


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


class ChallengeTokenCodec:
    """Encode and authenticate challenge payloads with a shared secret."""

    def __init__(self, secret: str | bytes) -> None:
        if isinstance(secret, str):
            secret = secret.encode("utf-8")
        if not secret:
            raise ValueError("token secret must not be empty")
        self._secret = secret

    def _mac(self, payload_part: str) -> str:
        return hmac.new(self._secret, payload_part.encode("utf-8"), hashlib.sha256).hexdigest()

    def encode(self, payload: ChallengePayload) -> str:
        """Serialize and sign ``payload``."""
        payload_part = _b64encode(payload.model_dump_json().encode("utf-8"))
        return f"{payload_part}{SEPARATOR}{self._mac(payload_part)}"

    def decode(self, token: str) -> ChallengePayload:
        """Verify ``token`` and return its payload.

        Raises:
            InvalidToken: if the token is malformed, forged or fails schema validation.
        """
        parts = token.split(SEPARATOR)
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise InvalidToken("malformed token")
        payload_part, mac = parts

        expected = self._mac(payload_part)
        if not hmac.compare_digest(expected.encode("utf-8"), mac.encode("utf-8")):
            raise InvalidToken("bad signature")

        try:
            return ChallengePayload.model_validate_json(_b64decode(payload_part))
        except ValueError as err:
            # binascii.Error, UnicodeDecodeError and ValidationError all land here.
            raise InvalidToken("unreadable payload") from err
