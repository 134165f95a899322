"""Issue signed, time-windowed challenges for the simple reaction mode."""
from __future__ import annotations

import logging
import random
import secrets
from dataclasses import dataclass

from reflex_ledger.core.errors import ChallengeMismatch
from reflex_ledger.core.settings import settings
from reflex_ledger.core.tokens import TOKEN_VERSION, ChallengePayload, ChallengeTokenCodec
from reflex_ledger.core.validation import require_client_id, require_name
from reflex_ledger.services.identity import IdentityResolver, UnboundIdentityResolver

logger = logging.getLogger(__name__)

NONCE_BYTES = 16


@dataclass(frozen=True)
class IssuedChallenge:
    """A freshly minted challenge as returned to the client."""

    token: str
    ready_at: int
    expires_at: int


class ChallengeIssuer:
    """Mint challenges bound to a client and a randomized ready instant.

    Submissions are only accepted once ``ready_at`` has passed. The delay has
    a fixed floor plus uniform jitter, so a script cannot submit immediately
    and cannot predict when the cue fires. Nothing is stored here; the token
    carries every claim and is checked again when it is spent.
    """

    def __init__(
        self,
        codec: ChallengeTokenCodec,
        *,
        identity: IdentityResolver | None = None,
        base_delay_ms: int | None = None,
        jitter_ms: int | None = None,
        ttl_ms: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._codec = codec
        self._identity = identity or UnboundIdentityResolver()
        self.base_delay_ms = settings.challenge_base_delay_ms if base_delay_ms is None else base_delay_ms
        self.jitter_ms = settings.challenge_jitter_ms if jitter_ms is None else jitter_ms
        self.ttl_ms = settings.challenge_ttl_ms if ttl_ms is None else ttl_ms
        self._rng = rng or random.SystemRandom()

    def issue(self, client_id: str, claimed_name: str, now_ms: int) -> IssuedChallenge:
        """Create a challenge for ``client_id`` playing as ``claimed_name``.

        Raises:
            InvalidInput: if the client id or name is malformed.
            ChallengeMismatch: if the client is bound to a different name.
        """
        require_client_id(client_id)
        require_name(claimed_name)

        bound_name = self._identity.resolve(client_id)
        if bound_name is not None and bound_name != claimed_name:
            logger.info("Refusing challenge: client bound to another name")
            raise ChallengeMismatch("client is bound to a different name")

        ready_at = now_ms + self.base_delay_ms + self._rng.randint(0, self.jitter_ms)
        expires_at = ready_at + self.ttl_ms
        payload = ChallengePayload(
            client_id=client_id,
            claimed_name=claimed_name,
            ready_at=ready_at,
            expires_at=expires_at,
            nonce=secrets.token_hex(NONCE_BYTES),
            version=TOKEN_VERSION,
        )
        return IssuedChallenge(
            token=self._codec.encode(payload),
            ready_at=ready_at,
            expires_at=expires_at,
        )


def get_token_codec() -> ChallengeTokenCodec:
    """Return a codec keyed with the configured secret."""
    return ChallengeTokenCodec(settings.secret_key)
