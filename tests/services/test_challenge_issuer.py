# tests/services/test_challenge_issuer.py
import random

import pytest

from reflex_ledger.core.errors import ChallengeMismatch, InvalidInput
from reflex_ledger.core.tokens import ChallengeTokenCodec
from reflex_ledger.services.challenge import ChallengeIssuer

NOW = 1_760_000_000_000


class StaticIdentity:
    def __init__(self, bindings: dict[str, str]) -> None:
        self.bindings = bindings

    def resolve(self, client_id: str) -> str | None:
        return self.bindings.get(client_id)


def test_issued_window_respects_delay_and_ttl(
    issuer: ChallengeIssuer, codec: ChallengeTokenCodec
) -> None:
    for offset in range(50):
        now = NOW + offset
        challenge = issuer.issue("client-a", "alice", now)
        assert now + 1_500 <= challenge.ready_at <= now + 4_000
        assert challenge.expires_at == challenge.ready_at + 30_000

        claims = codec.decode(challenge.token)
        assert claims.client_id == "client-a"
        assert claims.claimed_name == "alice"
        assert claims.ready_at == challenge.ready_at
        assert claims.expires_at == challenge.expires_at
        assert claims.version == 1


def test_jitter_varies_ready_instant(issuer: ChallengeIssuer) -> None:
    delays = {issuer.issue("client-a", "alice", NOW).ready_at - NOW for _ in range(30)}
    assert len(delays) > 1


def test_zero_jitter_is_deterministic(codec: ChallengeTokenCodec) -> None:
    fixed = ChallengeIssuer(codec, base_delay_ms=1_000, jitter_ms=0, ttl_ms=5_000)
    challenge = fixed.issue("client-a", "alice", NOW)
    assert challenge.ready_at == NOW + 1_000
    assert challenge.expires_at == NOW + 6_000


def test_each_issue_gets_a_fresh_nonce(issuer: ChallengeIssuer, codec: ChallengeTokenCodec) -> None:
    first = issuer.issue("client-a", "alice", NOW)
    second = issuer.issue("client-a", "alice", NOW)
    assert first.token != second.token
    assert codec.decode(first.token).nonce != codec.decode(second.token).nonce


@pytest.mark.parametrize(("client_id", "name"), [("", "alice"), ("client-a", ""), ("client-a", "x" * 21)])
def test_rejects_malformed_requests(issuer: ChallengeIssuer, client_id: str, name: str) -> None:
    with pytest.raises(InvalidInput):
        issuer.issue(client_id, name, NOW)


def test_refuses_name_bound_to_someone_else(codec: ChallengeTokenCodec) -> None:
    bound = ChallengeIssuer(
        codec, identity=StaticIdentity({"client-a": "alice"}), rng=random.Random(0)
    )

    with pytest.raises(ChallengeMismatch):
        bound.issue("client-a", "mallory", NOW)
    assert bound.issue("client-a", "alice", NOW).token
    # Unknown clients are not bound to anything.
    assert bound.issue("client-b", "bob", NOW).token
