"""System and transparency endpoints for the Reflex Ledger API."""

from __future__ import annotations

from fastapi import APIRouter

from reflex_ledger.core.modes import Mode, mode_rules
from reflex_ledger.core.settings import settings

router = APIRouter(prefix="/system", tags=["system", "transparency"])


@router.get("/config")
async def get_public_config() -> dict[str, object]:
    """Return a sanitized snapshot of public runtime configuration.

    Excludes secrets and connection strings; suitable for client UIs that
    want to mirror the server-side bounds.

    Returns:
        Dictionary with app metadata, challenge timing and per-mode bounds
    """
    return {
        "app": {
            "name": settings.app_name,
            "version": settings.app_version,
        },
        "challenge": {
            "base_delay_ms": settings.challenge_base_delay_ms,
            "jitter_ms": settings.challenge_jitter_ms,
            "ttl_ms": settings.challenge_ttl_ms,
        },
        "modes": {
            mode.value: {
                "direction": rules.direction.value,
                "min_value": rules.min_value,
                "max_value": rules.max_value,
            }
            for mode in Mode
            for rules in (mode_rules(mode),)
        },
        "names": {"max_length": settings.name_max_length},
        "aim": {
            "targets": settings.aim_targets,
            "min_hit_ms": settings.aim_min_hit_ms,
            "max_hit_ms": settings.aim_max_hit_ms,
            "min_avg_ms": settings.aim_min_avg_ms,
            "miss_penalty": settings.aim_miss_penalty,
            "max_misses": settings.aim_max_misses,
        },
        "leaderboard": {
            "default_limit": settings.leaderboard_default_limit,
            "max_limit": settings.leaderboard_max_limit,
        },
    }
