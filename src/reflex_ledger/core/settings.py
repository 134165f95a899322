"""Application settings and configuration.

This module defines all configuration options for the Reflex Ledger service.
Settings are loaded from environment variables with sensible defaults. All
numeric bounds are fixed for the lifetime of a process; changing them (or the
signing secret) requires a restart.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Reflex Ledger", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security: signs challenge tokens. Rotating it voids in-flight challenges.
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./reflex.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Challenge timing (milliseconds)
    challenge_base_delay_ms: int = Field(default=1_500, alias="CHALLENGE_BASE_DELAY_MS")
    challenge_jitter_ms: int = Field(default=2_500, alias="CHALLENGE_JITTER_MS")
    challenge_ttl_ms: int = Field(default=30_000, alias="CHALLENGE_TTL_MS")

    # Consumed-token bookkeeping
    replay_retention_seconds: int = Field(default=86_400, alias="REPLAY_RETENTION_SECONDS")
    replay_sweep_interval_seconds: int = Field(
        default=60,
        alias="REPLAY_SWEEP_INTERVAL_SECONDS",
    )

    # Player names
    name_max_length: int = Field(default=20, alias="NAME_MAX_LENGTH")

    # Simple reaction mode
    simple_min_ms: int = Field(default=80, alias="SIMPLE_MIN_MS")
    simple_max_ms: int = Field(default=5_000, alias="SIMPLE_MAX_MS")

    # Pro reaction mode
    pro_min_ms: int = Field(default=60, alias="PRO_MIN_MS")
    pro_max_ms: int = Field(default=5_000, alias="PRO_MAX_MS")

    # Aim accuracy mode
    aim_targets: int = Field(default=20, alias="AIM_TARGETS")
    aim_min_hit_ms: int = Field(default=80, alias="AIM_MIN_HIT_MS")
    aim_max_hit_ms: int = Field(default=2_000, alias="AIM_MAX_HIT_MS")
    aim_min_avg_ms: int = Field(default=120, alias="AIM_MIN_AVG_MS")
    aim_miss_penalty: int = Field(default=150, alias="AIM_MISS_PENALTY")
    aim_max_misses: int = Field(default=60, alias="AIM_MAX_MISSES")

    # Leaderboards
    leaderboard_default_limit: int = Field(default=20, alias="LEADERBOARD_DEFAULT_LIMIT")
    leaderboard_max_limit: int = Field(default=100, alias="LEADERBOARD_MAX_LIMIT")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def replay_retention_ms(self) -> int:
        return self.replay_retention_seconds * 1000

    @property
    def replay_sweep_interval_ms(self) -> int:
        return self.replay_sweep_interval_seconds * 1000


settings = Settings()  # type: ignore[call-arg]
