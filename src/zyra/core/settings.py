"""Runtime settings for zyra.

All values can be overridden via environment variables prefixed with
``ZYRA_`` (e.g. ``ZYRA_TRIGGER_URL``) or a ``.env`` file.

Order of precedence (highest → lowest):
    1. Explicit constructor arguments (tests, CLI flags)
    2. Environment variables
    3. ``.env`` file
    4. Defaults below
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ZyraSettings(BaseSettings):
    """Settings shared by the API server, the scheduler and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="ZYRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Server ───────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Bind port")
    debug: bool = Field(default=False, description="Expose error details in responses")

    # ── Logging ──────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO", description="Log level")
    log_json: bool | None = Field(
        default=None,
        description="JSON logs; None auto-detects (JSON when stdout is not a tty)",
    )

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api", description="URL prefix for all endpoints")
    api_title: str = Field(default="Zyra API", description="OpenAPI title")
    api_version: str = Field(default="0.1.0", description="OpenAPI version string")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # ── Storage ──────────────────────────────────────────────────────────
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding workflow-schedules.json (relative to cwd)",
    )
    history_dir: Path = Field(
        default_factory=lambda: Path.home() / ".claude" / "execution-history",
        description="Directory holding history.json",
    )
    history_limit: int = Field(default=100, ge=1, description="Max history entries kept")
    execution_retention: int = Field(
        default=50, ge=1, description="Background executions kept by cleanup()"
    )

    # ── Scheduler ────────────────────────────────────────────────────────
    scheduler_enabled: bool = Field(default=True, description="Arm schedule timers at startup")
    trigger_url: str = Field(
        default="http://localhost:3000/api/background-executions",
        description="Endpoint POSTed when a schedule fires",
    )
    trigger_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Timeout for the trigger request"
    )
    timezone: str = Field(
        default="UTC",
        description="IANA zone in which cron hour/minute fields are evaluated",
    )

    @property
    def schedules_file(self) -> Path:
        return self.data_dir / "workflow-schedules.json"

    @property
    def history_file(self) -> Path:
        return self.history_dir / "history.json"


@lru_cache(maxsize=1)
def get_settings() -> ZyraSettings:
    """Cached settings: loaded once per process."""
    return ZyraSettings()
