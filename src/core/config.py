"""Core configuration.

Why here:
- Centralises environment variables (pydantic-settings) without polluting the
  CLI.
- Lets adapters (whois client, resume log, TLD refresh) read config the same
  way.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import normalize_tld


def get_user_config_dir() -> Path:
    """Per-user config directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "tldhunt"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "tldhunt"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "tldhunt"
    return Path.home() / ".config" / "tldhunt"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed, validated at the edge (env vars) without leaking into the Core.
    - One configuration contract for the CLI, the pipeline and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="TLDHUNT_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        # Order: project first (dev), then the per-user config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    whois_command: str = Field(
        default="whois",
        min_length=1,
        description="Executable used for WHOIS lookups.",
    )
    whois_timeout_seconds: float | None = Field(
        default=10.0,
        ge=0,
        validation_alias=AliasChoices(
            "whois_timeout_seconds",
            "TLDHUNT_WHOIS_TIMEOUT_SECONDS",
            "TLDHUNT_WHOIS_TIMEOUT",
            "WHOIS_TIMEOUT",
        ),
        description="Base deadline per query (seconds). 0 or empty disables the deadline.",
    )
    referral_timeout_allowance: dict[str, float] = Field(
        default_factory=lambda: {".ai": 5.0},
        description="Extra seconds per TLD whose lookups need referral hops.",
    )
    registry_servers: dict[str, str] = Field(
        default_factory=lambda: {".ai": "whois.nic.ai"},
        description="Authoritative WHOIS host per TLD for the registry fallback.",
    )
    fallback_backoff_seconds: float = Field(
        default=2.0,
        ge=0,
        description="Pause before the registry fallback query (seconds).",
    )

    direct_max_concurrency: int = Field(
        default=30,
        ge=1,
        le=500,
        description="Maximum in-flight lookups in direct (keyword x TLDs) mode.",
    )
    batch_max_concurrency: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Maximum in-flight lookups in batch (wordlist) mode.",
    )
    batch_launch_delay: float = Field(
        default=0.2,
        ge=0,
        description="Minimum spacing between two batch launches (seconds).",
    )
    progress_every: int = Field(
        default=100,
        ge=1,
        description="Report batch progress every N completions.",
    )
    batch_output_path: Path = Field(
        default=Path("checked.txt"),
        description="Append-only batch progress log.",
    )

    tld_file: Path = Field(
        default=Path("tlds.txt"),
        description="Where --update-tld stores the TLD list.",
    )
    tld_url: str = Field(
        default="https://data.iana.org/TLD/tlds-alpha-by-domain.txt",
        min_length=8,
        description="Source of the IANA TLD list.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout for the TLD list download (seconds).",
    )
    user_agent: str = Field(
        default="tldhunt/0.1 (+https://local)",
        min_length=1,
        description="User-Agent for HTTP requests.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for diagnostics on stderr.",
    )

    @field_validator("whois_timeout_seconds", mode="before")
    @classmethod
    def _empty_timeout(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("referral_timeout_allowance", "registry_servers")
    @classmethod
    def _normalize_tld_keys(cls, value: dict) -> dict:
        return {normalize_tld(k): v for k, v in value.items()}

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "WARNING"

    @property
    def deadline_enabled(self) -> bool:
        return bool(self.whois_timeout_seconds)

    def deadline_for(self, tld: str) -> float | None:
        """Effective deadline for a lookup under `tld` (None means no deadline)."""

        if not self.deadline_enabled:
            return None
        extra = self.referral_timeout_allowance.get(normalize_tld(tld), 0.0)
        return float(self.whois_timeout_seconds) + extra

    def registry_server_for(self, tld: str) -> str | None:
        return self.registry_servers.get(normalize_tld(tld))
