# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: AWS access,
polling budgets for eventually consistent resources, the OIDC trust anchor,
the site store location and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# CloudFront only accepts ACM certificates issued in this region.
CLOUDFRONT_CERTIFICATE_REGION = "us-east-1"


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === AWS ===
    aws_region: str = "us-east-1"
    aws_profile: str = ""
    aws_endpoint_url: str = ""
    certificate_region: str = CLOUDFRONT_CERTIFICATE_REGION

    # === Polling ===
    validation_poll_interval_s: float = 5.0
    validation_max_attempts: int = 5
    certificate_poll_interval_s: float = 30.0
    certificate_max_wait_minutes: int = 15
    poll_max_check_errors: int = 3

    # === CDN ===
    function_publish_delay_s: float = 1.0
    distribution_price_class: Literal[
        "PriceClass_100", "PriceClass_200", "PriceClass_All"
    ] = "PriceClass_100"

    # === Deploy identity (GitHub Actions OIDC) ===
    oidc_issuer_url: str = "https://token.actions.githubusercontent.com"
    oidc_audience: str = "sts.amazonaws.com"
    oidc_thumbprint: str = "6938fd4d98bab03faadb97b34396831e3780aea1"

    # === Site store ===
    site_store_path: Path = Path("~/.sitestack/sites.json")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator(
        "validation_poll_interval_s",
        "certificate_poll_interval_s",
    )
    @classmethod
    def validate_positive_interval(cls, v: float, info) -> float:  # noqa: N805
        if v <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return v

    @field_validator(
        "validation_max_attempts",
        "certificate_max_wait_minutes",
    )
    @classmethod
    def validate_positive_count(cls, v: int, info) -> int:  # noqa: N805
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v

    @field_validator("poll_max_check_errors", "function_publish_delay_s")
    @classmethod
    def validate_non_negative(cls, v, info):  # noqa: N805
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.certificate_region != CLOUDFRONT_CERTIFICATE_REGION:
            errors.append(
                f"CERTIFICATE_REGION must be {CLOUDFRONT_CERTIFICATE_REGION} "
                f"for CloudFront, got {self.certificate_region}"
            )

        if self.certificate_max_wait_s < self.certificate_poll_interval_s:
            errors.append(
                "CERTIFICATE_MAX_WAIT_MINUTES must cover at least one "
                "CERTIFICATE_POLL_INTERVAL_S"
            )

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def certificate_max_wait_s(self) -> float:
        return self.certificate_max_wait_minutes * 60.0

    @property
    def oidc_issuer_host(self) -> str:
        """Issuer URL without scheme, as used in IAM condition keys."""
        return self.oidc_issuer_url.removeprefix("https://").rstrip("/")


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
