"""Configuration management for burnrate."""

import math
import os
from dataclasses import dataclass, field
from typing import Optional

from burnrate.domain.errors import ValidationError

DEFAULT_MODEL = "google/gemini-2.0-flash-001"
MIN_PROJECTION_YEARS = 1
MAX_PROJECTION_YEARS = 50


@dataclass
class ExtractionSettings:
    """Settings for turning documents into signals.

    ``api_key`` and ``model`` are not used by burnrate itself. They are kept
    so a caller running the model-backed extraction step can read both from
    the same configuration; burnrate only imports the model's replies.
    ``default_currency`` and ``default_tax_year`` fill gaps in those replies.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    default_currency: str = "USD"
    default_tax_year: str = "2024"


@dataclass
class ProjectionSettings:
    """Defaults for investment projections."""

    years: int = 30
    default_growth_rate: float = 7.0


def _int_env(name: str, default: int, minimum: int, maximum: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValidationError(f"{name} must be a whole number, got '{raw}'")
    if not minimum <= value <= maximum:
        raise ValidationError(f"{name} must be between {minimum} and {maximum}, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        raise ValidationError(f"{name} must be a number, got '{raw}'")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be a finite number, got '{raw}'")
    return value


@dataclass
class BurnRateConfig:
    """Main configuration for burnrate."""

    db_path: Optional[str] = None
    log_level: str = "WARNING"
    log_format: str = "standard"
    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    projection: ProjectionSettings = field(default_factory=ProjectionSettings)

    @classmethod
    def from_env(cls) -> "BurnRateConfig":
        """Create config from environment variables.

        Raises:
            ValidationError: If a numeric setting is malformed or out of range
        """
        extraction = ExtractionSettings(
            api_key=os.getenv("BURNRATE_API_KEY") or None,
            model=os.getenv("BURNRATE_MODEL", DEFAULT_MODEL),
            default_currency=os.getenv("BURNRATE_CURRENCY", "USD"),
            default_tax_year=os.getenv("BURNRATE_DEFAULT_TAX_YEAR", "2024"),
        )

        projection = ProjectionSettings(
            years=_int_env(
                "BURNRATE_PROJECTION_YEARS", 30, MIN_PROJECTION_YEARS, MAX_PROJECTION_YEARS
            ),
            default_growth_rate=_float_env("BURNRATE_GROWTH_RATE", 7.0),
        )

        return cls(
            db_path=os.getenv("BURNRATE_DB_PATH") or None,
            log_level=os.getenv("BURNRATE_LOG_LEVEL", "WARNING"),
            log_format=os.getenv("BURNRATE_LOG_FORMAT", "standard"),
            extraction=extraction,
            projection=projection,
        )
