"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``IMMO_ANALYTICS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

CLI commands receive an ``AppConfig`` instance and hand the relevant
sections to the core; library modules never read env vars themselves.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator

from immo_analytics.recommendations.estimator import EstimatorSettings
from immo_analytics.scoring.investment_score import ScoreWeights

# ── Sub-config models ─────────────────────────────────────────────────────────


class DatabaseConfig(BaseModel):
    """SQLite database connection settings (user preferences only)."""

    model_config = ConfigDict(frozen=True)

    db_path: str = "data/db/immo_analytics.db"
    wal_mode: bool = True
    busy_timeout_ms: int = 5000


class DataConfig(BaseModel):
    """Seed data file locations."""

    model_config = ConfigDict(frozen=True)

    regions_file: str = "config/seed/regions.json"
    properties_file: str = "config/seed/properties.json"


class ScoringConfig(BaseModel):
    """Investment score component weights (``[scoring.weights]``)."""

    model_config = ConfigDict(frozen=True)

    weights: ScoreWeights = ScoreWeights()


class PortfolioConfig(BaseModel):
    """Portfolio analysis settings."""

    model_config = ConfigDict(frozen=True)

    cache_max_entries: int = 0   # 0 → unbounded

    @field_validator("cache_max_entries")
    @classmethod
    def validate_cache_size(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"cache_max_entries must be >= 0, got {v}.")
        return v

    @property
    def cache_bound(self) -> Optional[int]:
        """``max_entries`` argument for ``AnalysisCache``."""
        return self.cache_max_entries or None


class RecommendationConfig(BaseModel):
    """Recommendation estimator thresholds."""

    model_config = ConfigDict(frozen=True)

    low_roi_threshold: float = 8.0
    high_roi_threshold: float = 12.0
    review_margin: float = 2.0
    max_alternative_return: float = 15.0
    max_trend_pct: float = 5.0
    hotspot_cities: list[str] = ["Essen", "Dortmund"]
    seed: Optional[int] = None

    def to_settings(self) -> EstimatorSettings:
        return EstimatorSettings(
            low_roi_threshold=self.low_roi_threshold,
            high_roi_threshold=self.high_roi_threshold,
            review_margin=self.review_margin,
            max_alternative_return=self.max_alternative_return,
            max_trend_pct=self.max_trend_pct,
            hotspot_cities=frozenset(self.hotspot_cities),
        )


class NotificationConfig(BaseModel):
    """Portfolio change notification feed."""

    model_config = ConfigDict(frozen=True)

    max_items: int = 5

    @field_validator("max_items")
    @classmethod
    def validate_max_items(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_items must be >= 1, got {v}.")
        return v


class PreferencesConfig(BaseModel):
    """User preference storage."""

    model_config = ConfigDict(frozen=True)

    max_recent_presets: int = 5

    @field_validator("max_recent_presets")
    @classmethod
    def validate_max_presets(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_recent_presets must be >= 1, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/immo_analytics.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + env vars.
    """

    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = DatabaseConfig()
    data: DataConfig = DataConfig()
    scoring: ScoringConfig = ScoringConfig()
    portfolio: PortfolioConfig = PortfolioConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    notifications: NotificationConfig = NotificationConfig()
    preferences: PreferencesConfig = PreferencesConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply IMMO_ANALYTICS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply IMMO_ANALYTICS_* env vars to the raw config dict.

    Supported overrides:
      IMMO_ANALYTICS_DB_PATH    → raw["database"]["db_path"]
      IMMO_ANALYTICS_LOG_LEVEL  → raw["logging"]["level"]
      IMMO_ANALYTICS_DEBUG      → raw["debug"]
      IMMO_ANALYTICS_SEED       → raw["recommendations"]["seed"]
    """
    if db_path := os.environ.get("IMMO_ANALYTICS_DB_PATH"):
        raw.setdefault("database", {})["db_path"] = db_path

    if log_level := os.environ.get("IMMO_ANALYTICS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("IMMO_ANALYTICS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if seed := os.environ.get("IMMO_ANALYTICS_SEED"):
        raw.setdefault("recommendations", {})["seed"] = int(seed)

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        database=DatabaseConfig(**raw.get("database", {})),
        data=DataConfig(**raw.get("data", {})),
        scoring=ScoringConfig(**raw.get("scoring", {})),
        portfolio=PortfolioConfig(**raw.get("portfolio", {})),
        recommendations=RecommendationConfig(**raw.get("recommendations", {})),
        notifications=NotificationConfig(**raw.get("notifications", {})),
        preferences=PreferencesConfig(**raw.get("preferences", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
