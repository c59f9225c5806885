"""
Engine Settings
===============

Constants that shape the statistical engine: season length, the smoothing
parameter grid, validation thresholds, interval multipliers and the regional
notes appended to recommendations.

Settings are plain configuration. The engine never mutates them, so one
instance can be shared between threads.

Usage
-----
    >>> from forecast_engine import EngineSettings, load_settings
    >>> settings = EngineSettings()                  # built-in defaults
    >>> settings = load_settings("config/forecasting.yaml")
"""

import math
import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_ENV_VAR = "FORECAST_ENGINE_CONFIG"
DEFAULT_CONFIG_RELPATH = Path("config") / "forecasting.yaml"

DEFAULT_ALPHA_GRID = (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9)
DEFAULT_Z_MULTIPLIERS = {0.95: 1.96, 0.90: 1.645}
DEFAULT_LOCALE_NOTES = [
    "Consider seasonal factors specific to Zambian market conditions",
    "Monitor exchange rate impacts on business performance",
]


# =============================================================================
# SETTINGS MODEL
# =============================================================================

class EngineSettings(BaseModel):
    """
    Configuration constants for the statistical forecasting engine.

    Attributes
    ----------
    season_length : int
        Length of one seasonal cycle (12 for monthly data).
    min_seasonal_cycles : int
        Full cycles required before seasonality strength is measured.
    alpha_grid : tuple[float, ...]
        Candidate smoothing parameters searched by exponential smoothing.
    validation_folds : int
        Number of contiguous folds used by cross-validation.
    holdout_fraction : float
        Share of the series held out by holdout validation and the accuracy
        evaluation.
    accuracy_max_holdout : int
        Upper bound on the tail held out by the accuracy evaluation.
    stability_periods : int
        Points forecast from each subset in the stability test.
    cross_validation_threshold, holdout_threshold, stability_threshold : float
        A model is valid only when every score is strictly above its threshold.
    z_multipliers : dict[float, float]
        Interval multiplier per requested confidence level.
    fallback_z_multiplier : float
        Multiplier used for any confidence level not listed above.
    locale_notes : list[str]
        Recommendations appended when ``locale_context`` is requested.
    """

    season_length: int = Field(12, gt=1)
    min_seasonal_cycles: int = Field(2, ge=1)
    alpha_grid: Tuple[float, ...] = DEFAULT_ALPHA_GRID
    validation_folds: int = Field(5, ge=2)
    holdout_fraction: float = Field(0.2, gt=0, lt=1)
    accuracy_max_holdout: int = Field(6, ge=1)
    stability_periods: int = Field(3, ge=1)
    cross_validation_threshold: float = Field(0.6, ge=0, le=1)
    holdout_threshold: float = Field(0.6, ge=0, le=1)
    stability_threshold: float = Field(0.7, ge=0, le=1)
    z_multipliers: Dict[float, float] = Field(
        default_factory=lambda: dict(DEFAULT_Z_MULTIPLIERS)
    )
    fallback_z_multiplier: float = Field(1.28, gt=0)
    locale_notes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_LOCALE_NOTES)
    )

    @field_validator("alpha_grid")
    @classmethod
    def _check_alpha_grid(cls, grid):
        if not grid:
            raise ValueError("alpha_grid cannot be empty")
        bad = [a for a in grid if not 0 < a < 1]
        if bad:
            raise ValueError(f"alpha values must lie in (0, 1): {bad}")
        return tuple(grid)

    @field_validator("z_multipliers")
    @classmethod
    def _check_z_multipliers(cls, multipliers):
        for level, z in multipliers.items():
            if not 0 < level <= 1:
                raise ValueError(f"Confidence level {level} must lie in (0, 1]")
            if z <= 0:
                raise ValueError(f"Multiplier for {level} must be positive")
        return multipliers

    @property
    def min_seasonal_length(self) -> int:
        """Shortest series for which seasonality strength is computed."""
        return self.season_length * self.min_seasonal_cycles

    def z_multiplier(self, confidence: float) -> float:
        """Return the interval multiplier for a requested confidence level."""
        for level, z in self.z_multipliers.items():
            if math.isclose(confidence, level, rel_tol=0, abs_tol=1e-9):
                return z
        return self.fallback_z_multiplier


# =============================================================================
# LOADER
# =============================================================================

def _find_project_root(start_path: Path = None) -> Optional[Path]:
    """Find project root by looking for config/forecasting.yaml or pyproject.toml."""
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    for _ in range(10):
        if (current / DEFAULT_CONFIG_RELPATH).exists():
            return current
        if (current / "pyproject.toml").exists():
            return current
        if current.parent == current:
            break
        current = current.parent
    return None


def _resolve_config_path(path: Optional[Union[str, Path]]) -> Optional[Path]:
    if path is not None:
        return Path(path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)

    root = _find_project_root()
    if root is None:
        return None
    candidate = root / DEFAULT_CONFIG_RELPATH
    return candidate if candidate.exists() else None


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """
    Load engine settings from YAML.

    Parameters
    ----------
    path : str or Path, optional
        Explicit YAML file. When omitted, ``$FORECAST_ENGINE_CONFIG`` is
        consulted, then ``config/forecasting.yaml`` under the project root.
        If no file is found the built-in defaults are returned.

    Returns
    -------
    EngineSettings
        Validated settings.

    Raises
    ------
    FileNotFoundError
        If an explicit path (argument or environment variable) does not exist.
    pydantic.ValidationError
        If the file contains invalid values.
    """
    config_path = _resolve_config_path(path)
    if config_path is None:
        return EngineSettings()

    if not config_path.exists():
        raise FileNotFoundError(f"Settings file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    # The file may nest everything under a top-level "engine" key
    data = data.get("engine", data)
    return EngineSettings(**data)


__all__ = [
    "EngineSettings",
    "load_settings",
    "CONFIG_ENV_VAR",
]
