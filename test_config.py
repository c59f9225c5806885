from pathlib import Path

import pytest
from pydantic import ValidationError

from forecast_engine.config import CONFIG_ENV_VAR, EngineSettings, load_settings
from forecast_engine.intervals import z_multiplier

REPO_CONFIG = Path(__file__).parent / "config" / "forecasting.yaml"


def test_default_settings():
    settings = EngineSettings()

    assert settings.season_length == 12
    assert settings.min_seasonal_length == 24
    assert settings.alpha_grid == (0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9)
    assert settings.validation_folds == 5
    assert (
        settings.cross_validation_threshold,
        settings.holdout_threshold,
        settings.stability_threshold,
    ) == (0.6, 0.6, 0.7)


def test_z_multipliers():
    assert z_multiplier(0.95) == 1.96
    assert z_multiplier(0.90) == 1.645
    assert z_multiplier(0.80) == 1.28, "Unlisted levels use the fallback"
    assert z_multiplier(0.99) == 1.28

    print("✓ Multiplier test passed")


def test_repo_config_matches_defaults():
    """Shipped YAML mirrors the built-in defaults"""
    assert load_settings(REPO_CONFIG) == EngineSettings()


def test_load_nested_and_flat_yaml(tmp_path):
    nested = tmp_path / "nested.yaml"
    nested.write_text("engine:\n  season_length: 4\n  stability_periods: 2\n")
    settings = load_settings(nested)
    assert settings.season_length == 4 and settings.min_seasonal_length == 8
    assert settings.stability_periods == 2
    assert settings.validation_folds == 5, "Unset keys keep their defaults"

    flat = tmp_path / "flat.yaml"
    flat.write_text("z_multipliers:\n  0.99: 2.576\nfallback_z_multiplier: 1.0\n")
    settings = load_settings(flat)
    assert settings.z_multiplier(0.99) == 2.576
    assert settings.z_multiplier(0.95) == 1.0


def test_env_var_config(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("engine:\n  holdout_threshold: 0.5\n")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    assert load_settings().holdout_threshold == 0.5


def test_missing_file_raises(tmp_path, monkeypatch):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "absent.yaml")

    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))
    with pytest.raises(FileNotFoundError):
        load_settings()


def test_invalid_settings_rejected(tmp_path):
    with pytest.raises(ValidationError):
        EngineSettings(alpha_grid=(0.0, 0.5))
    with pytest.raises(ValidationError):
        EngineSettings(alpha_grid=())
    with pytest.raises(ValidationError):
        EngineSettings(z_multipliers={0.95: -1.0})

    bad = tmp_path / "bad.yaml"
    bad.write_text("engine:\n  holdout_fraction: 1.5\n")
    with pytest.raises(ValidationError):
        load_settings(bad)
