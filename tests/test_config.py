"""
Tests for configuration defaults, validation and environment loading.
"""

import dataclasses

import pytest

from facematch import Config, load_config


class TestConfig:
    """Test the Config dataclass."""

    def test_defaults(self):
        """Test documented default values."""
        cfg = Config()

        assert cfg.confidence_threshold == 80.0
        assert cfg.minimum_gap == 1.0
        assert cfg.canonical_size == 256
        assert cfg.min_dimension == 100
        assert cfg.max_dimension == 2000
        assert cfg.min_contrast == 30
        assert (cfg.min_brightness, cfg.max_brightness) == (30.0, 225.0)
        assert cfg.min_sharpness == 5.0
        cfg.validate()

    def test_immutable(self):
        """Test that configuration cannot change after creation."""
        cfg = Config()

        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.confidence_threshold = 50.0  # type: ignore[misc]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"confidence_threshold": -1.0},
            {"confidence_threshold": 100.5},
            {"minimum_gap": -0.1},
            {"canonical_size": 8},
            {"min_dimension": 500, "max_dimension": 400},
            {"min_contrast": 300},
            {"min_brightness": 200.0, "max_brightness": 100.0},
            {"min_sharpness": -1.0},
        ],
    )
    def test_validate_rejects(self, kwargs):
        """Test that out-of-range values raise ValueError."""
        with pytest.raises(ValueError):
            Config(**kwargs).validate()


class TestLoadConfig:
    """Test environment variable loading."""

    def test_defaults_without_env(self, monkeypatch):
        """Test that unset variables keep defaults."""
        monkeypatch.delenv("FACEMATCH_CONFIDENCE_THRESHOLD", raising=False)
        monkeypatch.delenv("FACEMATCH_MINIMUM_GAP", raising=False)

        cfg = load_config()

        assert cfg.confidence_threshold == 80.0
        assert cfg.minimum_gap == 1.0

    def test_env_overrides(self, monkeypatch):
        """Test that threshold and gap can be tuned from the environment."""
        monkeypatch.setenv("FACEMATCH_CONFIDENCE_THRESHOLD", "72.5")
        monkeypatch.setenv("FACEMATCH_MINIMUM_GAP", "2")

        cfg = load_config()

        assert cfg.confidence_threshold == 72.5
        assert cfg.minimum_gap == 2.0

    def test_env_invalid(self, monkeypatch):
        """Test that invalid environment values are rejected."""
        monkeypatch.setenv("FACEMATCH_CONFIDENCE_THRESHOLD", "250")

        with pytest.raises(ValueError):
            load_config()
