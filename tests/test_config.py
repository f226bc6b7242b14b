"""
Tests for environment-driven settings.
"""

import pytest

from fraudcheck.config import Settings, load_settings

ENV_VARS = (
    "FRAUDCHECK_LOOKUP_TIMEOUT",
    "FRAUDCHECK_REGISTRY_LATENCY",
    "FRAUDCHECK_TEXT_CONFIDENCE",
    "FRAUDCHECK_DEFAULT_CURRENCY",
    "FRAUDCHECK_SIMULATION_SEED",
    "FRAUDCHECK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 1. LOAD SETTINGS: defaults and overrides
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestLoadSettings:
    def test_defaults(self):
        assert load_settings() == Settings()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("FRAUDCHECK_LOOKUP_TIMEOUT", "2.5")
        monkeypatch.setenv("FRAUDCHECK_TEXT_CONFIDENCE", "0.8")
        monkeypatch.setenv("FRAUDCHECK_DEFAULT_CURRENCY", "usd")
        monkeypatch.setenv("FRAUDCHECK_SIMULATION_SEED", "42")
        monkeypatch.setenv("FRAUDCHECK_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.lookup_timeout == 2.5
        assert settings.text_confidence == 0.8
        assert settings.default_currency == "USD"
        assert settings.simulation_seed == 42
        assert settings.log_level == "DEBUG"

    def test_empty_value_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("FRAUDCHECK_LOOKUP_TIMEOUT", "")
        assert load_settings().lookup_timeout == 5.0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 2. BAD VALUES: one clear error per variable
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class TestBadValues:
    def test_non_numeric_timeout_names_the_variable(self, monkeypatch):
        monkeypatch.setenv("FRAUDCHECK_LOOKUP_TIMEOUT", "fast")
        with pytest.raises(ValueError, match="FRAUDCHECK_LOOKUP_TIMEOUT must be a number"):
            load_settings()

    def test_error_does_not_chain_the_float_parse_failure(self, monkeypatch):
        monkeypatch.setenv("FRAUDCHECK_REGISTRY_LATENCY", "soon")
        with pytest.raises(ValueError) as excinfo:
            load_settings()
        assert excinfo.value.__cause__ is None
        assert excinfo.value.__suppress_context__ is True
