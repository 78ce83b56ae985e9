"""Tests for configuration and logging setup."""

import json
import logging

import pytest

from burnrate.config import DEFAULT_MODEL, BurnRateConfig
from burnrate.domain.errors import ValidationError
from burnrate.logging import JsonFormatter, get_logger, setup_logging


def test_config_defaults(monkeypatch):
    for name in (
        "BURNRATE_DB_PATH",
        "BURNRATE_LOG_LEVEL",
        "BURNRATE_LOG_FORMAT",
        "BURNRATE_CURRENCY",
        "BURNRATE_API_KEY",
        "BURNRATE_MODEL",
        "BURNRATE_DEFAULT_TAX_YEAR",
        "BURNRATE_PROJECTION_YEARS",
        "BURNRATE_GROWTH_RATE",
    ):
        monkeypatch.delenv(name, raising=False)

    config = BurnRateConfig.from_env()

    assert config.db_path is None
    assert config.log_level == "WARNING"
    assert config.log_format == "standard"
    assert config.extraction.api_key is None
    assert config.extraction.model == DEFAULT_MODEL
    assert config.extraction.default_currency == "USD"
    assert config.extraction.default_tax_year == "2024"
    assert config.projection.years == 30
    assert config.projection.default_growth_rate == 7.0


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("BURNRATE_DB_PATH", "/tmp/br.db")
    monkeypatch.setenv("BURNRATE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("BURNRATE_LOG_FORMAT", "json")
    monkeypatch.setenv("BURNRATE_CURRENCY", "EUR")
    monkeypatch.setenv("BURNRATE_API_KEY", "secret")
    monkeypatch.setenv("BURNRATE_DEFAULT_TAX_YEAR", "2025")
    monkeypatch.setenv("BURNRATE_PROJECTION_YEARS", "10")
    monkeypatch.setenv("BURNRATE_GROWTH_RATE", "5.5")

    config = BurnRateConfig.from_env()

    assert config.db_path == "/tmp/br.db"
    assert config.log_level == "DEBUG"
    assert config.log_format == "json"
    assert config.extraction.default_currency == "EUR"
    assert config.extraction.api_key == "secret"
    assert config.extraction.default_tax_year == "2025"
    assert config.projection.years == 10
    assert config.projection.default_growth_rate == 5.5


@pytest.mark.parametrize("value", ["abc", "7.5", "0", "51", "-3"])
def test_config_rejects_bad_projection_years(monkeypatch, value):
    monkeypatch.setenv("BURNRATE_PROJECTION_YEARS", value)

    with pytest.raises(ValidationError, match="BURNRATE_PROJECTION_YEARS"):
        BurnRateConfig.from_env()


@pytest.mark.parametrize("value", ["1", "50", " 25 "])
def test_config_accepts_projection_years_in_range(monkeypatch, value):
    monkeypatch.setenv("BURNRATE_PROJECTION_YEARS", value)

    assert BurnRateConfig.from_env().projection.years == int(value)


@pytest.mark.parametrize("value", ["fast", "nan", "inf"])
def test_config_rejects_bad_growth_rate(monkeypatch, value):
    monkeypatch.delenv("BURNRATE_PROJECTION_YEARS", raising=False)
    monkeypatch.setenv("BURNRATE_GROWTH_RATE", value)

    with pytest.raises(ValidationError, match="BURNRATE_GROWTH_RATE"):
        BurnRateConfig.from_env()


def test_config_blank_numbers_use_defaults(monkeypatch):
    monkeypatch.setenv("BURNRATE_PROJECTION_YEARS", "")
    monkeypatch.setenv("BURNRATE_GROWTH_RATE", "  ")

    config = BurnRateConfig.from_env()

    assert config.projection.years == 30
    assert config.projection.default_growth_rate == 7.0



def test_setup_logging_sets_levels():
    setup_logging("info")

    assert logging.getLogger().level == logging.INFO
    assert logging.getLogger("burnrate").level == logging.INFO
    assert logging.getLogger("sqlalchemy").level == logging.WARNING
    assert len(logging.getLogger().handlers) == 1

    setup_logging("WARNING")
    assert len(logging.getLogger().handlers) == 1


def test_setup_logging_unknown_level_falls_back_to_warning():
    setup_logging("chatty")

    assert logging.getLogger().level == logging.WARNING


def test_json_formatter():
    record = logging.LogRecord(
        name="burnrate.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Skipping row %d",
        args=(3,),
        exc_info=None,
    )

    data = json.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == "burnrate.test"
    assert data["message"] == "Skipping row 3"
    assert "timestamp" in data


def test_get_logger():
    assert get_logger("burnrate.domain").name == "burnrate.domain"
