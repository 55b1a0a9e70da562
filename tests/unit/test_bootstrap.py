"""Unit tests for settings, logging and engine wiring."""

import sys
import types

import pytest
import structlog

from report_engine.domain.entities import ReportConfig
from report_engine.infrastructure.config.settings import Settings
from report_engine.infrastructure.observability.logging import configure_logging
from report_engine.infrastructure.pumps.registry import default_registry
from report_engine.infrastructure.runtime.bootstrap import bootstrap
from report_engine.infrastructure.store.memory_store import InMemoryReportStore


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore default structlog configuration after each test."""
    yield
    structlog.reset_defaults()


def test_settings_from_environment(monkeypatch):
    """Test environment variables with prefix."""
    monkeypatch.setenv("REPORT_ENGINE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("REPORT_ENGINE_LOG_FORMAT", "json")
    monkeypatch.setenv("REPORT_ENGINE_PUMP_MODULES", '["my_pumps"]')

    settings = Settings(_env_file=None)

    assert settings.log_level == "DEBUG"
    assert settings.log_format == "json"
    assert settings.pump_modules == ["my_pumps"]


def test_settings_defaults(monkeypatch):
    """Test defaults without environment."""
    for name in ("LOG_LEVEL", "LOG_FORMAT", "PUMP_MODULES"):
        monkeypatch.delenv(f"REPORT_ENGINE_{name}", raising=False)

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.log_format == "console"
    assert settings.pump_modules == []


def test_configure_logging_json(capsys):
    """Test JSON log output."""
    configure_logging(Settings(_env_file=None, log_format="json", log_level="info"))

    structlog.get_logger().info("test_event", answer=42)

    output = capsys.readouterr().out
    assert '"event": "test_event"' in output
    assert '"answer": 42' in output


def test_configure_logging_filters_level(capsys):
    """Test messages below the configured level are dropped."""
    configure_logging(Settings(_env_file=None, log_level="WARNING"))

    structlog.get_logger().info("hidden_event")

    assert "hidden_event" not in capsys.readouterr().out


def test_bootstrap_loads_pump_modules(monkeypatch, census_pump):
    """Test configured modules register pumps and the engine runs them."""
    module = types.ModuleType("bootstrap_test_pumps")
    module.CensusPump = default_registry.pump("bootstrap_census")(census_pump)
    monkeypatch.setitem(sys.modules, "bootstrap_test_pumps", module)

    engine = bootstrap(Settings(_env_file=None, pump_modules=["bootstrap_test_pumps"]))
    config = ReportConfig(pump_type="bootstrap_census", fields=["count"], sort=["count"])

    assert engine.registry is default_registry
    assert isinstance(engine.store, InMemoryReportStore)
    assert engine.run(config).rows == ((1,), (2,), (3,))

    config_id = engine.save(config)
    assert engine.run_stored(config_id).rows == ((1,), (2,), (3,))
