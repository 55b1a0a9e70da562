"""Save a report configuration."""

from report_engine.application.use_cases.validate_report_config import run as validate_config
from report_engine.domain.entities import ReportConfig
from report_engine.domain.ports import PumpRegistryPort, ReportStorePort


def run(
    config: ReportConfig,
    store: ReportStorePort,
    registry: PumpRegistryPort,
    config_id: str | None = None,
) -> str:
    """Validate report configuration against its pump and save it."""
    pump_cls = registry.resolve(config.pump_type)
    validate_config(config, pump_cls.schema)
    return store.save_report_config(config, config_id)
