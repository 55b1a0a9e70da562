"""Engine wiring."""

from dataclasses import dataclass

import structlog

from report_engine.application.use_cases.run_report import Report
from report_engine.application.use_cases.run_stored_report import run as run_stored
from report_engine.application.use_cases.save_report import run as save_report
from report_engine.domain.entities import ReportConfig, ResultTable
from report_engine.domain.ports import ReportStorePort
from report_engine.domain.types import ParamValues
from report_engine.infrastructure.config.settings import Settings
from report_engine.infrastructure.observability.logging import configure_logging
from report_engine.infrastructure.pumps.registry import (
    PumpRegistry,
    default_registry,
    load_pump_modules,
)
from report_engine.infrastructure.store.memory_store import InMemoryReportStore

logger = structlog.get_logger()


@dataclass
class ReportEngine:
    """Registry and store bound together for callers."""

    registry: PumpRegistry
    store: ReportStorePort

    def run(self, config: ReportConfig, params: ParamValues | None = None) -> ResultTable:
        return Report.run(config, params, self.registry)

    def run_stored(self, config_id: str, params: ParamValues | None = None) -> ResultTable:
        return run_stored(config_id, params, self.store, self.registry)

    def save(self, config: ReportConfig, config_id: str | None = None) -> str:
        return save_report(config, self.store, self.registry, config_id)


def bootstrap(
    settings: Settings | None = None,
    store: ReportStorePort | None = None,
) -> ReportEngine:
    """Configure logging, load pump modules and wire the engine."""
    settings = settings or Settings()
    configure_logging(settings)

    load_pump_modules(settings.pump_modules)

    engine = ReportEngine(
        registry=default_registry,
        store=store or InMemoryReportStore(default_registry),
    )

    logger.info(
        "report_engine_ready",
        pump_types=default_registry.names(),
        store=type(engine.store).__name__,
    )
    return engine
