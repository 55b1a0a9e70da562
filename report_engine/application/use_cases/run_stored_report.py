"""Run a stored report."""

import structlog

from report_engine.application.use_cases.run_report import Report
from report_engine.domain.entities import ResultTable
from report_engine.domain.ports import PumpRegistryPort, ReportStorePort
from report_engine.domain.types import ParamValues

logger = structlog.get_logger()


def run(
    config_id: str,
    params: ParamValues | None,
    store: ReportStorePort,
    registry: PumpRegistryPort | None = None,
) -> ResultTable:
    """Load report configuration from the store and run it."""
    config = store.load_report_config(config_id)
    logger.info("report_config_loaded", config_id=config_id, report=config.name)
    return Report.run(config, params, registry)
