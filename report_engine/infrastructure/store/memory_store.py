"""In-memory report store."""

import uuid

import structlog

from report_engine.application.dto.report_config import ReportConfigDocument
from report_engine.domain.entities import ReportConfig
from report_engine.domain.errors import ReportConfigNotFoundError
from report_engine.domain.ports import PumpRegistryPort, ReportStorePort

logger = structlog.get_logger()


class InMemoryReportStore(ReportStorePort):
    """Report store keeping serialized configuration documents in memory.

    Documents go through the same JSON form a persistent store would use, so
    loaded configurations are fresh copies.
    """

    def __init__(self, registry: PumpRegistryPort | None = None) -> None:
        """Initialize empty store."""
        self.registry = registry
        self._documents: dict[str, str] = {}

    def load_report_config(self, config_id: str) -> ReportConfig:
        """Load report configuration by id."""
        document = self._documents.get(config_id)
        if document is None:
            raise ReportConfigNotFoundError(config_id)
        return ReportConfigDocument.model_validate_json(document).to_domain(self.registry)

    def save_report_config(self, config: ReportConfig, config_id: str | None = None) -> str:
        """Save report configuration and return its id."""
        config_id = config_id or uuid.uuid4().hex
        self._documents[config_id] = ReportConfigDocument.from_domain(config).to_json()
        logger.info("report_config_saved", config_id=config_id, pump_type=config.pump_type)
        return config_id

    def ids(self) -> list[str]:
        return list(self._documents)
