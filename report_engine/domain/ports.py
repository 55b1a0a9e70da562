"""Ports (interfaces) for infrastructure adapters."""

from abc import ABC, abstractmethod

from report_engine.domain.entities import ReportConfig
from report_engine.domain.pump import DataPump


class ReportStorePort(ABC):
    """Port for loading and saving report configurations."""

    @abstractmethod
    def load_report_config(self, config_id: str) -> ReportConfig:
        """Load report configuration by id."""

    @abstractmethod
    def save_report_config(self, config: ReportConfig, config_id: str | None = None) -> str:
        """Save report configuration and return its id."""


class PumpRegistryPort(ABC):
    """Port for resolving stored pump type names to pump classes."""

    @abstractmethod
    def resolve(self, pump_type: str) -> type[DataPump]:
        """Get pump class registered under name."""
