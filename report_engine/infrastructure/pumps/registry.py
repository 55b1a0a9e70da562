"""Pump registry."""

import importlib
from collections.abc import Iterable
from typing import Callable

import structlog

from report_engine.domain.errors import PumpDefinitionError, UnknownPumpTypeError
from report_engine.domain.ports import PumpRegistryPort
from report_engine.domain.pump import DataPump

logger = structlog.get_logger()


class PumpRegistry(PumpRegistryPort):
    """Maps stored pump type names to pump classes."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._pumps: dict[str, type[DataPump]] = {}

    def register(self, pump_cls: type[DataPump], name: str | None = None) -> type[DataPump]:
        """Register pump class under name (defaults to the class name)."""
        if not (isinstance(pump_cls, type) and issubclass(pump_cls, DataPump)):
            raise PumpDefinitionError(f"Not a DataPump subclass: {pump_cls!r}")

        name = name or pump_cls.__name__
        registered = self._pumps.get(name)
        if registered is not None and registered is not pump_cls:
            raise PumpDefinitionError(
                f"Pump type {name} already registered to {registered.__qualname__}"
            )

        self._pumps[name] = pump_cls
        logger.debug("pump_registered", pump_type=name, pump_class=pump_cls.__qualname__)
        return pump_cls

    def pump(self, name: str | None = None) -> Callable[[type[DataPump]], type[DataPump]]:
        """Class decorator registering a pump."""

        def decorator(pump_cls: type[DataPump]) -> type[DataPump]:
            return self.register(pump_cls, name)

        return decorator

    def resolve(self, pump_type: str) -> type[DataPump]:
        """Get pump class registered under name."""
        pump_cls = self._pumps.get(pump_type)
        if pump_cls is None:
            raise UnknownPumpTypeError(pump_type)
        return pump_cls

    def names(self) -> list[str]:
        """Registered pump type names."""
        return sorted(self._pumps)

    def __contains__(self, pump_type: str) -> bool:
        return pump_type in self._pumps


default_registry = PumpRegistry()


def register_pump(name: str | None = None) -> Callable[[type[DataPump]], type[DataPump]]:
    """Class decorator registering a pump in the default registry."""
    return default_registry.pump(name)


def load_pump_modules(module_names: Iterable[str]) -> None:
    """Import modules whose pumps register themselves on import."""
    for module_name in module_names:
        importlib.import_module(module_name)
        logger.info("pump_module_loaded", module=module_name)
