"""Validate a report configuration against its pump schema."""

from collections.abc import Iterable

from report_engine.domain.entities import ReportConfig
from report_engine.domain.errors import InvalidReportConfigError
from report_engine.domain.pump import PumpSchema


def _require(names: Iterable[str], allowed: Iterable[str], what: str, pump_type: str) -> None:
    allowed = set(allowed)
    unknown = [name for name in names if name not in allowed]
    if unknown:
        raise InvalidReportConfigError(
            f"{what} not produced by pump {pump_type}: {unknown}",
        )


def run(config: ReportConfig, schema: PumpSchema) -> tuple[str, ...]:
    """Validate report configuration and return the active column list.

    An empty field selection selects every output column in declaration order.
    """
    output_shape = schema.output_shape
    if not output_shape:
        raise InvalidReportConfigError(f"Pump {config.pump_type} declares no output columns")

    columns = config.fields or output_shape

    _require(columns, output_shape, "Selected fields", config.pump_type)
    _require(config.groups, output_shape, "Group fields", config.pump_type)
    _require((s.field for s in config.sort), output_shape, "Sort fields", config.pump_type)
    _require(
        (f.field for f in config.filters),
        set(output_shape) | schema.filterable,
        "Filter fields",
        config.pump_type,
    )

    return tuple(columns)
