"""Planning service for pump options."""

from collections.abc import Iterable, Mapping
from typing import Any

from report_engine.domain.entities import ResolvedFilter
from report_engine.domain.types import OPTION_FIELDS, OPTION_FILTERS, PumpOptions


class OptionsPlan:
    """Split of resolved filters between the pump and the engine."""

    def __init__(self, fields: Iterable[str], options: Mapping[str, Any]) -> None:
        """Initialize options plan."""
        self.fields: tuple[str, ...] = tuple(fields)
        self.options: dict[str, Any] = dict(options)
        self.pushed_filters: list[ResolvedFilter] = []
        self.post_filters: list[ResolvedFilter] = []

    def push(self, resolved: ResolvedFilter) -> None:
        """Hand filter to the pump."""
        self.pushed_filters.append(resolved)

    def keep(self, resolved: ResolvedFilter) -> None:
        """Apply filter to generated rows."""
        self.post_filters.append(resolved)

    def pump_options(self) -> PumpOptions:
        """Build the options mapping passed to generate."""
        return {
            **self.options,
            OPTION_FIELDS: list(self.fields),
            OPTION_FILTERS: [f.as_option() for f in self.pushed_filters],
        }


def plan_options(
    fields: Iterable[str],
    resolved_filters: Iterable[ResolvedFilter],
    resolved_options: Mapping[str, Any],
    filterable: frozenset[str],
) -> OptionsPlan:
    """Plan which filters the pump honours and which the engine applies."""
    plan = OptionsPlan(fields, resolved_options)

    for resolved in resolved_filters:
        if resolved.field in filterable:
            plan.push(resolved)
        else:
            plan.keep(resolved)

    return plan
