"""Resolution of filter and option expressions against runtime parameters."""

from collections.abc import Iterable, Mapping
from typing import Any, Callable

import structlog

from report_engine.domain.entities import (
    Comparison,
    Filter,
    FilterExpr,
    Literal,
    Parameter,
    ParamRef,
    ResolvedFilter,
)
from report_engine.domain.enums import DataType
from report_engine.domain.errors import (
    InvalidReportConfigError,
    MissingParameterError,
    TypeMismatchError,
)
from report_engine.domain.types import ParamValues

logger = structlog.get_logger()


class ResolutionContext:
    """Declared parameters plus the values supplied for one run."""

    def __init__(self, parameters: Iterable[Parameter], params: ParamValues) -> None:
        """Initialize resolution context."""
        self.parameters: dict[str, Parameter] = {p.name: p for p in parameters}
        self.params = params

    def lookup(self, name: str) -> Any:
        """Get the checked value of a parameter.

        Falls back to the declared default when no value was supplied.
        """
        parameter = self.parameters.get(name)
        if name in self.params:
            value = self.params[name]
            return parameter.check(value) if parameter else value
        if parameter is not None and not parameter.is_required:
            return parameter.default
        raise MissingParameterError(name)

    def resolve_declared(self) -> dict[str, Any]:
        """Check every declared parameter, in declaration order."""
        return {name: self.lookup(name) for name in self.parameters}

    def undeclared(self) -> list[str]:
        """Names of supplied values without a declared parameter."""
        return sorted(set(self.params) - set(self.parameters))


# Strategy pattern: Map expression variants to resolvers
_EXPRESSION_RESOLVERS: dict[type, Callable[[Any, ResolutionContext], Literal | Comparison]] = {}


def _register_resolver(expr_type: type, resolver: Callable) -> None:
    """Register an expression resolver."""
    _EXPRESSION_RESOLVERS[expr_type] = resolver


def _resolve_literal(expr: Literal, context: ResolutionContext) -> Literal:
    return expr


_register_resolver(Literal, _resolve_literal)


def _resolve_param_ref(expr: ParamRef, context: ResolutionContext) -> Literal:
    return Literal(context.lookup(expr.name))


_register_resolver(ParamRef, _resolve_param_ref)


def _resolve_comparison(expr: Comparison, context: ResolutionContext) -> Comparison:
    # Operator stays unevaluated; it is applied where the filter is applied.
    return Comparison(expr.op, resolve_expression(expr.operand, context))


_register_resolver(Comparison, _resolve_comparison)


def resolve_expression(expr: FilterExpr, context: ResolutionContext) -> Literal | Comparison:
    """Resolve a filter expression to a literal or a literal comparison."""
    resolver = _EXPRESSION_RESOLVERS.get(type(expr))
    if not resolver:
        raise InvalidReportConfigError(f"Unknown filter expression: {expr!r}")
    return resolver(expr, context)


def _resolved_value(resolved: Literal | Comparison) -> Any:
    if isinstance(resolved, Comparison):
        return resolved.operand.value
    return resolved.value


def resolve_filters(
    filters: Iterable[Filter],
    context: ResolutionContext,
    field_types: Mapping[str, DataType | None],
) -> tuple[ResolvedFilter, ...]:
    """Resolve filters in configuration order; the first failure aborts.

    ``field_types`` maps field names to their declared type. Fields mapped to
    None (derived output columns) are not type checked.
    """
    resolved_filters = []
    for flt in filters:
        value = _resolved_value(resolve_expression(flt.expr, context))
        data_type = field_types.get(flt.field)
        if data_type is not None and not data_type.accepts(value):
            raise TypeMismatchError(f"field {flt.field}", data_type.value, value)
        resolved_filters.append(ResolvedFilter(flt.field, flt.op, value))
    return tuple(resolved_filters)


def resolve_options(options: Mapping[str, Any], context: ResolutionContext) -> dict[str, Any]:
    """Resolve free-form pump options.

    Literal and ParamRef values are resolved; any other value is passed
    through unchanged.
    """
    resolved: dict[str, Any] = {}
    for key, value in options.items():
        if isinstance(value, Comparison):
            raise InvalidReportConfigError(f"Option {key} cannot hold a comparison")
        if isinstance(value, (Literal, ParamRef)):
            resolved[key] = _resolved_value(resolve_expression(value, context))
        else:
            resolved[key] = value
    return resolved


def warn_undeclared(context: ResolutionContext, report: str | None = None) -> None:
    """Log supplied values without a declared parameter."""
    undeclared = context.undeclared()
    if undeclared:
        logger.warning("undeclared_parameters_supplied", report=report, parameters=undeclared)
