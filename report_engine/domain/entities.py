"""Domain entities."""

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

import pandas as pd

from report_engine.domain.enums import ComparisonOp, DataType, SortDirection
from report_engine.domain.errors import (
    InvalidDataTypeError,
    InvalidReportConfigError,
    TypeMismatchError,
    ValueNotInDomainError,
)
from report_engine.domain.types import RESERVED_OPTIONS, Row


def _parse_data_type(data_type: DataType | str) -> DataType:
    try:
        return DataType.parse(data_type)
    except ValueError:
        raise InvalidDataTypeError(data_type) from None


@dataclass(frozen=True)
class Field:
    """Column descriptor: a name and a data type."""

    name: str
    data_type: DataType

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.isidentifier():
            raise ValueError(f"Invalid field name: {self.name!r}")
        object.__setattr__(self, "data_type", _parse_data_type(self.data_type))

    def renamed(self, name: str) -> "Field":
        """Copy of this field under another name."""
        return replace(self, name=name)

    def with_data_type(self, data_type: DataType | str) -> "Field":
        """Copy of this field with another (validated) data type."""
        return replace(self, data_type=data_type)


@dataclass(frozen=True)
class Parameter:
    """End-user value supplied when a report runs.

    A parameter with a ``domain`` only accepts the listed values. A parameter
    with a ``default`` may be omitted at run time.
    """

    name: str
    data_type: DataType
    domain: tuple[Any, ...] | None = None
    default: Any = None
    label: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_type", _parse_data_type(self.data_type))
        if self.domain is not None:
            object.__setattr__(self, "domain", tuple(self.domain))
            for value in self.domain:
                if not self.data_type.accepts(value):
                    raise TypeMismatchError(
                        f"domain of parameter {self.name}", self.data_type.value, value
                    )
        if self.default is not None:
            self.check(self.default)

    @property
    def is_required(self) -> bool:
        return self.default is None

    def check(self, value: Any) -> Any:
        """Validate a supplied value against type and domain."""
        if not self.data_type.accepts(value):
            raise TypeMismatchError(f"parameter {self.name}", self.data_type.value, value)
        if self.domain is not None and value not in self.domain:
            raise ValueNotInDomainError(self.name, value, self.domain)
        return value


@dataclass(frozen=True)
class Literal:
    """Constant filter or option value."""

    value: Any


@dataclass(frozen=True)
class ParamRef:
    """Reference to a runtime parameter by name."""

    name: str


@dataclass(frozen=True)
class Comparison:
    """Operator applied to a literal or parameter operand."""

    op: ComparisonOp
    operand: Literal | ParamRef

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "op", ComparisonOp(self.op))
        except ValueError:
            raise InvalidReportConfigError(f"Unknown comparison operator: {self.op}") from None
        if not isinstance(self.operand, (Literal, ParamRef)):
            raise InvalidReportConfigError(
                f"Comparison operand must be a literal or a parameter reference, got {self.operand!r}"
            )


FilterExpr = Literal | ParamRef | Comparison


@dataclass(frozen=True)
class Filter:
    """Filter applied to one field."""

    field: str
    expr: FilterExpr

    def __post_init__(self) -> None:
        if not isinstance(self.expr, (Literal, ParamRef, Comparison)):
            object.__setattr__(self, "expr", Literal(self.expr))

    @property
    def op(self) -> ComparisonOp:
        if isinstance(self.expr, Comparison):
            return self.expr.op
        return ComparisonOp.EQ


@dataclass(frozen=True)
class ResolvedFilter:
    """Filter whose operand has been resolved to a concrete value."""

    field: str
    op: ComparisonOp
    value: Any

    def as_option(self) -> tuple[str, str, Any]:
        return (self.field, self.op.value, self.value)


@dataclass(frozen=True)
class SortKey:
    """One sort level."""

    field: str
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "direction", SortDirection(self.direction))
        except ValueError:
            raise InvalidReportConfigError(f"Unknown sort direction: {self.direction}") from None

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC


def _to_filter(item: Filter | Sequence[Any]) -> Filter:
    if isinstance(item, Filter):
        return item
    field_name, expr = item
    return Filter(field_name, expr)


def _to_sort_key(item: SortKey | str | Sequence[str]) -> SortKey:
    if isinstance(item, SortKey):
        return item
    if isinstance(item, str):
        return SortKey(item)
    return SortKey(*item)


@dataclass(frozen=True)
class ReportConfig:
    """Stored description of a report over one pump type.

    Read-only during a run; the ``with_*`` helpers return modified copies.
    """

    # Options are held in a read-only mapping, which is not hashable.
    __hash__ = None

    pump_type: str
    fields: tuple[str, ...] = ()
    filters: tuple[Filter, ...] = ()
    groups: tuple[str, ...] = ()
    sort: tuple[SortKey, ...] = ()
    options: Mapping[str, Any] = field(default_factory=dict)
    parameters: tuple[Parameter, ...] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "filters", tuple(_to_filter(f) for f in self.filters))
        object.__setattr__(self, "groups", tuple(self.groups))
        object.__setattr__(self, "sort", tuple(_to_sort_key(s) for s in self.sort))
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))
        object.__setattr__(self, "parameters", tuple(self.parameters))
        self._validate()

    def _validate(self) -> None:
        for label, names in (
            ("parameter", [p.name for p in self.parameters]),
            ("field", list(self.fields)),
            ("group", list(self.groups)),
            ("sort", [s.field for s in self.sort]),
        ):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            if duplicates:
                raise InvalidReportConfigError(f"Duplicate {label} names: {duplicates}")

        reserved = RESERVED_OPTIONS.intersection(self.options)
        if reserved:
            raise InvalidReportConfigError(f"Reserved option keys: {sorted(reserved)}")

    def parameter(self, name: str) -> Parameter | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def with_fields(self, *names: str) -> "ReportConfig":
        return replace(self, fields=names)

    def with_filter(self, field_name: str, expr: FilterExpr | Any) -> "ReportConfig":
        return replace(self, filters=self.filters + (Filter(field_name, expr),))

    def with_groups(self, *names: str) -> "ReportConfig":
        return replace(self, groups=names)

    def with_sort(self, *keys: SortKey | str | Sequence[str]) -> "ReportConfig":
        return replace(self, sort=tuple(_to_sort_key(k) for k in keys))

    def with_option(self, key: str, value: Any) -> "ReportConfig":
        return replace(self, options={**self.options, key: value})

    def with_parameter(self, parameter: Parameter) -> "ReportConfig":
        return replace(self, parameters=self.parameters + (parameter,))


@dataclass(frozen=True)
class ResultGroup:
    """Rows sharing one value of a group field.

    ``rows`` holds nested ResultGroups for all but the innermost level.
    """

    field: str
    value: Any
    rows: tuple["ResultGroup | Row", ...]

    def flat_rows(self) -> Iterator[Row]:
        for item in self.rows:
            if isinstance(item, ResultGroup):
                yield from item.flat_rows()
            else:
                yield item


@dataclass(frozen=True)
class ResultTable:
    """Result of a report run."""

    columns: tuple[str, ...]
    rows: tuple[ResultGroup | Row, ...]
    group_by: tuple[str, ...] = ()

    @property
    def is_grouped(self) -> bool:
        return bool(self.group_by)

    def flat_rows(self) -> Iterator[Row]:
        """Iterate result rows in display order, ignoring group nesting."""
        for item in self.rows:
            if isinstance(item, ResultGroup):
                yield from item.flat_rows()
            else:
                yield item

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self.flat_rows()), columns=list(self.columns), dtype=object)
