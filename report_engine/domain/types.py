"""Domain types and aliases."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, time
from typing import TYPE_CHECKING, Any, TypedDict

Scalar = int | str | date | time | float | bool | None
Row = tuple[Any, ...]
RowSequence = Sequence[Sequence[Any]]

# Runtime parameter values supplied to a report run
ParamValues = Mapping[str, Any]

# Options mapping handed to DataPump.generate
PumpOptions = dict[str, Any]

# Keys reserved in PumpOptions
OPTION_FIELDS = "fields"
OPTION_FILTERS = "filters"
RESERVED_OPTIONS = frozenset({OPTION_FIELDS, OPTION_FILTERS})

# JSON-serializable types (recursive)
if TYPE_CHECKING:
    JsonValue = str | int | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
else:
    JsonValue = str | int | float | bool | None | dict | list


# Stored document structure
class FilterExprDict(TypedDict, total=False):
    """Filter expression dictionary structure."""
    kind: str
    value: JsonValue
    name: str
    op: str
    operand: "FilterExprDict"


class FilterDict(TypedDict):
    """Filter dictionary structure."""
    field: str
    expr: FilterExprDict


class SortKeyDict(TypedDict):
    """Sort key dictionary structure."""
    field: str
    direction: str
