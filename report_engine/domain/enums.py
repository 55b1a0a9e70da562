"""Domain enums for field types, filter operators and run stages."""

from datetime import date, datetime, time
from enum import Enum

from pydantic import TypeAdapter


class DataType(str, Enum):
    """Data type of a field or parameter.

    Closed set: supporting a new type means adding a member here together
    with its entry in ``_NATIVE_TYPES``.
    """

    INTEGER = "integer"
    DATE = "date"
    TIME = "time"
    STRING = "string"

    @classmethod
    def parse(cls, value: "DataType | str") -> "DataType":
        """Parse a data type from an enum member or its name.

        Accepts the plain value (``"integer"``) and the symbol spelling
        (``":integer"``). Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Unknown data type: {value!r}")
        return cls(value.lstrip(":").lower())

    @classmethod
    def infer(cls, value: object) -> "DataType | None":
        """Data type of a runtime value, None when no member accepts it."""
        for data_type in cls:
            if data_type.accepts(value):
                return data_type
        return None

    def accepts(self, value: object) -> bool:
        """Check whether a runtime value is compatible with this type."""
        if self is DataType.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        if self is DataType.DATE:
            return isinstance(value, date) and not isinstance(value, datetime)
        return isinstance(value, _NATIVE_TYPES[self])

    def coerce(self, value: object) -> object:
        """Convert a JSON-friendly value to the native type."""
        return TypeAdapter(_NATIVE_TYPES[self]).validate_python(value)


_NATIVE_TYPES: dict[DataType, type] = {
    DataType.INTEGER: int,
    DataType.DATE: date,
    DataType.TIME: time,
    DataType.STRING: str,
}


class ComparisonOp(str, Enum):
    """Comparison operator of a filter."""

    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


class SortDirection(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class RunStage(str, Enum):
    """Stage of a report run, in execution order."""

    CONFIGURED = "configured"
    PARAMETERS_RESOLVED = "parameters_resolved"
    GENERATED = "generated"
    GROUPED = "grouped"
    SORTED = "sorted"
    COMPLETE = "complete"
