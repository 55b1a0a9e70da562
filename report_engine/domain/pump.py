"""DataPump base class and schema declaration.

A pump declares its schema once, in the class body, with a
``PumpSchemaBuilder``::

    class FerryCarriesDataPump(DataPump):
        schema = (
            PumpSchemaBuilder()
            .declare_field("travel_date", DataType.DATE)
            .declare_field("travel_time", DataType.TIME)
            .declare_fields(["number_of_passengers", "number_of_vehicles"], DataType.INTEGER)
            .build()
        )

        def generate(self, options):
            ...

The built ``PumpSchema`` is immutable and readable from the class before
any instance exists.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from report_engine.domain.entities import Field
from report_engine.domain.enums import DataType
from report_engine.domain.errors import PumpDefinitionError, PumpNotImplementedError
from report_engine.domain.types import PumpOptions, RowSequence


@dataclass(frozen=True)
class PumpSchema:
    """Immutable schema of a pump type."""

    fields: tuple[Field, ...] = ()
    generating_array_as: tuple[str, ...] | None = None
    filterable: frozenset[str] = frozenset()

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def output_shape(self) -> tuple[str, ...]:
        """Column order of generated rows."""
        if self.generating_array_as is not None:
            return self.generating_array_as
        return self.field_names

    def field(self, name: str) -> Field | None:
        for declared in self.fields:
            if declared.name == name:
                return declared
        return None

    def data_type_of(self, name: str) -> DataType | None:
        declared = self.field(name)
        return declared.data_type if declared else None


class PumpSchemaBuilder:
    """Collects field declarations and builds a PumpSchema."""

    def __init__(self) -> None:
        """Initialize empty builder."""
        self._fields: list[Field] = []
        self._output_shape: tuple[str, ...] | None = None
        self._filterable: set[str] = set()

    def declare_field(self, name: str, data_type: DataType | str) -> "PumpSchemaBuilder":
        """Append one field."""
        if any(f.name == name for f in self._fields):
            raise PumpDefinitionError(f"Field declared twice: {name}")
        self._fields.append(Field(name, data_type))
        return self

    def declare_fields(self, names: Iterable[str], data_type: DataType | str) -> "PumpSchemaBuilder":
        """Append several fields sharing one data type."""
        for name in names:
            self.declare_field(name, data_type)
        return self

    def declare_output_shape(self, names: Iterable[str]) -> "PumpSchemaBuilder":
        """Override the column order of generated rows."""
        shape = tuple(names)
        if not shape:
            raise PumpDefinitionError("Output shape must name at least one column")
        if len(set(shape)) != len(shape):
            raise PumpDefinitionError(f"Duplicate columns in output shape: {list(shape)}")
        self._output_shape = shape
        return self

    def declare_filterable(self, names: Iterable[str]) -> "PumpSchemaBuilder":
        """Mark fields whose filters the pump applies itself in generate."""
        self._filterable.update(names)
        return self

    def build(self) -> PumpSchema:
        """Build the immutable schema."""
        schema = PumpSchema(
            fields=tuple(self._fields),
            generating_array_as=self._output_shape,
            filterable=frozenset(self._filterable),
        )
        unknown = schema.filterable - set(schema.field_names) - set(schema.output_shape)
        if unknown:
            raise PumpDefinitionError(f"Filterable names are not fields: {sorted(unknown)}")
        return schema


class DataPump:
    """Base class of all pumps.

    Subclasses set ``schema`` and implement ``generate``. Rows returned by
    ``generate`` are sequences positionally aligned to ``output_shape``.
    """

    schema: PumpSchema = PumpSchema()

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        if not isinstance(cls.schema, PumpSchema):
            raise PumpDefinitionError(
                f"{cls.__name__}.schema must be a PumpSchema, got {type(cls.schema).__name__}"
            )

    @classmethod
    def fields(cls) -> tuple[Field, ...]:
        return cls.schema.fields

    @classmethod
    def output_shape(cls) -> tuple[str, ...]:
        return cls.schema.output_shape

    @classmethod
    def filterable_fields(cls) -> frozenset[str]:
        return cls.schema.filterable

    @classmethod
    def field(cls, name: str) -> Field | None:
        return cls.schema.field(name)

    def generate(self, options: PumpOptions) -> RowSequence:
        """Generate rows shaped by ``output_shape``."""
        raise PumpNotImplementedError(
            f"Implement generate method in {type(self).__name__}"
        )
