"""Unit tests for pump schema declaration."""

import pytest

from report_engine.domain.entities import Field
from report_engine.domain.enums import DataType
from report_engine.domain.errors import PumpDefinitionError, PumpNotImplementedError
from report_engine.domain.pump import DataPump, PumpSchema, PumpSchemaBuilder


class FerryCarriesDataPump(DataPump):
    """Pump declaring typed fields and an aggregated output shape."""

    schema = (
        PumpSchemaBuilder()
        .declare_field("travel_date", DataType.DATE)
        .declare_field("travel_time", DataType.TIME)
        .declare_fields(
            ["number_of_passengers", "number_of_vehicles", "length_of_vehicles"],
            DataType.INTEGER,
        )
        .declare_output_shape(["age", "gender", "count"])
        .declare_filterable(["travel_date"])
        .build()
    )


def test_fields_exposed_before_instantiation():
    """Test declared fields are readable from the class."""

    class AgeDatePump(DataPump):
        schema = (
            PumpSchemaBuilder()
            .declare_field("a", DataType.INTEGER)
            .declare_field("b", DataType.DATE)
            .build()
        )

    assert AgeDatePump.fields() == (
        Field("a", DataType.INTEGER),
        Field("b", DataType.DATE),
    )
    assert AgeDatePump.output_shape() == ("a", "b")


def test_declare_fields_shares_data_type():
    """Test declare_fields applies the type to each name in order."""
    names = [f.name for f in FerryCarriesDataPump.fields()]

    assert names == [
        "travel_date",
        "travel_time",
        "number_of_passengers",
        "number_of_vehicles",
        "length_of_vehicles",
    ]
    assert FerryCarriesDataPump.field("number_of_vehicles").data_type is DataType.INTEGER
    assert FerryCarriesDataPump.field("missing") is None


def test_output_shape_override():
    """Test explicit output shape replaces declared field order."""
    assert FerryCarriesDataPump.output_shape() == ("age", "gender", "count")
    assert FerryCarriesDataPump.schema.field_names[0] == "travel_date"


def test_filterable_fields():
    """Test filter capability declaration."""
    assert FerryCarriesDataPump.filterable_fields() == frozenset({"travel_date"})


def test_subclass_schemas_are_independent():
    """Test declarations do not leak between pump classes."""

    class OtherPump(DataPump):
        schema = PumpSchemaBuilder().declare_field("x", DataType.STRING).build()

    assert DataPump.fields() == ()
    assert OtherPump.fields() == (Field("x", DataType.STRING),)
    assert len(FerryCarriesDataPump.fields()) == 5


def test_schema_is_immutable():
    """Test built schema cannot be modified."""
    schema = FerryCarriesDataPump.schema

    assert isinstance(schema.fields, tuple)
    with pytest.raises(AttributeError):
        schema.fields = ()


def test_duplicate_field_rejected():
    """Test duplicate field declaration."""
    builder = PumpSchemaBuilder().declare_field("a", DataType.INTEGER)

    with pytest.raises(PumpDefinitionError):
        builder.declare_field("a", DataType.STRING)


def test_invalid_output_shape_rejected():
    """Test empty and duplicate output shapes."""
    with pytest.raises(PumpDefinitionError):
        PumpSchemaBuilder().declare_output_shape([])
    with pytest.raises(PumpDefinitionError):
        PumpSchemaBuilder().declare_output_shape(["a", "a"])


def test_unknown_filterable_rejected():
    """Test filterable names must be fields or output columns."""
    builder = PumpSchemaBuilder().declare_field("a", DataType.INTEGER).declare_filterable(["b"])

    with pytest.raises(PumpDefinitionError):
        builder.build()


def test_schema_must_be_pump_schema():
    """Test class definition fails with a non-schema attribute."""
    with pytest.raises(PumpDefinitionError):

        class BrokenPump(DataPump):
            schema = PumpSchemaBuilder()


def test_base_generate_not_implemented():
    """Test generate without override."""
    pump = FerryCarriesDataPump()

    with pytest.raises(PumpNotImplementedError) as exc_info:
        pump.generate({})

    assert isinstance(exc_info.value, NotImplementedError)
    assert "FerryCarriesDataPump" in str(exc_info.value)


def test_default_schema_is_empty():
    """Test base pump schema."""
    assert DataPump.schema == PumpSchema()
    assert DataPump.output_shape() == ()
