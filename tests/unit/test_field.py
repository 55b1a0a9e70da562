"""Unit tests for fields and data types."""

from datetime import date, datetime, time

import pytest

from report_engine.domain.entities import Field
from report_engine.domain.enums import DataType
from report_engine.domain.errors import InvalidDataTypeError


@pytest.mark.parametrize("data_type", list(DataType))
def test_field_accepts_every_data_type(data_type):
    """Test field construction for each supported type."""
    field = Field("value", data_type)

    assert field.name == "value"
    assert field.data_type == data_type


def test_field_parses_type_names():
    """Test field construction from type names."""
    assert Field("age", "integer").data_type is DataType.INTEGER
    assert Field("age", ":integer").data_type is DataType.INTEGER
    assert Field("day", "DATE").data_type is DataType.DATE


@pytest.mark.parametrize("data_type", ["float", ":decimal", "", None, 3])
def test_field_rejects_unknown_type(data_type):
    """Test unknown data type error."""
    with pytest.raises(InvalidDataTypeError) as exc_info:
        Field("value", data_type)

    assert exc_info.value.data_type == data_type
    assert exc_info.value.code == "INVALID_DATA_TYPE"


def test_field_rejects_invalid_name():
    """Test invalid field name."""
    with pytest.raises(ValueError):
        Field("not a name", DataType.STRING)


def test_field_is_immutable():
    """Test field attributes cannot be reassigned in place."""
    field = Field("age", DataType.INTEGER)

    with pytest.raises(AttributeError):
        field.data_type = DataType.STRING


def test_field_renamed():
    """Test renaming returns a new field."""
    field = Field("age", DataType.INTEGER)
    renamed = field.renamed("years")

    assert renamed.name == "years"
    assert renamed.data_type is DataType.INTEGER
    assert field.name == "age"


def test_field_with_data_type_validates():
    """Test data type replacement goes through validation."""
    field = Field("age", DataType.INTEGER)

    assert field.with_data_type("string").data_type is DataType.STRING
    with pytest.raises(InvalidDataTypeError):
        field.with_data_type("blob")


def test_data_type_accepts():
    """Test runtime type compatibility."""
    assert DataType.INTEGER.accepts(21)
    assert not DataType.INTEGER.accepts("21")
    assert not DataType.INTEGER.accepts(True)
    assert DataType.DATE.accepts(date(2024, 1, 1))
    assert not DataType.DATE.accepts(datetime(2024, 1, 1, 10, 0))
    assert DataType.TIME.accepts(time(10, 30))
    assert DataType.STRING.accepts("M")
    assert not DataType.STRING.accepts(1)


def test_data_type_coerce():
    """Test coercion of JSON values."""
    assert DataType.DATE.coerce("2024-01-15") == date(2024, 1, 15)
    assert DataType.TIME.coerce("10:30:00") == time(10, 30)
    assert DataType.INTEGER.coerce("21") == 21
