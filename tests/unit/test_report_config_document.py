"""Unit tests for stored report configuration documents."""

from datetime import date

import pytest
from pydantic import ValidationError

from report_engine.application.dto.report_config import ReportConfigDocument
from report_engine.domain.entities import (
    Comparison,
    Filter,
    Literal,
    Parameter,
    ParamRef,
    ReportConfig,
    SortKey,
)
from report_engine.domain.enums import ComparisonOp, DataType, SortDirection
from report_engine.domain.errors import TypeMismatchError
from report_engine.domain.pump import DataPump, PumpSchemaBuilder
from report_engine.infrastructure.pumps.registry import PumpRegistry


@pytest.fixture
def document_data():
    """Create stored document."""
    return {
        "name": "passengers since",
        "pumpType": "ferry",
        "fields": ["travel_date", "number_of_passengers"],
        "filters": [
            {
                "field": "travel_date",
                "expr": {
                    "kind": "comparison",
                    "op": ">=",
                    "operand": {"kind": "param", "name": "since"},
                },
            },
            {"field": "travel_date", "expr": {"kind": "literal", "value": "2024-12-31"}},
        ],
        "groups": ["travel_date"],
        "sort": [{"field": "number_of_passengers", "direction": "desc"}],
        "options": {"region": {"kind": "param", "name": "region"}, "limit": 10},
        "parameters": [
            {"name": "since", "dataType": "date", "default": "2024-01-01"},
            {"name": "region", "dataType": "string", "domain": ["north", "south"]},
        ],
    }


@pytest.fixture
def ferry_registry():
    """Create registry with a ferry pump."""

    class FerryPump(DataPump):
        schema = (
            PumpSchemaBuilder()
            .declare_field("travel_date", DataType.DATE)
            .declare_field("number_of_passengers", DataType.INTEGER)
            .build()
        )

    registry = PumpRegistry()
    registry.register(FerryPump, "ferry")
    return registry


def test_parse_document(document_data):
    """Test parsing stored document."""
    document = ReportConfigDocument(**document_data)

    assert document.pump_type == "ferry"
    assert document.selected_fields == ["travel_date", "number_of_passengers"]
    assert document.filters[0].expr.kind == "comparison"
    assert document.sort[0].direction is SortDirection.DESC
    assert document.parameters[0].data_type is DataType.DATE


def test_to_domain(document_data, ferry_registry):
    """Test conversion to a domain configuration with type coercion."""
    config = ReportConfigDocument(**document_data).to_domain(ferry_registry)

    assert config.name == "passengers since"
    assert config.filters == (
        Filter("travel_date", Comparison(ComparisonOp.GE, ParamRef("since"))),
        Filter("travel_date", Literal(date(2024, 12, 31))),
    )
    assert config.sort == (SortKey("number_of_passengers", SortDirection.DESC),)
    assert config.options == {"region": ParamRef("region"), "limit": 10}
    assert config.parameters == (
        Parameter("since", DataType.DATE, default=date(2024, 1, 1)),
        Parameter("region", DataType.STRING, domain=("north", "south")),
    )


def test_to_domain_without_registry_keeps_literals(document_data):
    """Test literal values stay as stored when the pump is unknown."""
    config = ReportConfigDocument(**document_data).to_domain()

    assert config.filters[1].expr == Literal("2024-12-31")


def test_to_domain_rejects_uncoercible_literal(document_data, ferry_registry):
    """Test stored literal that cannot become the field type."""
    document_data["filters"][1]["expr"]["value"] = "not a date"

    with pytest.raises(TypeMismatchError):
        ReportConfigDocument(**document_data).to_domain(ferry_registry)


def test_invalid_expression_kind(document_data):
    """Test unknown expression kind."""
    document_data["filters"][0]["expr"] = {"kind": "today"}

    with pytest.raises(ValidationError):
        ReportConfigDocument(**document_data)


def test_round_trip_through_json(ferry_registry):
    """Test domain -> JSON -> domain keeps the configuration."""
    config = ReportConfig(
        pump_type="ferry",
        fields=["travel_date"],
        filters=[("travel_date", Comparison(ComparisonOp.LT, Literal(date(2024, 6, 1))))],
        options={"region": ParamRef("region"), "flag": Literal(True)},
        parameters=[Parameter("region", DataType.STRING, domain=["north"], label="Region")],
    )

    json_data = ReportConfigDocument.from_domain(config).to_json()
    restored = ReportConfigDocument.model_validate_json(json_data).to_domain(ferry_registry)

    assert '"pumpType":"ferry"' in json_data
    assert restored == config


def test_literal_type_is_stored():
    """Test date literals keep their type without a registry."""
    config = ReportConfig(
        pump_type="ferry",
        filters=[("travel_date", Literal(date(2024, 1, 15)))],
        options={"since": Literal(date(2024, 1, 1)), "label": Literal("x")},
    )

    json_data = ReportConfigDocument.from_domain(config).to_json()
    restored = ReportConfigDocument.model_validate_json(json_data).to_domain()

    assert '"value":"2024-01-15","dataType":"date"' in json_data
    assert restored.filters[0].expr == Literal(date(2024, 1, 15))
    assert restored.options["since"] == Literal(date(2024, 1, 1))
    assert restored.options["label"] == Literal("x")
