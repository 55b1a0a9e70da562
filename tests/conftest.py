"""Shared fixtures."""

import pytest

from report_engine.domain.enums import DataType
from report_engine.domain.pump import PumpSchemaBuilder
from report_engine.infrastructure.pumps.registry import PumpRegistry
from report_engine.infrastructure.pumps.rows_pump import RowsPump

CENSUS_ROWS = [
    (25, "M", 3),
    (25, "F", 2),
    (30, "M", 1),
]


@pytest.fixture
def census_pump():
    """Create pump serving age/gender/count rows."""
    schema = (
        PumpSchemaBuilder()
        .declare_field("age", DataType.INTEGER)
        .declare_field("gender", DataType.STRING)
        .declare_field("count", DataType.INTEGER)
        .build()
    )
    return RowsPump.define("CensusPump", schema, CENSUS_ROWS)


@pytest.fixture
def registry(census_pump):
    """Create registry with the census pump."""
    registry = PumpRegistry()
    registry.register(census_pump, "census")
    return registry
