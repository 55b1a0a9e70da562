"""In-memory rows pump."""

from collections.abc import Iterable, Sequence
from typing import Any

from report_engine.domain.pump import DataPump, PumpSchema
from report_engine.domain.types import PumpOptions, Row


class RowsPump(DataPump):
    """Pump serving a fixed sequence of rows.

    Useful for fixtures, demos and synthetic data. Subclasses set ``schema``
    and ``rows``; ``options`` are ignored and no filter is honoured.
    """

    rows: tuple[Row, ...] = ()

    def generate(self, options: PumpOptions) -> list[Row]:
        """Return a copy of the stored rows."""
        return [tuple(row) for row in self.rows]

    @classmethod
    def define(
        cls,
        name: str,
        schema: PumpSchema,
        rows: Iterable[Sequence[Any]],
    ) -> type["RowsPump"]:
        """Create a RowsPump subclass holding the given rows."""
        return type(name, (cls,), {"schema": schema, "rows": tuple(tuple(r) for r in rows)})
