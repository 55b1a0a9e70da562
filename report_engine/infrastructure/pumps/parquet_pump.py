"""Parquet file pump with PyArrow."""

import pyarrow.parquet as pq
import structlog

from report_engine.domain.pump import DataPump
from report_engine.domain.types import OPTION_FILTERS, PumpOptions, Row

logger = structlog.get_logger()


class ParquetPump(DataPump):
    """Pump reading a parquet file with column pruning and predicate pushdown.

    Subclasses declare the schema; columns are read in output shape order.
    Filters on fields declared filterable are evaluated by PyArrow while
    reading. The file comes from ``options["path"]`` or the ``path`` class
    attribute.
    """

    path: str | None = None

    def generate(self, options: PumpOptions) -> list[Row]:
        """Read rows from the parquet file."""
        path = options.get("path") or self.path
        if not path:
            raise ValueError(f"No parquet path configured for {type(self).__name__}")

        columns = list(self.output_shape())
        # PyArrow accepts the same operator spellings as ComparisonOp
        filters = [tuple(f) for f in options.get(OPTION_FILTERS, [])] or None

        logger.info(
            "reading_parquet",
            path=path,
            columns=columns,
            filters=filters,
        )

        try:
            table = pq.read_table(path, columns=columns, filters=filters)
        except (OSError, ValueError) as e:
            logger.error("failed_to_read_parquet", path=path, error=str(e))
            raise

        rows = list(zip(*(table.column(name).to_pylist() for name in columns)))

        logger.info(
            "parquet_read_success",
            path=path,
            row_count=len(rows),
            size_mb=table.nbytes / (1024 * 1024),
        )

        return rows
