"""Row operations for report results: filtering, grouping and sorting."""

import operator
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable

import pandas as pd

from report_engine.domain.entities import ResolvedFilter, ResultGroup, SortKey
from report_engine.domain.enums import ComparisonOp, DataType
from report_engine.domain.errors import TypeMismatchError
from report_engine.domain.types import Row, RowSequence

_COMPARISON_OPS: dict[ComparisonOp, Callable[[Any, Any], bool]] = {
    ComparisonOp.EQ: operator.eq,
    ComparisonOp.NE: operator.ne,
    ComparisonOp.LT: operator.lt,
    ComparisonOp.LE: operator.le,
    ComparisonOp.GT: operator.gt,
    ComparisonOp.GE: operator.ge,
}


@dataclass
class FrameGroup:
    """Node of the grouping tree.

    The root has ``field`` None and holds every row. Leaves have no children.
    """

    field: str | None
    value: Any
    frame: pd.DataFrame
    children: list["FrameGroup"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


def to_frame(
    rows: RowSequence,
    columns: Sequence[str],
    field_types: Mapping[str, DataType] | None = None,
) -> pd.DataFrame:
    """Build a frame from positional rows.

    Object dtype keeps the values exactly as the pump produced them.
    Raises ValueError when a row does not match the column list or a cell of
    a typed column holds a value of another type. None is allowed anywhere.
    """
    width = len(columns)
    checks = [
        (position, name, field_types[name])
        for position, name in enumerate(columns)
        if field_types and name in field_types
    ]
    records: list[Row] = []
    for index, row in enumerate(rows):
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise ValueError(f"Row {index} is not a sequence: {row!r}")
        if len(row) != width:
            raise ValueError(
                f"Row {index} has {len(row)} values, expected {width} {list(columns)}"
            )
        for position, name, data_type in checks:
            cell = row[position]
            if cell is not None and not data_type.accepts(cell):
                raise ValueError(
                    f"Row {index} column {name}: expected {data_type.value}, "
                    f"got {type(cell).__name__} {cell!r}"
                )
        records.append(tuple(row))
    return pd.DataFrame(records, columns=list(columns), dtype=object)


def _matches(compare: Callable[[Any, Any], bool], column: str, cell: Any, value: Any) -> bool:
    # Nulls never match.
    if cell is None:
        return False
    try:
        return bool(compare(cell, value))
    except TypeError:
        raise TypeMismatchError(f"field {column}", type(cell).__name__, value) from None


def apply_filters(frame: pd.DataFrame, filters: Iterable[ResolvedFilter]) -> pd.DataFrame:
    """Keep rows matching every filter."""
    mask = pd.Series(True, index=frame.index)
    for flt in filters:
        compare = _COMPARISON_OPS[flt.op]
        matched = frame[flt.field].map(
            lambda cell, c=compare, f=flt: _matches(c, f.field, cell, f.value)
        )
        mask &= matched.astype(bool)
    return frame[mask]


def group_rows(frame: pd.DataFrame, groups: Sequence[str]) -> FrameGroup:
    """Partition rows into nested groups.

    Groups keep the order in which their key first appears; rows keep
    emission order. Without group fields the root is the only group.
    """
    root = FrameGroup(field=None, value=None, frame=frame)
    root.children = _split(frame, groups)
    return root


def _split(frame: pd.DataFrame, groups: Sequence[str]) -> list[FrameGroup]:
    if not groups:
        return []
    group_field, rest = groups[0], groups[1:]
    children = []
    for _, sub in frame.groupby(group_field, sort=False, dropna=False):
        # The groupby key turns None into NaN; take the value from the rows.
        value = sub[group_field].iloc[0]
        children.append(FrameGroup(group_field, value, sub, _split(sub, rest)))
    return children


def sort_frame(frame: pd.DataFrame, sort_keys: Sequence[SortKey]) -> pd.DataFrame:
    """Stable multi-key sort, nulls last.

    Sorting by the last key first and each preceding key after it with a
    stable algorithm yields the primary-key-first ordering.
    """
    for key in reversed(sort_keys):
        frame = frame.sort_values(
            key.field,
            ascending=not key.descending,
            kind="mergesort",
            na_position="last",
        )
    return frame


def _order_children(children: list[FrameGroup], key: SortKey) -> list[FrameGroup]:
    present = [c for c in children if c.value is not None]
    missing = [c for c in children if c.value is None]
    ordered = sorted(present, key=lambda c: c.value, reverse=key.descending)
    return ordered + missing


def sort_groups(root: FrameGroup, sort_keys: Sequence[SortKey]) -> FrameGroup:
    """Sort rows inside each leaf group.

    A sort key naming a group field orders that level's groups by value
    instead of first appearance.
    """
    if root.is_leaf:
        return FrameGroup(root.field, root.value, sort_frame(root.frame, sort_keys))

    children = root.children
    level_key = next((k for k in sort_keys if k.field == children[0].field), None)
    if level_key is not None:
        children = _order_children(children, level_key)
    return FrameGroup(
        root.field,
        root.value,
        root.frame,
        [sort_groups(child, sort_keys) for child in children],
    )


def frame_rows(frame: pd.DataFrame, columns: Sequence[str]) -> tuple[Row, ...]:
    """Project frame to columns and return plain row tuples."""
    return tuple(frame[list(columns)].itertuples(index=False, name=None))


def to_result_rows(root: FrameGroup, columns: Sequence[str]) -> tuple[ResultGroup | Row, ...]:
    """Convert the grouping tree to result rows and ResultGroups."""
    if root.is_leaf:
        return frame_rows(root.frame, columns)
    return tuple(
        ResultGroup(child.field, child.value, to_result_rows(child, columns))
        for child in root.children
    )
