"""
Pivot aggregation: group rows by one categorical column and aggregate
every other numeric column per group.
"""

from collections import OrderedDict
from typing import Dict, List

from .data_model import ColumnAggregate, Dataset, PivotGroup, PivotTable, Row
from .descriptive import mean, median, sample_std
from .value_parsing import is_missing, numeric_values


def _group_key(value) -> str:
    """Stringified group key; ``""`` for values that do not form a group."""
    if is_missing(value) or value == 0:
        return ""
    return str(value)


def aggregate(values: List[float]) -> ColumnAggregate:
    return ColumnAggregate(
        count=len(values),
        sum=float(sum(values)),
        mean=mean(values),
        median=median(values),
        std=sample_std(values),
    )


def pivot(dataset: Dataset, group_column: str) -> PivotTable:
    """Group *dataset* by *group_column*.

    Rows whose group value is missing or falsy (``None``, ``""``, ``0``)
    belong to no group.  Groups keep the order in which their key first
    appears.  A (group, column) aggregate is present only when the
    group holds at least one numeric value in that column.

    Raises
    ------
    ColumnSelectionError
        *group_column* is empty or unknown.
    """
    dataset.require_columns(group_column)
    value_columns = [c for c in dataset.numeric_columns if c != group_column]

    buckets: "OrderedDict[str, List[Row]]" = OrderedDict()
    for row in dataset.rows:
        key = _group_key(row.get(group_column))
        if not key:
            continue
        buckets.setdefault(key, []).append(row)

    groups: List[PivotGroup] = []
    for key, rows in buckets.items():
        columns: Dict[str, ColumnAggregate] = {}
        for name in value_columns:
            values = numeric_values([r.get(name) for r in rows])
            if values:
                columns[name] = aggregate(values)
        groups.append(PivotGroup(key=key, row_count=len(rows), columns=columns))

    return PivotTable(group_column=group_column, groups=groups)
