# materializer.py
"""
Turns a row stream into a SelectResult.

The stream is read once, front to back. Each column is counted by name across
the whole result: columns seen in more than one row are "common" and can be
shown as a regular table, columns seen in exactly one row are "dynamic".
Both lists keep the order in which the columns were first seen.
"""
import logging
from typing import Dict, Iterable, List, Mapping

from models import ColumnType, ExtendedColumnName, Limits, PartitionKey, Row, SelectResult

LOG = logging.getLogger(__name__)


def _collect_row(cells, type_map: Mapping[str, ColumnType], columns_limit: int) -> Row:
    collected = []
    for index, cell in enumerate(cells):
        if index >= columns_limit:
            LOG.debug("Reached columns limit: %d", columns_limit)
            break
        if cell.is_null:
            continue
        column_type = type_map.get(cell.name.lower())
        if column_type is None:
            LOG.debug("Column type not found for: %s - using regular", cell.name)
            column_type = ColumnType.REGULAR
        column = ExtendedColumnName(cell.name, data_type=cell.data_type, column_type=column_type)
        collected.append((column, cell.value))
    return Row(tuple(collected))


def materialize(rows: Iterable, type_map: Mapping[str, ColumnType], limits: Limits) -> SelectResult:
    counts: Dict[ExtendedColumnName, int] = {}
    partition_columns: List[ExtendedColumnName] = []
    collected: List[Row] = []

    consumed = 0
    for cells in rows:
        consumed += 1
        row = _collect_row(cells, type_map, limits.columns_limit)
        if row.cells:
            collected.append(row)
            for column in row.columns:
                counts[column] = counts.get(column, 0) + 1
                if column.column_type == ColumnType.PARTITION_KEY and column not in partition_columns:
                    partition_columns.append(column)
        if consumed >= limits.rows_limit:
            LOG.debug("Reached rows limit: %d", limits.rows_limit)
            break

    if not collected:
        return SelectResult.empty()

    if len(partition_columns) > 1:
        LOG.warning(
            "Result carries %d partition key columns (%s), using %s as row identifier",
            len(partition_columns), ", ".join(c.part for c in partition_columns), partition_columns[0],
        )

    # dict keeps the first occurrence of each column as key, so order is first-seen
    common = tuple(col for col, count in counts.items() if count > 1)
    dynamic = tuple(col for col, count in counts.items() if count == 1)
    return SelectResult(
        common_columns=common,
        dynamic_columns=dynamic,
        rows=tuple(collected),
        partition_key=PartitionKey.from_column(partition_columns[0]) if partition_columns else None,
        partition_key_columns=tuple(partition_columns),
    )
