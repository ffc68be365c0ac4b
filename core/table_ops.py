import uuid
from typing import Any, Iterable, List

from core.constants.main_values import SERIAL_COLUMN_ID
from models.structure.table import Column, Row, TableData, serial_column
from models.types.column_type import ColumnType, default_value, resolve_column_type


def new_column_id() -> str:
    return f"col_{uuid.uuid4().hex}"


def new_row_id() -> str:
    return f"row_{uuid.uuid4().hex}"


def default_table() -> TableData:
    return TableData(columns=[serial_column()], rows=[])


def renumber_rows(rows: Iterable[Row]) -> List[Row]:
    """Copies rows, setting serialNo to each row's 1-based position."""
    return [{**row, SERIAL_COLUMN_ID: index} for index, row in enumerate(rows, start=1)]


def add_column(table: TableData, name: str, column_type: ColumnType | str) -> TableData:
    column_type = resolve_column_type(column_type)
    column = Column(id=new_column_id(), name=name, type=column_type, editable=True)

    return TableData(
        columns=[*table.columns, column],
        rows=[{**row, column.id: default_value(column_type)} for row in table.rows],
    )


def delete_column(table: TableData, column_id: str) -> TableData:
    if column_id == SERIAL_COLUMN_ID:
        return table

    if table.column(column_id) is None:
        raise LookupError(f"Column '{column_id}' not found")

    return TableData(
        columns=[col for col in table.columns if col.id != column_id],
        rows=[{k: v for k, v in row.items() if k != column_id} for row in table.rows],
    )


def add_row(table: TableData) -> TableData:
    row: Row = {"id": new_row_id(), SERIAL_COLUMN_ID: len(table.rows) + 1}
    for col in table.columns:
        if col.id != SERIAL_COLUMN_ID:
            row[col.id] = default_value(col.type)

    return TableData(columns=list(table.columns), rows=[*table.rows, row])


def delete_row(table: TableData, row_id: str) -> TableData:
    if table.row_index(row_id) is None:
        raise LookupError(f"Row '{row_id}' not found")

    remaining = [row for row in table.rows if row.get("id") != row_id]
    return TableData(columns=list(table.columns), rows=renumber_rows(remaining))


def update_cell(table: TableData, row_id: str, column_id: str, value: Any) -> TableData:
    column = table.column(column_id)
    if column is None:
        raise LookupError(f"Column '{column_id}' not found")
    if not column.editable:
        raise ValueError(f"Column '{column.name}' is not editable")

    index = table.row_index(row_id)
    if index is None:
        raise LookupError(f"Row '{row_id}' not found")

    rows = list(table.rows)
    rows[index] = {**rows[index], column_id: value}
    return TableData(columns=list(table.columns), rows=rows)
