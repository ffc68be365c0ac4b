"""
CSV encoding and decoding for tables.

The format is RFC 4180-like with two known limitations on decode: a newline
always ends a record, even inside quotes, and doubled quotes inside a quoted
field are not collapsed back to one.
"""

import json
import logging
from typing import Any, List

from core.constants.main_values import SERIAL_COLUMN_ID, SERIAL_HEADER_ALIASES
from core.errors import EmptyInputError
from core.inference import infer
from core.table_ops import new_column_id, new_row_id
from models.processors.value_processor import coerce, to_text
from models.structure.table import Column, ImportResult, Row, TableData, serial_column

logger = logging.getLogger(__name__)

MIME_TYPE = "text/csv"
EXTENSION = "csv"


def _format_field(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        value = json.dumps(value)

    text = to_text(value)
    if isinstance(value, str) and ("," in text or '"' in text):
        return '"' + text.replace('"', '""') + '"'
    return text


def encode(table: TableData) -> str:
    lines = [",".join(col.name for col in table.columns)]
    for row in table.rows:
        lines.append(",".join(_format_field(row.get(col.id)) for col in table.columns))
    return "\n".join(lines)


def parse_line(line: str) -> List[str]:
    """Splits one record on commas outside quotes and trims every field."""
    fields = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def _is_serial_header(header: str) -> bool:
    return header.lower() in SERIAL_HEADER_ALIASES


def decode(text: str) -> ImportResult:
    lines = [line for line in text.split("\n") if line.strip()]
    if not lines:
        raise EmptyInputError("CSV file is empty")

    headers = parse_line(lines[0])
    data_rows = [parse_line(line) for line in lines[1:]]

    columns: List[Column] = [serial_column()]
    # header position -> column
    mapped: List[tuple[int, Column]] = []

    for index, header in enumerate(headers):
        if _is_serial_header(header):
            continue
        values = [cells[index] if index < len(cells) else None for cells in data_rows]
        column = Column(id=new_column_id(), name=header, type=infer(values), editable=True)
        columns.append(column)
        mapped.append((index, column))

    rows: List[Row] = []
    for position, cells in enumerate(data_rows, start=1):
        row: Row = {"id": new_row_id(), SERIAL_COLUMN_ID: position}
        for index, column in mapped:
            raw = cells[index] if index < len(cells) else None
            row[column.id] = coerce(raw, column.type)
        rows.append(row)

    logger.info(f"Decoded CSV: {len(columns) - 1} columns, {len(rows)} rows")

    return ImportResult(columns=columns, rows=rows, imported=len(rows))
