import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from jsonschema import ValidationError, validate
from pydantic import ValidationError as ModelValidationError

from core.constants.main_values import SERIAL_COLUMN_ID
from core.errors import InvalidFormatError
from core.table_ops import new_row_id, renumber_rows
from models.structure.table import Column, ImportResult, TableData, serial_column
from models.types.column_type import ColumnType, is_known

logger = logging.getLogger(__name__)

MIME_TYPE = "application/json"
EXTENSION = "json"

IMPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["columns", "rows"],
    "properties": {
        "columns": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "type"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "name": {"type": "string"},
                    "type": {"type": "string"},
                    "editable": {"type": "boolean"},
                },
            },
        },
        "rows": {
            "type": "array",
            "items": {"type": "object"},
        },
    },
}


def _export_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def encode(table: TableData, table_name: str | None) -> Dict[str, Any]:
    payload = table.to_payload()
    return {
        "tableName": table_name,
        "exportDate": _export_timestamp(),
        "columns": payload["columns"],
        "rows": payload["rows"],
        "metadata": {
            "totalRows": len(table.rows),
            "totalColumns": len(table.columns),
        },
    }


def dumps(document: Dict[str, Any]) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False, default=str)


def _normalize_columns(raw_columns: List[Dict[str, Any]]) -> List[Column]:
    columns: List[Column] = []
    serial: Column | None = None

    for raw in raw_columns:
        if not is_known(raw["type"]):
            raise InvalidFormatError(f"Invalid JSON format. Unknown column type: {raw['type']!r}")
        try:
            column = Column.model_validate(raw)
        except ModelValidationError as e:
            raise InvalidFormatError(f"Invalid JSON format. Bad column definition: {e}")

        if column.id == SERIAL_COLUMN_ID:
            if serial is None:
                serial = column
            continue
        columns.append(column)

    if serial is None:
        serial = serial_column()
    elif serial.type != ColumnType.NUMBER or serial.editable:
        serial = serial_column(serial.name)

    return [serial, *columns]


def decode(content: str | Dict[str, Any]) -> ImportResult:
    if isinstance(content, str):
        try:
            document = json.loads(content)
        except json.JSONDecodeError as e:
            raise InvalidFormatError(f"Invalid JSON format. {e}")
    else:
        document = content

    try:
        validate(instance=document, schema=IMPORT_SCHEMA)
    except ValidationError as e:
        raise InvalidFormatError(
            f"Invalid JSON format. Expected columns and rows properties. ({e.message})"
        )

    columns = _normalize_columns(document["columns"])

    rows = []
    for raw_row in document["rows"]:
        row = dict(raw_row)
        row_id = raw_row.get("id")
        row["id"] = str(row_id) if row_id not in (None, "") else new_row_id()
        rows.append(row)
    rows = renumber_rows(rows)

    logger.info(f"Decoded JSON: {len(columns)} columns, {len(rows)} rows")

    return ImportResult(columns=columns, rows=rows, imported=len(rows))
