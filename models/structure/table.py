from typing import Any, Dict, List
from pydantic import BaseModel, ConfigDict, Field

from models.types.column_type import ColumnType
from core.constants.main_values import SERIAL_COLUMN_ID, SERIAL_COLUMN_NAME

Row = Dict[str, Any]


class Column(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: ColumnType
    editable: bool = True


def serial_column(name: str = SERIAL_COLUMN_NAME) -> Column:
    return Column(id=SERIAL_COLUMN_ID, name=name, type=ColumnType.NUMBER, editable=False)


class TableData(BaseModel):
    """
    Columns plus rows of one sheet. Treated as a value: edits build a new
    TableData instead of mutating this one.
    """
    model_config = ConfigDict(frozen=True)

    columns: List[Column] = Field(default_factory=lambda: [serial_column()])
    rows: List[Row] = Field(default_factory=list)

    def column(self, column_id: str) -> Column | None:
        for col in self.columns:
            if col.id == column_id:
                return col
        return None

    def row_index(self, row_id: str) -> int | None:
        for index, row in enumerate(self.rows):
            if row.get("id") == row_id:
                return index
        return None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ImportResult(TableData):
    imported: int = 0
