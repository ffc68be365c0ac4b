from typing import Any
from pydantic import BaseModel, Field
from datetime import datetime

from models.types.column_type import ColumnType

class CreateColumnRequest(BaseModel):
    name: str = Field(..., min_length=1)
    type: ColumnType = ColumnType.TEXT

class UpdateCellRequest(BaseModel):
    value: Any = None

class TableSummary(BaseModel):
    id: str
    name: str | None = None
    columns_count: int
    rows_count: int
    version: int
    updated_at: datetime | None = None
