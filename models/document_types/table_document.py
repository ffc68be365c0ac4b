import json
import hashlib
from datetime import datetime, timezone
from pydantic import BaseModel, Field, model_validator
from typing import Any, Dict, List

from models.structure.table import Column, Row, TableData, serial_column


class TableDocument(BaseModel):
    # --- Header ---
    id: str = Field(alias="_id")
    name: str | None = None

    # --- Body ---
    columns: List[Column] = Field(default_factory=lambda: [serial_column()])
    rows: List[Row] = Field(default_factory=list)

    # --- Footer ---
    body_hash: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    updated_at: datetime | None = None
    version: int = 1

    model_config = {"populate_by_name": True}

    def _update_body_hash(self) -> None:
        body = {
            "columns": [col.model_dump(mode="json") for col in self.columns],
            "rows": self.rows,
        }
        body_str = json.dumps(body, sort_keys=True, default=str).encode('utf-8')
        hash_obj = hashlib.sha256(body_str)
        self.body_hash = hash_obj.hexdigest()

    @model_validator(mode='after')
    def _run_hash_validator(self) -> 'TableDocument':
        self._update_body_hash()
        return self

    def get_id_str(self) -> str:
        return self.id

    def to_table(self) -> TableData:
        return TableData(columns=list(self.columns), rows=[dict(row) for row in self.rows])

    def replace_table(self, table: TableData, now: datetime) -> None:
        """Swaps in a whole new table body. Caller holds the store lock."""
        self.columns = list(table.columns)
        self.rows = [dict(row) for row in table.rows]
        self.version += 1
        self.updated_at = now
        self._update_body_hash()

    def pretty(self) -> str:
        return self.model_dump_json(indent=2, by_alias=True)

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "columns_count": len(self.columns),
            "rows_count": len(self.rows),
            "version": self.version,
            "updated_at": self.updated_at,
        }
