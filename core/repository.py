import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from core import wal
from core import state
from core.errors import TableNotFoundError
from core.table_ops import default_table
from models.document_types.table_document import TableDocument
from models.interfaces.store_interface import ITableStore
from models.structure.table import TableData

logger = logging.getLogger(__name__)


class WalTableStore(ITableStore):
    """
    Table documents kept in memory and made durable through the write-ahead
    log. Every save is a whole-document replace: the new document is built
    aside, logged, then swapped in, so a failed log write leaves the previous
    document untouched.
    """

    async def load(self, table_id: str) -> TableData:
        async with state.db_lock:
            doc = state.db_tables_by_id.get(table_id)
            if not doc:
                raise TableNotFoundError(table_id)
            return doc.to_table()

    async def save(self, table_id: str, table: TableData) -> TableData:
        async with state.db_lock:
            existing = state.db_tables_by_id.get(table_id)
            now = datetime.now(timezone.utc)

            if existing:
                new_doc = existing.model_copy(deep=True)
                new_doc.replace_table(table, now)
            else:
                new_doc = TableDocument(
                    id=table_id,
                    columns=list(table.columns),
                    rows=[dict(row) for row in table.rows],
                )

            await self._write(new_doc)

        logger.info(f"Table saved: {table_id} (v{new_doc.version}, {len(table.rows)} rows)")
        return new_doc.to_table()

    async def create_default(self, table_id: str, name: str | None = None) -> TableData:
        async with state.db_lock:
            if table_id in state.db_tables_by_id:
                raise ValueError(f"Table '{table_id}' already exists.")

            base = default_table()
            new_doc = TableDocument(id=table_id, name=name, columns=base.columns, rows=base.rows)
            await self._write(new_doc)

        logger.info(f"Table created: {table_id}")
        return new_doc.to_table()

    async def delete(self, table_id: str) -> None:
        async with state.db_lock:
            if table_id not in state.db_tables_by_id:
                raise TableNotFoundError(table_id)

            await wal.log_to_wal({"op": "delete_table", "table_id": table_id})
            del state.db_tables_by_id[table_id]

        logger.info(f"Table deleted: {table_id}")

    async def list_tables(self) -> List[Dict[str, Any]]:
        async with state.db_lock:
            return [doc.summary() for doc in state.db_tables_by_id.values()]

    async def get_name(self, table_id: str) -> str | None:
        doc = state.db_tables_by_id.get(table_id)
        return doc.name if doc else None

    async def _write(self, doc: TableDocument) -> None:
        """Logs and applies one document replace. Caller holds db_lock."""
        wal_op = {"op": "save_table", "doc": doc.model_dump(by_alias=True, mode="json")}
        await wal.log_to_wal(wal_op)
        state.db_tables_by_id[doc.id] = doc
