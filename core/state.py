import asyncio
from typing import Dict
from models.document_types.table_document import TableDocument

db_tables_by_id: Dict[str, TableDocument] = {}

db_lock = asyncio.Lock()
wal_lock = asyncio.Lock()


def reset() -> None:
    db_tables_by_id.clear()
