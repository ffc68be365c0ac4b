import os
import json
import asyncio
import logging

from core import state
from core.errors import StoreError
from core.constants.main_values import WAL_FILE, STORAGE_FILE
from models.document_types.table_document import TableDocument

logger = logging.getLogger(__name__)


async def log_to_wal(operation: dict):
    log_entry = json.dumps(operation, default=str) + "\n"

    try:
        async with state.wal_lock:
            await asyncio.to_thread(_write_wal, log_entry)
    except OSError as e:
        logger.critical(f"WAL write failed: {e}")
        raise StoreError(f"Database WAL write error: {e}") from e


def _write_wal(log_entry: str):
    """Synchronous helper for writing to WAL"""
    with open(WAL_FILE, 'a', encoding='utf-8') as f:
        f.write(log_entry)
        f.flush()
        os.fsync(f.fileno())


def _apply_op_to_memory(op: dict):
    op_type = op.get("op")
    try:
        if op_type == "save_table":
            doc = TableDocument.model_validate(op["doc"])
            state.db_tables_by_id[doc.id] = doc

        elif op_type == "delete_table":
            table_id = op["table_id"]
            if table_id in state.db_tables_by_id:
                del state.db_tables_by_id[table_id]
                logger.info(f"Replayed table delete: {table_id}")

        else:
            logger.warning(f"Unknown WAL op skipped: {op_type}")

    except Exception as e:
        logger.error(f"Failed to apply WAL op: {op_type}. Error: {e}")


def load_snapshot():
    if not os.path.exists(STORAGE_FILE):
        logger.info(f"File {STORAGE_FILE} not found. Starting with an empty store.")
        return

    logger.info(f"Loading data from {STORAGE_FILE}")
    with open(STORAGE_FILE, 'r', encoding='utf-8') as f:
        raw_data = json.load(f)

    for t_item in raw_data.get("tables", []):
        try:
            doc = TableDocument.model_validate(t_item)
            state.db_tables_by_id[doc.id] = doc
        except Exception as e:
            logger.error(f"Failed to load table: {e}")

    logger.info(f"Loaded: {len(state.db_tables_by_id)} tables.")


def recover_from_wal():
    if not os.path.exists(WAL_FILE):
        return

    logger.info(f"Replaying WAL file ({WAL_FILE})...")
    replayed_ops = 0
    with open(WAL_FILE, 'r', encoding='utf-8') as f:
        for line in f:
            if not line.strip():
                continue

            try:
                op = json.loads(line)
                _apply_op_to_memory(op)
                replayed_ops += 1
            except json.JSONDecodeError as e:
                logger.critical(f"Failed to replay WAL entry: {line}. Error: {e}")
    logger.info(f"WAL replay complete. {replayed_ops} operations replayed.")


def perform_checkpoint():
    logger.info("Checkpointing...")
    try:
        data_to_save = {
            "tables": [t.model_dump(by_alias=True, mode="json") for t in state.db_tables_by_id.values()]
        }

        temp_file = f"{STORAGE_FILE}.tmp"
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(data_to_save, f, default=str)

        os.replace(temp_file, STORAGE_FILE)

        with open(WAL_FILE, 'w') as f:
            f.truncate(0)

        logger.info("Checkpoint successful.")
    except OSError as e:
        logger.critical(f"Error while saving snapshot: {e}")
