"""
Import/export orchestration.

Picks a codec from the requested format (export) or the file extension
(import), moves the table between the store and the codec, and reports
failures through the exceptions in core.errors. Import is destructive: a
successful decode replaces the stored columns and rows in one save.
"""

import logging
from typing import Any, Awaitable, Protocol

from core.codecs import csv_codec, json_codec
from core.errors import (
    ExcelUnsupportedError,
    FileReadError,
    UnsupportedFormatError,
)
from models.interfaces.download_interface import IFileDownload
from models.interfaces.store_interface import ITableStore
from models.structure.table import ImportResult, TableData

logger = logging.getLogger(__name__)

EXCEL_EXTENSIONS = ("xlsx", "xls")


class UploadedFile(Protocol):
    filename: str | None

    def read(self) -> Awaitable[bytes]: ...


def file_extension(filename: str | None) -> str:
    return (filename or "").split(".")[-1].lower()


class TableImportExportService:
    def __init__(self, store: ITableStore):
        self.store = store

    async def export_table(
            self,
            table_id: str,
            fmt: str,
            download: IFileDownload,
            table_name: str | None = None,
    ) -> str:
        fmt = (fmt or "").lower()
        if fmt not in (csv_codec.EXTENSION, json_codec.EXTENSION):
            raise UnsupportedFormatError(f"Unsupported format: {fmt}")

        table = await self.store.load(table_id)
        if table_name is None:
            table_name = await self.store.get_name(table_id)

        if fmt == csv_codec.EXTENSION:
            content = csv_codec.encode(table)
            mime_type = csv_codec.MIME_TYPE
        else:
            content = json_codec.dumps(json_codec.encode(table, table_name))
            mime_type = json_codec.MIME_TYPE

        filename = f"{table_name or 'table'}.{fmt}"
        download.deliver(content, filename, mime_type)

        logger.info(f"Exported table {table_id} as {fmt} ({len(table.rows)} rows)")
        return content

    async def import_file(self, file: UploadedFile, table_id: str) -> ImportResult:
        extension = file_extension(file.filename)

        if extension in EXCEL_EXTENSIONS:
            raise ExcelUnsupportedError()
        if extension not in (csv_codec.EXTENSION, json_codec.EXTENSION):
            raise UnsupportedFormatError(
                "Unsupported file format. Please use CSV, JSON, or Excel files."
            )

        text = await self._read_text(file)

        if extension == csv_codec.EXTENSION:
            result = csv_codec.decode(text)
        else:
            result = json_codec.decode(text)

        await self.store.save(table_id, TableData(columns=result.columns, rows=result.rows))

        logger.info(f"Imported {result.imported} rows into table {table_id} from {file.filename}")
        return result

    async def _read_text(self, file: UploadedFile) -> str:
        try:
            raw: Any = await file.read()
        except Exception as e:
            raise FileReadError(f"Failed to read file: {e}") from e

        if isinstance(raw, str):
            return raw

        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise FileReadError(f"Failed to read file: not valid UTF-8 text ({e})") from e
