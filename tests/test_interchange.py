import asyncio
import json

import pytest

from core.errors import (
    EmptyInputError,
    ExcelUnsupportedError,
    FileReadError,
    InvalidFormatError,
    StoreError,
    TableNotFoundError,
    UnsupportedFormatError,
)
from core.interchange import TableImportExportService, file_extension
from core.table_ops import add_column, add_row, default_table, update_cell
from models.types.column_type import ColumnType


def _people_table():
    table = add_column(default_table(), "Name", ColumnType.TEXT)
    table = add_row(table)
    return update_cell(table, table.rows[0]["id"], table.columns[1].id, "Alice")


def test_file_extension():
    assert file_extension("data.CSV") == "csv"
    assert file_extension("archive.tar.json") == "json"
    assert file_extension("noext") == "noext"
    assert file_extension(None) == ""


def test_import_csv_saves_table(memory_store, make_upload):
    service = TableImportExportService(memory_store)
    upload = make_upload("people.csv", b"Name,Age\nAlice,30\nBob,25")

    result = asyncio.run(service.import_file(upload, "t1"))

    assert result.imported == 2
    assert [col.type for col in result.columns] == [ColumnType.NUMBER, ColumnType.TEXT, ColumnType.NUMBER]
    stored = memory_store.tables["t1"]
    assert stored.columns == result.columns
    assert stored.rows == result.rows


def test_import_strips_utf8_bom(memory_store, make_upload):
    service = TableImportExportService(memory_store)
    upload = make_upload("people.csv", "\ufeffName\nAlice".encode("utf-8"))

    result = asyncio.run(service.import_file(upload, "t1"))
    assert result.columns[1].name == "Name"


def test_import_json_uppercase_extension(memory_store, make_upload):
    service = TableImportExportService(memory_store)
    doc = {"columns": [{"id": "c1", "name": "Name", "type": "text"}], "rows": [{"c1": "Alice"}]}
    upload = make_upload("PEOPLE.JSON", json.dumps(doc).encode())

    result = asyncio.run(service.import_file(upload, "t1"))
    assert result.imported == 1
    assert memory_store.tables["t1"].rows[0]["serialNo"] == 1


@pytest.mark.parametrize("filename", ["book.xlsx", "book.XLS"])
def test_excel_import_always_fails(memory_store, make_upload, filename):
    service = TableImportExportService(memory_store)
    upload = make_upload(filename, b"Name\nAlice")

    with pytest.raises(ExcelUnsupportedError):
        asyncio.run(service.import_file(upload, "t1"))
    assert upload.reads == 0
    assert memory_store.saves == 0


@pytest.mark.parametrize("filename", ["notes.txt", "data.csv.bak", "README", None])
def test_unknown_extension_rejected(memory_store, make_upload, filename):
    service = TableImportExportService(memory_store)
    with pytest.raises(UnsupportedFormatError):
        asyncio.run(service.import_file(make_upload(filename, b""), "t1"))


def test_decode_errors_leave_store_untouched(memory_store, make_upload):
    service = TableImportExportService(memory_store)

    with pytest.raises(EmptyInputError):
        asyncio.run(service.import_file(make_upload("a.csv", b"\n\n"), "t1"))
    with pytest.raises(InvalidFormatError):
        asyncio.run(service.import_file(make_upload("a.json", b'{"rows": []}'), "t1"))
    assert memory_store.saves == 0


def test_file_read_errors(memory_store, make_upload):
    service = TableImportExportService(memory_store)

    with pytest.raises(FileReadError):
        asyncio.run(service.import_file(make_upload("a.csv", error=OSError("gone")), "t1"))
    with pytest.raises(FileReadError):
        asyncio.run(service.import_file(make_upload("a.csv", b"\xff\xfe\xfa"), "t1"))


def test_store_errors_propagate(failing_store, make_upload):
    service = TableImportExportService(failing_store)
    with pytest.raises(StoreError):
        asyncio.run(service.import_file(make_upload("a.csv", b"Name\nAlice"), "t1"))


def test_export_csv(memory_store, download):
    memory_store.tables["t1"] = _people_table()
    service = TableImportExportService(memory_store)

    content = asyncio.run(service.export_table("t1", "csv", download, table_name="People"))

    assert content == "Serial No.,Name\n1,Alice"
    assert download.delivered == [(content, "People.csv", "text/csv")]


def test_export_json_uses_stored_name(memory_store, download):
    asyncio.run(memory_store.create_default("t1", name="Roster"))
    service = TableImportExportService(memory_store)

    content = asyncio.run(service.export_table("t1", "JSON", download))

    doc = json.loads(content)
    assert doc["tableName"] == "Roster"
    assert doc["metadata"] == {"totalRows": 0, "totalColumns": 1}
    assert download.delivered[0][1:] == ("Roster.json", "application/json")


def test_export_defaults_filename(memory_store, download):
    memory_store.tables["t1"] = default_table()
    service = TableImportExportService(memory_store)

    asyncio.run(service.export_table("t1", "csv", download))
    assert download.delivered[0][1] == "table.csv"


def test_export_failures(memory_store, download):
    service = TableImportExportService(memory_store)

    with pytest.raises(TableNotFoundError):
        asyncio.run(service.export_table("missing", "csv", download))

    memory_store.tables["t1"] = default_table()
    with pytest.raises(UnsupportedFormatError):
        asyncio.run(service.export_table("t1", "xlsx", download))
    assert download.delivered == []
