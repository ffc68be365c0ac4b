import pytest
import os
from typing import Dict, List
from starlette.testclient import TestClient
from main import app
from core import state
from core.errors import StoreError, TableNotFoundError
from core.constants.main_values import STORAGE_FILE, WAL_FILE
from core.table_ops import default_table
from models.interfaces.download_interface import IFileDownload
from models.interfaces.store_interface import ITableStore
from models.structure.table import TableData


@pytest.fixture(scope="function", autouse=True)
def clean_database():
    """Clean database before each test"""
    for path in (STORAGE_FILE, WAL_FILE):
        if os.path.exists(path):
            os.remove(path)
    state.reset()

    yield

    for path in (STORAGE_FILE, WAL_FILE):
        if os.path.exists(path):
            os.remove(path)
    state.reset()


@pytest.fixture(autouse=True)
def disable_rate_limit():
    app.state.limiter.enabled = False
    yield
    app.state.limiter.enabled = True


@pytest.fixture(scope="function")
def client():
    """Create a test client"""
    with TestClient(app) as test_client:
        yield test_client


class MemoryTableStore(ITableStore):
    def __init__(self, fail_on_save: bool = False):
        self.tables: Dict[str, TableData] = {}
        self.names: Dict[str, str] = {}
        self.saves = 0
        self.fail_on_save = fail_on_save

    async def load(self, table_id: str) -> TableData:
        if table_id not in self.tables:
            raise TableNotFoundError(table_id)
        return self.tables[table_id]

    async def save(self, table_id: str, table: TableData) -> TableData:
        if self.fail_on_save:
            raise StoreError("disk full")
        self.saves += 1
        self.tables[table_id] = table
        return table

    async def create_default(self, table_id: str, name: str | None = None) -> TableData:
        self.tables[table_id] = default_table()
        if name:
            self.names[table_id] = name
        return self.tables[table_id]

    async def delete(self, table_id: str) -> None:
        self.tables.pop(table_id)

    async def list_tables(self) -> List[dict]:
        return [{"id": table_id} for table_id in self.tables]

    async def get_name(self, table_id: str) -> str | None:
        return self.names.get(table_id)


class RecordingDownload(IFileDownload):
    def __init__(self):
        self.delivered = []

    def deliver(self, content: str, filename: str, mime_type: str) -> None:
        self.delivered.append((content, filename, mime_type))


class FakeUpload:
    def __init__(self, filename: str, content: bytes | None = None, error: Exception | None = None):
        self.filename = filename
        self.content = content
        self.error = error
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        if self.error:
            raise self.error
        return self.content


@pytest.fixture
def memory_store():
    return MemoryTableStore()


@pytest.fixture
def download():
    return RecordingDownload()


@pytest.fixture
def failing_store():
    return MemoryTableStore(fail_on_save=True)


@pytest.fixture
def make_upload():
    return FakeUpload
