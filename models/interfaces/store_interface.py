from abc import ABC, abstractmethod
from typing import List

from core.errors import TableNotFoundError
from models.structure.table import TableData


class ITableStore(ABC):
    @abstractmethod
    async def load(self, table_id: str) -> TableData:
        """Returns the stored table or raises TableNotFoundError."""
        pass

    @abstractmethod
    async def save(self, table_id: str, table: TableData) -> TableData:
        """Replaces the whole stored document in one write. Raises StoreError."""
        pass

    @abstractmethod
    async def create_default(self, table_id: str, name: str | None = None) -> TableData:
        """Persists and returns a table holding only the serialNo column."""
        pass

    @abstractmethod
    async def delete(self, table_id: str) -> None:
        pass

    @abstractmethod
    async def list_tables(self) -> List[dict]:
        pass

    async def get_name(self, table_id: str) -> str | None:
        return None

    async def get_or_create(self, table_id: str) -> TableData:
        try:
            return await self.load(table_id)
        except TableNotFoundError:
            return await self.create_default(table_id)
