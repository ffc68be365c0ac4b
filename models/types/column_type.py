from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict

from core.errors import UnknownColumnTypeError


class ColumnType(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    DATE = "date"
    LINK = "link"
    EMAIL = "email"


def today_iso() -> str:
    return datetime.now(timezone.utc).date().isoformat()


_DEFAULTS: Dict[ColumnType, Callable[[], Any]] = {
    ColumnType.NUMBER: lambda: 0,
    ColumnType.TEXT: lambda: "",
    ColumnType.BOOLEAN: lambda: False,
    ColumnType.DATE: today_iso,
    ColumnType.LINK: lambda: "",
    ColumnType.EMAIL: lambda: "",
}


_TYPE_NAMES = {column_type.value for column_type in ColumnType}


def is_known(type_name: Any) -> bool:
    if isinstance(type_name, ColumnType):
        return True
    return isinstance(type_name, str) and type_name in _TYPE_NAMES


def resolve_column_type(type_name: Any) -> ColumnType:
    """Returns the ColumnType for a type string, raising on unknown names."""
    if isinstance(type_name, ColumnType):
        return type_name
    if not is_known(type_name):
        raise UnknownColumnTypeError(f"Unknown column type: {type_name!r}")
    return ColumnType(type_name)


def default_value(column_type: ColumnType | str) -> Any:
    return _DEFAULTS[resolve_column_type(column_type)]()
