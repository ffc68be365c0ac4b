import math
from datetime import date, datetime
from typing import Any, Dict

from models.interfaces.strategy_interface import IValueProcessor
from models.types.column_type import ColumnType, default_value, today_iso

# Tried in order after the ISO parsers
DATE_FORMATS = (
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%d.%m.%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
)


def parse_number(value: Any) -> int | float | None:
    """Returns the finite number a raw value spells, or None."""
    if isinstance(value, bool) or value is None:
        return None

    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or "_" in text:
        return None

    try:
        return int(text)
    except ValueError:
        pass

    try:
        number = float(text)
    except ValueError:
        return None

    return number if math.isfinite(number) else None


def parse_date(value: Any) -> date | None:
    """Returns the calendar date a raw value spells, or None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    return None


def to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class NumberProcessor(IValueProcessor):
    def process(self, value: Any) -> Any:
        if value is True:
            return 1
        number = parse_number(value)
        return 0 if number is None else number


class BooleanProcessor(IValueProcessor):
    def process(self, value: Any) -> Any:
        return value is True or value == "true"


class DateProcessor(IValueProcessor):
    def process(self, value: Any) -> Any:
        parsed = parse_date(value)
        if parsed is None:
            return today_iso()
        return parsed.isoformat()


class TextProcessor(IValueProcessor):
    def process(self, value: Any) -> Any:
        return to_text(value)


PROCESSORS: Dict[ColumnType, IValueProcessor] = {
    ColumnType.NUMBER: NumberProcessor(),
    ColumnType.TEXT: TextProcessor(),
    ColumnType.BOOLEAN: BooleanProcessor(),
    ColumnType.DATE: DateProcessor(),
    ColumnType.LINK: TextProcessor(),
    ColumnType.EMAIL: TextProcessor(),
}


def coerce(value: Any, column_type: ColumnType) -> Any:
    """
    Converts a raw cell value into the canonical value for a column type.
    Never raises: empty input yields the type default, garbage yields the
    type's fallback.
    """
    if value is None or value == "":
        return default_value(column_type)

    return PROCESSORS[column_type].process(value)
