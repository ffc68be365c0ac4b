import pytest

from core.errors import UnknownColumnTypeError
from models.processors.value_processor import coerce, parse_date, parse_number
from models.types.column_type import ColumnType, default_value, is_known, resolve_column_type, today_iso


def test_default_values():
    assert default_value(ColumnType.NUMBER) == 0
    assert default_value("text") == ""
    assert default_value("boolean") is False
    assert default_value("date") == today_iso()
    assert default_value("link") == ""
    assert default_value("email") == ""


def test_unknown_type_lookup_fails():
    assert is_known("email")
    assert not is_known("currency")
    assert not is_known(None)

    with pytest.raises(UnknownColumnTypeError):
        default_value("currency")
    with pytest.raises(UnknownColumnTypeError):
        resolve_column_type("Number")


def test_coerce_empty_gives_default():
    assert coerce("", "number") == 0
    assert coerce(None, "text") == ""
    assert coerce("", "boolean") is False
    assert coerce(None, "date") == today_iso()


def test_coerce_number():
    assert coerce("30", "number") == 30
    assert isinstance(coerce("30", "number"), int)
    assert coerce("3.5", "number") == 3.5
    assert coerce("-2e3", "number") == -2000.0
    assert coerce("abc", "number") == 0
    assert coerce("inf", "number") == 0
    assert coerce("1_000", "number") == 0
    assert coerce(7, "number") == 7


def test_coerce_boolean_is_case_sensitive():
    assert coerce("true", "boolean") is True
    assert coerce(True, "boolean") is True
    assert coerce("True", "boolean") is False
    assert coerce("yes", "boolean") is False
    assert coerce(1, "boolean") is False


def test_coerce_date():
    assert coerce("2024-03-05", "date") == "2024-03-05"
    assert coerce("2024-03-05T10:20:00Z", "date") == "2024-03-05"
    assert coerce("03/15/2024", "date") == "2024-03-15"
    assert coerce("March 15, 2024", "date") == "2024-03-15"
    assert coerce("not-a-date", "date") == today_iso()


def test_coerce_text_like_types_stringify_verbatim():
    assert coerce(12, "text") == "12"
    assert coerce(True, "text") == "true"
    assert coerce("not a url", "link") == "not a url"
    assert coerce("no-at-sign", "email") == "no-at-sign"


def test_parsers_reject_garbage():
    assert parse_number(True) is None
    assert parse_number("  ") is None
    assert parse_number("nan") is None
    assert parse_date("2024-13-45") is None
    assert parse_date(20240101) is None
