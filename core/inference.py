"""
Column type inference for imported data.

Each rule is a predicate over the whole sample; the first rule every sampled
value satisfies decides the type. Order matters: "true"/"false" are also
plain strings, and numeric strings would also pass several later checks.
Misclassification is tolerated downstream because coercion is total.
"""

from typing import Any, Callable, Iterable, List, Tuple

from core.constants.main_values import INFERENCE_SAMPLE_SIZE
from models.processors.value_processor import parse_date, parse_number
from models.types.column_type import ColumnType


def _is_number(value: Any) -> bool:
    return parse_number(value) is not None


def _is_boolean(value: Any) -> bool:
    return value in ("true", "false") or isinstance(value, bool)


def _is_date(value: Any) -> bool:
    return parse_date(value) is not None


def _is_link(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(("http", "www"))


def _is_email(value: Any) -> bool:
    return isinstance(value, str) and "@" in value


RULES: List[Tuple[ColumnType, Callable[[Any], bool]]] = [
    (ColumnType.NUMBER, _is_number),
    (ColumnType.BOOLEAN, _is_boolean),
    (ColumnType.DATE, _is_date),
    (ColumnType.LINK, _is_link),
    (ColumnType.EMAIL, _is_email),
]


def sample_values(values: Iterable[Any], sample_size: int = INFERENCE_SAMPLE_SIZE) -> List[Any]:
    """First `sample_size` values that are neither missing nor empty strings."""
    sample = []
    for value in values:
        if value is None or value == "":
            continue
        sample.append(value)
        if len(sample) >= sample_size:
            break
    return sample


def infer(values: Iterable[Any], sample_size: int = INFERENCE_SAMPLE_SIZE) -> ColumnType:
    sample = sample_values(values, sample_size)
    if not sample:
        return ColumnType.TEXT

    for column_type, matches in RULES:
        if all(matches(value) for value in sample):
            return column_type

    return ColumnType.TEXT
