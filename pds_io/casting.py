"""Value coercion for raw spreadsheet cells."""

# Module responsibilities:
# - Convert indexed cell values into the four field types understood by mappings.
# - Own the blank-suppression rule: whitespace-only text is the same as an absent cell.

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal, Optional, Union

import pandas as pd
from openpyxl.utils.datetime import from_excel

from .utils.log import get_logger

logger = get_logger("casting")

CellValue = Union[str, int, float, bool, datetime, None]
FieldType = Literal["string", "date", "numeric", "boolean"]
FIELD_TYPES: tuple[str, ...] = ("string", "date", "numeric", "boolean")

AFFIRMATIVE_TOKENS = frozenset({"y", "yes", "true", "1", "x", "✓", "✔"})

_NUMERIC_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def is_blank(value: object) -> bool:
    """Return True for absent values and whitespace-only text."""

    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def is_numeric_text(text: str) -> bool:
    """Return True when ``text`` reads as a plain decimal number."""

    return bool(_NUMERIC_PATTERN.match(text.strip()))


def _format_number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _format_datetime(value: datetime) -> str:
    if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
        return value.date().isoformat()
    return value.strftime("%Y-%m-%d %H:%M:%S")


def to_text(value: CellValue) -> Optional[str]:
    """Render a cell value the way it reads on the form."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    return str(value)


def cast_boolean(value: CellValue) -> bool:
    """Interpret checkbox-like cells. Unrecognised input is False."""

    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if is_numeric_text(normalized):
            return bool(float(normalized))
        return normalized in AFFIRMATIVE_TOKENS
    return False


def _serial_to_date(serial: float) -> Optional[str]:
    try:
        converted = from_excel(serial)
    except (OverflowError, ValueError, TypeError) as exc:
        logger.debug("Discarded date serial", extra={"value": serial, "error": str(exc)})
        return None
    if isinstance(converted, datetime):
        return converted.date().isoformat()
    # from_excel returns a time or timedelta for serials without a day part.
    return None


def _parse_date_text(text: str) -> Optional[str]:
    try:
        # Each cell is parsed on its own; "mixed" skips format inference and its per-call warning.
        parsed = pd.to_datetime(text, errors="coerce", format="mixed")
    except (ValueError, TypeError, OverflowError) as exc:
        logger.debug("Discarded date text", extra={"value": text, "error": str(exc)})
        return None
    if pd.isna(parsed):
        logger.debug("Discarded date text", extra={"value": text})
        return None
    return parsed.date().isoformat()


def cast_date(value: CellValue) -> Optional[str]:
    """Return an ISO calendar date or None when the value is not a date."""

    if isinstance(value, str):
        value = value.strip()
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _serial_to_date(float(value))
    if is_numeric_text(value):
        return _serial_to_date(float(value))
    return _parse_date_text(value)


def cast_value(value: CellValue, field_type: str = "string") -> Union[str, bool, None]:
    """Cast a raw cell value to the requested field type.

    Args:
        value: Normalized cell value from the sheet index.
        field_type: One of ``string``, ``date``, ``numeric`` or ``boolean``.

    Returns:
        ``bool`` for boolean fields, otherwise trimmed text or ``None`` when blank.
    """

    if field_type == "boolean":
        return cast_boolean(value)

    if isinstance(value, str):
        value = value.strip()
    if is_blank(value):
        return None

    if field_type == "date":
        return cast_date(value)
    # Numeric fields stay textual so identifiers such as TIN or GSIS numbers keep every digit.
    return to_text(value)
