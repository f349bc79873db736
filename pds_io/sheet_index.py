"""Workbook loading and row/column indexing."""

# Module responsibilities:
# - Load every worksheet of a workbook with openpyxl (cached formula values only).
# - Convert each worksheet into a row -> column letter -> value lookup.
# - Fail fast for unreadable or empty workbooks; everything else degrades downstream.

from __future__ import annotations

import re
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException

from .casting import CellValue
from .utils.log import get_logger

logger = get_logger("sheet_index")

SheetIndex = Dict[int, Dict[str, CellValue]]
IndexedWorkbook = Dict[str, SheetIndex]

_COORDINATE = re.compile(r"^([A-Z]+)(\d+)$")


class WorkbookReadError(RuntimeError):
    """Raised when a workbook cannot be turned into indexed sheets."""


class UnreadableWorkbookError(WorkbookReadError):
    """Raised when the workbook path is missing or the file cannot be opened."""


class EmptyWorkbookError(WorkbookReadError):
    """Raised when the workbook opens but contains no worksheets."""


def normalize_cell_value(value: Any) -> CellValue:
    """Narrow an openpyxl value to the cell types the casters understand."""

    if value is None or isinstance(value, (bool, int, float, str, datetime)):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    # time, timedelta and anything exotic are kept as their text form.
    return str(value)


def index_rows(rows: Mapping[Any, Mapping[Any, Any]]) -> SheetIndex:
    """Index raw ``row -> column -> value`` data.

    Row keys are coerced to ``int``; column keys must be letters and are
    upper-cased. Numeric column keys and absent values are dropped.
    """

    indexed: SheetIndex = {}
    for row_number, row in rows.items():
        if not isinstance(row, Mapping):
            continue
        row_index = int(row_number)
        for column, value in row.items():
            if not isinstance(column, str) or column.strip().isdigit():
                continue
            normalized = normalize_cell_value(value)
            if normalized is None:
                continue
            indexed.setdefault(row_index, {})[column.strip().upper()] = normalized
    return indexed


def split_coordinate(coordinate: Optional[str]) -> Optional[Tuple[str, int]]:
    """Split ``"B5"`` into ``("B", 5)``; None for malformed references."""

    if not coordinate:
        return None
    match = _COORDINATE.match(coordinate.strip().upper())
    if not match:
        return None
    return match.group(1), int(match.group(2))


def cell_value(
    sheets: IndexedWorkbook,
    coordinate: Optional[str],
    sheet_name: str,
) -> CellValue:
    """Look up a cell by reference; missing sheets, rows or cells give None."""

    parts = split_coordinate(coordinate)
    sheet = sheets.get(sheet_name)
    if parts is None or sheet is None:
        return None
    column, row = parts
    return sheet.get(row, {}).get(column)


def load_sheets(path: Union[str, Path]) -> IndexedWorkbook:
    """Load a workbook and index every worksheet by title.

    Args:
        path: Local path of the ``.xlsx``/``.xlsm`` workbook.

    Returns:
        Mapping of sheet title to its row/column index.

    Raises:
        UnreadableWorkbookError: When the file is missing or cannot be opened.
        EmptyWorkbookError: When the workbook yields no worksheets.
    """

    source = Path(path)
    if not source.is_file():
        raise UnreadableWorkbookError(f"Unable to read workbook: {source}")

    logger.info("Loading workbook", extra={"path": str(source)})
    # Malformed XML parts raise ElementTree or lxml parse errors; both derive from SyntaxError.
    try:
        workbook = load_workbook(source, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, SyntaxError, KeyError, OSError, ValueError) as exc:
        logger.error("Failed to open workbook", extra={"path": str(source), "error": str(exc)})
        raise UnreadableWorkbookError(f"Unable to read workbook {source}: {exc}") from exc

    sheets: IndexedWorkbook = {}
    try:
        for worksheet in workbook.worksheets:
            rows: Dict[int, Dict[str, Any]] = {}
            for row in worksheet.iter_rows():
                for cell in row:
                    if cell.value is None:
                        continue
                    rows.setdefault(cell.row, {})[get_column_letter(cell.column)] = cell.value
            sheets[worksheet.title] = index_rows(rows)
    finally:
        workbook.close()

    if not sheets:
        raise EmptyWorkbookError(f"Workbook does not contain any readable sheets: {source}")

    logger.info(
        "Workbook indexed",
        extra={"path": str(source), "sheets": list(sheets.keys())},
    )
    return sheets
