from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, Mapping

import pytest
from openpyxl import Workbook

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Keep log files out of the home directory; must run before the packages are imported.
os.environ.setdefault("PDSFLOW_LOG_DIR", tempfile.mkdtemp(prefix="pdsflow-test-logs-"))

WorkbookFactory = Callable[..., Path]


@pytest.fixture()
def make_workbook(tmp_path: Path) -> WorkbookFactory:
    """Build an .xlsx from ``{sheet_title: {"B5": value, ...}}``."""

    counter = {"n": 0}

    def _make(cells: Mapping[str, Mapping[str, Any]], name: str | None = None) -> Path:
        wb = Workbook()
        default = wb.active
        for idx, (title, values) in enumerate(cells.items()):
            ws = default if idx == 0 else wb.create_sheet()
            ws.title = title
            for coordinate, value in values.items():
                ws[coordinate] = value
        counter["n"] += 1
        path = tmp_path / (name or f"pds_{counter['n']}.xlsx")
        wb.save(path)
        return path

    return _make


@pytest.fixture()
def basic_mapping_payload() -> Dict[str, Any]:
    return {
        "default_sheet": "C1",
        "single_fields": {
            "surname": "B5",
            "birth_date": {"cell": "B6", "type": "date"},
        },
        "children": {
            "start_row": 10,
            "end_row": 12,
            "columns": {
                "full_name": "E",
                "birth_date": {"column": "F", "type": "date"},
            },
        },
    }


@pytest.fixture(autouse=True, scope="session")
def _configure_logging() -> None:
    """Create log handlers before CliRunner swaps the standard streams."""

    from pdsflow.core.logger import get_logger

    get_logger()
