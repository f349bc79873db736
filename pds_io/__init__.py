"""`pds_io` top-level package exports the personal data sheet extraction engine."""

# Module responsibilities:
# - Re-export the extractor, mapping loader and workbook errors so consumers have a stable API surface.
# - Provide package version placeholder for future packaging.

from __future__ import annotations

from .assembler import PdsExtractor, extract_document
from .casting import cast_value, is_blank
from .mapping import MappingError, PdsMapping, load_mapping, mapping_from_dict
from .sheet_index import (
    EmptyWorkbookError,
    UnreadableWorkbookError,
    WorkbookReadError,
    load_sheets,
)

__all__ = [
    "PdsExtractor",
    "extract_document",
    "cast_value",
    "is_blank",
    "MappingError",
    "PdsMapping",
    "load_mapping",
    "mapping_from_dict",
    "WorkbookReadError",
    "UnreadableWorkbookError",
    "EmptyWorkbookError",
    "load_sheets",
]

__version__ = "0.1.0"
