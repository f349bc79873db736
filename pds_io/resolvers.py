"""Resolution strategies turning mapping nodes into document sections."""

# Module responsibilities:
# - Provide one resolver per mapping node kind (single cells, tables, family entries, ranges).
# - Keep resolvers pure: output depends only on the indexed sheets, the definition and the default sheet.
# - Apply the row/record gates that drop blank or incomplete data instead of raising.

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from .casting import CellValue, cast_value, is_blank
from .mapping import (
    FamilyEntryDefinition,
    OtherInformationDefinition,
    SingleFieldDefinition,
    TableDefinition,
)
from .schema import FAMILY_FIELDS, FamilyMember, ReferenceEntry, TableRecord
from .sheet_index import IndexedWorkbook, cell_value


class BaseResolver(ABC):
    """Abstract base class for resolution strategies."""

    @abstractmethod
    def resolve(self, sheets: IndexedWorkbook) -> Any:
        """Compute this resolver's part of the output document."""


@dataclass(frozen=True)
class SingleFieldResolver(BaseResolver):
    """Scalar fields, one cell each. Blank or uncastable cells are left out."""

    fields: Mapping[str, SingleFieldDefinition]
    default_sheet: str

    def resolve(self, sheets: IndexedWorkbook) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for name, definition in self.fields.items():
            raw = cell_value(sheets, definition.cell, definition.sheet or self.default_sheet)
            casted = cast_value(raw, definition.type)
            if casted is None or casted == "":
                continue
            result[name] = casted
        return result


@dataclass(frozen=True)
class TableResolver(BaseResolver):
    """Contiguous rows read into records, in ascending row order.

    Each field takes the first non-blank cell among its fallback columns. A row
    is kept when one of the ``required`` fields (if any are declared) and at
    least one field overall hold a value. A boolean field always holds one,
    since an empty checkbox casts to False.
    """

    definition: Optional[TableDefinition]
    default_sheet: str

    @property
    def sheet(self) -> str:
        if self.definition is None:
            return self.default_sheet
        return self.definition.sheet or self.default_sheet

    def _resolve_row(
        self, sheets: IndexedWorkbook, definition: TableDefinition, row: int
    ) -> Tuple[TableRecord, Set[str]]:
        record: TableRecord = {}
        populated: Set[str] = set()
        for name, column_def in definition.columns.items():
            found: CellValue = None
            for column in column_def.columns:
                candidate = cell_value(sheets, f"{column}{row}", self.sheet)
                if not is_blank(candidate):
                    found = candidate
                    break
            casted = cast_value(found, column_def.type)
            record[name] = casted
            if not is_blank(casted):
                populated.add(name)
        return record, populated

    def resolve(self, sheets: IndexedWorkbook) -> List[TableRecord]:
        definition = self.definition
        if definition is None or not definition.columns or not definition.has_valid_range:
            return []

        rows: List[TableRecord] = []
        for row in range(definition.start_row, definition.end_row + 1):
            record, populated = self._resolve_row(sheets, definition, row)
            if definition.required and not any(name in populated for name in definition.required):
                continue
            if not populated:
                continue
            rows.append(record)
        return rows


@dataclass(frozen=True)
class FamilyBackgroundResolver(BaseResolver):
    """Relation-tagged person records; entries with only the relation are dropped."""

    entries: Tuple[FamilyEntryDefinition, ...]
    default_sheet: str

    def _resolve_entry(self, sheets: IndexedWorkbook, entry: FamilyEntryDefinition) -> FamilyMember:
        sheet = entry.sheet or self.default_sheet
        person: Dict[str, Any] = {"relation": entry.relation}
        person.update({name: "" for name in FAMILY_FIELDS})
        for name, cell in entry.cells.items():
            value = cast_value(cell_value(sheets, cell, sheet), "string")
            if value is not None:
                person[name] = value
        return person  # type: ignore[return-value]

    def resolve(self, sheets: IndexedWorkbook) -> List[FamilyMember]:
        family: List[FamilyMember] = []
        for entry in self.entries:
            person = self._resolve_entry(sheets, entry)
            if any(not is_blank(value) for key, value in person.items() if key != "relation"):
                family.append(person)
        return family


@dataclass(frozen=True)
class OtherInformationResolver(BaseResolver):
    """Free-text fields: non-blank cells of a column range joined by newlines."""

    definition: Optional[OtherInformationDefinition]
    default_sheet: str

    def resolve(self, sheets: IndexedWorkbook) -> Dict[str, str]:
        if self.definition is None:
            return {}
        sheet = self.definition.sheet or self.default_sheet
        result: Dict[str, str] = {}
        for name, span in self.definition.ranges.items():
            values: List[str] = []
            for row in range(span.start_row, span.end_row + 1):
                value = cast_value(cell_value(sheets, f"{span.column}{row}", sheet), "string")
                if not is_blank(value):
                    values.append(value)  # type: ignore[arg-type]
            if values:
                result[name] = "\n".join(values)
        return result


@dataclass(frozen=True)
class ReferencesResolver(BaseResolver):
    """Character references read as a table and renamed for the employee record."""

    table: TableResolver

    def resolve(self, sheets: IndexedWorkbook) -> List[ReferenceEntry]:
        return [
            {
                "fullname": str(row.get("name") or "").strip(),
                "address": row.get("address") or "",
                "telephone_no": row.get("telephone_no") or "",
            }
            for row in self.table.resolve(sheets)
        ]
