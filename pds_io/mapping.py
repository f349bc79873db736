"""Declarative cell mapping for personal data sheet workbooks."""

# Module responsibilities:
# - Validate the YAML field-mapping into frozen pydantic models once, at load time.
# - Normalize shorthand nodes (bare cell references, bare column letters) so resolvers never re-inspect shape.
# - Report configuration problems as MappingError; extraction itself never sees malformed mappings.

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

FieldTypeName = Literal["string", "date", "numeric", "boolean"]


class MappingError(RuntimeError):
    """Raised when mapping configuration is invalid or cannot be loaded."""


def _without_nulls(data: Any) -> Any:
    # YAML keys left empty should fall back to model defaults.
    if isinstance(data, Mapping):
        return {key: value for key, value in data.items() if value is not None}
    return data


def _upper(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip().upper()


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")


class SingleFieldDefinition(_Node):
    """One cell mapped to one scalar output field."""

    cell: str = ""
    sheet: Optional[str] = None
    type: FieldTypeName = "string"

    @model_validator(mode="before")
    @classmethod
    def from_reference(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"cell": data}
        return _without_nulls(data)

    @field_validator("cell", mode="after")
    @classmethod
    def normalize_cell(cls, value: str) -> str:
        return _upper(value) or ""


class ColumnDefinition(_Node):
    """Ordered fallback column letters for one table field."""

    columns: Tuple[str, ...] = ()
    type: FieldTypeName = "string"

    @model_validator(mode="before")
    @classmethod
    def collect_columns(cls, data: Any) -> Any:
        if isinstance(data, str):
            data = {"column": data}
        elif isinstance(data, (list, tuple)):
            data = {"columns": data}
        if not isinstance(data, Mapping):
            return data
        payload = dict(_without_nulls(data))
        raw = payload.pop("columns", None)
        single = payload.pop("column", None)
        if raw is None:
            raw = single if single is not None else []
        if isinstance(raw, str):
            raw = [raw]
        payload["columns"] = tuple(
            _upper(str(column)) for column in raw if column is not None and str(column).strip()
        )
        return payload


class TableDefinition(_Node):
    """Row range read into a list of records."""

    sheet: Optional[str] = None
    start_row: int = 0
    end_row: int = 0
    columns: Dict[str, ColumnDefinition] = Field(default_factory=dict)
    required: Tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return _without_nulls(data)

    @property
    def has_valid_range(self) -> bool:
        return self.start_row > 0 and self.end_row > 0 and self.end_row >= self.start_row


class FamilyEntryDefinition(_Node):
    """Cells describing one relative (spouse, father, mother)."""

    relation: str = "Unknown"
    sheet: Optional[str] = None
    cells: Dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return _without_nulls(data)

    @field_validator("cells", mode="after")
    @classmethod
    def normalize_cells(cls, value: Dict[str, str]) -> Dict[str, str]:
        return {field: _upper(cell) or "" for field, cell in value.items()}


class RangeDefinition(_Node):
    """A single column scanned over a row range."""

    column: str = "A"
    start_row: int = 0
    end_row: int = 0

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return _without_nulls(data)

    @field_validator("column", mode="after")
    @classmethod
    def normalize_column(cls, value: str) -> str:
        return _upper(value) or "A"


class OtherInformationDefinition(_Node):
    """Free-text block: a shared ``sheet`` plus one range per output field."""

    sheet: Optional[str] = None
    ranges: Dict[str, RangeDefinition] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def split_sheet(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        payload = dict(data)
        sheet = payload.pop("sheet", None)
        return {"sheet": sheet, "ranges": payload}


class QuestionDefinition(_Node):
    """Answer checkbox and details cell of one questionnaire item."""

    sheet: Optional[str] = None
    answer_cell: Optional[str] = None
    details_cell: Optional[str] = None

    @field_validator("answer_cell", "details_cell", mode="after")
    @classmethod
    def normalize_cells(cls, value: Optional[str]) -> Optional[str]:
        return _upper(value) or None


class PdsMapping(_Node):
    """Complete mapping file model."""

    default_sheet: str = "C1"
    single_fields: Dict[str, SingleFieldDefinition] = Field(default_factory=dict)
    family_background: Tuple[FamilyEntryDefinition, ...] = ()
    children: Optional[TableDefinition] = None
    repeating_sections: Dict[str, TableDefinition] = Field(default_factory=dict)
    other_information: Optional[OtherInformationDefinition] = None
    questionnaire: Dict[int, QuestionDefinition] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        return _without_nulls(data)


def mapping_from_dict(payload: Mapping[str, Any]) -> PdsMapping:
    """Validate an in-memory mapping payload."""

    if not isinstance(payload, Mapping):
        raise MappingError("Invalid mapping structure (expected mapping)")
    try:
        return PdsMapping.model_validate(dict(payload))
    except ValidationError as exc:
        raise MappingError(f"Invalid mapping configuration: {exc}") from exc


def load_mapping(path: Union[str, Path]) -> PdsMapping:
    """Load and validate a mapping YAML file.

    Raises:
        MappingError: When the file is missing, is not a YAML mapping, or fails validation.
    """

    source = Path(path)
    if not source.is_file():
        raise MappingError(f"Mapping file not found: {source}")
    try:
        with source.open("r", encoding="utf-8") as fh:
            payload = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise MappingError(f"Mapping file is not valid YAML: {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise MappingError("Invalid mapping YAML structure (expected mapping)")
    return mapping_from_dict(payload)
