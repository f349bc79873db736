"""Shared schemas for the extracted personal data sheet document."""

# Module responsibilities:
# - Name the sections of the output document and the order they are assembled in.
# - Define lightweight record shapes so consumers know which keys to expect.

from __future__ import annotations

from typing import Any, Dict, List, TypedDict

# Tables read from ``repeating_sections`` in this order; ``references`` is handled separately.
TABLE_SECTIONS: tuple[str, ...] = (
    "educational_background",
    "civil_service_eligibility",
    "work_experience",
    "voluntary_work",
    "learning_development",
)

DOCUMENT_SECTIONS: tuple[str, ...] = (
    "family_background",
    "children",
    *TABLE_SECTIONS,
    "references",
    "other_information",
    "questionnaire",
)

FAMILY_FIELDS: tuple[str, ...] = (
    "surname",
    "first_name",
    "middle_name",
    "name_extension",
    "occupation",
    "employer",
    "business_address",
    "telephone_no",
)

TableRecord = Dict[str, Any]


class FamilyMember(TypedDict, total=False):
    """One person from the family background block."""

    relation: str
    surname: str
    first_name: str
    middle_name: str
    name_extension: str
    occupation: str
    employer: str
    business_address: str
    telephone_no: str


class ReferenceEntry(TypedDict):
    """Character reference normalized for the employee record."""

    fullname: str
    address: str
    telephone_no: str


class QuestionnaireEntry(TypedDict):
    """Answer to one numbered yes/no question of the form."""

    question_number: int
    answer: bool
    details: str


class PdsDocument(TypedDict, total=False):
    """Extraction output. Every key is optional; absence means no data found.

    Scalar personal fields are stored at the top level next to the sections below.
    """

    family_background: List[FamilyMember]
    children: List[TableRecord]
    educational_background: List[TableRecord]
    civil_service_eligibility: List[TableRecord]
    work_experience: List[TableRecord]
    voluntary_work: List[TableRecord]
    learning_development: List[TableRecord]
    references: List[ReferenceEntry]
    other_information: Dict[str, str]
    questionnaire: List[QuestionnaireEntry]
