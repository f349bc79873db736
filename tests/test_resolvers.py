"""Unit tests for the single, table, family and range resolvers."""

# Module responsibilities:
# - Exercise resolvers directly against in-memory sheet indexes.
# - Cover fallback precedence, required gating, and blank suppression.

from __future__ import annotations

from datetime import datetime

from pds_io.mapping import (
    FamilyEntryDefinition,
    OtherInformationDefinition,
    SingleFieldDefinition,
    TableDefinition,
)
from pds_io.resolvers import (
    FamilyBackgroundResolver,
    OtherInformationResolver,
    ReferencesResolver,
    SingleFieldResolver,
    TableResolver,
)
from pds_io.schema import FAMILY_FIELDS


def _table(**payload) -> TableDefinition:
    return TableDefinition.model_validate(payload)


def test_single_fields_skip_blank_and_uncastable_cells() -> None:
    sheets = {
        "C1": {5: {"B": "  Dela Cruz "}, 6: {"B": "   "}, 7: {"B": "someday"}},
        "C4": {61: {"D": "Passport"}},
    }
    resolver = SingleFieldResolver(
        {
            "surname": SingleFieldDefinition.model_validate("B5"),
            "first_name": SingleFieldDefinition.model_validate("B6"),
            "birth_date": SingleFieldDefinition.model_validate({"cell": "B7", "type": "date"}),
            "missing": SingleFieldDefinition.model_validate("Z99"),
            "government_issued_id": SingleFieldDefinition.model_validate({"sheet": "C4", "cell": "D61"}),
        },
        "C1",
    )

    assert resolver.resolve(sheets) == {"surname": "Dela Cruz", "government_issued_id": "Passport"}


def test_single_boolean_field_keeps_false() -> None:
    resolver = SingleFieldResolver(
        {"is_solo_parent": SingleFieldDefinition.model_validate({"cell": "A1", "type": "boolean"})},
        "C1",
    )

    assert resolver.resolve({"C1": {}}) == {"is_solo_parent": False}


def test_fallback_columns_first_non_blank_wins() -> None:
    sheets = {"C3": {5: {"D": "Only D"}, 6: {"C": "C wins", "D": "D loses"}, 7: {"C": "  ", "D": "D after blank C"}}}
    resolver = TableResolver(
        _table(sheet="C3", start_row=5, end_row=7, columns={"conducted_by": {"columns": ["C", "D"]}}),
        "C1",
    )

    assert resolver.resolve(sheets) == [
        {"conducted_by": "Only D"},
        {"conducted_by": "C wins"},
        {"conducted_by": "D after blank C"},
    ]


def test_required_gate_excludes_rows_without_required_field() -> None:
    sheets = {"C1": {1: {"A": "Has name", "B": "x"}, 2: {"B": "no name"}, 3: {"A": "  ", "B": "blank name"}}}
    resolver = TableResolver(
        _table(start_row=1, end_row=3, columns={"field_x": "A", "other": "B"}, required=["field_x"]),
        "C1",
    )

    assert resolver.resolve(sheets) == [{"field_x": "Has name", "other": "x"}]


def test_required_gate_passes_when_any_required_field_present() -> None:
    sheets = {"C2": {18: {"D": "Teacher I"}, 19: {"G": "DepEd"}, 20: {"K": "11-1"}}}
    resolver = TableResolver(
        _table(
            sheet="C2",
            start_row=18,
            end_row=20,
            columns={"position_title": "D", "company_name": "G", "salary_grade_step": "K"},
            required=["position_title", "company_name"],
        ),
        "C1",
    )

    rows = resolver.resolve(sheets)

    assert [row["position_title"] for row in rows] == ["Teacher I", None]
    assert rows[1]["company_name"] == "DepEd"


def test_blank_rows_are_skipped_and_order_is_by_row() -> None:
    sheets = {"C1": {12: {"E": "Third"}, 10: {"E": "First"}, 11: {"E": "   ", "F": ""}}}
    resolver = TableResolver(_table(start_row=10, end_row=12, columns={"full_name": "E", "note": "F"}), "C1")

    assert resolver.resolve(sheets) == [
        {"full_name": "First", "note": None},
        {"full_name": "Third", "note": None},
    ]


def test_boolean_column_keeps_rows_with_empty_checkboxes() -> None:
    sheets = {"C2": {18: {"D": "Clerk", "M": "Y"}, 19: {}, 20: {"M": "N"}}}
    resolver = TableResolver(
        _table(
            sheet="C2",
            start_row=18,
            end_row=20,
            columns={"position_title": "D", "is_gov_service": {"column": "M", "type": "boolean"}},
        ),
        "C1",
    )

    assert resolver.resolve(sheets) == [
        {"position_title": "Clerk", "is_gov_service": True},
        {"position_title": None, "is_gov_service": False},
        {"position_title": None, "is_gov_service": False},
    ]


def test_required_boolean_field_is_satisfied_by_false() -> None:
    sheets = {"C1": {1: {"A": "Clerk"}, 2: {}}}
    resolver = TableResolver(
        _table(
            start_row=1,
            end_row=2,
            columns={"flag": {"column": "M", "type": "boolean"}, "title": "A"},
            required=["flag"],
        ),
        "C1",
    )

    assert resolver.resolve(sheets) == [
        {"flag": False, "title": "Clerk"},
        {"flag": False, "title": None},
    ]


def test_required_text_field_still_drops_checkbox_only_rows() -> None:
    sheets = {"C2": {18: {"D": "Clerk", "M": "Y"}, 19: {"M": "Y"}}}
    resolver = TableResolver(
        _table(
            sheet="C2",
            start_row=18,
            end_row=19,
            columns={"position_title": "D", "is_gov_service": {"column": "M", "type": "boolean"}},
            required=["position_title"],
        ),
        "C1",
    )

    assert resolver.resolve(sheets) == [{"position_title": "Clerk", "is_gov_service": True}]


def test_unparsable_date_counts_as_blank() -> None:
    sheets = {"C1": {37: {"M": "unknown"}, 38: {"I": "Ana", "M": datetime(2015, 4, 2)}}}
    resolver = TableResolver(
        _table(start_row=37, end_row=38, columns={"full_name": "I", "birth_date": {"column": "M", "type": "date"}}),
        "C1",
    )

    assert resolver.resolve(sheets) == [{"full_name": "Ana", "birth_date": "2015-04-02"}]


def test_invalid_ranges_and_missing_columns_yield_nothing() -> None:
    sheets = {"C1": {1: {"A": "value"}, 2: {"A": "value"}}}

    assert TableResolver(_table(start_row=0, end_row=2, columns={"a": "A"}), "C1").resolve(sheets) == []
    assert TableResolver(_table(start_row=2, end_row=1, columns={"a": "A"}), "C1").resolve(sheets) == []
    assert TableResolver(_table(start_row=-1, end_row=-1, columns={"a": "A"}), "C1").resolve(sheets) == []
    assert TableResolver(_table(start_row=1, end_row=2), "C1").resolve(sheets) == []
    assert TableResolver(None, "C1").resolve(sheets) == []


def test_family_entries_need_more_than_the_relation() -> None:
    sheets = {"C1": {43: {"D": "Santos"}, 44: {"D": "  "}, 47: {"D": " "}}}
    resolver = FamilyBackgroundResolver(
        (
            FamilyEntryDefinition.model_validate(
                {"relation": "Father", "cells": {"surname": "D43", "first_name": "D44"}}
            ),
            FamilyEntryDefinition.model_validate({"relation": "Mother", "cells": {"surname": "D47"}}),
        ),
        "C1",
    )

    family = resolver.resolve(sheets)

    assert len(family) == 1
    father = family[0]
    assert father["relation"] == "Father"
    assert father["surname"] == "Santos"
    assert father["first_name"] == ""
    assert set(FAMILY_FIELDS) <= set(father)


def test_family_relation_defaults_to_unknown() -> None:
    entry = FamilyEntryDefinition.model_validate({"cells": {"surname": "d36"}})
    resolver = FamilyBackgroundResolver((entry,), "C1")

    assert resolver.resolve({"C1": {36: {"D": "Reyes"}}})[0]["relation"] == "Unknown"


def test_other_information_joins_non_blank_cells() -> None:
    sheets = {"C3": {42: {"A": "Singing", "C": "  "}, 43: {"A": " "}, 44: {"A": "Chess"}}}
    definition = OtherInformationDefinition.model_validate(
        {
            "sheet": "C3",
            "skill_or_hobby": {"column": "A", "start_row": 42, "end_row": 48},
            "non_academic_distinctions": {"column": "C", "start_row": 42, "end_row": 48},
        }
    )

    result = OtherInformationResolver(definition, "C1").resolve(sheets)

    assert result == {"skill_or_hobby": "Singing\nChess"}


def test_references_are_renamed() -> None:
    sheets = {"C4": {52: {"A": " Juan Luna ", "F": "Manila"}, 53: {"F": "No name"}}}
    table = TableResolver(
        _table(
            sheet="C4",
            start_row=52,
            end_row=54,
            columns={"name": "A", "address": "F", "telephone_no": "G"},
            required=["name"],
        ),
        "C1",
    )

    assert ReferencesResolver(table).resolve(sheets) == [
        {"fullname": "Juan Luna", "address": "Manila", "telephone_no": ""}
    ]
