"""Yes/no questionnaire of the personal data sheet (questions 34 to 40)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping

from .casting import cast_boolean, cast_value
from .mapping import QuestionDefinition
from .resolvers import BaseResolver
from .schema import QuestionnaireEntry
from .sheet_index import IndexedWorkbook, cell_value


@dataclass(frozen=True)
class QuestionnaireResolver(BaseResolver):
    """One entry per configured question, answered or not.

    A blank answer cell reads as ``False``; "No" is a real answer, so no entry
    is ever filtered out.
    """

    questions: Mapping[int, QuestionDefinition]
    default_sheet: str

    def resolve(self, sheets: IndexedWorkbook) -> List[QuestionnaireEntry]:
        entries: List[QuestionnaireEntry] = []
        for number, definition in self.questions.items():
            sheet = definition.sheet or self.default_sheet
            answer = cell_value(sheets, definition.answer_cell, sheet)
            details = cast_value(cell_value(sheets, definition.details_cell, sheet), "string")
            entries.append(
                {
                    "question_number": int(number),
                    "answer": cast_boolean(answer),
                    "details": details or "",
                }
            )
        return entries
