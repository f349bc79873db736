"""Document assembly: the extraction entry point."""

# Module responsibilities:
# - Select the resolver for every mapping node once, when an extractor is built.
# - Run resolvers over freshly indexed sheets and merge non-empty results into one document.
# - Hold no state between calls; the mapping is read-only and shared.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from .mapping import PdsMapping
from .questionnaire import QuestionnaireResolver
from .resolvers import (
    BaseResolver,
    FamilyBackgroundResolver,
    OtherInformationResolver,
    ReferencesResolver,
    SingleFieldResolver,
    TableResolver,
)
from .schema import TABLE_SECTIONS
from .sheet_index import IndexedWorkbook, load_sheets
from .utils.log import get_logger

logger = get_logger("assembler")


@dataclass(frozen=True)
class ResolverPlan:
    """Resolvers chosen for a mapping, in assembly order."""

    single_fields: SingleFieldResolver
    sections: Tuple[Tuple[str, BaseResolver], ...]


def build_plan(mapping: PdsMapping) -> ResolverPlan:
    """Pick a resolver for each section of ``mapping``."""

    default_sheet = mapping.default_sheet
    sections: list[Tuple[str, BaseResolver]] = [
        ("family_background", FamilyBackgroundResolver(mapping.family_background, default_sheet)),
        ("children", TableResolver(mapping.children, default_sheet)),
    ]
    for section in TABLE_SECTIONS:
        sections.append(
            (section, TableResolver(mapping.repeating_sections.get(section), default_sheet))
        )
    references = TableResolver(mapping.repeating_sections.get("references"), default_sheet)
    sections.extend(
        [
            ("references", ReferencesResolver(references)),
            ("other_information", OtherInformationResolver(mapping.other_information, default_sheet)),
            ("questionnaire", QuestionnaireResolver(mapping.questionnaire, default_sheet)),
        ]
    )
    return ResolverPlan(
        single_fields=SingleFieldResolver(mapping.single_fields, default_sheet),
        sections=tuple(sections),
    )


class PdsExtractor:
    """Extract personal data sheet workbooks with a fixed mapping.

    The extractor can be shared across threads: every call indexes its own
    workbook and builds its own document.
    """

    def __init__(self, mapping: PdsMapping) -> None:
        self.mapping = mapping
        self.plan = build_plan(mapping)

    def assemble(self, sheets: IndexedWorkbook) -> Dict[str, Any]:
        """Resolve every section over already indexed sheets.

        Sections that resolve to nothing are omitted from the result.
        """

        document: Dict[str, Any] = self.plan.single_fields.resolve(sheets)
        for section, resolver in self.plan.sections:
            result = resolver.resolve(sheets)
            if result:
                document[section] = result
        return document

    def extract(self, path: Union[str, Path]) -> Dict[str, Any]:
        """Load ``path`` and return the assembled document.

        Raises:
            UnreadableWorkbookError: When the workbook cannot be opened.
            EmptyWorkbookError: When the workbook has no worksheets.
        """

        sheets = load_sheets(path)
        document = self.assemble(sheets)
        logger.info(
            "Document assembled",
            extra={
                "path": str(path),
                "sections": [name for name, _ in self.plan.sections if name in document],
                "keys": len(document),
            },
        )
        return document


def extract_document(path: Union[str, Path], mapping: PdsMapping) -> Dict[str, Any]:
    """Convenience wrapper for a one-off extraction."""

    return PdsExtractor(mapping).extract(path)
