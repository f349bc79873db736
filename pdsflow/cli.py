"""Typer based command line entry points for PdsFlow."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from pds_io import PdsExtractor, PdsMapping, WorkbookReadError
from pds_io.schema import DOCUMENT_SECTIONS
from pds_io.utils.log import set_level
from pdsflow.config import load_pds_mapping, resolve_mapping_path
from pdsflow.core.errors import ConfigError
from pdsflow.core.logger import get_logger

app = typer.Typer(help="Extract CS Form 212 personal data sheets into structured records.")

MAPPING_OPTION_HELP = "Field mapping YAML (defaults to PDSFLOW_MAPPING or the bundled CS Form 212 map)."


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        help="Set global logging level (e.g. DEBUG/INFO/WARNING).",
    ),
) -> None:
    """Configure global CLI behaviour before executing commands."""

    level_value = getattr(logging, log_level.upper(), None)
    if not isinstance(level_value, int):
        raise typer.BadParameter(f"Unknown log level: {log_level}")

    get_logger().setLevel(level_value)
    set_level(level_value)


def _load_mapping_or_exit(mapping: Optional[Path]) -> PdsMapping:
    try:
        return load_pds_mapping(mapping)
    except ConfigError as exc:
        typer.secho(f"Invalid mapping: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc


def _extract_or_exit(workbook: Path, mapping: PdsMapping) -> Dict[str, Any]:
    logger = get_logger()
    try:
        return PdsExtractor(mapping).extract(workbook)
    except WorkbookReadError as exc:
        logger.error("extract failed workbook=%s error=%s", workbook, exc)
        typer.secho(f"Extraction failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command("extract")
def extract(
    workbook: Path = typer.Argument(..., help="Personal data sheet workbook (.xlsx)."),
    mapping: Optional[Path] = typer.Option(None, "--mapping", help=MAPPING_OPTION_HELP),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON here instead of stdout."),
    indent: int = typer.Option(2, "--indent", min=0, help="JSON indentation."),
) -> None:
    """Extract a workbook and print the document as JSON."""

    mapping_model = _load_mapping_or_exit(mapping)
    document = _extract_or_exit(workbook, mapping_model)
    payload = json.dumps(document, ensure_ascii=False, indent=indent or None)
    if output is None:
        typer.echo(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    typer.echo(f"Wrote {output}")


@app.command("sections")
def sections(
    workbook: Path = typer.Argument(..., help="Personal data sheet workbook (.xlsx)."),
    mapping: Optional[Path] = typer.Option(None, "--mapping", help=MAPPING_OPTION_HELP),
) -> None:
    """Show how many fields and records each section produced."""

    mapping_model = _load_mapping_or_exit(mapping)
    document = _extract_or_exit(workbook, mapping_model)

    scalar_count = sum(1 for key in document if key not in DOCUMENT_SECTIONS)
    typer.echo(f"{'personal_fields':<28} {scalar_count:>4}/{len(mapping_model.single_fields)}")
    for section in DOCUMENT_SECTIONS:
        found = document.get(section)
        count = len(found) if found else 0
        label = "-" if not found else str(count)
        typer.echo(f"{section:<28} {label:>4}")


@app.command("check-mapping")
def check_mapping(
    mapping: Optional[Path] = typer.Argument(None, help=MAPPING_OPTION_HELP),
) -> None:
    """Validate a mapping file and summarise what it reads."""

    mapping_path = resolve_mapping_path(mapping)
    mapping_model = _load_mapping_or_exit(mapping_path)
    tables = dict(mapping_model.repeating_sections)
    if mapping_model.children is not None:
        tables = {"children": mapping_model.children, **tables}

    typer.echo(f"Mapping: {mapping_path}")
    typer.echo(f"Default sheet: {mapping_model.default_sheet}")
    typer.echo(f"Single fields: {len(mapping_model.single_fields)}")
    typer.echo(f"Family entries: {len(mapping_model.family_background)}")
    for name, table in tables.items():
        sheet = table.sheet or mapping_model.default_sheet
        flag = "" if table.has_valid_range else " (invalid range, ignored)"
        typer.echo(
            f"Table {name}: {sheet}!{table.start_row}-{table.end_row} "
            f"{len(table.columns)} columns{flag}"
        )
    if mapping_model.other_information is not None:
        typer.echo(f"Other information fields: {len(mapping_model.other_information.ranges)}")
    typer.echo(f"Questionnaire items: {len(mapping_model.questionnaire)}")


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
