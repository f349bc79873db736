"""Uploaded workbook handling in front of the extraction engine."""

# Module responsibilities:
# - Reject uploads with the wrong extension or size before touching the engine.
# - Persist the upload to a temporary file, extract it, and always remove the file afterwards.
# - Translate engine failures into ExtractionError with the client file name logged.

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Union

from pds_io import PdsExtractor, PdsMapping, WorkbookReadError
from pds_io.schema import DOCUMENT_SECTIONS
from pdsflow.config import ALLOWED_UPLOAD_SUFFIXES, MAX_UPLOAD_BYTES, default_mapping
from pdsflow.core.errors import ExtractionError, UploadRejectedError
from pdsflow.core.logger import get_logger

UploadSource = Union[bytes, BinaryIO]


@dataclass(slots=True)
class ImportOutcome:
    """Extracted document plus a summary for the review screen."""

    filename: str
    document: Dict[str, Any]
    sections: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return "Data extracted successfully. Review the auto-filled form before saving."


def populated_sections(document: Dict[str, Any]) -> List[str]:
    """Section keys present in ``document``, in assembly order."""

    return [section for section in DOCUMENT_SECTIONS if section in document]


def _read_upload(source: UploadSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    # Read one byte past the limit so oversized streams are detected without loading them fully.
    return source.read(MAX_UPLOAD_BYTES + 1)


def _validate_upload(filename: str, payload: bytes) -> None:
    suffix = Path(filename).suffix.lower()
    if suffix not in ALLOWED_UPLOAD_SUFFIXES:
        allowed = ", ".join(sorted(ALLOWED_UPLOAD_SUFFIXES))
        raise UploadRejectedError(f"Unsupported file type '{suffix or filename}'; expected one of {allowed}")
    if not payload:
        raise UploadRejectedError("Uploaded file is empty")
    if len(payload) > MAX_UPLOAD_BYTES:
        raise UploadRejectedError(
            f"Uploaded file exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)} MB limit"
        )


def extract_upload(
    source: UploadSource,
    filename: str,
    *,
    mapping: PdsMapping | None = None,
) -> ImportOutcome:
    """Extract an uploaded personal data sheet.

    Args:
        source: Raw bytes or a binary stream of the uploaded workbook.
        filename: Client-side file name, used for the extension check and logging.
        mapping: Optional mapping override; defaults to the configured mapping.

    Returns:
        ImportOutcome holding the extracted document.

    Raises:
        UploadRejectedError: When the upload fails the extension or size checks.
        ExtractionError: When the workbook cannot be read.
    """

    logger = get_logger()
    payload = _read_upload(source)
    _validate_upload(filename, payload)

    extractor = PdsExtractor(mapping or default_mapping())
    fd, temp_name = tempfile.mkstemp(prefix="pds-upload-", suffix=Path(filename).suffix.lower())
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(payload)
        document = extractor.extract(temp_path)
    except WorkbookReadError as exc:
        logger.error("Failed to import personal data sheet file=%s error=%s", filename, exc, exc_info=True)
        raise ExtractionError(
            "Unable to read the personal data sheet. Please ensure it follows the configured template. "
            f"Error: {exc}"
        ) from exc
    finally:
        temp_path.unlink(missing_ok=True)

    sections = populated_sections(document)
    logger.info("Imported personal data sheet file=%s sections=%s", filename, ",".join(sections))
    return ImportOutcome(filename=filename, document=document, sections=sections)
