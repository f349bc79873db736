"""Configuration helpers for PdsFlow runtime files.

Resolves which field-mapping YAML to use (explicit path, ``PDSFLOW_MAPPING``
environment variable, or the CS Form 212 mapping shipped with the package)
and loads it once so every extraction shares the same validated mapping.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

from pds_io.mapping import MappingError, PdsMapping, load_mapping
from pdsflow.core.errors import ConfigError

load_dotenv(override=False)

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_MAPPING_PATH = CONFIG_DIR / "pds_map.yaml"
MAPPING_ENV = "PDSFLOW_MAPPING"

# Upload limits applied before a workbook reaches the extractor.
ALLOWED_UPLOAD_SUFFIXES = frozenset({".xlsx", ".xlsm"})
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def resolve_mapping_path(path: str | Path | None = None) -> Path:
    """Return the mapping file to use, preferring an explicit ``path``."""

    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(MAPPING_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_MAPPING_PATH


def load_pds_mapping(path: str | Path | None = None) -> PdsMapping:
    """Load the field mapping, raising ``ConfigError`` on invalid files."""

    mapping_path = resolve_mapping_path(path)
    try:
        return load_mapping(mapping_path)
    except MappingError as exc:
        raise ConfigError(str(exc)) from exc


@lru_cache(maxsize=1)
def default_mapping() -> PdsMapping:
    """Mapping used when callers do not pass one; loaded once per process."""

    return load_pds_mapping()
