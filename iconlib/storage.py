"""
Persistence helpers for the two generated artifacts.

The catalog (an ordered JSON list of icon records) and the alias table
(a JSON object mapping icon keys to alias lists) are both written via a
temporary file in the target directory followed by a rename, so readers
never observe a half-written file.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterable, List

from loguru import logger
from pydantic import ValidationError

from .config import ALIAS_PATH, METADATA_PATH, AliasTable, IconRecord


class CatalogFormatError(ValueError):
    """The persisted catalog is not a JSON list of icon records."""


class AliasTableError(ValueError):
    """The persisted alias table is not a JSON object of string lists."""


# ---------------------------
# Generic JSON IO
# ---------------------------

def atomic_write_json(path: Path, payload: Any) -> Path:
    """Serialise ``payload`` to ``path`` through a same-directory temp file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        ) as handle:
            tmp_path = Path(handle.name)
            handle.write(data)
            handle.flush()
        tmp_path.replace(path)
    except BaseException:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise
    return path


def _read_json(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


# ---------------------------
# Catalog
# ---------------------------

def load_catalog(path: Path = METADATA_PATH) -> List[IconRecord]:
    """
    Load the persisted catalog.

    Raises ``FileNotFoundError`` when the file does not exist and
    :class:`CatalogFormatError` when it cannot be parsed into records.
    """
    if not path.exists():
        raise FileNotFoundError(
            f"Catalog file not found: {path}. Run metadata generation first."
        )
    try:
        raw = _read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogFormatError(f"Malformed catalog JSON in {path}: {e}") from e
    if not isinstance(raw, list):
        raise CatalogFormatError(
            f"Catalog {path} must contain a JSON list, got {type(raw).__name__}"
        )

    records: List[IconRecord] = []
    for position, item in enumerate(raw):
        try:
            records.append(IconRecord.model_validate(item))
        except ValidationError as e:
            raise CatalogFormatError(
                f"Invalid icon record at index {position} in {path}: {e}"
            ) from e
    logger.info("Loaded catalog with {} icons from {}", len(records), path)
    return records


def write_catalog(records: Iterable[IconRecord], path: Path = METADATA_PATH) -> Path:
    payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    atomic_write_json(path, payload)
    logger.info("Catalog written with {} icons to {}", len(payload), path)
    return path


# ---------------------------
# Alias table
# ---------------------------

def normalise_icon_key(key: str) -> str:
    return key.strip().replace("\\", "/")


def load_alias_table(path: Path = ALIAS_PATH) -> AliasTable:
    """
    Load the hand-editable alias table.

    A missing file is a valid state and yields an empty table.  Keys are
    normalised to forward slashes.  Raises :class:`AliasTableError` on
    anything that is not a ``{str: [str, ...]}`` JSON object.
    """
    if not path.exists():
        logger.info("No alias file found at {}. Only auto-generated keywords will be used.", path)
        return {}
    try:
        raw = _read_json(path)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise AliasTableError(f"Malformed alias table JSON in {path}: {e}") from e
    if not isinstance(raw, dict):
        raise AliasTableError(
            f"Alias table {path} must contain a JSON object, got {type(raw).__name__}"
        )

    table: Dict[str, List[str]] = {}
    for key, values in raw.items():
        if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
            raise AliasTableError(
                f"Alias table {path}: entry {key!r} must be a list of strings"
            )
        table.setdefault(normalise_icon_key(key), []).extend(values)
    logger.info("Loaded aliases for {} icons from {}", len(table), path)
    return table


def write_alias_table(table: AliasTable, path: Path = ALIAS_PATH) -> Path:
    payload = {key: sorted(set(table[key])) for key in sorted(table)}
    atomic_write_json(path, payload)
    logger.info("Alias table written with {} keys to {}", len(payload), path)
    return path
