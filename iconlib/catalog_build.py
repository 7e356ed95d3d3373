"""
Metadata builder: walk the icon asset tree and produce the catalog.

Every ``*.svg`` under the SVG root becomes one :class:`IconRecord`.  The
first folder below the root is the category, deeper folders form the
``/``-joined subcategory.  Keywords are the tokenized filename merged
with any alias table entry for the icon's composite key.  The finished
catalog is sorted by category, subcategory (absent first) and
case-insensitive name, and published atomically.
"""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from .config import (
    ALIAS_PATH,
    KNOWN_CATEGORIES,
    MAIN_CATEGORIES,
    METADATA_PATH,
    PNG_DIR,
    PNG_SCALE_SUFFIXES,
    PNG_URL_PREFIX,
    SVG_DIR,
    SVG_URL_PREFIX,
    UNCATEGORIZED,
    AliasTable,
    IconRecord,
    PngVariant,
    icon_key_for,
)
from .normalize import display_name_for, generate_keywords
from .storage import AliasTableError, load_alias_table, write_catalog


# ---------------------------
# Asset tree helpers
# ---------------------------

def ensure_asset_tree(
    svg_dir: Path = SVG_DIR,
    png_dir: Path = PNG_DIR,
    categories: Sequence[str] = MAIN_CATEGORIES,
) -> bool:
    """
    Create the SVG / PNG roots and one folder per main category when they
    are missing.  A freshly created tree simply contains zero icons.

    Returns False when the SVG root cannot be used as a directory (for
    example a regular file sits at that path); the caller then treats the
    tree as empty.
    """
    usable = True
    for root in (svg_dir, png_dir):
        if not root.exists():
            logger.warning("Asset directory not found, creating: {}", root)
        try:
            root.mkdir(parents=True, exist_ok=True)
            for category in categories:
                category_dir = root / category
                if not category_dir.exists():
                    category_dir.mkdir(parents=True, exist_ok=True)
                    logger.info("Created directory: {}", category_dir)
        except OSError as e:
            logger.error("Unusable asset directory {}: {}", root, e)
            if root == svg_dir:
                usable = False
    return usable


def iter_svg_files(svg_dir: Path = SVG_DIR) -> Iterator[Path]:
    """Yield SVG files below ``svg_dir`` in a stable order."""
    for path in sorted(svg_dir.rglob("*.svg")):
        if path.is_file():
            yield path


def classify_folder(parts: Tuple[str, ...]) -> Tuple[str, Optional[str]]:
    """
    Map folder segments (relative to the SVG root) to (category, subcategory).

    Folders outside the fixed category set are filed under
    ``uncategorized`` with the whole folder path kept as subcategory.
    """
    if not parts:
        return UNCATEGORIZED, None
    if parts[0] not in KNOWN_CATEGORIES:
        return UNCATEGORIZED, "/".join(parts)
    return parts[0], "/".join(parts[1:]) or None


def find_png_variants(
    base_name: str,
    folder_parts: Tuple[str, ...],
    png_dir: Path = PNG_DIR,
) -> List[PngVariant]:
    """
    Look up ``<name>.png``, ``<name>@2x.png`` and ``<name>@3x.png`` in the
    PNG folder mirroring the SVG location.  A missing folder is created and
    yields no variants.
    """
    folder = png_dir.joinpath(*folder_parts)
    if not folder.is_dir():
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.debug("No PNG folder for {}: {}", base_name, e)
        return []

    variants: List[PngVariant] = []
    for suffix, label in PNG_SCALE_SUFFIXES:
        filename = f"{base_name}{suffix}.png"
        if (folder / filename).is_file():
            url = "/".join([PNG_URL_PREFIX, *folder_parts, filename])
            variants.append(PngVariant(path=url, size=label))
    return variants


def _date_added(path: Path) -> str:
    mtime = path.stat().st_mtime
    return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat()


def _icon_id(folder_parts: Tuple[str, ...], base_name: str) -> str:
    return "-".join([*folder_parts, base_name])


# ---------------------------
# Record construction
# ---------------------------

def build_icon_record(
    svg_file: Path,
    svg_dir: Path = SVG_DIR,
    png_dir: Path = PNG_DIR,
    alias_table: Optional[AliasTable] = None,
) -> IconRecord:
    """Build one catalog record for ``svg_file``."""
    folder_parts = svg_file.relative_to(svg_dir).parent.parts
    base_name = svg_file.stem
    category, subcategory = classify_folder(folder_parts)

    keywords = generate_keywords(svg_file.name)
    key = icon_key_for(category, subcategory, base_name)
    extra = (alias_table or {}).get(key)
    if extra:
        keywords = keywords + list(extra)

    return IconRecord(
        id=_icon_id(folder_parts, base_name),
        name=base_name,
        display_name=display_name_for(base_name),
        category=category,
        subcategory=subcategory,
        full_path="/".join(folder_parts),
        keywords=keywords,
        svg_path="/".join([SVG_URL_PREFIX, *folder_parts, svg_file.name]),
        png_variants=find_png_variants(base_name, folder_parts, png_dir),
        date_added=_date_added(svg_file),
    )


def _ensure_unique_ids(records: List[IconRecord]) -> List[IconRecord]:
    seen: Dict[str, str] = {}
    out: List[IconRecord] = []
    for record in records:
        if record.id in seen:
            digest = hashlib.sha1(record.icon_key.encode("utf-8")).hexdigest()[:8]
            new_id = f"{record.id}-{digest}"
            logger.warning(
                "Icon id {} for {} collides with {}; using {}",
                record.id, record.icon_key, seen[record.id], new_id,
            )
            record = record.model_copy(update={"id": new_id})
        seen[record.id] = record.icon_key
        out.append(record)
    return out


def sort_catalog(records: Sequence[IconRecord]) -> List[IconRecord]:
    """Category, then subcategory (absent first), then case-insensitive name."""
    if not records:
        return []
    frame = pd.DataFrame(
        {
            "category": [r.category for r in records],
            "subcategory": [r.subcategory or "" for r in records],
            "name_key": [r.name.lower() for r in records],
            "name": [r.name for r in records],
        }
    )
    order = frame.sort_values(
        ["category", "subcategory", "name_key", "name"], kind="mergesort"
    ).index
    return [records[i] for i in order]


def build_catalog(
    svg_dir: Path = SVG_DIR,
    png_dir: Path = PNG_DIR,
    alias_table: Optional[AliasTable] = None,
) -> List[IconRecord]:
    """
    Traverse the asset tree once and return the sorted catalog.

    Assets that cannot be read or validated are logged with their path
    and skipped; they never abort the run.
    """
    if not ensure_asset_tree(svg_dir, png_dir):
        return []

    records: List[IconRecord] = []
    for svg_file in iter_svg_files(svg_dir):
        try:
            records.append(build_icon_record(svg_file, svg_dir, png_dir, alias_table))
        except (OSError, ValidationError) as e:
            logger.error("Skipping icon {}: {}", svg_file, e)

    records = _ensure_unique_ids(sort_catalog(records))
    return records


def summarise_catalog(records: Iterable[IconRecord]) -> pd.Series:
    """Icon counts per category, sorted by category name."""
    categories = [r.category for r in records]
    return pd.Series(categories, dtype="object").value_counts().sort_index()


# ---------------------------
# Pipeline entrypoint
# ---------------------------

def generate_metadata(
    svg_dir: Path = SVG_DIR,
    png_dir: Path = PNG_DIR,
    metadata_path: Path = METADATA_PATH,
    alias_path: Path = ALIAS_PATH,
) -> List[IconRecord]:
    """
    End-to-end: load aliases -> walk assets -> sort -> write catalog.

    A malformed alias table is reported and replaced by an empty one so
    the catalog can still be rebuilt.  The alias file itself is only read.
    """
    try:
        alias_table = load_alias_table(alias_path)
    except AliasTableError as e:
        logger.error("{}. Proceeding with an empty alias set.", e)
        alias_table = {}

    records = build_catalog(svg_dir, png_dir, alias_table)
    write_catalog(records, metadata_path)

    counts = summarise_catalog(records)
    for category, count in counts.items():
        logger.info("  {}: {} icons", category, count)
    logger.info("Metadata generated successfully! Total icons: {}", len(records))
    return records
