"""
Text normalization utilities used across the icon library.

Filenames are turned into searchable keyword tokens here, and free-text
queries are split into scoring terms.  Keeping both in one place ensures
catalog keywords and user queries are treated the same way.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import List

# ---------------------------
# Basic helpers
# ---------------------------

NAME_SEPARATOR_RE = re.compile(r"[-_]")
NAME_WORD_SPLIT_RE = re.compile(r"[-_\s]")
CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
WORD_START_RE = re.compile(r"\b\w")
ASSET_EXTENSIONS = frozenset({".svg", ".png"})


def strip_extension(filename: str) -> str:
    """
    Return the base filename without directory or asset extension.

    Only ``.svg`` / ``.png`` are removed, so dotted names such as
    ``battery-1.5`` keep their last segment.
    """
    if not filename:
        return ""
    path = PurePath(filename)
    if path.suffix.lower() in ASSET_EXTENSIONS:
        return path.stem
    return path.name


def _dedup_preserve_order(items: List[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


# ---------------------------
# Keyword derivation
# ---------------------------

def generate_keywords(filename: str) -> List[str]:
    """
    Turn a raw icon filename into its base set of searchable words.

    - strip the extension
    - hyphens / underscores become spaces
    - split camelCase boundaries (``arrowDown`` -> ``arrow down``)
    - split on whitespace, drop empties, lowercase, de-duplicate

    Tokenizing ``"icon-name"`` and ``"icon name"`` gives the same result.
    """
    base = strip_extension(filename)
    base = NAME_SEPARATOR_RE.sub(" ", base)
    base = CAMEL_BOUNDARY_RE.sub(r"\1 \2", base)
    words = [w.lower() for w in base.split() if w.strip()]
    return _dedup_preserve_order(words)


def split_name(name: str) -> List[str]:
    """Lowercase name parts split on hyphen / underscore."""
    return [part.lower() for part in NAME_SEPARATOR_RE.split(name or "") if part]


def name_words(name: str) -> List[str]:
    """Lowercase name parts split on hyphen, underscore or whitespace."""
    return [part for part in NAME_WORD_SPLIT_RE.split((name or "").lower()) if part]


def display_name_for(name: str) -> str:
    """Human title for an icon: ``arrow-down_circle`` -> ``Arrow Down Circle``."""
    spaced = NAME_SEPARATOR_RE.sub(" ", name or "")
    return WORD_START_RE.sub(lambda m: m.group(0).upper(), spaced)


# ---------------------------
# Queries
# ---------------------------

def query_terms(text: str | None) -> List[str]:
    """
    Split a free-text query into lowercase scoring terms.

    Whitespace-only or empty input yields an empty list, which callers
    treat as "no search".
    """
    if not text:
        return []
    return [term for term in text.lower().split() if term.strip()]
