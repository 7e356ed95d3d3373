"""
Alias synthesis for icon search.

Expands an icon's name, category and subcategory into related search
terms using fixed rule tables (category synonyms, per-token synonym maps,
opposite directions, compound-name heuristics).  Every rule only adds to
the alias set, so the rules can run in any order and re-running the pass
on the same input always gives the same output.

The module also owns the offline alias generation pass, which seeds
itself from the persisted catalog and merges with the hand-edited
alias table on disk.
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Set, Tuple

from loguru import logger

from .config import ALIAS_PATH, METADATA_PATH, AliasTable, IconRecord
from .normalize import split_name
from .storage import load_alias_table, load_catalog, write_alias_table

# ---------------------------
# Rule tables
# ---------------------------

CATEGORY_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "arrows": ("direction", "pointer", "navigation", "movement", "indicator"),
    "commerce": ("shopping", "business", "money", "retail", "transaction", "payment"),
    "culture": ("art", "tradition", "heritage", "society", "diversity"),
    "education": ("learning", "school", "knowledge", "academic", "study", "teaching"),
    "entertainment": ("fun", "leisure", "recreation", "amusement", "hobby", "media"),
    "essentials": ("basic", "core", "fundamental", "necessary", "key", "standard"),
    "office": ("workplace", "business", "corporate", "professional", "work"),
    "social": ("connection", "communication", "network", "community", "sharing"),
    "technology": ("digital", "electronic", "device", "gadget", "innovation", "tech"),
    "tools": ("utility", "equipment", "instrument", "apparatus", "implement"),
    "travel": ("journey", "trip", "transport", "vacation", "tourism", "movement"),
})

SPECIFIC_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "home": ("house", "residence", "dwelling", "homepage", "main"),
    "user": ("person", "profile", "account", "member", "individual"),
    "search": ("find", "lookup", "magnify", "query", "explore"),
    "phone": ("call", "telephone", "mobile", "contact", "cellular"),
    "email": ("mail", "message", "communication", "contact", "correspondence"),
    "heart": ("love", "like", "favorite", "emotion", "care"),
    "star": ("favorite", "rating", "bookmark", "ranking", "important"),
    "settings": ("preferences", "options", "configuration", "setup", "control"),
    "notification": ("alert", "reminder", "update", "badge", "attention"),
    "calendar": ("date", "schedule", "event", "planner", "appointment"),
    "location": ("place", "position", "map", "pin", "destination", "gps"),
    "camera": ("photo", "picture", "image", "snapshot", "photography"),
    "document": ("file", "paper", "page", "record", "text"),
    "lock": ("security", "protection", "privacy", "password", "secure"),
    "chat": ("message", "conversation", "discussion", "talk", "dialogue"),
    "cart": ("shopping", "basket", "purchase", "buy", "checkout"),
    "play": ("start", "video", "audio", "media", "begin"),
    "pause": ("stop", "halt", "wait", "break", "interrupt"),
    "share": ("send", "distribute", "social", "publish", "forward"),
    "download": ("save", "get", "retrieve", "obtain", "fetch"),
    "upload": ("send", "put", "transfer", "attach", "submit"),
    "trash": ("delete", "remove", "bin", "garbage", "dispose"),
    "edit": ("modify", "change", "update", "alter", "revise"),
    "arrow": ("direction", "pointer", "indicator", "move"),
    "menu": ("hamburger", "list", "navigation", "options", "selection"),
})

DIRECTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "up": ("upward", "ascending", "northward", "skyward", "rise"),
    "down": ("downward", "descending", "southward", "fall", "lower"),
    "left": ("westward", "backward", "previous", "lateral"),
    "right": ("eastward", "forward", "next", "advance"),
    "top": ("upper", "above", "overhead", "superior"),
    "bottom": ("lower", "below", "underneath", "inferior"),
})

ACTION_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "add": ("plus", "create", "insert", "include", "append"),
    "remove": ("delete", "subtract", "eliminate", "exclude", "erase"),
    "check": ("verify", "tick", "confirm", "validate", "approve"),
    "close": ("shut", "exit", "dismiss", "end", "terminate"),
    "refresh": ("reload", "update", "renew", "reset", "synchronize"),
    "zoom": ("magnify", "enlarge", "scale", "focus", "expand"),
})

SHAPE_KEYWORDS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "circle": ("round", "circular", "disc", "sphere", "oval"),
    "square": ("rectangle", "box", "block", "quadrilateral", "equilateral"),
    "triangle": ("pyramid", "wedge", "delta", "arrowhead", "angular"),
    "line": ("stroke", "path", "straight", "segment", "linear"),
})

TOKEN_TABLES: Tuple[Mapping[str, Tuple[str, ...]], ...] = (
    SPECIFIC_KEYWORDS,
    DIRECTION_KEYWORDS,
    ACTION_KEYWORDS,
    SHAPE_KEYWORDS,
)

OPPOSITE_DIRECTIONS: Mapping[str, str] = MappingProxyType({
    "up": "down",
    "down": "up",
    "left": "right",
    "right": "left",
    "top": "bottom",
    "bottom": "top",
})

VERTICAL_DIRECTIONS = frozenset({"up", "down", "top", "bottom"})
HORIZONTAL_DIRECTIONS = frozenset({"left", "right"})
DIAGONAL_ALIASES: Tuple[str, ...] = ("diagonal", "corner")

# (anchor, any-of triggers, aliases); matched as substrings of the full name
COMPOUND_RULES: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    ("arrow", ("down", "bottom"), ("download", "dropdown")),
    ("arrow", ("up", "top"), ("upload", "upward")),
    ("arrow", ("refresh",), ("sync", "reload", "update")),
    ("arrow", ("circle",), ("rotate", "cycle", "loop")),
)


# ---------------------------
# Synthesis
# ---------------------------

def _token_rule_aliases(tokens: Iterable[str]) -> Set[str]:
    out: Set[str] = set()
    for token in tokens:
        for table in TOKEN_TABLES:
            out.update(table.get(token, ()))
    return out


def _opposite_aliases(tokens: Iterable[str]) -> Set[str]:
    out: Set[str] = set()
    for token in tokens:
        opposite = OPPOSITE_DIRECTIONS.get(token)
        if opposite:
            out.add(f"opposite-{opposite}")
            out.add(f"not-{opposite}")
    return out


def _compound_name_aliases(tokens: List[str]) -> Set[str]:
    if len(tokens) <= 1:
        return set()
    return {" ".join(tokens), "".join(tokens)}


def _diagonal_aliases(tokens: Iterable[str]) -> Set[str]:
    token_set = set(tokens)
    if token_set & VERTICAL_DIRECTIONS and token_set & HORIZONTAL_DIRECTIONS:
        return set(DIAGONAL_ALIASES)
    return set()


def _compound_semantic_aliases(name: str) -> Set[str]:
    lowered = name.lower()
    out: Set[str] = set()
    for anchor, triggers, aliases in COMPOUND_RULES:
        if anchor in lowered and any(t in lowered for t in triggers):
            out.update(aliases)
    return out


def generate_aliases(
    name: str,
    category: str,
    subcategory: Optional[str] = None,
    keywords: Iterable[str] = (),
) -> List[str]:
    """
    Synthesize search aliases for one icon.

    Returns a sorted, de-duplicated list with blank entries removed.
    The result may be empty.
    """
    tokens = split_name(name)
    aliases: Set[str] = set(CATEGORY_KEYWORDS.get(category, ()))
    aliases |= _token_rule_aliases(tokens)
    if subcategory and subcategory not in tokens:
        aliases.add(subcategory)
    aliases |= _opposite_aliases(tokens)
    aliases |= _compound_name_aliases(tokens)
    aliases |= _diagonal_aliases(tokens)
    aliases |= _compound_semantic_aliases(name)
    aliases.update(k.lower() for k in keywords if isinstance(k, str))
    return sorted(a for a in aliases if a.strip())


def aliases_for_record(record: IconRecord) -> List[str]:
    return generate_aliases(
        name=record.name,
        category=record.category,
        subcategory=record.subcategory,
        keywords=record.keywords,
    )


def build_alias_table(
    records: Iterable[IconRecord],
    existing: Optional[AliasTable] = None,
) -> AliasTable:
    """
    Merge synthesized aliases for ``records`` into ``existing``.

    Existing entries are only ever added to; keys with no matching
    record are kept so hand-written aliases survive regeneration.
    """
    merged: dict[str, Set[str]] = {}
    for key, values in (existing or {}).items():
        merged.setdefault(key, set()).update(v for v in values if v.strip())
    for record in records:
        aliases = aliases_for_record(record)
        if aliases:
            merged.setdefault(record.icon_key, set()).update(aliases)
    return {key: sorted(merged[key]) for key in sorted(merged) if merged[key]}


def _log_alias_summary(table: AliasTable, path: Path) -> None:
    if not table:
        logger.warning("Alias table is empty; nothing to summarise")
        return
    total = sum(len(v) for v in table.values())
    top_key = max(sorted(table), key=lambda k: len(table[k]))
    sample = table[top_key][:10]
    logger.info("Total icons with aliases: {}", len(table))
    logger.info("Total aliases generated: {}", total)
    logger.info("Average aliases per icon: {:.2f}", total / len(table))
    logger.info(
        "Maximum aliases for one icon: {} ({}), e.g. {}{}",
        len(table[top_key]),
        top_key,
        ", ".join(sample),
        "..." if len(table[top_key]) > len(sample) else "",
    )
    logger.info("Output file: {}", path)


def generate_alias_file(
    metadata_path: Path = METADATA_PATH,
    alias_path: Path = ALIAS_PATH,
) -> AliasTable:
    """
    End-to-end alias pass: load catalog -> synthesize -> merge -> write.

    Aborts (re-raises) when the catalog is missing or malformed, or when
    the existing alias table cannot be parsed; the alias file on disk is
    left untouched in that case.
    """
    records = load_catalog(metadata_path)
    existing = load_alias_table(alias_path)
    table = build_alias_table(records, existing)
    write_alias_table(table, alias_path)
    _log_alias_summary(table, alias_path)
    return table
