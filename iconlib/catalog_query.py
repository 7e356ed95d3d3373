"""
Catalog query service: search-or-filter, sort and paginate in one call.

When a non-blank query is given the relevance ranking decides the order
and category / subcategory / sort parameters are ignored.  Otherwise the
catalog is filtered by category (``all`` disables it) and subcategory,
then sorted by name, category or date.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .config import (
    ALL_CATEGORIES,
    CatalogQuery,
    IconRecord,
    IconsResponse,
    Pagination,
)
from .normalize import query_terms
from .retrieval import rank_icons
from .snapshot import CatalogSnapshot


def filter_icons(
    icons: Sequence[IconRecord],
    category: str = ALL_CATEGORIES,
    subcategory: Optional[str] = None,
) -> List[IconRecord]:
    out = list(icons)
    if category and category != ALL_CATEGORIES:
        out = [icon for icon in out if icon.category == category]
    if subcategory:
        out = [icon for icon in out if icon.subcategory == subcategory]
    return out


def _date_key(icon: IconRecord) -> float:
    """Seconds since epoch for ``date_added``; missing or unparseable is 0."""
    if not icon.date_added:
        return 0.0
    try:
        stamp = datetime.fromisoformat(icon.date_added.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    return stamp.timestamp()


def _category_key(icon: IconRecord) -> Tuple[str, str, str]:
    return icon.category, icon.subcategory or "", icon.name.lower()


def _name_key(icon: IconRecord) -> str:
    return icon.name.lower()


_SORT_KEYS = {
    "name": _name_key,
    "category": _category_key,
    "date": _date_key,
}


def sort_icons(
    icons: Sequence[IconRecord],
    sort_by: str = "name",
    sort_order: str = "asc",
) -> List[IconRecord]:
    """Stable sort; equal keys keep their incoming order in both directions."""
    key = _SORT_KEYS.get(sort_by, _name_key)
    return sorted(icons, key=key, reverse=(sort_order == "desc"))


def paginate(items: Sequence, page: int, limit: int) -> Tuple[List, Pagination]:
    """
    Slice ``items`` for a 1-indexed ``page``.  Pages past the end yield an
    empty slice rather than an error.
    """
    total = len(items)
    total_pages = math.ceil(total / limit) if limit else 0
    start = (page - 1) * limit
    page_items = list(items[start:start + limit])
    pagination = Pagination(
        total=total,
        total_pages=total_pages,
        current_page=page,
        page_size=limit,
        has_next=page < total_pages,
        has_previous=page > 1,
    )
    return page_items, pagination


def query_catalog(snapshot: CatalogSnapshot, params: CatalogQuery) -> IconsResponse:
    """Answer one catalog request against a fixed snapshot."""
    terms = query_terms(params.q)
    if terms:
        ranked = rank_icons(snapshot.icons, terms, snapshot.aliases)
        results = [hit.icon for hit in ranked]
        logger.info("Found {} icons matching search {!r}", len(results), params.q)
    else:
        results = filter_icons(snapshot.icons, params.category, params.subcategory)
        results = sort_icons(results, params.sort_by, params.sort_order)

    page_items, pagination = paginate(results, params.page, params.limit)
    return IconsResponse(icons=page_items, pagination=pagination)
