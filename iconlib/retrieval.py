"""
Relevance scoring for catalog search.

Each icon gets a non-negative integer score per query term and the
per-term scores are summed:

* name / displayName equals the term           +100
* name starts with the term                    +50
* name contains the term                       +30
* category or subcategory equals the term      +40
* each searchable string (name words, displayName words, category,
  subcategory, keywords, live aliases) equal to the term +20, otherwise
  containing it +10

Icons with a total of zero are dropped; the rest are ordered by score
descending with catalog order as the stable tie-break.

Example::

    from iconlib.retrieval import search_icons
    for hit in search_icons("arrow down", icons, aliases):
        print(hit.icon.name, hit.score)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Sequence

import numpy as np

from .config import (
    SCORE_CATEGORY_MATCH,
    SCORE_EXACT_NAME,
    SCORE_NAME_CONTAINS,
    SCORE_NAME_PREFIX,
    SCORE_TERM_EXACT,
    SCORE_TERM_PARTIAL,
    IconRecord,
)
from .normalize import name_words, query_terms


@dataclass(frozen=True)
class ScoredIcon:
    icon: IconRecord
    score: int


def searchable_terms(icon: IconRecord, aliases: Sequence[str] = ()) -> List[str]:
    """All lowercase strings a query term is compared against, blanks removed."""
    terms: List[str] = []
    terms += name_words(icon.name)
    terms += icon.display_name.lower().split()
    terms.append(icon.category.lower())
    terms.append((icon.subcategory or "").lower())
    terms += [k.lower() for k in icon.keywords]
    terms += [a.lower() for a in aliases]
    return [t for t in terms if t.strip()]


def score_icon(icon: IconRecord, terms: Sequence[str], aliases: Sequence[str] = ()) -> int:
    """Summed relevance of ``icon`` for already-normalised query ``terms``."""
    if not terms:
        return 0
    name = icon.name.lower()
    display = icon.display_name.lower()
    category = icon.category.lower()
    subcategory = (icon.subcategory or "").lower()
    candidates = searchable_terms(icon, aliases)

    score = 0
    for term in terms:
        if name == term or display == term:
            score += SCORE_EXACT_NAME
        if name.startswith(term):
            score += SCORE_NAME_PREFIX
        if term in name:
            score += SCORE_NAME_CONTAINS
        if term == category or (subcategory and term == subcategory):
            score += SCORE_CATEGORY_MATCH
        for candidate in candidates:
            if candidate == term:
                score += SCORE_TERM_EXACT
            elif term in candidate:
                score += SCORE_TERM_PARTIAL
    return score


def rank_icons(
    icons: Sequence[IconRecord],
    terms: Sequence[str],
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> List[ScoredIcon]:
    """
    Score every icon, drop zero scores and order by score descending.

    The sort is stable, so equal scores keep their catalog order.
    """
    if not icons or not terms:
        return []
    alias_lookup = aliases or {}
    scores = np.fromiter(
        (score_icon(icon, terms, alias_lookup.get(icon.icon_key, ())) for icon in icons),
        dtype=np.int64,
        count=len(icons),
    )
    order = np.argsort(-scores, kind="stable")
    return [ScoredIcon(icon=icons[i], score=int(scores[i])) for i in order if scores[i] > 0]


def search_icons(
    query: str | None,
    icons: Sequence[IconRecord],
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> List[ScoredIcon]:
    """High-level helper: normalise ``query`` then rank ``icons``."""
    return rank_icons(icons, query_terms(query), aliases)
