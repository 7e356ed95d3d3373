"""
Configuration for the icon library catalog.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Paths
PROJECT_ROOT = Path(os.getenv("ICONLIB_ROOT", str(Path(__file__).resolve().parents[1])))
PUBLIC_DIR = PROJECT_ROOT / "public"
SVG_DIR = PUBLIC_DIR / "icons" / "svg"
PNG_DIR = PUBLIC_DIR / "icons" / "png"

DATA_DIR = PROJECT_ROOT / "data"
METADATA_PATH = DATA_DIR / "icon-metadata.json"
ALIAS_PATH = DATA_DIR / "icon-aliases.json"

# Public URL prefixes for asset references stored in the catalog
SVG_URL_PREFIX = "/icons/svg"
PNG_URL_PREFIX = "/icons/png"

# Taxonomy
MAIN_CATEGORIES: Tuple[str, ...] = (
    "arrows", "commerce", "culture", "education", "entertainment",
    "essentials", "office", "social", "technology", "tools", "travel",
)
UNCATEGORIZED = "uncategorized"
KNOWN_CATEGORIES = frozenset(MAIN_CATEGORIES + (UNCATEGORIZED,))

# PNG file suffix -> size label (order matters: 1x first)
PNG_SCALE_SUFFIXES: Tuple[Tuple[str, str], ...] = (
    ("", "1x"),
    ("@2x", "@2x"),
    ("@3x", "@3x"),
)

# Relevance scoring
SCORE_EXACT_NAME = 100
SCORE_NAME_PREFIX = 50
SCORE_NAME_CONTAINS = 30
SCORE_CATEGORY_MATCH = 40
SCORE_TERM_EXACT = 20
SCORE_TERM_PARTIAL = 10

# Query / pagination policy
ALL_CATEGORIES = "all"
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 48
MAX_PAGE_SIZE = 500
SORT_KEYS: Tuple[str, ...] = ("name", "category", "date")
SORT_ORDERS: Tuple[str, ...] = ("asc", "desc")
DEFAULT_SORT_KEY = "name"
DEFAULT_SORT_ORDER = "asc"

# HTTP
CORS_ALLOW_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("ICONLIB_CORS_ORIGINS", "*").split(",") if o.strip()
]
SERVER_HOST = os.getenv("ICONLIB_HOST", "127.0.0.1")
SERVER_PORT = int(os.getenv("ICONLIB_PORT", "8000"))


def icon_key_for(category: str, subcategory: Optional[str], name: str) -> str:
    """Composite ``category/[subcategory/]name`` key, always slash separated."""
    parts = [category]
    if subcategory:
        parts.append(subcategory)
    parts.append(name)
    return "/".join(parts).replace("\\", "/")


# Pydantic schemas
class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PngVariant(_CamelModel):
    path: str
    size: str


class IconRecord(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    name: str = Field(min_length=1)
    display_name: str
    category: str
    subcategory: Optional[str] = None
    full_path: str = ""
    keywords: List[str] = Field(default_factory=list)
    svg_path: str
    png_variants: List[PngVariant] = Field(default_factory=list)
    date_added: Optional[str] = None

    @field_validator("keywords")
    @classmethod
    def _normalise_keywords(cls, value: List[str]) -> List[str]:
        return sorted({k.strip().lower() for k in value if k and k.strip()})

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if value not in KNOWN_CATEGORIES:
            raise ValueError(f"unknown category {value!r}")
        return value

    @field_validator("subcategory")
    @classmethod
    def _blank_subcategory_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @property
    def icon_key(self) -> str:
        return icon_key_for(self.category, self.subcategory, self.name)


class Pagination(_CamelModel):
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)
    current_page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    has_next: bool
    has_previous: bool


class IconsResponse(_CamelModel):
    icons: List[IconRecord]
    pagination: Pagination


class AliasResponse(_CamelModel):
    icon_key: str
    aliases: List[str]


class HealthResponse(_CamelModel):
    status: str
    icons: int = 0
    aliases: int = 0


def _positive_int(value, default: int, maximum: Optional[int] = None) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    if number < 1:
        return default
    if maximum is not None and number > maximum:
        return maximum
    return number


class CatalogQuery(_CamelModel):
    """Catalog request parameters.

    Values arrive as raw query-string text.  Anything unusable is replaced
    by its default instead of being rejected.
    """

    q: Optional[str] = None
    category: str = ALL_CATEGORIES
    subcategory: Optional[str] = None
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = DEFAULT_SORT_KEY
    sort_order: str = DEFAULT_SORT_ORDER

    @field_validator("q", "subcategory", mode="before")
    @classmethod
    def _blank_to_none(cls, value) -> Optional[str]:
        if value is None:
            return None
        text = str(value)
        return text if text.strip() else None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value) -> str:
        text = str(value).strip() if value is not None else ""
        return text or ALL_CATEGORIES

    @field_validator("page", mode="before")
    @classmethod
    def _coerce_page(cls, value) -> int:
        return _positive_int(value, DEFAULT_PAGE)

    @field_validator("limit", mode="before")
    @classmethod
    def _coerce_limit(cls, value) -> int:
        return _positive_int(value, DEFAULT_PAGE_SIZE, maximum=MAX_PAGE_SIZE)

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort_by(cls, value) -> str:
        key = str(value or "").strip().lower()
        return key if key in SORT_KEYS else DEFAULT_SORT_KEY

    @field_validator("sort_order", mode="before")
    @classmethod
    def _coerce_sort_order(cls, value) -> str:
        order = str(value or "").strip().lower()
        return order if order in SORT_ORDERS else DEFAULT_SORT_ORDER


AliasTable = Dict[str, List[str]]
