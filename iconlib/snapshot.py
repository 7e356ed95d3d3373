"""
In-memory catalog snapshot used at serve time.

A :class:`CatalogSnapshot` bundles the catalog and the alias table as
read-only values.  :class:`CatalogStore` owns the current snapshot and
replaces it wholesale on ``reload()``; request handlers read
``store.snapshot`` once and work on that object, so they never see a
half-updated catalog.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from loguru import logger

from .config import ALIAS_PATH, METADATA_PATH, AliasTable, IconRecord
from .storage import (
    AliasTableError,
    CatalogFormatError,
    load_alias_table,
    load_catalog,
    normalise_icon_key,
)


@dataclass(frozen=True)
class CatalogSnapshot:
    icons: Tuple[IconRecord, ...] = ()
    aliases: Mapping[str, Tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    loaded_at: Optional[str] = None

    @classmethod
    def from_data(
        cls,
        icons: List[IconRecord],
        aliases: Optional[AliasTable] = None,
    ) -> "CatalogSnapshot":
        frozen_aliases = {
            normalise_icon_key(k): tuple(v) for k, v in (aliases or {}).items()
        }
        return cls(
            icons=tuple(icons),
            aliases=MappingProxyType(frozen_aliases),
            loaded_at=datetime.now(timezone.utc).isoformat(),
        )

    @classmethod
    def from_files(
        cls,
        metadata_path: Path = METADATA_PATH,
        alias_path: Path = ALIAS_PATH,
    ) -> "CatalogSnapshot":
        """
        Read both artifacts.  A missing or malformed artifact is logged and
        treated as empty so the server keeps answering with empty results.
        """
        try:
            icons = load_catalog(metadata_path)
        except FileNotFoundError as e:
            logger.warning("{}", e)
            icons = []
        except (OSError, CatalogFormatError) as e:
            logger.error("Serving an empty catalog: {}", e)
            icons = []

        try:
            aliases = load_alias_table(alias_path)
        except (OSError, AliasTableError) as e:
            logger.error("Serving without live aliases: {}", e)
            aliases = {}

        return cls.from_data(icons, aliases)

    def aliases_for(self, icon_key: str) -> List[str]:
        """Aliases for a composite key; unknown keys have none."""
        return list(self.aliases.get(normalise_icon_key(icon_key), ()))

    def __len__(self) -> int:
        return len(self.icons)


class CatalogStore:
    """Process-wide holder of the current :class:`CatalogSnapshot`."""

    def __init__(
        self,
        metadata_path: Path = METADATA_PATH,
        alias_path: Path = ALIAS_PATH,
    ):
        self.metadata_path = metadata_path
        self.alias_path = alias_path
        self._snapshot = CatalogSnapshot()
        self._reload_lock = threading.Lock()

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def load(self) -> CatalogSnapshot:
        with self._reload_lock:
            snapshot = CatalogSnapshot.from_files(self.metadata_path, self.alias_path)
            self._snapshot = snapshot
        logger.info(
            "Catalog snapshot published: {} icons, {} alias keys",
            len(snapshot.icons), len(snapshot.aliases),
        )
        return snapshot

    def reload(self) -> CatalogSnapshot:
        return self.load()
