"""
Pytest configuration and shared fixtures for the icon library tests.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from iconlib.config import IconRecord, icon_key_for
from iconlib.normalize import display_name_for, generate_keywords

SVG_BODY = '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24"><path d="M0 0h24v24H0z"/></svg>\n'


@dataclass
class AssetTree:
    root: Path
    svg_dir: Path
    png_dir: Path
    metadata_path: Path
    alias_path: Path

    def add_svg(self, rel: str, mtime: Optional[float] = None) -> Path:
        path = self.svg_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(SVG_BODY, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    def add_png(self, rel: str) -> Path:
        path = self.png_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"\x89PNG\r\n\x1a\n")
        return path


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def make_icon() -> Callable[..., IconRecord]:
    """Factory for IconRecord objects built the same way the builder does."""

    def _make(
        name: str,
        category: str = "essentials",
        subcategory: Optional[str] = None,
        keywords: Optional[List[str]] = None,
        date_added: Optional[str] = None,
    ) -> IconRecord:
        folder = "/".join(p for p in (category, subcategory) if p)
        return IconRecord(
            id=icon_key_for(category, subcategory, name).replace("/", "-"),
            name=name,
            display_name=display_name_for(name),
            category=category,
            subcategory=subcategory,
            full_path=folder,
            keywords=generate_keywords(name) + list(keywords or []),
            svg_path=f"/icons/svg/{folder}/{name}.svg",
            date_added=date_added,
        )

    return _make


@pytest.fixture
def asset_tree(tmp_path: Path) -> AssetTree:
    """Empty project layout under tmp_path; nothing is created on disk yet."""
    return AssetTree(
        root=tmp_path,
        svg_dir=tmp_path / "public" / "icons" / "svg",
        png_dir=tmp_path / "public" / "icons" / "png",
        metadata_path=tmp_path / "data" / "icon-metadata.json",
        alias_path=tmp_path / "data" / "icon-aliases.json",
    )


@pytest.fixture
def populated_tree(asset_tree: AssetTree) -> AssetTree:
    """A small asset tree with nested folders, PNG variants and a stray folder."""
    asset_tree.add_svg("arrows/arrow-down-circle.svg", mtime=1_700_000_000)
    asset_tree.add_svg("arrows/arrow-up-right.svg", mtime=1_700_000_100)
    asset_tree.add_svg("essentials/home.svg", mtime=1_700_000_200)
    asset_tree.add_svg("essentials/home-outline.svg", mtime=1_700_000_300)
    asset_tree.add_svg("essentials/basic/settings.svg", mtime=1_700_000_400)
    asset_tree.add_svg("essentials/Bell.svg", mtime=1_700_000_500)
    asset_tree.add_svg("misc/widgets/gadgetBox.svg", mtime=1_700_000_600)
    asset_tree.add_png("essentials/home.png")
    asset_tree.add_png("essentials/home@2x.png")
    return asset_tree
