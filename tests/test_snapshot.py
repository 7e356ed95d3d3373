"""
Tests for the serve-time catalog snapshot and its store.
"""
import pytest

from iconlib.snapshot import CatalogSnapshot, CatalogStore
from iconlib.storage import write_alias_table, write_catalog


class TestCatalogSnapshot:

    def test_missing_files_give_empty_snapshot(self, asset_tree):
        snapshot = CatalogSnapshot.from_files(asset_tree.metadata_path, asset_tree.alias_path)
        assert len(snapshot) == 0
        assert dict(snapshot.aliases) == {}

    def test_malformed_catalog_gives_empty_catalog(self, asset_tree):
        asset_tree.metadata_path.parent.mkdir(parents=True)
        asset_tree.metadata_path.write_text('{"not": "a list"}', encoding="utf-8")
        write_alias_table({"essentials/home": ["house"]}, asset_tree.alias_path)
        snapshot = CatalogSnapshot.from_files(asset_tree.metadata_path, asset_tree.alias_path)
        assert snapshot.icons == ()
        assert snapshot.aliases_for("essentials/home") == ["house"]

    def test_malformed_alias_table_keeps_catalog(self, asset_tree, make_icon):
        write_catalog([make_icon("home")], asset_tree.metadata_path)
        asset_tree.alias_path.write_text("[1, 2]", encoding="utf-8")
        snapshot = CatalogSnapshot.from_files(asset_tree.metadata_path, asset_tree.alias_path)
        assert len(snapshot) == 1
        assert dict(snapshot.aliases) == {}

    def test_aliases_for_unknown_key(self):
        snapshot = CatalogSnapshot.from_data([], {"a/b": ["c"]})
        assert snapshot.aliases_for("a/missing") == []

    def test_aliases_for_normalises_backslashes(self):
        snapshot = CatalogSnapshot.from_data([], {"essentials/basic/settings": ["gear"]})
        assert snapshot.aliases_for("essentials\\basic\\settings") == ["gear"]

    def test_snapshot_is_read_only(self, make_icon):
        snapshot = CatalogSnapshot.from_data([make_icon("home")], {"essentials/home": ["house"]})
        with pytest.raises(TypeError):
            snapshot.aliases["essentials/home"] = ("x",)
        with pytest.raises(AttributeError):
            snapshot.icons = ()


class TestCatalogStore:

    def test_starts_empty_until_loaded(self, asset_tree, make_icon):
        write_catalog([make_icon("home")], asset_tree.metadata_path)
        store = CatalogStore(asset_tree.metadata_path, asset_tree.alias_path)
        assert len(store.snapshot) == 0
        store.load()
        assert len(store.snapshot) == 1

    def test_reload_swaps_snapshot(self, asset_tree, make_icon):
        write_catalog([make_icon("home")], asset_tree.metadata_path)
        store = CatalogStore(asset_tree.metadata_path, asset_tree.alias_path)
        before = store.load()

        write_catalog([make_icon("home"), make_icon("bell")], asset_tree.metadata_path)
        write_alias_table({"essentials/bell": ["ring"]}, asset_tree.alias_path)
        after = store.reload()

        assert store.snapshot is after
        assert len(before) == 1
        assert len(after) == 2
        assert after.aliases_for("essentials/bell") == ["ring"]


class TestUnreadableArtifacts:

    def test_catalog_path_is_a_directory(self, asset_tree):
        asset_tree.metadata_path.mkdir(parents=True)
        snapshot = CatalogSnapshot.from_files(asset_tree.metadata_path, asset_tree.alias_path)
        assert len(snapshot) == 0

    def test_alias_path_is_a_directory(self, asset_tree, make_icon):
        write_catalog([make_icon("home")], asset_tree.metadata_path)
        asset_tree.alias_path.mkdir()
        store = CatalogStore(asset_tree.metadata_path, asset_tree.alias_path)
        snapshot = store.load()
        assert len(snapshot) == 1
        assert dict(snapshot.aliases) == {}
