"""
Tests for the metadata builder and catalog persistence.
"""
import json

import pytest
from pydantic import ValidationError

from iconlib.catalog_build import (
    build_catalog,
    classify_folder,
    generate_metadata,
    sort_catalog,
    summarise_catalog,
)
from iconlib.config import MAIN_CATEGORIES, IconRecord
from iconlib.normalize import generate_keywords
from iconlib.storage import load_catalog


def _by_key(records):
    return {r.icon_key: r for r in records}


class TestClassifyFolder:

    def test_category_only(self):
        assert classify_folder(("arrows",)) == ("arrows", None)

    def test_nested_subcategory(self):
        assert classify_folder(("essentials", "basic", "ui")) == ("essentials", "basic/ui")

    def test_unknown_folder_is_uncategorized(self):
        assert classify_folder(("misc", "widgets")) == ("uncategorized", "misc/widgets")

    def test_root_level_icon(self):
        assert classify_folder(()) == ("uncategorized", None)


class TestBuildCatalog:

    def test_missing_directories_are_created_empty(self, asset_tree):
        records = build_catalog(asset_tree.svg_dir, asset_tree.png_dir)
        assert records == []
        for category in MAIN_CATEGORIES:
            assert (asset_tree.svg_dir / category).is_dir()
            assert (asset_tree.png_dir / category).is_dir()

    def test_svg_root_that_is_a_file_yields_no_icons(self, asset_tree):
        asset_tree.svg_dir.parent.mkdir(parents=True)
        asset_tree.svg_dir.write_text("", encoding="utf-8")
        assert build_catalog(asset_tree.svg_dir, asset_tree.png_dir) == []

    def test_png_root_that_is_a_file_keeps_icons(self, asset_tree):
        asset_tree.add_svg("essentials/home.svg")
        asset_tree.png_dir.write_text("", encoding="utf-8")
        records = build_catalog(asset_tree.svg_dir, asset_tree.png_dir)
        assert [r.name for r in records] == ["home"]
        assert records[0].png_variants == []

    def test_one_record_per_svg(self, populated_tree):
        records = build_catalog(populated_tree.svg_dir, populated_tree.png_dir)
        assert len(records) == 7
        assert len({r.id for r in records}) == 7

    def test_record_fields(self, populated_tree):
        records = _by_key(build_catalog(populated_tree.svg_dir, populated_tree.png_dir))
        settings = records["essentials/basic/settings"]
        assert settings.category == "essentials"
        assert settings.subcategory == "basic"
        assert settings.full_path == "essentials/basic"
        assert settings.id == "essentials-basic-settings"
        assert settings.display_name == "Settings"
        assert settings.svg_path == "/icons/svg/essentials/basic/settings.svg"
        assert settings.date_added.startswith("2023-11-14T")

    def test_unknown_folder_record(self, populated_tree):
        records = _by_key(build_catalog(populated_tree.svg_dir, populated_tree.png_dir))
        gadget = records["uncategorized/misc/widgets/gadgetBox"]
        assert gadget.subcategory == "misc/widgets"
        assert {"gadget", "box"} <= set(gadget.keywords)

    def test_png_variants(self, populated_tree):
        records = _by_key(build_catalog(populated_tree.svg_dir, populated_tree.png_dir))
        home = records["essentials/home"]
        assert [(v.size, v.path) for v in home.png_variants] == [
            ("1x", "/icons/png/essentials/home.png"),
            ("@2x", "/icons/png/essentials/home@2x.png"),
        ]
        assert records["essentials/home-outline"].png_variants == []

    def test_keywords_superset_of_name_tokens(self, populated_tree):
        for record in build_catalog(populated_tree.svg_dir, populated_tree.png_dir):
            assert set(generate_keywords(record.name)) <= set(record.keywords)
            assert all(k == k.lower() for k in record.keywords)

    def test_alias_entries_are_merged(self, populated_tree):
        aliases = {"essentials/home": ["House", "main-page"]}
        records = _by_key(build_catalog(populated_tree.svg_dir, populated_tree.png_dir, aliases))
        assert {"home", "house", "main-page"} <= set(records["essentials/home"].keywords)

    def test_sort_order(self, populated_tree):
        records = build_catalog(populated_tree.svg_dir, populated_tree.png_dir)
        assert [r.icon_key for r in records] == [
            "arrows/arrow-down-circle",
            "arrows/arrow-up-right",
            "essentials/Bell",
            "essentials/home",
            "essentials/home-outline",
            "essentials/basic/settings",
            "uncategorized/misc/widgets/gadgetBox",
        ]

    def test_colliding_ids_are_disambiguated(self, asset_tree):
        asset_tree.add_svg("arrows/a-b/c.svg")
        asset_tree.add_svg("arrows/a/b-c.svg")
        records = build_catalog(asset_tree.svg_dir, asset_tree.png_dir)
        ids = [r.id for r in records]
        assert len(ids) == len(set(ids)) == 2


class TestSortCatalog:

    def test_empty(self):
        assert sort_catalog([]) == []

    def test_absent_subcategory_first_and_case_insensitive(self, make_icon):
        icons = [
            make_icon("zeta", "tools", "b"),
            make_icon("Beta", "tools"),
            make_icon("alpha", "tools"),
            make_icon("gamma", "arrows"),
        ]
        ordered = [i.name for i in sort_catalog(icons)]
        assert ordered == ["gamma", "alpha", "Beta", "zeta"]


class TestGenerateMetadata:

    def test_writes_loadable_catalog(self, populated_tree):
        records = generate_metadata(
            populated_tree.svg_dir,
            populated_tree.png_dir,
            populated_tree.metadata_path,
            populated_tree.alias_path,
        )
        loaded = load_catalog(populated_tree.metadata_path)
        assert loaded == records

    def test_catalog_json_uses_camel_case(self, populated_tree):
        generate_metadata(
            populated_tree.svg_dir,
            populated_tree.png_dir,
            populated_tree.metadata_path,
            populated_tree.alias_path,
        )
        raw = json.loads(populated_tree.metadata_path.read_text(encoding="utf-8"))
        assert {"id", "name", "displayName", "category", "subcategory", "keywords",
                "svgPath", "pngVariants", "dateAdded"} <= set(raw[0])

    def test_malformed_alias_table_falls_back_to_empty(self, populated_tree):
        populated_tree.alias_path.parent.mkdir(parents=True, exist_ok=True)
        populated_tree.alias_path.write_text("not json", encoding="utf-8")
        records = generate_metadata(
            populated_tree.svg_dir,
            populated_tree.png_dir,
            populated_tree.metadata_path,
            populated_tree.alias_path,
        )
        assert len(records) == 7
        assert populated_tree.alias_path.read_text(encoding="utf-8") == "not json"

    def test_never_writes_alias_table(self, populated_tree):
        generate_metadata(
            populated_tree.svg_dir,
            populated_tree.png_dir,
            populated_tree.metadata_path,
            populated_tree.alias_path,
        )
        assert not populated_tree.alias_path.exists()

    def test_rerun_is_stable(self, populated_tree):
        args = (
            populated_tree.svg_dir,
            populated_tree.png_dir,
            populated_tree.metadata_path,
            populated_tree.alias_path,
        )
        generate_metadata(*args)
        first = populated_tree.metadata_path.read_text(encoding="utf-8")
        generate_metadata(*args)
        assert populated_tree.metadata_path.read_text(encoding="utf-8") == first


class TestSummariseCatalog:

    def test_counts_per_category(self, make_icon):
        counts = summarise_catalog([make_icon("a", "arrows"), make_icon("b", "arrows"), make_icon("c")])
        assert counts.to_dict() == {"arrows": 2, "essentials": 1}


def test_record_round_trips_by_alias_and_name():
    data = {
        "id": "x", "name": "x", "displayName": "X", "category": "tools",
        "svgPath": "/icons/svg/tools/x.svg",
    }
    record = IconRecord.model_validate(data)
    assert record.subcategory is None
    assert record.date_added is None
    with pytest.raises(ValidationError):
        IconRecord.model_validate({**data, "name": ""})
    with pytest.raises(ValidationError):
        IconRecord.model_validate({**data, "category": "misc"})
