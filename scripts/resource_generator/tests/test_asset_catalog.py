"""
Tests for asset catalog parsing and namespace merging.
"""

import json
import os
import shutil
import tempfile
import unittest
from pathlib import Path
from typing import Optional

from ..processing.asset_catalog import (
    AssetCatalog, AssetCatalogBuilder, CatalogReadError, ColorResource,
    DataResource, ImageResource, Namespace, parse_asset_catalog
)
from ..utils.locale import LocaleReference


class AssetCatalogTestCase(unittest.TestCase):
    """Base class creating a temporary Assets.xcassets directory."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = Path(tempfile.mkdtemp())
        self.catalog_dir = self.temp_dir / "Assets.xcassets"
        self.catalog_dir.mkdir()
        self._write_json(self.catalog_dir / "Contents.json", {"info": {"author": "xcode", "version": 1}})

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_json(self, path: Path, data) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")

    def _asset(self, relative: str, descriptor: Optional[dict] = None) -> Path:
        directory = self.catalog_dir / relative
        directory.mkdir(parents=True, exist_ok=True)
        if descriptor is not None:
            self._write_json(directory / "Contents.json", descriptor)
        return directory


class TestAssetCatalogBuilder(AssetCatalogTestCase):
    """Test cases for AssetCatalogBuilder."""

    def test_color_at_root_and_image_in_namespace(self):
        """Test that plain folders become namespaces holding their leaves."""
        self._asset("AccentColor.colorset", {"colors": [{"idiom": "universal"}]})
        self._asset("Icons/star.imageset", {"images": [{"idiom": "universal", "filename": "star.png"}]})

        catalog = AssetCatalogBuilder().build(self.catalog_dir)

        self.assertEqual(catalog.filename, "Assets")
        self.assertEqual(len(catalog.root.colors), 1)
        self.assertEqual(catalog.root.colors[0].name, "AccentColor")
        self.assertEqual(catalog.root.colors[0].path, ())
        self.assertEqual(catalog.root.images, ())

        icons = catalog.root.subnamespaces["Icons"]
        self.assertEqual(len(icons.images), 1)
        self.assertEqual(icons.images[0].name, "star")
        self.assertEqual(list(icons.images[0].path), ["Icons"])

    def test_nested_namespace_paths(self):
        self._asset("Icons/Small/dot.imageset", {})
        self._asset("Icons/Small/Brand.colorset", {})

        catalog = AssetCatalogBuilder().build(self.catalog_dir)

        small = catalog.root.subnamespaces["Icons"].subnamespaces["Small"]
        self.assertEqual(small.images[0].path, ("Icons", "Small"))
        self.assertEqual(small.colors[0].path, ("Icons", "Small"))

    def test_data_asset_with_on_demand_tags(self):
        self._asset("Levels/level1.dataset", {
            "data": [{"filename": "level1.json", "idiom": "universal"}],
            "properties": {"on-demand-resource-tags": ["levels", "pack1"]},
        })

        catalog = AssetCatalogBuilder().build(self.catalog_dir)

        data = catalog.root.subnamespaces["Levels"].data_assets[0]
        self.assertEqual(data, DataResource(
            name="level1", path=("Levels",), bundle="main", on_demand_resource_tags=("levels", "pack1")
        ))

    def test_image_locale_and_tags(self):
        """Test that image metadata is read from the asset descriptor."""
        self._asset("banner.imageset", {
            "images": [
                {"idiom": "universal", "filename": "banner.png"},
                {"idiom": "universal", "filename": "banner-ko.png", "locale": "ko"},
            ],
            "properties": {"localizable": True, "on-demand-resource-tags": ["promo"]},
        })

        image = AssetCatalogBuilder().build(self.catalog_dir).root.images[0]

        self.assertEqual(image.locale, LocaleReference(code="ko", is_base=False))
        self.assertEqual(image.on_demand_resource_tags, ("promo",))

    def test_image_locale_base_for_development_locale(self):
        self._asset("banner.imageset", {"images": [{"filename": "banner.png", "locale": "en"}]})

        image = AssetCatalogBuilder(development_locale="en").build(self.catalog_dir).root.images[0]

        self.assertTrue(image.locale.is_base)

    def test_missing_metadata_is_none(self):
        """Test that absent descriptors and keys yield no locale or tags."""
        self._asset("plain.imageset")
        self._asset("simple.imageset", {"images": [{"idiom": "universal"}]})

        images = AssetCatalogBuilder().build(self.catalog_dir).root.images

        self.assertEqual([image.name for image in images], ["plain", "simple"])
        for image in images:
            self.assertIsNone(image.locale)
            self.assertIsNone(image.on_demand_resource_tags)

    def test_symbolset_is_an_image(self):
        self._asset("gear.symbolset", {})

        catalog = AssetCatalogBuilder().build(self.catalog_dir)

        self.assertEqual([image.name for image in catalog.root.images], ["gear"])

    def test_bundle_is_threaded_through(self):
        self._asset("Tint.colorset", {})
        self._asset("logo.imageset", {})
        self._asset("blob.dataset", {})

        root = parse_asset_catalog(self.catalog_dir, bundle="module").root

        self.assertEqual(root.colors[0], ColorResource(name="Tint", path=(), bundle="module"))
        self.assertEqual(root.images[0].bundle, "module")
        self.assertEqual(root.data_assets[0].bundle, "module")

    def test_unsupported_types_and_files_ignored(self):
        self._asset("AppIcon.appiconset", {"images": []})
        self._asset("Launch.launchimage", {})
        (self.catalog_dir / "notes.txt").write_text("ignored", encoding="utf-8")

        catalog = AssetCatalogBuilder().build(self.catalog_dir)

        self.assertTrue(catalog.root.is_empty)

    def test_dotted_folders_become_namespaces(self):
        """Test that a folder with a dot in its name is still walked."""
        self._asset("Icons.v2/star.imageset", {})
        self._asset("Legacy.old/brand.colorset", {})

        root = AssetCatalogBuilder().build(self.catalog_dir).root

        self.assertEqual(list(root.subnamespaces), ["Icons.v2", "Legacy.old"])
        star = root.subnamespaces["Icons.v2"].images[0]
        self.assertEqual(star.path, ("Icons.v2",))
        self.assertEqual(root.subnamespaces["Legacy.old"].colors[0].name, "brand")

    def test_known_bundle_types_are_not_walked(self):
        self._asset("AppIcon.appiconset/nested.imageset", {})
        self._asset("Sticker.stickerpack/face.imageset", {})

        catalog = AssetCatalogBuilder().build(self.catalog_dir)

        self.assertTrue(catalog.root.is_empty)

    def test_empty_folders_are_pruned(self):
        self._asset("Empty")
        self._asset("Outer/AlsoEmpty")
        self._asset("Outer/icon.imageset", {})
        self._asset("Hollow/Inner")

        root = AssetCatalogBuilder().build(self.catalog_dir).root

        self.assertEqual(list(root.subnamespaces), ["Outer"])
        self.assertEqual(root.subnamespaces["Outer"].subnamespaces, {})

    def test_sorted_order(self):
        for name in ("zeta", "alpha", "Mid"):
            self._asset(f"{name}.imageset", {})

        images = AssetCatalogBuilder().build(self.catalog_dir).root.images

        self.assertEqual([image.name for image in images], ["Mid", "alpha", "zeta"])

    def test_malformed_descriptor_fails_build(self):
        """Test that one bad descriptor fails the whole catalog."""
        self._asset("good.imageset", {})
        bad = self._asset("Deep/bad.colorset")
        (bad / "Contents.json").write_text("{broken", encoding="utf-8")

        with self.assertRaises(CatalogReadError):
            AssetCatalogBuilder().build(self.catalog_dir)

    def test_descriptor_shape_errors(self):
        bad_descriptors = [
            [],
            {"properties": []},
            {"properties": {"on-demand-resource-tags": "tag"}},
            {"properties": {"on-demand-resource-tags": [1]}},
            {"images": {}},
            {"images": ["banner.png"]},
            {"images": [{"locale": 7}]},
        ]
        for index, descriptor in enumerate(bad_descriptors):
            with self.subTest(index=index):
                directory = self._asset(f"bad{index}.imageset", descriptor)
                with self.assertRaises(CatalogReadError):
                    AssetCatalogBuilder().build(self.catalog_dir)
                shutil.rmtree(directory)

    def test_not_a_directory(self):
        path = self.temp_dir / "Assets.txt"
        path.write_text("", encoding="utf-8")

        with self.assertRaises(CatalogReadError):
            AssetCatalogBuilder().build(path)

        with self.assertRaises(CatalogReadError):
            AssetCatalogBuilder().build(self.temp_dir / "Missing.xcassets")

    def test_build_from_inside_catalog(self):
        """Test that the working directory can be passed as "."."""
        self._asset("a.colorset", {})
        original_cwd = os.getcwd()
        try:
            os.chdir(self.catalog_dir)
            catalog = AssetCatalogBuilder().build(".")
        finally:
            os.chdir(original_cwd)

        self.assertEqual(catalog.filename, "Assets")
        self.assertEqual(len(catalog.root.colors), 1)

    def test_count(self):
        self._asset("a.colorset", {})
        self._asset("Icons/b.imageset", {})
        self._asset("Icons/Nested/c.imageset", {})
        self._asset("d.dataset", {})

        root = AssetCatalogBuilder().build(self.catalog_dir).root

        self.assertEqual(root.count(), {"colors": 1, "images": 2, "data_assets": 1})


class TestNamespaceMerge(unittest.TestCase):
    """Test cases for Namespace.merging."""

    def _color(self, name: str, *path: str) -> ColorResource:
        return ColorResource(name=name, path=tuple(path))

    def _image(self, name: str, *path: str) -> ImageResource:
        return ImageResource(name=name, path=tuple(path))

    def test_leaf_sequences_concatenate_in_order(self):
        first = Namespace(colors=(self._color("red"),), images=(self._image("a"),))
        second = Namespace(colors=(self._color("blue"),), data_assets=(DataResource(name="d", path=()),))

        merged = first.merging(second)

        self.assertEqual([c.name for c in merged.colors], ["red", "blue"])
        self.assertEqual([i.name for i in merged.images], ["a"])
        self.assertEqual([d.name for d in merged.data_assets], ["d"])

    def test_matching_subnamespaces_merge_recursively(self):
        first = Namespace(subnamespaces={
            "Icons": Namespace(images=(self._image("star", "Icons"),)),
            "Brand": Namespace(colors=(self._color("primary", "Brand"),)),
        })
        second = Namespace(subnamespaces={
            "Icons": Namespace(images=(self._image("moon", "Icons"),)),
            "Flags": Namespace(images=(self._image("kr", "Flags"),)),
        })

        merged = first.merging(second)

        self.assertEqual(set(merged.subnamespaces), {"Icons", "Brand", "Flags"})
        self.assertEqual([i.name for i in merged.subnamespaces["Icons"].images], ["star", "moon"])
        self.assertEqual(len(merged.subnamespaces["Brand"].colors), 1)

    def test_merge_is_associative(self):
        a = Namespace(colors=(self._color("a"),), subnamespaces={
            "X": Namespace(images=(self._image("x1", "X"),)),
        })
        b = Namespace(subnamespaces={
            "X": Namespace(images=(self._image("x2", "X"),), subnamespaces={
                "Y": Namespace(colors=(self._color("y1", "X", "Y"),)),
            }),
        })
        c = Namespace(colors=(self._color("c"),), subnamespaces={
            "X": Namespace(subnamespaces={"Y": Namespace(colors=(self._color("y2", "X", "Y"),))}),
            "Z": Namespace(images=(self._image("z", "Z"),)),
        })

        left = a.merging(b).merging(c)
        right = a.merging(b.merging(c))

        self.assertEqual(left, right)
        self.assertEqual([c.name for c in left.colors], ["a", "c"])
        self.assertEqual(
            [c.name for c in left.subnamespaces["X"].subnamespaces["Y"].colors], ["y1", "y2"]
        )

    def test_merge_leaves_inputs_untouched(self):
        first = Namespace(subnamespaces={"Icons": Namespace(images=(self._image("a", "Icons"),))})
        second = Namespace(subnamespaces={"Icons": Namespace(images=(self._image("b", "Icons"),))})

        first.merging(second)

        self.assertEqual(len(first.subnamespaces["Icons"].images), 1)
        self.assertEqual(len(second.subnamespaces["Icons"].images), 1)

    def test_merge_with_empty_is_identity(self):
        namespace = Namespace(colors=(self._color("red"),), subnamespaces={"A": Namespace(images=(self._image("i", "A"),))})

        self.assertEqual(namespace.merging(Namespace()), namespace)
        self.assertEqual(Namespace().merging(namespace), namespace)

    def test_catalog_merge_keeps_first_filename(self):
        first = AssetCatalog(filename="Assets", root=Namespace(colors=(self._color("a"),)))
        second = AssetCatalog(filename="Shared", root=Namespace(colors=(self._color("b"),)))

        merged = first.merging(second)

        self.assertEqual(merged.filename, "Assets")
        self.assertEqual([c.name for c in merged.root.colors], ["a", "b"])


if __name__ == '__main__':
    unittest.main()
