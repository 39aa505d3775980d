"""
Asset catalog parsing.

Walks an ``.xcassets`` directory and builds a namespace tree of colors, images
and data assets. Typed leaf directories are recognized by suffix
(``.colorset``, ``.imageset``/``.symbolset``, ``.dataset``), known Xcode
bundle types without accessors are skipped, and every other directory becomes
a child namespace.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..utils.locale import DEFAULT_DEVELOPMENT_LOCALE, LocaleReference
from ..utils.paths import filename_without_extension

logger = logging.getLogger(__name__)

COLOR_SET_SUFFIXES = {".colorset"}
IMAGE_SET_SUFFIXES = {".imageset", ".symbolset"}
DATA_SET_SUFFIXES = {".dataset"}
# Xcode bundle types with no generated accessor; any other dotted folder is a namespace.
SKIPPED_BUNDLE_SUFFIXES = {
    ".appiconset", ".launchimage", ".brandassets", ".imagestack", ".imagestacklayer",
    ".stickerpack", ".sticker", ".stickersequence", ".cubetextureset", ".mipmapset",
    ".texturesetreference", ".textureset", ".complicationset", ".arresourcegroup",
    ".arreferenceimage", ".arreferenceobject", ".gcdashboardimage",
    ".gcleaderboard", ".gcleaderboardset",
}
DESCRIPTOR_FILENAME = "Contents.json"
ON_DEMAND_TAGS_KEY = "on-demand-resource-tags"
DEFAULT_BUNDLE = "main"


class CatalogReadError(Exception):
    """Exception raised when an asset catalog cannot be read."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Cannot read asset catalog at {path}: {reason}")
        self.path = Path(path)


@dataclass(frozen=True)
class ColorResource:
    """Named color from a ``.colorset``."""
    name: str
    path: Tuple[str, ...]
    bundle: str = DEFAULT_BUNDLE


@dataclass(frozen=True)
class ImageResource:
    """Image from an ``.imageset`` or ``.symbolset``."""
    name: str
    path: Tuple[str, ...]
    bundle: str = DEFAULT_BUNDLE
    locale: Optional[LocaleReference] = None
    on_demand_resource_tags: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class DataResource:
    """Data blob from a ``.dataset``."""
    name: str
    path: Tuple[str, ...]
    bundle: str = DEFAULT_BUNDLE
    on_demand_resource_tags: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class Namespace:
    """Node of the asset tree."""
    subnamespaces: Dict[str, "Namespace"] = field(default_factory=dict)
    colors: Tuple[ColorResource, ...] = ()
    images: Tuple[ImageResource, ...] = ()
    data_assets: Tuple[DataResource, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.subnamespaces or self.colors or self.images or self.data_assets)

    def merging(self, other: "Namespace") -> "Namespace":
        """
        Combine two namespaces into a new one.

        Leaf sequences are concatenated (this namespace's first). Child
        namespaces sharing a name are merged recursively; the rest are kept.
        """
        subnamespaces = dict(self.subnamespaces)
        for name, child in other.subnamespaces.items():
            if name in subnamespaces:
                subnamespaces[name] = subnamespaces[name].merging(child)
            else:
                subnamespaces[name] = child

        return Namespace(
            subnamespaces=subnamespaces,
            colors=self.colors + other.colors,
            images=self.images + other.images,
            data_assets=self.data_assets + other.data_assets,
        )

    def count(self) -> Dict[str, int]:
        """Count leaf resources in this namespace and all descendants."""
        totals = {"colors": len(self.colors), "images": len(self.images), "data_assets": len(self.data_assets)}
        for child in self.subnamespaces.values():
            for kind, amount in child.count().items():
                totals[kind] += amount
        return totals


@dataclass(frozen=True)
class AssetCatalog:
    """Parsed asset catalog."""
    filename: str
    root: Namespace = field(default_factory=Namespace)

    def merging(self, other: "AssetCatalog") -> "AssetCatalog":
        return AssetCatalog(filename=self.filename, root=self.root.merging(other.root))


class AssetCatalogBuilder:
    """Builds AssetCatalog trees from asset catalog directories."""

    def __init__(self, bundle: str = DEFAULT_BUNDLE, development_locale: str = DEFAULT_DEVELOPMENT_LOCALE):
        """
        Initialize the builder.

        Args:
            bundle: Bundle reference recorded on every resource
            development_locale: Locale code treated as base for localized images
        """
        self.bundle = bundle
        self.development_locale = development_locale

    def build(self, path: Union[str, Path]) -> AssetCatalog:
        """
        Parse an asset catalog directory.

        Args:
            path: Root ``.xcassets`` directory

        Returns:
            Catalog named after the directory

        Raises:
            CatalogReadError: If the directory or any asset descriptor cannot be read
            MissingBasename: If the path has no name
        """
        path = Path(path)
        filename = filename_without_extension(path)
        if not path.is_dir():
            raise CatalogReadError(path, "not a directory")

        root = self._build_namespace(path, ())
        totals = root.count()
        logger.debug(
            f"Parsed asset catalog {filename}: {totals['images']} images, "
            f"{totals['colors']} colors, {totals['data_assets']} data assets"
        )
        return AssetCatalog(filename=filename, root=root)

    def _build_namespace(self, directory: Path, namespace_path: Tuple[str, ...]) -> Namespace:
        colors: List[ColorResource] = []
        images: List[ImageResource] = []
        data_assets: List[DataResource] = []
        subnamespaces: Dict[str, Namespace] = {}

        for child in self._list_directory(directory):
            if not child.is_dir():
                continue

            suffix = child.suffix.lower()
            if suffix in COLOR_SET_SUFFIXES:
                colors.append(self._build_color(child, namespace_path))
            elif suffix in IMAGE_SET_SUFFIXES:
                images.append(self._build_image(child, namespace_path))
            elif suffix in DATA_SET_SUFFIXES:
                data_assets.append(self._build_data(child, namespace_path))
            elif suffix in SKIPPED_BUNDLE_SUFFIXES:
                logger.debug(f"Skipping unsupported asset type: {child}")
            else:
                namespace = self._build_namespace(child, namespace_path + (child.name,))
                if namespace.is_empty:
                    logger.debug(f"Skipping empty folder: {child}")
                    continue
                subnamespaces[child.name] = namespace

        return Namespace(
            subnamespaces=subnamespaces,
            colors=tuple(colors),
            images=tuple(images),
            data_assets=tuple(data_assets),
        )

    def _build_color(self, directory: Path, namespace_path: Tuple[str, ...]) -> ColorResource:
        # Read for validation only; color components are not exposed.
        self._read_descriptor(directory)
        return ColorResource(name=directory.stem, path=namespace_path, bundle=self.bundle)

    def _build_image(self, directory: Path, namespace_path: Tuple[str, ...]) -> ImageResource:
        descriptor = self._read_descriptor(directory)
        return ImageResource(
            name=directory.stem,
            path=namespace_path,
            bundle=self.bundle,
            locale=self._image_locale(directory, descriptor),
            on_demand_resource_tags=self._on_demand_tags(directory, descriptor),
        )

    def _build_data(self, directory: Path, namespace_path: Tuple[str, ...]) -> DataResource:
        descriptor = self._read_descriptor(directory)
        return DataResource(
            name=directory.stem,
            path=namespace_path,
            bundle=self.bundle,
            on_demand_resource_tags=self._on_demand_tags(directory, descriptor),
        )

    def _list_directory(self, directory: Path) -> List[Path]:
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise CatalogReadError(directory, e.strerror or str(e)) from e

    def _read_descriptor(self, directory: Path) -> Dict[str, Any]:
        """Load a leaf's Contents.json; a missing descriptor reads as empty."""
        descriptor_path = directory / DESCRIPTOR_FILENAME
        if not descriptor_path.exists():
            return {}

        try:
            data = json.loads(descriptor_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CatalogReadError(descriptor_path, f"invalid JSON: {e.msg} (line {e.lineno})") from e
        except UnicodeDecodeError as e:
            raise CatalogReadError(descriptor_path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise CatalogReadError(descriptor_path, e.strerror or str(e)) from e

        if not isinstance(data, dict):
            raise CatalogReadError(descriptor_path, "descriptor root must be an object")
        return data

    def _image_locale(self, directory: Path, descriptor: Dict[str, Any]) -> Optional[LocaleReference]:
        images = descriptor.get("images")
        if images is None:
            return None
        if not isinstance(images, list):
            raise CatalogReadError(directory / DESCRIPTOR_FILENAME, "'images' must be a list")

        for image in images:
            if not isinstance(image, dict):
                raise CatalogReadError(directory / DESCRIPTOR_FILENAME, "'images' entries must be objects")
            code = image.get("locale")
            if code is None:
                continue
            if not isinstance(code, str):
                raise CatalogReadError(directory / DESCRIPTOR_FILENAME, "'locale' must be a string")
            return LocaleReference.from_code(code, self.development_locale)
        return None

    def _on_demand_tags(self, directory: Path, descriptor: Dict[str, Any]) -> Optional[Tuple[str, ...]]:
        properties = descriptor.get("properties")
        if properties is None:
            return None
        if not isinstance(properties, dict):
            raise CatalogReadError(directory / DESCRIPTOR_FILENAME, "'properties' must be an object")

        tags = properties.get(ON_DEMAND_TAGS_KEY)
        if tags is None:
            return None
        if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
            raise CatalogReadError(directory / DESCRIPTOR_FILENAME, f"'{ON_DEMAND_TAGS_KEY}' must be a list of strings")
        return tuple(tags)


def parse_asset_catalog(
    path: Union[str, Path],
    bundle: str = DEFAULT_BUNDLE,
    development_locale: str = DEFAULT_DEVELOPMENT_LOCALE,
) -> AssetCatalog:
    """Convenience wrapper around AssetCatalogBuilder.build."""
    return AssetCatalogBuilder(bundle=bundle, development_locale=development_locale).build(path)
