"""
Resource processing modules for strings aggregation, asset catalog parsing, and code rendering.
"""

from .strings_catalog import (
    SUPPORTED_EXTENSIONS,
    is_supported_file,
    parse_strings_file,
    parse_strings,
    unify_entries
)
from .asset_catalog import (
    AssetCatalog,
    AssetCatalogBuilder,
    Namespace,
    ColorResource,
    ImageResource,
    DataResource,
    CatalogReadError,
    parse_asset_catalog
)
from .renderer import (
    TemplateRenderer,
    RenderError,
    strings_context,
    assets_context
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "is_supported_file",
    "parse_strings_file",
    "parse_strings",
    "unify_entries",
    "AssetCatalog",
    "AssetCatalogBuilder",
    "Namespace",
    "ColorResource",
    "ImageResource",
    "DataResource",
    "CatalogReadError",
    "parse_asset_catalog",
    "TemplateRenderer",
    "RenderError",
    "strings_context",
    "assets_context",
]
