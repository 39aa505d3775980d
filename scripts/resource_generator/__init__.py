"""
Resource Generator

Extracts localized strings and asset catalog metadata from project resources
and renders typed accessors for them from Jinja2 templates.
"""

__version__ = "0.1.0"
__author__ = "Resource Generator Development Team"

from .config import GeneratorConfig
from .parsers import StringsEntry, StringsCatalog
from .processing.strings_catalog import parse_strings, unify_entries
from .processing.asset_catalog import AssetCatalog, AssetCatalogBuilder, Namespace
from .processing.renderer import TemplateRenderer
from .pipeline import ResourcePipeline

__all__ = [
    "GeneratorConfig",
    "StringsEntry",
    "StringsCatalog",
    "parse_strings",
    "unify_entries",
    "AssetCatalog",
    "AssetCatalogBuilder",
    "Namespace",
    "TemplateRenderer",
    "ResourcePipeline",
]
