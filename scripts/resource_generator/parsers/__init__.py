"""
Parsers for localized strings sources.
Handles flat ``.strings`` files and JSON ``.xcstrings`` catalogs.
"""

from .base import (
    StringsEntry, StringsCatalog, StringsParser, ParserRegistry,
    ResourceError, FileReadError, DecodeError, NoCatalogsFound,
    parser_registry
)
from .strings_file import StringsFileParser
from .xcstrings import (
    XCStringsParser, DirectLocalization, PluralLocalization,
    CatalogKey, StringCatalogDocument, PLURAL_CATEGORIES
)

# Register parser classes with the global registry
parser_registry.register_parser_class(StringsFileParser)
parser_registry.register_parser_class(XCStringsParser)

__all__ = [
    # Models and registry
    "StringsEntry",
    "StringsCatalog",
    "StringsParser",
    "ParserRegistry",
    "parser_registry",

    # Exceptions
    "ResourceError",
    "FileReadError",
    "DecodeError",
    "NoCatalogsFound",

    # Concrete parsers
    "StringsFileParser",
    "XCStringsParser",

    # Structured catalog model
    "DirectLocalization",
    "PluralLocalization",
    "CatalogKey",
    "StringCatalogDocument",
    "PLURAL_CATEGORIES",
]
