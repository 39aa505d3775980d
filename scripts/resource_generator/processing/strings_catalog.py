"""
Strings catalog aggregation.
Collects every supported strings file under a location and merges the entries
into one key table with base-locale precedence.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Union

from ..parsers import (
    StringsCatalog, StringsEntry, FileReadError, NoCatalogsFound, parser_registry
)
from ..utils.locale import DEFAULT_DEVELOPMENT_LOCALE

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = frozenset({"strings", "xcstrings"})


def is_supported_file(path: Path) -> bool:
    """Check whether a file has a recognized strings extension."""
    return path.suffix[1:] in SUPPORTED_EXTENSIONS


def parse_strings_file(path: Union[str, Path], development_locale: str = DEFAULT_DEVELOPMENT_LOCALE) -> StringsCatalog:
    """
    Parse a single strings file with the parser for its extension.

    Raises:
        NoCatalogsFound: If the extension is not supported
        FileReadError: If the file cannot be read
        DecodeError: If a string catalog is malformed
    """
    path = Path(path)
    if not is_supported_file(path):
        raise NoCatalogsFound(path)
    parser = parser_registry.create_parser(path.suffix, development_locale)
    return parser.parse(path)


def parse_strings(path: Union[str, Path], development_locale: str = DEFAULT_DEVELOPMENT_LOCALE) -> List[StringsCatalog]:
    """
    Parse a strings file, or every strings file below a directory.

    Args:
        path: A supported strings file or a directory to search recursively
        development_locale: Locale code treated as base

    Returns:
        One catalog per recognized file, in traversal order

    Raises:
        FileReadError: If the location does not exist or a file cannot be read
        NoCatalogsFound: If no recognized file is found
        DecodeError: If any string catalog is malformed
    """
    path = Path(path)

    if path.is_file():
        if not is_supported_file(path):
            raise NoCatalogsFound(path)
        return [parse_strings_file(path, development_locale)]

    if not path.is_dir():
        raise FileReadError(path, "no such file or directory")

    catalogs = []
    for file_path in _walk(path):
        logger.debug(f"Parsing strings file: {file_path}")
        catalogs.append(parse_strings_file(file_path, development_locale))

    if not catalogs:
        raise NoCatalogsFound(path)

    logger.debug(f"Found {len(catalogs)} strings files under {path}")
    return catalogs


def _walk(directory: Path) -> Iterator[Path]:
    """Yield supported files below a directory in sorted, depth-first order."""
    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise FileReadError(directory, e.strerror or str(e)) from e

    for child in children:
        if child.is_dir():
            yield from _walk(child)
        elif is_supported_file(child):
            yield child


def unify_entries(catalogs: Iterable[StringsCatalog]) -> Dict[str, StringsEntry]:
    """
    Merge catalog entries into a table holding one entry per key.

    A base-locale entry replaces whatever was stored for its key; any other
    entry is kept only if the key has not been seen yet. Keys keep the
    position of their first appearance.

    Args:
        catalogs: Catalogs in traversal order

    Returns:
        Mapping of key to the chosen entry
    """
    table: Dict[str, StringsEntry] = {}
    for catalog in catalogs:
        for entry in catalog.entries:
            if entry.locale.is_base:
                table[entry.key] = entry
            elif entry.key not in table:
                table[entry.key] = entry
    return table
