"""
Base classes for localized strings parsers.
Defines the entry model and the interface every strings format implements.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..utils.locale import DEFAULT_DEVELOPMENT_LOCALE, LocaleReference, resolve_locale
from ..utils.paths import filename_without_extension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StringsEntry:
    """A single translatable string."""
    key: str
    value: str
    locale: LocaleReference
    argument_count: int = 0


@dataclass(frozen=True)
class StringsCatalog:
    """Entries parsed from one source file."""
    filename: str
    entries: List[StringsEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)


class ResourceError(Exception):
    """Base exception for resource parsing errors."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class FileReadError(ResourceError):
    """Exception raised when a source file cannot be read or decoded as text."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Cannot read {path}: {reason}", path)


class DecodeError(ResourceError):
    """Exception raised when a structured strings document has an unexpected shape."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Invalid strings catalog {path}: {reason}", path)


class NoCatalogsFound(ResourceError):
    """Exception raised when no supported strings file exists at a location."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(f"No strings files found: {path}", path)


class StringsParser(ABC):
    """Abstract base class for strings file parsers."""

    # File extension (without dot) handled by the parser
    extension: str = ""

    def __init__(self, development_locale: str = DEFAULT_DEVELOPMENT_LOCALE):
        self.development_locale = development_locale

    @abstractmethod
    def parse_entries(self, path: Path) -> List[StringsEntry]:
        """
        Parse all entries from a file.

        Args:
            path: File to parse

        Returns:
            Entries in document order

        Raises:
            FileReadError: If the file cannot be read
            DecodeError: If the document is malformed
        """
        pass

    def parse(self, path: Union[str, Path]) -> StringsCatalog:
        """Parse a file into a catalog named after the file."""
        path = Path(path)
        filename = filename_without_extension(path)
        entries = self.parse_entries(path)
        logger.debug(f"Parsed {len(entries)} entries from {path}")
        return StringsCatalog(filename=filename, entries=entries)

    def locale_for(self, path: Path) -> LocaleReference:
        return resolve_locale(path, self.development_locale)

    def read_text(self, path: Path) -> str:
        """Read a file as UTF-8 text, raising FileReadError on failure."""
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise FileReadError(path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise FileReadError(path, e.strerror or str(e)) from e


class ParserRegistry:
    """Registry mapping file extensions to parser classes."""

    def __init__(self):
        self._parser_classes: Dict[str, type] = {}

    def register_parser_class(self, parser_class: type) -> None:
        """
        Register a parser class under its extension.

        Raises:
            ValueError: If parser_class doesn't inherit from StringsParser
        """
        if not issubclass(parser_class, StringsParser):
            raise ValueError(f"Parser class {parser_class} must inherit from StringsParser")
        self._parser_classes[parser_class.extension] = parser_class

    def create_parser(self, extension: str, development_locale: str = DEFAULT_DEVELOPMENT_LOCALE) -> StringsParser:
        """
        Create a parser for a file extension.

        Raises:
            ValueError: If no parser handles the extension
        """
        extension = extension.lstrip(".")
        if extension not in self._parser_classes:
            raise ValueError(f"Unsupported strings format: {extension}")
        return self._parser_classes[extension](development_locale)

    def supported_extensions(self) -> List[str]:
        return list(self._parser_classes)


parser_registry = ParserRegistry()
