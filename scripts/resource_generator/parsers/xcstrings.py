"""
Parser for JSON string catalogs (``.xcstrings``).

A catalog looks like::

    {
      "sourceLanguage": "en",
      "version": "1.0",
      "strings": {
        "greeting": {"localizations": {"en": {"stringUnit": {"value": "Hello %@"}}}},
        "items": {"localizations": {"en": {"variations": {"plural": {
          "one": {"stringUnit": {"value": "%d item"}},
          "other": {"stringUnit": {"value": "%d items"}}
        }}}}}
      }
    }

Each key yields an entry for its primary value plus one ``<key>_<category>``
entry per populated plural category other than ``other``.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .base import DecodeError, StringsEntry, StringsParser
from ..utils.arguments import count_format_arguments
from ..utils.locale import LocaleReference

logger = logging.getLogger(__name__)

PLURAL_CATEGORIES = ("zero", "one", "two", "few", "many", "other")


@dataclass(frozen=True)
class DirectLocalization:
    """Localization holding a single string unit."""
    value: str


@dataclass(frozen=True)
class PluralLocalization:
    """Localization holding per-category string units."""
    variants: Dict[str, str] = field(default_factory=dict)
    # stringUnit value stored beside the plural, used when "other" is absent
    fallback: Optional[str] = None

    @property
    def other(self) -> Optional[str]:
        return self.variants.get("other")


Localization = Union[DirectLocalization, PluralLocalization]


@dataclass(frozen=True)
class CatalogKey:
    """One key of a string catalog with its localizations in document order."""
    key: str
    localizations: Dict[str, Optional[Localization]] = field(default_factory=dict)

    @property
    def first_localization(self) -> Optional[Localization]:
        # Document order decides which locale is "first".
        for localization in self.localizations.values():
            return localization
        return None

    @property
    def primary_value(self) -> Optional[str]:
        localization = self.first_localization
        if isinstance(localization, PluralLocalization):
            if localization.other is not None:
                return localization.other
            return localization.fallback
        if isinstance(localization, DirectLocalization):
            return localization.value
        return None


@dataclass(frozen=True)
class StringCatalogDocument:
    """Decoded ``.xcstrings`` document."""
    source_language: str
    version: str
    keys: List[CatalogKey] = field(default_factory=list)


class XCStringsParser(StringsParser):
    """Parses JSON string catalogs including plural variations."""

    extension = "xcstrings"

    def parse_entries(self, path: Path) -> List[StringsEntry]:
        locale = self.locale_for(path)
        document = self.decode(path, self.read_text(path))

        entries: List[StringsEntry] = []
        for catalog_key in document.keys:
            entries.extend(self._entries_for_key(catalog_key, locale))
        return entries

    def _entries_for_key(self, catalog_key: CatalogKey, locale: LocaleReference) -> List[StringsEntry]:
        # Untranslated keys still get an accessor.
        if not catalog_key.localizations:
            return [StringsEntry(key=catalog_key.key, value="", locale=locale, argument_count=0)]

        entries = []
        primary = catalog_key.primary_value
        if primary is not None:
            entries.append(self._make_entry(catalog_key.key, primary, locale))

        localization = catalog_key.first_localization
        if isinstance(localization, PluralLocalization):
            for category in PLURAL_CATEGORIES:
                if category == "other":
                    continue
                value = localization.variants.get(category)
                if value is not None:
                    entries.append(self._make_entry(f"{catalog_key.key}_{category}", value, locale))

        if not entries:
            logger.debug(f"Key '{catalog_key.key}' has no string unit or plural value, skipping")
        return entries

    def _make_entry(self, key: str, value: str, locale: LocaleReference) -> StringsEntry:
        return StringsEntry(key=key, value=value, locale=locale, argument_count=count_format_arguments(value))

    def decode(self, path: Path, text: str) -> StringCatalogDocument:
        """
        Decode and shape-check a string catalog.

        Args:
            path: Source file, used in error messages
            text: Document text

        Returns:
            Decoded document

        Raises:
            DecodeError: If the text is not JSON or does not match the catalog shape
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(path, f"invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}") from e

        root = _expect_object(path, data, "document")
        source_language = _expect_string(path, _require(path, root, "sourceLanguage", "document"), "sourceLanguage")
        version = _expect_string(path, _require(path, root, "version", "document"), "version")
        strings = _expect_object(path, _require(path, root, "strings", "document"), "strings")

        keys = [self._decode_key(path, key, entry) for key, entry in strings.items()]
        return StringCatalogDocument(source_language=source_language, version=version, keys=keys)

    def _decode_key(self, path: Path, key: str, entry: Any) -> CatalogKey:
        where = f"strings.{key}"
        entry = _expect_object(path, entry, where)

        for optional_text in ("comment", "extractedComment", "extractionState"):
            if entry.get(optional_text) is not None:
                _expect_string(path, entry[optional_text], f"{where}.{optional_text}")

        raw_localizations = entry.get("localizations")
        if raw_localizations is None:
            return CatalogKey(key=key)

        raw_localizations = _expect_object(path, raw_localizations, f"{where}.localizations")
        localizations = {
            locale_code: self._decode_localization(path, value, f"{where}.localizations.{locale_code}")
            for locale_code, value in raw_localizations.items()
        }
        return CatalogKey(key=key, localizations=localizations)

    def _decode_localization(self, path: Path, data: Any, where: str) -> Optional[Localization]:
        data = _expect_object(path, data, where)

        direct_value = None
        if data.get("stringUnit") is not None:
            direct_value = _decode_string_unit(path, data["stringUnit"], f"{where}.stringUnit")

        plural = None
        if data.get("variations") is not None:
            variations = _expect_object(path, data["variations"], f"{where}.variations")
            if variations.get("plural") is not None:
                plural = self._decode_plural(path, variations["plural"], f"{where}.variations.plural")

        if plural is not None:
            return PluralLocalization(variants=plural.variants, fallback=direct_value)
        if direct_value is not None:
            return DirectLocalization(value=direct_value)
        # Device or width variations only: nothing this generator can use.
        return None

    def _decode_plural(self, path: Path, data: Any, where: str) -> PluralLocalization:
        data = _expect_object(path, data, where)
        variants = {}
        for category in PLURAL_CATEGORIES:
            container = data.get(category)
            if container is None:
                continue
            container = _expect_object(path, container, f"{where}.{category}")
            unit = _require(path, container, "stringUnit", f"{where}.{category}")
            variants[category] = _decode_string_unit(path, unit, f"{where}.{category}.stringUnit")
        return PluralLocalization(variants=variants)


def _decode_string_unit(path: Path, data: Any, where: str) -> str:
    unit = _expect_object(path, data, where)
    value = _expect_string(path, _require(path, unit, "value", where), f"{where}.value")
    if unit.get("state") is not None:
        _expect_string(path, unit["state"], f"{where}.state")
    return value


def _require(path: Path, data: Dict[str, Any], key: str, where: str) -> Any:
    if key not in data or data[key] is None:
        raise DecodeError(path, f"missing required field '{key}' in {where}")
    return data[key]


def _expect_object(path: Path, value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(path, f"{where} must be an object, got {type(value).__name__}")
    return value


def _expect_string(path: Path, value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(path, f"{where} must be a string, got {type(value).__name__}")
    return value
