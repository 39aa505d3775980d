"""
Locale resolution for localized resource files.

A file's locale comes from its immediate parent directory: ``ko.lproj/Localizable.strings``
belongs to ``ko``. Files outside any ``.lproj`` directory are treated as base.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

LOCALE_DIRECTORY_SUFFIX = ".lproj"
DEFAULT_DEVELOPMENT_LOCALE = "Base"


@dataclass(frozen=True)
class LocaleReference:
    """Locale a resource belongs to."""
    code: Optional[str]
    is_base: bool

    @classmethod
    def base(cls) -> "LocaleReference":
        """Locale-less reference, treated as the development locale."""
        return cls(code=None, is_base=True)

    @classmethod
    def from_code(cls, code: str, development_locale: str = DEFAULT_DEVELOPMENT_LOCALE) -> "LocaleReference":
        return cls(code=code, is_base=code == development_locale)

    def __str__(self) -> str:
        return self.code or "base"


def resolve_locale(path: Union[str, Path], development_locale: str = DEFAULT_DEVELOPMENT_LOCALE) -> LocaleReference:
    """
    Derive the locale of a file from its parent directory.

    Args:
        path: Location of the resource file
        development_locale: Locale code whose ``.lproj`` directory counts as base

    Returns:
        LocaleReference for the file; base when no locale directory is present
    """
    parent = Path(path).parent.name
    if parent.endswith(LOCALE_DIRECTORY_SUFFIX):
        code = parent[:-len(LOCALE_DIRECTORY_SUFFIX)]
        if code:
            return LocaleReference.from_code(code, development_locale)
    return LocaleReference.base()
