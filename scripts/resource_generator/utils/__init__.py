"""
Utility modules for locale resolution, format argument counting, and path handling.
"""

from .locale import LocaleReference, resolve_locale, DEFAULT_DEVELOPMENT_LOCALE
from .arguments import count_format_arguments
from .paths import MissingBasename, filename_without_extension

__all__ = [
    "LocaleReference",
    "resolve_locale",
    "DEFAULT_DEVELOPMENT_LOCALE",
    "count_format_arguments",
    "MissingBasename",
    "filename_without_extension",
]
