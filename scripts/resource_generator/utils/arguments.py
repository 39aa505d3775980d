"""
Format placeholder counting for localized strings.
"""

import re

# Conversion specifiers understood by the generated accessors: objects, integers,
# unsigned, octal/hex, floats, characters, C strings and pointers.
FORMAT_SPECIFIER_PATTERN = re.compile(r"%[@dDuUxXoOfeEgGcCsSPpaA]")


def count_format_arguments(value: str) -> int:
    """
    Count the format placeholders in a string value.

    Only complete ``%<specifier>`` pairs are counted, so ``"%%"`` and a
    trailing ``"%"`` contribute nothing.

    Args:
        value: Localized string value

    Returns:
        Number of substitution arguments the value requires
    """
    return len(FORMAT_SPECIFIER_PATTERN.findall(value))
