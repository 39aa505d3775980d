"""
Parser for flat ``"key" = "value";`` strings files.
"""

import re
from pathlib import Path
from typing import List

from .base import StringsEntry, StringsParser
from ..utils.arguments import count_format_arguments

# Lines that don't match are skipped rather than reported.
ENTRY_PATTERN = re.compile(r'"([^"]+)"\s*=\s*"([^"]+)"\s*;')


class StringsFileParser(StringsParser):
    """Parses legacy ``.strings`` files by scanning for key/value pairs."""

    extension = "strings"

    def parse_entries(self, path: Path) -> List[StringsEntry]:
        locale = self.locale_for(path)
        contents = self.read_text(path)

        entries = []
        for match in ENTRY_PATTERN.finditer(contents):
            key, value = match.group(1), match.group(2)
            entries.append(StringsEntry(
                key=key,
                value=value,
                locale=locale,
                argument_count=count_format_arguments(value),
            ))
        return entries
