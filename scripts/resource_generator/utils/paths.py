"""
Path helpers shared by the strings and asset catalog parsers.
"""

import os
from pathlib import Path
from typing import Union


class MissingBasename(Exception):
    """Exception raised when a source location has no usable file name."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(f"Cannot determine a file name for: {path}")
        self.path = Path(path)


def filename_without_extension(path: Union[str, Path]) -> str:
    """
    Return the base name of a path with its extension removed.

    Relative paths are made absolute first, so "." names the working directory.

    Raises:
        MissingBasename: If the path has no name component
    """
    name = Path(os.path.abspath(path)).stem
    if not name:
        raise MissingBasename(path)
    return name
