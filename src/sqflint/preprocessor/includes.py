"""
Include Resolver
================

Maps the virtual paths used in ``#include`` lines to files on disk.

Resolution happens in two steps:

1. **Prefix mapping**: the configured prefix table is scanned in order and
   the first prefix that literally starts the path is replaced by its
   real-path counterpart. With no match the path is left alone.

2. **Relative resolution**: the mapped path (backslashes normalized to
   ``/``) is resolved against the directory of the file doing the
   including. A mapped path that is already absolute stands on its own.

A target that does not exist is not an error: the Include is still
recorded, the preprocessor simply does not descend into it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sqflint.options import Options


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Include:
    """
    A recorded ``#include`` reference.

    Attributes:
        file: Requested path after prefix mapping
        source: File that contains the ``#include``
        requested: Path exactly as written between the quotes
        path: Resolved filesystem path
        exists: Whether ``path`` existed when resolved
    """
    file: str
    source: str
    requested: str
    path: Path
    exists: bool


class IncludeResolver:
    """
    Resolves include paths using the Options prefix table.

    Example:
        >>> resolver = IncludeResolver(Options({"\\\\A3\\\\": "/opt/a3/"}))
        >>> resolver.resolve_prefix("\\\\A3\\\\file.sqf")
        '/opt/a3/file.sqf'
    """

    def __init__(self, options: Optional[Options] = None):
        self.options = options or Options()

    def resolve_prefix(self, path: str) -> str:
        """Replace the first matching virtual prefix of ``path``."""
        for prefix, real in self.options.include_paths.items():
            if path.startswith(prefix):
                return real + path[len(prefix):]
        return path

    def resolve(self, requested: str, source: str) -> Include:
        """
        Resolve an include relative to the including file.

        Args:
            requested: Path as written in the ``#include`` line
            source: Path of the including file

        Returns:
            The Include record (check ``exists`` before reading it)
        """
        mapped = self.resolve_prefix(requested)

        actual = mapped.replace("\\", "/")
        while "//" in actual:
            actual = actual.replace("//", "/")

        root = Path(source).absolute().parent
        path = root / actual
        exists = path.is_file()

        logger.debug(
            f"Resolved include '{requested}' from {source} -> {path}"
            f"{'' if exists else ' (missing)'}"
        )

        return Include(
            file=mapped,
            source=source,
            requested=requested,
            path=path,
            exists=exists,
        )
