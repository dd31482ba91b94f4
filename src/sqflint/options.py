"""
SQFLint Preprocessor Options
============================

Read-only settings consulted by the preprocessor. The only one the macro
engine really depends on is the include-path prefix table, which maps the
virtual roots used in ``#include`` lines (e.g. ``\\A3\\``) to real
directories on disk.

Configuration can come from:
- Default values (defined here)
- A JSON options file
- Environment variables

JSON options file:

    {
        "includePaths": {
            "\\\\A3\\\\": "/opt/a3/",
            "\\\\x\\\\cba\\\\": "/home/me/cba/"
        },
        "maxExpansions": 1000
    }

The prefix table is ordered: the first prefix that matches wins, so more
specific prefixes must be listed before more general ones.
"""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from sqflint.errors import OptionsError


DEFAULT_MAX_EXPANSIONS = 1000


@dataclass
class Options:
    """
    Preprocessor configuration.

    Attributes:
        include_paths: Ordered mapping of virtual path prefix -> real prefix
        max_expansions: Substitutions allowed on a single line before the
                        expansion is treated as recursive
        encoding: Text encoding used when reading included files
    """
    include_paths: dict[str, str] = field(default_factory=dict)
    max_expansions: int = DEFAULT_MAX_EXPANSIONS
    encoding: str = "utf-8"

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_mapping(cls, include_paths: Mapping[str, str], **kwargs) -> "Options":
        """Create Options from an existing prefix mapping (order is kept)."""
        return cls(include_paths=dict(include_paths), **kwargs)

    @classmethod
    def from_file(cls, path: Union[str, Path], base: Optional["Options"] = None) -> "Options":
        """
        Create Options from a JSON options file.

        Both ``includePaths`` and ``include_paths`` spellings are accepted.

        Args:
            path: Path to the JSON file
            base: Options the file is layered onto; settings the file
                  leaves out keep their value from here

        Raises:
            OptionsError: If the file cannot be read or is malformed
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise OptionsError(f"cannot read options file '{path}': {e}") from e
        except json.JSONDecodeError as e:
            raise OptionsError(f"invalid JSON in options file '{path}': {e}") from e

        if not isinstance(data, dict):
            raise OptionsError(f"options file '{path}' must contain a JSON object")

        config = base.merged(None) if base is not None else cls()

        include_paths = data.get("includePaths", data.get("include_paths", {}))
        if not isinstance(include_paths, dict) or not all(
            isinstance(k, str) and isinstance(v, str)
            for k, v in include_paths.items()
        ):
            raise OptionsError(
                f"'includePaths' in '{path}' must map strings to strings"
            )
        include_paths = dict(include_paths)
        for key, value in config.include_paths.items():
            include_paths.setdefault(key, value)
        config.include_paths = include_paths

        max_expansions = data.get("maxExpansions", data.get("max_expansions"))
        if max_expansions is not None:
            if not isinstance(max_expansions, int) or max_expansions < 1:
                raise OptionsError(
                    f"'maxExpansions' in '{path}' must be a positive integer"
                )
            config.max_expansions = max_expansions

        if encoding := data.get("encoding"):
            config.encoding = str(encoding)

        return config

    @classmethod
    def from_env(cls) -> "Options":
        """
        Create Options from environment variables.

        Environment variables (all optional):
            SQFLINT_INCLUDE_PATHS: ``virtual=real`` pairs separated by ``;``
            SQFLINT_MAX_EXPANSIONS: Expansion limit per line (integer >= 1)

        Returns:
            Options with values from environment variables
        """
        config = cls()

        if include_paths := os.environ.get("SQFLINT_INCLUDE_PATHS"):
            config.include_paths = parse_prefix_pairs(include_paths.split(";"))

        if max_expansions := os.environ.get("SQFLINT_MAX_EXPANSIONS"):
            try:
                limit = int(max_expansions)
            except ValueError:
                limit = 0
            if limit >= 1:
                config.max_expansions = limit
            # Invalid or non-positive limits are ignored

        return config

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPER METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    def merged(self, other: Optional["Options"]) -> "Options":
        """
        Return a copy with ``other`` layered on top.

        Prefixes from ``other`` come first so they win over ours; scalar
        settings are taken from ``other``.
        """
        if other is None:
            return Options(dict(self.include_paths), self.max_expansions, self.encoding)

        include_paths = dict(other.include_paths)
        for key, value in self.include_paths.items():
            include_paths.setdefault(key, value)

        return Options(include_paths, other.max_expansions, other.encoding)


def parse_prefix_pairs(pairs) -> dict[str, str]:
    """
    Parse ``virtual=real`` strings into an ordered prefix mapping.

    Blank entries are skipped.

    Raises:
        OptionsError: If an entry has no ``=``
    """
    result: dict[str, str] = {}
    for pair in pairs:
        pair = pair.strip()
        if not pair:
            continue
        if "=" not in pair:
            raise OptionsError(f"invalid include path '{pair}', expected VIRTUAL=REAL")
        virtual, real = pair.split("=", 1)
        result[virtual] = real
    return result
