"""
Macro Table
===========

Keyed store of every macro seen during one preprocessor run.

A name is registered once; redefining it appends a new entry to that
macro's definition history instead of replacing the Macro. Expansion always
uses the most recent definition, while the full history stays available to
the linter (e.g. to report where a macro was redefined).

The table has no removal API: ``#undef`` is recognized by the directive
parser but never evaluated.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Optional

from sqflint.errors import SourceLocation


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MacroDefinition:
    """
    One ``#define`` of a macro.

    Attributes:
        value: Replacement text (empty string when the define had no body)
        location: Where the ``#define`` line is
        filename: Originating-file tag; only set when the definition came
                  from a run with filename tagging enabled (i.e. includes)
        end_column: Column just past the directive's value text
    """
    value: str
    location: SourceLocation
    filename: Optional[str] = None
    end_column: int = 1


@dataclass
class Macro:
    """
    A named macro and its definition history.

    Attributes:
        name: Macro name (unique key in the table)
        parameters: Formal parameter names for function-like macros,
                    None for object-like macros
        source: File the macro was first defined in
        line: Line of the first definition (1-indexed)
        definitions: Every definition in the order encountered
    """
    name: str
    parameters: Optional[list[str]] = None
    source: str = "<input>"
    line: int = 0
    definitions: list[MacroDefinition] = field(default_factory=list)

    @property
    def is_function_like(self) -> bool:
        """Return True if this is a function-like macro."""
        return self.parameters is not None

    @property
    def value(self) -> str:
        """Body of the most recent definition ("" if there is none)."""
        if not self.definitions:
            return ""
        return self.definitions[-1].value

    def add_definition(
        self,
        value: str,
        location: SourceLocation,
        filename: Optional[str] = None,
        end_column: int = 1,
    ) -> MacroDefinition:
        """Append a definition to the history and return it."""
        definition = MacroDefinition(value, location, filename, end_column)
        self.definitions.append(definition)
        return definition


class MacroTable:
    """
    Name -> Macro mapping shared by every file of one run.

    Example:
        >>> table = MacroTable()
        >>> loc = SourceLocation("init.sqf", 1, 1)
        >>> _ = table.define("FOO", None, "x", loc)
        >>> _ = table.define("FOO", None, "y", loc)
        >>> table["FOO"].value
        'y'
        >>> len(table["FOO"].definitions)
        2
    """

    def __init__(self):
        self._macros: dict[str, Macro] = {}

    def define(
        self,
        name: str,
        parameters: Optional[list[str]],
        value: str,
        location: SourceLocation,
        filename: Optional[str] = None,
        end_column: int = 1,
    ) -> Macro:
        """
        Register a macro or extend an existing one with a new definition.

        The parameter list is fixed by the first definition of a name;
        later definitions only add to the history.
        """
        macro = self._macros.get(name)
        if macro is None:
            macro = Macro(
                name=name,
                parameters=parameters,
                source=location.filename,
                line=location.line,
            )
            self._macros[name] = macro
            logger.debug(f"Defined macro '{name}' at {location}")
        else:
            logger.debug(
                f"Redefined macro '{name}' at {location} "
                f"(definition #{len(macro.definitions) + 1})"
            )

        macro.add_definition(value, location, filename, end_column)
        return macro

    def get(self, name: str) -> Optional[Macro]:
        return self._macros.get(name)

    def __getitem__(self, name: str) -> Macro:
        return self._macros[name]

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    def __len__(self) -> int:
        return len(self._macros)

    def __iter__(self) -> Iterator[Macro]:
        return iter(self._macros.values())

    def names(self) -> list[str]:
        """Return macro names in registration order."""
        return list(self._macros)

    def by_length(self) -> list[Macro]:
        """
        Return macros sorted by descending name length.

        Longer names are tried first so that ``FOO`` can never match inside
        ``FOOBAR``. Equal lengths keep registration order.
        """
        return sorted(self._macros.values(), key=lambda m: -len(m.name))
