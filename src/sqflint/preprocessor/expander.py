"""
Macro Expander
==============

Rescanning substitution engine. Each code line is rewritten against the
current MacroTable:

1. Macros are ordered by descending name length.
2. The first macro (in that order) with an expandable occurrence anywhere
   in the line is substituted.
3. Scanning restarts from the top against the updated line, until a full
   pass finds nothing to expand.

Matching is purely textual: a macro name matches wherever it appears as a
substring, identifier boundaries are not checked.

Function-like Macros
--------------------
An occurrence of a function-like macro only counts when ``(`` follows the
name immediately and the parenthesis is closed on the same line. The body
is then rewritten in a single regex pass. A parameter name is bounded by
any non-letter, so ``_var`` and ``a_b`` substitute but ``ab`` does not:

    #define QUOTE(x)      #x                 QUOTE(abc)     -> "abc"
    #define DOUBLES(a,b)  a##_##b            DOUBLES(x,y)   -> x_y
    #define MAX(a,b)      ((a) > (b) ? (a) : (b))

Recursion
---------
A macro whose expansion reproduces its own name would rescan forever.
The expander raises MacroRecursionError instead, either as soon as a
substitution leaves the line unchanged or once the per-line substitution
count exceeds ``max_expansions``.
"""

import logging
import re
from typing import Optional

from sqflint.errors import MacroRecursionError, SourceLocation
from sqflint.options import DEFAULT_MAX_EXPANSIONS
from sqflint.preprocessor.macros import Macro, MacroTable
from sqflint.preprocessor.scanner import split_arguments, walk_to_end


logger = logging.getLogger(__name__)


# Letters only: ``_``, digits and ``#`` all end a parameter name
PARAMETER_BOUNDARY = "(?<![A-Za-z]){}(?![A-Za-z])"

# Concatenation markers not attached to a parameter
MARKER_PATTERN = "#{2,}"


def substitute_parameters(
    body: str,
    parameters: list[str],
    arguments: list[str],
) -> str:
    """
    Substitute actual arguments into a function-like macro body.

    Grammar, applied in a single left-to-right pass:
    - a parameter name not touching a letter is replaced by its argument,
      so ``_var``, ``a_b`` and ``a1`` all substitute
    - a single ``#`` directly before a parameter stringifies the argument
      (``#x`` -> ``"value"``)
    - a run of two or more ``#`` is a concatenation marker; pairs are
      removed so the neighbours are pasted together

    Parameters without a matching argument are left as written; surplus
    arguments are ignored.
    """
    values: dict[str, str] = {}
    for name, value in zip(parameters, arguments):
        values.setdefault(name, value)

    alternatives = [MARKER_PATTERN]
    if values:
        names = "|".join(re.escape(name) for name in sorted(values, key=len, reverse=True))
        alternatives.insert(0, "(#*)" + PARAMETER_BOUNDARY.format(f"({names})"))
    pattern = re.compile("|".join(alternatives))

    def replace(match: re.Match) -> str:
        if not values or match.group(2) is None:
            return "#" * (len(match.group(0)) % 2)

        markers, value = match.group(1), values[match.group(2)]
        if len(markers) == 1:
            return f'"{value}"'
        return "#" * (len(markers) % 2) + value

    return pattern.sub(replace, body)


class MacroExpander:
    """
    Expands macro invocations in single lines of code.

    Attributes:
        macros: The table to expand against (shared, read-only here)
        max_expansions: Substitutions allowed per line before giving up
    """

    def __init__(self, macros: MacroTable, max_expansions: int = DEFAULT_MAX_EXPANSIONS):
        self.macros = macros
        self.max_expansions = max_expansions

    def expand(self, line: str, location: Optional[SourceLocation] = None) -> str:
        """
        Expand every macro in ``line``.

        Args:
            line: Normalized code line
            location: Where the line is, for error reporting

        Returns:
            The line with all macro invocations substituted

        Raises:
            MacroRecursionError: If expansion does not terminate
        """
        original = line
        ordered = self.macros.by_length()
        count = 0

        while True:
            for macro in ordered:
                match = self.find_invocation(line, macro)
                if match is not None:
                    break
            else:
                return line

            start, end, replacement = match
            expanded = line[:start] + replacement + line[end:]
            count += 1

            if expanded == line or count > self.max_expansions:
                raise MacroRecursionError(
                    macro.name, count, location=location, source_line=original
                )

            logger.debug(f"Expanded '{macro.name}': {line!r} -> {expanded!r}")
            line = expanded

    def find_invocation(self, line: str, macro: Macro) -> Optional[tuple[int, int, str]]:
        """
        Locate the first expandable occurrence of ``macro`` in ``line``.

        Returns:
            Tuple of (start, end, replacement text) or None if the macro
            cannot be expanded anywhere in the line
        """
        name = macro.name
        index = line.find(name)

        if not macro.is_function_like:
            if index < 0:
                return None
            return index, index + len(name), macro.value

        while index >= 0:
            open_paren = index + len(name)
            if open_paren < len(line) and line[open_paren] == "(":
                close = walk_to_end(line[open_paren + 1:])
                if close >= 0:
                    args_text = line[open_paren + 1:open_paren + 1 + close]
                    replacement = substitute_parameters(
                        macro.value,
                        macro.parameters,
                        split_arguments(args_text),
                    )
                    return index, open_paren + close + 2, replacement
            index = line.find(name, index + 1)

        return None
