"""
Directive Parser
================

Line normalization, directive recognition and dispatch.

Every raw line is first normalized (leading whitespace stripped, same-line
comments removed, tabs turned into spaces). A normalized line starting with
``#`` is a directive; anything else is code for the expander.

Supported Directives
--------------------
#define NAME value          - Object-like macro
#define NAME(a, b) body     - Function-like macro
#include "path"             - Include a file (virtual prefixes are mapped)

Recognized, Never Evaluated
---------------------------
#ifdef, #ifndef, #undef, #else are accepted and dropped without any state
change. There is no conditional compilation: lines inside such blocks are
always processed. Any other directive word is dropped silently as well.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from sqflint.errors import DirectiveError, SourceLocation
from sqflint.preprocessor.includes import Include, IncludeResolver
from sqflint.preprocessor.scanner import read_until, walk_to_end


logger = logging.getLogger(__name__)


LEADING_WHITESPACE_PATTERN = re.compile(r"^\s*")

# Same-line block comments and line comments
COMMENT_PATTERN = re.compile(r"(/\*[^*]*\*/)|(//.*)")

IGNORED_DIRECTIVES = frozenset({"ifdef", "ifndef", "undef", "else"})


def normalize_line(line: str) -> str:
    """Strip leading whitespace and comments, and convert tabs to spaces."""
    line = LEADING_WHITESPACE_PATTERN.sub("", line, count=1)
    line = COMMENT_PATTERN.sub("", line)
    return line.replace("\t", " ")


@dataclass(frozen=True)
class Directive:
    """
    A ``#word value`` line.

    Attributes:
        word: Directive word as written (without the ``#``)
        value: Everything after the word and one separating space
    """
    word: str
    value: str

    @property
    def keyword(self) -> str:
        """Lowercased directive word used for dispatch."""
        return self.word.lower()


@dataclass(frozen=True)
class DefineDirective:
    """
    Parsed ``#define``.

    Attributes:
        name: Macro name
        parameters: Formal parameters, None for object-like macros
        body: Replacement text ("" when absent)
    """
    name: str
    parameters: Optional[list[str]]
    body: str


def parse_directive(line: str) -> Optional[Directive]:
    """
    Split a normalized line into directive word and value.

    Returns:
        The Directive, or None if the line is not a directive
    """
    if not line.startswith("#"):
        return None

    word = read_until(line, 1, " ")
    value = read_until(line, 2 + len(word), "\n", escape=True, brackets=True)
    return Directive(word, value)


def parse_define(value: str) -> DefineDirective:
    """
    Parse the value part of a ``#define``.

    The identifier ends at the first space outside parentheses, so
    ``MAX(a, b) body`` keeps its parameter list together. Text glued to
    the closing paren (``FOO(x)body``) starts the body.

    Raises:
        DirectiveError: If there is no macro name
    """
    value = value.lstrip(" ")
    ident = read_until(value, 0, " ", brackets=True)
    body = value[len(ident):]

    parameters = None
    if "(" in ident:
        start = ident.index("(") + 1
        end = walk_to_end(ident[start:])
        if end < 0:
            arguments = ident[start:]
        else:
            arguments = ident[start:start + end]
            body = ident[start + end + 1:] + body
        parameters = [p.strip() for p in arguments.split(",") if p.strip()]
        ident = ident[:start - 1]

    if not ident:
        raise DirectiveError("#define without a macro name")

    return DefineDirective(ident, parameters, body.strip())


def parse_include(value: str) -> str:
    """
    Extract the filename from the value of an ``#include``.

    The first and last characters (the quotes) are dropped, so both
    ``"file.sqf"`` and ``<file.sqf>`` work.

    Raises:
        DirectiveError: If there is no quoted filename
    """
    filename = value.strip()
    if len(filename) < 2:
        raise DirectiveError("#include without a quoted filename")
    return filename[1:-1]


class DirectiveParser:
    """
    Applies directives to the shared preprocessor state.

    Attributes:
        context: Shared PreprocessorContext of the current run
        resolver: Include resolver for ``#include`` paths
        run_include: Callback that runs the whole pipeline on an existing
                     include target, given the location of the directive
    """

    def __init__(
        self,
        context,
        resolver: IncludeResolver,
        run_include: Callable[[Include, SourceLocation], None],
    ):
        self.context = context
        self.resolver = resolver
        self.run_include = run_include

    def handle(
        self,
        directive: Directive,
        source: str,
        line: int,
        include_filename: bool,
    ) -> None:
        """
        Dispatch one directive.

        Args:
            directive: The parsed directive
            source: Path of the file being processed
            line: Line number of the directive (1-indexed)
            include_filename: Tag macro definitions with ``source``
        """
        keyword = directive.keyword
        location = SourceLocation(source, line, 1)

        try:
            if keyword == "define":
                self._handle_define(directive, location, include_filename)
            elif keyword == "include":
                self._handle_include(directive, location)
            elif keyword in IGNORED_DIRECTIVES:
                logger.debug(f"{location}: #{keyword} is not evaluated, ignoring")
            else:
                logger.debug(f"{location}: unknown directive '#{directive.word}', ignoring")
        except DirectiveError as e:
            if e.location is None:
                raise DirectiveError(e.message, location, e.hint) from e
            raise

    def _handle_define(
        self,
        directive: Directive,
        location: SourceLocation,
        include_filename: bool,
    ) -> None:
        define = parse_define(directive.value)
        self.context.macros.define(
            define.name,
            define.parameters,
            define.body,
            location,
            filename=location.filename if include_filename else None,
            end_column=len(directive.value) + 1,
        )

    def _handle_include(self, directive: Directive, location: SourceLocation) -> None:
        include = self.resolver.resolve(parse_include(directive.value), location.filename)
        self.context.includes.append(include)

        if include.exists:
            self.run_include(include, location)
        else:
            logger.debug(f"Include '{include.requested}' not found at {include.path}, skipping")
