"""
SQFLint Error Hierarchy
=======================

This module defines the exception hierarchy for the SQF linter front-end.
All exceptions inherit from SQFLintError, allowing callers to catch every
linter-related error with a single except clause if desired.

Exception Hierarchy
-------------------
SQFLintError (base)
├── PreprocessorError (preprocessor-related)
│   ├── DirectiveError - a directive that cannot be parsed at all
│   ├── IncludeError - circular or unreadable include
│   ├── MacroRecursionError - macro expands back into itself
│   └── ExpansionError - unexpected fault while expanding a line
└── OptionsError - invalid include-path configuration

Severity Model
--------------
The preprocessor knows only two severities:

- **Fatal**: anything raised out of ``Preprocessor.process()``. The whole
  run, including every pending nested include, is abandoned.
- **Ignored**: a missing include target or an unknown directive word.
  These never raise and are only visible in DEBUG logs.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SQFLintError(Exception):
    """
    Base exception for all SQFLint errors.

        try:
            preprocess(source, "init.sqf")
        except SQFLintError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Preprocessor Exceptions
# =============================================================================

class PreprocessorError(SQFLintError):
    """
    Base exception for all preprocessor errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            init.sqf:3:1: error: macro 'FOO' expands into itself
                FOO
                ^
            hint: check the #define of 'FOO' for a self reference
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class DirectiveError(PreprocessorError):
    """
    Directive that cannot be parsed.

    Unknown directive words are NOT errors (they are dropped silently);
    this is raised only when a known directive is structurally unusable,
    e.g. ``#include`` with no filename.
    """
    pass


class IncludeError(PreprocessorError):
    """
    Error including a file.

    A missing include target is NOT an error. This is raised only when
    descending into an existing file is impossible:
    - Circular include detected
    - File exists but cannot be read
    """

    def __init__(
        self,
        filename: str,
        reason: str,
        location: Optional[SourceLocation] = None,
        include_stack: Optional[list[str]] = None,
    ):
        self.included_filename = filename
        self.reason = reason
        self.include_stack = include_stack or []

        hint = None
        if self.include_stack:
            hint = "include chain: " + " -> ".join(self.include_stack)

        super().__init__(
            f"cannot include '{filename}': {reason}",
            location=location,
            hint=hint,
        )


class MacroRecursionError(PreprocessorError):
    """
    Macro expansion does not terminate.

    Raised when expanding a line keeps producing matchable text: either a
    substitution leaves the line unchanged (the macro expands to itself)
    or the number of substitutions on one line exceeds the configured
    limit (``Options.max_expansions``).
    """

    def __init__(
        self,
        macro_name: str,
        expansions: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.macro_name = macro_name
        self.expansions = expansions
        super().__init__(
            f"macro '{macro_name}' expands recursively "
            f"(gave up after {expansions} expansions)",
            location=location,
            hint=f"check the #define of '{macro_name}' for a self reference",
            source_line=source_line,
        )


class ExpansionError(PreprocessorError):
    """
    Unexpected fault while expanding a line.

    Wraps whatever was raised inside the expander; the original exception
    is available as ``__cause__``.
    """
    pass


# =============================================================================
# Configuration Exceptions
# =============================================================================

class OptionsError(SQFLintError):
    """
    Invalid preprocessor configuration.

    Raised when an options file cannot be read or does not contain a
    valid include-path mapping.
    """
    pass
