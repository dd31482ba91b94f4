"""
SQFLint - Preprocessor Front-End for the SQF Linter
===================================================

This package provides the text preprocessing stage of an SQF (Arma
scripting language) linter. Before the lexer sees a script, the
preprocessor:

- defines object-like and function-like macros (``#define``)
- expands macro invocations in every code line
- pulls in included files (``#include``), mapping virtual include roots
  such as ``\\A3\\`` to real directories

The output keeps the input's line count, so diagnostics produced later
still point at the right lines.

Quick Start
-----------
Preprocess a script:
    >>> from sqflint import Preprocessor, Options
    >>> pp = Preprocessor(Options(include_paths={"\\\\A3\\\\": "/opt/a3/"}))
    >>> text = pp.process_file("init.sqf")
    >>> for include in pp.includes:
    ...     print(include.file)

Or use the command-line tool:
    $ sqfpp init.sqf -I "\\A3\\=/opt/a3/"

Version History
---------------
1.0.0 - Initial release with macro engine and include resolver
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from sqflint.errors import (
    SQFLintError,
    SourceLocation,
    PreprocessorError,
    DirectiveError,
    IncludeError,
    MacroRecursionError,
    ExpansionError,
    OptionsError,
)
from sqflint.options import Options
from sqflint.preprocessor import (
    Preprocessor,
    PreprocessorContext,
    preprocess,
    Macro,
    MacroDefinition,
    MacroTable,
    Include,
)

__all__ = [
    "__version__",
    # Errors
    "SQFLintError",
    "SourceLocation",
    "PreprocessorError",
    "DirectiveError",
    "IncludeError",
    "MacroRecursionError",
    "ExpansionError",
    "OptionsError",
    # Configuration
    "Options",
    # Preprocessor
    "Preprocessor",
    "PreprocessorContext",
    "preprocess",
    "Macro",
    "MacroDefinition",
    "MacroTable",
    "Include",
]
