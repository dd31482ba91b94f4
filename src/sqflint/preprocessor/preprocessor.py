"""
SQF Preprocessor
================

This module implements the preprocessing stage that runs before the SQF
lexer. It handles:
- #define macros (object-like and function-like)
- #include directives, with virtual include-path prefixes
- recognition (not evaluation) of #ifdef/#ifndef/#undef/#else

The output always has exactly as many lines as the input: directive lines
become empty lines and code lines are expanded in place, so line numbers
reported by the linter stay valid.

Shared State
------------
One PreprocessorContext (macro table + include list) is created per
top-level call and passed by reference into every nested include. A macro
defined inside an included file is visible to every line processed after
the ``#include`` in any file of the same run.

Error Handling
--------------
A fault while expanding a line is logged and aborts the entire run,
including all pending nested includes. Missing include files and unknown
directives are skipped silently.

Example
-------
>>> from sqflint.preprocessor import Preprocessor
>>> pp = Preprocessor()
>>> print(pp.process('#define GREETING "hi"\\nhint GREETING;', "init.sqf"))
<BLANKLINE>
hint "hi";
>>> pp.macros["GREETING"].value
'"hi"'
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, TextIO, Union

from sqflint.errors import ExpansionError, IncludeError, SQFLintError, SourceLocation
from sqflint.options import Options
from sqflint.preprocessor.directives import DirectiveParser, normalize_line, parse_directive
from sqflint.preprocessor.expander import MacroExpander
from sqflint.preprocessor.includes import Include, IncludeResolver
from sqflint.preprocessor.macros import MacroTable


logger = logging.getLogger(__name__)


@dataclass
class PreprocessorContext:
    """
    State shared across one top-level run and all of its includes.

    Attributes:
        macros: Every macro defined so far, in any file
        includes: Every include encountered, in depth-first discovery order
        options: Read-only configuration
        stack: Absolute paths of the files currently being processed,
               outermost first
    """
    macros: MacroTable = field(default_factory=MacroTable)
    includes: list[Include] = field(default_factory=list)
    options: Options = field(default_factory=Options)
    stack: list[str] = field(default_factory=list)


class Preprocessor:
    """
    Macro and include preprocessor for SQF source.

    Each call to ``process()`` starts from an empty macro table. After the
    call, ``context`` (and the ``macros``/``includes`` shortcuts) describe
    that run so the linter can inspect definitions and includes.

    Attributes:
        options: Include-path mapping and limits
        context: State of the most recent run (None before the first run)
    """

    def __init__(self, options: Optional[Options] = None):
        self.options = options or Options()
        self.context: Optional[PreprocessorContext] = None

    @property
    def macros(self) -> MacroTable:
        """Macro table of the most recent run."""
        if self.context is None:
            return MacroTable()
        return self.context.macros

    @property
    def includes(self) -> list[Include]:
        """Includes recorded by the most recent run."""
        if self.context is None:
            return []
        return self.context.includes

    def process(
        self,
        input: Union[str, TextIO],
        source: str = "<input>",
        include_filename: bool = False,
    ) -> str:
        """
        Preprocess source text.

        Args:
            input: Source text or a readable text stream
            source: Path of the source, used to resolve includes and to tag
                    macro definitions
            include_filename: Tag macros defined in this text with ``source``
                              (always on for included files)

        Returns:
            Expanded text with the same number of lines as the input

        Raises:
            SQFLintError: If expansion fails; the run is abandoned
        """
        if not isinstance(input, str):
            input = input.read()

        context = PreprocessorContext(options=self.options)
        self.context = context
        return self._run(input, source, include_filename, context)

    def process_file(self, path: Union[str, Path], include_filename: bool = False) -> str:
        """Read and preprocess a file."""
        path = Path(path)
        return self.process(
            path.read_text(encoding=self.options.encoding),
            str(path),
            include_filename,
        )

    def _run(
        self,
        text: str,
        source: str,
        include_filename: bool,
        context: PreprocessorContext,
    ) -> str:
        """Run the line loop over one file, sharing ``context``."""
        resolver = IncludeResolver(context.options)
        expander = MacroExpander(context.macros, context.options.max_expansions)

        def run_include(include: Include, location: SourceLocation) -> None:
            resolved = str(include.path.resolve())
            if resolved in context.stack:
                raise IncludeError(
                    include.requested,
                    "circular include detected",
                    location,
                    include_stack=context.stack + [resolved],
                )

            try:
                included = include.path.read_text(encoding=context.options.encoding)
            except (OSError, UnicodeDecodeError) as e:
                raise IncludeError(include.requested, str(e), location) from e

            self._run(included, str(include.path), True, context)

        directives = DirectiveParser(context, resolver, run_include)

        context.stack.append(str(Path(source).resolve()))

        lines = text.replace("\r", "").split("\n")

        for index, raw_line in enumerate(lines):
            line = normalize_line(raw_line)

            directive = parse_directive(line)
            if directive is not None:
                directives.handle(directive, source, index + 1, include_filename)
                lines[index] = ""
                continue

            location = SourceLocation(source, index + 1, 1)
            try:
                lines[index] = expander.expand(line, location)
            except SQFLintError:
                logger.exception(f"Failed to parse line {index + 1} of {source}")
                raise
            except Exception as e:
                logger.exception(f"Failed to parse line {index + 1} of {source}")
                raise ExpansionError(
                    f"unexpected error while expanding macros: {e}",
                    location,
                    source_line=line,
                ) from e

        context.stack.pop()
        return "\n".join(lines)


# =============================================================================
# Convenience Function
# =============================================================================

def preprocess(
    input: Union[str, TextIO],
    source: str = "<input>",
    options: Optional[Options] = None,
    include_filename: bool = False,
) -> str:
    """
    Preprocess SQF source code.

    Args:
        input: Source text or a readable text stream
        source: Source path for include resolution and macro tagging
        options: Include-path mapping (defaults to no mapping)
        include_filename: Tag macro definitions with ``source``

    Returns:
        Preprocessed source code
    """
    pp = Preprocessor(options)
    return pp.process(input, source, include_filename)
