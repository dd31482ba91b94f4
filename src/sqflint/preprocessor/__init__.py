"""
SQF Preprocessor
================

C-preprocessor-style macro definition, macro expansion and file inclusion
for SQF source, run before lexical analysis.

Pipeline
--------
    Source → split lines → normalize → directive? ──yes──> Directive Parser
                                          │                 (MacroTable / Include Resolver)
                                          no
                                          ↓
                                    Macro Expander → rejoin (same line count)

Usage
-----
>>> from sqflint.preprocessor import preprocess
>>> preprocess("#define MAX(a,b) ((a) > (b) ? (a) : (b))\\nMAX(1,2)")
'\\n((1) > (2) ? (1) : (2))'
"""

from sqflint.preprocessor.preprocessor import (
    Preprocessor,
    PreprocessorContext,
    preprocess,
)
from sqflint.preprocessor.macros import Macro, MacroDefinition, MacroTable
from sqflint.preprocessor.includes import Include, IncludeResolver
from sqflint.preprocessor.expander import MacroExpander, substitute_parameters
from sqflint.preprocessor.directives import (
    Directive,
    DefineDirective,
    DirectiveParser,
    normalize_line,
    parse_directive,
    parse_define,
    parse_include,
)

__all__ = [
    # Driver
    "Preprocessor",
    "PreprocessorContext",
    "preprocess",
    # Macro table
    "Macro",
    "MacroDefinition",
    "MacroTable",
    # Includes
    "Include",
    "IncludeResolver",
    # Expander
    "MacroExpander",
    "substitute_parameters",
    # Directives
    "Directive",
    "DefineDirective",
    "DirectiveParser",
    "normalize_line",
    "parse_directive",
    "parse_define",
    "parse_include",
]
