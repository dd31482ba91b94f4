"""
SQFLint Command-Line Interface
==============================

This package provides command-line tools for the SQFLint front-end:

- **sqfpp**: SQF preprocessor (macro expansion and includes)

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["sqfpp"]
