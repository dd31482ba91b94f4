"""
sqfpp - SQF Preprocessor Command-Line Interface
===============================================

This module implements the command-line interface for the SQF
preprocessor. It runs macro expansion and include resolution on a script
and prints the expanded text, which keeps the input's line numbering.

Usage Examples
--------------
Basic preprocessing:
    $ sqfpp init.sqf

With an include-path prefix mapping:
    $ sqfpp -I '\\A3\\=/opt/a3/' init.sqf

With an options file:
    $ sqfpp -c sqflint.json init.sqf -o init.expanded.sqf

Inspect what was defined and included:
    $ sqfpp --list-macros --list-includes init.sqf

Include-path mappings are taken, lowest priority first, from the
SQFLINT_INCLUDE_PATHS environment variable, the options file and the -I
flags.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from sqflint import __version__
from sqflint.cli.errors import handle_cli_exception
from sqflint.errors import OptionsError
from sqflint.options import Options, parse_prefix_pairs
from sqflint.preprocessor import Preprocessor


def _parse_include_option(ctx, param, value) -> dict[str, str]:
    """Click callback turning repeated VIRTUAL=REAL values into a mapping."""
    try:
        return parse_prefix_pairs(value)
    except OptionsError as e:
        raise click.BadParameter(str(e)) from e


def build_options(
    config: Optional[Path],
    include: dict[str, str],
    max_expansions: Optional[int],
) -> Options:
    """Layer environment, options file and command-line settings."""
    options = Options.from_env()

    if config is not None:
        options = Options.from_file(config, base=options)

    if include:
        options = options.merged(Options.from_mapping(
            include,
            max_expansions=options.max_expansions,
            encoding=options.encoding,
        ))

    if max_expansions is not None:
        options.max_expansions = max_expansions

    return options


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write expanded text to this file (default: stdout)",
)
@click.option(
    "-I", "--include-path",
    "include",
    multiple=True,
    callback=_parse_include_option,
    help="Map a virtual include prefix to a real one, VIRTUAL=REAL (can be repeated)",
)
@click.option(
    "-c", "--config",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON options file with an includePaths mapping",
)
@click.option(
    "--max-expansions",
    type=click.IntRange(min=1),
    default=None,
    help="Macro substitutions allowed per line before reporting recursion",
)
@click.option(
    "--tag-filenames",
    is_flag=True,
    help="Tag macros defined in INPUT_FILE with its path (included files are always tagged)",
)
@click.option(
    "--list-macros",
    is_flag=True,
    help="List defined macros instead of printing the expanded text",
)
@click.option(
    "--list-includes",
    is_flag=True,
    help="List include references instead of printing the expanded text",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="sqfpp")
def main(
    input_file: Path,
    output: Optional[Path],
    include: dict[str, str],
    config: Optional[Path],
    max_expansions: Optional[int],
    tag_filenames: bool,
    list_macros: bool,
    list_includes: bool,
    verbose: bool,
) -> None:
    """
    Preprocess an SQF script.

    INPUT_FILE is the script (.sqf, .hpp, .ext) to preprocess.

    Directive lines are replaced by empty lines and macro invocations are
    expanded in place, so the output has exactly as many lines as the input.

    \b
    Examples:
        sqfpp init.sqf                       # Print expanded text
        sqfpp init.sqf -o out.sqf            # Write to a file
        sqfpp -I '\\A3\\=/opt/a3/' init.sqf    # Map an include prefix
        sqfpp --list-macros init.sqf         # Show macro definitions
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    try:
        options = build_options(config, include, max_expansions)

        if verbose:
            click.echo(f"Preprocessing {input_file}...", err=True)
            for virtual, real in options.include_paths.items():
                click.echo(f"Include path: {virtual} -> {real}", err=True)

        pp = Preprocessor(options)
        result = pp.process_file(input_file, include_filename=tag_filenames)

        if list_macros or list_includes:
            if list_macros:
                for macro in pp.macros:
                    params = ""
                    if macro.is_function_like:
                        params = f"({','.join(macro.parameters)})"
                    click.echo(
                        f"{macro.name}{params} = {macro.value!r} "
                        f"[{len(macro.definitions)} definition(s), "
                        f"first at {macro.source}:{macro.line}]"
                    )
            if list_includes:
                for inc in pp.includes:
                    marker = "" if inc.exists else " (missing)"
                    click.echo(f"{inc.source}: {inc.file} -> {inc.path}{marker}")
            return

        if output is not None:
            output.write_text(result, encoding=options.encoding)
            if verbose:
                click.echo(f"Wrote {len(result)} characters to {output}", err=True)
        else:
            click.echo(result)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
