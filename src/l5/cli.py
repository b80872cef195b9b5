"""Command-line interface for the L5 type checker."""

import click
import sys
from typing import Optional

from rich.console import Console
from rich.text import Text

# Version information
__version__ = "0.1.0"


@click.command()
@click.argument('filename', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--expression', '-e', help='Type check a single expression instead of a program file')
@click.option('--verbose', '-v', is_flag=True, help='Show the type derivation trace')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--version', is_flag=True, help='Show version information')
def main(filename: Optional[str] = None,
         expression: Optional[str] = None,
         verbose: bool = False,
         no_color: bool = False,
         version: bool = False) -> None:
    """l5 - type checker for the fully annotated L5 language.

    If FILENAME is provided, type check the program (L5 <form> ...) it
    contains. With -e, type check a single expression. Otherwise, start an
    interactive REPL.

    Examples:

      l5 program.l5                       # Type of a program

      l5 -e "(if #t 1 2)"                 # Type of an expression

      l5 -v program.l5                    # Show derivation trace
    """
    console = Console(no_color=no_color, highlight=False, soft_wrap=True)
    err_console = Console(stderr=True, no_color=no_color, highlight=False, soft_wrap=True)

    if version:
        console.print(f"l5 version {__version__}")
        sys.exit(0)

    if filename is None and expression is None:
        from l5.repl import Repl
        repl = Repl(console)
        try:
            repl.run()
        except KeyboardInterrupt:
            console.print("\nGoodbye!")
        return

    from l5.errors import Failure
    from l5.error_reporting import clear_trace, disable_trace, enable_trace, format_failure, get_trace
    from l5.typechecker import l5_program_typeof, l5_typeof

    if verbose:
        enable_trace()
    try:
        if expression is not None:
            result = l5_typeof(expression)
        else:
            with open(filename, 'r') as f:
                source = f.read()
            result = l5_program_typeof(source)

        if isinstance(result, Failure):
            err_console.print(format_failure(result))
            sys.exit(1)

        console.print(Text(result.value, style="cyan"))
        if verbose:
            console.print(get_trace().format())
    except OSError as e:
        err_console.print(Text(f"Error: cannot read '{filename}': {e.strerror}", style="red"))
        sys.exit(1)
    finally:
        disable_trace()
        clear_trace()


if __name__ == "__main__":
    main()
