"""REPL (Read-Eval-Print Loop) for the L5 type checker.

Each input is checked as the next forms of one running program: a
successful define extends the environment for every later input, and an
expression prints its type. The whole session is a single checking run, so
it owns one type variable generator until ``:clear``.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import readline
import os

from rich.console import Console
from rich.text import Text

from .errors import Failure, ParseError, Result, is_failure
from .error_reporting import format_failure
from .parser import Parser
from .sexp import read_sexps
from .syntax import Exp, VarDecl
from .tenv import TEnv, apply_tenv, make_empty_tenv, tenv_names
from .texp import TVarGen, unparse_texp
from .typechecker import TypeChecker


@dataclass
class ReplState:
    """State of the REPL session."""
    gen: TVarGen
    checker: TypeChecker
    tenv: TEnv
    definitions: List[VarDecl]

    def __init__(self):
        self.gen = TVarGen()
        self.checker = TypeChecker(self.gen)
        self.tenv = make_empty_tenv()
        self.definitions = []

    def parse(self, source: str) -> List[Exp]:
        """Parse top-level forms; ``(L5 ...)`` is unwrapped."""
        parser = Parser(self.gen)
        forms = []
        for sexp in read_sexps(source):
            if Parser.is_tagged(sexp, "L5"):
                forms.extend(parser.parse_program(sexp).exps)
            else:
                forms.append(parser.parse_form(sexp))
        return forms

    def add_form(self, exp: Exp) -> Result:
        """Check one form; on success the session environment moves on."""
        result = self.checker.typeof_top_level(exp, self.tenv)
        if not is_failure(result):
            self.tenv, te = result.value
            if te is None:
                self.definitions.append(exp.var)
        return result

    def get_type(self, name: str) -> Optional[str]:
        """Get the type of a defined name."""
        result = apply_tenv(self.tenv, name)
        if isinstance(result, Failure):
            return None
        return unparse_texp(result.value)


class Repl:
    """The REPL interface."""

    PROMPT = "l5> "
    CONTINUATION = "... "

    def __init__(self, console: Optional[Console] = None):
        self.console = console if console is not None else Console(highlight=False, soft_wrap=True)
        self.state = ReplState()
        self.buffer: List[str] = []

        self._setup_readline()

    def _setup_readline(self):
        """Setup readline with history and completion."""
        histfile = os.path.expanduser("~/.l5_history")
        try:
            readline.read_history_file(histfile)
        except (FileNotFoundError, OSError):
            pass

        import atexit
        atexit.register(readline.write_history_file, histfile)

        readline.set_completer(self._completer)
        readline.parse_and_bind("tab: complete")

    def _completer(self, text: str, state: int) -> Optional[str]:
        """Tab completion for defined names and keywords."""
        names = tenv_names(self.state.tenv)
        names.extend(["define", "lambda", "let", "letrec", "if", "quote", "number", "boolean", "string"])
        matches = [name for name in names if name.startswith(text)]
        if state < len(matches):
            return matches[state]
        return None

    def run(self):
        """Run the REPL."""
        self.console.print(Text("L5 type checker REPL", style="bold"))
        self.console.print("Type :help for help, :quit to exit")
        self.console.print()

        while True:
            try:
                line = input(self.CONTINUATION if self.buffer else self.PROMPT)
            except EOFError:
                self.console.print("\nGoodbye!")
                break
            except KeyboardInterrupt:
                self.console.print("\nUse :quit to exit")
                self.buffer = []
                continue

            if not self.buffer and line.startswith(":"):
                if not self.handle_command(line):
                    break
                continue

            self.buffer.append(line)
            if self.process_input("\n".join(self.buffer)):
                self.buffer = []

    def handle_command(self, command: str) -> bool:
        """Handle REPL commands; returns False to leave the REPL."""
        parts = command.split()
        cmd = parts[0]

        if cmd in [":quit", ":q"]:
            self.console.print("Goodbye!")
            return False

        elif cmd in [":help", ":h"]:
            self.show_help()

        elif cmd in [":type", ":t"]:
            if len(parts) < 2:
                self.console.print("Usage: :type <name>")
            else:
                type_str = self.state.get_type(parts[1])
                if type_str:
                    self.console.print(Text(f"{parts[1]} : {type_str}"))
                else:
                    self.console.print(f"Unknown name: {parts[1]}")

        elif cmd in [":env", ":e"]:
            self.list_definitions()

        elif cmd in [":clear", ":c"]:
            self.state = ReplState()
            self.console.print("State cleared")

        elif cmd == ":load":
            if len(parts) < 2:
                self.console.print("Usage: :load <filename>")
            else:
                self.load_file(parts[1])

        else:
            self.console.print(f"Unknown command: {cmd}")
            self.console.print("Type :help for help")

        return True

    def show_help(self):
        """Show help message."""
        help_text = """
L5 REPL Commands:

  :help, :h           Show this help message
  :quit, :q           Exit the REPL
  :type, :t <name>    Show the type of a defined name
  :env, :e            List all definitions
  :clear, :c          Forget all definitions
  :load <file>        Check the forms of a file

Forms:

  5  #t  "hi"                           Literals
  (lambda ((x : number)) : number x)    Procedure
  (let (((x : number) 1)) x)            Let
  (letrec (((f : (number -> number))
            (lambda ((n : number)) : number (f n)))) f)
  (define (x : number) 5)               Definition for later inputs
  '(1 . #t)                             Quoted data

Types:

  number  boolean  string  void  literal
  (number * number -> boolean)          Procedure type
  (Empty -> void)                       No arguments
  (Pair number string)                  Pair type
"""
        self.console.print(help_text, markup=False)

    def list_definitions(self):
        """List all definitions in the current session."""
        if not self.state.definitions:
            self.console.print("No definitions")
            return

        self.console.print("Definitions:")
        for decl in self.state.definitions:
            self.console.print(Text(f"  {decl.var} : {unparse_texp(decl.texp)}"))

    def load_file(self, filename: str):
        """Check every form of a file in the current session."""
        try:
            with open(filename, 'r') as f:
                content = f.read()
        except OSError as e:
            self.console.print(Text(f"Cannot read {filename}: {e.strerror}", style="red"))
            return

        if not self.process_input(content):
            self.console.print(Text(f"Parse error: Unexpected end of input in {filename}", style="red"))
            return
        self.console.print(f"Loaded {filename}")

    def process_input(self, source: str) -> bool:
        """Check the forms in ``source``.

        Returns False when the source is an incomplete datum and more lines
        are needed.
        """
        if not source.strip():
            return True

        try:
            forms = self.state.parse(source)
        except ParseError as e:
            if e.incomplete:
                return False
            self.console.print(Text(f"Parse error: {e}", style="red"))
            return True

        for form in forms:
            result = self.state.add_form(form)
            if isinstance(result, Failure):
                self.console.print(format_failure(result))
                break
            _, te = result.value
            if te is not None:
                self.console.print(Text(unparse_texp(te), style="cyan"))
            else:
                self.console.print(Text(f"Defined: {form.var.var}", style="green"))
        return True


def main():
    """Entry point for the REPL."""
    repl = Repl()
    repl.run()


if __name__ == "__main__":
    main()
