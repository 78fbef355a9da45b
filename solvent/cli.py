#!/usr/bin/env python3
"""
SOLVENT Command-Line Interface

Provides interactive REPL, script execution, and pipe/filter modes.

Usage:
    solvent                            # Start REPL
    solvent script.solv                # Run script
    solvent -e "2 + 4 * 3"             # Evaluate expression
    solvent -e "x - 2 = 3"             # Solve for the only unknown
    solvent -b y=3 -e "x * y = 12"     # Solve with bound variables
    echo "(2 + 3) * 3" | solvent       # Filter mode

Input lines:
    EXPR               Simplify EXPR; prints a number when fully bound
    LHS = RHS          Solve for the one unbound variable

REPL Commands:
    :help              Show help
    :let NAME VALUE    Bind a variable
    :unset NAME        Remove a binding
    :vars              List bindings
    :clear             Remove all bindings
    :solve NAME EQ     Solve EQ for NAME
    :trace on|off      Toggle solve tracing
    :postfix EXPR      Show postfix tokens of EXPR
    :tree EXPR         Show the tree of EXPR as an s-expression
    :precision N       Significant digits for results
    :quit              Exit
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from . import config
from .equation import Equation
from .errors import ExpressionError, UnresolvedVariableError
from .lexer import IDENTIFIER_RE
from .operators import operator_symbols
from .parser import parse
from .tokens import Variable, format_number

logger = logging.getLogger(__name__)
# Console for stderr (log records)
err_console = Console(stderr=True)

# Try to import readline for better REPL experience
try:
    import readline
    HAS_READLINE = True
except ImportError:
    HAS_READLINE = False


class SolventCompleter:
    """Tab completer for SOLVENT REPL."""

    COMMANDS = [
        ":help", ":quit", ":exit", ":q",
        ":let", ":unset", ":vars", ":clear",
        ":solve", ":trace", ":postfix", ":tree", ":precision",
    ]

    TRACE_OPTIONS = ["on", "off"]

    def __init__(self, repl: 'SolventREPL'):
        self.repl = repl
        self.matches: List[str] = []

    def complete(self, text: str, state: int) -> Optional[str]:
        """Return the next possible completion for 'text'."""
        if state == 0:
            line = readline.get_line_buffer() if HAS_READLINE else ""
            self.matches = self._get_matches(text, line)

        try:
            return self.matches[state]
        except IndexError:
            return None

    def _get_matches(self, text: str, line: str) -> List[str]:
        line = line.lstrip()

        if line.startswith(":trace "):
            return [t for t in self.TRACE_OPTIONS if t.startswith(text)]

        if text.startswith(":") or (line.startswith(":") and " " not in line):
            return [c for c in self.COMMANDS if c.startswith(text)]

        # Anything else: complete bound variable names
        names = sorted(v.name for v in self.repl.bindings)
        return [n for n in names if n.startswith(text)]


class SolventREPL:
    """Interactive REPL for solvent."""

    def __init__(self, precision: Optional[int] = None, history: bool = True):
        self.bindings: Dict[Variable, float] = {}
        self.trace = False
        self.precision = precision if precision is not None else config.OUTPUT_PRECISION
        self.running = True
        self.history_file: Optional[Path] = None

        if HAS_READLINE and history:
            self.history_file = config.HISTORY_FILE
            try:
                readline.read_history_file(self.history_file)
            except (FileNotFoundError, PermissionError):
                pass
            readline.set_history_length(config.HISTORY_LENGTH)

            self.completer = SolventCompleter(self)
            readline.set_completer(self.completer.complete)
            readline.parse_and_bind("tab: complete")
            readline.set_completer_delims(" \t\n()=" + "".join(operator_symbols()))

    def save_history(self):
        """Save readline history."""
        if HAS_READLINE and self.history_file is not None:
            try:
                readline.write_history_file(self.history_file)
            except OSError as e:
                logger.debug("Could not save history to %s: %s", self.history_file, e)

    def fmt(self, value: float) -> str:
        return format_number(value, self.precision)

    def bind(self, name: str, value: str) -> str:
        """Bind a variable to a numeric value given as text."""
        if not IDENTIFIER_RE.fullmatch(name):
            return f"Error: invalid variable name '{name}'"
        try:
            number = float(value)
        except ValueError:
            try:
                number = parse(value).evaluate(self.bindings)
            except ExpressionError as e:
                return f"Error: {e}"
        self.bindings[Variable(name)] = number
        return f"{name} = {self.fmt(number)}"

    def handle_command(self, line: str) -> Optional[str]:
        """
        Handle a REPL command (starts with :).

        Returns a message to print, or None.
        """
        parts = line[1:].split(None, 1)
        if not parts:
            return "Unknown command. Type :help for help."

        cmd = parts[0].lower()
        arg = parts[1].strip() if len(parts) > 1 else ""

        if cmd == "help":
            return self.help_text()

        elif cmd == "quit" or cmd == "exit" or cmd == "q":
            self.running = False
            return None

        elif cmd == "let":
            fields = arg.split(None, 1)
            if len(fields) != 2:
                return "Usage: :let NAME VALUE"
            return self.bind(fields[0], fields[1])

        elif cmd == "unset":
            if not arg:
                return "Usage: :unset NAME"
            if self.bindings.pop(Variable(arg), None) is None:
                return f"Unknown variable: {arg}"
            return f"Unset {arg}"

        elif cmd == "vars":
            if not self.bindings:
                return "No variables bound"
            return "\n".join(f"{var} = {self.fmt(value)}"
                             for var, value in sorted(self.bindings.items(),
                                                      key=lambda kv: kv[0].name))

        elif cmd == "clear":
            self.bindings.clear()
            return "Cleared all variables"

        elif cmd == "solve":
            fields = arg.split(None, 1)
            if len(fields) != 2:
                return "Usage: :solve NAME EQUATION"
            return self.solve(fields[1], fields[0])

        elif cmd == "trace":
            if arg.lower() in ("on", "true", "1"):
                self.trace = True
                return "Tracing enabled"
            elif arg.lower() in ("off", "false", "0"):
                self.trace = False
                return "Tracing disabled"
            else:
                self.trace = not self.trace
                return f"Tracing {'enabled' if self.trace else 'disabled'}"

        elif cmd == "postfix":
            if not arg:
                return "Usage: :postfix EXPR"
            try:
                return parse(arg).postfix()
            except ExpressionError as e:
                return f"Error: {e}"

        elif cmd == "tree":
            if not arg:
                return "Usage: :tree EXPR"
            try:
                return parse(arg).to_sexpr()
            except ExpressionError as e:
                return f"Error: {e}"

        elif cmd == "precision":
            if not arg:
                return "Usage: :precision N"
            try:
                precision = config.parse_precision(arg)
            except ValueError as e:
                return f"Error: {e}"
            self.precision = precision
            return f"Precision set to: {precision}"

        else:
            return f"Unknown command: {cmd}. Type :help for help."

    def help_text(self) -> str:
        """Return help text."""
        return """SOLVENT REPL Commands:
  :help              Show this help
  :let NAME VALUE    Bind a variable (VALUE may be an expression)
  :unset NAME        Remove a binding
  :vars              List bound variables
  :clear             Remove all bindings
  :solve NAME EQ     Solve equation EQ for NAME
  :trace on|off      Toggle solve tracing
  :postfix EXPR      Show the postfix tokens of EXPR
  :tree EXPR         Show the tree of EXPR as an s-expression
  :precision N       Significant digits for results
  :quit              Exit

Syntax:
  2 + 4 * 3          Evaluate an expression
  (a + b) * x        Simplify with the current bindings
  x * 3 - 2 = 7      Solve for the single unbound variable
  Separate tokens with spaces; there is no unary minus.
"""

    def solve(self, text: str, target: Optional[str] = None) -> str:
        """Solve an equation, for `target` or for its only unknown."""
        try:
            equation = Equation.parse(text)
            if target is None:
                unknowns = equation.unknowns(self.bindings)
                if len(unknowns) != 1:
                    names = ", ".join(str(v) for v in unknowns) or "none"
                    return (f"Error: equation has {len(unknowns)} unknowns ({names}); "
                            f"use :solve NAME EQUATION")
                target = unknowns[0].name
            value, solve_trace = equation.solve(target, self.bindings, trace=True)
        except ExpressionError as e:
            return f"Error: {e}"

        output = f"{target} = {self.fmt(value)}"
        if self.trace and solve_trace:
            return f"{output}\n{solve_trace.format('chain')}"
        return output

    def evaluate(self, text: str) -> str:
        """Evaluate or simplify an expression."""
        try:
            expr = parse(text)
            try:
                return self.fmt(expr.evaluate(self.bindings))
            except UnresolvedVariableError:
                return expr.simplify(self.bindings).to_infix(self.precision)
        except ExpressionError as e:
            return f"Error: {e}"

    def process_line(self, line: str) -> Optional[str]:
        """
        Process a single line of input.

        Returns the result to print, or None.
        """
        line = line.strip()

        # Empty line or comment
        if not line or line.startswith("#"):
            return None

        if line.startswith(":"):
            return self.handle_command(line)

        if "=" in line:
            return self.solve(line)

        return self.evaluate(line)

    def run(self):
        """Run the REPL loop."""
        print(f"SOLVENT {config.VERSION} - expressions and single-unknown equations")
        print("Type :help for help, :quit to exit")
        print()

        while self.running:
            try:
                line = input("solvent> ")
                result = self.process_line(line)
                if result:
                    print(result)

            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print()
                continue

        self.save_history()


def _is_error(result: Optional[str]) -> bool:
    return result is not None and (result.startswith("Error") or result.startswith("Unknown"))


class ScriptRunner:
    """Runs solvent scripts."""

    def __init__(self, precision: Optional[int] = None):
        self.repl = SolventREPL(precision=precision, history=False)

    def run_script(self, path: Path, quiet: bool = False) -> int:
        """
        Run a script file.

        Args:
            path: Path to the script
            quiet: If True, don't print results

        Returns:
            Exit code (0 for success)
        """
        try:
            lines = path.read_text().splitlines()
        except OSError as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            return 1

        for lineno, line in enumerate(lines, 1):
            result = self.repl.process_line(line)
            if _is_error(result):
                print(f"{path}:{lineno}: {result}", file=sys.stderr)
                return 1
            # Command confirmations are not echoed in script mode
            if result and not quiet and not line.strip().startswith(":"):
                print(result)
            if not self.repl.running:
                break

        return 0

    def run_expression(self, text: str) -> int:
        """
        Evaluate a single line.

        Returns:
            Exit code (0 for success)
        """
        result = self.repl.process_line(text)
        if result:
            print(result)
            if _is_error(result):
                return 1
        return 0

    def run_stdin(self) -> int:
        """
        Read lines from stdin and evaluate them.

        Returns:
            Exit code (0 for success)
        """
        for line in sys.stdin:
            result = self.repl.process_line(line)
            if result:
                print(result)
                if _is_error(result):
                    return 1

        return 0


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich; DEBUG when verbose."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _precision_arg(text: str) -> int:
    try:
        return config.parse_precision(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="solvent",
        description="SOLVENT - infix expressions and single-unknown equations",
        epilog="Examples:\n"
               "  solvent                          Start REPL\n"
               "  solvent script.solv              Run script\n"
               "  solvent -e '2 + 4 * 3'           Evaluate expression\n"
               "  solvent -e 'x - 2 = 3'           Solve equation\n"
               "  solvent -b y=2 -e 'x * y = 8'    Solve with a bound variable\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "script",
        nargs="?",
        help="Script file to run"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Evaluate a single expression or equation"
    )

    parser.add_argument(
        "-b", "--bind",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Bind a variable (can be specified multiple times)"
    )

    parser.add_argument(
        "-t", "--trace",
        action="store_true",
        help="Show the steps taken when solving"
    )

    parser.add_argument(
        "-p", "--precision",
        type=_precision_arg,
        default=None,
        help=f"Significant digits for results (default {config.OUTPUT_PRECISION})"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Quiet mode (suppress script output)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {config.VERSION}"
    )

    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    runner = ScriptRunner(precision=args.precision)
    runner.repl.trace = args.trace

    for binding in args.bind:
        name, sep, value = binding.partition("=")
        if not sep:
            print(f"Invalid binding '{binding}': expected NAME=VALUE", file=sys.stderr)
            sys.exit(2)
        result = runner.repl.bind(name.strip(), value.strip())
        if _is_error(result):
            print(f"Invalid binding '{binding}': {result}", file=sys.stderr)
            sys.exit(2)

    if args.script:
        sys.exit(runner.run_script(Path(args.script), quiet=args.quiet))

    elif args.expr:
        sys.exit(runner.run_expression(args.expr))

    elif not sys.stdin.isatty():
        # Pipe/filter mode (stdin is not a terminal)
        sys.exit(runner.run_stdin())

    else:
        repl = SolventREPL(precision=args.precision)
        repl.bindings = runner.repl.bindings
        repl.trace = args.trace
        repl.run()


if __name__ == "__main__":
    main()
