"""
Exception types raised by SOLVENT.

Every error raised while lexing, parsing, evaluating or solving derives from
ExpressionError, so callers can catch the whole family at once:

    try:
        Equation.parse("x ^ 2 = 4").solve("x")
    except ExpressionError as e:
        print(f"Error: {e}")
"""


class ExpressionError(Exception):
    """Base class for all expression engine errors."""


class LexError(ExpressionError, ValueError):
    """Unrecognised character or malformed numeric literal."""

    def __init__(self, message: str, column: int = -1):
        if column >= 0:
            message = f"{message} (column {column})"
        super().__init__(message)
        self.column = column


class ParseError(ExpressionError, ValueError):
    """Token stream does not form exactly one expression."""


class UnbalancedParenthesesError(LexError, ParseError):
    """A '(' without a matching ')' or the reverse."""


class UnresolvedVariableError(ExpressionError, LookupError):
    """
    A variable was evaluated without a bound value.

    The simplifier treats this as "cannot fold yet"; it never escapes a
    simplify call.
    """

    def __init__(self, variable):
        super().__init__(f"Variable '{variable}' has no bound value")
        self.variable = variable


class SolveError(ExpressionError):
    """An equation could not be solved for the requested unknown."""
