"""
SOLVENT - Simplify, evaluate and sOLVe infix expressions

An algebraic expression engine: infix text is lexed, reordered into postfix
form and built into an expression tree, which can be evaluated, simplified
by constant folding, and used in equations solved for a single unknown.

Quick Start:
    from solvent import parse, Equation

    parse("2 + 4 * 3").evaluate()                  # => 14.0
    parse("(x + y) * 3").evaluate({"x": 2, "y": 3})  # => 15.0

    e = parse("(2 * 3) + x")
    e.simplify()
    str(e)                                         # => "6 + x"

    Equation(parse("x - 2"), parse("3")).solve("x")  # => 5.0
    Equation.parse("a / x = 4").solve("x", {"a": 2})  # => 0.5

Syntax:
    Numbers       2, 3.5
    Variables     runs of letters: x, rate
    Operators     + - * / ^ (all group left to right)
    Parentheses   ( )
    Separate tokens with spaces. There is no unary minus.

Solving:
    The unknown must occur exactly once. Operators on its path are undone
    one at a time (+ with -, * with /); ^ cannot be undone.
"""

__version__ = "0.1.0"
__author__ = "spinoza"

from .errors import (
    ExpressionError,
    LexError,
    ParseError,
    UnbalancedParenthesesError,
    UnresolvedVariableError,
    SolveError,
)

from .tokens import (
    Token,
    TokenKind,
    Precedence,
    Variable,
    BindingsType,
    normalize_bindings,
    format_number,
)

from .tree import Tree

from .operators import (
    Operator,
    OPERATORS,
    ADD,
    SUBTRACT,
    MULTIPLY,
    DIVIDE,
    POWER,
    get_operator,
)

from .lexer import tokenize, to_postfix, lex
from .expression import Expression
from .parser import build_tree, parse

from .evaluator import (
    evaluate,
    simplify,
    fold_node,
    try_fold,
    Folded,
    UNRESOLVED,
)

from .equation import Equation
from .trace import SolveStep, SolveTrace

# Public API
__all__ = [
    # Version
    "__version__",
    # Errors
    "ExpressionError",
    "LexError",
    "ParseError",
    "UnbalancedParenthesesError",
    "UnresolvedVariableError",
    "SolveError",
    # Tokens
    "Token",
    "TokenKind",
    "Precedence",
    "Variable",
    "BindingsType",
    "normalize_bindings",
    "format_number",
    # Tree
    "Tree",
    # Operators
    "Operator",
    "OPERATORS",
    "ADD",
    "SUBTRACT",
    "MULTIPLY",
    "DIVIDE",
    "POWER",
    "get_operator",
    # Lexing and parsing
    "tokenize",
    "to_postfix",
    "lex",
    "build_tree",
    "parse",
    # Evaluation
    "Expression",
    "evaluate",
    "simplify",
    "fold_node",
    "try_fold",
    "Folded",
    "UNRESOLVED",
    # Equations
    "Equation",
    "SolveStep",
    "SolveTrace",
]
