"""
Token model for SOLVENT.

A Token is one classified lexical unit: a numeric literal, a variable
reference, an operator or a parenthesis. Tokens carry the metadata the
shunting-yard pass and the parser need (precedence and arity).

Variables are identified by name only. They hold no value of their own;
values come from a bindings mapping passed to evaluate/simplify/solve:

    bindings = {"x": 2.0, Variable("y"): 3.0}
"""

from typing import Any, Dict, Mapping, Optional, Union


# ============================================================
# Token kinds and precedence classes
# ============================================================

class TokenKind:
    """Kinds of lexical token."""

    LITERAL = "literal"
    OPERATOR = "operator"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    FUNCTION = "function"
    VARIABLE = "variable"


class Precedence:
    """
    Operator precedence classes, in increasing binding strength.

    NONE is used for operands and parentheses so that an open paren on the
    operator stack is never popped by an incoming operator.
    """

    NONE = 0
    ADDITIVE = 1
    MULTIPLICATIVE = 2
    POWER = 3
    BRACKET = 4


# ============================================================
# Variables and bindings
# ============================================================

class Variable:
    """
    A named unknown. Two variables with the same name are the same variable.

    Examples:
        Variable("x") == Variable("x")   # => True
        Variable("x") == "x"             # => True
        {Variable("x"): 1.0}["x"]        # works, hash is the name's hash
    """

    __slots__ = ('name',)

    def __init__(self, name: str):
        if isinstance(name, Variable):
            name = name.name
        if not isinstance(name, str) or not name:
            raise TypeError("Variable name must be a non-empty string")
        self.name = name

    def __eq__(self, other):
        if isinstance(other, Variable):
            return self.name == other.name
        if isinstance(other, str):
            return self.name == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Variable({self.name!r})"

    def __str__(self) -> str:
        return self.name


BindingsType = Optional[Mapping[Union[Variable, str], float]]


def as_variable(var: Union[Variable, str]) -> Variable:
    """Coerce a name or Variable to a Variable."""
    return var if isinstance(var, Variable) else Variable(var)


def normalize_bindings(bindings: BindingsType) -> Dict[Variable, float]:
    """
    Convert a user supplied bindings mapping to Dict[Variable, float].

    Keys may be Variable instances or plain names. None gives an empty dict.
    """
    if not bindings:
        return {}
    return {as_variable(k): float(v) for k, v in bindings.items()}


# ============================================================
# Token
# ============================================================

class Token:
    """
    One lexical unit of an expression.

    Attributes:
        kind: One of the TokenKind constants
        payload: float for literals, Variable for variables,
                 Operator for operators/functions, None for parens
        precedence: One of the Precedence constants
        arity: Number of operands (2 for operators, 0 otherwise)
    """

    __slots__ = ('kind', 'payload', 'precedence', 'arity')

    def __init__(self, kind: str, payload: Any = None, precedence: int = Precedence.NONE):
        self.kind = kind
        self.payload = payload
        self.precedence = precedence
        self.arity = getattr(payload, "arity", 2) if precedence != Precedence.NONE else 0

    @classmethod
    def literal(cls, value: float) -> 'Token':
        return cls(TokenKind.LITERAL, float(value))

    @classmethod
    def variable(cls, var: Union[Variable, str]) -> 'Token':
        return cls(TokenKind.VARIABLE, as_variable(var))

    @classmethod
    def operator(cls, op, kind: str = TokenKind.OPERATOR) -> 'Token':
        return cls(kind, op, op.precedence)

    @classmethod
    def function(cls, op) -> 'Token':
        """An operator introduced by the solver rather than read from text."""
        return cls(TokenKind.FUNCTION, op, Precedence.BRACKET)

    @property
    def is_operator(self) -> bool:
        """True for operator and function tokens."""
        return self.precedence != Precedence.NONE

    @property
    def is_literal(self) -> bool:
        return self.kind == TokenKind.LITERAL

    @property
    def is_variable(self) -> bool:
        return self.kind == TokenKind.VARIABLE

    def fold(self, value: float) -> None:
        """Rewrite this token in place into a literal holding value."""
        self.kind = TokenKind.LITERAL
        self.payload = float(value)
        self.precedence = Precedence.NONE
        self.arity = 0

    def copy(self) -> 'Token':
        token = Token(self.kind, self.payload, self.precedence)
        token.arity = self.arity
        return token

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind == other.kind and self.payload == other.payload
                and self.precedence == other.precedence)

    # Tokens are rewritten in place by the simplifier
    __hash__ = None

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.payload!r})"

    def __str__(self) -> str:
        if self.kind == TokenKind.LITERAL:
            return format_number(self.payload)
        if self.kind in (TokenKind.OPEN_PAREN, TokenKind.CLOSE_PAREN):
            return self.kind
        return str(self.payload)


def format_number(value: float, precision: Optional[int] = None) -> str:
    """
    Format a float compactly: integral values without a trailing ".0".

    Examples:
        format_number(3.0) -> "3"
        format_number(0.5) -> "0.5"
        format_number(1/3, precision=4) -> "0.3333"
    """
    if precision is not None:
        text = f"{value:.{precision}g}"
    else:
        text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text
