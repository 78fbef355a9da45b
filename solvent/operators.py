"""
Operator registry for SOLVENT.

The operator set is closed: + - * / ^. Each Operator knows its symbol,
precedence, arity, how to evaluate itself over floats and which operator
undoes it. The inverse pairing (+ <-> -, * <-> /) is resolved once when the
registry is built; ^ has no inverse.

Evaluation is total over floats. Division by zero and overflow follow IEEE
semantics (inf/nan) instead of raising, and ^ with a negative base and a
fractional exponent gives nan rather than a complex number.
"""

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .tokens import Precedence

# Handler: receives the list of float operands, returns a float
EvalHandler = Callable[[Sequence[float]], float]


# ============================================================
# Handler Builders
# ============================================================

def binary_only(f: Callable[[float, float], float]) -> EvalHandler:
    """Create a binary handler; operand count is checked by Operator.evaluate."""
    def handler(args: Sequence[float]) -> float:
        return float(f(args[0], args[1]))
    return handler


def total_div(a: float, b: float) -> float:
    """IEEE division: x/0 is +-inf, 0/0 is nan."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def total_pow(a: float, b: float) -> float:
    """Power that never raises: domain errors give nan, overflow gives inf."""
    try:
        return math.pow(a, b)
    except ValueError:
        if a == 0 and b < 0:
            # Odd integer exponents keep the sign of zero: (-0.0) ^ -1 is -inf
            if float(b).is_integer() and int(b) % 2 == 1:
                return math.copysign(math.inf, a)
            return math.inf
        return math.nan
    except OverflowError:
        if a < 0 and float(b).is_integer() and int(b) % 2 == 1:
            return -math.inf
        return math.inf


# ============================================================
# Operator
# ============================================================

class Operator:
    """
    A named operator with its evaluation rule and inverse.

    Attributes:
        symbol: Source text of the operator, e.g. "+"
        name: Readable name, e.g. "add"
        precedence: Precedence class used by the shunting-yard pass
        arity: Number of operands
        commutative: Whether operand order is irrelevant
        inverse: Operator that undoes this one, or None
    """

    def __init__(self, symbol: str, name: str, precedence: int,
                 handler: EvalHandler, arity: int = 2, commutative: bool = False):
        self.symbol = symbol
        self.name = name
        self.precedence = precedence
        self.handler = handler
        self.arity = arity
        self.commutative = commutative
        self.inverse: Optional['Operator'] = None

    def evaluate(self, operands: Sequence[float]) -> float:
        """
        Apply the operator to its operands.

        Raises:
            ValueError: If the number of operands does not match the arity
        """
        if len(operands) != self.arity:
            raise ValueError(
                f"Operator '{self.symbol}' takes {self.arity} operands, got {len(operands)}")
        return self.handler(operands)

    def __call__(self, *operands: float) -> float:
        return self.evaluate(operands)

    @property
    def invertible(self) -> bool:
        return self.inverse is not None

    def undo(self, position: int) -> Tuple['Operator', int]:
        """
        How to move this operator to the other side of an equation.

        Given that the unknown is the operand at `position`, return the
        operator to apply to the other side and the position the other side
        takes among that operator's operands. The remaining operands of this
        node fill the other positions in their original order.

            x + a = r  ->  x = r - a    (inverse, other side first)
            a - x = r  ->  x = a - r    (same operator, other side second)
            a / x = r  ->  x = a / r

        Raises:
            ValueError: If the operator has no inverse
        """
        if self.inverse is None:
            raise ValueError(f"Operator '{self.symbol}' has no inverse")
        if position == 0 or self.commutative:
            return self.inverse, 0
        return self, position

    def __repr__(self) -> str:
        return f"Operator({self.symbol!r})"

    def __str__(self) -> str:
        return self.symbol


def _pair(a: Operator, b: Operator) -> None:
    a.inverse = b
    b.inverse = a


# ============================================================
# Registry
# ============================================================

ADD = Operator("+", "add", Precedence.ADDITIVE,
               binary_only(lambda a, b: a + b), commutative=True)
SUBTRACT = Operator("-", "subtract", Precedence.ADDITIVE,
                    binary_only(lambda a, b: a - b))
MULTIPLY = Operator("*", "multiply", Precedence.MULTIPLICATIVE,
                    binary_only(lambda a, b: a * b), commutative=True)
DIVIDE = Operator("/", "divide", Precedence.MULTIPLICATIVE,
                  binary_only(total_div))
POWER = Operator("^", "power", Precedence.POWER,
                 binary_only(total_pow))

_pair(ADD, SUBTRACT)
_pair(MULTIPLY, DIVIDE)

OPERATORS: Dict[str, Operator] = {
    op.symbol: op for op in (ADD, SUBTRACT, MULTIPLY, DIVIDE, POWER)
}


def get_operator(symbol: str) -> Operator:
    """
    Look up an operator by symbol.

    Raises:
        KeyError: If the symbol is not a known operator
    """
    return OPERATORS[symbol]


def operator_symbols() -> List[str]:
    return list(OPERATORS)
