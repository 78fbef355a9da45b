"""
Expression: an expression tree plus the postfix tokens it was built from.

    from solvent import Expression

    e = Expression.parse("(x / (y * 3) - (x + 14)) * z")
    e.evaluate({"x": 2, "y": 3, "z": 43})   # => -678.444...
    str(e)                                   # => "(x / (y * 3) - (x + 14)) * z"
    str(e.simplify({"y": 3}))                # => "(x / 9 - (x + 14)) * z"
"""

from typing import Dict, List, Optional, Union

from .evaluator import evaluate, simplify
from .operators import Operator
from .tokens import (
    BindingsType, Precedence, Token, Variable, format_number,
)
from .tree import Tree

OperandType = Union[Tree, Token, Variable, str, int, float]

# Formatting precedence for leaves: never parenthesised
_ATOM = Precedence.BRACKET + 1


def as_operand(value: OperandType) -> Tree:
    """
    Coerce an operand to an expression tree.

    Trees are used as-is, Tokens become leaves, numbers become literals and
    names or Variables become variable leaves.
    """
    if isinstance(value, Tree):
        return value
    if isinstance(value, Token):
        return Tree(value)
    if isinstance(value, bool):
        raise TypeError("Booleans are not valid operands")
    if isinstance(value, (int, float)):
        return Tree(Token.literal(value))
    if isinstance(value, (Variable, str)):
        return Tree(Token.variable(value))
    raise TypeError(f"Cannot use {type(value).__name__} as an operand")


class Expression:
    """
    A parsed infix expression.

    Attributes:
        tree: The expression tree (mutated by simplify and by Equation.solve)
        tokens: The postfix tokens produced by lexing the source text
    """

    def __init__(self, tree: Tree, tokens: Optional[List[Token]] = None):
        if tree is None:
            raise ValueError("Expression tree not formed")
        self.tree = tree
        self.tokens = list(tokens) if tokens is not None else []

    @classmethod
    def parse(cls, text: str) -> 'Expression':
        """Parse infix text. See solvent.parser.parse."""
        from .parser import parse
        return parse(text)

    def evaluate(self, bindings: BindingsType = None) -> float:
        """
        Evaluate the expression.

        Args:
            bindings: Optional mapping of variables (or names) to values

        Raises:
            UnresolvedVariableError: If a variable has no value
        """
        return evaluate(self.tree, bindings)

    def simplify(self, bindings: BindingsType = None) -> 'Expression':
        """Fold every subtree that can be evaluated, in place. Returns self."""
        simplify(self.tree, bindings)
        return self

    def add_operation(self, operation: Union[Operator, Token], position: int,
                      *operands: OperandType) -> 'Expression':
        """
        Wrap the current tree as one operand of a new operator node.

        The current tree takes slot `position`; `operands` fill the remaining
        slots in order.

            e = Expression.parse("3")
            e.add_operation(ADD, 0, 2)     # e is now 3 + 2
            e.add_operation(DIVIDE, 1, 9)  # e is now 9 / (3 + 2)

        Raises:
            ValueError: If position is out of range or the operand count
                does not match the operator's arity
        """
        if isinstance(operation, Token):
            token = operation
        elif isinstance(operation, Operator):
            token = Token.function(operation)
        else:
            raise TypeError("operation must be an Operator or an operator Token")

        if not token.is_operator:
            raise ValueError("Token must be an operator or a function")
        if not 0 <= position < token.arity:
            raise ValueError(
                f"Position must be between 0 and {token.arity - 1}, got {position}")
        if len(operands) + 1 != token.arity:
            raise ValueError(
                f"The total number of operands must equal {token.arity}")

        rest = iter(as_operand(op) for op in operands)
        children = [self.tree if i == position else next(rest)
                    for i in range(token.arity)]
        self.tree = Tree(token, children)
        return self

    def variables(self) -> Dict[Variable, int]:
        """Number of occurrences of each variable in the tree."""
        counts: Dict[Variable, int] = {}
        for node in self.tree.walk():
            if node.payload.is_variable:
                var = node.payload.payload
                counts[var] = counts.get(var, 0) + 1
        return counts

    def is_constant(self) -> bool:
        """True if the expression contains no variables."""
        return not self.variables()

    def copy(self) -> 'Expression':
        return Expression(self.tree.copy(), [t.copy() for t in self.tokens])

    def to_infix(self, precision: Optional[int] = None) -> str:
        """
        Format as infix text.

        Parentheses are added only where precedence or left-to-right
        grouping requires them. Text produced for a freshly parsed
        expression parses back to the same tree; folded literals may be
        negative or use exponent notation, which the lexer does not accept.

        Args:
            precision: Optional number of significant digits for literals
        """
        parts: List[tuple] = []

        for node in self.tree.walk_postorder():
            token = node.payload
            if not token.is_operator:
                if token.is_literal:
                    parts.append((format_number(token.payload, precision), _ATOM))
                else:
                    parts.append((str(token), _ATOM))
                continue

            op = token.payload
            n = token.arity
            args = parts[len(parts) - n:]
            del parts[len(parts) - n:]

            texts = []
            for i, (text, prec) in enumerate(args):
                # Right operands of equal precedence need parens (left grouping)
                if prec < op.precedence or (i > 0 and prec == op.precedence):
                    text = f"({text})"
                texts.append(text)
            parts.append((f" {op.symbol} ".join(texts), op.precedence))

        return parts[0][0]

    def to_sexpr(self, precision: Optional[int] = None) -> str:
        """
        Format the tree in prefix s-expression form, showing its structure.

        Examples:
            "2 + 4 * 3" -> "(+ 2 (* 4 3))"
            "x"         -> "x"
        """
        parts: List[str] = []

        for node in self.tree.walk_postorder():
            token = node.payload
            if not token.is_operator:
                if token.is_literal:
                    parts.append(format_number(token.payload, precision))
                else:
                    parts.append(str(token))
                continue
            n = token.arity
            args = parts[len(parts) - n:]
            del parts[len(parts) - n:]
            parts.append("(" + " ".join([str(token)] + args) + ")")

        return parts[0]

    def postfix(self) -> str:
        """The postfix tokens as space separated text."""
        return " ".join(str(t) for t in self.tokens)

    def __eq__(self, other):
        if not isinstance(other, Expression):
            return NotImplemented
        return self.tree == other.tree

    __hash__ = None

    def __str__(self) -> str:
        return self.to_infix()

    def __repr__(self) -> str:
        return f"Expression({self.to_infix()!r})"
