"""
Equations of two expressions and single-unknown solving.

Solving works by undoing operators: the operator at the root of the side
holding the unknown is moved to the other side as its inverse, one level at
a time, until the unknown stands alone. The other side is then evaluated.

    eq = Equation.parse("x * 3 - (12 / 6) = (3 * (3 - 4) / 9)")
    eq.solve("x")             # => 0.5555...

The unknown must occur exactly once, and only + - * / can be undone.
"""

import logging
import math
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .errors import ParseError, SolveError
from .evaluator import fold_node
from .expression import Expression
from .tokens import BindingsType, Token, Variable, as_variable, normalize_bindings
from .trace import SolveStep, SolveTrace

logger = logging.getLogger(__name__)

SideType = Union[Expression, str]


def _as_expression(side: SideType) -> Expression:
    if isinstance(side, Expression):
        return side
    if isinstance(side, str):
        return Expression.parse(side)
    raise TypeError(f"Expected Expression or str, got {type(side).__name__}")


class Equation:
    """
    An equation lhs = rhs.

    The occurrence count of every variable is computed once, when the
    equation is built, and is not updated when solve() rewrites the sides.

    Attributes:
        lhs: Left hand side expression
        rhs: Right hand side expression
    """

    def __init__(self, lhs: SideType, rhs: SideType):
        self.lhs = _as_expression(lhs)
        self.rhs = _as_expression(rhs)
        self._occurrences = self._count_occurrences()

    @classmethod
    def parse(cls, text: str) -> 'Equation':
        """
        Parse "lhs = rhs".

        Raises:
            ParseError: If text does not contain exactly one '='
        """
        parts = text.split("=")
        if len(parts) != 2:
            raise ParseError(f"Equation must contain exactly one '=': {text!r}")
        return cls(parts[0], parts[1])

    def _count_occurrences(self) -> Dict[Variable, int]:
        counts: Dict[Variable, int] = {}
        for side in (self.lhs, self.rhs):
            for var, n in side.variables().items():
                counts[var] = counts.get(var, 0) + n
        return counts

    @property
    def occurrences(self) -> Mapping[Variable, int]:
        """Read-only occurrence count per variable, as at construction."""
        return MappingProxyType(self._occurrences)

    def unknowns(self, bindings: BindingsType = None) -> List[Variable]:
        """Variables of the equation that have no value in bindings."""
        env = normalize_bindings(bindings)
        return [var for var in self._occurrences if var not in env]

    def copy(self) -> 'Equation':
        return Equation(self.lhs.copy(), self.rhs.copy())

    def residual(self, bindings: BindingsType = None) -> float:
        """lhs - rhs evaluated under bindings."""
        return self.lhs.evaluate(bindings) - self.rhs.evaluate(bindings)

    def is_satisfied(self, bindings: BindingsType = None,
                     rel_tol: float = 1e-9, abs_tol: float = 1e-9) -> bool:
        """Whether both sides evaluate to (nearly) the same value."""
        return math.isclose(self.lhs.evaluate(bindings), self.rhs.evaluate(bindings),
                            rel_tol=rel_tol, abs_tol=abs_tol)

    # ============================================================
    # Solving
    # ============================================================

    def _check_target(self, target: Variable, env: Dict[Variable, float]) -> None:
        if target in env:
            raise SolveError(f"Cannot solve for '{target}': it already has a value")
        if target not in self._occurrences:
            raise SolveError(f"Variable '{target}' does not occur in the equation")
        count = self._occurrences[target]
        if count != 1:
            raise SolveError(
                f"Variable '{target}' occurs {count} times; "
                f"solving requires exactly one occurrence")

    def solve(self, target: Union[Variable, str], bindings: BindingsType = None,
              trace: bool = False) -> Union[float, Tuple[float, SolveTrace]]:
        """
        Solve for `target`, which must occur exactly once.

        Both sides are rewritten in place: afterwards one side is the bare
        unknown and the other its (folded) solution.

        Args:
            target: The unknown to isolate
            bindings: Optional values for the other variables
            trace: If True, return (value, SolveTrace)

        Returns:
            The value of target, or (value, trace) if trace=True

        Raises:
            SolveError: If target is bound, absent or occurs more than once,
                or if an operator on its path has no inverse
            UnresolvedVariableError: If the solution still depends on an
                unbound variable
        """
        target = as_variable(target)
        env = normalize_bindings(bindings)
        try:
            self._check_target(target, env)
        except SolveError as e:
            logger.debug("Rejected solve of %s = %s: %s", self.lhs, self.rhs, e)
            raise

        # Formatting the equation walks both sides, so only do it when asked
        solve_trace = None
        if trace or logger.isEnabledFor(logging.DEBUG):
            solve_trace = SolveTrace(str(target))
            solve_trace.initial = str(self)

        value = self._isolate(target, env, solve_trace)

        if solve_trace is not None:
            solve_trace.final = str(self)
            solve_trace.value = value
            logger.debug("Solved %s = %r in %d step(s)", target, value, len(solve_trace))

        if trace:
            return value, solve_trace
        return value

    def _isolate(self, target: Variable, env: Dict[Variable, float],
                 solve_trace: Optional[SolveTrace]) -> float:
        def is_target(token: Token) -> bool:
            return token.is_variable and token.payload == target

        self.lhs.simplify(env)
        self.rhs.simplify(env)

        left_parent = self.lhs.tree.find_parent(is_target)
        right_parent = self.rhs.tree.find_parent(is_target)

        if left_parent is None and right_parent is None:
            # The unknown is already alone on one side
            if is_target(self.lhs.tree.payload):
                return self.rhs.evaluate(env)
            if is_target(self.rhs.tree.payload):
                return self.lhs.evaluate(env)
            raise SolveError(f"Variable '{target}' could not be found")

        on_left = left_parent is not None
        var_side, other_side = (self.lhs, self.rhs) if on_left else (self.rhs, self.lhs)

        # The unknown's side is already simplified and only loses its root at
        # each step, so the path found here stays valid throughout
        path = var_side.tree.find_path(is_target)
        max_steps = var_side.tree.depth()
        steps = 0

        while not is_target(var_side.tree.payload):
            if steps >= max_steps or steps >= len(path):
                raise SolveError(f"Failed to isolate '{target}' after {steps} steps")
            position = path[steps]
            steps += 1

            root = var_side.tree
            token = root.payload
            if not token.is_operator:
                raise SolveError(f"Unable to locate the parent node of '{target}'")

            op = token.payload
            if not op.invertible:
                raise SolveError(
                    f"Cannot isolate '{target}': operator '{op.symbol}' has no inverse")

            applied, slot = op.undo(position)
            others = [child for i, child in enumerate(root.children) if i != position]

            before = str(self) if solve_trace is not None else None
            other_side.add_operation(Token.function(applied), slot, *others)
            # Everything below the new root is already simplified
            fold_node(other_side.tree, env)
            var_side.tree = root.children[position]

            if solve_trace is not None:
                step = SolveStep(op.symbol, applied.symbol, position, before, str(self))
                solve_trace.add_step(step)
                logger.debug("Step %d: %r", steps, step)

        return other_side.evaluate(env)

    def __str__(self) -> str:
        return f"{self.lhs} = {self.rhs}"

    def __repr__(self) -> str:
        return f"Equation({str(self)!r})"
