"""
Evaluation and constant folding of expression trees.

evaluate() reduces a tree to a float. simplify() folds, in place, every
operator subtree whose variables are all bound, and leaves the rest symbolic:

    tree = parse("(2 * 3) + x").tree
    simplify(tree)              # tree is now (6 + x)
    simplify(tree, {"x": 1})    # tree is now the literal 7

Whether a single node can be folded is reported by try_fold() as a tagged
result: Folded(value), or UNRESOLVED when some variable has no value.
"""

from typing import Dict, List, Union

from .errors import UnresolvedVariableError
from .tokens import BindingsType, Token, Variable, normalize_bindings
from .tree import Tree


# ============================================================
# Fold results
# ============================================================

class Folded:
    """A successfully folded value. Always truthy."""

    __slots__ = ('value',)

    def __init__(self, value: float):
        self.value = value

    def __bool__(self) -> bool:
        return True

    def __eq__(self, other):
        if isinstance(other, Folded):
            return self.value == other.value
        return False

    def __repr__(self) -> str:
        return f"Folded({self.value})"


class _Unresolved:
    """
    Singleton marking a subtree that cannot be folded yet.

    UNRESOLVED is falsy:

        result = try_fold(node, env)
        if result:
            node.payload.fold(result.value)
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = _Unresolved()

FoldResult = Union[Folded, _Unresolved]


# ============================================================
# Evaluation
# ============================================================

def _evaluate(tree: Tree, env: Dict[Variable, float]) -> float:
    """Evaluate with already normalized bindings."""
    values: List[float] = []

    for node in tree.walk_postorder():
        token: Token = node.payload
        if token.is_operator:
            n = token.arity
            args = values[len(values) - n:]
            del values[len(values) - n:]
            values.append(token.payload.evaluate(args))
        elif token.is_literal:
            values.append(token.payload)
        elif token.is_variable:
            if token.payload not in env:
                raise UnresolvedVariableError(token.payload)
            values.append(env[token.payload])
        else:
            raise ValueError(f"Cannot evaluate token {token!r}")

    return values[0]


def evaluate(tree: Tree, bindings: BindingsType = None) -> float:
    """
    Evaluate an expression tree.

    Args:
        tree: Expression tree of Tokens
        bindings: Optional mapping of variables (or names) to values

    Returns:
        The value of the expression

    Raises:
        UnresolvedVariableError: If a variable has no value in bindings
    """
    return _evaluate(tree, normalize_bindings(bindings))


def try_fold(tree: Tree, bindings: BindingsType = None) -> FoldResult:
    """
    Try to evaluate a subtree.

    Returns:
        Folded(value) on success, UNRESOLVED if a variable is unbound.
        Any other error propagates.
    """
    return _try_fold(tree, normalize_bindings(bindings))


def _try_fold(tree: Tree, env: Dict[Variable, float]) -> FoldResult:
    try:
        return Folded(_evaluate(tree, env))
    except UnresolvedVariableError:
        return UNRESOLVED


def simplify(tree: Tree, bindings: BindingsType = None) -> Tree:
    """
    Fold constant subtrees of `tree` in place.

    Children are simplified before their parent. An operator node whose
    children are all leaves is evaluated; on success it becomes a literal
    leaf, otherwise it is left untouched. A node with a child that could not
    be folded cannot be folded either, so it is skipped. Leaves themselves,
    including bound variables, are never rewritten.

    Applying simplify twice is the same as applying it once.

    Returns:
        The same tree, for chaining
    """
    env = normalize_bindings(bindings)

    for node in tree.walk_postorder():
        fold_node(node, env)

    return tree


def fold_node(node: Tree, env: Dict[Variable, float]) -> bool:
    """
    Fold a single operator node whose children are all leaves.

    Takes already normalized bindings. Returns True if the node became a
    literal leaf.
    """
    if not node.payload.is_operator:
        return False
    if not all(child.is_leaf for child in node.children):
        return False
    result = _try_fold(node, env)
    if not result:
        return False
    node.payload.fold(result.value)
    node.children = None
    return True