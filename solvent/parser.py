"""
Parser: postfix tokens to expression tree.

    from solvent import parse

    expr = parse("(2 + 3) * x")
    expr.tree        # Tree(*, [Tree(+, [2, 3]), Tree(x)])
    expr.tokens      # postfix: 2 3 + x *
"""

from typing import List

from .errors import ParseError
from .expression import Expression
from .lexer import lex
from .tokens import Token, TokenKind
from .tree import Tree


def build_tree(postfix: List[Token]) -> Tree:
    """
    Build an expression tree from tokens in postfix order.

    Each operator pops its operands off the stack (right to left) and pushes
    a node with those operands restored to left-to-right order. The tree gets
    its own copies of the tokens, so later folding never alters `postfix`.

    Raises:
        ParseError: If an operator lacks operands, or if the tokens do not
            reduce to exactly one tree
    """
    stack: List[Tree] = []

    for token in postfix:
        if token.kind in (TokenKind.OPEN_PAREN, TokenKind.CLOSE_PAREN):
            raise ParseError("Parenthesis in postfix token stream")

        if not token.is_operator:
            stack.append(Tree(token.copy()))
            continue

        if len(stack) < token.arity:
            raise ParseError(
                f"Operator '{token}' expects {token.arity} operands, "
                f"found {len(stack)}")

        operands = [stack.pop() for _ in range(token.arity)]
        operands.reverse()
        stack.append(Tree(token.copy(), operands))

    if not stack:
        raise ParseError("Empty expression")
    if len(stack) > 1:
        raise ParseError(
            f"Malformed expression: {len(stack)} operands are not joined by operators")

    return stack[0]


def parse(text: str) -> Expression:
    """
    Parse infix text into an Expression.

    Raises:
        LexError: On characters or numbers that cannot be tokenized
        ParseError: On a malformed token stream
    """
    tokens = lex(text)
    return Expression(build_tree(tokens), tokens)
