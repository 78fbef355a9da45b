"""
Lexical analysis for infix formulas.

Two passes:

1. tokenize(): split the source on whitespace into words, then scan each word
   left to right into tokens (parens, variable names, numeric literals and
   single-character operators).
2. to_postfix(): reorder the infix tokens into postfix (reverse Polish) order
   with the shunting-yard algorithm. Operators of equal precedence pop each
   other, so every operator, ^ included, groups left to right.

Because words are split on whitespace first, tokens of different kinds should
be space separated in the input: "x + 1" is the supported form.
"""

import re
from typing import List

from .errors import LexError, UnbalancedParenthesesError
from .operators import OPERATORS
from .tokens import Precedence, Token, TokenKind, Variable

IDENTIFIER_RE = re.compile(r'[A-Za-z]+')
_NUMBER = re.compile(r'[0-9.]+')
_DIGITS = "0123456789"


def tokenize(text: str) -> List[Token]:
    """
    Split source text into tokens in infix order.

    Examples:
        tokenize("(x + 1)") -> [(, x, +, 1, )]

    Raises:
        LexError: On an unrecognised character or a malformed number
    """
    tokens: List[Token] = []
    offset = 0

    for word in text.split():
        # Column of the word within the original text, for error messages
        offset = text.index(word, offset)
        i = 0
        while i < len(word):
            c = word[i]
            column = offset + i

            if c == '(':
                tokens.append(Token(TokenKind.OPEN_PAREN))
                i += 1
            elif c == ')':
                tokens.append(Token(TokenKind.CLOSE_PAREN))
                i += 1
            elif c in OPERATORS:
                tokens.append(Token.operator(OPERATORS[c]))
                i += 1
            elif c in _DIGITS:
                run = _NUMBER.match(word, i).group()
                try:
                    value = float(run)
                except ValueError:
                    raise LexError(f"Malformed number '{run}'", column) from None
                tokens.append(Token.literal(value))
                i += len(run)
            elif c.isascii() and c.isalpha():
                name = IDENTIFIER_RE.match(word, i).group()
                tokens.append(Token.variable(Variable(name)))
                i += len(name)
            else:
                raise LexError(f"Unexpected character '{c}'", column)

        offset += len(word)

    return tokens


def to_postfix(tokens: List[Token]) -> List[Token]:
    """
    Reorder infix tokens into postfix order (shunting-yard).

    Raises:
        UnbalancedParenthesesError: On a ')' without '(' or a '(' left open
    """
    output: List[Token] = []
    stack: List[Token] = []

    for token in tokens:
        if token.kind in (TokenKind.LITERAL, TokenKind.VARIABLE):
            output.append(token)
        elif token.kind == TokenKind.OPEN_PAREN:
            stack.append(token)
        elif token.kind == TokenKind.CLOSE_PAREN:
            while stack and stack[-1].kind != TokenKind.OPEN_PAREN:
                output.append(stack.pop())
            if not stack:
                raise UnbalancedParenthesesError("Unbalanced parentheses: unexpected ')'")
            stack.pop()  # discard the '('
        else:
            # Parens have Precedence.NONE and so are never popped here
            while (stack and stack[-1].precedence != Precedence.NONE
                   and stack[-1].precedence >= token.precedence):
                output.append(stack.pop())
            stack.append(token)

    while stack:
        token = stack.pop()
        if token.kind == TokenKind.OPEN_PAREN:
            raise UnbalancedParenthesesError("Unbalanced parentheses: missing ')'")
        output.append(token)

    return output


def lex(text: str) -> List[Token]:
    """Tokenize text and return its tokens in postfix order."""
    return to_postfix(tokenize(text))
