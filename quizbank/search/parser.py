"""Parse a search token stream into a boolean expression tree.

A small recursive-descent parser with fixed precedence: unary NOT binds
tightest, adjacency forms an implicit AND, OR binds loosest, and
parentheses group. The parser is a forward scanner: tokens consumed by a
branch that produces nothing are not given back, the enclosing rule just
stops collecting.

Grammar::

    expr    := or
    or      := and ( OR and )*
    and     := unary+            # stops at OR, ')' or end of input
    unary   := '-' unary | primary
    primary := '(' expr ')' | PHRASE | WORD
"""

from __future__ import annotations

from collections.abc import Sequence

from quizbank.search.ast_nodes import And, Node, Not, Or, Term, normalize_term
from quizbank.search.tokenize import Token, TokenKind, tokenize


def _is_dangling_minus(tok: Token) -> bool:
    # A "-" followed by whitespace or end of input is lexed as a word;
    # it negates nothing and is dropped.
    return tok.kind is TokenKind.WORD and tok.value == "-"


class Parser:
    """Recursive-descent parser over one token list.

    The cursor lives on the instance, so each parse needs a fresh parser.
    """

    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token | None:
        tok = self._peek()
        if tok is not None:
            self._pos += 1
        return tok

    def parse_expr(self) -> Node | None:
        """Parse an expression starting at the cursor."""
        if not self._tokens:
            return None
        return self._parse_or()

    def _parse_or(self) -> Node | None:
        first = self._parse_and()
        if first is None:
            return None

        items: list[Node] = [first]
        while True:
            tok = self._peek()
            if tok is None or tok.kind is not TokenKind.OR:
                break
            self._advance()
            right = self._parse_and()
            if right is None:
                break
            items.append(right)

        if len(items) == 1:
            return items[0]
        return Or(tuple(items))

    def _parse_and(self) -> Node | None:
        items: list[Node] = []
        while True:
            tok = self._peek()
            if tok is None or tok.kind in (TokenKind.OR, TokenKind.RPAREN):
                break
            if _is_dangling_minus(tok):
                self._advance()
                continue
            node = self._parse_unary()
            if node is None:
                break
            items.append(node)

        if not items:
            return None
        if len(items) == 1:
            return items[0]
        return And(tuple(items))

    def _parse_unary(self) -> Node | None:
        tok = self._peek()
        if tok is not None and tok.kind is TokenKind.MINUS:
            self._advance()
            inner = self._parse_unary()
            if inner is None:
                return None
            return Not(inner)
        return self._parse_primary()

    def _parse_primary(self) -> Node | None:
        tok = self._peek()
        if tok is None:
            return None

        if tok.kind is TokenKind.LPAREN:
            self._advance()
            expr = self.parse_expr()
            # An unclosed group ends at the end of input
            closing = self._peek()
            if closing is not None and closing.kind is TokenKind.RPAREN:
                self._advance()
            return expr

        if tok.kind is TokenKind.PHRASE:
            self._advance()
            inner = tok.value.strip()
            if not inner:
                return None
            return Term(text=inner, phrase=True)

        if tok.kind is TokenKind.WORD:
            self._advance()
            if _is_dangling_minus(tok):
                return None
            term = normalize_term(tok.value)
            if not term:
                return None
            return term.to_term()

        return None


def parse_tokens(tokens: Sequence[Token]) -> Node | None:
    """Parse a token list into an expression tree.

    Returns:
        The root node, or None when the tokens hold no usable term.
    """
    return Parser(tokens).parse_expr()


def parse_expression(text: str) -> Node | None:
    """Tokenize and parse a query string in one step."""
    return parse_tokens(tokenize(text))
