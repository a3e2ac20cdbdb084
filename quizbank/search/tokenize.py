"""Lexical analysis for the search query language.

Turns a raw query string into a flat list of tokens: words, quoted
phrases, ``OR`` (or ``|``), parentheses and a boundary-sensitive unary
minus used as NOT. The tokenizer never fails; malformed fragments are
folded into neighbouring words or dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

_WHITESPACE: frozenset[str] = frozenset({" ", "\t", "\n", "\r"})

# A bare word equal to one of these is the OR operator.
_OR_WORDS: frozenset[str] = frozenset({"OR", "|"})


class TokenKind(Enum):
    """Kind of a lexical token."""

    WORD = "word"
    PHRASE = "phrase"
    OR = "or"
    LPAREN = "lparen"
    RPAREN = "rparen"
    MINUS = "minus"


@dataclass(frozen=True, slots=True)
class Token:
    """A single token. ``value`` is only set for words and phrases."""

    kind: TokenKind
    value: str = ""


def _is_ws(ch: str) -> bool:
    return ch in _WHITESPACE


def is_unary_minus_at(s: str, i: int) -> bool:
    """Return True if ``s[i]`` is a ``-`` acting as prefix negation.

    The minus must start a token (first character, or preceded by
    whitespace or ``(``) and be immediately followed by a non-whitespace
    character. ``right-turn`` therefore stays one word while
    ``right -turn`` negates ``turn``.
    """
    if i >= len(s) or s[i] != "-":
        return False
    at_boundary = i == 0 or _is_ws(s[i - 1]) or s[i - 1] == "("
    has_operand = i + 1 < len(s) and not _is_ws(s[i + 1])
    return at_boundary and has_operand


def tokenize(text: str) -> list[Token]:
    """Split a query string into tokens.

    Args:
        text: The raw query as typed by the user.

    Returns:
        Tokens in input order. Empty input yields an empty list.
    """
    s = (text or "").strip()
    tokens: list[Token] = []
    i = 0
    n = len(s)

    while i < n:
        ch = s[i]

        if _is_ws(ch):
            i += 1
            continue
        if ch == "(":
            tokens.append(Token(TokenKind.LPAREN))
            i += 1
            continue
        if ch == ")":
            tokens.append(Token(TokenKind.RPAREN))
            i += 1
            continue
        if is_unary_minus_at(s, i):
            tokens.append(Token(TokenKind.MINUS))
            i += 1
            continue
        if ch == '"':
            j = i + 1
            while j < n and s[j] != '"':
                j += 1
            inner = s[i + 1 : j].replace('"', "").strip()
            if inner:
                tokens.append(Token(TokenKind.PHRASE, inner))
            # Skip the closing quote when there is one
            i = j + 1 if j < n else j
            continue

        j = i
        while j < n and not _is_ws(s[j]) and s[j] not in '()"':
            if s[j] == "-" and is_unary_minus_at(s, j):
                break
            j += 1

        raw = s[i:j]
        if raw in _OR_WORDS:
            tokens.append(Token(TokenKind.OR))
        else:
            tokens.append(Token(TokenKind.WORD, raw))
        i = j

    return tokens
