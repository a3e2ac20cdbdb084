"""Search query language: tokenizer, parser and SQL lowering."""

from quizbank.search.ast_nodes import And, Node, Not, Or, Term, normalize_term
from quizbank.search.lower_fts import lower_to_match
from quizbank.search.lower_like import LikeFragment, lower_to_like
from quizbank.search.parser import Parser, parse_expression, parse_tokens
from quizbank.search.policy import EngineMode, SearchPlan, parse_search, should_auto_fallback
from quizbank.search.query import (
    EmptyQuery,
    ExactQuery,
    FtsQuery,
    LikeQuery,
    ParsedQuery,
    parse_query,
)
from quizbank.search.tokenize import Token, TokenKind, tokenize

__all__ = [
    "And",
    "EmptyQuery",
    "EngineMode",
    "ExactQuery",
    "FtsQuery",
    "LikeFragment",
    "LikeQuery",
    "Node",
    "Not",
    "Or",
    "ParsedQuery",
    "Parser",
    "SearchPlan",
    "Term",
    "Token",
    "TokenKind",
    "lower_to_like",
    "lower_to_match",
    "normalize_term",
    "parse_expression",
    "parse_query",
    "parse_search",
    "parse_tokens",
    "should_auto_fallback",
    "tokenize",
]
