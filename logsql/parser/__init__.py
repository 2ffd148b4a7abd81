"""Parser module - Values, WHERE expressions and statements"""

from .lexer import ValueLexer, parse_values, parse_literal
from .where import parse_where, evaluate, evaluate_where
from .parser import parse_sql

__all__ = [
    'ValueLexer', 'parse_values', 'parse_literal',
    'parse_where', 'evaluate', 'evaluate_where',
    'parse_sql',
]
