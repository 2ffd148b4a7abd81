"""
WHERE Clause - Parses and evaluates boolean filter expressions

Grammar (lowest precedence first):

    or_expr   := and_expr ( OR and_expr )*
    and_expr  := primary ( AND primary )*
    primary   := '(' or_expr ')' | condition
    condition := column '=' literal

Conditions compare the stored value's rendered literal with the text on the
right-hand side, so strings match as  name='John'  and numbers as  age=25.
Evaluation never raises: a malformed condition or an unknown column is false.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from ..core.schema import ColumnDefinition, column_index
from ..core.types import SqlValue, render_literal


# ============================================================================
# AST Node Types
# ============================================================================

@dataclass
class Condition:
    """column = literal"""
    column: str
    literal: str


@dataclass
class InvalidCondition:
    """Text that is not a condition; always false"""
    text: str


@dataclass
class AndExpr:
    operands: List[Union['OrExpr', Condition, InvalidCondition]] = field(default_factory=list)


@dataclass
class OrExpr:
    operands: List[AndExpr] = field(default_factory=list)


Primary = Union[OrExpr, Condition, InvalidCondition]


# ============================================================================
# Parser
# ============================================================================

def split_by_operator(expression: str, keyword: str) -> List[str]:
    """
    Split on a boolean keyword at parenthesis depth 0 and outside quotes.

    Nested groups and quoted values containing the keyword are kept whole.
    """
    pattern = re.compile(r'\s+' + keyword + r'\s+', re.IGNORECASE)
    parts = []
    start = 0
    depth = 0
    in_string = False
    i = 0

    while i < len(expression):
        char = expression[i]
        if char == "'":
            in_string = not in_string
        elif not in_string:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
            elif depth == 0 and char.isspace():
                match = pattern.match(expression, i)
                if match:
                    parts.append(expression[start:i])
                    start = match.end()
                    i = match.end()
                    continue
        i += 1

    parts.append(expression[start:])
    parts = [p for p in parts if p.strip()]
    return parts or [expression]


def _wrapped_in_parens(expression: str) -> bool:
    """True if the opening parenthesis closes at the very end"""
    if not (expression.startswith('(') and expression.endswith(')')):
        return False

    depth = 0
    in_string = False
    for i, char in enumerate(expression):
        if char == "'":
            in_string = not in_string
        elif not in_string:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
                if depth == 0 and i < len(expression) - 1:
                    return False
    return depth == 0


def _find_equals(condition: str) -> int:
    in_string = False
    for i, char in enumerate(condition):
        if char == "'":
            in_string = not in_string
        elif char == '=' and not in_string:
            return i
    return -1


def parse_condition(text: str) -> Union[Condition, InvalidCondition]:
    eq_pos = _find_equals(text)
    if eq_pos < 0:
        return InvalidCondition(text)

    column = text[:eq_pos].strip()
    literal = text[eq_pos + 1:].strip()
    if not column or not literal:
        return InvalidCondition(text)
    return Condition(column, literal)


def parse_primary(text: str) -> Primary:
    expr = text.strip()
    if _wrapped_in_parens(expr):
        return parse_or(expr[1:-1])
    return parse_condition(expr)


def parse_and(text: str) -> AndExpr:
    return AndExpr([parse_primary(part) for part in split_by_operator(text.strip(), 'AND')])


def parse_or(text: str) -> OrExpr:
    return OrExpr([parse_and(part) for part in split_by_operator(text.strip(), 'OR')])


def parse_where(text: str) -> OrExpr:
    """Parse WHERE text into an expression tree"""
    return parse_or(text)


# ============================================================================
# Evaluator
# ============================================================================

class WhereEvaluator:
    """Evaluates a parsed WHERE expression against one row"""

    def __init__(self, row: Sequence[SqlValue], schema: Sequence[ColumnDefinition]):
        self.row = row
        self.schema = schema

    def evaluate(self, expr) -> bool:
        if isinstance(expr, OrExpr):
            return any(self.evaluate(operand) for operand in expr.operands)

        if isinstance(expr, AndExpr):
            return all(self.evaluate(operand) for operand in expr.operands)

        if isinstance(expr, Condition):
            return self._eval_condition(expr)

        return False

    def _eval_condition(self, condition: Condition) -> bool:
        idx = column_index(list(self.schema), condition.column)
        if idx is None or idx >= len(self.row):
            return False
        return render_literal(self.row[idx]) == condition.literal


def evaluate(expr: Optional[OrExpr], row: Sequence[SqlValue],
             schema: Sequence[ColumnDefinition]) -> bool:
    """Evaluate a parsed expression; no expression means every row passes"""
    if expr is None:
        return True
    return WhereEvaluator(row, schema).evaluate(expr)


def evaluate_where(row: Sequence[SqlValue], schema: Sequence[ColumnDefinition],
                   where: Optional[str]) -> bool:
    """Parse and evaluate WHERE text against a row"""
    if where is None or not where.strip():
        return True
    return evaluate(parse_where(where), row, schema)


def referenced_columns(expr) -> List[str]:
    """Column names used by the conditions of an expression, in order"""
    if isinstance(expr, (OrExpr, AndExpr)):
        names = []
        for operand in expr.operands:
            for name in referenced_columns(operand):
                if name not in names:
                    names.append(name)
        return names
    if isinstance(expr, Condition):
        return [expr.column]
    return []
