"""
Parser for the column expressions of Oracle function-based indexes.

user_ind_expressions.column_expression holds free-form SQL. Only the shapes an
index definition can be rebuilt from are recognized:

    NLSSORT("EMAIL",'nls_sort=''XGERMAN_CI''')     -> FunctionExpression
    SYS_EXTRACT_UTC("VALID_TO")                   -> NoExpression
    UPPER("EMAIL")                                -> FunctionExpression
    CASE WHEN "STATUS"=1 THEN 1 ELSE NULL END     -> CaseExpression

Anything else raises ExpressionParseError.
"""

import re
from typing import List

from oraforge.constants import UTC_EXTRACTION_FUNCTIONS
from oraforge.exceptions import ExpressionParseError
from oraforge.models import CaseExpression, FunctionExpression, IndexExpression, NoExpression
from oraforge.parsers.utils import collapse_whitespace, is_string_literal, normalize_identifier

_IDENT = r'(?:"[^"]+"|[A-Za-z_][\w$#]*)'
_LITERAL = r"'(?:[^']|'')*'"

_TWO_ARG_CALL = re.compile(
    rf"^(?P<fn>[A-Za-z_][\w$#]*)\s*\(\s*(?P<arg1>{_IDENT})\s*,\s*(?P<arg2>{_LITERAL}|[^,()'\s]+)\s*\)$"
)
_ONE_ARG_CALL = re.compile(rf"^(?P<fn>[A-Za-z_][\w$#]*)\s*\(\s*(?P<arg>{_IDENT})\s*\)$")
_CASE = re.compile(
    r"^CASE\s+WHEN\s+(?P<when>.+?)\s+THEN\s+(?P<then>.+?)(?:\s+ELSE\s+(?P<else>.+?))?\s+END$",
    re.IGNORECASE | re.DOTALL,
)

_COMPARISON = re.compile(r"<>|!=|\^=|>=|<=|=|<|>|\b(?:IS|LIKE|IN|BETWEEN)\b", re.IGNORECASE)
_CONDITION_IDENT = re.compile(r'"(?P<quoted>[^"]+)"|\b(?P<bare>[A-Za-z_][\w$#]*)\b(?!\s*\()')
_QUOTED_IDENT = re.compile(r'"([^"]+)"')
_STRING_LITERAL = re.compile(_LITERAL)

_CONDITION_KEYWORDS = frozenset({
    "NOT", "NULL", "AND", "OR", "TRUE", "FALSE", "PRIOR", "IS", "LIKE", "IN", "BETWEEN", "ESCAPE",
})


def parse_column_expression(text: str) -> IndexExpression:
    """
    Recognizes an index column expression.

    Args:
        text: Raw column_expression value from the data dictionary

    Returns:
        FunctionExpression, CaseExpression or NoExpression naming the column the
        expression is attached to

    Raises:
        ExpressionParseError: when the text matches no supported shape
    """
    sql = collapse_whitespace(text or "")
    if not sql:
        raise ExpressionParseError(sql, "Empty index column expression")

    match = _TWO_ARG_CALL.match(sql)
    if match:
        return FunctionExpression(
            field=normalize_identifier(match.group('arg1')),
            sql=sql,
            function=match.group('fn').upper(),
            params=(_parameter_value(match.group('arg2')),),
        )

    match = _ONE_ARG_CALL.match(sql)
    if match:
        function = match.group('fn').upper()
        field = normalize_identifier(match.group('arg'))
        if function in UTC_EXTRACTION_FUNCTIONS:
            return NoExpression(field=field, sql=sql)
        return FunctionExpression(field=field, sql=sql, function=function)

    # clauses are cut on the literal-free text so THEN/ELSE inside quotes are ignored
    masked = _mask_literals(sql)
    match = _CASE.match(masked)
    if match:
        masked_when, masked_then = match.group('when'), match.group('then')
        if re.search(r'\bWHEN\b', masked_then, re.IGNORECASE) or re.search(r'\bCASE\b', masked_when, re.IGNORECASE):
            raise ExpressionParseError(sql, "Only single WHEN CASE expressions are supported")
        when, then = sql[match.start('when'):match.end('when')], sql[match.start('then'):match.end('then')]
        else_ = sql[match.start('else'):match.end('else')] if match.group('else') is not None else None
        return CaseExpression(
            field=_compared_identifier(when, sql),
            sql=sql,
            when=when,
            then=then,
            else_=else_,
        )

    raise ExpressionParseError(sql)


def candidate_columns(expression: IndexExpression) -> List[str]:
    """The expression's own field first, then every other double-quoted identifier it mentions."""
    candidates = [expression.field]
    for name in _QUOTED_IDENT.findall(_STRING_LITERAL.sub("''", expression.sql)):
        if name not in candidates:
            candidates.append(name)
    return candidates


def _parameter_value(arg: str) -> str:
    # 'nls_sort=''XGERMAN_CI''' -> nls_sort=XGERMAN_CI
    if is_string_literal(arg):
        return arg[1:-1].replace("'", "")
    return arg


def _mask_literals(text: str) -> str:
    """Blanks out string literal contents, keeping every offset unchanged."""
    return _STRING_LITERAL.sub(lambda m: "'" + "#" * (len(m.group()) - 2) + "'", text)


def _first_identifier(text: str):
    for match in _CONDITION_IDENT.finditer(text):
        if match.group('quoted'):
            return match.group('quoted')
        bare = match.group('bare')
        if bare.upper() not in _CONDITION_KEYWORDS:
            # unquoted names are stored upper case
            return bare.upper()
    return None


def _compared_identifier(condition: str, sql: str) -> str:
    """
    Returns the column the condition compares.

    That is the first column on the left of the first comparison, or the first
    column anywhere in the condition when the left side is a literal (0<"AMOUNT").
    """
    searchable = _STRING_LITERAL.sub("''", condition)
    comparison = _COMPARISON.search(searchable)
    if not comparison:
        raise ExpressionParseError(sql, "No comparison found in CASE condition")

    field = _first_identifier(searchable[:comparison.start()]) or _first_identifier(searchable)
    if field is None:
        raise ExpressionParseError(sql, "No column found in CASE condition")
    return field
