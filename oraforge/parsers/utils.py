import re
from typing import Any, Dict, Mapping, Optional

import sqlparse


def normalize_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Returns a copy of a data dictionary row with lower-cased keys.

    Oracle reports column labels in upper case unless they were quoted in the
    query, so every row is passed through here once before any field is read.
    """
    if row is None:
        return {}
    return {str(key).lower(): value for key, value in dict(row).items()}


def collapse_whitespace(text: str) -> str:
    """Replaces runs of whitespace with a single space and trims the result."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def compact_sql(sql: str) -> str:
    """
    Strips comments and folds a SQL statement onto one line, e.g. for logging.

    Args:
        sql (str): The raw SQL string.

    Returns:
        str: The statement on a single line.
    """
    if not sql:
        return ""

    formatted = sqlparse.format(sql, strip_comments=True).strip()
    formatted = collapse_whitespace(formatted)
    # Remove space before , )
    formatted = re.sub(r'\s+([,)])', r'\1', formatted)
    # Remove space after (
    formatted = re.sub(r'\(\s+', '(', formatted)
    return formatted


def pretty_sql(sql: str) -> str:
    """Reindents a statement for display."""
    return sqlparse.format(sql, reindent=True, keyword_case='upper').strip()


def quote_identifier_name(identifier: Optional[str]) -> str:
    """
    Quotes an Oracle identifier that contains lower-case letters.

    Unquoted identifiers are stored upper case by Oracle, so a name with any
    lower-case letter can only have been created quoted and must stay quoted.
    """
    if not identifier:
        return ""
    if re.search(r'[a-z]', identifier):
        return quote_identifier(identifier)
    return identifier


def quote_identifier(identifier: str) -> str:
    """Always double-quotes an identifier ("USERS")."""
    if identifier.startswith('"') and identifier.endswith('"') and len(identifier) > 1:
        return identifier
    return '"' + identifier.replace('"', '""') + '"'


def unquote_identifier(identifier: str) -> str:
    if len(identifier) > 1 and identifier.startswith('"') and identifier.endswith('"'):
        return identifier[1:-1].replace('""', '"')
    return identifier


def normalize_identifier(name: str) -> str:
    """Folds an unquoted identifier to upper case; a quoted one keeps its case without the quotes."""
    name = name.strip()
    if len(name) > 1 and name.startswith('"') and name.endswith('"'):
        return unquote_identifier(name)
    return name.upper()


def quote_string_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def is_string_literal(text: str) -> bool:
    """True when text is exactly one single-quoted SQL string literal ('open', 'it''s')."""
    return bool(re.fullmatch(r"'(?:[^']|'')*'", text))


def unquote_string_literal(text: str) -> str:
    return text[1:-1].replace("''", "'")


def to_int(value: Any) -> Optional[int]:
    """Dictionary numbers arrive as int, Decimal, float or str depending on the driver."""
    if value is None or value == '':
        return None
    return int(value)
