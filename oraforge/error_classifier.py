"""
Oracle error code classification.

Maps ORA- error codes onto the driver exception taxonomy in
oraforge.exceptions. New codes only need an entry in ERROR_CODE_MAP.
"""

import re
from typing import Any, Dict, Optional, Type

from oraforge.exceptions import (
    DatabaseConnectionError,
    DriverError,
    ForeignKeyConstraintViolationError,
    InvalidFieldNameError,
    NonUniqueFieldNameError,
    NotNullConstraintViolationError,
    SQLSyntaxError,
    TableExistsError,
    TableNotFoundError,
    UniqueConstraintViolationError,
)

ERROR_CODE_MAP: Dict[str, Type[DriverError]] = {
    "1": UniqueConstraintViolationError,
    "2299": UniqueConstraintViolationError,
    "38911": UniqueConstraintViolationError,
    "904": InvalidFieldNameError,
    "918": NonUniqueFieldNameError,
    "960": NonUniqueFieldNameError,
    "923": SQLSyntaxError,
    "942": TableNotFoundError,
    "955": TableExistsError,
    "1017": DatabaseConnectionError,
    "12545": DatabaseConnectionError,
    "1400": NotNullConstraintViolationError,
    "2266": ForeignKeyConstraintViolationError,
    "2291": ForeignKeyConstraintViolationError,
    "2292": ForeignKeyConstraintViolationError,
}

_ORA_PREFIX = re.compile(r'^ORA-', re.IGNORECASE)


def normalize_error_code(code: Any) -> Optional[str]:
    """Returns "942" for 942, "942", "00942" and "ORA-00942"; None when there is no code."""
    if code is None:
        return None
    text = _ORA_PREFIX.sub('', str(code).strip())
    if text.isdigit():
        return text.lstrip('0') or '0'
    return text or None


def classify_error(code: Any, message: str, cause: Optional[BaseException] = None) -> DriverError:
    """
    Builds the exception matching an Oracle error code.

    Args:
        code: Vendor error code as reported by the driver
        message: Already formatted error message
        cause: The driver exception being wrapped

    Returns:
        A DriverError subclass instance; DriverError itself for unmapped codes
    """
    normalized = normalize_error_code(code)
    exc_class = ERROR_CODE_MAP.get(normalized, DriverError)
    return exc_class(message, cause, normalized)
