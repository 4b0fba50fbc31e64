"""
oraforge Custom Exceptions

This module defines the exception classes raised while rendering Oracle DDL,
reconstructing the data dictionary and talking to the database driver.
"""

from typing import Optional


class OraForgeError(Exception):
    """Base exception for all oraforge errors."""
    pass


class InvalidPlatformVersionError(OraForgeError):
    """
    Raised when an Oracle version string cannot be parsed.

    Attributes:
        version: The rejected version string
        expected_format: Human readable description of the accepted format
    """
    def __init__(self, version: str, expected_format: str = "<major_version>.<minor_version>.<patch_version>"):
        self.version = version
        self.expected_format = expected_format
        super().__init__(
            f"Invalid platform version '{version}' specified. "
            f"The platform version has to be specified in the format: '{expected_format}'."
        )


class IndexDefinitionError(OraForgeError, ValueError):
    """Raised when an index cannot be rendered, e.g. it has no columns."""
    pass


class UnknownColumnTypeError(OraForgeError):
    """Raised when a vendor type or a comment type marker has no portable type."""
    pass


class ExpressionParseError(OraForgeError):
    """
    Raised when an index column expression matches none of the known shapes.

    Attributes:
        expression: The expression text that failed to parse
        reason: Description of why parsing failed
    """
    def __init__(self, expression: str, reason: str = "Unrecognized index column expression"):
        self.expression = expression
        self.reason = reason
        # Truncate long expressions for readability
        display_expr = expression[:100] + "..." if len(expression) > 100 else expression
        super().__init__(f"{reason}: {display_expr}")


class ExpressionMappingError(OraForgeError):
    """Raised when every column an expression references is already used by its index."""
    def __init__(self, expression: str, index_name: str):
        self.expression = expression
        self.index_name = index_name
        super().__init__(
            f"Could not map the column expression {expression} of index {index_name} to a column, "
            f"because other expressions in this index have been mapped to all available column names"
        )


class IndexRowOrderError(OraForgeError):
    """Raised when index rows are not grouped by index name and ordered by position."""
    pass


class DriverError(OraForgeError):
    """
    An error reported by the database driver.

    Attributes:
        code: Normalized vendor error code ("942"), or None
        message: Formatted error message
        cause: The driver exception that was classified
    """
    def __init__(self, message: str, cause: Optional[BaseException] = None, code: Optional[str] = None):
        self.message = message
        self.cause = cause
        self.code = code
        super().__init__(message)


class UniqueConstraintViolationError(DriverError):
    pass


class InvalidFieldNameError(DriverError):
    pass


class NonUniqueFieldNameError(DriverError):
    pass


class SQLSyntaxError(DriverError):
    pass


class TableNotFoundError(DriverError):
    pass


class TableExistsError(DriverError):
    pass


class DatabaseConnectionError(DriverError):
    pass


class NotNullConstraintViolationError(DriverError):
    pass


class ForeignKeyConstraintViolationError(DriverError):
    pass
