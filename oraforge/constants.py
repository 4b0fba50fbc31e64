"""
oraforge constants

Portable column types, the Oracle vendor type table and the data dictionary
sentinels shared by the reconstructor and the generators.
"""

from enum import Enum
from typing import Dict, FrozenSet


class PortableType(str, Enum):
    """Database-agnostic column types."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    BIGINT = "bigint"
    SMALLINT = "smallint"
    DECIMAL = "decimal"
    FLOAT = "float"
    STRING = "string"
    TEXT = "text"
    GUID = "guid"
    JSON = "json"
    BINARY = "binary"
    BLOB = "blob"
    DATE = "date"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"


# Prefix of user_indexes.index_type for indexes with expression columns
# ("FUNCTION-BASED NORMAL", "FUNCTION-BASED BITMAP")
FUNCTION_BASED_INDEX_TYPE = "FUNCTION-BASED"


# user_tab_columns.data_type (lower-cased, timestamps collapsed) -> portable type
VENDOR_TYPE_MAP: Dict[str, PortableType] = {
    "binary_double": PortableType.FLOAT,
    "binary_float": PortableType.FLOAT,
    "binary_integer": PortableType.BOOLEAN,
    "blob": PortableType.BLOB,
    "char": PortableType.STRING,
    "clob": PortableType.TEXT,
    "date": PortableType.DATE,
    "float": PortableType.FLOAT,
    "integer": PortableType.INTEGER,
    "long": PortableType.STRING,
    "long raw": PortableType.BLOB,
    "nchar": PortableType.STRING,
    "nclob": PortableType.TEXT,
    "number": PortableType.DECIMAL,
    "nvarchar2": PortableType.STRING,
    "pls_integer": PortableType.BOOLEAN,
    "raw": PortableType.BINARY,
    "rowid": PortableType.STRING,
    "timestamp": PortableType.TIMESTAMP,
    "timestamptz": PortableType.TIMESTAMPTZ,
    "urowid": PortableType.STRING,
    "varchar": PortableType.STRING,
    "varchar2": PortableType.STRING,
}

NUMERIC_VENDOR_TYPES: FrozenSet[str] = frozenset({"number", "float", "binary_float", "binary_double"})
FIXED_STRING_VENDOR_TYPES: FrozenSet[str] = frozenset({"char", "nchar"})
VARIABLE_STRING_VENDOR_TYPES: FrozenSet[str] = frozenset({"varchar", "varchar2", "nvarchar2"})

INTEGER_TYPES: FrozenSet[PortableType] = frozenset({
    PortableType.INTEGER, PortableType.BIGINT, PortableType.SMALLINT,
})

# Column collation reported for collatable columns without an explicit one
NO_COLLATION_SENTINEL = "USING_NLS_COMP"

# Marker used in column comments to pin the portable type: "(DC2Type:json)"
COMMENT_TYPE_MARKER = "DC2Type"

# Owner value meaning "the schema of the current connection" (OS authentication)
CURRENT_SCHEMA_OWNER = "/"

IDENTITY_CLAUSE = " GENERATED BY DEFAULT ON NULL AS IDENTITY"

# Default expression idiom that must never be rendered as a string literal
SYSTIMESTAMP_MARKER = "systimestamp"

UTC_EXTRACTION_FUNCTIONS: FrozenSet[str] = frozenset({"SYS_EXTRACT_UTC"})

PRIMARY_INDEX_KEY = "primary"

# Type names accepted in comment markers besides the PortableType values
COMMENT_TYPE_ALIASES: Dict[str, PortableType] = {
    "datetime": PortableType.TIMESTAMP,
    "datetime_immutable": PortableType.TIMESTAMP,
    "datetimetz": PortableType.TIMESTAMPTZ,
    "datetimetz_immutable": PortableType.TIMESTAMPTZ,
    "date_immutable": PortableType.DATE,
    "simple_array": PortableType.TEXT,
    "json_array": PortableType.JSON,
}
