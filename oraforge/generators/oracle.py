from typing import List, Optional, Union

from oraforge.constants import IDENTITY_CLAUSE, SYSTIMESTAMP_MARKER
from oraforge.generators.generic import GenericGenerator
from oraforge.logging_config import get_logger
from oraforge.models import Catalog, Column, Index, Table
from oraforge.platform import DEFAULT_CAPABILITIES, OracleVersion, PlatformCapabilities, capabilities_for_version

logger = get_logger("generator")

VersionLike = Union[str, OracleVersion, PlatformCapabilities]


class OracleGenerator(GenericGenerator):
    """
    Oracle DDL for one platform release.

    12.1 and later render booleans and integers as NUMBER(p,0) and
    autoincrement columns as identity columns; 12.2 adds column collations.
    """

    current_timestamp_sql = "SYSTIMESTAMP"
    current_date_sql = "TRUNC(SYSDATE)"

    def __init__(self, capabilities: Optional[PlatformCapabilities] = None):
        self.capabilities = capabilities or DEFAULT_CAPABILITIES

    @property
    def _numeric_with_scale(self) -> bool:
        return self.capabilities.supports_identity_columns

    def _integer_family_sql(self, precision: int, column: Column) -> str:
        if self._numeric_with_scale:
            return f"NUMBER({precision},0)" + self._autoincrement_sql(column)
        return f"NUMBER({precision})"

    def _boolean_type_sql(self, column):
        if self._numeric_with_scale:
            return "NUMBER(1,0)"
        return "NUMBER(1)"

    def _integer_type_sql(self, column):
        return self._integer_family_sql(10, column)

    def _bigint_type_sql(self, column):
        return self._integer_family_sql(20, column)

    def _smallint_type_sql(self, column):
        return self._integer_family_sql(5, column)

    def _decimal_type_sql(self, column):
        if not self._numeric_with_scale:
            return super()._decimal_type_sql(column)
        precision, scale = self._precision_and_scale(column)
        return f"NUMBER({precision}, {scale})" + self._autoincrement_sql(column)

    def _autoincrement_sql(self, column: Column) -> str:
        if column.autoincrement and self.capabilities.supports_identity_columns:
            return IDENTITY_CLAUSE
        return ""

    def _string_type_sql(self, column):
        if column.fixed:
            return f"CHAR({column.length or self.varchar_default_length})"
        return f"VARCHAR2({column.length or self.varchar_default_length})"

    def _binary_type_sql(self, column):
        return f"RAW({column.length or self.binary_default_length})"

    def _timestamptz_type_sql(self, column):
        return f"TIMESTAMP({self.capabilities.timestamp_tz_fractional_digits}) WITH TIME ZONE"

    def default_value_sql(self, column: Column) -> str:
        if column.autoincrement and self.capabilities.supports_identity_columns:
            return ""
        default = super().default_value_sql(column)
        # SYSTIMESTAMP AT TIME ZONE 'UTC' is an expression, not a string
        if column.default_value is not None and SYSTIMESTAMP_MARKER in str(column.default_value).lower():
            default = f" DEFAULT {column.default_value}"
        return default

    def collation_sql(self, column: Column) -> str:
        if not column.collation:
            return ""
        if not self.capabilities.supports_column_collation:
            logger.warning(
                f"Collation {column.collation} of column {column.name} ignored",
                extra={'oracle_version': str(self.capabilities.version), 'operation': 'render'}
            )
            return ""
        return f" COLLATE {column.collation}"

    def column_declaration_sql(self, column: Column) -> str:
        def_str = f"{column.name} {self.render_column_type(column)}"
        def_str += self.collation_sql(column)
        def_str += self.default_value_sql(column)
        if not column.is_nullable:
            def_str += " NOT NULL"
        return def_str

    def index_columns_sql(self, index: Index) -> str:
        # expression columns are rendered with their expression, e.g. NLSSORT("EMAIL",'nls_sort=''XGERMAN_CI''')
        return ", ".join(index.where.get(col) or col for col in index.columns)

    def create_catalog_sql(self, catalog: Catalog) -> List[str]:
        """Statements recreating every table, then its indexes, then all foreign keys."""
        statements = []
        for table in catalog:
            statements.extend(self.create_table_sql(table))
            for index in table.indexes:
                if not index.is_primary:
                    statements.append(self.create_index_sql(index, table))
        for table in catalog:
            for fk in table.foreign_keys:
                statements.append(self.create_foreign_key_sql(fk, table))
        return statements


def render_column_type(column: Column, version: VersionLike) -> str:
    return OracleGenerator(capabilities_for_version(version)).render_column_type(column)


def render_create_index(index: Index, table: Union[Table, str], version: VersionLike) -> str:
    return OracleGenerator(capabilities_for_version(version)).create_index_sql(index, table)
