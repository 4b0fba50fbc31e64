"""Oracle data dictionary queries for catalog introspection."""

from dataclasses import dataclass
from typing import Optional, Union

from oraforge.constants import CURRENT_SCHEMA_OWNER
from oraforge.parsers.utils import normalize_identifier, quote_string_literal
from oraforge.platform import DEFAULT_CAPABILITIES, OracleVersion, PlatformCapabilities, capabilities_for_version


@dataclass(frozen=True)
class CatalogQueries:
    """The statements of one catalog pass, each listing all tables at once."""
    tables_sql: str
    columns_sql: str
    indexes_sql: str
    foreign_keys_sql: str


class CatalogQueryBuilder:
    """
    Builds the data dictionary SELECT statements for one schema.

    Without an owner the user_* views of the connected schema are read; with
    an owner the all_* views, filtered by that owner. Index rows are ordered by
    (index name, column position), which the index reconstruction relies on.
    """

    def __init__(self, owner: Optional[str] = None, capabilities: Optional[PlatformCapabilities] = None):
        if owner is not None and (not owner.strip() or owner.strip() == CURRENT_SCHEMA_OWNER):
            owner = None
        self.owner = normalize_identifier(owner) if owner is not None else None
        self.capabilities = capabilities or DEFAULT_CAPABILITIES

    @property
    def owner_literal(self) -> Optional[str]:
        if self.owner is None:
            return None
        return quote_string_literal(self.owner)

    def _view(self, name: str) -> str:
        prefix = "all" if self.owner is not None else "user"
        return f"{prefix}_{name}"

    def list_tables_sql(self) -> str:
        owner_condition = ""
        if self.owner is not None:
            owner_condition = f"owner = {self.owner_literal} AND "
        return f"""SELECT table_name
            FROM {self._view('tables')}
            WHERE {owner_condition}nested = 'NO'
              AND secondary = 'N'
              AND table_name NOT LIKE 'BIN$%'
            ORDER BY table_name"""

    def list_tables_columns_sql(self) -> str:
        owner_condition = ""
        if self.owner is not None:
            owner_condition = f"""
              AND d.owner = c.owner
              AND c.owner = {self.owner_literal}"""
        return f"""SELECT c.*, d.comments
            FROM {self._view('tab_columns')} c, {self._view('col_comments')} d
            WHERE d.table_name = c.table_name
              AND d.column_name = c.column_name{owner_condition}
            ORDER BY c.column_name"""

    def list_table_indexes_sql(self, table: str) -> str:
        """Index rows of a single table."""
        table_literal = quote_string_literal(normalize_identifier(table))
        return self._indexes_sql(f"index_columns.table_name = {table_literal}")

    def list_tables_indexes_sql(self) -> str:
        return self._indexes_sql(None)

    def _indexes_sql(self, table_condition: Optional[str]) -> str:
        index_owner_join = ""
        expression_owner_join = ""
        constraint_owner_join = ""
        conditions = []
        if self.owner is not None:
            index_owner_join = " AND uind.owner = index_columns.index_owner"
            expression_owner_join = "\n                  AND index_expressions.index_owner = index_columns.index_owner"
            constraint_owner_join = f"\n                  AND constraints.owner = {self.owner_literal}"
            conditions.append(f"index_columns.index_owner = {self.owner_literal}")
        if table_condition:
            conditions.append(table_condition)
        where = f"\n            WHERE {' AND '.join(conditions)}" if conditions else ""

        return f"""SELECT index_columns.table_name AS table_name,
              index_columns.index_name AS name,
              (
                  SELECT uind.index_type
                  FROM   {self._view('indexes')} uind
                  WHERE  uind.index_name = index_columns.index_name{index_owner_join}
              ) AS type,
              decode(
                  (
                      SELECT uind.uniqueness
                      FROM   {self._view('indexes')} uind
                      WHERE  uind.index_name = index_columns.index_name{index_owner_join}
                  ),
                  'NONUNIQUE', 0,
                  'UNIQUE', 1
              ) AS is_unique,
              index_columns.column_name AS column_name,
              index_columns.column_position AS column_pos,
              constraints.constraint_type AS is_primary,
              CASE WHEN index_columns.column_name LIKE 'SYS_%'
                   THEN index_expressions.column_expression
                   ELSE NULL END AS column_expression
            FROM {self._view('ind_columns')} index_columns
            LEFT JOIN {self._view('ind_expressions')} index_expressions
              ON (index_expressions.table_name = index_columns.table_name
                  AND index_expressions.index_name = index_columns.index_name
                  AND index_expressions.column_position = index_columns.column_position{expression_owner_join})
            LEFT JOIN {self._view('constraints')} constraints
              ON (constraints.index_name = index_columns.index_name{constraint_owner_join}){where}
            ORDER BY index_columns.index_name ASC, index_columns.column_position ASC"""

    def list_tables_foreign_keys_sql(self) -> str:
        owner_condition = ""
        if self.owner is not None:
            owner_condition = (
                f"\n              AND alc.owner = {self.owner_literal} AND r_alc.owner = {self.owner_literal}"
                f"\n              AND cols.owner = {self.owner_literal} AND r_cols.owner = {self.owner_literal}"
            )
        constraints = self._view('constraints')
        cons_columns = self._view('cons_columns')
        return f"""SELECT alc.constraint_name,
              alc.delete_rule,
              cols.column_name "local_column",
              cols.position,
              r_alc.table_name "references_table",
              r_cols.column_name "foreign_column",
              alc.table_name
            FROM {cons_columns} cols
            LEFT JOIN {constraints} alc
              ON alc.constraint_name = cols.constraint_name
            LEFT JOIN {constraints} r_alc
              ON alc.r_constraint_name = r_alc.constraint_name
            LEFT JOIN {cons_columns} r_cols
              ON r_alc.constraint_name = r_cols.constraint_name AND cols.position = r_cols.position
            WHERE alc.constraint_name = cols.constraint_name
              AND alc.constraint_type = 'R'{owner_condition}
            ORDER BY cols.constraint_name ASC, cols.position ASC"""

    def build(self) -> CatalogQueries:
        return CatalogQueries(
            tables_sql=self.list_tables_sql(),
            columns_sql=self.list_tables_columns_sql(),
            indexes_sql=self.list_tables_indexes_sql(),
            foreign_keys_sql=self.list_tables_foreign_keys_sql(),
        )


def build_catalog_queries(owner: Optional[str] = None,
                          version: Union[str, OracleVersion, PlatformCapabilities, None] = None) -> CatalogQueries:
    capabilities = capabilities_for_version(version) if version is not None else None
    return CatalogQueryBuilder(owner, capabilities).build()
