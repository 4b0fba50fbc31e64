from typing import Dict, Optional

from oraforge.connection import Executor
from oraforge.logging_config import get_logger
from oraforge.models import Catalog, Index
from oraforge.parsers.oracle import OracleDictionaryParser
from oraforge.parsers.utils import compact_sql
from oraforge.platform import DEFAULT_CAPABILITIES, PlatformCapabilities
from oraforge.queries import CatalogQueryBuilder

logger = get_logger("introspector")


class OracleIntrospector:
    """
    Reads a schema's tables, columns, indexes and foreign keys.

    Each metadata kind is fetched with one query for all tables instead of one
    query per table. A failure anywhere fails the whole pass.
    """

    def __init__(self, executor: Executor, owner: Optional[str] = None,
                 capabilities: Optional[PlatformCapabilities] = None):
        self.executor = executor
        self.capabilities = capabilities or DEFAULT_CAPABILITIES
        self.queries = CatalogQueryBuilder(owner, self.capabilities)
        self.parser = OracleDictionaryParser(self.capabilities)

    def _fetch(self, kind: str, sql: str):
        logger.debug(f"Fetching {kind}: {compact_sql(sql)}", extra={'operation': 'introspect'})
        rows = self.executor.execute(sql)
        logger.debug(f"Fetched {len(rows)} {kind} rows", extra={'operation': 'introspect'})
        return rows

    def introspect(self) -> Catalog:
        queries = self.queries.build()
        version = str(self.capabilities.version)
        logger.info(
            f"Introspecting schema {self.queries.owner or '(current)'}",
            extra={'oracle_version': version, 'operation': 'introspect'}
        )

        try:
            raw_rows_by_kind = {
                'tables': self._fetch('tables', queries.tables_sql),
                'columns': self._fetch('columns', queries.columns_sql),
                'foreign_keys': self._fetch('foreign_keys', queries.foreign_keys_sql),
                'indexes': self._fetch('indexes', queries.indexes_sql),
            }
            catalog = self.parser.parse(raw_rows_by_kind)
        except Exception as e:
            logger.error(f"Catalog introspection failed: {e}", extra={'oracle_version': version, 'operation': 'introspect'})
            raise

        logger.info(f"Introspected {len(catalog)} tables", extra={'oracle_version': version, 'operation': 'introspect'})
        return catalog

    def list_table_indexes(self, table_name: str) -> Dict[str, Index]:
        """Indexes of a single table, keyed like OracleDictionaryParser.parse_indexes."""
        rows = self._fetch('indexes', self.queries.list_table_indexes_sql(table_name))
        return self.parser.parse_indexes(rows, table_name)
