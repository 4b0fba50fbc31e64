"""
oraforge - Oracle 12c catalog introspection and DDL generation.
"""

from oraforge.error_classifier import classify_error
from oraforge.generators.oracle import OracleGenerator, render_column_type, render_create_index
from oraforge.introspector import OracleIntrospector
from oraforge.parsers.oracle import OracleDictionaryParser, reconstruct_catalog
from oraforge.platform import PlatformCapabilities, parse_version
from oraforge.queries import CatalogQueryBuilder, build_catalog_queries

__all__ = [
    'CatalogQueryBuilder',
    'OracleDictionaryParser',
    'OracleGenerator',
    'OracleIntrospector',
    'PlatformCapabilities',
    'build_catalog_queries',
    'classify_error',
    'parse_version',
    'reconstruct_catalog',
    'render_column_type',
    'render_create_index',
]
