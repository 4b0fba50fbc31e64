"""
Reconstruction of the portable schema model from Oracle data dictionary rows.

The rows are the result sets of the statements built by
oraforge.queries.CatalogQueryBuilder. Keys are matched case-insensitively;
every row goes through normalize_row before a field is read.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from oraforge.constants import (
    COMMENT_TYPE_ALIASES,
    COMMENT_TYPE_MARKER,
    FIXED_STRING_VENDOR_TYPES,
    FUNCTION_BASED_INDEX_TYPE,
    NO_COLLATION_SENTINEL,
    NUMERIC_VENDOR_TYPES,
    PRIMARY_INDEX_KEY,
    PortableType,
    VARIABLE_STRING_VENDOR_TYPES,
    VENDOR_TYPE_MAP,
)
from oraforge.exceptions import ExpressionMappingError, IndexRowOrderError, UnknownColumnTypeError
from oraforge.logging_config import get_logger
from oraforge.models import Catalog, Column, ForeignKey, Index, IndexExpression, Table
from oraforge.parsers.base import BaseParser
from oraforge.parsers.expressions import candidate_columns, parse_column_expression
from oraforge.parsers.utils import (
    is_string_literal,
    normalize_row,
    quote_identifier,
    quote_identifier_name,
    to_int,
    unquote_string_literal,
)
from oraforge.platform import DEFAULT_CAPABILITIES, PlatformCapabilities

Row = Mapping[str, Any]

logger = get_logger("parser")

_COMMENT_TYPE = re.compile(r'\(' + COMMENT_TYPE_MARKER + r':([^)]+)\)')


class OracleDictionaryParser(BaseParser):
    def __init__(self, capabilities: Optional[PlatformCapabilities] = None):
        self.capabilities = capabilities or DEFAULT_CAPABILITIES

    def parse(self, raw_rows_by_kind: Mapping[str, Iterable[Row]]) -> Catalog:
        """
        Builds a catalog snapshot from complete dictionary dumps.

        Args:
            raw_rows_by_kind: Row lists under 'columns', 'indexes', 'foreign_keys'
                and optionally 'tables'. Without 'tables' every table named in
                one of the dumps is included.

        Returns:
            Catalog keyed by quoted table identifier
        """
        columns_by_table = group_rows_by_table(raw_rows_by_kind.get('columns') or [])
        indexes_by_table = group_rows_by_table(raw_rows_by_kind.get('indexes') or [])
        fks_by_table = group_rows_by_table(raw_rows_by_kind.get('foreign_keys') or [])

        if raw_rows_by_kind.get('tables') is not None:
            table_names = [_table_name(row) for row in raw_rows_by_kind['tables']]
        else:
            table_names = list(dict.fromkeys(
                list(columns_by_table) + list(indexes_by_table) + list(fks_by_table)
            ))

        catalog = Catalog()
        for table_name in table_names:
            table = self.parse_table(
                table_name,
                columns_by_table.get(table_name, []),
                indexes_by_table.get(table_name, []),
                fks_by_table.get(table_name, []),
            )
            catalog.tables[quote_identifier(table_name)] = table

        logger.info(f"Reconstructed {len(catalog)} tables", extra={'operation': 'reconstruct'})
        return catalog

    def parse_table(self, table_name: str, column_rows: Iterable[Row],
                    index_rows: Iterable[Row], fk_rows: Iterable[Row]) -> Table:
        table = Table(
            name=quote_identifier_name(table_name),
            columns=[self.parse_column(row) for row in column_rows],
            indexes=list(self.parse_indexes(index_rows, table_name).values()),
            foreign_keys=self.parse_foreign_keys(fk_rows),
        )
        logger.debug(
            f"{len(table.columns)} columns, {len(table.indexes)} indexes, {len(table.foreign_keys)} foreign keys",
            extra={'table_name': table_name, 'operation': 'reconstruct'}
        )
        return table

    # Columns

    def parse_column(self, row: Row) -> Column:
        row = normalize_row(row)

        db_type = str(row.get('data_type') or '').lower()
        if db_type.startswith('timestamp('):
            db_type = 'timestamptz' if 'with time zone' in db_type else 'timestamp'

        if db_type not in VENDOR_TYPE_MAP:
            raise UnknownColumnTypeError(
                f"Unknown database type {db_type} requested for column {row.get('column_name')}"
            )
        data_type = VENDOR_TYPE_MAP[db_type]

        default = row.get('data_default')
        if default is not None:
            # Default values returned from the database sometimes have trailing spaces
            default = str(default).strip()
            if default == '' or default.upper() == 'NULL':
                default = None
            elif is_string_literal(default):
                # 'open' is a string, SYSTIMESTAMP AT TIME ZONE 'UTC' an expression
                default = unquote_string_literal(default)

        autoincrement = False
        if str(row.get('identity_column') or '').upper() == 'YES':
            default = None
            autoincrement = True

        length = precision = scale = None
        fixed = False
        if db_type in NUMERIC_VENDOR_TYPES:
            precision = to_int(row.get('data_precision'))
            scale = to_int(row.get('data_scale'))
        elif db_type in FIXED_STRING_VENDOR_TYPES:
            length = to_int(row.get('char_length'))
            fixed = True
        elif db_type in VARIABLE_STRING_VENDOR_TYPES:
            length = to_int(row.get('char_length'))

        if (db_type == 'number' and self.capabilities.treat_number_1_0_as_boolean
                and precision == 1 and scale == 0):
            data_type = PortableType.BOOLEAN
            precision = scale = None

        data_type, comment = self._extract_comment_type(row.get('comments'), data_type)

        platform_options = {}
        collation = row.get('collation')
        if self.capabilities.supports_column_collation and collation and collation != NO_COLLATION_SENTINEL:
            platform_options['collation'] = collation

        return Column(
            name=quote_identifier_name(row.get('column_name') or ''),
            data_type=data_type,
            is_nullable=row.get('nullable') != 'N',
            fixed=fixed,
            length=length,
            precision=precision,
            scale=scale,
            default_value=default,
            autoincrement=autoincrement,
            comment=comment,
            platform_options=platform_options,
        )

    def _extract_comment_type(self, comment: Optional[str],
                              data_type: PortableType) -> Tuple[PortableType, Optional[str]]:
        if not comment:
            return data_type, None
        match = _COMMENT_TYPE.search(comment)
        if match:
            name = match.group(1).strip().lower()
            if name in COMMENT_TYPE_ALIASES:
                data_type = COMMENT_TYPE_ALIASES[name]
            else:
                try:
                    data_type = PortableType(name)
                except ValueError as e:
                    raise UnknownColumnTypeError(f"Unknown column type {name} in comment marker") from e
            comment = _COMMENT_TYPE.sub('', comment, count=1).strip()
        return data_type, comment or None

    # Indexes

    def parse_indexes(self, rows: Iterable[Row], table_name: Optional[str] = None) -> Dict[str, Index]:
        """
        Rebuilds the indexes of one table.

        One row per index column; the rows of an index must be contiguous and
        ordered by column position, as produced by the index listing queries.
        Columns replaced by an expression keep their name in Index.columns and
        the expression text in Index.where.

        Returns:
            Indexes keyed by lower-cased name, the primary key under 'primary'
        """
        indexes: Dict[str, Index] = {}
        # columns of each index that carry CASE expressions
        case_columns: Dict[str, Set[str]] = {}
        finished: Set[str] = set()
        current_name = None
        last_position = None

        for row in rows:
            row = normalize_row(row)
            name = str(row.get('name') or '').lower()

            if name != current_name:
                if name in finished:
                    raise IndexRowOrderError(
                        f"Rows of index {name} on {table_name} are not grouped together"
                    )
                if current_name is not None:
                    finished.add(current_name)
                current_name = name
                last_position = None

            position = to_int(row.get('column_pos'))
            if position is not None:
                if last_position is not None and position <= last_position:
                    raise IndexRowOrderError(
                        f"Rows of index {name} on {table_name} are not ordered by column position"
                    )
                last_position = position

            is_primary = str(row.get('is_primary') or '').lower() == 'p'
            key = PRIMARY_INDEX_KEY if is_primary else name
            index = indexes.get(key)
            if index is None:
                index = Index(
                    name=name,
                    columns=[],
                    is_unique=is_primary or to_int(row.get('is_unique')) == 1,
                    is_primary=is_primary,
                )
                indexes[key] = index

            if not _is_expression_row(row):
                index.columns.append(quote_identifier_name(row.get('column_name')))
                continue

            expression = parse_column_expression(row['column_expression'])
            logger.debug(
                f"Column expression {expression.sql} parsed as {expression.kind} on {expression.field}",
                extra={'table_name': table_name, 'index_name': name, 'operation': 'parse_index'}
            )
            self._attach_expression(index, expression, case_columns.setdefault(key, set()))

        return indexes

    def _attach_expression(self, index: Index, expression: IndexExpression, case_columns: Set[str]):
        field = quote_identifier_name(expression.field)
        if expression.kind == 'case' and field in case_columns:
            # another value range of a column already in this index
            index.expressions[field].append(expression)
            index.where[field] = ", ".join(e.sql for e in index.expressions[field])
            return

        column = self._claim_column(index, expression)
        index.columns.append(column)
        if expression.kind == 'none':
            return
        index.expressions[column] = [expression]
        index.where[column] = expression.sql
        if expression.kind == 'case':
            case_columns.add(column)

    def _claim_column(self, index: Index, expression: IndexExpression) -> str:
        for candidate in candidate_columns(expression):
            column = quote_identifier_name(candidate)
            if column not in index.columns:
                return column
        raise ExpressionMappingError(expression.sql, index.name)

    # Foreign keys

    def parse_foreign_keys(self, rows: Iterable[Row]) -> List[ForeignKey]:
        constraints: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            row = normalize_row(row)
            name = row.get('constraint_name')
            constraint = constraints.get(name)
            if constraint is None:
                delete_rule = row.get('delete_rule')
                if delete_rule == 'NO ACTION':
                    delete_rule = None
                constraint = {
                    'local': {},
                    'foreign': {},
                    'ref_table': row.get('references_table'),
                    'on_delete': delete_rule,
                    'table_name': row.get('table_name'),
                }
                constraints[name] = constraint

            position = to_int(row.get('position'))
            constraint['local'][position] = quote_identifier_name(row.get('local_column'))
            constraint['foreign'][position] = quote_identifier_name(row.get('foreign_column'))

        return [
            ForeignKey(
                name=quote_identifier_name(name),
                column_names=[c['local'][p] for p in sorted(c['local'])],
                ref_table=quote_identifier_name(c['ref_table']),
                ref_column_names=[c['foreign'][p] for p in sorted(c['foreign'])],
                on_delete=c['on_delete'],
                table_name=quote_identifier_name(c['table_name']) or None,
            )
            for name, c in constraints.items()
        ]


def _is_expression_row(row: Dict[str, Any]) -> bool:
    index_type = str(row.get('type') or '').upper()
    expression = row.get('column_expression')
    return index_type.startswith(FUNCTION_BASED_INDEX_TYPE) and bool(expression and str(expression).strip())


def _table_name(row: Any) -> str:
    if isinstance(row, str):
        return row
    return normalize_row(row)['table_name']


def group_rows_by_table(rows: Iterable[Row]) -> Dict[str, List[Dict[str, Any]]]:
    """Splits a dictionary dump into per-table row lists, keeping row order."""
    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for row in rows:
        row = normalize_row(row)
        grouped.setdefault(row['table_name'], []).append(row)
    return grouped


def reconstruct_catalog(raw_rows_by_kind: Mapping[str, Iterable[Row]],
                        capabilities: Optional[PlatformCapabilities] = None) -> Catalog:
    return OracleDictionaryParser(capabilities).parse(raw_rows_by_kind)
