"""
Shared fixtures: dictionary row builders and an in-memory executor.
"""
import logging

import pytest

from oraforge.exceptions import DriverError


class FakeExecutor:
    """Answers the catalog queries with canned rows, recognized by the views they read."""

    def __init__(self, tables=None, columns=None, indexes=None, foreign_keys=None, fail_on=None):
        self.rows = {
            'tables': tables or [],
            'columns': columns or [],
            'indexes': indexes or [],
            'foreign_keys': foreign_keys or [],
        }
        self.fail_on = fail_on
        self.executed = []

    @staticmethod
    def kind_of(sql):
        if 'tab_columns' in sql:
            return 'columns'
        if 'ind_columns' in sql:
            return 'indexes'
        if 'cons_columns' in sql:
            return 'foreign_keys'
        return 'tables'

    def execute(self, sql, params=None):
        self.executed.append(sql)
        kind = self.kind_of(sql)
        if kind == self.fail_on:
            raise DriverError(f"ORA-00942: table or view does not exist ({kind})", code="942")
        return [dict(row) for row in self.rows[kind]]

    def vendor_error_code(self, exc):
        return getattr(exc, 'code', None)


@pytest.fixture
def column_row():
    """Builds a user_tab_columns + user_col_comments row with upper-case keys, as Oracle reports them."""
    def _build(column_name, data_type, table_name='USERS', **overrides):
        row = {
            'TABLE_NAME': table_name,
            'COLUMN_NAME': column_name,
            'DATA_TYPE': data_type,
            'DATA_LENGTH': None,
            'DATA_PRECISION': None,
            'DATA_SCALE': None,
            'CHAR_LENGTH': 0,
            'NULLABLE': 'Y',
            'DATA_DEFAULT': None,
            'IDENTITY_COLUMN': 'NO',
            'COLLATION': None,
            'COMMENTS': None,
        }
        row.update({key.upper(): value for key, value in overrides.items()})
        return row
    return _build


@pytest.fixture
def index_row():
    """Builds a row of the index listing query."""
    def _build(name, column_name, column_pos, table_name='USERS', type='NORMAL',
               is_unique=0, is_primary=None, column_expression=None):
        return {
            'TABLE_NAME': table_name,
            'NAME': name,
            'TYPE': type,
            'IS_UNIQUE': is_unique,
            'COLUMN_NAME': column_name,
            'COLUMN_POS': column_pos,
            'IS_PRIMARY': is_primary,
            'COLUMN_EXPRESSION': column_expression,
        }
    return _build


@pytest.fixture
def fk_row():
    """Builds a row of the foreign key listing query."""
    def _build(constraint_name, local_column, references_table, foreign_column,
               position=1, table_name='ORDERS', delete_rule='NO ACTION'):
        return {
            'CONSTRAINT_NAME': constraint_name,
            'DELETE_RULE': delete_rule,
            'local_column': local_column,
            'POSITION': position,
            'references_table': references_table,
            'foreign_column': foreign_column,
            'TABLE_NAME': table_name,
        }
    return _build


@pytest.fixture
def make_executor():
    return FakeExecutor


@pytest.fixture(autouse=True)
def reset_oraforge_logger():
    """setup_logging binds a handler to the current stderr; drop it after each test."""
    yield
    logger = logging.getLogger("oraforge")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
