"""
Tests for Oracle DDL rendering.
"""
import logging

import pytest

from oraforge.constants import PortableType
from oraforge.exceptions import IndexDefinitionError
from oraforge.generators.oracle import OracleGenerator, render_column_type, render_create_index
from oraforge.models import Catalog, Column, ForeignKey, Index, Table
from oraforge.platform import PlatformCapabilities

NLSSORT_EMAIL = "NLSSORT(\"EMAIL\",'nls_sort=''XGERMAN_CI''')"


@pytest.fixture
def gen_12_2():
    return OracleGenerator(PlatformCapabilities.for_version("12.2"))


@pytest.fixture
def gen_12_1():
    return OracleGenerator(PlatformCapabilities.for_version("12.1"))


@pytest.fixture
def gen_11():
    return OracleGenerator(PlatformCapabilities.for_version("11.2"))


class TestColumnTypes:
    @pytest.mark.parametrize("data_type,expected", [
        (PortableType.BOOLEAN, "NUMBER(1,0)"),
        (PortableType.INTEGER, "NUMBER(10,0)"),
        (PortableType.BIGINT, "NUMBER(20,0)"),
        (PortableType.SMALLINT, "NUMBER(5,0)"),
        (PortableType.DECIMAL, "NUMBER(10, 0)"),
        (PortableType.TIMESTAMPTZ, "TIMESTAMP(6) WITH TIME ZONE"),
        (PortableType.TEXT, "CLOB"),
        (PortableType.BLOB, "BLOB"),
        (PortableType.DATE, "DATE"),
    ])
    def test_12_1_types(self, data_type, expected):
        column = Column(name="C", data_type=data_type)
        assert render_column_type(column, "12.1") == expected
        assert render_column_type(column, "12.2") == expected

    @pytest.mark.parametrize("data_type,expected", [
        (PortableType.BOOLEAN, "NUMBER(1)"),
        (PortableType.INTEGER, "NUMBER(10)"),
        (PortableType.BIGINT, "NUMBER(20)"),
        (PortableType.SMALLINT, "NUMBER(5)"),
        (PortableType.DECIMAL, "NUMERIC(10, 0)"),
        (PortableType.TIMESTAMPTZ, "TIMESTAMP(0) WITH TIME ZONE"),
    ])
    def test_baseline_types(self, data_type, expected):
        assert render_column_type(Column(name="C", data_type=data_type), "11.2") == expected

    def test_decimal_precision_and_scale(self, gen_12_2):
        column = Column(name="PRICE", data_type=PortableType.DECIMAL, precision=8, scale=2)
        assert gen_12_2.render_column_type(column) == "NUMBER(8, 2)"

    def test_timestamptz_ignores_requested_precision(self, gen_12_2):
        column = Column(name="TS", data_type=PortableType.TIMESTAMPTZ, precision=3)
        assert gen_12_2.render_column_type(column) == "TIMESTAMP(6) WITH TIME ZONE"

    def test_strings(self, gen_12_2):
        assert gen_12_2.render_column_type(Column(name="S", data_type=PortableType.STRING, length=20)) == "VARCHAR2(20)"
        assert gen_12_2.render_column_type(
            Column(name="S", data_type=PortableType.STRING, length=3, fixed=True)) == "CHAR(3)"
        assert gen_12_2.render_column_type(Column(name="S", data_type=PortableType.STRING)) == "VARCHAR2(255)"

    def test_binary(self, gen_12_2):
        assert gen_12_2.render_column_type(Column(name="B", data_type=PortableType.BINARY, length=16)) == "RAW(16)"

    def test_deterministic(self, gen_12_2):
        column = Column(name="PRICE", data_type=PortableType.DECIMAL, precision=8, scale=2)
        assert gen_12_2.render_column_type(column) == gen_12_2.render_column_type(column)


class TestIdentityColumns:
    def test_decimal_identity(self, gen_12_1):
        column = Column(name="ID", data_type=PortableType.DECIMAL, autoincrement=True)
        assert gen_12_1.render_column_type(column) == "NUMBER(10, 0) GENERATED BY DEFAULT ON NULL AS IDENTITY"

    def test_integer_identity(self, gen_12_2):
        column = Column(name="ID", data_type=PortableType.INTEGER, autoincrement=True)
        assert gen_12_2.render_column_type(column) == "NUMBER(10,0) GENERATED BY DEFAULT ON NULL AS IDENTITY"

    def test_no_identity_before_12_1(self, gen_11):
        column = Column(name="ID", data_type=PortableType.INTEGER, autoincrement=True)
        assert gen_11.render_column_type(column) == "NUMBER(10)"

    def test_identity_has_no_default(self, gen_12_2):
        column = Column(name="ID", data_type=PortableType.INTEGER, autoincrement=True, is_nullable=False)
        assert gen_12_2.column_declaration_sql(column) == \
            "ID NUMBER(10,0) GENERATED BY DEFAULT ON NULL AS IDENTITY NOT NULL"


class TestDefaults:
    def test_systimestamp_expression_is_bare(self, gen_12_2):
        column = Column(name="CREATED_AT", data_type=PortableType.TIMESTAMP,
                        default_value="SYSTIMESTAMP AT TIME ZONE 'UTC'")
        assert gen_12_2.default_value_sql(column) == " DEFAULT SYSTIMESTAMP AT TIME ZONE 'UTC'"

    def test_systimestamp_marker_is_case_insensitive(self, gen_12_2):
        column = Column(name="CREATED_AT", data_type=PortableType.STRING, default_value="systimestamp")
        assert gen_12_2.default_value_sql(column) == " DEFAULT systimestamp"

    def test_string_literal_is_quoted(self, gen_12_2):
        column = Column(name="STATUS", data_type=PortableType.STRING, default_value="it's open")
        assert gen_12_2.default_value_sql(column) == " DEFAULT 'it''s open'"

    def test_numeric_default(self, gen_12_2):
        column = Column(name="QTY", data_type=PortableType.INTEGER, default_value="0")
        assert gen_12_2.default_value_sql(column) == " DEFAULT 0"

    def test_boolean_default(self, gen_12_2):
        column = Column(name="ACTIVE", data_type=PortableType.BOOLEAN, default_value=True)
        assert gen_12_2.default_value_sql(column) == " DEFAULT 1"

    def test_null_default(self, gen_12_2):
        assert gen_12_2.default_value_sql(Column(name="N", data_type=PortableType.TEXT)) == " DEFAULT NULL"
        assert gen_12_2.default_value_sql(
            Column(name="N", data_type=PortableType.TEXT, is_nullable=False)) == ""

    def test_current_date(self, gen_12_2):
        column = Column(name="D", data_type=PortableType.DATE, default_value="TRUNC(SYSDATE)")
        assert gen_12_2.default_value_sql(column) == " DEFAULT TRUNC(SYSDATE)"


class TestCollation:
    def _column(self):
        return Column(name="NAME", data_type=PortableType.STRING, length=50, is_nullable=False,
                      default_value="x", platform_options={'collation': 'BINARY_CI'})

    def test_collation_between_type_and_default(self, gen_12_2):
        assert gen_12_2.column_declaration_sql(self._column()) == \
            "NAME VARCHAR2(50) COLLATE BINARY_CI DEFAULT 'x' NOT NULL"

    def test_collation_dropped_before_12_2(self, gen_12_1, caplog):
        with caplog.at_level(logging.WARNING, logger="oraforge"):
            assert gen_12_1.column_declaration_sql(self._column()) == "NAME VARCHAR2(50) DEFAULT 'x' NOT NULL"
        assert "BINARY_CI" in caplog.text


class TestCreateIndex:
    def test_plain_index(self):
        index = Index(name="IDX_NAME", columns=["LAST_NAME", "FIRST_NAME"])
        assert render_create_index(index, "USERS", "12.2") == \
            "CREATE INDEX IDX_NAME ON USERS (LAST_NAME, FIRST_NAME)"

    def test_expression_replaces_column(self):
        index = Index(name="IDX_EMAIL", columns=["EMAIL"], is_unique=True, where={"EMAIL": NLSSORT_EMAIL})
        assert render_create_index(index, "USERS", "12.2") == \
            f"CREATE UNIQUE INDEX IDX_EMAIL ON USERS ({NLSSORT_EMAIL})"

    def test_accepts_table(self):
        index = Index(name="IDX_STATUS", columns=["STATUS"])
        assert render_create_index(index, Table(name="ORDERS"), "12.1") == \
            "CREATE INDEX IDX_STATUS ON ORDERS (STATUS)"

    def test_zero_columns_rejected(self):
        with pytest.raises(IndexDefinitionError, match="IDX_EMPTY"):
            render_create_index(Index(name="IDX_EMPTY", columns=[]), "USERS", "12.2")

    def test_zero_columns_rejected_for_primary(self):
        with pytest.raises(ValueError):
            render_create_index(Index(name="PK", columns=[], is_primary=True), "USERS", "12.2")

    def test_primary_key(self):
        index = Index(name="PK_USERS", columns=["ID"], is_unique=True, is_primary=True)
        assert render_create_index(index, "USERS", "12.2") == \
            "ALTER TABLE USERS ADD CONSTRAINT PK_USERS PRIMARY KEY (ID)"

    def test_unnamed_primary_key(self):
        index = Index(name="primary", columns=["ID"], is_unique=True, is_primary=True)
        assert render_create_index(index, "USERS", "12.2") == "ALTER TABLE USERS ADD PRIMARY KEY (ID)"


class TestCreateTable:
    def _users(self):
        return Table(
            name="USERS",
            columns=[
                Column(name="ID", data_type=PortableType.INTEGER, is_nullable=False, autoincrement=True),
                Column(name="EMAIL", data_type=PortableType.STRING, length=255, comment="Login name"),
            ],
            indexes=[
                Index(name="sys_c001", columns=["ID"], is_unique=True, is_primary=True),
                Index(name="idx_email", columns=["EMAIL"], where={"EMAIL": NLSSORT_EMAIL}),
            ],
        )

    def test_create_table(self, gen_12_2):
        statements = gen_12_2.create_table_sql(self._users())
        assert statements[0] == (
            "CREATE TABLE USERS (\n"
            "    ID NUMBER(10,0) GENERATED BY DEFAULT ON NULL AS IDENTITY NOT NULL,\n"
            "    EMAIL VARCHAR2(255) DEFAULT NULL,\n"
            "    PRIMARY KEY (ID)\n"
            ")"
        )
        assert statements[1] == "COMMENT ON COLUMN USERS.EMAIL IS 'Login name'"

    def test_catalog_puts_foreign_keys_last(self, gen_12_2):
        orders = Table(
            name="ORDERS",
            columns=[Column(name="USER_ID", data_type=PortableType.INTEGER)],
            foreign_keys=[ForeignKey(name="FK_ORDERS_USER", column_names=["USER_ID"], ref_table="USERS",
                                     ref_column_names=["ID"], on_delete="CASCADE", table_name="ORDERS")],
        )
        catalog = Catalog(tables={'"ORDERS"': orders, '"USERS"': self._users()})
        statements = gen_12_2.create_catalog_sql(catalog)

        assert statements[0].startswith("CREATE TABLE ORDERS")
        assert f"CREATE INDEX idx_email ON USERS ({NLSSORT_EMAIL})" in statements
        assert not any("sys_c001" in stmt for stmt in statements)
        assert statements[-1] == (
            "ALTER TABLE ORDERS ADD CONSTRAINT FK_ORDERS_USER "
            "FOREIGN KEY (USER_ID) REFERENCES USERS (ID) ON DELETE CASCADE"
        )
