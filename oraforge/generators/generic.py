from typing import Dict, List, Union

from oraforge.constants import INTEGER_TYPES, PortableType
from oraforge.exceptions import IndexDefinitionError
from oraforge.generators.base import BaseGenerator
from oraforge.models import Column, ForeignKey, Index, Table
from oraforge.parsers.utils import quote_string_literal


class GenericGenerator(BaseGenerator):
    """Portable DDL renderings that dialect generators fall back to."""

    current_timestamp_sql = "CURRENT_TIMESTAMP"
    current_date_sql = "CURRENT_DATE"
    varchar_default_length = 255
    binary_default_length = 255

    _type_renderers: Dict[PortableType, str] = {
        PortableType.BOOLEAN: '_boolean_type_sql',
        PortableType.INTEGER: '_integer_type_sql',
        PortableType.BIGINT: '_bigint_type_sql',
        PortableType.SMALLINT: '_smallint_type_sql',
        PortableType.DECIMAL: '_decimal_type_sql',
        PortableType.FLOAT: '_float_type_sql',
        PortableType.STRING: '_string_type_sql',
        PortableType.TEXT: '_text_type_sql',
        PortableType.GUID: '_guid_type_sql',
        PortableType.JSON: '_json_type_sql',
        PortableType.BINARY: '_binary_type_sql',
        PortableType.BLOB: '_blob_type_sql',
        PortableType.DATE: '_date_type_sql',
        PortableType.TIMESTAMP: '_timestamp_type_sql',
        PortableType.TIMESTAMPTZ: '_timestamptz_type_sql',
    }

    def render_column_type(self, column: Column) -> str:
        renderer = getattr(self, self._type_renderers[column.data_type])
        return renderer(column)

    def _boolean_type_sql(self, column):
        return "BOOLEAN"

    def _integer_type_sql(self, column):
        return "INTEGER"

    def _bigint_type_sql(self, column):
        return "BIGINT"

    def _smallint_type_sql(self, column):
        return "SMALLINT"

    def _decimal_type_sql(self, column):
        precision, scale = self._precision_and_scale(column)
        return f"NUMERIC({precision}, {scale})"

    def _precision_and_scale(self, column):
        # unset or zero precision and scale fall back to 10 and 0
        return column.precision or 10, column.scale or 0

    def _float_type_sql(self, column):
        return "DOUBLE PRECISION"

    def _string_type_sql(self, column):
        length = column.length or self.varchar_default_length
        return f"CHAR({length})" if column.fixed else f"VARCHAR({length})"

    def _text_type_sql(self, column):
        return "CLOB"

    def _guid_type_sql(self, column):
        return "CHAR(36)"

    def _json_type_sql(self, column):
        return self._text_type_sql(column)

    def _binary_type_sql(self, column):
        length = column.length or self.binary_default_length
        return f"BINARY({length})" if column.fixed else f"VARBINARY({length})"

    def _blob_type_sql(self, column):
        return "BLOB"

    def _date_type_sql(self, column):
        return "DATE"

    def _timestamp_type_sql(self, column):
        return "TIMESTAMP(0)"

    def _timestamptz_type_sql(self, column):
        return "TIMESTAMP(0) WITH TIME ZONE"

    def default_value_sql(self, column: Column) -> str:
        if column.default_value is None:
            return " DEFAULT NULL" if column.is_nullable else ""

        default = column.default_value
        if column.data_type in INTEGER_TYPES or column.data_type in (PortableType.DECIMAL, PortableType.FLOAT):
            return f" DEFAULT {default}"
        if column.data_type in (PortableType.TIMESTAMP, PortableType.TIMESTAMPTZ) \
                and str(default).upper() in (self.current_timestamp_sql, "CURRENT_TIMESTAMP"):
            return f" DEFAULT {default}"
        if column.data_type == PortableType.DATE and str(default).upper() in (self.current_date_sql, "CURRENT_DATE"):
            return f" DEFAULT {default}"
        if column.data_type == PortableType.BOOLEAN:
            return f" DEFAULT {self.convert_boolean(default)}"
        return f" DEFAULT {quote_string_literal(str(default))}"

    def convert_boolean(self, value) -> Union[int, str]:
        if isinstance(value, bool):
            return int(value)
        text = str(value).strip().lower()
        if text in ('1', 'true'):
            return 1
        if text in ('0', 'false'):
            return 0
        return str(value)

    def column_declaration_sql(self, column: Column) -> str:
        def_str = f"{column.name} {self.render_column_type(column)}"
        def_str += self.default_value_sql(column)
        if not column.is_nullable:
            def_str += " NOT NULL"
        return def_str

    def create_index_sql(self, index: Index, table: Union[Table, str]) -> str:
        table_name = table.name if isinstance(table, Table) else table
        if not index.columns:
            raise IndexDefinitionError(f"Incomplete definition of index {index.name}. 'columns' required.")
        if index.is_primary:
            return self.create_primary_key_sql(index, table_name)

        unique_str = "UNIQUE " if index.is_unique else ""
        return f"CREATE {unique_str}INDEX {index.name} ON {table_name} ({self.index_columns_sql(index)})"

    def index_columns_sql(self, index: Index) -> str:
        return ", ".join(index.columns)

    def create_primary_key_sql(self, index: Index, table: Union[Table, str]) -> str:
        table_name = table.name if isinstance(table, Table) else table
        cols = ", ".join(index.columns)
        if index.name and index.name != 'primary':
            return f"ALTER TABLE {table_name} ADD CONSTRAINT {index.name} PRIMARY KEY ({cols})"
        return f"ALTER TABLE {table_name} ADD PRIMARY KEY ({cols})"

    def create_table_sql(self, table: Table) -> List[str]:
        columns_def = [self.column_declaration_sql(col) for col in table.columns]

        pk = table.primary_key
        if pk and pk.columns:
            columns_def.append(f"PRIMARY KEY ({', '.join(pk.columns)})")

        statements = [f"CREATE TABLE {table.name} (\n    " + ",\n    ".join(columns_def) + "\n)"]
        for col in table.columns:
            if col.comment:
                statements.append(
                    f"COMMENT ON COLUMN {table.name}.{col.name} IS {quote_string_literal(col.comment)}"
                )
        return statements

    def create_foreign_key_sql(self, fk: ForeignKey, table: Union[Table, str]) -> str:
        table_name = table.name if isinstance(table, Table) else table
        cols = ", ".join(fk.column_names)
        ref_cols = ", ".join(fk.ref_column_names)
        stmt = (f"ALTER TABLE {table_name} ADD CONSTRAINT {fk.name} "
                f"FOREIGN KEY ({cols}) REFERENCES {fk.ref_table} ({ref_cols})")
        if fk.on_delete:
            stmt += f" ON DELETE {fk.on_delete}"
        return stmt
