from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Optional, Any, Dict, Mapping, Tuple, Union

from oraforge.constants import PortableType


@dataclass(frozen=True)
class Column:
    name: str
    data_type: PortableType
    is_nullable: bool = True
    fixed: bool = False
    unsigned: bool = False
    length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default_value: Optional[Any] = None
    autoincrement: bool = False
    comment: Optional[str] = None
    # read-only after construction and left out of the hash
    platform_options: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, 'platform_options', MappingProxyType(dict(self.platform_options)))
        if self.autoincrement and self.default_value is not None:
            raise ValueError(f"Column {self.name} is autoincrement and cannot carry a default value")

    def __repr__(self):
        return f"Column(name='{self.name}', type='{self.data_type.value}')"

    @property
    def collation(self) -> Optional[str]:
        return self.platform_options.get('collation')

    def to_dict(self):
        return {
            "name": self.name,
            "data_type": self.data_type.value,
            "is_nullable": self.is_nullable,
            "fixed": self.fixed,
            "unsigned": self.unsigned,
            "length": self.length,
            "precision": self.precision,
            "scale": self.scale,
            "default_value": str(self.default_value) if self.default_value is not None else None,
            "autoincrement": self.autoincrement,
            "comment": self.comment,
            "platform_options": dict(self.platform_options),
        }


# Parsed index column expressions. Every variant names the column it is
# attached to (field) and keeps the normalized expression text (sql).

@dataclass(frozen=True)
class FunctionExpression:
    field: str
    sql: str
    function: str
    params: Tuple[str, ...] = ()
    kind: str = "function"

    def to_dict(self):
        return {"kind": self.kind, "field": self.field, "sql": self.sql,
                "function": self.function, "params": list(self.params)}


@dataclass(frozen=True)
class CaseExpression:
    field: str
    sql: str
    when: str
    then: str
    else_: Optional[str] = None
    kind: str = "case"

    def to_dict(self):
        return {"kind": self.kind, "field": self.field, "sql": self.sql,
                "when": self.when, "then": self.then, "else": self.else_}


@dataclass(frozen=True)
class NoExpression:
    """An expression that does not change the index definition, e.g. SYS_EXTRACT_UTC(col)."""
    field: str
    sql: str
    kind: str = "none"

    def to_dict(self):
        return {"kind": self.kind, "field": self.field, "sql": self.sql}


IndexExpression = Union[FunctionExpression, CaseExpression, NoExpression]


@dataclass
class Index:
    name: str
    columns: List[str]
    is_unique: bool = False
    is_primary: bool = False
    where: Dict[str, str] = field(default_factory=dict) # column -> SQL rendered in its place
    expressions: Dict[str, List[IndexExpression]] = field(default_factory=dict)

    def to_dict(self):
        return {
            "name": self.name,
            "columns": self.columns,
            "is_unique": self.is_unique,
            "is_primary": self.is_primary,
            "where": dict(self.where),
            "expressions": {
                col: [e.to_dict() for e in exprs] for col, exprs in self.expressions.items()
            },
        }


@dataclass
class ForeignKey:
    name: str
    column_names: List[str]
    ref_table: str
    ref_column_names: List[str]
    on_delete: Optional[str] = None
    table_name: Optional[str] = None

    def to_dict(self):
        return {
            "name": self.name,
            "column_names": self.column_names,
            "ref_table": self.ref_table,
            "ref_column_names": self.ref_column_names,
            "on_delete": self.on_delete,
            "table_name": self.table_name,
        }


@dataclass
class Table:
    name: str
    columns: List[Column] = field(default_factory=list)
    indexes: List[Index] = field(default_factory=list)
    foreign_keys: List[ForeignKey] = field(default_factory=list)

    def get_column(self, name: str) -> Optional[Column]:
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def get_index(self, name: str) -> Optional[Index]:
        for idx in self.indexes:
            if idx.name.lower() == name.lower():
                return idx
        return None

    @property
    def primary_key(self) -> Optional[Index]:
        for idx in self.indexes:
            if idx.is_primary:
                return idx
        return None

    def to_dict(self):
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "indexes": [i.to_dict() for i in self.indexes],
            "foreign_keys": [fk.to_dict() for fk in self.foreign_keys],
        }


@dataclass
class Catalog:
    """Snapshot of a schema, keyed by quoted table identifier ('"USERS"')."""
    tables: Dict[str, Table] = field(default_factory=dict)

    def get_table(self, name: str) -> Optional[Table]:
        if name in self.tables:
            return self.tables[name]
        return self.tables.get(f'"{name}"')

    def __len__(self):
        return len(self.tables)

    def __iter__(self):
        return iter(self.tables.values())

    def to_dict(self):
        return {
            "tables": {key: t.to_dict() for key, t in self.tables.items()}
        }
