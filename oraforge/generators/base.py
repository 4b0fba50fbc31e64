from abc import ABC, abstractmethod

from oraforge.models import Column, Table

class BaseGenerator(ABC):
    @abstractmethod
    def render_column_type(self, column: Column) -> str:
        """Returns the type declaration of a column, e.g. VARCHAR2(255)."""
        pass

    @abstractmethod
    def create_table_sql(self, table: Table) -> list[str]:
        """Returns the statements creating a table."""
        pass
