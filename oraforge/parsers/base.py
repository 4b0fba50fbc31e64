from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping

from oraforge.models import Catalog

class BaseParser(ABC):
    @abstractmethod
    def parse(self, raw_rows_by_kind: Mapping[str, Iterable[Mapping[str, Any]]]) -> Catalog:
        """Parses data dictionary rows and returns a Catalog object."""
        pass
