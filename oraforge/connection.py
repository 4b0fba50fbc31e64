"""
Query execution against a live database through SQLAlchemy.

The introspector only needs the Executor protocol below; SQLAlchemyExecutor is
the implementation used by the command line.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Protocol, Union

import sqlalchemy
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError

from oraforge.error_classifier import classify_error
from oraforge.logging_config import get_logger
from oraforge.parsers.utils import compact_sql

logger = get_logger("connection")

_ORA_CODE = re.compile(r'ORA-(\d+)')


class Executor(Protocol):
    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        ...

    def vendor_error_code(self, exc: BaseException) -> Optional[str]:
        ...


class SQLAlchemyExecutor:
    """
    Runs dictionary queries on a SQLAlchemy engine.

    Driver errors are converted with classify_error, so callers see
    TableNotFoundError & co. instead of driver specific exceptions.
    """

    def __init__(self, engine: Union[Engine, str]):
        if isinstance(engine, str):
            engine = sqlalchemy.create_engine(engine)
        self.engine = engine

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        logger.debug(f"Executing {compact_sql(sql)}", extra={'operation': 'execute'})
        try:
            with self.engine.connect() as conn:
                result = conn.execute(text(sql), dict(params or {}))
                return [dict(row) for row in result.mappings()]
        except DBAPIError as e:
            code = self.vendor_error_code(e)
            raise classify_error(code, str(e.orig if e.orig is not None else e), e) from e

    def vendor_error_code(self, exc: BaseException) -> Optional[str]:
        """
        Extracts the Oracle error code of a driver exception.

        python-oracledb puts an error object with a numeric `code` into args[0];
        other drivers are matched on an ORA-nnnnn prefix in the message.
        """
        orig = getattr(exc, 'orig', None) or exc
        for arg in getattr(orig, 'args', ()):
            code = getattr(arg, 'code', None)
            if code is not None:
                return str(code)
        match = _ORA_CODE.search(str(orig))
        if match:
            return match.group(1)
        return None

    def server_version(self) -> str:
        """Server version as reported by the dialect after connecting, e.g. '19.0.0.0.0'."""
        with self.engine.connect():
            info = self.engine.dialect.server_version_info
        if not info:
            return ""
        return ".".join(str(part) for part in info)
