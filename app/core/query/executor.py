import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from asyncpg import Range
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.query.errors import QueryFailed, QueryRejected, QueryTimeout
from app.core.query.limits import apply_limit_offset
from app.core.query.sql_guard import validate_sql


# -----------------------------------------------------------------------------
# EXECUTOR MODULE - Bounded read-only execution
# Purpose: validate -> paginate -> run on one session with a server-side
# statement timeout -> cap the number of returned rows
# -----------------------------------------------------------------------------

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for query_canceled (raised when statement_timeout fires)
QUERY_CANCELED_SQLSTATE = "57014"

# Driver types with no JSON form of their own (bytea, range columns)
ROW_VALUE_ENCODERS = {
    bytes: lambda value: value.hex(),
    memoryview: lambda value: value.hex(),
    Range: str,
}


@dataclass(frozen=True)
class ExecutionOptions:
    """Process-wide execution bounds, fixed when the executor is built."""

    timeout_ms: int = 30000
    max_rows: int = 1000

    def __post_init__(self):
        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be a positive integer")
        if self.max_rows <= 0:
            raise ValueError("max_rows must be a positive integer")


@dataclass
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    columns: Optional[List[str]] = None
    truncated: bool = False
    row_count: int = 0
    # Only set when the statement came from a natural-language question
    sql: Optional[str] = None


def _is_statement_timeout(error: DBAPIError) -> bool:
    orig = getattr(error, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == QUERY_CANCELED_SQLSTATE:
        return True
    return "statement timeout" in str(orig or error).lower()


def _jsonable_row(row) -> Dict[str, Any]:
    encoded = {}
    for column, value in row.items():
        try:
            encoded[column] = jsonable_encoder(value, custom_encoder=ROW_VALUE_ENCODERS)
        except (ValueError, TypeError):
            # Unknown driver type: fall back to its text form
            encoded[column] = str(value)
    return encoded


class QueryExecutor:
    """
    Runs a single caller-supplied SELECT under the configured bounds.

    Every call opens its own session from `session_factory` (after
    validation) and closes it on every exit path. The transaction is never
    committed.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        options: ExecutionOptions,
    ):
        self._session_factory = session_factory
        self.options = options

    async def run(
        self,
        sql: str,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> QueryResult:
        verdict = validate_sql(sql)
        if not verdict.allowed:
            logger.warning(f"Rejected query: {verdict.reason}")
            raise QueryRejected(verdict.reason or "Query not allowed")

        offset = max(0, offset or 0)
        statement = sql
        if isinstance(limit, int) and limit > 0:
            statement = apply_limit_offset(sql, limit, offset)

        logger.debug(f"Executing statement: {statement}")

        try:
            async with self._session_factory() as session:
                connection = await session.connection()
                await connection.exec_driver_sql("SET TRANSACTION READ ONLY")
                # SET LOCAL only lasts for this transaction, i.e. this call
                await connection.exec_driver_sql(
                    f"SET LOCAL statement_timeout = {int(self.options.timeout_ms)}"
                )
                # Driver-level execution: caller text is never parsed for bind params
                result = await connection.exec_driver_sql(statement)
                columns = list(result.keys()) or None
                # One extra row tells us whether the result was truncated
                fetched = result.mappings().fetchmany(self.options.max_rows + 1)
                rows = [_jsonable_row(row) for row in fetched]
                await session.rollback()
        except DBAPIError as error:
            if _is_statement_timeout(error):
                timeout_ms = self.options.timeout_ms
                logger.warning(f"Query timed out after {timeout_ms} ms")
                raise QueryTimeout(
                    f"Query timed out after {timeout_ms} ms. "
                    "Narrow the query (filters, LIMIT) or raise STATEMENT_TIMEOUT_MS.",
                    timeout_ms=timeout_ms,
                ) from error
            logger.error(f"Query failed: {error.orig or error}")
            raise QueryFailed(f"Query failed: {error.orig or error}") from error
        # OSError: the driver could not reach the database at all
        except (SQLAlchemyError, OSError) as error:
            logger.error(f"Query failed: {error}")
            raise QueryFailed(f"Query failed: {error}") from error

        truncated = len(rows) > self.options.max_rows
        if truncated:
            rows = rows[: self.options.max_rows]
            logger.info(f"Results truncated to {self.options.max_rows} rows")

        return QueryResult(
            rows=rows,
            columns=columns,
            truncated=truncated,
            row_count=len(rows),
        )
