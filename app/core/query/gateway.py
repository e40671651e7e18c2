import logging
from dataclasses import dataclass, replace
from typing import Optional, Union

from app.core.query.errors import BadRequest
from app.core.query.executor import QueryExecutor, QueryResult
from app.core.query.translator import Translator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawSqlQuery:
    sql: str
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class NaturalLanguageQuery:
    question: str
    limit: Optional[int] = None
    offset: Optional[int] = None


QueryCommand = Union[RawSqlQuery, NaturalLanguageQuery]


def build_command(
    sql: Optional[str],
    question: Optional[str],
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> QueryCommand:
    """Exactly one of sql/question must be non-blank; blank counts as absent."""
    has_sql = sql is not None and sql.strip() != ""
    has_question = question is not None and question.strip() != ""

    if not has_sql and not has_question:
        raise BadRequest("Provide either 'sql' or 'question' in body")
    if has_sql and has_question:
        raise BadRequest("Provide only one of 'sql' or 'question'")

    if has_sql:
        return RawSqlQuery(sql=sql, limit=limit, offset=offset)
    return NaturalLanguageQuery(question=question, limit=limit, offset=offset)


async def run_command(
    command: QueryCommand, executor: QueryExecutor, translator: Translator
) -> QueryResult:
    if isinstance(command, RawSqlQuery):
        return await executor.run(command.sql, limit=command.limit, offset=command.offset)

    logger.info(f"Translating question: {command.question}")
    sql = await translator.to_sql(command.question)
    # Pagination applies to translated SQL exactly as to raw SQL
    result = await executor.run(sql, limit=command.limit, offset=command.offset)
    return replace(result, sql=sql)
