from functools import lru_cache

from app.core.config import settings
from app.core.database import AsyncSessionLocal
from app.core.query.executor import ExecutionOptions, QueryExecutor
from app.core.query.translator import Translator


# One executor/translator per process, built from settings read at startup
@lru_cache
def get_query_executor() -> QueryExecutor:
    options = ExecutionOptions(
        timeout_ms=settings.STATEMENT_TIMEOUT_MS,
        max_rows=settings.MAX_ROWS,
    )
    return QueryExecutor(AsyncSessionLocal, options)


@lru_cache
def get_translator() -> Translator:
    return Translator(api_key=settings.OPENAI_API_KEY, model=settings.OPENAI_MODEL)
