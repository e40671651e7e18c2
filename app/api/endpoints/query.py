from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from app.core import schemas
from app.core.dependencies import get_query_executor, get_translator
from app.core.query.errors import (
    BadRequest,
    QueryFailed,
    QueryTimeout,
    TranslationFailed,
    TranslationUnavailable,
)
from app.core.query.executor import QueryExecutor
from app.core.query.gateway import run_command
from app.core.query.translator import Translator

router = APIRouter(prefix="/query", tags=["Query"])

executor_dep = Annotated[QueryExecutor, Depends(get_query_executor)]
translator_dep = Annotated[Translator, Depends(get_translator)]


@router.post(
    "",
    response_model=schemas.QueryResponse,
    status_code=status.HTTP_200_OK,
)
async def run_query(
    body: schemas.QueryRequest, executor: executor_dep, translator: translator_dep
):
    """
    Run exactly one of raw `sql` or a natural-language `question`.
    Only a single read-only SELECT ever reaches the database.
    """
    try:
        command = body.to_command()
        result = await run_command(command, executor, translator)
    # Order matters: QueryTimeout is a QueryFailed
    except QueryTimeout as error:
        raise HTTPException(status.HTTP_408_REQUEST_TIMEOUT, error.message)
    except (BadRequest, QueryFailed) as error:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, error.message)
    except TranslationUnavailable as error:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, error.message)
    except TranslationFailed as error:
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, error.message)

    return schemas.QueryResponse.from_result(result)
