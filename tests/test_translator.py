from types import SimpleNamespace

import httpx
import openai
import pytest

from app.core.query.errors import TranslationFailed, TranslationUnavailable
from app.core.query.schema_context import CLINIC_SCHEMA_CONTEXT
from app.core.query.translator import SYSTEM_PROMPT, Translator, build_messages

OPENAI_URL = "https://api.openai.com/v1/chat/completions"


def status_error(error_class, status_code: int):
    request = httpx.Request("POST", OPENAI_URL)
    response = httpx.Response(status_code, request=request)
    return error_class("upstream error", response=response, body=None)


def test_messages_carry_instruction_schema_and_question():
    messages = build_messages("How many doctors are there?")

    assert messages[0]["role"] == "system"
    assert messages[0]["content"].startswith(SYSTEM_PROMPT)
    assert messages[0]["content"].endswith("Schema:\n" + CLINIC_SCHEMA_CONTEXT)
    assert messages[1] == {"role": "user", "content": "How many doctors are there?"}


@pytest.mark.asyncio
async def test_returns_trimmed_sql(translator, llm_client):
    llm_client.completions.content = "  SELECT * FROM doctors LIMIT 1\n"

    sql = await translator.to_sql("List one doctor")

    assert sql == "SELECT * FROM doctors LIMIT 1"
    call = llm_client.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["messages"][-1]["content"] == "List one doctor"
    assert call["n"] == 1


@pytest.mark.asyncio
async def test_output_is_not_validated_here(translator, llm_client):
    """Translator passes output through; the executor is the one that validates"""
    llm_client.completions.content = "DROP TABLE doctors"
    assert await translator.to_sql("drop everything") == "DROP TABLE doctors"


@pytest.mark.asyncio
async def test_unavailable_without_api_key():
    translator = Translator(api_key=None)

    assert translator.available is False
    with pytest.raises(TranslationUnavailable, match="OPENAI_API_KEY is not set"):
        await translator.to_sql("How many patients?")


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   \n"])
async def test_blank_output_fails(translator, llm_client, content):
    llm_client.completions.content = content

    with pytest.raises(TranslationFailed, match="LLM did not return any SQL"):
        await translator.to_sql("How many patients?")


@pytest.mark.asyncio
async def test_no_choices_fails(translator, llm_client):
    llm_client.completions.choices = []

    with pytest.raises(TranslationFailed, match="LLM did not return any SQL"):
        await translator.to_sql("How many patients?")


@pytest.mark.asyncio
async def test_more_than_one_choice_fails(translator, llm_client):
    message = SimpleNamespace(content="SELECT 1")
    llm_client.completions.choices = [
        SimpleNamespace(message=message),
        SimpleNamespace(message=message),
    ]

    with pytest.raises(TranslationFailed):
        await translator.to_sql("How many patients?")


@pytest.mark.asyncio
async def test_authentication_error_mentions_key(translator, llm_client):
    llm_client.completions.error = status_error(openai.AuthenticationError, 401)

    with pytest.raises(TranslationFailed, match="OPENAI_API_KEY") as exc_info:
        await translator.to_sql("How many patients?")

    assert isinstance(exc_info.value.__cause__, openai.AuthenticationError)


@pytest.mark.asyncio
async def test_rate_limit_error_suggests_retry(translator, llm_client):
    llm_client.completions.error = status_error(openai.RateLimitError, 429)

    with pytest.raises(TranslationFailed, match="rate limit"):
        await translator.to_sql("How many patients?")

    # No retry on the caller's behalf
    assert len(llm_client.completions.calls) == 1


@pytest.mark.asyncio
async def test_other_upstream_error(translator, llm_client):
    llm_client.completions.error = openai.APIConnectionError(
        request=httpx.Request("POST", OPENAI_URL)
    )

    with pytest.raises(TranslationFailed, match="rephrase"):
        await translator.to_sql("How many patients?")
