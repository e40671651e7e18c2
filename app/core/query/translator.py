import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from app.core.query.errors import TranslationFailed, TranslationUnavailable
from app.core.query.schema_context import CLINIC_SCHEMA_CONTEXT

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a SQL expert. Given a natural language question about a US clinic "
    "database, return exactly one valid PostgreSQL SELECT query, nothing else. "
    "No markdown, no explanation. Use only the tables and columns described in the schema."
)


def build_messages(question: str, schema_context: str = CLINIC_SCHEMA_CONTEXT) -> List[Dict[str, str]]:
    """System instruction + schema description, then the question verbatim."""
    return [
        {"role": "system", "content": f"{SYSTEM_PROMPT}\n\nSchema:\n{schema_context}"},
        {"role": "user", "content": question},
    ]


class Translator:
    """
    Turns a natural-language question into a SQL string with one chat completion.

    The returned SQL is untrusted: callers must still send it through the
    executor, which validates it like any other input. No retries happen here.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        client: Optional[Any] = None,
        schema_context: str = CLINIC_SCHEMA_CONTEXT,
    ):
        self.model = model
        self.schema_context = schema_context
        self._client = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key, max_retries=0)

    @property
    def available(self) -> bool:
        return self._client is not None

    async def to_sql(self, question: str) -> str:
        if self._client is None:
            raise TranslationUnavailable(
                "OPENAI_API_KEY is not set. Set it in the environment or .env "
                "to use natural language queries."
            )

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=build_messages(question, self.schema_context),
                temperature=0.1,
                n=1,
            )
        except openai.AuthenticationError as error:
            logger.error("Translation failed: OpenAI authentication error")
            raise TranslationFailed(
                "Language model authentication failed. Check OPENAI_API_KEY."
            ) from error
        except openai.RateLimitError as error:
            logger.warning("Translation failed: OpenAI rate limit")
            raise TranslationFailed(
                "Language model rate limit reached. Please wait a moment and try again."
            ) from error
        except openai.OpenAIError as error:
            logger.error(f"Translation failed: OpenAI API error: {error}")
            raise TranslationFailed(
                "Something went wrong generating the query. Please try again or rephrase the question."
            ) from error

        choices = getattr(response, "choices", None) or []
        if len(choices) != 1:
            logger.warning(f"Translation failed: expected 1 choice, got {len(choices)}")
            raise TranslationFailed("LLM did not return any SQL")

        message = getattr(choices[0], "message", None)
        content = (getattr(message, "content", None) or "").strip()
        if not content:
            logger.warning("Translation failed: empty completion")
            raise TranslationFailed("LLM did not return any SQL")

        logger.info(f"Generated SQL: {content}")
        return content
