"""OpenAIRefinementClient — chat-completion clean-up of a raw transcript."""
import logging
from typing import Optional

import httpx
from openai import (
    APIConnectionError,
    APIResponseValidationError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
)

from src.constants import (
    DEFAULT_REFINEMENT_PROMPT,
    REFINEMENT_BASE_URL,
    REFINEMENT_MAX_TOKENS,
    REFINEMENT_MODEL,
    REFINEMENT_TEMPERATURE,
    REFINEMENT_TIMEOUT,
)
from src.errors import (
    ApiError,
    InvalidResponse,
    NoData,
    ParsingFailed,
    PipelineError,
    ServerError,
    TransportFailure,
)
from src.refinement.client import RefinementClient
from src.validation import check_endpoint

logger = logging.getLogger(__name__)


def status_error(exc: APIStatusError) -> PipelineError:
    body = exc.response.text
    match body.strip():
        case "":
            return ServerError(exc.status_code)
        case _:
            return ApiError(body)


def extract_content(response: object) -> str:
    # Non-JSON success bodies come back from the SDK as plain strings.
    match response:
        case str() as raw if not raw.strip():
            raise NoData()
        case str():
            raise ParsingFailed()
        case _:
            pass
    match getattr(response, "choices", None):
        case [first, *_]:
            content = getattr(getattr(first, "message", None), "content", None)
        case _:
            content = None
    match content:
        case str() as text:
            return text
        case _:
            logger.error("Refinement response has no message content")
            raise ParsingFailed()


class OpenAIRefinementClient(RefinementClient):

    def __init__(
        self,
        api_key: str,
        base_url: str = REFINEMENT_BASE_URL,
        model: str = REFINEMENT_MODEL,
        temperature: float = REFINEMENT_TEMPERATURE,
        max_tokens: int = REFINEMENT_MAX_TOKENS,
        timeout: float = REFINEMENT_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._http_client = http_client

    async def refine(self, text: str, instruction: str = DEFAULT_REFINEMENT_PROMPT) -> str:
        check_endpoint(self._base_url)
        client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=0,
            http_client=self._http_client,
        )
        system = instruction.strip() or DEFAULT_REFINEMENT_PROMPT
        logger.info("Refining transcript (%d chars) with %s…", len(text), self._model)
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": text},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        except APITimeoutError as exc:
            raise TransportFailure(f"The request timed out ({exc})", timed_out=True) from exc
        except APIConnectionError as exc:
            raise TransportFailure(str(exc)) from exc
        except APIStatusError as exc:
            logger.error("Refinement API error (HTTP %s)", exc.status_code)
            raise status_error(exc) from exc
        except APIResponseValidationError as exc:
            raise InvalidResponse() from exc
        except ValueError as exc:
            raise ParsingFailed() from exc
        return extract_content(response)
