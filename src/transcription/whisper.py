"""WhisperTranscriptionClient — OpenAI Whisper speech-to-text over raw HTTP."""
import logging
from typing import Optional

import httpx

from src.constants import TRANSCRIPTION_ENDPOINT, TRANSCRIPTION_TIMEOUT, WHISPER_MODEL
from src.errors import ApiError, InvalidResponse, NoData, ParsingFailed, ServerError, TransportFailure
from src.transcription.client import TranscriptionClient
from src.transcription.multipart import encode_multipart
from src.validation import check_endpoint

logger = logging.getLogger(__name__)


def raise_for_status(response: httpx.Response) -> None:
    """Non-2xx → ApiError(body) when the body has text, else ServerError(status)."""
    match (response.is_success, response.text):
        case (True, _):
            pass
        case (False, body) if body.strip():
            logger.error("API error (HTTP %s): %s", response.status_code, body)
            raise ApiError(body)
        case (False, _):
            logger.error("Server error: HTTP %s", response.status_code)
            raise ServerError(response.status_code)


def extract_text(response: httpx.Response) -> str:
    match response.content:
        case b"":
            raise NoData()
        case _:
            pass
    try:
        payload = response.json()
    except ValueError as exc:
        raise ParsingFailed() from exc
    match payload:
        case {"text": str() as text}:
            return text
        case _:
            logger.error("Transcription response has no text field: %s", response.text[:200])
            raise ParsingFailed()


class WhisperTranscriptionClient(TranscriptionClient):

    def __init__(
        self,
        api_key: str,
        endpoint: str = TRANSCRIPTION_ENDPOINT,
        model: str = WHISPER_MODEL,
        prompt: str = "",
        timeout: float = TRANSCRIPTION_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._endpoint = endpoint
        self._model = model
        self._prompt = prompt
        self._timeout = timeout
        self._http_client = http_client

    async def transcribe(self, audio: bytes, file_name: str) -> str:
        check_endpoint(self._endpoint)
        body = encode_multipart(self._model, self._prompt, audio, file_name)
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": body.content_type,
        }
        logger.info("Transcribing %s (%d bytes)…", file_name, len(audio))
        try:
            response = await self._post(body.data, headers)
        except httpx.TimeoutException as exc:
            raise TransportFailure(f"The request timed out ({exc})", timed_out=True) from exc
        except httpx.DecodingError as exc:
            raise InvalidResponse() from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(str(exc) or type(exc).__name__) from exc

        logger.info("Transcription HTTP status: %s", response.status_code)
        raise_for_status(response)
        return extract_text(response)

    async def _post(self, data: bytes, headers: dict[str, str]) -> httpx.Response:
        match self._http_client:
            case None:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    return await client.post(self._endpoint, content=data, headers=headers)
            case client:
                return await client.post(
                    self._endpoint, content=data, headers=headers, timeout=self._timeout
                )
