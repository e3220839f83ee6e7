"""TDD: RefinementClient backend tests written FIRST"""
import httpx
import openai
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from src.constants import DEFAULT_REFINEMENT_PROMPT
from src.errors import (
    ApiError,
    InvalidEndpoint,
    NoData,
    ParsingFailed,
    ServerError,
    TransportFailure,
)
from src.refinement.client import RefinementClient
from src.refinement.openai import OpenAIRefinementClient

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def make_response(content):
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def mock_openai(create: AsyncMock) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = create
    return client


def status_error(status: int, text: str) -> openai.APIStatusError:
    response = httpx.Response(status, text=text, request=REQUEST)
    return openai.APIStatusError(f"Error code: {status}", response=response, body=text or None)


def test_openai_refinement_client_implements_abc():
    assert issubclass(OpenAIRefinementClient, RefinementClient)


async def test_refine_sends_two_turn_chat_with_fixed_parameters():
    create = AsyncMock(return_value=make_response("refined text"))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)) as mock_cls:
        result = await OpenAIRefinementClient("test-key").refine("raw", "Tidy this up")

    assert result == "refined text"
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "gpt-4-turbo-preview"
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 4000
    assert kwargs["messages"] == [
        {"role": "system", "content": "Tidy this up"},
        {"role": "user", "content": "raw"},
    ]
    client_kwargs = mock_cls.call_args.kwargs
    assert client_kwargs["api_key"] == "test-key"
    assert client_kwargs["timeout"] == 300
    assert client_kwargs["max_retries"] == 0


async def test_refine_blank_instruction_uses_default():
    create = AsyncMock(return_value=make_response("ok"))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        await OpenAIRefinementClient("test-key").refine("raw", "   ")

    system = create.call_args.kwargs["messages"][0]
    assert system == {"role": "system", "content": DEFAULT_REFINEMENT_PROMPT}


async def test_refine_timeout_is_transport_failure_marked_timed_out():
    create = AsyncMock(side_effect=openai.APITimeoutError(request=REQUEST))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(TransportFailure) as info:
            await OpenAIRefinementClient("test-key").refine("raw", "p")

    assert info.value.timed_out


async def test_refine_connection_error_is_transport_failure():
    create = AsyncMock(side_effect=openai.APIConnectionError(message="Connection reset", request=REQUEST))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(TransportFailure) as info:
            await OpenAIRefinementClient("test-key").refine("raw", "p")

    assert info.value.message == "Connection reset"
    assert not info.value.timed_out


async def test_refine_error_status_with_body_is_api_error():
    create = AsyncMock(side_effect=status_error(500, "rate limited"))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(ApiError) as info:
            await OpenAIRefinementClient("test-key").refine("raw", "p")

    assert info.value.message == "rate limited"


async def test_refine_error_status_without_body_is_server_error():
    create = AsyncMock(side_effect=status_error(503, ""))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(ServerError) as info:
            await OpenAIRefinementClient("test-key").refine("raw", "p")

    assert info.value.status_code == 503


async def test_refine_without_choices_is_parsing_failure():
    response = MagicMock()
    response.choices = []
    create = AsyncMock(return_value=response)

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(ParsingFailed):
            await OpenAIRefinementClient("test-key").refine("raw", "p")


async def test_refine_null_content_is_parsing_failure():
    create = AsyncMock(return_value=make_response(None))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(ParsingFailed):
            await OpenAIRefinementClient("test-key").refine("raw", "p")


async def test_refine_plain_text_body_is_parsing_failure():
    create = AsyncMock(return_value="<html>gateway</html>")

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(ParsingFailed):
            await OpenAIRefinementClient("test-key").refine("raw", "p")


async def test_refine_empty_body_is_no_data():
    create = AsyncMock(return_value="")

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(NoData):
            await OpenAIRefinementClient("test-key").refine("raw", "p")


async def test_refine_undecodable_json_is_parsing_failure():
    create = AsyncMock(side_effect=ValueError("Expecting value: line 1 column 1"))

    with patch("src.refinement.openai.AsyncOpenAI", return_value=mock_openai(create)):
        with pytest.raises(ParsingFailed):
            await OpenAIRefinementClient("test-key").refine("raw", "p")


async def test_refine_invalid_base_url_makes_no_request():
    with patch("src.refinement.openai.AsyncOpenAI") as mock_cls:
        with pytest.raises(InvalidEndpoint):
            await OpenAIRefinementClient("test-key", base_url="ftp://nowhere").refine("raw", "p")

    mock_cls.assert_not_called()


async def test_refine_over_http_with_mock_transport():
    """The real SDK path: HTTP 200 chat completion parsed into the message content."""
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer test-key"
        return httpx.Response(
            200,
            json={
                "id": "chatcmpl-1",
                "object": "chat.completion",
                "created": 0,
                "model": "gpt-4-turbo-preview",
                "choices": [
                    {
                        "index": 0,
                        "finish_reason": "stop",
                        "message": {"role": "assistant", "content": "refined text"},
                    }
                ],
            },
        )

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = OpenAIRefinementClient("test-key", http_client=http)

    assert await client.refine("raw", "p") == "refined text"
