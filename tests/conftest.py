import os
import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock

os.environ["GROK_API_KEY"] = "xai-test-key"
os.environ["GROK_MODEL"] = "grok-4-1-fast"
os.environ["GROK_BASE_URL"] = "https://api.x.ai/v1/responses"
os.environ["DEFAULT_SEARCH_LIMIT"] = "50"

from src.schemas import ChatResponse

API_URL = "https://api.x.ai/v1/responses"


@pytest.fixture
def agent_response():
    """Factory for /v1/responses payloads with one message block."""
    def _make(content="Test response", citations=(), model="grok-4-1-fast", input_tokens=10, output_tokens=20):
        return {
            "id": "resp-123",
            "object": "response",
            "created_at": 1767225600,
            "completed_at": 1767225601,
            "model": model,
            "output": [
                {
                    "type": "message",
                    "id": "msg-1",
                    "role": "assistant",
                    "status": "completed",
                    "content": [
                        {
                            "type": "output_text",
                            "text": content,
                            "annotations": [
                                {"type": "url_citation", "url": url, "title": "Citation"}
                                for url in citations
                            ],
                            "logprobs": [],
                        }
                    ],
                }
            ],
            "usage": {
                "input_tokens": input_tokens,
                "output_tokens": output_tokens,
                "total_tokens": input_tokens + output_tokens,
            },
        }
    return _make


@pytest.fixture
def http_response():
    """Factory for real httpx responses, so raise_for_status behaves as in production."""
    def _make(status=200, payload=None, text=None):
        request = httpx.Request("POST", API_URL)
        if text is not None:
            return httpx.Response(status, text=text, request=request)
        return httpx.Response(status, json=payload if payload is not None else {}, request=request)
    return _make


@pytest.fixture
def mock_http(mocker):
    # Mock the AsyncClient used by the Grok API client
    mock_client_cls = mocker.patch("src.services.grok_api.httpx.AsyncClient")
    mock_instance = AsyncMock()
    mock_client_cls.return_value.__aenter__.return_value = mock_instance
    mock_client_cls.return_value.__aexit__.return_value = None
    mock_instance.client_cls = mock_client_cls
    return mock_instance


@pytest.fixture
def mock_sleep(mocker):
    return mocker.patch("src.utils.decorators.asyncio.sleep", new_callable=AsyncMock)


@pytest.fixture
def chat_response():
    def _make(content="Hello!", citations=None, model="grok-4-1-fast"):
        return ChatResponse.model_validate({
            "id": "resp-123",
            "object": "chat.completion",
            "created": 1767225600,
            "model": model,
            "choices": [
                {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
            ],
            "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
            "citations": citations,
        })
    return _make


@pytest.fixture
def mock_grok_client(chat_response):
    client = MagicMock()
    client.search_posts = AsyncMock(return_value=chat_response('{"summary": "EV chatter"}', ["https://x.com/a/status/1"]))
    client.analyze_topic = AsyncMock(return_value=chat_response('{"sentiment": "positive"}'))
    client.get_trends = AsyncMock(return_value=chat_response('{"trends": []}'))
    client.general_chat = AsyncMock(return_value=chat_response("Hello!"))
    return client
