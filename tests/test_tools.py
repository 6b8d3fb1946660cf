import pytest
from src.services.errors import GrokApiError
from src.services.tools import ToolRegistry, ToolParams, build_tool_registry, response_payload

@pytest.fixture
def registry(mock_grok_client):
    return build_tool_registry(mock_grok_client)

def test_registers_four_tools(registry):
    names = [definition["name"] for definition in registry.get_definitions()]
    assert names == ["grok_search_posts", "grok_analyze_topic", "grok_get_trends", "grok_chat"]

def test_input_schemas_use_camel_case(registry):
    schemas = {d["name"]: d["inputSchema"] for d in registry.get_definitions()}

    search = schemas["grok_search_posts"]
    assert search["type"] == "object"
    assert search["required"] == ["query"]
    assert {"query", "timeWindow", "limit", "analysisType", "allowedHandles", "excludedHandles"} <= set(search["properties"])

    assert set(schemas["grok_analyze_topic"]["required"]) == {"topic", "aspects"}
    assert "required" not in schemas["grok_get_trends"]
    assert "enableSearch" in schemas["grok_chat"]["properties"]

@pytest.mark.asyncio
async def test_search_posts_tool(registry, mock_grok_client):
    result = await registry.execute("grok_search_posts", {"query": "electric vehicles", "timeWindow": "24hr", "analysisType": "sentiment"})

    assert result.is_error is False
    assert result.payload == {
        "analysis": '{"summary": "EV chatter"}',
        "citations": ["https://x.com/a/status/1"],
        "metadata": {
            "model": "grok-4-1-fast",
            "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
        },
    }
    kwargs = mock_grok_client.search_posts.call_args.kwargs
    assert mock_grok_client.search_posts.call_args.args == ("electric vehicles",)
    assert kwargs["time_window"] == "24hr"
    assert kwargs["analysis_type"] == "sentiment"
    assert kwargs["limit"] is None

@pytest.mark.asyncio
async def test_analyze_topic_tool(registry, mock_grok_client):
    result = await registry.execute("grok_analyze_topic", {"topic": "crypto", "aspects": ["sentiment", "volume"], "limit": 10})

    assert result.payload["analysis"] == '{"sentiment": "positive"}'
    assert result.payload["citations"] == []
    mock_grok_client.analyze_topic.assert_awaited_once_with("crypto", ["sentiment", "volume"], time_window="4hr", limit=10)

@pytest.mark.asyncio
async def test_get_trends_tool(registry, mock_grok_client):
    result = await registry.execute("grok_get_trends", {})

    assert result.payload["trends"] == '{"trends": []}'
    mock_grok_client.get_trends.assert_awaited_once_with(category=None, limit=None)

@pytest.mark.asyncio
async def test_chat_tool_reports_search_flag(registry, mock_grok_client):
    result = await registry.execute("grok_chat", {"prompt": "Hi", "enableSearch": True})

    assert result.payload["response"] == "Hello!"
    assert result.payload["metadata"]["searchEnabled"] is True
    mock_grok_client.general_chat.assert_awaited_once_with("Hi", enable_search=True, temperature=0.7)

@pytest.mark.asyncio
@pytest.mark.parametrize("name, arguments", [
    ("grok_search_posts", {"query": "x", "limit": 100}),
    ("grok_search_posts", {"query": "x", "timeWindow": "1yr"}),
    ("grok_analyze_topic", {"topic": "x"}),
    ("grok_chat", {"prompt": "x", "temperature": 1.5}),
    ("grok_chat", {}),
])
async def test_invalid_arguments_are_flagged(registry, name, arguments):
    result = await registry.execute(name, arguments)

    assert result.is_error is True
    assert result.payload["error"] == "Invalid parameters"
    assert result.payload["details"]

@pytest.mark.asyncio
async def test_unknown_tool(registry):
    result = await registry.execute("grok_unknown", {})

    assert result.is_error is True
    assert result.payload == {"error": "Unknown tool: grok_unknown"}

@pytest.mark.asyncio
async def test_api_error_is_flagged(registry, mock_grok_client):
    mock_grok_client.search_posts.side_effect = GrokApiError("Grok API request failed: rate limited", 429, {"error": {"message": "rate limited"}})

    result = await registry.execute("grok_search_posts", {"query": "x"})

    assert result.is_error is True
    assert result.payload == {
        "error": "Grok API request failed: rate limited",
        "status": 429,
        "details": {"error": {"message": "rate limited"}},
    }

@pytest.mark.asyncio
async def test_other_errors_propagate():
    registry = ToolRegistry()

    async def failing_tool(params):
        raise RuntimeError("Something went wrong")

    registry.register(name="fail", description="Fails", params=ToolParams, func=failing_tool)

    with pytest.raises(RuntimeError):
        await registry.execute("fail", {})

def test_response_payload_without_usage(chat_response):
    response = chat_response("text").model_copy(update={"usage": None})

    assert response_payload(response, "response", searchEnabled=False) == {
        "response": "text",
        "citations": [],
        "metadata": {"model": "grok-4-1-fast", "usage": None, "searchEnabled": False},
    }
