import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..schemas import ChatResponse
from ..utils.constants import (
    DEFAULT_CHAT_TEMPERATURE,
    MAX_SEARCH_LIMIT,
    AnalysisType,
    TimeWindow,
)
from .errors import GrokApiError
from .grok_api import GrokApiClient

logger = logging.getLogger("grok.tools")


@dataclass
class ToolResult:
    """JSON-serializable tool output; is_error flags failures for the front end."""
    payload: dict[str, Any]
    is_error: bool = False


class ToolParams(BaseModel):
    # Tool arguments are camelCase on the wire
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class SearchPostsParams(ToolParams):
    query: str = Field(description='The search query or topic to analyze (e.g., "artificial intelligence", "Tesla")')
    time_window: TimeWindow = Field(TimeWindow.FOUR_HOURS, description="Time window for analysis")
    limit: int | None = Field(None, ge=1, le=MAX_SEARCH_LIMIT, description="Maximum number of posts to analyze (1-50)")
    analysis_type: AnalysisType = Field(AnalysisType.BOTH, description="Type of analysis to perform")
    allowed_handles: list[str] | None = Field(None, description="Only search posts from these X handles")
    excluded_handles: list[str] | None = Field(None, description="Exclude posts from these X handles")


class AnalyzeTopicParams(ToolParams):
    topic: str = Field(description="The topic to analyze")
    aspects: list[str] = Field(
        description='Aspects to analyze (e.g., ["sentiment", "volume trends", "key influencers", "emerging themes"])'
    )
    time_window: str = Field(TimeWindow.FOUR_HOURS.value, description="Time window for analysis")
    limit: int | None = Field(None, ge=1, le=MAX_SEARCH_LIMIT, description="Maximum number of posts to analyze (1-50)")


class GetTrendsParams(ToolParams):
    category: str | None = Field(
        None, description='Optional category to filter trends (e.g., "technology", "politics", "sports")'
    )
    limit: int | None = Field(
        None, ge=1, le=MAX_SEARCH_LIMIT, description="Maximum number of posts to analyze for trends (1-50)"
    )


class ChatParams(ToolParams):
    prompt: str = Field(description="Your message or question to Grok")
    enable_search: bool = Field(False, description="Ground the response in current X posts")
    temperature: float = Field(
        DEFAULT_CHAT_TEMPERATURE, ge=0.0, le=1.0, description="Response creativity (0.0-1.0)"
    )


def response_payload(response: ChatResponse, content_key: str, **metadata: Any) -> dict[str, Any]:
    """Shapes a ChatResponse into the result returned by tools and the CLI."""
    return {
        content_key: response.choices[0].message.content,
        "citations": response.citations or [],
        "metadata": {
            "model": response.model,
            "usage": response.usage.model_dump() if response.usage else None,
            **metadata,
        },
    }


class ToolRegistry:
    """
    Registry for the tools exposed to assistants.
    Each tool has a pydantic parameter model that doubles as its JSON input schema.
    """
    def __init__(self):
        self._tools: dict[str, dict] = {}

    def register(
        self,
        name: str,
        description: str,
        params: type[ToolParams],
        func: Callable[[Any], Awaitable[dict[str, Any]]],
    ):
        """
        Register a new tool.

        Args:
            name: The name of the tool (e.g. "grok_search_posts")
            description: Description for the assistant
            params: Model validating the tool arguments
            func: Async function receiving the validated params
        """
        self._tools[name] = {
            "definition": {
                "name": name,
                "description": description,
                "inputSchema": params.model_json_schema(by_alias=True),
            },
            "params": params,
            "func": func,
        }
        logger.info(f"Registered tool: {name}")

    def get_definitions(self) -> list[dict]:
        return [tool["definition"] for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict) -> ToolResult:
        if name not in self._tools:
            logger.error(f"Unknown tool: {name}")
            return ToolResult({"error": f"Unknown tool: {name}"}, is_error=True)

        tool = self._tools[name]
        try:
            params = tool["params"].model_validate(arguments)
        except ValidationError as e:
            logger.error(f"Validation error for {name}: {e}")
            return ToolResult(
                {"error": "Invalid parameters", "details": e.errors(include_url=False, include_context=False)},
                is_error=True,
            )

        logger.info(f"Tool called: {name}")
        try:
            return ToolResult(await tool["func"](params))
        except GrokApiError as e:
            logger.error(f"Grok API error in {name}: {e.message} (status: {e.status})")
            return ToolResult(e.to_dict(), is_error=True)


def build_tool_registry(client: GrokApiClient) -> ToolRegistry:
    """Registers the four Grok tools against one client."""
    registry = ToolRegistry()

    async def search_posts(params: SearchPostsParams) -> dict[str, Any]:
        response = await client.search_posts(
            params.query,
            time_window=params.time_window,
            limit=params.limit,
            analysis_type=params.analysis_type,
            allowed_handles=params.allowed_handles,
            excluded_handles=params.excluded_handles,
        )
        return response_payload(response, "analysis")

    async def analyze_topic(params: AnalyzeTopicParams) -> dict[str, Any]:
        response = await client.analyze_topic(
            params.topic,
            params.aspects,
            time_window=params.time_window,
            limit=params.limit,
        )
        return response_payload(response, "analysis")

    async def get_trends(params: GetTrendsParams) -> dict[str, Any]:
        response = await client.get_trends(category=params.category, limit=params.limit)
        return response_payload(response, "trends")

    async def chat(params: ChatParams) -> dict[str, Any]:
        response = await client.general_chat(
            params.prompt,
            enable_search=params.enable_search,
            temperature=params.temperature,
        )
        return response_payload(response, "response", searchEnabled=params.enable_search)

    registry.register(
        name="grok_search_posts",
        description=(
            "Search and analyze X/Twitter posts about any topic. "
            "Returns structured analysis with themes, sentiment, and citations."
        ),
        params=SearchPostsParams,
        func=search_posts,
    )
    registry.register(
        name="grok_analyze_topic",
        description=(
            "Perform deep analysis of a topic with customizable aspects "
            "(e.g., sentiment, volume, key influencers, emerging trends)."
        ),
        params=AnalyzeTopicParams,
        func=analyze_topic,
    )
    registry.register(
        name="grok_get_trends",
        description=(
            "Identify trending topics and discussions on X/Twitter. "
            "Returns current trends with volume metrics and sentiment."
        ),
        params=GetTrendsParams,
        func=get_trends,
    )
    registry.register(
        name="grok_chat",
        description=(
            "General chat with Grok AI. Optionally enable X/Twitter search "
            "to ground responses in current discussions."
        ),
        params=ChatParams,
        func=chat,
    )
    return registry
